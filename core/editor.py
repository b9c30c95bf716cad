"""
Editing session for Note Block Music.

Editor is the single entry point for UI input: every discrete action
(clicks, key presses, layer bar edits, file menu) and the per-frame update
go through it. It owns the app state, the transport and the view geometry.
"""
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from core.commands import (
    AddLayerCommand, AddNoteCommand, Command, DeleteSelectionCommand,
    DuplicateSelectionCommand, NudgeSelectionCommand, RemoveLayerCommand,
    RemoveNoteCommand, RenameLayerCommand, SetLayerInstrumentCommand,
)
from core.config import AppConfig
from core.models import Project
from core.persistence import ProjectFile
from core.state import AppState
from core.viewport import Viewport
from audio.scheduler import Transport
from audio.trigger import AudioTrigger, NullTrigger

TITLE = "Note Block Music"


class Editor:
    """Editing session: project, selection, transport and view."""

    def __init__(self, audio: Optional[AudioTrigger] = None, config: Optional[AppConfig] = None):
        """
        Args:
            audio: Collaborator for previews and playback (silent if None)
            config: Settings (defaults if None)
        """
        self.config = config or AppConfig()
        self.audio = audio or NullTrigger()
        self.state = AppState()
        self.transport = Transport(self.audio, self.config.editor.ticks_per_second)
        self.viewport = Viewport(vscroll=self.config.editor.vscroll)

    # ---------- State access ----------
    @property
    def project(self) -> Project:
        return self.state.get_current_project()

    @property
    def active_layer(self) -> int:
        return self.state.get_active_layer_index()

    @property
    def selected(self) -> List[int]:
        return self.state.selection.indices

    @property
    def dirty(self) -> bool:
        return self.state.is_dirty()

    @property
    def title(self) -> str:
        """Window title, with a trailing * while there are unsaved changes."""
        return f"{TITLE}*" if self.dirty else TITLE

    def execute(self, command: Command) -> bool:
        return command.execute(self.state)

    # ---------- Transport ----------
    def toggle_play(self):
        self.transport.toggle_play()

    def stop(self):
        self.transport.stop()

    def seek(self, position: float) -> List[Tuple[int, int]]:
        return self.transport.seek(position, self.project)

    def set_tick_rate(self, ticks_per_second: float):
        self.transport.ticks_per_second = ticks_per_second

    def update(self, dt: float) -> List[Tuple[int, int]]:
        """Per-frame entry point: advance playback and fire notes."""
        return self.transport.advance(dt, self.project)

    # ---------- Point edits ----------
    def add_note(self, time: int, pitch: int) -> bool:
        return self.execute(AddNoteCommand(time, pitch, self.audio))

    def remove_note(self, time: int, pitch: int) -> bool:
        return self.execute(RemoveNoteCommand(time, pitch))

    def preview_pitch(self, pitch: int):
        """Audition a pitch on the active layer's instrument (piano keys)."""
        self.audio.trigger(self.state.get_active_layer().instrument, pitch)

    # ---------- Selection ----------
    def begin_selection(self, time: float, pitch: float):
        self.state.selection.begin_drag(time, pitch)

    def end_selection(self, time: float, pitch: float) -> List[int]:
        return self.state.selection.end_drag(time, pitch, self.state.get_active_layer().notes)

    def select_rectangle(self, start: Tuple[float, float], end: Tuple[float, float]) -> List[int]:
        return self.state.selection.select_rectangle(start, end, self.state.get_active_layer().notes)

    def select_all(self):
        self.state.selection.select_all(len(self.state.get_active_layer().notes))

    def clear_selection(self):
        self.state.selection.clear()

    def duplicate_selection(self) -> bool:
        return self.execute(DuplicateSelectionCommand())

    def delete_selection(self) -> bool:
        return self.execute(DeleteSelectionCommand())

    def nudge_selection(self, direction: str) -> bool:
        return self.execute(NudgeSelectionCommand(direction))

    # ---------- Layers ----------
    def add_layer(self) -> bool:
        return self.execute(AddLayerCommand())

    def remove_layer(self, index: int) -> bool:
        return self.execute(RemoveLayerCommand(index))

    def rename_layer(self, index: int, name: str) -> bool:
        return self.execute(RenameLayerCommand(index, name))

    def set_layer_instrument(self, index: int, instrument: int) -> bool:
        return self.execute(SetLayerInstrumentCommand(index, instrument, self.audio))

    def switch_layer(self, index: int):
        self.state.set_active_layer_index(index)

    # ---------- Screen-space input ----------
    def click_add(self, x: float, y: float) -> bool:
        """Left click on the grid: place a note."""
        cell = self.viewport.cell_at(x, y)
        if cell is None:
            return False
        return self.add_note(*cell)

    def click_remove(self, x: float, y: float) -> bool:
        """Right click on the grid: remove a note."""
        cell = self.viewport.cell_at(x, y)
        if cell is None:
            return False
        return self.remove_note(*cell)

    def scrub(self, x: float) -> List[Tuple[int, int]]:
        """Middle click/drag on the grid: move the playhead."""
        return self.seek(self.viewport.position_at(x))

    def drag_start(self, x: float, y: float):
        self.begin_selection(*self.viewport.to_grid(x, y))

    def drag_end(self, x: float, y: float) -> List[int]:
        return self.end_selection(*self.viewport.to_grid(x, y))

    # ---------- Project ----------
    def _replace_project(self, project: Project, path: Optional[Path] = None):
        self.stop()
        self.state.reset(project, path)
        self.viewport.reset()

    def new_project(self, discard: bool = False) -> bool:
        """
        Start a fresh project.

        Returns:
            False (and changes nothing) if there are unsaved changes and
            discard is not set
        """
        if self.dirty and not discard:
            return False
        self._replace_project(Project.new())
        return True

    def load_project(self, document: Dict[str, Any]):
        """
        Replace the project with a document.

        Raises:
            ValueError: If the document is invalid (current project is kept)
        """
        project = Project.from_dict(document)
        self._replace_project(project)

    def save_project(self) -> Dict[str, Any]:
        """Serialize the project document and mark it saved."""
        document = self.project.to_dict()
        self.state.mark_clean()
        return document

    def open(self, path: Union[str, Path]):
        """
        Open a project file.

        Raises:
            IOError, ValueError: If loading fails (current project is kept)
        """
        project = ProjectFile.load(path)
        self._replace_project(project, Path(path))

    def save(self, path: Optional[Union[str, Path]] = None) -> Path:
        """
        Save to path, or to the path the project came from.

        A first save of an untitled project never overwrites an existing file.

        Raises:
            ValueError: If no path is known
            IOError: If writing fails (dirty flag stays set)
        """
        current = self.state.get_project_path()
        if path is None and current is None:
            raise ValueError("No project path to save to")

        target = Path(path) if path is not None else current
        written = ProjectFile.save(self.project, target, create_new=current is None)
        self.state.set_project_path(written)
        self.state.mark_clean()
        return written
