"""
Editor state for Note Block Music.

Holds the current project plus everything about the editing session that
is not persisted: project path, active layer, selection and dirty flag.
"""
from pathlib import Path
from typing import Optional

from core.models import Layer, Project
from core.selection import Selection


class AppState:
    """
    Editing session state.

    Manages:
    - Current project and where it was last saved/opened
    - Active layer index (always valid for the current project)
    - Note selection within the active layer
    - Unsaved changes flag
    """

    def __init__(self, project: Optional[Project] = None):
        """Initialize state with a fresh project unless one is given."""
        self._current_project: Project = project if project is not None else Project.new()
        self._project_path: Optional[Path] = None
        self._active_layer: int = 0
        self._is_dirty: bool = False
        self.selection = Selection()

    def get_current_project(self) -> Project:
        """Get currently loaded project."""
        return self._current_project

    def set_current_project(self, project: Project):
        """
        Set current project.

        The active layer is re-clamped so it stays valid. Dirty flag is
        left alone; callers mark dirty or clean explicitly.
        """
        self._current_project = project
        last = len(project.layers) - 1
        if self._active_layer > last:
            self._active_layer = last

    def get_project_path(self) -> Optional[Path]:
        """Get the path the project was opened from or saved to."""
        return self._project_path

    def set_project_path(self, path: Optional[Path]):
        self._project_path = Path(path) if path is not None else None

    def get_active_layer_index(self) -> int:
        """Get index of the layer edits apply to."""
        return self._active_layer

    def set_active_layer_index(self, index: int):
        """
        Switch the active layer and clear the selection.

        Raises:
            IndexError: If the index is not a layer of the current project
        """
        if not 0 <= index < len(self._current_project.layers):
            raise IndexError(f"Layer index {index} out of range")
        self._active_layer = index
        self.selection.clear()

    def get_active_layer(self) -> Layer:
        """Get the layer edits apply to."""
        return self._current_project.layers[self._active_layer]

    def set_active_layer(self, layer: Layer):
        """Replace the active layer in the current project."""
        self._current_project = self._current_project.with_layer(self._active_layer, layer)

    def reset(self, project: Project, path: Optional[Path] = None):
        """Replace the whole session with a new or loaded project."""
        self._current_project = project
        self._project_path = Path(path) if path is not None else None
        self._active_layer = 0
        self._is_dirty = False
        self.selection = Selection()

    def is_dirty(self) -> bool:
        """Check if project has unsaved changes."""
        return self._is_dirty

    def mark_dirty(self):
        """Mark project as having unsaved changes."""
        self._is_dirty = True

    def mark_clean(self):
        """Mark project as saved."""
        self._is_dirty = False
