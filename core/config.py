"""
Settings for Note Block Music.

Defaults live in dataclasses; an optional JSON settings file overrides them
category by category. Settings are read only, never written back.
"""
import json
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

from core.constants import DEFAULT_TPS, DEFAULT_VSCROLL


@dataclass(frozen=True)
class AudioConfig:
    sample_rate: int = 44100
    blocksize: int = 512
    sounds_dir: str = "sounds"
    gain: float = 0.8


@dataclass(frozen=True)
class EditorConfig:
    ticks_per_second: float = DEFAULT_TPS
    vscroll: float = DEFAULT_VSCROLL


@dataclass(frozen=True)
class AppConfig:
    audio: AudioConfig = field(default_factory=AudioConfig)
    editor: EditorConfig = field(default_factory=EditorConfig)


def _merge(section, values: Dict[str, Any]):
    """Override known keys of a config section, ignoring unknown ones."""
    known = {f.name for f in fields(section)}
    updates = {}
    for key, value in values.items():
        if key in known:
            updates[key] = type(getattr(section, key))(value)
    return replace(section, **updates)


def default_config_path() -> Path:
    return Path.home() / ".noteblockmusic" / "settings.json"


def load_config(path: Optional[Union[str, Path]] = None) -> AppConfig:
    """
    Load settings, falling back to defaults.

    Args:
        path: Settings file (defaults to ~/.noteblockmusic/settings.json)

    Returns:
        Defaults merged with whatever the file provides
    """
    config = AppConfig()
    config_path = Path(path) if path is not None else default_config_path()

    if not config_path.exists():
        return config

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            loaded = json.load(f)
        if not isinstance(loaded, dict):
            raise ValueError("settings file must contain an object")

        # Merge with defaults (in case settings are partial)
        for category in ("audio", "editor"):
            if isinstance(loaded.get(category), dict):
                config = replace(config, **{
                    category: _merge(getattr(config, category), loaded[category])
                })
        return config
    except (OSError, ValueError, TypeError) as e:
        print(f"[SETTINGS] Failed to load settings from {config_path}: {e}")
        return AppConfig()
