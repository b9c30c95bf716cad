"""
Project file I/O.

File formats:
- .nbm: JSON document (plain, human-readable)
- .nbmp: the same document packed with MessagePack (compact)

Both carry {"layers": [{"name", "instrument", "notes": [{"time", "note"}]}]}.
"""
import json
from pathlib import Path
from typing import Any, Dict, Union

import msgpack

from core.constants import PACKED_PROJECT_EXTENSION, PROJECT_EXTENSION
from core.models import Project


class ProjectFile:
    """Handles .nbm / .nbmp project file I/O."""

    @staticmethod
    def normalize_path(path: Union[str, Path]) -> Path:
        """Coerce to Path and force a known project extension."""
        if isinstance(path, str):
            path = Path(path)
        if path.suffix not in (PROJECT_EXTENSION, PACKED_PROJECT_EXTENSION):
            path = path.with_suffix(PROJECT_EXTENSION)
        return path

    @staticmethod
    def dumps(project: Project, packed: bool = False) -> bytes:
        """Serialize a project document to bytes."""
        document = project.to_dict()
        if packed:
            return msgpack.packb(document, use_bin_type=True)
        return json.dumps(document).encode("utf-8")

    @staticmethod
    def loads(data: bytes, packed: bool = False) -> Project:
        """
        Deserialize a project document.

        Raises:
            ValueError: If the data is not a valid project document
        """
        try:
            if packed:
                document: Dict[str, Any] = msgpack.unpackb(data, raw=False)
            else:
                document = json.loads(data.decode("utf-8"))
        except (ValueError, TypeError, msgpack.exceptions.UnpackException) as e:
            raise ValueError(f"Invalid project file format: {e}") from e

        if not isinstance(document, dict):
            raise ValueError("Invalid project file format: document is not an object")
        return Project.from_dict(document)

    @staticmethod
    def save(project: Project, path: Union[str, Path], create_new: bool = False) -> Path:
        """
        Save project to a file.

        Args:
            project: Project to save
            path: Destination file path
            create_new: Refuse to overwrite an existing file

        Returns:
            Path actually written (extension normalized)

        Raises:
            IOError: If save fails
        """
        path = ProjectFile.normalize_path(path)
        try:
            data = ProjectFile.dumps(project, packed=path.suffix == PACKED_PROJECT_EXTENSION)

            path.parent.mkdir(parents=True, exist_ok=True)

            with open(path, "xb" if create_new else "wb") as f:
                f.write(data)

        except Exception as e:
            raise IOError(f"Failed to save project to {path}: {e}") from e

        return path

    @staticmethod
    def load(path: Union[str, Path]) -> Project:
        """
        Load project from a file.

        Raises:
            IOError: If the file cannot be read
            ValueError: If the file is not a valid project
        """
        if isinstance(path, str):
            path = Path(path)

        if not path.exists():
            raise IOError(f"Project file not found: {path}")

        try:
            with open(path, "rb") as f:
                data = f.read()
        except Exception as e:
            raise IOError(f"Failed to load project from {path}: {e}") from e

        try:
            return ProjectFile.loads(data, packed=path.suffix == PACKED_PROJECT_EXTENSION)
        except ValueError as e:
            raise ValueError(f"Failed to load project from {path}: {e}") from e
