"""Content file discovery and JSON loading."""

from __future__ import annotations

import json
from pathlib import Path  # noqa: TC003 - used at runtime
from typing import Any

MANIFEST_FILE = "manifest.json"
ITEMS_FILE = "items.json"
STATS_FILE = "stats.json"
DEFAULT_SCENES_DIR = "scenes"


class ContentNotFoundError(Exception):
    """Raised when a content file doesn't exist."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Content file not found: {path}")


class ContentParseError(Exception):
    """Raised when a content file can't be read or parsed as JSON."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to parse {path}: {reason}")


def read_json(path: Path) -> Any:
    """Read and parse one JSON file.

    Args:
        path: File to read.

    Returns:
        The parsed JSON value.

    Raises:
        ContentNotFoundError: If the file doesn't exist.
        ContentParseError: If the file can't be read or isn't valid JSON.
    """
    if not path.is_file():
        raise ContentNotFoundError(path)

    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ContentParseError(path, f"{e.msg} (line {e.lineno}, column {e.colno})") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ContentParseError(path, str(e)) from e


class ContentLoader:
    """Locate and read the documents of a content directory.

    Layout::

        <content>/manifest.json
        <content>/scenes/*.json
        <content>/items.json   (optional)
        <content>/stats.json   (optional)
    """

    def __init__(self, content_path: Path, scenes_dir: str = DEFAULT_SCENES_DIR) -> None:
        """Initialize loader with the content root.

        Args:
            content_path: Path to the content root directory.
            scenes_dir: Scene directory name, relative to the content root.
        """
        self.content_path = content_path
        self.scenes_path = content_path / scenes_dir

    @property
    def manifest_path(self) -> Path:
        return self.content_path / MANIFEST_FILE

    def read_manifest(self) -> Any:
        """Read ``manifest.json``.

        Raises:
            ContentNotFoundError: If the manifest doesn't exist.
            ContentParseError: If the manifest can't be parsed.
        """
        return read_json(self.manifest_path)

    def scene_files(self) -> list[Path]:
        """List scene documents in sorted filename order.

        Returns:
            Paths of ``*.json`` files in the scenes directory; empty if the
            directory doesn't exist.
        """
        if not self.scenes_path.is_dir():
            return []
        return sorted(p for p in self.scenes_path.glob("*.json") if p.is_file())

    def relative_name(self, path: Path) -> str:
        """Name a content file by its POSIX path relative to the content root."""
        try:
            return path.relative_to(self.content_path).as_posix()
        except ValueError:
            return str(path)

    def optional_path(self, filename: str) -> Path | None:
        """Return the path of an optional root-level file if it exists."""
        path = self.content_path / filename
        return path if path.is_file() else None
