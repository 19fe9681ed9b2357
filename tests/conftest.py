"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from tests.fixtures.content_fixtures import manifest_for, scene, write_json

if TYPE_CHECKING:
    from pathlib import Path

    from tests.fixtures.content_fixtures import ContentFactory

_UNSET: Any = object()


@pytest.fixture(autouse=True)
def clean_scenelint_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment out of configuration tests."""
    for name in ("SCENELINT_CONTENT_PATH", "SCENELINT_FAIL_ON_WARNINGS", "SCENELINT_STRICT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_content(tmp_path: Path) -> ContentFactory:
    """Return a factory that writes a content tree under ``tmp_path/content``.

    ``scenes`` maps file stems to scene documents; a ``str`` value is written
    verbatim, which allows malformed JSON. ``files`` maps paths relative to
    the content root to raw text. Omitting ``manifest`` writes no manifest.
    """

    def _make(
        manifest: Any = _UNSET,
        scenes: dict[str, Any] | None = None,
        *,
        items: Any = _UNSET,
        stats: Any = _UNSET,
        files: dict[str, str] | None = None,
    ) -> Path:
        root = tmp_path / "content"
        root.mkdir(parents=True, exist_ok=True)
        if manifest is not _UNSET:
            write_json(root / "manifest.json", manifest)
        for stem, data in (scenes or {}).items():
            path = root / "scenes" / f"{stem}.json"
            if isinstance(data, str):
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(data, encoding="utf-8")
            else:
                write_json(path, data)
        if items is not _UNSET:
            write_json(root / "items.json", items)
        if stats is not _UNSET:
            write_json(root / "stats.json", stats)
        for relative, text in (files or {}).items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        return root

    return _make


@pytest.fixture
def linear_content(make_content: ContentFactory) -> Path:
    """sc_1 -> sc_2, both declared; sc_2 is the only ending."""
    return make_content(
        manifest_for(["sc_1", "sc_2"], endings=["sc_2"]),
        {"sc_1": scene("sc_1", "sc_2"), "sc_2": scene("sc_2")},
    )
