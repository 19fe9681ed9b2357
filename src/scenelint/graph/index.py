"""Scene index construction from the manifest.

The manifest declares every scene in ``sceneIndex`` and names the starting
scene and the ending scenes. Starting and ending scenes count as referenced
even when no content links to them.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from scenelint.observability.logging import get_logger

log = get_logger(__name__)


@dataclass
class SceneIndex:
    """Declared scenes plus the always-reachable seed set.

    Attributes:
        entries: Scene identifier -> raw index entry, keyed by each entry's
            own ``id`` (falling back to the mapping key when it has none).
        seeded: Identifiers that are reachable by declaration: the starting
            scene and every ending's target.
        key_mismatches: ``(key, id)`` pairs where an entry's ``id`` differs
            from the key it was declared under.
    """

    entries: dict[str, dict[str, Any]] = field(default_factory=dict)
    seeded: set[str] = field(default_factory=set)
    key_mismatches: list[tuple[str, str]] = field(default_factory=list)

    def __contains__(self, scene_id: object) -> bool:
        return scene_id in self.entries

    def is_exempt(self, scene_id: str) -> bool:
        """True if the entry is flagged ``unreachable: true``."""
        entry = self.entries.get(scene_id)
        return entry is not None and entry.get("unreachable") is True


def build_scene_index(manifest: Any) -> SceneIndex:
    """Build the scene index and seed set from a parsed manifest.

    Missing or mistyped manifest fields contribute nothing; this never raises.

    Args:
        manifest: Parsed ``manifest.json`` content.

    Returns:
        SceneIndex with entries, seeded identifiers and key/id mismatches.
    """
    index = SceneIndex()
    if not isinstance(manifest, Mapping):
        return index

    scene_index = manifest.get("sceneIndex")
    if isinstance(scene_index, Mapping):
        for key, entry in scene_index.items():
            if not isinstance(entry, Mapping):
                continue
            entry_id = entry.get("id")
            if not isinstance(entry_id, str) or not entry_id:
                entry_id = str(key)
            elif entry_id != key:
                index.key_mismatches.append((str(key), entry_id))
            index.entries[entry_id] = dict(entry)

    starting_scene = manifest.get("startingScene")
    if isinstance(starting_scene, str) and starting_scene:
        index.seeded.add(starting_scene)

    endings = manifest.get("endings")
    if isinstance(endings, (list, tuple)):
        for ending in endings:
            if not isinstance(ending, Mapping):
                continue
            scene_id = ending.get("sceneId")
            if isinstance(scene_id, str) and scene_id:
                index.seeded.add(scene_id)

    log.debug(
        "scene_index_built",
        declared=len(index.entries),
        seeded=len(index.seeded),
        key_mismatches=len(index.key_mismatches),
    )
    return index
