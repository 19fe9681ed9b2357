"""Whole-corpus reference consistency analysis.

Partitions the scene graph into:
- missing: referenced identifiers that resolve to neither a declared index
  entry nor a loaded scene file (hard error)
- unreachable: declared identifiers that nothing references and that are
  not flagged ``unreachable: true`` (warning)

The two partitions are disjoint by construction: a missing identifier is
never declared, an unreachable one always is.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from scenelint.observability.logging import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class ReferenceAnalysis:
    """Result of reference analysis.

    Attributes:
        referenced: Seeded identifiers plus every identifier referenced by
            any loaded scene.
        missing: Referenced identifiers absent from the index and from the
            loaded scenes.
        unreachable: Declared identifiers never referenced and not exempt.
    """

    referenced: frozenset[str] = field(default_factory=frozenset)
    missing: frozenset[str] = field(default_factory=frozenset)
    unreachable: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_consistent(self) -> bool:
        """True when no reference is missing."""
        return not self.missing


def analyze_references(
    scene_index: Mapping[str, Any],
    loaded_scenes: Iterable[str],
    per_scene_refs: Iterable[Iterable[str]],
    seeded: Iterable[str],
) -> ReferenceAnalysis:
    """Diff the referenced set against declared and loaded scenes.

    Args:
        scene_index: Declared scene identifier -> index entry.
        loaded_scenes: Identifiers of scene documents actually loaded (a
            mapping works too; only its keys are used).
        per_scene_refs: One reference set per loaded scene, as returned by
            ``collect_scene_references``.
        seeded: Always-reachable identifiers from the manifest.

    Returns:
        ReferenceAnalysis with referenced, missing and unreachable sets.
    """
    referenced: set[str] = set(seeded)
    for refs in per_scene_refs:
        referenced.update(refs)

    loaded = set(loaded_scenes)
    missing = {ref for ref in referenced if ref not in scene_index and ref not in loaded}

    unreachable: set[str] = set()
    for scene_id, entry in scene_index.items():
        if scene_id in referenced:
            continue
        if isinstance(entry, Mapping) and entry.get("unreachable") is True:
            continue
        unreachable.add(scene_id)

    log.info(
        "reference_analysis_complete",
        referenced=len(referenced),
        missing=len(missing),
        unreachable=len(unreachable),
    )

    return ReferenceAnalysis(
        referenced=frozenset(referenced),
        missing=frozenset(missing),
        unreachable=frozenset(unreachable),
    )
