"""Breadth-first reachability and cycle analysis over the scene graph.

Stricter than reference analysis: a scene counts as reachable only if some
chain of transitions leads to it from the starting scene. Conditions are not
evaluated (static analysis), so a scene gated behind an impossible condition
still counts as reachable. Pure functions, no I/O.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import IntEnum, StrEnum
from typing import TYPE_CHECKING, Any

from scenelint.graph.references import collect_scene_references
from scenelint.observability.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable

    from scenelint.graph.index import SceneIndex

log = get_logger(__name__)

DEFAULT_MAX_DEPTH = 1000


class UnreachableReason(StrEnum):
    """Why a declared scene cannot be reached from the start."""

    NO_INCOMING_LINKS = "no-incoming-links"
    DISCONNECTED = "disconnected"


class _Color(IntEnum):
    WHITE = 0
    GRAY = 1
    BLACK = 2


@dataclass
class UnreachableScene:
    """A declared scene not reachable from the starting scene.

    Attributes:
        scene_id: The unreachable scene.
        reason: ``no-incoming-links`` if no other scene links to it,
            ``disconnected`` if it is only linked from unreachable scenes.
        from_scenes: Scenes that link to it (sorted).
    """

    scene_id: str
    reason: UnreachableReason
    from_scenes: list[str] = field(default_factory=list)


@dataclass
class ReachabilityReport:
    """Result of breadth-first reachability analysis."""

    starting_scene: str | None
    total_scenes: int
    reachable: set[str] = field(default_factory=set)
    unreachable: list[UnreachableScene] = field(default_factory=list)
    exempt: list[str] = field(default_factory=list)
    cycles: list[list[str]] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        """True if there is a starting scene and every declared scene is reachable."""
        return self.starting_scene is not None and not self.unreachable

    def to_dict(self) -> dict[str, Any]:
        """Serialize to plain JSON-compatible data."""
        return {
            "valid": self.valid,
            "startingScene": self.starting_scene,
            "totalScenes": self.total_scenes,
            "reachableScenes": sorted(self.reachable),
            "unreachableScenes": [
                {"sceneId": u.scene_id, "reason": str(u.reason), "fromScenes": u.from_scenes}
                for u in self.unreachable
            ],
            "exemptScenes": self.exempt,
            "cycles": self.cycles,
        }


def build_adjacency(
    scenes: Mapping[str, Any],
    node_ids: Iterable[str] = (),
    *,
    include_effects: bool = True,
) -> dict[str, list[str]]:
    """Build scene -> successor scenes adjacency from loaded scene documents.

    Args:
        scenes: Scene identifier -> parsed scene document.
        node_ids: Additional identifiers to include as nodes (e.g. declared
            scenes without a file). They get no outgoing edges.
        include_effects: Follow ``goto`` effects as well as choice targets.

    Returns:
        Adjacency mapping with sorted successor lists.
    """
    adjacency: dict[str, list[str]] = {scene_id: [] for scene_id in node_ids}
    for scene_id, scene in scenes.items():
        refs = collect_scene_references(scene, include_effects=include_effects)
        adjacency[scene_id] = sorted(refs)
    return adjacency


def find_reachable_scenes(
    starting_scene: str | None,
    adjacency: Mapping[str, list[str]],
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> set[str]:
    """Return the scenes reachable from the starting scene.

    A scene first discovered at ``max_depth`` transitions or more from the
    start is not counted, so ``max_depth=1`` yields only the start itself.
    """
    if not starting_scene:
        return set()

    reachable: set[str] = set()
    depths: dict[str, int] = {starting_scene: 0}
    queue: deque[str] = deque([starting_scene])

    while queue:
        current = queue.popleft()
        depth = depths[current]
        if depth >= max_depth:
            continue
        reachable.add(current)
        for successor in adjacency.get(current, []):
            if successor not in depths:
                depths[successor] = depth + 1
                queue.append(successor)

    return reachable


def find_incoming_links(adjacency: Mapping[str, list[str]]) -> dict[str, list[str]]:
    """Invert the adjacency, ignoring self-links."""
    incoming: dict[str, set[str]] = {}
    for source, successors in adjacency.items():
        for target in successors:
            if target != source:
                incoming.setdefault(target, set()).add(source)
    return {target: sorted(sources) for target, sources in incoming.items()}


def detect_cycles(adjacency: Mapping[str, list[str]]) -> list[list[str]]:
    """Find cycles with an iterative depth-first search.

    Every back edge found yields one cycle, listed from the re-entered scene
    along the DFS path. Self-loops are one-element cycles. Successors that are
    not nodes of the adjacency are ignored.

    Returns:
        List of cycles, each a list of scene identifiers.
    """
    color = dict.fromkeys(adjacency, _Color.WHITE)
    cycles: list[list[str]] = []

    for root in sorted(adjacency):
        if color[root] is not _Color.WHITE:
            continue
        color[root] = _Color.GRAY
        path = [root]
        stack = [iter(adjacency[root])]

        while stack:
            successor = next(stack[-1], None)
            if successor is None:
                color[path.pop()] = _Color.BLACK
                stack.pop()
                continue
            state = color.get(successor)
            if state is None:
                continue
            if state is _Color.GRAY:
                cycles.append(path[path.index(successor) :])
            elif state is _Color.WHITE:
                color[successor] = _Color.GRAY
                path.append(successor)
                stack.append(iter(adjacency[successor]))

    return cycles


def analyze_reachability(
    scene_index: SceneIndex,
    starting_scene: str | None,
    scenes: Mapping[str, Any],
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
    include_effects: bool = True,
) -> ReachabilityReport:
    """Run breadth-first reachability over declared and loaded scenes.

    Args:
        scene_index: Declared scenes from the manifest.
        starting_scene: Where traversal starts.
        scenes: Loaded scene documents by identifier.
        max_depth: Traversal depth limit.
        include_effects: Follow ``goto`` effects as well as choice targets.

    Returns:
        ReachabilityReport. Declared scenes flagged ``unreachable: true`` are
        listed as exempt instead of unreachable.
    """
    adjacency = build_adjacency(scenes, scene_index.entries, include_effects=include_effects)
    reachable = find_reachable_scenes(starting_scene, adjacency, max_depth=max_depth)
    incoming = find_incoming_links(adjacency)

    unreachable: list[UnreachableScene] = []
    exempt: list[str] = []
    for scene_id in sorted(scene_index.entries):
        if scene_id in reachable:
            continue
        if scene_index.is_exempt(scene_id):
            exempt.append(scene_id)
            continue
        sources = incoming.get(scene_id, [])
        reason = UnreachableReason.DISCONNECTED if sources else UnreachableReason.NO_INCOMING_LINKS
        unreachable.append(UnreachableScene(scene_id=scene_id, reason=reason, from_scenes=sources))

    report = ReachabilityReport(
        starting_scene=starting_scene or None,
        total_scenes=len(scene_index.entries),
        reachable=reachable,
        unreachable=unreachable,
        exempt=exempt,
        cycles=detect_cycles(adjacency),
    )
    log.info(
        "reachability_analysis_complete",
        total=report.total_scenes,
        reachable=len(reachable),
        unreachable=len(unreachable),
        cycles=len(report.cycles),
    )
    return report
