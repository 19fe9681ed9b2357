"""Scene reference graph: extraction, indexing and analysis.

Pure functions over parsed content; no I/O.
"""

from scenelint.graph.analysis import ReferenceAnalysis, analyze_references
from scenelint.graph.index import SceneIndex, build_scene_index
from scenelint.graph.references import (
    collect_scene_references,
    extract_condition_refs,
    extract_effect_refs,
)
from scenelint.graph.traversal import (
    DEFAULT_MAX_DEPTH,
    ReachabilityReport,
    UnreachableReason,
    UnreachableScene,
    analyze_reachability,
    build_adjacency,
    detect_cycles,
    find_incoming_links,
    find_reachable_scenes,
)

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "ReachabilityReport",
    "ReferenceAnalysis",
    "SceneIndex",
    "UnreachableReason",
    "UnreachableScene",
    "analyze_reachability",
    "analyze_references",
    "build_adjacency",
    "build_scene_index",
    "collect_scene_references",
    "detect_cycles",
    "extract_condition_refs",
    "extract_effect_refs",
    "find_incoming_links",
    "find_reachable_scenes",
]
