"""Scene reference extraction from raw content documents.

Walks the condition and effect trees inside scenes and choices and collects
every scene identifier the content can transition to. The walkers operate on
parsed JSON (dicts and lists) rather than on the pydantic models so that they
can run over documents that failed schema validation: anything they cannot
interpret is skipped, never raised.

Dispatch is table-driven (see ``scenelint.models.kinds``):
- Logical condition kinds recurse into their nested ``conditions``.
- Kinds listed in ``CONDITION_SCENE_FIELDS`` / ``EFFECT_SCENE_FIELDS``
  contribute the value of the named field.
- Every other kind, known or not, contributes nothing.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from scenelint.models.kinds import (
    CONDITION_SCENE_FIELDS,
    EFFECT_SCENE_FIELDS,
    LOGICAL_CONDITION_KINDS,
)


def _scene_id(value: Any) -> str | None:
    """Return value if it can name a scene, else None."""
    if isinstance(value, str) and value:
        return value
    return None


def _as_sequence(value: Any) -> list[Any]:
    """Normalize a single node or a sequence of nodes to a list."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def extract_condition_refs(conditions: Any, refs: set[str] | None = None) -> set[str]:
    """Collect scene identifiers referenced inside a condition tree.

    Args:
        conditions: A condition mapping, a sequence of them, or None.
        refs: Accumulator to add to. A new set is created when omitted.

    Returns:
        The accumulator, mutated in place.
    """
    if refs is None:
        refs = set()

    # Explicit stack keeps deeply nested trees off the interpreter stack.
    pending = _as_sequence(conditions)
    while pending:
        node = pending.pop()
        if isinstance(node, (list, tuple)):
            pending.extend(node)
            continue
        if not isinstance(node, Mapping):
            continue

        kind = node.get("type")
        if not isinstance(kind, str):
            continue

        if kind in LOGICAL_CONDITION_KINDS:
            pending.extend(_as_sequence(node.get("conditions")))
            continue

        field = CONDITION_SCENE_FIELDS.get(kind)
        if field is not None:
            scene_id = _scene_id(node.get(field))
            if scene_id is not None:
                refs.add(scene_id)

    return refs


def extract_effect_refs(effects: Any, refs: set[str] | None = None) -> set[str]:
    """Collect scene identifiers referenced by one effect or a sequence of effects.

    Args:
        effects: An effect mapping, a sequence of them, or None.
        refs: Accumulator to add to. A new set is created when omitted.

    Returns:
        The accumulator, mutated in place.
    """
    if refs is None:
        refs = set()

    for effect in _as_sequence(effects):
        if not isinstance(effect, Mapping):
            continue
        kind = effect.get("type")
        if not isinstance(kind, str):
            continue
        field = EFFECT_SCENE_FIELDS.get(kind)
        if field is None:
            continue
        scene_id = _scene_id(effect.get(field))
        if scene_id is not None:
            refs.add(scene_id)

    return refs


def collect_scene_references(scene: Any, *, include_effects: bool = True) -> set[str]:
    """Collect every outbound scene reference of one scene document.

    Unions scene-level effect targets, choice targets, choice-condition
    references and choice-effect targets.

    Args:
        scene: Parsed scene document.
        include_effects: When False, effect trees are not walked, leaving
            only choice targets and condition references.

    Returns:
        Set of referenced scene identifiers (empty for a scene without
        choices or effects, or for a non-mapping input).
    """
    refs: set[str] = set()
    if not isinstance(scene, Mapping):
        return refs

    if include_effects:
        extract_effect_refs(scene.get("effects"), refs)

    for choice in _as_sequence(scene.get("choices")):
        if not isinstance(choice, Mapping):
            continue
        target = _scene_id(choice.get("to"))
        if target is not None:
            refs.add(target)
        extract_condition_refs(choice.get("conditions"), refs)
        if include_effects:
            extract_effect_refs(choice.get("effects"), refs)

    return refs
