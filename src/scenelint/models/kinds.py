"""Closed sets of condition and effect kinds.

Conditions and effects are tagged variants keyed by their ``type`` field.
The enums below are the complete vocabulary of the current content schema.
Which kinds carry a scene reference, and in which field, is declared in the
``*_SCENE_FIELDS`` tables; the reference walkers consult only those tables,
so a new reference-carrying kind needs exactly one new row.
"""

from __future__ import annotations

from enum import StrEnum


class ConditionKind(StrEnum):
    """Condition variants."""

    STAT = "stat"
    FLAG = "flag"
    ITEM = "item"
    FACTION = "faction"
    AND = "and"
    OR = "or"
    NOT = "not"


class EffectKind(StrEnum):
    """Effect variants."""

    SET_STAT = "set-stat"
    MODIFY_STAT = "modify-stat"
    SET_FLAG = "set-flag"
    CLEAR_FLAG = "clear-flag"
    ADD_ITEM = "add-item"
    REMOVE_ITEM = "remove-item"
    GOTO = "goto"
    MODIFY_FACTION = "modify-faction"


class StatOperator(StrEnum):
    """Comparison operators for stat conditions."""

    GTE = "gte"
    LTE = "lte"
    EQ = "eq"
    GT = "gt"
    LT = "lt"


# Logical kinds wrap a nested ``conditions`` value (single or sequence).
LOGICAL_CONDITION_KINDS: frozenset[str] = frozenset(
    {ConditionKind.AND, ConditionKind.OR, ConditionKind.NOT}
)

# Leaf condition kind -> field holding a scene identifier. None today.
CONDITION_SCENE_FIELDS: dict[str, str] = {}

# Effect kind -> field holding a scene identifier.
EFFECT_SCENE_FIELDS: dict[str, str] = {
    EffectKind.GOTO: "sceneId",
}
