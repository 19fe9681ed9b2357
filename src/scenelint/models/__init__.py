"""Content models and kind vocabularies.

The pydantic models describe the canonical document shapes used by the
runtime validator. The kind enums and scene-field tables are shared with the
reference walkers, which work on raw JSON data.
"""

from scenelint.models.content import (
    AddItemEffect,
    AndCondition,
    Choice,
    ClearFlagEffect,
    Condition,
    Effect,
    Ending,
    FactionCondition,
    FlagCondition,
    GotoEffect,
    ItemCondition,
    Manifest,
    ModifyFactionEffect,
    ModifyStatEffect,
    NotCondition,
    OrCondition,
    RemoveItemEffect,
    Scene,
    SceneIndexEntry,
    SetFlagEffect,
    SetStatEffect,
    StatCondition,
)
from scenelint.models.kinds import (
    CONDITION_SCENE_FIELDS,
    EFFECT_SCENE_FIELDS,
    LOGICAL_CONDITION_KINDS,
    ConditionKind,
    EffectKind,
    StatOperator,
)

__all__ = [
    "CONDITION_SCENE_FIELDS",
    "EFFECT_SCENE_FIELDS",
    "LOGICAL_CONDITION_KINDS",
    "AddItemEffect",
    "AndCondition",
    "Choice",
    "ClearFlagEffect",
    "Condition",
    "ConditionKind",
    "Effect",
    "EffectKind",
    "Ending",
    "FactionCondition",
    "FlagCondition",
    "GotoEffect",
    "ItemCondition",
    "Manifest",
    "ModifyFactionEffect",
    "ModifyStatEffect",
    "NotCondition",
    "OrCondition",
    "RemoveItemEffect",
    "Scene",
    "SceneIndexEntry",
    "SetFlagEffect",
    "SetStatEffect",
    "StatCondition",
    "StatOperator",
]
