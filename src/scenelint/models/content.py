"""Pydantic models for gamebook content documents.

These models describe the canonical shapes of ``manifest.json`` and the
per-scene documents under ``scenes/``. Conditions and effects are
discriminated unions on ``type``; an unrecognized tag is a validation error
here, while the reference walkers in ``scenelint.graph.references`` skip it.

Field names are snake_case in Python and camelCase on disk.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from scenelint.models.kinds import StatOperator  # noqa: TC001 - pydantic needs it at runtime

NonEmptyStr = Annotated[str, Field(min_length=1)]


class ContentModel(BaseModel):
    """Base for content models: camelCase aliases, extra fields kept."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


# --- Conditions ---


class StatCondition(ContentModel):
    """Compare a stat against a value."""

    type: Literal["stat"]
    stat: NonEmptyStr
    operator: StatOperator
    value: float


class FlagCondition(ContentModel):
    """Require a flag to be set."""

    type: Literal["flag"]
    flag: NonEmptyStr


class ItemCondition(ContentModel):
    """Require an item in the inventory."""

    type: Literal["item"]
    item: NonEmptyStr
    item_count: int | None = Field(default=None, ge=1)


class FactionCondition(ContentModel):
    """Require a faction standing."""

    type: Literal["faction"]
    faction: NonEmptyStr
    faction_level: float | None = None


class AndCondition(ContentModel):
    """All nested conditions must hold."""

    type: Literal["and"]
    conditions: Annotated[list[Condition], Field(min_length=1)] | Condition


class OrCondition(ContentModel):
    """At least one nested condition must hold."""

    type: Literal["or"]
    conditions: Annotated[list[Condition], Field(min_length=1)] | Condition


class NotCondition(ContentModel):
    """The nested conditions must not hold."""

    type: Literal["not"]
    conditions: Annotated[list[Condition], Field(min_length=1)] | Condition


Condition = Annotated[
    StatCondition
    | FlagCondition
    | ItemCondition
    | FactionCondition
    | AndCondition
    | OrCondition
    | NotCondition,
    Field(discriminator="type"),
]


# --- Effects ---


class SetStatEffect(ContentModel):
    type: Literal["set-stat"]
    stat: NonEmptyStr
    value: float


class ModifyStatEffect(ContentModel):
    type: Literal["modify-stat"]
    stat: NonEmptyStr
    value: float


class SetFlagEffect(ContentModel):
    type: Literal["set-flag"]
    flag: NonEmptyStr


class ClearFlagEffect(ContentModel):
    type: Literal["clear-flag"]
    flag: NonEmptyStr


class AddItemEffect(ContentModel):
    type: Literal["add-item"]
    item: NonEmptyStr
    count: int | None = Field(default=None, ge=1)


class RemoveItemEffect(ContentModel):
    type: Literal["remove-item"]
    item: NonEmptyStr
    count: int | None = Field(default=None, ge=1)


class GotoEffect(ContentModel):
    """Transition to another scene."""

    type: Literal["goto"]
    scene_id: NonEmptyStr


class ModifyFactionEffect(ContentModel):
    type: Literal["modify-faction"]
    faction: NonEmptyStr
    amount: float | None = None


Effect = Annotated[
    SetStatEffect
    | ModifyStatEffect
    | SetFlagEffect
    | ClearFlagEffect
    | AddItemEffect
    | RemoveItemEffect
    | GotoEffect
    | ModifyFactionEffect,
    Field(discriminator="type"),
]


# --- Scenes ---


class Choice(ContentModel):
    """A player-facing option within a scene."""

    label: str | None = None
    to: NonEmptyStr | None = None
    conditions: list[Condition] | Condition | None = None
    effects: list[Effect] | Effect | None = None


class Scene(ContentModel):
    """One narrative unit of content."""

    id: NonEmptyStr
    title: str | None = None
    text: str | dict[str, Any] | None = None
    effects: list[Effect] | Effect | None = None
    choices: list[Choice] = Field(default_factory=list)


# --- Manifest ---


class Ending(ContentModel):
    """An ending declared in the manifest."""

    id: int | str | None = None
    scene_id: NonEmptyStr | None = None
    title: str | None = None


class SceneIndexEntry(ContentModel):
    """Declared scene in the manifest's scene index.

    Attributes:
        id: Scene identifier; expected to equal the entry's key.
        unreachable: Author assertion that nothing links to this scene on
            purpose, which exempts it from unreachable-scene warnings.
    """

    id: NonEmptyStr | None = None
    unreachable: bool = False


class Manifest(ContentModel):
    """Top-level content manifest."""

    starting_scene: NonEmptyStr
    endings: list[Ending] = Field(default_factory=list)
    scene_index: dict[str, SceneIndexEntry] = Field(default_factory=dict)


for _model in (AndCondition, OrCondition, NotCondition, Choice, Scene):
    _model.model_rebuild()
