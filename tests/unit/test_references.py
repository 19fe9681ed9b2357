"""Tests for scene reference extraction."""

from __future__ import annotations

import pytest

from scenelint.graph.references import (
    collect_scene_references,
    extract_condition_refs,
    extract_effect_refs,
)
from scenelint.models.kinds import CONDITION_SCENE_FIELDS

# --- Condition walker ---


class TestExtractConditionRefs:
    """Tests for extract_condition_refs."""

    def test_none_is_noop(self) -> None:
        """None adds nothing and returns the accumulator."""
        refs = {"sc_keep"}
        result = extract_condition_refs(None, refs)

        assert result is refs
        assert refs == {"sc_keep"}

    def test_creates_accumulator_when_omitted(self) -> None:
        """A fresh set is returned when no accumulator is given."""
        assert extract_condition_refs({"type": "flag", "flag": "met_guard"}) == set()

    def test_leaf_conditions_carry_no_references(self) -> None:
        """stat/flag/item/faction leaves contribute nothing."""
        conditions = [
            {"type": "stat", "stat": "health", "operator": "gte", "value": 3},
            {"type": "flag", "flag": "met_guard"},
            {"type": "item", "item": "lamp"},
            {"type": "faction", "faction": "guild", "factionLevel": 2},
        ]
        assert extract_condition_refs(conditions) == set()

    def test_nested_logical_tree_without_references(self) -> None:
        """Deep and/or/not trees of leaf conditions yield an empty set."""
        tree = {
            "type": "and",
            "conditions": [
                {"type": "or", "conditions": [{"type": "flag", "flag": "a"}]},
                {"type": "not", "conditions": {"type": "item", "item": "key"}},
            ],
        }
        assert extract_condition_refs(tree) == set()

    def test_logical_kinds_recurse_into_reference_fields(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A reference-carrying leaf is found at any nesting depth."""
        monkeypatch.setitem(CONDITION_SCENE_FIELDS, "visited", "sceneId")
        tree = {
            "type": "or",
            "conditions": [
                {"type": "flag", "flag": "x"},
                {
                    "type": "not",
                    "conditions": [
                        {"type": "and", "conditions": {"type": "visited", "sceneId": "sc_deep"}}
                    ],
                },
                {"type": "visited", "sceneId": "sc_shallow"},
            ],
        }
        assert extract_condition_refs(tree) == {"sc_deep", "sc_shallow"}

    def test_very_deep_nesting_does_not_overflow(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Nesting deeper than the recursion limit is walked."""
        monkeypatch.setitem(CONDITION_SCENE_FIELDS, "visited", "sceneId")
        node: dict = {"type": "visited", "sceneId": "sc_bottom"}
        for _ in range(5000):
            node = {"type": "not", "conditions": node}

        assert extract_condition_refs(node) == {"sc_bottom"}

    @pytest.mark.parametrize(
        "malformed",
        [
            "not a condition",
            42,
            {"no_type": True},
            {"type": 7},
            {"type": "and"},
            {"type": "and", "conditions": None},
            {"type": "teleport", "sceneId": "sc_x"},
            [None, [], {}],
        ],
    )
    def test_malformed_input_is_skipped(self, malformed: object) -> None:
        """Anything unrecognized contributes nothing and never raises."""
        assert extract_condition_refs(malformed) == set()


# --- Effect walker ---


class TestExtractEffectRefs:
    """Tests for extract_effect_refs."""

    def test_goto_effects_contribute_scene_ids(self) -> None:
        effects = [
            {"type": "goto", "sceneId": "sc_2"},
            {"type": "set-flag", "flag": "seen"},
            {"type": "goto", "sceneId": "sc_3"},
        ]
        assert extract_effect_refs(effects) == {"sc_2", "sc_3"}

    def test_single_effect_is_normalized(self) -> None:
        assert extract_effect_refs({"type": "goto", "sceneId": "sc_9"}) == {"sc_9"}

    def test_non_goto_kinds_contribute_nothing(self) -> None:
        effects = [
            {"type": "set-stat", "stat": "hp", "value": 1},
            {"type": "modify-stat", "stat": "hp", "value": -1},
            {"type": "set-flag", "flag": "f"},
            {"type": "clear-flag", "flag": "f"},
            {"type": "add-item", "item": "lamp"},
            {"type": "remove-item", "item": "lamp"},
            {"type": "modify-faction", "faction": "guild", "amount": 1},
        ]
        assert extract_effect_refs(effects) == set()

    @pytest.mark.parametrize(
        "effect",
        [
            {"type": "goto"},
            {"type": "goto", "sceneId": ""},
            {"type": "goto", "sceneId": 12},
            {"type": "unknown", "sceneId": "sc_x"},
            "goto",
        ],
    )
    def test_malformed_effects_are_ignored(self, effect: object) -> None:
        assert extract_effect_refs([effect]) == set()

    def test_appends_to_accumulator(self) -> None:
        refs = {"sc_1"}
        extract_effect_refs([{"type": "goto", "sceneId": "sc_2"}], refs)
        assert refs == {"sc_1", "sc_2"}


# --- Reference collector ---


class TestCollectSceneReferences:
    """Tests for collect_scene_references."""

    def test_empty_scene(self) -> None:
        """A scene with no choices and no effects references nothing."""
        assert collect_scene_references({"id": "sc_end"}) == set()

    def test_unions_all_sources(self) -> None:
        """Scene effects, choice targets and choice effects are all collected."""
        scene = {
            "id": "sc_1",
            "effects": {"type": "goto", "sceneId": "sc_forced"},
            "choices": [
                {"label": "Left", "to": "sc_left"},
                {
                    "label": "Right",
                    "to": "sc_right",
                    "conditions": [{"type": "flag", "flag": "brave"}],
                    "effects": [{"type": "goto", "sceneId": "sc_detour"}],
                },
            ],
        }
        assert collect_scene_references(scene) == {
            "sc_forced",
            "sc_left",
            "sc_right",
            "sc_detour",
        }

    def test_include_effects_false_skips_effect_walks(self) -> None:
        scene = {
            "id": "sc_1",
            "effects": [{"type": "goto", "sceneId": "sc_forced"}],
            "choices": [
                {"to": "sc_2", "effects": [{"type": "goto", "sceneId": "sc_detour"}]},
            ],
        }
        assert collect_scene_references(scene, include_effects=False) == {"sc_2"}

    def test_self_reference_is_collected(self) -> None:
        scene = {"id": "sc_loop", "choices": [{"to": "sc_loop"}]}
        assert collect_scene_references(scene) == {"sc_loop"}

    def test_choice_without_target(self) -> None:
        scene = {"id": "sc_1", "choices": [{"label": "Wait"}, {"to": ""}, "junk"]}
        assert collect_scene_references(scene) == set()

    def test_non_mapping_scene(self) -> None:
        assert collect_scene_references(["not", "a", "scene"]) == set()

    def test_pure(self) -> None:
        """Calling twice gives equal results and leaves the input untouched."""
        scene = {"id": "sc_1", "choices": [{"to": "sc_2"}]}
        snapshot = repr(scene)

        assert collect_scene_references(scene) == collect_scene_references(scene)
        assert repr(scene) == snapshot