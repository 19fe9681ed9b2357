"""Tests for JSON Schema loading and validation."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from scenelint.validation.schemas import (
    BUNDLED_SCHEMAS_PATH,
    SCHEMA_NAMES,
    SchemaLoadError,
    SchemaRegistry,
    format_instance_path,
    resolve_schema_path,
    schema_filename,
)
from tests.fixtures.content_fixtures import manifest_for, scene, write_json

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def registry(tmp_path: Path) -> SchemaRegistry:
    """Registry over the bundled schemas."""
    return SchemaRegistry.load(tmp_path)


def test_bundled_schemas_exist() -> None:
    for name in SCHEMA_NAMES:
        assert (BUNDLED_SCHEMAS_PATH / schema_filename(name)).is_file()


class TestResolveSchemaPath:
    """Tests for resolve_schema_path."""

    def test_bundled_default(self, tmp_path: Path) -> None:
        assert resolve_schema_path("scene", tmp_path) == BUNDLED_SCHEMAS_PATH / "scene-schema.json"

    def test_content_schemas_override_bundled(self, tmp_path: Path) -> None:
        local = tmp_path / "schemas" / "scene-schema.json"
        write_json(local, {"type": "object"})

        assert resolve_schema_path("scene", tmp_path) == local
        assert resolve_schema_path("manifest", tmp_path).parent == BUNDLED_SCHEMAS_PATH

    def test_explicit_directory_wins(self, tmp_path: Path) -> None:
        write_json(tmp_path / "schemas" / "scene-schema.json", {"type": "object"})
        explicit = tmp_path / "elsewhere"

        assert resolve_schema_path("scene", tmp_path, explicit) == explicit / "scene-schema.json"


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ([], "root"),
        (["choices", 0, "to"], "/choices/0/to"),
        (["a/b", "c~d"], "/a~1b/c~0d"),
    ],
)
def test_format_instance_path(path: list, expected: str) -> None:
    assert format_instance_path(path) == expected


class TestSchemaRegistryLoad:
    """Tests for SchemaRegistry.load."""

    def test_loads_all_schemas(self, registry: SchemaRegistry) -> None:
        assert registry.names == list(SCHEMA_NAMES)

    def test_missing_explicit_schema(self, tmp_path: Path) -> None:
        with pytest.raises(SchemaLoadError) as exc_info:
            SchemaRegistry.load(tmp_path, tmp_path / "nowhere")

        assert exc_info.value.schema_name == "manifest"
        assert exc_info.value.reason == "File not found"

    def test_unparseable_schema(self, tmp_path: Path) -> None:
        bad = tmp_path / "schemas" / "scene-schema.json"
        bad.parent.mkdir()
        bad.write_text("{not json", encoding="utf-8")

        with pytest.raises(SchemaLoadError) as exc_info:
            SchemaRegistry.load(tmp_path)

        assert exc_info.value.schema_name == "scene"
        assert exc_info.value.path == bad

    def test_invalid_schema(self, tmp_path: Path) -> None:
        write_json(tmp_path / "schemas" / "items-schema.json", {"type": "no-such-type"})

        with pytest.raises(SchemaLoadError) as exc_info:
            SchemaRegistry.load(tmp_path)

        assert exc_info.value.schema_name == "items"

    def test_non_object_schema(self, tmp_path: Path) -> None:
        write_json(tmp_path / "schemas" / "stats-schema.json", [1, 2])

        with pytest.raises(SchemaLoadError, match="JSON object"):
            SchemaRegistry.load(tmp_path)


class TestSchemaRegistryValidate:
    """Tests for SchemaRegistry.validate with the bundled schemas."""

    def test_valid_documents(self, registry: SchemaRegistry) -> None:
        assert registry.validate("manifest", manifest_for(["sc_1"]), "manifest.json") == []
        assert registry.validate("scene", scene("sc_1", "sc_2"), "sc_1.json") == []
        assert registry.validate("items", {"items": {"lamp": {"name": "Lamp"}}}, "items.json") == []
        assert registry.validate("stats", {"stats": {"hp": {"initial": 10}}}, "stats.json") == []

    def test_root_error_format(self, registry: SchemaRegistry) -> None:
        errors = registry.validate("scene", {"title": "no id"}, "sc_1.json")

        assert errors == ["sc_1.json:root - 'id' is a required property"]

    def test_nested_error_uses_json_pointer(self, registry: SchemaRegistry) -> None:
        data = scene("sc_1")
        data["choices"] = [{"label": "Go", "to": 5}]

        errors = registry.validate("scene", data, "sc_1.json")

        assert len(errors) == 1
        assert errors[0].startswith("sc_1.json:/choices/0/to - ")

    def test_unknown_effect_type_rejected(self, registry: SchemaRegistry) -> None:
        data = scene("sc_1", effects=[{"type": "teleport"}])

        assert registry.validate("scene", data, "sc_1.json") != []

    def test_nested_logical_conditions(self, registry: SchemaRegistry) -> None:
        data = scene("sc_1", "sc_2")
        data["choices"][0]["conditions"] = {
            "type": "and",
            "conditions": [
                {"type": "flag", "flag": "a"},
                {"type": "not", "conditions": {"type": "item", "item": "key"}},
            ],
        }

        assert registry.validate("scene", data, "sc_1.json") == []

    def test_errors_ordered_by_path(self, registry: SchemaRegistry) -> None:
        data = {"id": "", "choices": [{"to": ""}]}

        errors = registry.validate("scene", data, "x.json")

        assert [e.split(" - ")[0] for e in errors] == ["x.json:/choices/0/to", "x.json:/id"]

    def test_content_schema_is_used(self, tmp_path: Path) -> None:
        schema = {"$schema": "http://json-schema.org/draft-07/schema#", "required": ["chapter"]}
        (tmp_path / "schemas").mkdir()
        (tmp_path / "schemas" / "scene-schema.json").write_text(json.dumps(schema))

        registry = SchemaRegistry.load(tmp_path)

        assert registry.validate("scene", {"id": "sc_1"}, "sc_1.json") == [
            "sc_1.json:root - 'chapter' is a required property"
        ]
