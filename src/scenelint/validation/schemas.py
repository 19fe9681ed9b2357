"""Structural validation of content documents with JSON Schema."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

import jsonschema
from jsonschema.exceptions import SchemaError
from jsonschema.validators import validator_for

from scenelint.observability.logging import get_logger

if TYPE_CHECKING:
    from jsonschema.protocols import Validator

log = get_logger(__name__)

SCHEMA_NAMES: tuple[str, ...] = ("manifest", "scene", "items", "stats")

# Defaults shipped with the package, used when content provides none.
BUNDLED_SCHEMAS_PATH = Path(__file__).parent.parent / "schemas"


class SchemaLoadError(Exception):
    """Raised when a JSON schema can't be found, parsed or compiled."""

    def __init__(self, schema_name: str, path: Path, reason: str) -> None:
        self.schema_name = schema_name
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load {schema_name} schema at {path}: {reason}")


def schema_filename(schema_name: str) -> str:
    """File name of a schema, e.g. ``scene-schema.json``."""
    return f"{schema_name}-schema.json"


def resolve_schema_path(
    schema_name: str,
    content_path: Path,
    schemas_path: Path | None = None,
) -> Path:
    """Pick the schema file to use for one document kind.

    Resolution order:
    1. ``schemas_path`` if configured (the file must exist there)
    2. ``<content>/schemas/<name>-schema.json`` if present
    3. The bundled default

    Args:
        schema_name: One of SCHEMA_NAMES.
        content_path: Content root directory.
        schemas_path: Explicitly configured schema directory.

    Returns:
        Path to the schema file.
    """
    filename = schema_filename(schema_name)
    if schemas_path is not None:
        return schemas_path / filename

    content_schema = content_path / "schemas" / filename
    if content_schema.is_file():
        return content_schema
    return BUNDLED_SCHEMAS_PATH / filename


def format_instance_path(path: Any) -> str:
    """Render an error location as a JSON pointer, or ``root``."""
    parts = [str(p).replace("~", "~0").replace("/", "~1") for p in path]
    return "/" + "/".join(parts) if parts else "root"


def compile_schema(schema_name: str, schema: dict[str, Any], path: Path) -> Validator:
    """Check a schema against its metaschema and build a validator for it.

    The validator class follows the schema's ``$schema`` keyword and falls
    back to Draft 7.

    Raises:
        SchemaLoadError: If the schema itself is invalid.
    """
    validator_cls = validator_for(schema, default=jsonschema.Draft7Validator)
    try:
        validator_cls.check_schema(schema)
    except SchemaError as e:
        raise SchemaLoadError(schema_name, path, e.message) from e
    return validator_cls(schema)


class SchemaRegistry:
    """Compiled JSON schemas for manifest, scene, items and stats documents."""

    def __init__(self, validators: dict[str, Validator]) -> None:
        self._validators = validators

    @classmethod
    def load(cls, content_path: Path, schemas_path: Path | None = None) -> SchemaRegistry:
        """Load every schema in SCHEMA_NAMES.

        Args:
            content_path: Content root directory.
            schemas_path: Explicitly configured schema directory.

        Returns:
            A registry with one compiled validator per schema.

        Raises:
            SchemaLoadError: If any schema is missing, unparseable or invalid.
        """
        validators: dict[str, Validator] = {}
        paths: dict[str, Path] = {}
        for name in SCHEMA_NAMES:
            path = resolve_schema_path(name, content_path, schemas_path)
            if not path.is_file():
                raise SchemaLoadError(name, path, "File not found")
            try:
                with path.open("r", encoding="utf-8") as f:
                    schema = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                raise SchemaLoadError(name, path, str(e)) from e
            if not isinstance(schema, dict):
                raise SchemaLoadError(name, path, "Schema must be a JSON object")
            validators[name] = compile_schema(name, schema, path)
            paths[name] = path

        log.debug("schemas_loaded", schemas={n: str(p) for n, p in paths.items()})
        return cls(validators)

    @property
    def names(self) -> list[str]:
        return list(self._validators)

    def validate(self, schema_name: str, data: Any, file_label: str) -> list[str]:
        """Validate one document.

        Args:
            schema_name: Which schema to apply.
            data: Parsed document.
            file_label: File name used as message prefix.

        Returns:
            Error messages as ``<file>:<instance path> - <message>``, ordered
            by instance path; empty if valid.

        Raises:
            KeyError: If no schema with that name is registered.
        """
        validator = self._validators[schema_name]
        errors = sorted(
            validator.iter_errors(data),
            key=lambda e: ([str(p) for p in e.absolute_path], e.message),
        )
        messages = [
            f"{file_label}:{format_instance_path(e.absolute_path)} - {e.message}" for e in errors
        ]
        if messages:
            log.debug("schema_validation_failed", file=file_label, error_count=len(messages))
        return messages
