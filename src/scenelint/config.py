"""Validator configuration loading."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML

from scenelint.graph.traversal import DEFAULT_MAX_DEPTH
from scenelint.validation.loader import DEFAULT_SCENES_DIR

CONFIG_FILE = "scenelint.yaml"
DEFAULT_CONTENT_PATH = Path("content")

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def parse_flag(value: str) -> bool:
    """True for 1/true/yes/on in any case, False for any other string."""
    return value.strip().lower() in _TRUTHY


def env_flag(name: str) -> bool | None:
    """Read a boolean environment variable.

    Returns:
        True for 1/true/yes/on, False for any other non-empty value, None if
        unset or empty.
    """
    value = os.getenv(name)
    if not value:
        return None
    return parse_flag(value)


def _config_flag(data: dict[str, Any], key: str) -> bool:
    # YAML 1.2 loads unquoted no/off as strings.
    value = data.get(key, False)
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return parse_flag(value)
    raise ValueError(f"{key} must be a boolean, got {value!r}")


def _config_depth(data: dict[str, Any]) -> int:
    value = data.get("max_depth", DEFAULT_MAX_DEPTH)
    if isinstance(value, bool):
        raise ValueError(f"max_depth must be an integer, got {value!r}")
    depth = int(value)
    if depth < 1:
        raise ValueError("max_depth must be >= 1")
    return depth


@dataclass
class ValidatorConfig:
    """Configuration for one validation run.

    Resolution order for each flag:
    1. CLI option
    2. Environment variable (SCENELINT_FAIL_ON_WARNINGS, SCENELINT_STRICT)
    3. ``scenelint.yaml`` in the content root
    4. Defaults below

    Attributes:
        content_path: Content root directory.
        schemas_path: Directory holding ``<name>-schema.json`` files. When
            unset, content-local schemas and then the bundled ones are used.
        scenes_dir: Scene directory, relative to the content root.
        fail_on_warnings: Treat warnings as failure for the exit status.
        strict: Report scene index key/id mismatches as warnings.
        max_depth: Depth limit for breadth-first reachability.
    """

    content_path: Path = DEFAULT_CONTENT_PATH
    schemas_path: Path | None = None
    scenes_dir: str = DEFAULT_SCENES_DIR
    fail_on_warnings: bool = False
    strict: bool = False
    max_depth: int = DEFAULT_MAX_DEPTH

    @classmethod
    def from_dict(cls, data: dict[str, Any], content_path: Path) -> ValidatorConfig:
        """Create config from dictionary.

        Args:
            data: Parsed ``scenelint.yaml``. Relative ``schemas_path`` values
                are resolved against the content root.
            content_path: Content root directory.

        Returns:
            ValidatorConfig instance.

        Raises:
            ValueError: If a flag is neither a boolean nor a string, or
                max_depth is not a positive integer.
        """
        schemas_path = data.get("schemas_path")
        if schemas_path is not None:
            schemas_path = Path(str(schemas_path))
            if not schemas_path.is_absolute():
                schemas_path = content_path / schemas_path

        return cls(
            content_path=content_path,
            schemas_path=schemas_path,
            scenes_dir=str(data.get("scenes_dir", DEFAULT_SCENES_DIR)),
            fail_on_warnings=_config_flag(data, "fail_on_warnings"),
            strict=_config_flag(data, "strict"),
            max_depth=_config_depth(data),
        )


class ConfigError(Exception):
    """Raised when validator configuration cannot be loaded."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load config at {path}: {reason}")


def load_validator_config(content_path: Path) -> ValidatorConfig:
    """Load configuration from ``scenelint.yaml`` and the environment.

    A missing or empty config file yields defaults.

    Args:
        content_path: Path to the content root directory.

    Returns:
        ValidatorConfig instance.

    Raises:
        ConfigError: If the config file exists but cannot be loaded.
    """
    config_path = content_path / CONFIG_FILE
    data: dict[str, Any] = {}

    if config_path.exists():
        yaml = YAML(typ="safe")
        try:
            with config_path.open("r", encoding="utf-8") as f:
                loaded = yaml.load(f)
        except Exception as e:
            raise ConfigError(config_path, str(e)) from e
        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigError(config_path, "Expected a mapping at the top level")
        data = dict(loaded or {})

    try:
        config = ValidatorConfig.from_dict(data, content_path)
    except (TypeError, ValueError) as e:
        raise ConfigError(config_path, str(e)) from e

    fail_on_warnings = env_flag("SCENELINT_FAIL_ON_WARNINGS")
    if fail_on_warnings is not None:
        config.fail_on_warnings = fail_on_warnings
    strict = env_flag("SCENELINT_STRICT")
    if strict is not None:
        config.strict = strict

    return config
