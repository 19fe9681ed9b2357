"""Validation report aggregation.

``ReportBuilder`` is the per-run accumulator: the pipeline records schema
errors, load errors, reference analysis and warnings into it, then calls
``build()`` once to obtain the immutable ``ValidationResult``.

``passed`` is true iff no error was recorded. Warnings never change it;
escalating warnings to failure is the caller's policy.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from pathlib import Path

    from scenelint.graph.analysis import ReferenceAnalysis


class ValidationResult(BaseModel):
    """Final, immutable outcome of one validation run.

    Attributes:
        passed: True when no error was recorded.
        errors: Error messages in the order they were recorded.
        warnings: Warning messages in the order they were recorded.
        file_count: Scene, items and stats files validated.
        scene_index: Declared scenes from the manifest, keyed by entry id.
        referenced_scenes: Seeded plus discovered scene references.
        missing_scenes: References resolving to no declared or loaded scene.
        unreachable_scenes: Declared, unreferenced, non-exempt scenes.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    passed: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    file_count: int = 0
    scene_index: dict[str, dict[str, Any]] = Field(default_factory=dict)
    referenced_scenes: frozenset[str] = frozenset()
    missing_scenes: frozenset[str] = frozenset()
    unreachable_scenes: frozenset[str] = frozenset()

    @field_serializer("referenced_scenes", "missing_scenes", "unreachable_scenes")
    def _serialize_scene_set(self, value: frozenset[str]) -> list[str]:
        return sorted(value)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def to_json(self, *, indent: int | None = 2) -> str:
        """Serialize with camelCase keys and sorted scene sets."""
        return self.model_dump_json(by_alias=True, indent=indent)


def format_missing_message(missing: Iterable[str]) -> str:
    """Aggregate message for missing scene references."""
    ids = sorted(missing)
    return f"Missing {len(ids)} scene(s) referenced by content: {', '.join(ids)}"


def format_unreachable_message(unreachable: Iterable[str]) -> str:
    """Aggregate message for unreachable scenes."""
    ids = sorted(unreachable)
    return (
        f"{len(ids)} unreachable scene(s) (not referenced by any content): {', '.join(ids)}"
    )


@dataclass
class ReportBuilder:
    """Mutable accumulator for a single validation run."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    file_count: int = 0

    def record_file(self) -> None:
        """Count one validated content file."""
        self.file_count += 1

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def add_schema_errors(self, messages: Iterable[str]) -> None:
        """Record structural errors reported by the schema collaborator."""
        self.errors.extend(messages)

    def add_load_error(self, path: Path | str, reason: str) -> None:
        """Record a file that could not be read or parsed."""
        self.errors.append(f"Failed to load {path}: {reason}")

    def add_reference_analysis(self, analysis: ReferenceAnalysis) -> None:
        """Record the missing-reference error and unreachable-scene warning."""
        if analysis.missing:
            self.errors.append(format_missing_message(analysis.missing))
        if analysis.unreachable:
            self.warnings.append(format_unreachable_message(analysis.unreachable))

    @property
    def passed(self) -> bool:
        return not self.errors

    def build(
        self,
        *,
        scene_index: dict[str, dict[str, Any]] | None = None,
        analysis: ReferenceAnalysis | None = None,
    ) -> ValidationResult:
        """Freeze the accumulated state into a ValidationResult.

        Args:
            scene_index: Declared scenes from the manifest.
            analysis: Reference analysis; omitted when it never ran (the scene
                sets are then empty).

        Returns:
            The immutable result.
        """
        return ValidationResult(
            passed=self.passed,
            errors=tuple(self.errors),
            warnings=tuple(self.warnings),
            file_count=self.file_count,
            scene_index=dict(scene_index or {}),
            referenced_scenes=analysis.referenced if analysis else frozenset(),
            missing_scenes=analysis.missing if analysis else frozenset(),
            unreachable_scenes=analysis.unreachable if analysis else frozenset(),
        )
