"""End-to-end content validation.

Data flow: schemas and manifest are loaded first (failure is fatal), the
manifest yields the scene index, every scene file is loaded, schema-checked
and walked for references independently, then the reference analysis and
the accumulated messages are frozen into one ``ValidationResult``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from scenelint.graph.analysis import analyze_references
from scenelint.graph.index import SceneIndex, build_scene_index
from scenelint.graph.references import collect_scene_references
from scenelint.observability.logging import get_logger
from scenelint.validation.loader import (
    ITEMS_FILE,
    STATS_FILE,
    ContentLoader,
    ContentNotFoundError,
    ContentParseError,
    read_json,
)
from scenelint.validation.report import ReportBuilder, ValidationResult
from scenelint.validation.schemas import SchemaLoadError, SchemaRegistry

if TYPE_CHECKING:
    from pathlib import Path

    from scenelint.config import ValidatorConfig

log = get_logger(__name__)


class FatalValidationError(Exception):
    """Raised when validation cannot start: no schemas or no manifest."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot validate content: {path}: {reason}")


def scene_id_of(scene: Any) -> str | None:
    """Return a scene document's ``id`` if it is a non-empty string."""
    if isinstance(scene, Mapping):
        scene_id = scene.get("id")
        if isinstance(scene_id, str) and scene_id:
            return scene_id
    return None


def load_manifest(loader: ContentLoader) -> Any:
    """Read the manifest, converting any failure to FatalValidationError."""
    try:
        return loader.read_manifest()
    except ContentNotFoundError as e:
        raise FatalValidationError(e.path, "Manifest not found") from e
    except ContentParseError as e:
        raise FatalValidationError(e.path, e.reason) from e


@dataclass
class LoadedScenes:
    """Scene documents that parsed, keyed by scene identifier.

    Attributes:
        scenes: Scene identifier -> parsed document.
        sources: Scene identifier -> file it was loaded from.
        failures: ``(path, reason)`` for files that could not be read.
    """

    scenes: dict[str, Any] = field(default_factory=dict)
    sources: dict[str, Path] = field(default_factory=dict)
    failures: list[tuple[Path, str]] = field(default_factory=list)


def load_scenes(loader: ContentLoader) -> LoadedScenes:
    """Load every scene file for graph analysis.

    A scene without a usable ``id`` is keyed by its file stem. When two files
    declare the same identifier the first one (in filename order) is kept.
    """
    loaded = LoadedScenes()
    for path in loader.scene_files():
        try:
            scene = read_json(path)
        except ContentParseError as e:
            loaded.failures.append((path, e.reason))
            continue
        scene_id = scene_id_of(scene) or path.stem
        if scene_id not in loaded.scenes:
            loaded.scenes[scene_id] = scene
            loaded.sources[scene_id] = path
    return loaded


def _validate_optional(
    loader: ContentLoader,
    registry: SchemaRegistry,
    report: ReportBuilder,
    filename: str,
    schema_name: str,
) -> None:
    path = loader.optional_path(filename)
    if path is None:
        return
    try:
        data = read_json(path)
    except ContentParseError as e:
        report.add_load_error(loader.relative_name(path), e.reason)
        return
    report.record_file()
    report.add_schema_errors(registry.validate(schema_name, data, filename))


def _add_index_warnings(report: ReportBuilder, scene_index: SceneIndex) -> None:
    for key, entry_id in scene_index.key_mismatches:
        report.add_warning(f"Scene index key '{key}' does not match its entry id '{entry_id}'")


def validate_content(config: ValidatorConfig) -> ValidationResult:
    """Validate a content directory.

    Args:
        config: Content location, schema location and strictness.

    Returns:
        The ValidationResult of this run. Errors in individual files are
        recorded and processing continues.

    Raises:
        FatalValidationError: If a schema or the manifest cannot be loaded.
    """
    content_path = config.content_path
    loader = ContentLoader(content_path, config.scenes_dir)
    report = ReportBuilder()

    try:
        registry = SchemaRegistry.load(content_path, config.schemas_path)
    except SchemaLoadError as e:
        raise FatalValidationError(e.path, e.reason) from e

    manifest = load_manifest(loader)
    report.add_schema_errors(registry.validate("manifest", manifest, loader.manifest_path.name))
    scene_index = build_scene_index(manifest)
    log.info("manifest_loaded", declared=len(scene_index.entries))

    loaded_ids: set[str] = set()
    sources: dict[str, str] = {}
    per_scene_refs: list[set[str]] = []

    for path in loader.scene_files():
        name = loader.relative_name(path)
        try:
            scene = read_json(path)
        except ContentParseError as e:
            report.add_load_error(name, e.reason)
            continue

        report.record_file()
        report.add_schema_errors(registry.validate("scene", scene, name))

        scene_id = scene_id_of(scene)
        if scene_id is not None:
            if scene_id in sources:
                report.add_error(
                    f"Duplicate scene id '{scene_id}' in {name} "
                    f"(already defined in {sources[scene_id]})"
                )
            else:
                sources[scene_id] = name
            loaded_ids.add(scene_id)

        refs = collect_scene_references(scene)
        per_scene_refs.append(refs)
        log.debug("scene_loaded", file=name, scene=scene_id, references=len(refs))

    _validate_optional(loader, registry, report, ITEMS_FILE, "items")
    _validate_optional(loader, registry, report, STATS_FILE, "stats")

    analysis = analyze_references(
        scene_index.entries, loaded_ids, per_scene_refs, scene_index.seeded
    )
    report.add_reference_analysis(analysis)
    if config.strict:
        _add_index_warnings(report, scene_index)

    result = report.build(scene_index=scene_index.entries, analysis=analysis)
    log.info(
        "validation_complete",
        passed=result.passed,
        errors=len(result.errors),
        warnings=len(result.warnings),
        files=result.file_count,
    )
    return result
