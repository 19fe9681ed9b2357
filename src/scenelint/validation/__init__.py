"""Content validation: schema checks, loading, reporting and the pipeline."""

from scenelint.validation.loader import (
    ContentLoader,
    ContentNotFoundError,
    ContentParseError,
    read_json,
)
from scenelint.validation.pipeline import (
    FatalValidationError,
    LoadedScenes,
    load_manifest,
    load_scenes,
    validate_content,
)
from scenelint.validation.report import ReportBuilder, ValidationResult
from scenelint.validation.runtime import (
    ContentValidator,
    RuntimeCheckResult,
    RuntimeIssue,
    RuntimeIssueKind,
)
from scenelint.validation.schemas import SchemaLoadError, SchemaRegistry

__all__ = [
    "ContentLoader",
    "ContentNotFoundError",
    "ContentParseError",
    "ContentValidator",
    "FatalValidationError",
    "LoadedScenes",
    "ReportBuilder",
    "RuntimeCheckResult",
    "RuntimeIssue",
    "RuntimeIssueKind",
    "SchemaLoadError",
    "SchemaRegistry",
    "ValidationResult",
    "load_manifest",
    "load_scenes",
    "read_json",
    "validate_content",
]
