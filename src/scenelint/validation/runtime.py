"""Lightweight per-document checks for use when content is loaded at runtime.

The static pipeline (``scenelint.validation.pipeline``) looks at the whole
corpus at once. ``ContentValidator`` checks one document at a time: its shape
against the pydantic models, and its scene references against identifiers
the caller already knows about. It does no corpus-wide reachability.
"""

from __future__ import annotations

from collections.abc import Collection, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ValidationError

from scenelint.graph.references import collect_scene_references
from scenelint.models import Manifest, Scene
from scenelint.observability.logging import get_logger

log = get_logger(__name__)


class RuntimeIssueKind(StrEnum):
    SCHEMA_ERROR = "schema-error"
    BROKEN_LINK = "broken-link"
    DEAD_END = "dead-end"


@dataclass
class RuntimeIssue:
    """A single problem found in one document."""

    kind: RuntimeIssueKind
    message: str
    scene_id: str | None = None


@dataclass
class RuntimeCheckResult:
    """Outcome of one runtime check."""

    errors: list[RuntimeIssue] = field(default_factory=list)
    warnings: list[RuntimeIssue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    @property
    def messages(self) -> list[str]:
        return [issue.message for issue in self.errors]


def _model_errors(
    model: type[BaseModel], data: Any, scene_id: str | None = None
) -> list[RuntimeIssue]:
    """Validate data against a model, rendering errors as ``loc: msg``."""
    try:
        model.model_validate(data)
    except ValidationError as e:
        issues = []
        for error in e.errors():
            loc = ".".join(str(part) for part in error["loc"])
            msg = error["msg"]
            issues.append(
                RuntimeIssue(
                    kind=RuntimeIssueKind.SCHEMA_ERROR,
                    message=f"{loc}: {msg}" if loc else msg,
                    scene_id=scene_id,
                )
            )
        return issues
    return []


def _hubs(manifest: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    hubs: list[Mapping[str, Any]] = []
    acts = manifest.get("acts")
    if not isinstance(acts, list):
        return hubs
    for act in acts:
        if isinstance(act, Mapping) and isinstance(act.get("hubs"), list):
            hubs.extend(hub for hub in act["hubs"] if isinstance(hub, Mapping))
    return hubs


class ContentValidator:
    """Per-document validation of manifests and scenes."""

    def validate_manifest(self, manifest: Any) -> RuntimeCheckResult:
        """Check a manifest's shape and its starting and ending scene targets.

        The starting scene, every ending's ``sceneId`` and every hub's
        ``convergenceScene`` must be keys of ``sceneIndex``.

        Args:
            manifest: Parsed ``manifest.json`` content.

        Returns:
            RuntimeCheckResult; ``valid`` is False if any issue was found.
        """
        result = RuntimeCheckResult(errors=_model_errors(Manifest, manifest))
        if not isinstance(manifest, Mapping):
            return result

        scene_index = manifest.get("sceneIndex")
        declared = set(scene_index) if isinstance(scene_index, Mapping) else set()

        starting_scene = manifest.get("startingScene")
        if isinstance(starting_scene, str) and starting_scene and starting_scene not in declared:
            result.errors.append(
                RuntimeIssue(
                    kind=RuntimeIssueKind.BROKEN_LINK,
                    message=f"Starting scene '{starting_scene}' is not in the scene index",
                    scene_id=starting_scene,
                )
            )

        endings = manifest.get("endings")
        if isinstance(endings, list):
            for i, ending in enumerate(endings):
                if not isinstance(ending, Mapping):
                    continue
                target = ending.get("sceneId")
                if isinstance(target, str) and target and target not in declared:
                    result.errors.append(
                        RuntimeIssue(
                            kind=RuntimeIssueKind.BROKEN_LINK,
                            message=f"Ending {i} targets unknown scene '{target}'",
                            scene_id=target,
                        )
                    )

        for hub in _hubs(manifest):
            target = hub.get("convergenceScene")
            if isinstance(target, str) and target and target not in declared:
                result.errors.append(
                    RuntimeIssue(
                        kind=RuntimeIssueKind.BROKEN_LINK,
                        message=(
                            f"Convergence scene '{target}' of hub "
                            f"'{hub.get('title', '?')}' is not in the scene index"
                        ),
                        scene_id=target,
                    )
                )

        if not result.valid:
            log.debug("manifest_check_failed", error_count=len(result.errors))
        return result

    def validate_scene(self, scene: Any, known_scene_ids: Collection[str]) -> RuntimeCheckResult:
        """Check a scene's shape and that everything it references is known.

        Args:
            scene: Parsed scene document.
            known_scene_ids: Identifiers the scene may transition to.

        Returns:
            RuntimeCheckResult; broken links are listed in sorted order.
        """
        scene_id = None
        if isinstance(scene, Mapping) and isinstance(scene.get("id"), str):
            scene_id = scene["id"]

        result = RuntimeCheckResult(errors=_model_errors(Scene, scene, scene_id))
        for target in sorted(collect_scene_references(scene)):
            if target in known_scene_ids:
                continue
            label = f"Scene '{scene_id}'" if scene_id else "Scene"
            result.errors.append(
                RuntimeIssue(
                    kind=RuntimeIssueKind.BROKEN_LINK,
                    message=f"{label} references unknown scene '{target}'",
                    scene_id=scene_id,
                )
            )

        choices = scene.get("choices") if isinstance(scene, Mapping) else None
        if not choices:
            result.warnings.append(
                RuntimeIssue(
                    kind=RuntimeIssueKind.DEAD_END,
                    message="Scene has no choices (dead end or ending)",
                    scene_id=scene_id,
                )
            )

        if not result.valid:
            log.debug("scene_check_failed", scene=scene_id, error_count=len(result.errors))
        return result
