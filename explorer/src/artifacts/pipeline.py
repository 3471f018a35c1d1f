"""
Artifact extraction pipeline.

Turns one stage's output into typed, validated artifacts. The generative
service is asked for a strict JSON listing; if that call or its parsing fails
for any reason, fenced code blocks are pulled out of the text instead.
"""

import re
from collections import Counter
from dataclasses import dataclass, field

from shared.logging import get_logger

from ..models.artifact import (
    ArtifactMetadata,
    ArtifactType,
    ArtifactValidation,
    Completeness,
    RichArtifact,
    generate_artifact_id,
)
from ..parsing import parse_json_object
from .metadata import (
    detect_format,
    extract_tags,
    generate_usage_instructions,
    infer_language,
    infer_target_audience,
    normalize_artifact_type,
    normalize_completeness,
)
from .prompts import build_artifact_extraction_prompt
from .validation import calculate_quality_score, validate_code, validate_non_code

log = get_logger("explorer", "artifacts.pipeline")

CODE_BLOCK_PATTERN = re.compile(r"```(\w+)?\n([\s\S]+?)```")

DEFAULT_EXTRACTION_MODEL = "claude-sonnet-4-5"
DEFAULT_EXTRACTION_MAX_TOKENS = 8000


@dataclass
class ExtractionStats:
    total_found: int = 0
    by_type: dict[str, int] = field(default_factory=dict)
    validated_count: int = 0
    average_quality: float = 0.0

    def to_dict(self) -> dict:
        return {
            "total_found": self.total_found,
            "by_type": self.by_type,
            "validated_count": self.validated_count,
            "average_quality": self.average_quality,
        }


def extraction_stats(artifacts: list[RichArtifact]) -> ExtractionStats:
    counts = Counter(artifact.type for artifact in artifacts)
    by_type = {artifact_type.value: counts.get(artifact_type, 0) for artifact_type in ArtifactType}
    scores = [artifact.quality_score for artifact in artifacts]
    return ExtractionStats(
        total_found=len(artifacts),
        by_type=by_type,
        validated_count=sum(1 for a in artifacts if a.validation.validated),
        average_quality=round(sum(scores) / len(scores), 2) if scores else 0.0,
    )


def enrich_artifact(
    extracted: dict,
    stage_number: int,
    stage_type: str,
    index: int = 0,
) -> RichArtifact:
    """Classify, validate and describe one extracted artifact."""
    content = str(extracted.get("content") or "")
    artifact_type = normalize_artifact_type(extracted.get("type"))
    completeness = normalize_completeness(extracted.get("completeness"))
    language = extracted.get("language") or None

    if artifact_type == ArtifactType.CODE:
        language = language or infer_language(content)
        outcome = validate_code(content, language or "unknown")
        method = "syntax-check"
    else:
        outcome = validate_non_code(content, artifact_type)
        method = "structure-check"

    validation = ArtifactValidation(
        completeness=completeness,
        validated=True,
        quality_score=calculate_quality_score(
            len(outcome.errors), len(outcome.warnings), completeness
        ),
        validation_method=method,
        validation_notes=extracted.get("notes") or outcome.notes,
        syntax_valid=outcome.syntax_valid,
        errors=tuple(outcome.errors),
        warnings=tuple(outcome.warnings),
    )
    metadata = ArtifactMetadata(
        language=language,
        format=detect_format(content, artifact_type, language),
        size=len(content),
        target_audience=infer_target_audience(content, artifact_type),
        usage_instructions=generate_usage_instructions(content, artifact_type),
        tags=extract_tags(content, artifact_type),
    )
    return RichArtifact(
        id=generate_artifact_id(index),
        type=artifact_type,
        title=str(extracted.get("title") or f"Untitled {artifact_type.value}"),
        content=content,
        stage_number=stage_number,
        stage_type=stage_type,
        metadata=metadata,
        validation=validation,
    )


def fallback_extraction(content: str, stage_number: int, stage_type: str) -> list[RichArtifact]:
    """One unvalidated code artifact per fenced block; never raises."""
    artifacts = []
    for index, match in enumerate(CODE_BLOCK_PATTERN.finditer(content or "")):
        language = match.group(1) or "text"
        code = match.group(2)
        artifacts.append(
            RichArtifact(
                id=generate_artifact_id(index),
                type=ArtifactType.CODE,
                title=f"Code Snippet ({language})",
                content=code,
                stage_number=stage_number,
                stage_type=stage_type,
                metadata=ArtifactMetadata(language=language, size=len(code)),
                validation=ArtifactValidation(
                    completeness=Completeness.PARTIAL,
                    validated=False,
                    quality_score=calculate_quality_score(0, 0, Completeness.PARTIAL),
                    validation_method="pattern-match",
                    validation_notes="Extracted via pattern matching - not validated",
                ),
            )
        )
    log.info("artifacts.pipeline.fallback", stage_number=stage_number, found=len(artifacts))
    return artifacts


class ArtifactExtractionPipeline:
    """
    Extracts artifacts from stage output.

    Usage:
        pipeline = ArtifactExtractionPipeline(client)
        artifacts = await pipeline.extract_artifacts(stage.result, 8, "building")
    """

    def __init__(
        self,
        client=None,
        model: str = DEFAULT_EXTRACTION_MODEL,
        max_tokens: int = DEFAULT_EXTRACTION_MAX_TOKENS,
    ):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens

    async def extract_artifacts(
        self,
        content: str,
        stage_number: int,
        stage_type: str = "building",
    ) -> list[RichArtifact]:
        if self.client is None:
            return fallback_extraction(content, stage_number, stage_type)

        try:
            response = await self.client.execute(
                build_artifact_extraction_prompt(content),
                streaming_enabled=False,
                model=self.model,
                max_tokens=self.max_tokens,
            )
            data = parse_json_object(response.content, "artifacts")
            artifacts = [
                enrich_artifact(raw, stage_number, stage_type, index)
                for index, raw in enumerate(data["artifacts"])
                if isinstance(raw, dict) and raw.get("content")
            ]
        except Exception as e:
            log.warning(
                "artifacts.pipeline.extraction_failed",
                stage_number=stage_number,
                error=str(e),
            )
            return fallback_extraction(content, stage_number, stage_type)

        stats = extraction_stats(artifacts)
        log.info(
            "artifacts.pipeline.extracted",
            stage_number=stage_number,
            total=stats.total_found,
            by_type={k: v for k, v in stats.by_type.items() if v},
            average_quality=stats.average_quality,
        )
        return artifacts
