"""
Insight extraction.

Asks the generative service for a JSON list of insights; when that fails,
falls back to phrase patterns ("key finding: ...", bullet lines).
"""

import math
import re
import secrets
import time

from shared.logging import get_logger

from ..models.insight import ExtractionMethod, ImportanceLevel, InsightCategory, RichInsight
from ..models.question import ConfidenceLevel
from ..parsing import parse_json_object
from .prompts import build_insight_extraction_prompt

log = get_logger("explorer", "insights.extractor")

MIN_CONTENT_LENGTH = 100
DEFAULT_INSIGHT_MODEL = "claude-haiku-4-5"

IMPORTANCE_BONUS = {
    ImportanceLevel.CRITICAL: 4,
    ImportanceLevel.HIGH: 3,
    ImportanceLevel.MEDIUM: 2,
    ImportanceLevel.LOW: 1,
}
CONFIDENCE_BONUS = {
    ConfidenceLevel.VERIFIED: 2.0,
    ConfidenceLevel.HIGH: 1.5,
    ConfidenceLevel.MEDIUM: 1.0,
    ConfidenceLevel.LOW: 0.5,
    ConfidenceLevel.SPECULATIVE: 0.0,
}

FALLBACK_PATTERNS = (
    re.compile(r"(?:discovered|found|realized|insight|key finding)[:\s]+(.+?)[\n.]", re.IGNORECASE),
    re.compile(r"(?:important|crucial|significant)[:\s]+(.+?)[\n.]", re.IGNORECASE),
    re.compile(r"^[-•]\s*(.+?)$", re.MULTILINE),
)


def _insight_id(stage_number: int, index: int) -> str:
    return f"insight_{int(time.time() * 1000)}_{stage_number}_{index}_{secrets.token_hex(2)}"


def _enum_or_default(enum_cls, value, default):
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        return default


def _string_list(value) -> list[str]:
    """Non-empty items of a list field; any other shape counts as empty."""
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item]


def insight_quality_score(
    importance: ImportanceLevel, evidence_count: int, confidence: ConfidenceLevel
) -> float:
    score = 5 + IMPORTANCE_BONUS[importance] + min(evidence_count, 3) + CONFIDENCE_BONUS[confidence]
    # Half-up rounding, so 7.5 scores 8
    return min(float(math.floor(score + 0.5)), 10.0)


def insight_tags(
    category: InsightCategory, importance: ImportanceLevel, confidence: ConfidenceLevel
) -> list[str]:
    tags = [category.value]
    if importance in (ImportanceLevel.CRITICAL, ImportanceLevel.HIGH):
        tags.append("priority")
    if confidence in (ConfidenceLevel.LOW, ConfidenceLevel.SPECULATIVE):
        tags.append("needs-verification")
    return tags


class InsightExtractor:
    """
    Extracts structured insights from stage output.

    Usage:
        extractor = InsightExtractor(client)
        insights = await extractor.extract_insights(text, "discovering", 1)
    """

    def __init__(self, client=None, model: str = DEFAULT_INSIGHT_MODEL, max_tokens: int = 2000):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens

    async def extract_insights(
        self, content: str, stage_type: str, stage_number: int
    ) -> list[RichInsight]:
        if len(content) < MIN_CONTENT_LENGTH:
            log.warning("insights.extractor.content_too_short", chars=len(content))
            return []

        if self.client is None:
            return self.extract_with_patterns(content, stage_type, stage_number)

        try:
            response = await self.client.execute(
                build_insight_extraction_prompt(content, stage_type),
                streaming_enabled=False,
                model=self.model,
                max_tokens=self.max_tokens,
            )
            data = parse_json_object(response.content, "insights")
            insights = [
                self._to_rich_insight(raw, stage_type, stage_number, index)
                for index, raw in enumerate(data["insights"])
                if isinstance(raw, dict) and str(raw.get("insight") or "").strip()
            ]
        except Exception as e:
            log.warning(
                "insights.extractor.llm_failed",
                stage_type=stage_type,
                error=str(e),
            )
            return self.extract_with_patterns(content, stage_type, stage_number)

        log.info(
            "insights.extractor.extracted",
            stage_type=stage_type,
            count=len(insights),
            method=ExtractionMethod.LLM.value,
        )
        return insights

    def _to_rich_insight(
        self, raw: dict, stage_type: str, stage_number: int, index: int
    ) -> RichInsight:
        category = _enum_or_default(InsightCategory, raw.get("category"), InsightCategory.DISCOVERY)
        importance = _enum_or_default(ImportanceLevel, raw.get("importance"), ImportanceLevel.MEDIUM)
        confidence = _enum_or_default(ConfidenceLevel, raw.get("confidence"), ConfidenceLevel.MEDIUM)
        evidence = _string_list(raw.get("evidence"))
        return RichInsight(
            id=_insight_id(stage_number, index),
            insight=str(raw["insight"]).strip(),
            category=category,
            importance=importance,
            confidence=confidence,
            stage_type=stage_type,
            stage_number=stage_number,
            evidence=evidence,
            assumptions=_string_list(raw.get("assumptions")),
            extraction_method=ExtractionMethod.LLM,
            quality_score=insight_quality_score(importance, len(evidence), confidence),
            tags=insight_tags(category, importance, confidence),
        )

    def extract_with_patterns(
        self, content: str, stage_type: str, stage_number: int
    ) -> list[RichInsight]:
        """Phrase-pattern fallback; every hit gets default classification."""
        seen = set()
        insights = []
        for pattern in FALLBACK_PATTERNS:
            for match in pattern.finditer(content):
                text = match.group(1).strip()
                if not 20 < len(text) < 300 or text in seen:
                    continue
                seen.add(text)
                insights.append(
                    RichInsight(
                        id=_insight_id(stage_number, len(insights)),
                        insight=text,
                        category=InsightCategory.DISCOVERY,
                        importance=ImportanceLevel.MEDIUM,
                        confidence=ConfidenceLevel.MEDIUM,
                        stage_type=stage_type,
                        stage_number=stage_number,
                        extraction_method=ExtractionMethod.PATTERN,
                        quality_score=5.0,
                        tags=[InsightCategory.DISCOVERY.value],
                    )
                )

        log.info(
            "insights.extractor.extracted",
            stage_type=stage_type,
            count=len(insights),
            method=ExtractionMethod.PATTERN.value,
        )
        return insights
