"""Domain models for AI nutrition analysis."""

import math
from dataclasses import dataclass
from enum import Enum

ANALYSIS_PLACEHOLDER = "Analysis not available"
SUMMARY_PLACEHOLDER = "Basic analysis available"
FACT_PLACEHOLDER = "Information not available"
DEFAULT_SCORE = 50
MIN_SCORE = 0
MAX_SCORE = 100


class HealthImpact(str, Enum):
    """Overall health impact of a food."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    CAUTION = "caution"


class SearchType(str, Enum):
    """How the user identified the food."""

    BARCODE = "barcode"
    PRODUCT_NAME = "product_name"
    INGREDIENT = "ingredient"


@dataclass(frozen=True)
class NutritionalFacts:
    """Plain-language nutrition facts."""

    calories: str = FACT_PLACEHOLDER
    macros: str = FACT_PLACEHOLDER
    key_nutrients: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, object]:
        """Return the camelCase JSON shape."""
        return {
            "calories": self.calories,
            "macros": self.macros,
            "keyNutrients": list(self.key_nutrients),
        }


@dataclass(frozen=True)
class SearchAnalysis:
    """Normalized nutrition assessment for a single search."""

    health_impact: HealthImpact
    score: int
    analysis: str
    recommendations: tuple[str, ...]
    warnings: tuple[str, ...]
    benefits: tuple[str, ...]
    nutritional_facts: NutritionalFacts
    simple_summary: str
    is_fallback: bool = False
    fallback_reason: str | None = None
    raw_response: str | None = None

    def to_dict(self) -> dict[str, object]:
        """Return the camelCase JSON shape used by the API and storage."""
        return {
            "healthImpact": self.health_impact.value,
            "score": self.score,
            "analysis": self.analysis,
            "recommendations": list(self.recommendations),
            "warnings": list(self.warnings),
            "benefits": list(self.benefits),
            "nutritionalFacts": self.nutritional_facts.to_dict(),
            "simpleSummary": self.simple_summary,
            "isFallback": self.is_fallback,
            "fallbackReason": self.fallback_reason,
            "rawResponse": self.raw_response,
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "SearchAnalysis":
        """Rebuild an analysis from its stored JSON shape."""
        raw = RawAnalysis.from_payload(
            data,
            raw_response=_optional_text(data.get("rawResponse")),
            is_fallback=data.get("isFallback") is True,
            fallback_reason=_optional_text(data.get("fallbackReason")),
        )
        return normalize_analysis(raw)


@dataclass(frozen=True)
class RawAnalysis:
    """Untrusted analysis fields as decoded from model output."""

    health_impact: object = None
    score: object = None
    analysis: object = None
    recommendations: object = None
    warnings: object = None
    benefits: object = None
    nutritional_facts: object = None
    simple_summary: object = None
    is_fallback: bool = False
    fallback_reason: str | None = None
    raw_response: str | None = None

    @classmethod
    def from_payload(
        cls,
        payload: object,
        *,
        raw_response: str | None = None,
        is_fallback: bool = False,
        fallback_reason: str | None = None,
    ) -> "RawAnalysis":
        """Build a raw record from any decoded JSON value."""
        if not isinstance(payload, dict):
            return cls(
                raw_response=raw_response,
                is_fallback=is_fallback,
                fallback_reason=fallback_reason,
            )
        return cls(
            health_impact=payload.get("healthImpact"),
            score=payload.get("score"),
            analysis=payload.get("analysis"),
            recommendations=payload.get("recommendations"),
            warnings=payload.get("warnings"),
            benefits=payload.get("benefits"),
            nutritional_facts=payload.get("nutritionalFacts"),
            simple_summary=payload.get("simpleSummary"),
            is_fallback=is_fallback,
            fallback_reason=fallback_reason,
            raw_response=raw_response,
        )


def normalize_analysis(raw: RawAnalysis) -> SearchAnalysis:
    """Apply field-level normalizers and return a well-formed analysis."""
    return SearchAnalysis(
        health_impact=normalize_health_impact(raw.health_impact),
        score=normalize_score(raw.score),
        analysis=normalize_text(raw.analysis, ANALYSIS_PLACEHOLDER),
        recommendations=normalize_list(raw.recommendations),
        warnings=normalize_list(raw.warnings),
        benefits=normalize_list(raw.benefits),
        nutritional_facts=normalize_nutritional_facts(raw.nutritional_facts),
        simple_summary=normalize_text(raw.simple_summary, SUMMARY_PLACEHOLDER),
        is_fallback=raw.is_fallback,
        fallback_reason=raw.fallback_reason,
        raw_response=raw.raw_response,
    )


def normalize_health_impact(value: object) -> HealthImpact:
    """Return a valid health impact, defaulting to neutral."""
    if isinstance(value, HealthImpact):
        return value
    if isinstance(value, str):
        try:
            return HealthImpact(value.strip().lower())
        except ValueError:
            return HealthImpact.NEUTRAL
    return HealthImpact.NEUTRAL


def normalize_score(value: object) -> int:
    """Coerce a score to an int clamped to 0-100, defaulting to 50."""
    score = _to_int(value)
    if score is None:
        return DEFAULT_SCORE
    return max(MIN_SCORE, min(MAX_SCORE, score))


def normalize_text(value: object, default: str = ANALYSIS_PLACEHOLDER) -> str:
    """Return stripped text, or the default when missing or blank."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def normalize_list(value: object) -> tuple[str, ...]:
    """Keep only non-blank string entries, in order."""
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(
        item.strip() for item in value if isinstance(item, str) and item.strip()
    )


def normalize_nutritional_facts(value: object) -> NutritionalFacts:
    """Return nutrition facts with placeholders for missing fields."""
    if isinstance(value, NutritionalFacts):
        return value
    if not isinstance(value, dict):
        return NutritionalFacts()
    return NutritionalFacts(
        calories=normalize_text(value.get("calories"), FACT_PLACEHOLDER),
        macros=normalize_text(value.get("macros"), FACT_PLACEHOLDER),
        key_nutrients=normalize_list(value.get("keyNutrients")),
    )


def _to_int(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
        return int(parsed) if math.isfinite(parsed) else None
    return None


def _optional_text(value: object) -> str | None:
    return value if isinstance(value, str) else None
