"""AI nutrition analysis with best-effort response parsing."""

import asyncio
import json
import logging
import re
from dataclasses import dataclass
from typing import Protocol

from food_catalog.domain.analysis import (
    HealthImpact,
    RawAnalysis,
    SearchAnalysis,
    SearchType,
    normalize_analysis,
)
from food_catalog.domain.health_profile import HealthProfile
from food_catalog.services.prompts import build_analysis_prompt

TEXT_FALLBACK_REASON = "text parsing fallback used"
SERVICE_UNAVAILABLE_REASON = "service unavailable"
TEXT_FALLBACK_SCORE = 60

_FENCE_START = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_END = re.compile(r"\s*```$")

# (keywords, bucket, message); a rule fires when any keyword appears.
TextRule = tuple[tuple[str, ...], str, str]
TEXT_RULES: tuple[TextRule, ...] = (
    (("good for you", "healthy"), "benefits", "Good for your health"),
    (("sugar", "sweet"), "warnings", "High in sugar"),
    (("salt", "sodium"), "warnings", "High in salt"),
    (("energy",), "benefits", "Gives you energy"),
    (("vitamins", "nutrients"), "benefits", "Contains vitamins your body needs"),
)

_logger = logging.getLogger(__name__)


class GenerationError(RuntimeError):
    """Raised when the text-generation endpoint returns an unusable reply."""


class GenerativeClient(Protocol):
    """Interface for a text-generation model."""

    async def generate_text(self, prompt: str) -> str:
        """Return the first generated text candidate for a prompt."""


@dataclass
class AnalysisService:
    """Turn a food search into a normalized analysis, never raising."""

    client: GenerativeClient
    timeout_seconds: float | None = None

    async def analyze(
        self,
        search_query: str,
        search_type: SearchType,
        profile: HealthProfile | None = None,
    ) -> SearchAnalysis:
        """Analyze a search query, falling back to static content on failure."""
        _logger.info(
            "Starting analysis: query=%s type=%s personalized=%s",
            search_query,
            search_type.value,
            profile is not None,
        )
        prompt = build_analysis_prompt(search_query, search_type, profile)
        try:
            response_text = await asyncio.wait_for(
                self.client.generate_text(prompt), timeout=self.timeout_seconds
            )
        except Exception as exc:
            _logger.warning(
                "Analysis request failed, using fallback: query=%s error=%s: %s",
                search_query,
                type(exc).__name__,
                exc,
            )
            return fallback_analysis(search_query)

        _logger.info(
            "Analysis request completed: query=%s response_length=%s",
            search_query,
            len(response_text),
        )
        return normalize_analysis(parse_model_response(response_text, search_query))


def parse_model_response(response_text: str, search_query: str) -> RawAnalysis:
    """Parse model output as JSON, repairing or falling back to text rules."""
    cleaned = strip_code_fence(response_text)
    payload = _load_object(cleaned)
    if payload is not None:
        _logger.info("Parsed analysis response directly")
        return RawAnalysis.from_payload(payload, raw_response=response_text)

    repaired = repair_truncated_json(cleaned)
    if repaired is not None:
        payload = _load_object(repaired)
        if payload is not None:
            _logger.info("Parsed analysis response after brace repair")
            return RawAnalysis.from_payload(payload, raw_response=response_text)

    _logger.warning(
        "Analysis response is not JSON, using text parsing: %s", response_text[:200]
    )
    return parse_text_response(response_text, search_query)


def strip_code_fence(text: str) -> str:
    """Remove a surrounding markdown code fence, if present."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = _FENCE_END.sub("", _FENCE_START.sub("", cleaned))
    return cleaned


def repair_truncated_json(text: str) -> str | None:
    """Return the text from the first brace with missing braces closed."""
    start = text.find("{")
    if start == -1:
        return None
    fragment = text[start:]
    if not fragment.endswith("}"):
        missing = fragment.count("{") - fragment.count("}")
        if missing > 0:
            fragment += "}" * missing
    return fragment


def parse_text_response(
    response_text: str,
    search_query: str,
    rules: tuple[TextRule, ...] = TEXT_RULES,
) -> RawAnalysis:
    """Build an analysis from free text using keyword rules."""
    lowered = response_text.lower()
    found: dict[str, list[str]] = {"benefits": [], "warnings": []}
    for keywords, bucket, message in rules:
        if any(keyword in lowered for keyword in keywords):
            found[bucket].append(message)

    return RawAnalysis(
        health_impact=HealthImpact.NEUTRAL.value,
        score=TEXT_FALLBACK_SCORE,
        analysis=response_text,
        recommendations=[
            "Eat in normal portions",
            "Balance with other healthy foods",
        ],
        warnings=found["warnings"],
        benefits=found["benefits"] or ["Contains nutrients your body needs"],
        simple_summary=(
            f"Basic info about {search_query} - check the full analysis for details."
        ),
        is_fallback=True,
        fallback_reason=TEXT_FALLBACK_REASON,
        raw_response=response_text,
    )


def fallback_analysis(search_query: str) -> SearchAnalysis:
    """Return the static analysis used when the model is unreachable."""
    return normalize_analysis(
        RawAnalysis(
            health_impact=HealthImpact.NEUTRAL.value,
            score=50,
            analysis=(
                f'We\'re having trouble getting detailed info about "{search_query}" '
                "right now. This is a basic analysis - for the best advice, "
                "try again in a moment."
            ),
            recommendations=[
                "Eat in normal portions",
                "Check if you have any allergies",
                "Balance with other healthy foods",
            ],
            warnings=[],
            benefits=[
                "Gives your body energy",
                "Contains vitamins your body needs",
            ],
            nutritional_facts={
                "calories": "Depends on how much you eat",
                "macros": "Check the food label for details",
                "keyNutrients": ["Vitamins and minerals your body needs"],
            },
            simple_summary=(
                "This food gives you energy and nutrients, "
                "but we need more info for better advice."
            ),
            is_fallback=True,
            fallback_reason=SERVICE_UNAVAILABLE_REASON,
        )
    )


def _load_object(text: str) -> dict[str, object] | None:
    try:
        payload = json.loads(text)
    except (ValueError, RecursionError):
        return None
    return payload if isinstance(payload, dict) else None
