"""
TextFallbackStep — fills canonical keys that are still unset by searching
the page text.  Keys that already hold an accepted value are never touched.
"""

from __future__ import annotations

from vesselscan.core.constants import CandidateSource, FieldOrigin, MatchType
from vesselscan.core.logging import get_logger
from vesselscan.pipeline.context import CanonicalizationContext, StepResult
from vesselscan.pipeline.step import CanonicalizationStep
from vesselscan.processing.models import CandidateValue
from vesselscan.processing.text_fallback import FALLBACK_RULES, extract_from_text

logger = get_logger(__name__)


class TextFallbackStep(CanonicalizationStep):
    """Regex extraction from raw text for missing keys."""

    name = "text_fallback"
    description = "Extract missing fields from page text"

    def should_skip(self, ctx: CanonicalizationContext) -> bool:
        return not ctx.text.strip()

    def execute(self, ctx: CanonicalizationContext) -> StepResult:
        started_at = self._now()
        filled: list[str] = []

        for canonical_key in FALLBACK_RULES:
            if ctx.is_set(canonical_key):
                continue
            ctx.fallback_attempted.append(canonical_key)

            value = extract_from_text(canonical_key, ctx.text)
            if value is None:
                continue

            ctx.accept(CandidateValue(
                canonical_key=canonical_key,
                value=value,
                source=CandidateSource.TEXT_FALLBACK,
                match=MatchType.TEXT,
                origin=FieldOrigin.TEXT,
            ))
            filled.append(canonical_key)

        if filled:
            logger.info("Fields recovered from text", keys=filled)
        missed = [key for key in ctx.fallback_attempted if key not in filled]
        if missed:
            ctx.add_note("Not found in page text: " + ", ".join(missed))

        return self._success(started_at, metadata={
            "attempted": list(ctx.fallback_attempted),
            "filled": filled,
        })
