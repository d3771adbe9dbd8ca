"""
ValidateCandidatesStep — runs every candidate through the semantic
validator and keeps the first accepted value per canonical key.

Rejected candidates are recorded with their reason; the key stays open
for a lower-priority candidate or, failing that, the text fallback.
Inferred candidates (a bare name used as a label) are held back when the
page text labels a value for the same key.
"""

from __future__ import annotations

from vesselscan.core.constants import MatchType
from vesselscan.core.logging import get_logger
from vesselscan.pipeline.context import CanonicalizationContext, Rejection, StepResult
from vesselscan.pipeline.step import CanonicalizationStep
from vesselscan.processing.text_fallback import extract_from_text
from vesselscan.validation.semantic_validator import rejection_reason

logger = get_logger(__name__)


class ValidateCandidatesStep(CanonicalizationStep):
    """Accept or reject candidates key by key."""

    name = "validate_candidates"
    description = "Validate candidate values against canonical field rules"

    def should_skip(self, ctx: CanonicalizationContext) -> bool:
        return not ctx.candidates

    def execute(self, ctx: CanonicalizationContext) -> StepResult:
        started_at = self._now()
        shadowed = 0
        deferred = 0

        for candidate in ctx.candidates:
            if ctx.is_set(candidate.canonical_key):
                shadowed += 1
                continue

            # a guessed name yields to one the page text labels explicitly
            if candidate.match == MatchType.INFERRED and extract_from_text(
                candidate.canonical_key, ctx.text, labelled_only=True,
            ) is not None:
                deferred += 1
                logger.info(
                    "Inferred candidate deferred to labelled text",
                    canonical_key=candidate.canonical_key,
                    field=candidate.raw_source_field,
                )
                continue

            reason = rejection_reason(candidate.canonical_key, candidate.value)
            if reason is not None:
                ctx.rejected.append(Rejection(
                    canonical_key=candidate.canonical_key,
                    value=candidate.value,
                    raw_source_field=candidate.raw_source_field,
                    source=str(candidate.source),
                    reason=reason,
                ))
                logger.info(
                    "Candidate rejected",
                    canonical_key=candidate.canonical_key,
                    field=candidate.raw_source_field,
                    reason=reason,
                )
                continue

            ctx.accept(candidate)

        return self._success(started_at, metadata={
            "accepted": len(ctx.accepted),
            "rejected": len(ctx.rejected),
            "shadowed": shadowed,
            "deferred": deferred,
        })
