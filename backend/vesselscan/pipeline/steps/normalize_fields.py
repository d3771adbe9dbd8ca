"""
NormalizeFieldsStep — flattens the provider output into raw field pairs.

Form fields come first, entities after them (entities below the configured
confidence floor are dropped).  Pairs whose name or value normalises to an
empty string carry no information and are discarded here.
"""

from __future__ import annotations

from vesselscan.core.config import settings
from vesselscan.core.logging import get_logger
from vesselscan.pipeline.context import CanonicalizationContext, StepResult
from vesselscan.pipeline.step import CanonicalizationStep
from vesselscan.processing.normalizer import normalize

logger = get_logger(__name__)


class NormalizeFieldsStep(CanonicalizationStep):
    """Collect and clean raw (name, value) observations."""

    name = "normalize_fields"
    description = "Normalise provider field names and values"

    def should_skip(self, ctx: CanonicalizationContext) -> bool:
        return not ctx.extraction.form_fields and not ctx.extraction.entities

    def execute(self, ctx: CanonicalizationContext) -> StepResult:
        started_at = self._now()

        raw_pairs = ctx.extraction.raw_pairs(settings.MIN_ENTITY_CONFIDENCE)
        kept = []
        dropped = 0
        for pair in raw_pairs:
            norm_name, norm_value = normalize(pair.field_name, pair.field_value)
            if not norm_name or not norm_value:
                dropped += 1
                continue
            kept.append(pair)

        ctx.pairs = kept
        if dropped:
            logger.info("Empty field pairs dropped", dropped=dropped)
            ctx.add_note(f"{dropped} field(s) with an empty name or value ignored")

        return self._success(started_at, metadata={
            "pairs": len(kept),
            "dropped_empty": dropped,
        })
