"""
ResolveRecordStep — builds the final canonical record from the accepted
values, merges it with any previously known record and scores the pass.
"""

from __future__ import annotations

from vesselscan.core.logging import get_logger
from vesselscan.pipeline.context import CanonicalizationContext, StepResult
from vesselscan.pipeline.errors import StepExecutionError
from vesselscan.pipeline.step import CanonicalizationStep
from vesselscan.processing.resolver import resolve

logger = get_logger(__name__)


class ResolveRecordStep(CanonicalizationStep):
    """Merge with the previous record and attach confidence."""

    name = "resolve_record"
    description = "Merge record with previous scan and score confidence"

    def execute(self, ctx: CanonicalizationContext) -> StepResult:
        started_at = self._now()

        try:
            ctx.record, ctx.confidence = resolve(
                ctx.extraction,
                ctx.accepted_values(),
                ctx.previous_record,
            )
        except Exception as exc:
            raise StepExecutionError(
                f"Record resolution failed: {exc}",
                execution_id=ctx.execution_id,
                step_name=self.name,
            ) from exc

        return self._success(started_at, metadata={
            "fields": len(ctx.record),
            "confidence": ctx.confidence,
        })
