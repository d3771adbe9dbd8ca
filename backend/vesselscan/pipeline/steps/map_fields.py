"""
MapFieldsStep — maps every normalised pair through the rule table and
expands composite fields into per-key candidates.

Candidates are ordered by priority (form field before entity, exact
before fuzzy, then field name) so validation resolves conflicts the same
way on every run.
"""

from __future__ import annotations

from collections import Counter

from vesselscan.core.logging import get_logger
from vesselscan.pipeline.context import CanonicalizationContext, StepResult
from vesselscan.pipeline.errors import StepExecutionError
from vesselscan.pipeline.step import CanonicalizationStep
from vesselscan.processing.mapper import map_pairs

logger = get_logger(__name__)


class MapFieldsStep(CanonicalizationStep):
    """Turn raw pairs into candidate values for canonical keys."""

    name = "map_fields"
    description = "Map provider fields to canonical keys"

    def should_skip(self, ctx: CanonicalizationContext) -> bool:
        return not ctx.pairs

    def execute(self, ctx: CanonicalizationContext) -> StepResult:
        started_at = self._now()

        try:
            candidates = map_pairs(ctx.pairs, ctx.rule_table)
        except Exception as exc:
            raise StepExecutionError(
                f"Field mapping failed: {exc}",
                execution_id=ctx.execution_id,
                step_name=self.name,
            ) from exc

        ctx.candidates = sorted(candidates, key=lambda c: c.priority)

        by_source = Counter(str(c.source) for c in ctx.candidates)
        logger.info(
            "Fields mapped",
            pairs=len(ctx.pairs),
            candidates=len(ctx.candidates),
            by_source=dict(by_source),
        )

        return self._success(started_at, metadata={
            "candidates": len(ctx.candidates),
            "unmapped": len(ctx.pairs) - len({c.raw_source_field for c in ctx.candidates}),
            "by_source": dict(by_source),
        })
