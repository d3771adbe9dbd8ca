"""
CanonicalizationStep — base class for the engine's steps.

A step reads what earlier steps left on the context, adds its own
output, and returns a StepResult.  Timing, skip handling and error
wrapping live in the engine, so a step only holds field logic.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any

from vesselscan.core.constants import StepStatus
from vesselscan.pipeline.context import CanonicalizationContext, StepResult


class CanonicalizationStep(ABC):
    """
    One stage of a canonicalization pass.

    Subclasses set:
        - name          — short identifier used in logs and step results
        - description   — one-line label for logs

    and implement execute(ctx).  Override should_skip(ctx) when the step
    has nothing to work on.
    """

    name: str = "unnamed_step"
    description: str = "No description"

    @abstractmethod
    def execute(self, ctx: CanonicalizationContext) -> StepResult:
        """Do the work against ``ctx`` and report it as a StepResult."""
        ...

    def should_skip(self, ctx: CanonicalizationContext) -> bool:
        return False

    # ─── Result builders ───────────────────────────────

    def _success(
        self,
        started_at: datetime,
        metadata: dict[str, Any] | None = None,
    ) -> StepResult:
        """COMPLETED result timed from ``started_at``."""
        finished_at = self._now()
        return StepResult(
            step_name=self.name,
            status=StepStatus.COMPLETED,
            started_at=started_at,
            completed_at=finished_at,
            duration_ms=int((finished_at - started_at).total_seconds() * 1000),
            metadata=metadata or {},
        )

    def _skipped(self) -> StepResult:
        at = self._now()
        return StepResult(
            step_name=self.name,
            status=StepStatus.SKIPPED,
            started_at=at,
            completed_at=at,
        )

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)
