"""
CanonicalizationContext — mutable state object carried through every step
of one canonicalize() call.

The context is created per call and discarded afterwards; nothing in it
outlives the call.  Each step reads from and writes to the context, and
the engine turns the final context into a CanonicalizationResult.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

from vesselscan.core.constants import StepStatus
from vesselscan.processing.models import (
    CandidateValue,
    CanonicalRecord,
    ExtractionResult,
    MappingRule,
    RawFieldPair,
)


# ═══════════════════════════════════════════════════════════
#  StepResult
# ═══════════════════════════════════════════════════════════

def _iso(moment: datetime | None) -> str | None:
    return moment.isoformat() if moment else None


@dataclass
class StepResult:
    """What one step did during a pass."""

    step_name: str
    status: StepStatus
    started_at: datetime | None = None
    completed_at: datetime | None = None
    duration_ms: int = 0
    error: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly form; timestamps as ISO 8601 strings."""
        return {
            "step_name": self.step_name,
            "status": str(self.status),
            "started_at": _iso(self.started_at),
            "completed_at": _iso(self.completed_at),
            "duration_ms": self.duration_ms,
            "error": self.error,
            "metadata": self.metadata,
        }


# ═══════════════════════════════════════════════════════════
#  Rejection record
# ═══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Rejection:
    """A candidate the validator turned down."""

    canonical_key: str
    value: Any
    raw_source_field: str | None
    source: str
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "canonical_key": self.canonical_key,
            "value": self.value,
            "raw_source_field": self.raw_source_field,
            "source": self.source,
            "reason": self.reason,
        }


# ═══════════════════════════════════════════════════════════
#  CanonicalizationContext
# ═══════════════════════════════════════════════════════════

@dataclass
class CanonicalizationContext:
    """
    Carries all state between steps of one canonicalization pass.

    Populated progressively: normalisation fills ``pairs`` and mapping fills
    ``candidates``.  Validation and the text fallback fill ``accepted``;
    resolution sets ``record`` and ``confidence``.
    """

    # ─── Inputs (set at init) ──────────────────────────
    extraction: ExtractionResult
    rule_table: tuple[MappingRule, ...]
    previous_record: Mapping[str, Any] | None = None
    execution_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    # ─── Normalisation / mapping ───────────────────────
    pairs: list[RawFieldPair] = field(default_factory=list)
    candidates: list[CandidateValue] = field(default_factory=list)

    # ─── Validation ────────────────────────────────────
    # accepted: canonical key → the candidate that won it
    accepted: dict[str, CandidateValue] = field(default_factory=dict)
    rejected: list[Rejection] = field(default_factory=list)
    fallback_attempted: list[str] = field(default_factory=list)

    # ─── Resolution ────────────────────────────────────
    record: CanonicalRecord = field(default_factory=dict)
    confidence: float = 0.0

    # ─── Execution tracking ────────────────────────────
    step_results: list[StepResult] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)

    # ─── Helpers ───────────────────────────────────────

    @property
    def text(self) -> str:
        return self.extraction.text_content

    def is_set(self, canonical_key: str) -> bool:
        """True once a validated value exists for the key."""
        return canonical_key in self.accepted

    def accept(self, candidate: CandidateValue) -> bool:
        """
        Store a validated candidate.

        Returns False, leaving the existing value untouched, when the key is
        already set: values are never silently overwritten.
        """
        if candidate.canonical_key in self.accepted:
            return False
        self.accepted[candidate.canonical_key] = candidate
        return True

    def accepted_values(self) -> CanonicalRecord:
        return {key: c.value for key, c in self.accepted.items()}

    def add_note(self, note: str) -> None:
        """Record a non-fatal observation for the caller."""
        self.notes.append(note)

    def to_summary_dict(self) -> dict[str, Any]:
        """Compact summary for logging."""
        return {
            "execution_id": self.execution_id,
            "pairs": len(self.pairs),
            "candidates": len(self.candidates),
            "accepted": len(self.accepted),
            "rejected": len(self.rejected),
            "fallback_attempted": len(self.fallback_attempted),
            "steps_completed": len(self.step_results),
            "confidence": self.confidence,
        }
