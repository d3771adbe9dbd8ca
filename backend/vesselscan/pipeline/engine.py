"""
CanonicalizationEngine — the orchestrator that runs steps sequentially.

Responsibilities:
    - Validate the rule table once, at construction
    - Build a fresh context per call
    - Execute each step with timing, logging, and error handling
    - Return a complete CanonicalizationResult

The engine holds only immutable configuration (rule table, step list),
so one instance can serve any number of calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping

import structlog

from vesselscan.core.constants import DocumentType
from vesselscan.pipeline.context import CanonicalizationContext
from vesselscan.pipeline.errors import CanonicalizationError, StepExecutionError
from vesselscan.pipeline.flow import default_flow, validate_rule_table
from vesselscan.pipeline.step import CanonicalizationStep
from vesselscan.processing.models import CanonicalRecord, ExtractionResult, MappingRule
from vesselscan.processing.rules import RULE_TABLE
from vesselscan.validation.vocabulary import LIST_KEYS, REQUIRED_KEYS


@dataclass
class CanonicalizationResult:
    """Final outcome of one canonicalization pass."""

    execution_id: str
    record: CanonicalRecord
    confidence: float
    empty: bool = False
    document_type: str = DocumentType.AUTO_DETECT
    provenance: dict[str, dict[str, Any]] = field(default_factory=dict)
    rejected: list[dict[str, Any]] = field(default_factory=list)
    fallback_attempted: list[str] = field(default_factory=list)
    missing_keys: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)
    step_results: list[dict[str, Any]] = field(default_factory=list)
    total_duration_ms: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "execution_id": self.execution_id,
            "record": self.record,
            "confidence": self.confidence,
            "empty": self.empty,
            "document_type": str(self.document_type),
            "provenance": self.provenance,
            "rejected": self.rejected,
            "fallback_attempted": self.fallback_attempted,
            "missing_keys": self.missing_keys,
            "suggestions": self.suggestions,
            "notes": self.notes,
            "step_results": self.step_results,
            "total_duration_ms": self.total_duration_ms,
        }


# ═══════════════════════════════════════════════════════════
#  Document classification & suggestions
# ═══════════════════════════════════════════════════════════

def detect_document_type(text: str) -> DocumentType:
    """Coarse document type from keywords in the page text."""
    lowered = (text or "").lower()
    if "registration" in lowered and ("yacht" in lowered or "vessel" in lowered):
        return DocumentType.YACHT_REGISTRATION
    if "insurance" in lowered or "policy" in lowered:
        return DocumentType.INSURANCE_CERTIFICATE
    if "certificate" in lowered and "competency" in lowered:
        return DocumentType.CREW_LICENSE
    return DocumentType.AUTO_DETECT


def build_suggestions(
    extraction: ExtractionResult,
    record: Mapping[str, Any],
    missing_keys: list[str],
) -> list[str]:
    """Short human-readable hints for whoever reviews the scan."""
    suggestions: list[str] = []
    if extraction.form_fields:
        suggestions.append(
            f"Extracted {len(extraction.form_fields)} form fields ready for auto-population"
        )
    if extraction.entities:
        suggestions.append(f"Identified {len(extraction.entities)} key entities from the document")
    if record:
        suggestions.append(f"Mapped {len(record)} vessel fields")
    if missing_keys:
        suggestions.append("Review and fill in: " + ", ".join(missing_keys))
    if not suggestions:
        suggestions.append(
            "Document processed - review extracted data and manually populate required fields"
        )
    return suggestions


# ═══════════════════════════════════════════════════════════
#  Engine
# ═══════════════════════════════════════════════════════════

class CanonicalizationEngine:
    """
    Runs the canonicalization steps against one ExtractionResult at a time.

    Usage::

        engine = CanonicalizationEngine()
        result = engine.canonicalize(extraction)
        result = engine.canonicalize(next_extraction, previous_record=result.record)

    Raises RuleTableError on construction if the rule table is malformed.
    """

    def __init__(
        self,
        rule_table: Iterable[MappingRule] = RULE_TABLE,
        steps: Iterable[CanonicalizationStep] | None = None,
    ) -> None:
        self.rule_table = validate_rule_table(rule_table)
        self.steps: tuple[CanonicalizationStep, ...] = tuple(
            steps if steps is not None else default_flow()
        )
        self.logger = structlog.get_logger("vesselscan.engine")

    def canonicalize(
        self,
        extraction: ExtractionResult | Mapping[str, Any],
        previous_record: Mapping[str, Any] | None = None,
    ) -> CanonicalizationResult:
        """
        Turn provider output into a canonical record.

        Args:
            extraction: ExtractionResult, or a mapping with its fields.
            previous_record: Record from an earlier scan of the same vessel.
                             Its scalar values win; list values are unioned.
        """
        started_at = datetime.now(timezone.utc)

        if not isinstance(extraction, ExtractionResult):
            extraction = ExtractionResult.model_validate(extraction)

        ctx = CanonicalizationContext(
            extraction=extraction,
            rule_table=self.rule_table,
            previous_record=previous_record,
        )

        log = self.logger.bind(execution_id=ctx.execution_id)
        log.info(
            "Canonicalization started",
            form_fields=len(extraction.form_fields),
            entities=len(extraction.entities),
            text_length=len(extraction.text_content),
            has_previous=previous_record is not None,
        )

        self.run_steps(ctx, log)

        completed_at = datetime.now(timezone.utc)
        result = self._build_result(ctx, started_at, completed_at)

        log.info(
            "Canonicalization finished",
            fields=len(result.record),
            summary=ctx.to_summary_dict(),
            document_type=str(result.document_type),
            duration_ms=result.total_duration_ms,
        )
        return result

    def run_steps(
        self,
        ctx: CanonicalizationContext,
        log: structlog.BoundLogger | None = None,
    ) -> CanonicalizationContext:
        """
        Execute the step list against a context.

        Can be called directly with a pre-built context for testing.
        """
        log = log or self.logger.bind(execution_id=ctx.execution_id)

        for index, step in enumerate(self.steps):
            step_log = log.bind(
                step_name=step.name,
                step_index=index + 1,
                step_description=step.description,
            )

            if step.should_skip(ctx):
                step_log.debug("Step skipped")
                ctx.step_results.append(step._skipped())
                continue

            step_log.debug(f"Step {index + 1}/{len(self.steps)}: {step.description}")

            try:
                result = step.execute(ctx)
            except CanonicalizationError:
                raise
            except Exception as exc:
                step_log.exception("Unexpected error in step", error=str(exc))
                raise StepExecutionError(
                    f"Step '{step.name}' failed: {exc}",
                    execution_id=ctx.execution_id,
                    step_name=step.name,
                ) from exc

            ctx.step_results.append(result)
            step_log.debug(
                "Step completed",
                duration_ms=result.duration_ms,
                metadata=result.metadata,
            )

        return ctx

    def _build_result(
        self,
        ctx: CanonicalizationContext,
        started_at: datetime,
        completed_at: datetime,
    ) -> CanonicalizationResult:
        record = ctx.record
        previous = ctx.previous_record or {}
        provenance: dict[str, dict[str, Any]] = {}
        for key, candidate in ctx.accepted.items():
            # previously known scalars win; this pass did not produce them
            if key not in LIST_KEYS and previous.get(key) is not None:
                continue
            provenance[key] = {
                "source": str(candidate.source),
                "raw_source_field": candidate.raw_source_field,
                "match": str(candidate.match),
                "origin": str(candidate.origin),
            }
        missing = [key for key in REQUIRED_KEYS if record.get(key) is None]

        return CanonicalizationResult(
            execution_id=ctx.execution_id,
            record=record,
            confidence=ctx.confidence,
            empty=ctx.extraction.is_empty,
            document_type=detect_document_type(ctx.text),
            provenance=provenance,
            rejected=[r.to_dict() for r in ctx.rejected],
            fallback_attempted=list(ctx.fallback_attempted),
            missing_keys=missing,
            suggestions=build_suggestions(ctx.extraction, record, missing),
            notes=list(ctx.notes),
            step_results=[sr.to_dict() for sr in ctx.step_results],
            total_duration_ms=int((completed_at - started_at).total_seconds() * 1000),
        )
