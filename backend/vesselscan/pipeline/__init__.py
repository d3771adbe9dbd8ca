"""
Canonicalization Engine — turns document-understanding provider output
into a canonical vessel registration record.

This package provides the step-based engine that runs an extraction
through normalisation, rule-table mapping, composite decomposition,
semantic validation, text fallback and merge resolution, with per-step
logging and error handling.
"""

from vesselscan.pipeline.engine import (
    CanonicalizationEngine,
    CanonicalizationResult,
    detect_document_type,
)
from vesselscan.pipeline.context import CanonicalizationContext, StepResult
from vesselscan.pipeline.flow import default_flow, validate_rule_table
from vesselscan.pipeline.step import CanonicalizationStep

__all__ = [
    "CanonicalizationEngine",
    "CanonicalizationResult",
    "CanonicalizationContext",
    "CanonicalizationStep",
    "StepResult",
    "default_flow",
    "detect_document_type",
    "validate_rule_table",
]
