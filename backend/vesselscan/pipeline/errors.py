"""
Domain-specific exception hierarchy for the canonicalization engine.

All engine exceptions inherit from CanonicalizationError so callers can
catch broadly or narrowly as needed.  Each exception carries structured
context (step name, execution ID, etc.) for logging/debugging.

Per-field problems (no rule matched, value rejected) are never raised;
they are recorded on the result instead.
"""

from __future__ import annotations


class CanonicalizationError(Exception):
    """Base exception for all engine errors."""

    def __init__(
        self,
        message: str,
        *,
        execution_id: str | None = None,
        step_name: str | None = None,
        details: dict | None = None,
    ) -> None:
        self.execution_id = execution_id
        self.step_name = step_name
        self.details = details or {}
        super().__init__(message)


class RuleTableError(CanonicalizationError):
    """The mapping rule table is malformed.  Raised once, at engine construction."""
    pass


class StepExecutionError(CanonicalizationError):
    """A step failed unexpectedly during execution."""
    pass


class ExtractionError(CanonicalizationError):
    """A provider payload could not be turned into an ExtractionResult."""
    pass
