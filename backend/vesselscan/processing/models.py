"""
Data model for one canonicalization pass.

ExtractionResult is the input contract (validated with pydantic, owned by
the caller).  RawFieldPair and CandidateValue live only inside a single
call.  MappingRule instances are defined once and shared read-only.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Union

from pydantic import BaseModel, Field, field_validator

from vesselscan.core.constants import (
    CandidateSource,
    CompositeKind,
    FieldOrigin,
    MatchType,
    RuleKind,
)

# A canonical record is a plain mapping of canonical key → typed value.
CanonicalRecord = dict[str, Any]

# Predicate patterns receive (norm_name, norm_value).
RulePredicate = Callable[[str, str], bool]
RulePattern = Union[str, RulePredicate]


# ═══════════════════════════════════════════════════════════
#  Provider input
# ═══════════════════════════════════════════════════════════

class ProviderEntity(BaseModel):
    """One entity recognised by the document-understanding provider."""

    type: str = ""
    value: str = ""
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)

    @field_validator("type", "value", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        return "" if value is None else str(value)

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, value: Any) -> float:
        # Some providers report percentages (95) instead of fractions (0.95).
        try:
            confidence = float(value)
        except (TypeError, ValueError):
            return 0.0
        if math.isnan(confidence):
            return 0.0
        if confidence > 1.0:
            confidence /= 100.0
        return min(max(confidence, 0.0), 1.0)


class ExtractionResult(BaseModel):
    """Materialised provider output for one scanned document."""

    form_fields: dict[str, str] = Field(default_factory=dict)
    entities: list[ProviderEntity] = Field(default_factory=list)
    text_content: str = ""

    model_config = {"frozen": True}

    @field_validator("form_fields", mode="before")
    @classmethod
    def _stringify_values(cls, value: Any) -> Any:
        # Providers occasionally hand back numbers or nulls as field values.
        if isinstance(value, dict):
            return {
                str(k): "" if v is None else str(v)
                for k, v in value.items()
            }
        return value

    @field_validator("text_content", mode="before")
    @classmethod
    def _none_text(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def is_empty(self) -> bool:
        """True when the provider returned nothing at all."""
        return not self.form_fields and not self.entities and not self.text_content.strip()

    def raw_pairs(self, min_entity_confidence: float = 0.0) -> list[RawFieldPair]:
        """
        Flatten form fields and entities into raw (name, value) observations.

        Form fields come first; entities follow and are skipped when their
        confidence is below ``min_entity_confidence``.
        """
        pairs = [
            RawFieldPair(name, value, FieldOrigin.FORM_FIELD)
            for name, value in self.form_fields.items()
        ]
        for entity in self.entities:
            if entity.confidence < min_entity_confidence:
                continue
            pairs.append(RawFieldPair(entity.type, entity.value, FieldOrigin.ENTITY))
        return pairs


# ═══════════════════════════════════════════════════════════
#  Per-call transient types
# ═══════════════════════════════════════════════════════════

_MATCH_RANK = {MatchType.EXACT: 0, MatchType.FUZZY: 1, MatchType.INFERRED: 2}


@dataclass(frozen=True)
class RawFieldPair:
    """One upstream key/value observation."""

    field_name: str
    field_value: str
    origin: FieldOrigin = FieldOrigin.FORM_FIELD


@dataclass(frozen=True)
class CandidateValue:
    """
    A proposed value for one canonical key, not yet validated.

    When ``composite`` is set the candidate is a decomposition signal:
    ``value`` holds the normalised raw value and the decomposer turns it
    into real candidates.
    """

    canonical_key: str
    value: Any
    source: CandidateSource
    raw_source_field: str | None = None
    match: MatchType = MatchType.EXACT
    origin: FieldOrigin = FieldOrigin.FORM_FIELD
    composite: CompositeKind | None = None

    @property
    def priority(self) -> tuple[int, int, str]:
        """Sort key: form fields before entities, exact before fuzzy before inferred."""
        return (
            0 if self.origin == FieldOrigin.FORM_FIELD else 1,
            _MATCH_RANK.get(self.match, len(_MATCH_RANK)),
            self.raw_source_field or "",
        )


# ═══════════════════════════════════════════════════════════
#  Rule definition
# ═══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class MappingRule:
    """
    Associates a normalised field-name pattern with a canonical key.

    Args:
        pattern: Normalised field name (exact / containment match) or a
                 predicate called with (norm_name, norm_value).
        canonical_key: Target key in the canonical record.
        kind: direct, composite, numeric or enum.
        transform: Optional raw value → typed value function.  Returning
                   None discards the mapping.
        composite: Recipe name, required when kind is composite.
    """

    pattern: RulePattern
    canonical_key: str
    kind: RuleKind = RuleKind.DIRECT
    transform: Callable[[str], Any] | None = None
    composite: CompositeKind | None = None

    @property
    def is_predicate(self) -> bool:
        return not isinstance(self.pattern, str)

    def describe(self) -> str:
        """Human-readable pattern for logs."""
        if isinstance(self.pattern, str):
            return self.pattern
        return getattr(self.pattern, "__name__", repr(self.pattern))
