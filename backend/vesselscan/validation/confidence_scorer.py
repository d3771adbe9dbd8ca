"""Confidence scoring for one canonicalization pass."""

from __future__ import annotations

from vesselscan.core.config import settings
from vesselscan.processing.models import ExtractionResult


def score_confidence(extraction: ExtractionResult) -> float:
    """
    Heuristic [0, 1] estimate of how much the provider gave us to work with.

    Base score, plus a bonus each for substantial page text, any form field
    and any entity; capped at 1.0.  An empty extraction scores the base.
    """
    score = settings.CONFIDENCE_BASE
    if len(extraction.text_content) > settings.CONFIDENCE_TEXT_LENGTH_THRESHOLD:
        score += settings.CONFIDENCE_TEXT_BONUS
    if extraction.form_fields:
        score += settings.CONFIDENCE_FIELDS_BONUS
    if extraction.entities:
        score += settings.CONFIDENCE_ENTITIES_BONUS
    return round(min(score, 1.0), 4)
