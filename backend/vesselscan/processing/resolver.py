"""
Confidence & Merge Resolver — reconciles a freshly produced canonical
record with a previously known one and attaches the pass confidence.

Scalar keys: the previously known value wins; fresh values only fill gaps.
List keys: ordered union, previous items first, duplicates dropped.
Merging is idempotent: merge(merge(a, b), b) == merge(a, b).
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from vesselscan.core.logging import get_logger
from vesselscan.processing.models import CanonicalRecord, ExtractionResult
from vesselscan.validation.confidence_scorer import score_confidence
from vesselscan.validation.vocabulary import LIST_KEYS

logger = get_logger(__name__)


def merge_lists(*lists: Iterable[Any] | None) -> list[Any]:
    """Ordered union of the given lists, compared by equality."""
    merged: list[Any] = []
    for items in lists:
        for item in items or ():
            if item not in merged:
                merged.append(item)
    return merged


def merge_records(
    fresh: Mapping[str, Any],
    previous: Mapping[str, Any] | None = None,
) -> CanonicalRecord:
    """Merge ``fresh`` into ``previous`` without mutating either."""
    if not previous:
        return {key: list(value) if key in LIST_KEYS else value for key, value in fresh.items()}

    merged: CanonicalRecord = dict(previous)
    for key, value in fresh.items():
        if key in LIST_KEYS:
            merged[key] = merge_lists(previous.get(key), value)
        elif merged.get(key) is None:
            merged[key] = value
        elif merged[key] != value:
            logger.debug("Previous value kept", canonical_key=key)
    for key in LIST_KEYS & previous.keys():
        if key not in fresh:
            merged[key] = merge_lists(previous[key])
    return merged


def resolve(
    extraction: ExtractionResult,
    record: Mapping[str, Any],
    previous: Mapping[str, Any] | None = None,
) -> tuple[CanonicalRecord, float]:
    """Produce the final record for this pass and its confidence score."""
    final = merge_records(record, previous)
    confidence = score_confidence(extraction)
    logger.debug(
        "Record resolved",
        fields=len(final),
        merged_with_previous=previous is not None,
        confidence=confidence,
    )
    return final, confidence
