"""
Field Mapper — resolves a normalised (name, value) pair to a candidate for
one canonical key using the rule table.

Two passes:
  1. exact equality of the field name against every string pattern
  2. only when pass 1 found nothing: rules in declaration order, string
     patterns by containment (a short name only as whole words of a longer
     pattern), predicates called with (norm_name, norm_value) for form
     fields only
"""

from __future__ import annotations

import re
from dataclasses import replace
from typing import Callable, Iterable, Sequence

from vesselscan.core.config import settings
from vesselscan.core.constants import CandidateSource, FieldOrigin, MatchType, RuleKind
from vesselscan.core.logging import get_logger
from vesselscan.processing.composite import decompose as decompose_composite
from vesselscan.processing.models import CandidateValue, MappingRule, RawFieldPair
from vesselscan.processing.normalizer import normalize

logger = get_logger(__name__)

Decomposer = Callable[..., list[CandidateValue]]


def _contains(pattern: str, norm_name: str) -> bool:
    if pattern in norm_name:
        return True
    if len(norm_name) < settings.FUZZY_MIN_NAME_LENGTH:
        return False
    # whole words only: "own" is not part of "owners description"
    return re.search(rf"(?<!\w){re.escape(norm_name)}(?!\w)", pattern) is not None


def _find_rule(
    norm_name: str,
    norm_value: str,
    rule_table: Sequence[MappingRule],
    origin: FieldOrigin = FieldOrigin.FORM_FIELD,
) -> tuple[MappingRule, MatchType] | None:
    for rule in rule_table:
        if isinstance(rule.pattern, str) and rule.pattern == norm_name:
            return rule, MatchType.EXACT

    for rule in rule_table:
        if isinstance(rule.pattern, str):
            if _contains(rule.pattern, norm_name):
                return rule, MatchType.FUZZY
        elif origin == FieldOrigin.FORM_FIELD and rule.pattern(norm_name, norm_value):
            return rule, MatchType.INFERRED
    return None


def map_field(
    norm_name: str,
    norm_value: str,
    rule_table: Sequence[MappingRule],
    origin: FieldOrigin = FieldOrigin.FORM_FIELD,
) -> CandidateValue | None:
    """
    Map one normalised field to a candidate.

    Composite rules return a signal candidate (``composite`` set, value is
    the normalised raw value); the caller hands it to the decomposer.
    Predicate rules are tried for form fields only, since entity types are
    provider vocabulary rather than document labels.
    Returns None when no rule matches or the rule's transform discards the
    value.
    """
    if not norm_name or not norm_value:
        return None

    found = _find_rule(norm_name, norm_value, rule_table, origin)
    if found is None:
        logger.info("Field not mapped", field=norm_name)
        return None
    rule, match = found

    if rule.kind == RuleKind.COMPOSITE:
        return CandidateValue(
            canonical_key=rule.canonical_key,
            value=norm_value,
            source=CandidateSource.COMPOSITE,
            raw_source_field=norm_name,
            match=match,
            composite=rule.composite,
        )

    value = rule.transform(norm_value) if rule.transform else norm_value
    if value is None:
        logger.info(
            "Field transform discarded value",
            field=norm_name,
            canonical_key=rule.canonical_key,
            rule=rule.describe(),
        )
        return None

    logger.debug(
        "Field mapped",
        field=norm_name,
        canonical_key=rule.canonical_key,
        match=str(match),
    )
    return CandidateValue(
        canonical_key=rule.canonical_key,
        value=value,
        source=CandidateSource.MAPPING,
        raw_source_field=norm_name,
        match=match,
    )


def map_pairs(
    pairs: Iterable[RawFieldPair],
    rule_table: Sequence[MappingRule],
    decompose: Decomposer = decompose_composite,
) -> list[CandidateValue]:
    """
    Map every raw pair and expand composite signals.

    Each returned candidate records the raw field name and the origin of
    the pair it came from.
    """
    candidates: list[CandidateValue] = []
    for pair in pairs:
        norm_name, norm_value = normalize(pair.field_name, pair.field_value)
        candidate = map_field(norm_name, norm_value, rule_table, pair.origin)
        if candidate is None:
            continue

        if candidate.composite is not None:
            parts = decompose(
                candidate.composite,
                norm_value,
                norm_name,
                match=candidate.match,
                origin=pair.origin,
            )
            candidates.extend(replace(part, raw_source_field=pair.field_name) for part in parts)
            continue

        candidates.append(replace(candidate, raw_source_field=pair.field_name, origin=pair.origin))
    return candidates
