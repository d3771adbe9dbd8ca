"""
Composite Field Decomposer — splits one raw value that encodes several
canonical facts into per-key candidates.

The recipe table is the only place decomposition behaviour is declared.
Each recipe is an ordered tuple of RecipeRule; rules for the same key are
tried in order until one yields a value, and keys are independent of each
other (a missing year never blocks the builder).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Mapping

from vesselscan.core.constants import CandidateSource, CompositeKind, FieldOrigin, MatchType
from vesselscan.core.logging import get_logger
from vesselscan.processing import transforms
from vesselscan.processing.models import CandidateValue
from vesselscan.validation.vocabulary import (
    ENGINE_TYPES,
    HULL_MATERIALS,
    KNOWN_PORTS,
    PORT_FLAG_STATES,
    YACHT_TYPES,
)

logger = get_logger(__name__)

# extract(norm_value, field_name) → typed value or None
RecipeExtract = Callable[[str, str], Any]


@dataclass(frozen=True)
class RecipeRule:
    """One canonical key produced by a recipe, and how to pull it out."""

    canonical_key: str
    extract: RecipeExtract


# ═══════════════════════════════════════════════════════════
#  builder_and_year — "2025 AZIMUT BENETTI SPA, VIAREGGIO (LUCCA), ITALY"
# ═══════════════════════════════════════════════════════════

_LEGAL_SUFFIX = (
    r"(?i:S\.?P\.?A\.?|LTD\.?|LIMITED|INC\.?|CORP(?:ORATION)?\.?|GMBH|B\.?V\.?"
    r"|S\.?R\.?L\.?|LLC|SHIPYARDS?|YACHTS|GROUP)"
)
_CAP_WORD = r"[A-Z][\w&.'\-]*"

_BUILDER_PATTERNS: tuple[re.Pattern[str], ...] = (
    # after the year, ending in a legal suffix
    re.compile(
        rf"\b(?:19|20)\d{{2}}\s+({_CAP_WORD}(?:\s+{_CAP_WORD})*?\s+{_LEGAL_SUFFIX})(?=[\s,;()]|$)"
    ),
    # after the year, capitalised words up to the first comma
    re.compile(rf"\b(?:19|20)\d{{2}}\s+({_CAP_WORD}(?:\s+{_CAP_WORD})*?)\s*,"),
    # anywhere, ending in a legal suffix
    re.compile(rf"\b({_CAP_WORD}(?:\s+{_CAP_WORD})*?\s+{_LEGAL_SUFFIX})(?=[\s,;()]|$)"),
)

_MIN_BUILDER_LENGTH = 3


def _builder(value: str, _field_name: str) -> str | None:
    for pattern in _BUILDER_PATTERNS:
        match = pattern.search(value)
        if match:
            builder = match.group(1).strip(" ,")
            if len(builder) > _MIN_BUILDER_LENGTH:
                return builder
    return None


def _year(value: str, _field_name: str) -> int | None:
    return transforms.extract_year(value)


# ═══════════════════════════════════════════════════════════
#  combined_port_and_flag — "525 IN 2025 VALLETTA"
# ═══════════════════════════════════════════════════════════

_KNOWN_PORT_RE = re.compile(
    r"\b(" + "|".join(re.escape(p) for p in sorted(KNOWN_PORTS, key=len, reverse=True)) + r")\b",
    re.IGNORECASE,
)
_CAPS_TOKEN_RE = re.compile(r"\b[A-Z]{4,}\b")
_LEADING_NUMBER_RE = re.compile(r"^(\d{3,})\s+\S")


def _known_port(value: str) -> str | None:
    match = _KNOWN_PORT_RE.search(value)
    return match.group(1).upper() if match else None


def _home_port(value: str, _field_name: str) -> str | None:
    port = _known_port(value)
    if port:
        return port
    tokens = _CAPS_TOKEN_RE.findall(value)
    return tokens[-1] if tokens else None


def _flag_from_port(value: str, _field_name: str) -> str | None:
    port = _known_port(value)
    return PORT_FLAG_STATES.get(port) if port else None


def _registration_number(value: str, _field_name: str) -> str | None:
    match = _LEADING_NUMBER_RE.match(value)
    return match.group(1) if match else None


# ═══════════════════════════════════════════════════════════
#  name_plus_suffix — field "STARK", value "X" → "STARK X"
# ═══════════════════════════════════════════════════════════

# a single letter, a roman numeral or a short hull number: "X", "II", "7"
_SUFFIX_RE = re.compile(r"^(?:[A-Za-z]|[IVXivx]{1,5}|\d{1,2})$")


def is_name_suffix(value: str) -> bool:
    """True when ``value`` looks like the trailing part of a vessel name."""
    return bool(_SUFFIX_RE.match(value.strip()))


def _name_with_suffix(value: str, field_name: str) -> str | None:
    base = field_name.strip().upper()
    if not base:
        return None
    suffix = value.strip()
    if is_name_suffix(suffix):
        return f"{base} {suffix.upper()}"
    return base


# ═══════════════════════════════════════════════════════════
#  Supplementary recipes
# ═══════════════════════════════════════════════════════════

def _nth_number(index: int) -> RecipeExtract:
    def extract(value: str, _field_name: str) -> float | None:
        numbers = transforms.extract_numbers(value)
        return numbers[index] if len(numbers) > index else None
    extract.__name__ = f"number_{index}"
    return extract


def _in_vocabulary(func: Callable[[str], str], vocabulary: frozenset[str]) -> RecipeExtract:
    def extract(value: str, _field_name: str) -> str | None:
        result = func(value)
        return result if result in vocabulary else None
    extract.__name__ = func.__name__
    return extract


def _clean_text(value: str, _field_name: str) -> str | None:
    return transforms.clean_name(value)


def _power_with_unit(value: str, _field_name: str) -> float | None:
    if not re.search(r"\b(?:kw|hp|bhp)\b|combined\s*kw", value, re.IGNORECASE):
        return None
    return transforms.extract_power_kw(value)


def _category(value: str, _field_name: str) -> str:
    return transforms.yacht_category_from_description(value)


def _owner_name(value: str, _field_name: str) -> str | None:
    return transforms.owner_name_from_residence(value)


# ═══════════════════════════════════════════════════════════
#  Recipe table
# ═══════════════════════════════════════════════════════════

COMPOSITE_RECIPES: Mapping[CompositeKind, tuple[RecipeRule, ...]] = MappingProxyType({
    CompositeKind.BUILDER_AND_YEAR: (
        RecipeRule("year_built", _year),
        RecipeRule("builder", _builder),
    ),
    CompositeKind.COMBINED_PORT_AND_FLAG: (
        RecipeRule("home_port", _home_port),
        RecipeRule("flag_state", _flag_from_port),
        RecipeRule("official_number", _registration_number),
    ),
    CompositeKind.NAME_PLUS_SUFFIX: (
        RecipeRule("yacht_name", _name_with_suffix),
    ),
    CompositeKind.GROSS_AND_NET_TONNAGE: (
        RecipeRule("gross_tonnage", _nth_number(0)),
        RecipeRule("net_tonnage", _nth_number(1)),
    ),
    CompositeKind.ENGINE_DESCRIPTION: (
        RecipeRule("engine_description", _clean_text),
        RecipeRule("engine_type", _in_vocabulary(transforms.engine_type_from_text, ENGINE_TYPES)),
        RecipeRule("engine_power_kw", _power_with_unit),
    ),
    CompositeKind.VESSEL_DESCRIPTION: (
        RecipeRule("yacht_type", _in_vocabulary(transforms.yacht_type_from_description, YACHT_TYPES)),
        RecipeRule("yacht_category", _category),
        RecipeRule("hull_material", _in_vocabulary(transforms.hull_material_from_text, HULL_MATERIALS)),
    ),
    CompositeKind.OWNER_RESIDENCE: (
        RecipeRule("owner_address", _clean_text),
        RecipeRule("owner_name", _owner_name),
    ),
})


def recipe_keys(kind: CompositeKind) -> frozenset[str]:
    """Canonical keys a recipe can produce."""
    return frozenset(rule.canonical_key for rule in COMPOSITE_RECIPES.get(kind, ()))


def decompose(
    composite_kind: CompositeKind,
    norm_value: str,
    field_name: str = "",
    *,
    match: MatchType = MatchType.EXACT,
    origin: FieldOrigin = FieldOrigin.FORM_FIELD,
) -> list[CandidateValue]:
    """
    Run one recipe over a normalised value.

    Returns zero or more candidates, at most one per canonical key.  An empty
    list is treated by the caller exactly like a mapping miss.
    """
    recipe = COMPOSITE_RECIPES.get(composite_kind)
    if recipe is None:
        logger.warning("Unknown composite recipe", composite=str(composite_kind))
        return []

    candidates: list[CandidateValue] = []
    produced: set[str] = set()
    for rule in recipe:
        if rule.canonical_key in produced:
            continue
        value = rule.extract(norm_value, field_name)
        if value is None:
            continue
        produced.add(rule.canonical_key)
        candidates.append(
            CandidateValue(
                canonical_key=rule.canonical_key,
                value=value,
                source=CandidateSource.COMPOSITE,
                raw_source_field=field_name or None,
                match=match,
                origin=origin,
            )
        )

    if not candidates:
        logger.info(
            "Composite decomposition found nothing",
            composite=str(composite_kind),
            field=field_name,
        )
    else:
        logger.debug(
            "Composite decomposed",
            composite=str(composite_kind),
            field=field_name,
            keys=[c.canonical_key for c in candidates],
        )
    return candidates
