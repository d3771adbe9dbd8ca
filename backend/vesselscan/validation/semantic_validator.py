"""
Semantic Validator — decides whether a candidate value is plausible for
its canonical key.

Rejections are never errors: the candidate is dropped and the key stays
open for the text fallback.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any

from vesselscan.core.config import settings
from vesselscan.core.constants import FieldCategory
from vesselscan.core.logging import get_logger
from vesselscan.validation.vocabulary import (
    BOILERPLATE_PHRASES,
    BOILERPLATE_TOKENS,
    CANONICAL_FIELDS,
    KNOWN_FLAG_STATES,
    KNOWN_PORTS,
    NAME_STOPWORDS,
    YEAR_KEYS,
    FieldSpec,
)

logger = get_logger(__name__)

_NUMBER_RE = re.compile(r"[+-]?\d+(?:[.,]\d+)?")
_WORD_RE = re.compile(r"[a-z]+")
_DATE_RE = re.compile(r"\d{2}-\d{2}-\d{4}")

_VOCABULARY_KEYS = frozenset({"flag_state", "home_port"})
_KNOWN_PLACES = KNOWN_FLAG_STATES | KNOWN_PORTS


# ═══════════════════════════════════════════════════════════
#  Helpers
# ═══════════════════════════════════════════════════════════

def parse_number(value: Any) -> float | None:
    """Parse an int/float or a numeric string using ``.`` or ``,`` as decimal mark."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not _NUMBER_RE.fullmatch(text):
        return None
    return float(text.replace(",", "."))


def is_boilerplate(text: str) -> bool:
    """
    True for certificate/legal language masquerading as data.

    Matches any listed phrase, or any legal word appearing as a standalone
    token ("Article 12", "act of", "regulation no").
    """
    lowered = text.casefold()
    if any(phrase in lowered for phrase in BOILERPLATE_PHRASES):
        return True
    return any(token in BOILERPLATE_TOKENS for token in _WORD_RE.findall(lowered))


def _has_boilerplate_phrase(text: str) -> bool:
    lowered = text.casefold()
    return any(phrase in lowered for phrase in BOILERPLATE_PHRASES)


def _only_stopwords(text: str) -> bool:
    words = _WORD_RE.findall(text.casefold())
    return bool(words) and all(word in NAME_STOPWORDS for word in words)


# ═══════════════════════════════════════════════════════════
#  Per-category checks — each returns a rejection reason or None
# ═══════════════════════════════════════════════════════════

def _check_numeric(key: str, spec: FieldSpec, value: Any) -> str | None:
    number = parse_number(value)
    if number is None:
        return "not a number"
    if spec.integer and not number.is_integer():
        return "not an integer"
    maximum = spec.maximum
    if key in YEAR_KEYS:
        maximum = date.today().year + settings.YEAR_FUTURE_TOLERANCE
    if spec.minimum is not None and number < spec.minimum:
        return f"below {spec.minimum}"
    if maximum is not None and number > maximum:
        return f"above {maximum}"
    return None


def _check_identifier(spec: FieldSpec, value: Any) -> str | None:
    if not isinstance(value, str):
        return "not a string"
    text = value.strip()
    if is_boilerplate(text):
        return "boilerplate"
    if not spec.pattern or not re.fullmatch(spec.pattern, text):
        return "bad identifier shape"
    return None


def _check_free_text(key: str, spec: FieldSpec, value: Any) -> str | None:
    if not isinstance(value, str):
        return "not a string"
    text = value.strip()
    if key in _VOCABULARY_KEYS and text.upper() in _KNOWN_PLACES:
        return None
    if not spec.min_length <= len(text) <= spec.max_length:
        return "length out of bounds"
    if not any(ch.isalpha() for ch in text):
        return "no letters"
    if text.isdigit():
        return "purely numeric"
    if not text[0].isupper():
        return "does not start uppercase"
    if is_boilerplate(text):
        return "boilerplate"
    if _only_stopwords(text):
        return "label words only"
    return None


def _check_text(spec: FieldSpec, value: Any) -> str | None:
    if not isinstance(value, str):
        return "not a string"
    text = value.strip()
    if not spec.min_length <= len(text) <= spec.max_length:
        return "length out of bounds"
    if not any(ch.isalpha() for ch in text):
        return "no letters"
    if _has_boilerplate_phrase(text):
        return "boilerplate"
    return None


def _check_enum(spec: FieldSpec, value: Any) -> str | None:
    if not isinstance(value, str) or value not in spec.vocabulary:
        return "not in vocabulary"
    return None


def _check_date(value: Any) -> str | None:
    if not isinstance(value, str) or not _DATE_RE.fullmatch(value):
        return "not DD-MM-YYYY"
    try:
        datetime.strptime(value, "%d-%m-%Y")
    except ValueError:
        return "not a calendar date"
    return None


def _check_list(value: Any) -> str | None:
    if not isinstance(value, (list, tuple)) or not value:
        return "not a non-empty list"
    if not all(isinstance(item, str) and item.strip() for item in value):
        return "blank list item"
    return None


# ═══════════════════════════════════════════════════════════
#  Public API
# ═══════════════════════════════════════════════════════════

def rejection_reason(canonical_key: str, value: Any) -> str | None:
    """Return why ``value`` is implausible for ``canonical_key``, or None if it is accepted."""
    spec = CANONICAL_FIELDS.get(canonical_key)
    if spec is None:
        return "unknown canonical key"
    if value is None:
        return "missing value"

    category = spec.category
    if category == FieldCategory.NUMERIC:
        return _check_numeric(canonical_key, spec, value)
    if category == FieldCategory.IDENTIFIER:
        return _check_identifier(spec, value)
    if category == FieldCategory.FREE_TEXT:
        return _check_free_text(canonical_key, spec, value)
    if category == FieldCategory.TEXT:
        return _check_text(spec, value)
    if category == FieldCategory.ENUM:
        return _check_enum(spec, value)
    if category == FieldCategory.DATE:
        return _check_date(value)
    if category == FieldCategory.LIST:
        return _check_list(value)
    return f"unhandled category {category}"


def validate(canonical_key: str, value: Any) -> bool:
    """Accept or reject a candidate value for ``canonical_key``."""
    reason = rejection_reason(canonical_key, value)
    if reason is not None:
        logger.info(
            "Candidate rejected",
            canonical_key=canonical_key,
            value=value,
            reason=reason,
        )
        return False
    return True
