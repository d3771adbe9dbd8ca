"""
Input Normalizer — canonicalises raw field names and values.

Names are folded for matching only; values keep their case so the
stored value is never mangled by normalisation.
"""

from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")
_NAME_SEPARATORS_RE = re.compile(r"[_\-]+")


def normalize_value(field_value: str | None) -> str:
    """Trim and collapse internal whitespace (newlines included)."""
    if field_value is None:
        return ""
    return _WHITESPACE_RE.sub(" ", str(field_value)).strip()


def normalize_name(field_name: str | None) -> str:
    """Case-fold and collapse ``_``, ``-`` and whitespace runs to single spaces."""
    if field_name is None:
        return ""
    name = _NAME_SEPARATORS_RE.sub(" ", str(field_name))
    return normalize_value(name).casefold()


def normalize(field_name: str | None, field_value: str | None) -> tuple[str, str]:
    """Return ``(norm_name, norm_value)`` for one raw field pair."""
    return normalize_name(field_name), normalize_value(field_value)
