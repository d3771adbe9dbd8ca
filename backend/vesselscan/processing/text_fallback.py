"""
Text Fallback Extractor — last-resort regex extraction from the document's
page text, for canonical keys the structured fields left unset.

Patterns per key are ordered most specific first.  Every match of every
pattern is tried in turn and the first one the validator accepts wins.
Label words are matched case-insensitively; captures stay on one line.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Mapping

from vesselscan.core.logging import get_logger
from vesselscan.processing import transforms
from vesselscan.validation.semantic_validator import is_boilerplate, validate
from vesselscan.validation.vocabulary import KNOWN_FLAG_STATES, KNOWN_PORTS, PORT_FLAG_STATES

logger = get_logger(__name__)


@dataclass(frozen=True)
class FallbackPattern:
    regex: re.Pattern[str]
    transform: Callable[[str], Any] = str.strip
    # False for patterns that guess from layout rather than a label word
    labelled: bool = True


@dataclass(frozen=True)
class FallbackRule:
    """Ordered text patterns for one canonical key."""

    canonical_key: str
    patterns: tuple[FallbackPattern, ...]


def _p(
    pattern: str,
    transform: Callable[[str], Any] = str.strip,
    labelled: bool = True,
) -> FallbackPattern:
    return FallbackPattern(re.compile(pattern, re.MULTILINE), transform, labelled)


_SEP = r"[ \t]*[:#.\-]?[ \t]*"
_PLACE_RE = re.compile(
    r"\b("
    + "|".join(re.escape(p) for p in sorted(KNOWN_FLAG_STATES | KNOWN_PORTS, key=len, reverse=True))
    + r")\b",
    re.IGNORECASE,
)
# All-caps page headings that are never vessel names.
_HEADING_WORDS = frozenset({
    "certificate", "registry", "registration", "republic", "government",
    "ministry", "authority", "document", "particulars",
})


# ── Capture transforms ────────────────────────────────────

def _place(capture: str) -> str | None:
    """A known place named inside the capture, otherwise the cleaned capture."""
    match = _PLACE_RE.search(capture)
    if match:
        return match.group(1).upper()
    return transforms.clean_flag_state(capture)


def _flag_from_place(capture: str) -> str | None:
    place = _place(capture)
    if place is None:
        return None
    return PORT_FLAG_STATES.get(place, place)


def _flag_from_port(capture: str) -> str | None:
    match = _PLACE_RE.search(capture)
    if not match:
        return None
    place = match.group(1).upper()
    if place in PORT_FLAG_STATES:
        return PORT_FLAG_STATES[place]
    return place if place in KNOWN_FLAG_STATES else None


def _vessel_name(capture: str) -> str | None:
    name = transforms.clean_name(capture)
    if name is None or is_boilerplate(name):
        return None
    return name


def _caps_line_name(capture: str) -> str | None:
    name = _vessel_name(capture)
    if name is None or _PLACE_RE.search(name):
        return None
    if _HEADING_WORDS.intersection(name.casefold().split()):
        return None
    return name


# ═══════════════════════════════════════════════════════════
#  Rule table
# ═══════════════════════════════════════════════════════════

FALLBACK_RULES: Mapping[str, FallbackRule] = MappingProxyType({
    "certificate_number": FallbackRule("certificate_number", (
        _p(r"(?i:certificate)[ \t\w]*?(?i:no)\.?[ \t:]*(\d+)"),
        _p(r"(?i:cert)\.?[ \t]*(?i:no)\.?[ \t:]*(\d+)"),
        _p(r"(?i:registration)[ \t\w]*?(?i:no)\.?[ \t:]*(\d+)"),
        _p(r"^[ \t]*(\d{4,})[ \t]*$", labelled=False),
    )),
    "official_number": FallbackRule("official_number", (
        _p(r"(?i:official)[ \t]*(?i:no|number)\.?[ \t:]*([A-Z0-9][A-Z0-9/\-]{2,19})\b"),
    )),
    "call_sign": FallbackRule("call_sign", (
        _p(r"(?i:call)[ \t\-]*(?i:sign)" + _SEP + r"([A-Z0-9]{4,8})\b", transforms.clean_call_sign),
        _p(r"(?i:callsign)" + _SEP + r"([A-Z0-9]{4,8})\b", transforms.clean_call_sign),
        _p(r"(?i:radio)[ \t\w]*?(?i:call)[ \t\-]*(?i:sign)" + _SEP + r"([A-Z0-9]{4,8})\b",
           transforms.clean_call_sign),
    )),
    "imo_number": FallbackRule("imo_number", (
        _p(r"(?i:imo)[ \t]*(?i:no)\.?[ \t:]*(\d{7,})"),
        _p(r"(?i:imo)[ \t]*(?i:number)[ \t:]*(\d{7,})"),
        _p(r"(?i:imo)[ \t:]*(\d{7})\b"),
    )),
    "yacht_name": FallbackRule("yacht_name", (
        _p(r"(?i:name[ \t]+of[ \t]+(?:the[ \t]+)?ship)" + _SEP + r"([A-Z][A-Za-z0-9 '\-]{1,48})", _vessel_name),
        _p(r"(?i:yacht[ \t]+name)" + _SEP + r"([A-Z][A-Za-z0-9 '\-]{1,48})", _vessel_name),
        _p(r"(?i:vessel[ \t]+name)" + _SEP + r"([A-Z][A-Za-z0-9 '\-]{1,48})", _vessel_name),
        _p(r"(?i:ship)[ \t]*:[ \t]*([A-Z][A-Za-z0-9 '\-]{1,48})", _vessel_name),
        _p(r"^[ \t]*([A-Z][A-Z0-9 '\-]{2,30}[A-Z0-9])[ \t]*$", _caps_line_name, labelled=False),
    )),
    "flag_state": FallbackRule("flag_state", (
        _p(r"(?i:flag[ \t]+state)" + _SEP + r"([A-Za-z][A-Za-z \-]{2,40})", _flag_from_place),
        _p(r"(?i:port[ \t]+of[ \t]+registry)" + _SEP + r"([A-Za-z][A-Za-z \-]{2,40})", _flag_from_port),
        _p(r"(?i:state[ \t]+of[ \t]+registry)" + _SEP + r"([A-Za-z][A-Za-z \-]{2,40})", _flag_from_place),
        _p(r"(?i:registry)" + _SEP + r"([A-Za-z][A-Za-z \-]{2,40})", _flag_from_port),
        _p(r"(?i:flag)" + _SEP + r"([A-Za-z][A-Za-z \-]{2,40})", _flag_from_place),
    )),
    "home_port": FallbackRule("home_port", (
        _p(r"(?i:home[ \t]+port)" + _SEP + r"([A-Za-z][A-Za-z \-]{2,30})", _place),
        _p(r"(?i:port[ \t]+of[ \t]+registry)" + _SEP + r"([A-Za-z][A-Za-z \-]{2,30})", _place),
    )),
})


def extract_from_text(canonical_key: str, text: str, *, labelled_only: bool = False) -> Any | None:
    """
    Search ``text`` for a value of ``canonical_key``.

    Returns the first captured value that survives the transform and the
    semantic validator, or None.  With ``labelled_only`` the layout guesses
    (a bare number line, an all-caps line) are not tried.
    """
    rule = FALLBACK_RULES.get(canonical_key)
    if rule is None or not text:
        return None

    for pattern in rule.patterns:
        if labelled_only and not pattern.labelled:
            continue
        for match in pattern.regex.finditer(text):
            value = pattern.transform(match.group(1))
            if value is None:
                continue
            if validate(canonical_key, value):
                logger.info(
                    "Text fallback matched",
                    canonical_key=canonical_key,
                    pattern=pattern.regex.pattern,
                    value=value,
                )
                return value
    return None
