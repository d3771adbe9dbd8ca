"""
Value transforms — raw provider strings → typed canonical values.

Every transform is pure and returns None when it cannot make sense of the
input, which discards the mapping.  Plausibility is the validator's job;
transforms only reshape.
"""

from __future__ import annotations

import re
from datetime import datetime

_NUMBER_RE = re.compile(r"\d+(?:[.,]\d+)?")
_THOUSANDS_RE = re.compile(r"\d{1,3}(?:,\d{3})+(?:\.\d+)?")
_ANY_NUMBER_RE = re.compile(r"\d{1,3}(?:,\d{3})+(?:\.\d+)?|\d+(?:[.,]\d+)?")
_YEAR_RE = re.compile(r"\b(19\d{2}|20\d{2})\b")
_COMBINED_KW_RE = re.compile(r"combined\s*kw\s*(\d+(?:[.,]\d+)?)", re.IGNORECASE)
_KW_RE = re.compile(r"(\d+(?:[.,]\d+)?)\s*kw\b", re.IGNORECASE)
_HP_RE = re.compile(r"(\d+(?:[.,]\d+)?)\s*(?:hp|bhp|horsepower)\b", re.IGNORECASE)
_NUMBER_PREFIX_RE = re.compile(r"^(?:number|no\.?|nr\.?)(?![a-z])\s*[:#]?\s*", re.IGNORECASE)
_IMO_PREFIX_RE = re.compile(r"^imo(?![a-z])\s*(?:number|no\.?)?\s*[:#]?\s*", re.IGNORECASE)
_QUOTES_RE = re.compile(r"[\"'`]")
_WHITESPACE_RE = re.compile(r"\s+")
_TRAILING_SHIP_RE = re.compile(r"\s+SHIP$", re.IGNORECASE)
_MODEL_SPLIT_RE = re.compile(r"[,;\n|]+")
_OWNER_NAME_RE = re.compile(
    r"^([A-Z][A-Z&.'\s]+?(?:\s(?:LTD|LIMITED|INC|LLC|SPA|PLC|SA|AG|GMBH)\.?)?)(?=\s*,|\s+\d)",
)

_HP_TO_KW = 0.7457

_MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}
_DAY_MONTH_YEAR_RE = re.compile(r"^(\d{1,2})(?:st|nd|rd|th)?\s+([A-Za-z]+)\.?,?\s+(\d{4})$")
_MONTH_YEAR_RE = re.compile(r"^([A-Za-z]+)\.?,?\s+(\d{4})$")
_NUMERIC_DATE_FORMATS = ("%d-%m-%Y", "%d/%m/%Y", "%d.%m.%Y", "%Y-%m-%d", "%Y/%m/%d")


# ═══════════════════════════════════════════════════════════
#  Numbers
# ═══════════════════════════════════════════════════════════

def _to_float(token: str) -> float:
    if _THOUSANDS_RE.fullmatch(token):
        return float(token.replace(",", ""))
    return float(token.replace(",", "."))


def extract_number(value: str) -> float | None:
    """First number in the value; ``,`` is read as a decimal mark ("35,5 m" → 35.5)."""
    thousands = _THOUSANDS_RE.search(value)
    match = _NUMBER_RE.search(value)
    if match is None:
        return None
    if thousands is not None and thousands.start() == match.start():
        return _to_float(thousands.group(0))
    return _to_float(match.group(0))


def extract_numbers(value: str) -> list[float]:
    """Every number in the value, in order ("499 / 149" → [499.0, 149.0])."""
    return [_to_float(token) for token in _ANY_NUMBER_RE.findall(value)]


def extract_integer(value: str) -> int | None:
    number = extract_number(value)
    return None if number is None else int(round(number))


def extract_power_kw(value: str) -> float | None:
    """Engine power in kW; prefers "Combined KW n", then "n kW", then converts horsepower."""
    for pattern in (_COMBINED_KW_RE, _KW_RE):
        match = pattern.search(value)
        if match:
            return _to_float(match.group(1))
    match = _HP_RE.search(value)
    if match:
        return round(_to_float(match.group(1)) * _HP_TO_KW, 1)
    return extract_number(value)


def extract_year(value: str) -> int | None:
    """First 4-digit year token (1900–2099)."""
    match = _YEAR_RE.search(value)
    return int(match.group(1)) if match else None


# ═══════════════════════════════════════════════════════════
#  Identifiers & names
# ═══════════════════════════════════════════════════════════

def clean_call_sign(value: str) -> str | None:
    """Uppercase and drop separators: "9h-a 123" → "9HA123"."""
    cleaned = re.sub(r"[^A-Za-z0-9]", "", value).upper()
    return cleaned or None


def clean_identifier(value: str) -> str | None:
    """Strip a leading "No." label and surrounding spaces; keep the rest as-is."""
    cleaned = _NUMBER_PREFIX_RE.sub("", value.strip()).strip().upper()
    return cleaned or None


def clean_imo_number(value: str) -> str | None:
    """"IMO No. 1234567" → "1234567"."""
    cleaned = _IMO_PREFIX_RE.sub("", value.strip())
    cleaned = re.sub(r"[\s.\-]", "", cleaned)
    return cleaned or None


def clean_name(value: str) -> str | None:
    """Remove quotes and collapse whitespace."""
    cleaned = _WHITESPACE_RE.sub(" ", _QUOTES_RE.sub("", value)).strip()
    return cleaned or None


def clean_flag_state(value: str) -> str | None:
    """"MALTA SHIP" → "MALTA"."""
    cleaned = _TRAILING_SHIP_RE.sub("", _WHITESPACE_RE.sub(" ", value).strip())
    cleaned = re.sub(r"[^A-Za-z\s\-]", "", cleaned).strip()
    return cleaned.upper() or None


def owner_name_from_residence(value: str) -> str | None:
    """Leading company/person name before the street address."""
    match = _OWNER_NAME_RE.search(value.strip())
    if not match:
        return None
    name = match.group(1).strip()
    return name if len(name) > 2 else None


def split_models(value: str) -> list[str] | None:
    """Split a delimited list of model identifiers, keeping first-seen order."""
    seen: list[str] = []
    for part in _MODEL_SPLIT_RE.split(value):
        item = part.strip()
        if item and item not in seen:
            seen.append(item)
    return seen or None


# ═══════════════════════════════════════════════════════════
#  Dates
# ═══════════════════════════════════════════════════════════

def format_date(value: str) -> str | None:
    """
    Format a date as DD-MM-YYYY.

    Accepts "10 December 2020", "December 2020" (day defaults to 01) and the
    common numeric layouts.  Unrecognised input is returned unchanged so the
    validator can reject it.
    """
    text = value.strip()
    if not text:
        return None

    match = _DAY_MONTH_YEAR_RE.match(text)
    if match:
        month = _MONTHS.get(match.group(2)[:3].lower())
        if month:
            return f"{int(match.group(1)):02d}-{month:02d}-{match.group(3)}"

    match = _MONTH_YEAR_RE.match(text)
    if match:
        month = _MONTHS.get(match.group(1)[:3].lower())
        if month:
            return f"01-{month:02d}-{match.group(2)}"

    for fmt in _NUMERIC_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).strftime("%d-%m-%Y")
        except ValueError:
            continue
    return text


# ═══════════════════════════════════════════════════════════
#  Enumerations
# ═══════════════════════════════════════════════════════════

def engine_type_from_text(value: str) -> str:
    """Fuel type keyword → engine type; "motor ship" implies diesel."""
    lowered = value.lower()
    if "hybrid" in lowered:
        return "HYBRID"
    if "diesel" in lowered or "motor ship" in lowered:
        return "DIESEL"
    if "gasoline" in lowered or "petrol" in lowered:
        return "GASOLINE"
    if "electric" in lowered:
        return "ELECTRIC"
    return value.strip().upper()


def yacht_type_from_description(value: str) -> str:
    upper = value.upper()
    if "COMMERCIAL" in upper:
        return "COMMERCIAL_VESSEL"
    if "CATAMARAN" in upper:
        return "CATAMARAN"
    if "SAILING" in upper or "SAIL" in upper.split():
        return "SAILING_YACHT"
    if "PLEASURE" in upper or "PRIVATE" in upper or "MOTOR" in upper:
        return "MOTOR_YACHT"
    return upper.strip()


def yacht_category_from_description(value: str) -> str:
    upper = value.upper()
    if "COMMERCIAL" in upper:
        return "COMMERCIAL"
    if "CHARTER" in upper:
        return "CHARTER"
    return "PRIVATE"


def owner_type_from_description(value: str) -> str:
    upper = value.upper()
    if "SOLE OWNER" in upper or "INDIVIDUAL" in upper:
        return "INDIVIDUAL"
    return "COMPANY"


def hull_material_from_text(value: str) -> str:
    upper = value.upper()
    if "GRP" in upper or "FIBRE" in upper or "FIBER" in upper or "GLASS" in upper:
        return "GRP"
    if "ALUMIN" in upper:
        return "ALUMINIUM"
    if "STEEL" in upper:
        return "STEEL"
    if "CARBON" in upper:
        return "CARBON"
    if "WOOD" in upper or "TIMBER" in upper:
        return "WOOD"
    if "COMPOSITE" in upper:
        return "COMPOSITE"
    return upper.strip()
