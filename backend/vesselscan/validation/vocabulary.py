"""
Canonical vocabulary — the fixed set of canonical keys and the word lists
the validator, decomposer and text fallback share.

All tables here are immutable and built once at import time.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from vesselscan.core.constants import FieldCategory


@dataclass(frozen=True)
class FieldSpec:
    """Validation profile of one canonical key."""

    category: FieldCategory
    minimum: float | None = None
    maximum: float | None = None
    integer: bool = False
    min_length: int = 2
    max_length: int = 50
    pattern: str | None = None
    vocabulary: frozenset[str] = frozenset()


# ═══════════════════════════════════════════════════════════
#  Word lists
# ═══════════════════════════════════════════════════════════

KNOWN_FLAG_STATES: frozenset[str] = frozenset({
    "ANTIGUA AND BARBUDA", "BAHAMAS", "BELGIUM", "BELIZE", "BERMUDA",
    "BRITISH VIRGIN ISLANDS", "CAYMAN ISLANDS", "COOK ISLANDS", "CROATIA",
    "CYPRUS", "DENMARK", "FRANCE", "GERMANY", "GIBRALTAR", "GREECE",
    "ISLE OF MAN", "ITALY", "JERSEY", "LIBERIA", "LUXEMBOURG", "MALTA",
    "MARSHALL ISLANDS", "MONACO", "NETHERLANDS", "NORWAY", "PANAMA",
    "PORTUGAL", "SAINT VINCENT AND THE GRENADINES", "SINGAPORE", "SPAIN",
    "SWITZERLAND", "TURKEY", "UNITED KINGDOM", "UNITED STATES",
})

# Port of registry → flag state it implies.
PORT_FLAG_STATES: Mapping[str, str] = MappingProxyType({
    "VALLETTA": "MALTA",
    "MONACO": "MONACO",
    "GIBRALTAR": "GIBRALTAR",
    "LONDON": "UNITED KINGDOM",
    "SOUTHAMPTON": "UNITED KINGDOM",
    "FORT LAUDERDALE": "UNITED STATES",
    "MIAMI": "UNITED STATES",
    "PALMA": "SPAIN",
    "ANTIBES": "FRANCE",
    "CANNES": "FRANCE",
    "NICE": "FRANCE",
    "MARSEILLE": "FRANCE",
    "GENOA": "ITALY",
    "VIAREGGIO": "ITALY",
    "NAPLES": "ITALY",
    "PIRAEUS": "GREECE",
    "LIMASSOL": "CYPRUS",
    "GEORGE TOWN": "CAYMAN ISLANDS",
    "NASSAU": "BAHAMAS",
    "HAMILTON": "BERMUDA",
    "DOUGLAS": "ISLE OF MAN",
    "ROAD TOWN": "BRITISH VIRGIN ISLANDS",
    "MAJURO": "MARSHALL ISLANDS",
    "MONROVIA": "LIBERIA",
    "PANAMA": "PANAMA",
})

KNOWN_PORTS: frozenset[str] = frozenset(PORT_FLAG_STATES)

BOILERPLATE_PHRASES: tuple[str, ...] = (
    "issued in terms of",
    "in accordance with",
    "pursuant to",
    "under the provisions",
    "provisions of",
    "terms of article",
    "shipping act",
    "merchant shipping",
)

# Legal words rejected as standalone tokens, or followed by "of" / "no".
BOILERPLATE_TOKENS: frozenset[str] = frozenset({
    "act", "article", "regulation", "section", "chapter",
    "pursuant", "accordance", "provisions", "issued", "terms",
})

# Values made only of these words are labels, not names.
NAME_STOPWORDS: frozenset[str] = frozenset({
    "certificate", "registration", "document", "yacht", "vessel", "ship",
    "motor", "the", "and", "for", "with", "this", "that", "from", "date",
    "number", "gross", "tonnage", "length", "beam", "draft", "built",
    "name", "of", "official", "no", "registry", "port", "flag", "state",
    "page", "total", "item", "code", "type",
})

ENGINE_TYPES: frozenset[str] = frozenset({"DIESEL", "GASOLINE", "ELECTRIC", "HYBRID"})
YACHT_TYPES: frozenset[str] = frozenset({
    "MOTOR_YACHT", "SAILING_YACHT", "CATAMARAN", "COMMERCIAL_VESSEL",
})
YACHT_CATEGORIES: frozenset[str] = frozenset({"PRIVATE", "CHARTER", "COMMERCIAL"})
HULL_MATERIALS: frozenset[str] = frozenset({
    "GRP", "STEEL", "ALUMINIUM", "WOOD", "CARBON", "COMPOSITE",
})
OWNER_TYPES: frozenset[str] = frozenset({"INDIVIDUAL", "COMPANY"})


# ═══════════════════════════════════════════════════════════
#  Canonical fields
# ═══════════════════════════════════════════════════════════

_FREE_TEXT = FieldSpec(FieldCategory.FREE_TEXT, min_length=2, max_length=50)
_TEXT = FieldSpec(FieldCategory.TEXT, min_length=2, max_length=200)
_DATE = FieldSpec(FieldCategory.DATE)


def _numeric(minimum: float, maximum: float, integer: bool = False) -> FieldSpec:
    return FieldSpec(FieldCategory.NUMERIC, minimum=minimum, maximum=maximum, integer=integer)


def _identifier(pattern: str) -> FieldSpec:
    return FieldSpec(FieldCategory.IDENTIFIER, pattern=pattern)


def _enum(vocabulary: frozenset[str]) -> FieldSpec:
    return FieldSpec(FieldCategory.ENUM, vocabulary=vocabulary)


# Year ranges are bounded at validation time (current year + tolerance),
# so maximum is left open here.
CANONICAL_FIELDS: Mapping[str, FieldSpec] = MappingProxyType({
    # ── Identity ──────────────────────────────
    "yacht_name": _FREE_TEXT,
    "builder": _FREE_TEXT,
    "flag_state": _FREE_TEXT,
    "home_port": _FREE_TEXT,
    "model": _TEXT,
    "yacht_type": _enum(YACHT_TYPES),
    "yacht_category": _enum(YACHT_CATEGORIES),
    "hull_material": _enum(HULL_MATERIALS),

    # ── Identifiers ───────────────────────────
    "call_sign": _identifier(r"[A-Z0-9]{3,8}"),
    "imo_number": _identifier(r"\d{7,10}"),
    "certificate_number": _identifier(r"[A-Z0-9][A-Z0-9/.\-]{2,19}"),
    "official_number": _identifier(r"[A-Z0-9][A-Z0-9/.\-]{2,19}"),
    "hull_id": _identifier(r"[A-Z0-9][A-Z0-9\-]{4,19}"),
    "registration_info": _TEXT,

    # ── Dimensions & capacities ───────────────
    "length_overall_m": _numeric(0.5, 1000),
    "hull_length_m": _numeric(0.5, 1000),
    "beam_m": _numeric(0.2, 100),
    "depth_m": _numeric(0.1, 100),
    "draft_m": _numeric(0.1, 50),
    "gross_tonnage": _numeric(0.1, 500_000),
    "net_tonnage": _numeric(0.1, 500_000),
    "max_speed_knots": _numeric(0.1, 100),
    "fuel_capacity_l": _numeric(1, 5_000_000),
    "crew_capacity": _numeric(0, 1000, integer=True),
    "guest_capacity": _numeric(0, 1000, integer=True),
    "year_built": _numeric(1800, float("inf"), integer=True),

    # ── Propulsion ────────────────────────────
    "engine_type": _enum(ENGINE_TYPES),
    "engine_description": _TEXT,
    "engine_manufacturer": _TEXT,
    "engine_year": _numeric(1800, float("inf"), integer=True),
    "engine_power_kw": _numeric(0.1, 200_000),

    # ── Ownership ─────────────────────────────
    "owner_type": _enum(OWNER_TYPES),
    "owner_name": _TEXT,
    "owner_address": _TEXT,

    # ── Registration dates (DD-MM-YYYY) ───────
    "certificate_issued_date": _DATE,
    "certificate_expires_date": _DATE,
    "provisional_registration_date": _DATE,
    "registration_date": _DATE,

    # ── Lists ─────────────────────────────────
    "discovered_models": FieldSpec(FieldCategory.LIST),
})

YEAR_KEYS: frozenset[str] = frozenset({"year_built", "engine_year"})

LIST_KEYS: frozenset[str] = frozenset(
    key for key, spec in CANONICAL_FIELDS.items()
    if spec.category == FieldCategory.LIST
)

# Keys a registration certificate is expected to carry; reported when unset.
REQUIRED_KEYS: tuple[str, ...] = (
    "yacht_name",
    "flag_state",
    "certificate_number",
    "official_number",
    "call_sign",
    "year_built",
    "builder",
    "length_overall_m",
)
