"""
Rule Table — the single declarative mapping from normalised provider field
names to canonical keys.

Order matters only for the fuzzy pass: specific names are declared before
generic aliases, and predicate rules come last.  Engines validate the
table once, at construction (see vesselscan.pipeline.flow).
"""

from __future__ import annotations

from vesselscan.core.constants import CompositeKind, RuleKind
from vesselscan.processing import transforms
from vesselscan.processing.composite import is_name_suffix
from vesselscan.processing.models import MappingRule
from vesselscan.validation.vocabulary import NAME_STOPWORDS


def _single_name_token(norm_name: str, norm_value: str) -> bool:
    """
    A bare vessel name used as the field label, e.g. ``STARK: X``.

    Only a one-word label whose value is shaped like a name suffix qualifies;
    ``Remarks: NIL`` does not.  The mapper offers predicates form fields only.
    """
    if " " in norm_name or not norm_name.isalpha() or len(norm_name) < 3:
        return False
    if norm_name in NAME_STOPWORDS:
        return False
    return is_name_suffix(norm_value)


_direct = RuleKind.DIRECT
_numeric = RuleKind.NUMERIC
_enum = RuleKind.ENUM
_composite = RuleKind.COMPOSITE


def _c(pattern: str, key: str, kind: CompositeKind) -> MappingRule:
    return MappingRule(pattern, key, _composite, composite=kind)


RULE_TABLE: tuple[MappingRule, ...] = (
    # ── Registry certificate field names ───────────────────
    MappingRule("name o fship", "yacht_name", _direct, transforms.clean_name),
    MappingRule("name of ship", "yacht_name", _direct, transforms.clean_name),
    _c("when and where built", "builder", CompositeKind.BUILDER_AND_YEAR),
    MappingRule("callsign", "call_sign", _direct, transforms.clean_call_sign),
    MappingRule("certificate no", "certificate_number", _direct, transforms.clean_identifier),
    MappingRule("officialno", "official_number", _direct, transforms.clean_identifier),
    MappingRule("hull id", "hull_id", _direct, transforms.clean_identifier),
    MappingRule("length overall", "length_overall_m", _numeric, transforms.extract_number),
    MappingRule("main breadth", "beam_m", _numeric, transforms.extract_number),
    MappingRule("depth", "depth_m", _numeric, transforms.extract_number),
    _c("particulars of tonnage", "gross_tonnage", CompositeKind.GROSS_AND_NET_TONNAGE),
    _c("gross & net tonnage", "gross_tonnage", CompositeKind.GROSS_AND_NET_TONNAGE),
    MappingRule("combined kw", "engine_power_kw", _numeric, transforms.extract_power_kw),
    MappingRule("propulsion power", "engine_power_kw", _numeric, transforms.extract_power_kw),
    MappingRule("propulsion", "engine_type", _enum, transforms.engine_type_from_text),
    _c("number and description of engines", "engine_description", CompositeKind.ENGINE_DESCRIPTION),
    MappingRule("engine makers", "engine_manufacturer", _direct, transforms.clean_name),
    MappingRule("engines year of make", "engine_year", _numeric, transforms.extract_year),
    MappingRule("owners description", "owner_type", _enum, transforms.owner_type_from_description),
    _c("owners residence", "owner_address", CompositeKind.OWNER_RESIDENCE),
    MappingRule("provisionally registered on", "provisional_registration_date", _direct, transforms.format_date),
    MappingRule("registered on", "registration_date", _direct, transforms.format_date),
    MappingRule("certificate issued this", "certificate_issued_date", _direct, transforms.format_date),
    MappingRule("this certificate expires on", "certificate_expires_date", _direct, transforms.format_date),
    _c("no, year and home port", "home_port", CompositeKind.COMBINED_PORT_AND_FLAG),
    _c("no year", "home_port", CompositeKind.COMBINED_PORT_AND_FLAG),
    _c("combined info", "home_port", CompositeKind.COMBINED_PORT_AND_FLAG),
    _c("home port", "home_port", CompositeKind.COMBINED_PORT_AND_FLAG),
    _c("port of registry", "home_port", CompositeKind.COMBINED_PORT_AND_FLAG),
    _c("description of vessel", "yacht_type", CompositeKind.VESSEL_DESCRIPTION),
    MappingRule("framework", "hull_material", _enum, transforms.hull_material_from_text),

    # ── Generic aliases ────────────────────────────────────
    MappingRule("yacht name", "yacht_name", _direct, transforms.clean_name),
    MappingRule("vessel name", "yacht_name", _direct, transforms.clean_name),
    MappingRule("ship name", "yacht_name", _direct, transforms.clean_name),
    MappingRule("owner name", "owner_name", _direct, transforms.clean_name),
    MappingRule("owners name", "owner_name", _direct, transforms.clean_name),
    MappingRule("name of owner", "owner_name", _direct, transforms.clean_name),
    MappingRule("owner address", "owner_address", _direct, transforms.clean_name),
    MappingRule("owners address", "owner_address", _direct, transforms.clean_name),
    MappingRule("owner type", "owner_type", _enum, transforms.owner_type_from_description),
    MappingRule("engine manufacturer", "engine_manufacturer", _direct, transforms.clean_name),
    MappingRule("engine type", "engine_type", _enum, transforms.engine_type_from_text),
    MappingRule("engine power", "engine_power_kw", _numeric, transforms.extract_power_kw),
    MappingRule("engine year", "engine_year", _numeric, transforms.extract_year),
    MappingRule("flag state", "flag_state", _direct, transforms.clean_flag_state),
    MappingRule("call sign", "call_sign", _direct, transforms.clean_call_sign),
    MappingRule("imo number", "imo_number", _direct, transforms.clean_imo_number),
    MappingRule("imo no", "imo_number", _direct, transforms.clean_imo_number),
    MappingRule("official number", "official_number", _direct, transforms.clean_identifier),
    MappingRule("certificate number", "certificate_number", _direct, transforms.clean_identifier),
    MappingRule("hull identification number", "hull_id", _direct, transforms.clean_identifier),
    MappingRule("hull material", "hull_material", _enum, transforms.hull_material_from_text),
    MappingRule("hull length", "hull_length_m", _numeric, transforms.extract_number),
    MappingRule("year built", "year_built", _numeric, transforms.extract_year),
    MappingRule("year of build", "year_built", _numeric, transforms.extract_year),
    MappingRule("builder", "builder", _direct, transforms.clean_name),
    MappingRule("shipyard", "builder", _direct, transforms.clean_name),
    MappingRule("gross tonnage", "gross_tonnage", _numeric, transforms.extract_number),
    MappingRule("net tonnage", "net_tonnage", _numeric, transforms.extract_number),
    MappingRule("max speed", "max_speed_knots", _numeric, transforms.extract_number),
    MappingRule("fuel capacity", "fuel_capacity_l", _numeric, transforms.extract_number),
    MappingRule("crew capacity", "crew_capacity", _numeric, transforms.extract_integer),
    MappingRule("guest capacity", "guest_capacity", _numeric, transforms.extract_integer),
    MappingRule("models", "discovered_models", _direct, transforms.split_models),
    MappingRule("model", "model", _direct, transforms.clean_name),
    MappingRule("registration info", "registration_info", _direct, transforms.clean_name),
    MappingRule("yacht type", "yacht_type", _enum, transforms.yacht_type_from_description),
    MappingRule("imo", "imo_number", _direct, transforms.clean_imo_number),
    MappingRule("draught", "draft_m", _numeric, transforms.extract_number),
    MappingRule("draft", "draft_m", _numeric, transforms.extract_number),
    MappingRule("breadth", "beam_m", _numeric, transforms.extract_number),
    MappingRule("beam", "beam_m", _numeric, transforms.extract_number),
    MappingRule("length", "length_overall_m", _numeric, transforms.extract_number),
    MappingRule("flag", "flag_state", _direct, transforms.clean_flag_state),
    MappingRule("year", "year_built", _numeric, transforms.extract_year),
    MappingRule("owner", "owner_name", _direct, transforms.clean_name),
    MappingRule("name", "yacht_name", _direct, transforms.clean_name),

    # ── Predicates (fuzzy pass only, always last) ──────────
    MappingRule(_single_name_token, "yacht_name", _composite, composite=CompositeKind.NAME_PLUS_SUFFIX),
)

