"""Shared constants and enums used across the engine."""

from enum import StrEnum


class RuleKind(StrEnum):
    """How a mapping rule turns a raw value into a candidate."""

    DIRECT = "direct"
    COMPOSITE = "composite"
    NUMERIC = "numeric"
    ENUM = "enum"


class CompositeKind(StrEnum):
    """Decomposition recipes for fields that carry more than one fact."""

    BUILDER_AND_YEAR = "builder_and_year"
    COMBINED_PORT_AND_FLAG = "combined_port_and_flag"
    NAME_PLUS_SUFFIX = "name_plus_suffix"
    GROSS_AND_NET_TONNAGE = "gross_and_net_tonnage"
    ENGINE_DESCRIPTION = "engine_description"
    VESSEL_DESCRIPTION = "vessel_description"
    OWNER_RESIDENCE = "owner_residence"


class CandidateSource(StrEnum):
    """Where a candidate value came from."""

    MAPPING = "mapping"
    COMPOSITE = "composite"
    TEXT_FALLBACK = "text_fallback"


class MatchType(StrEnum):
    """Which mapper pass matched the raw field name."""

    EXACT = "exact"
    FUZZY = "fuzzy"
    INFERRED = "inferred"
    TEXT = "text"


class FieldOrigin(StrEnum):
    """Which part of the provider output a raw pair was read from."""

    FORM_FIELD = "form_field"
    ENTITY = "entity"
    TEXT = "text"


class FieldCategory(StrEnum):
    """Validation family of a canonical key."""

    FREE_TEXT = "free_text"
    NUMERIC = "numeric"
    IDENTIFIER = "identifier"
    ENUM = "enum"
    DATE = "date"
    TEXT = "text"
    LIST = "list"


class StepStatus(StrEnum):
    """Status of an individual pipeline step."""

    PENDING = "PENDING"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    SKIPPED = "SKIPPED"


class DocumentType(StrEnum):
    """Coarse document classification derived from page text."""

    YACHT_REGISTRATION = "yacht_registration"
    INSURANCE_CERTIFICATE = "insurance_certificate"
    CREW_LICENSE = "crew_license"
    AUTO_DETECT = "auto_detect"
