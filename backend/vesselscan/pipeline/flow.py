"""
Flow definition and rule-table checks for the canonicalization engine.

There is a single flow:

    Normalize → Map (+ decompose) → Validate → Text fallback → Resolve

The rule table the flow runs against is validated here, once, when an
engine is built.  A bad table is a configuration error and is raised
immediately instead of degrading into per-field misses later.
"""

from __future__ import annotations

from typing import Iterable

from vesselscan.core.constants import FieldCategory, RuleKind
from vesselscan.core.logging import get_logger
from vesselscan.pipeline.errors import RuleTableError
from vesselscan.pipeline.step import CanonicalizationStep
from vesselscan.pipeline.steps.map_fields import MapFieldsStep
from vesselscan.pipeline.steps.normalize_fields import NormalizeFieldsStep
from vesselscan.pipeline.steps.resolve_record import ResolveRecordStep
from vesselscan.pipeline.steps.text_fallback import TextFallbackStep
from vesselscan.pipeline.steps.validate_candidates import ValidateCandidatesStep
from vesselscan.processing.composite import COMPOSITE_RECIPES, recipe_keys
from vesselscan.processing.models import MappingRule
from vesselscan.processing.normalizer import normalize_name
from vesselscan.validation.vocabulary import CANONICAL_FIELDS

logger = get_logger(__name__)


def default_flow() -> list[CanonicalizationStep]:
    """Fresh step instances in execution order."""
    return [
        NormalizeFieldsStep(),
        MapFieldsStep(),
        ValidateCandidatesStep(),
        TextFallbackStep(),
        ResolveRecordStep(),
    ]


# ═══════════════════════════════════════════════════════════
#  Rule table validation
# ═══════════════════════════════════════════════════════════

# Validation categories each non-composite rule kind may target.
_KIND_CATEGORIES: dict[RuleKind, frozenset[FieldCategory]] = {
    RuleKind.NUMERIC: frozenset({FieldCategory.NUMERIC}),
    RuleKind.ENUM: frozenset({FieldCategory.ENUM}),
    RuleKind.DIRECT: frozenset({
        FieldCategory.FREE_TEXT, FieldCategory.IDENTIFIER, FieldCategory.DATE,
        FieldCategory.TEXT, FieldCategory.LIST, FieldCategory.ENUM,
    }),
}


def _rule_problem(rule: MappingRule) -> str | None:
    spec = CANONICAL_FIELDS.get(rule.canonical_key)
    if spec is None:
        return f"unknown canonical key {rule.canonical_key!r}"

    if isinstance(rule.pattern, str):
        if not rule.pattern or normalize_name(rule.pattern) != rule.pattern:
            return f"pattern {rule.pattern!r} is not normalised"
    elif not callable(rule.pattern):
        return "pattern is neither a string nor a predicate"

    if rule.kind == RuleKind.COMPOSITE:
        if rule.composite is None or rule.composite not in COMPOSITE_RECIPES:
            return f"composite rule without a recipe ({rule.composite})"
        if rule.canonical_key not in recipe_keys(rule.composite):
            return f"recipe {rule.composite} never produces {rule.canonical_key!r}"
        return None

    if rule.composite is not None:
        return f"{rule.kind} rule carries a composite recipe"
    if spec.category not in _KIND_CATEGORIES[rule.kind]:
        return f"{rule.kind} rule targets a {spec.category} key"
    return None


def validate_rule_table(rules: Iterable[MappingRule]) -> tuple[MappingRule, ...]:
    """
    Check a rule table and return it as a tuple.

    Raises RuleTableError listing every bad rule: unknown canonical keys,
    patterns that are not already normalised, composite rules without a
    recipe, and rule kinds that do not fit the key's validation category.
    """
    table = tuple(rules)
    problems = [
        f"rule #{index} ({rule.describe()}): {problem}"
        for index, rule in enumerate(table)
        if (problem := _rule_problem(rule)) is not None
    ]
    if not table:
        problems.append("rule table is empty")
    if problems:
        logger.error("Rule table rejected", problems=problems)
        raise RuleTableError(
            f"Invalid rule table: {len(problems)} problem(s)",
            details={"problems": problems},
        )
    return table
