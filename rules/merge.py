"""Merge built-in and user rule sets into one EffectiveRuleSet."""

from __future__ import annotations

from typing import Any, Iterable

from core.errors import InvalidRuleSet
from core.models import EffectiveRuleSet, RuleSet
from core.structured_logging import emit_debug_event
from rules.schema import validate_document


def _union(*groups: Iterable[str]) -> tuple[str, ...]:
    """Order-preserving set union."""
    out: list[str] = []
    seen: set[str] = set()
    for group in groups:
        for item in group:
            if item not in seen:
                seen.add(item)
                out.append(item)
    return tuple(out)


def coerce_ruleset(document: Any) -> RuleSet:
    """
    Turn a user override into a validated RuleSet.

    Mappings are checked against ruleset.schema.json first, then through the
    pydantic model; RuleSet instances are already validated.

    Raises:
        InvalidRuleSet: If the document is not rule-set shaped.
    """
    if isinstance(document, RuleSet):
        return document
    validate_document(document)
    return RuleSet.from_document(document)


def merge(builtin: RuleSet, user: RuleSet | None = None) -> EffectiveRuleSet:
    """
    Merge two validated rule sets.

    - Global lists: set union (built-in first, then user additions)
    - host_rules: user rules first, then built-in; nothing is dropped on overlap
    """
    if user is None:
        user = RuleSet()
    return EffectiveRuleSet(
        remove_params=_union(builtin.remove_params, user.remove_params),
        remove_param_globs=_union(builtin.remove_param_globs, user.remove_param_globs),
        keep_params=_union(builtin.keep_params, user.keep_params),
        host_rules=tuple(user.host_rules) + tuple(builtin.host_rules),
    )


def load(builtin: RuleSet, user_override: Any = None) -> EffectiveRuleSet:
    """
    Build the effective rule set for one run.

    Args:
        builtin: The built-in RuleSet constant
        user_override: Optional RuleSet or decoded rule document (mapping)

    Returns:
        Frozen EffectiveRuleSet shared by every clean() call of the run

    Raises:
        InvalidRuleSet: If the user document is malformed (fatal for the run)
    """
    if not isinstance(builtin, RuleSet):
        raise InvalidRuleSet(f"built-in rules must be a RuleSet, got {type(builtin).__name__}")
    user = coerce_ruleset(user_override) if user_override is not None else None
    effective = merge(builtin, user)
    emit_debug_event(
        "rules_loaded",
        user_override=user is not None,
        host_rules=len(effective.host_rules),
        remove_params=len(effective.remove_params),
        remove_param_globs=len(effective.remove_param_globs),
        keep_params=len(effective.keep_params),
    )
    return effective
