"""Decide which query parameters survive cleaning."""

from __future__ import annotations

from typing import Iterable, Sequence

from core.glob import matches_any
from core.models import HostRule, QueryParam, RuleSet


def build_remove_set(
    names: Iterable[str],
    global_rules: RuleSet,
    matched: Sequence[HostRule],
) -> set[str]:
    """
    Lowercased names (from `names`) that some applicable rule removes.

    Covers global and host exact names, global and host globs, and every
    present name when any matched rule has strip_all_params.
    """
    strip_all = any(rule.strip_all_params for rule in matched)
    remove: set[str] = set()
    for name in names:
        folded = name.lower()
        if strip_all or folded in global_rules.remove_names:
            remove.add(folded)
        elif any(folded in rule.remove_names for rule in matched):
            remove.add(folded)
        elif matches_any(global_rules.remove_globs, name):
            remove.add(folded)
        elif any(matches_any(rule.remove_globs, name) for rule in matched):
            remove.add(folded)
    return remove


def build_keep_set(global_rules: RuleSet, matched: Sequence[HostRule]) -> set[str]:
    """Lowercased names kept at any applicable scope (union, most permissive)."""
    keep = set(global_rules.keep_names)
    for rule in matched:
        keep |= rule.keep_names
    return keep


def filter_query(
    query: Sequence[QueryParam],
    global_rules: RuleSet,
    matched: Sequence[HostRule],
) -> tuple[QueryParam, ...]:
    """
    Return the retained parameters.

    A parameter is emitted iff its name is kept or not removed; keep always
    wins. Original order and duplicates are preserved. An empty result is
    valid (the URL loses its query string).
    """
    if not query:
        return ()
    remove = build_remove_set({param.name for param in query}, global_rules, matched)
    keep = build_keep_set(global_rules, matched)
    return tuple(
        param
        for param in query
        if param.folded_name in keep or param.folded_name not in remove
    )
