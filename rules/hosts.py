"""Select the host-scoped rules that apply to a URL's host."""

from __future__ import annotations

from core.models import HostRule, RuleSet


def matched_rules(effective: RuleSet, host: str) -> tuple[HostRule, ...]:
    """
    Return every host rule with at least one pattern matching `host`.

    All matches are returned (in host_rules order) for aggregation; this is
    not first-match-wins.
    """
    if not host:
        return ()
    host = host.lower().rstrip(".")
    return tuple(rule for rule in effective.host_rules if rule.matches_host(host))
