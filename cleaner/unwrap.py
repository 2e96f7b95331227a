"""Resolve redirect wrappers whose real target travels in a query parameter."""

from __future__ import annotations

from collections.abc import Callable
from typing import AbstractSet, Iterator, Sequence
from urllib.parse import unquote

from core.config import CleanerConfig
from core.models import EffectiveRuleSet, HostRule, ParsedUrl
from core.structured_logging import emit_debug_event
from cleaner.urls import quote_whitespace, try_parse_url
from rules.hosts import matched_rules


Reclean = Callable[..., ParsedUrl]


def _engine_reclean() -> Reclean:
    # cleaner.engine imports this module at load time
    from cleaner.engine import clean_parsed

    return clean_parsed


def unwrap_names(matched: Sequence[HostRule]) -> tuple[str, ...]:
    """Lowercased unwrap parameter names: rule order, then declaration order."""
    names: list[str] = []
    for rule in matched:
        for name in rule.unwrap_names:
            if name not in names:
                names.append(name)
    return tuple(names)


def unwrap_candidates(url: ParsedUrl, matched: Sequence[HostRule]) -> Iterator[str]:
    """
    Yield embedded targets in unwrap-name order, then query order.

    The form-decoded query value is percent-decoded once more, since some
    wrappers encode the target twice (`https%253A%252F%252F...`). Whitespace
    the decoding exposes is re-encoded so the target can still parse.
    """
    for name in unwrap_names(matched):
        for param in url.query:
            if param.folded_name == name:
                yield quote_whitespace(unquote(param.value))


def unwrap(
    url: ParsedUrl,
    effective: EffectiveRuleSet,
    depth: int = 0,
    seen: AbstractSet[str] = frozenset(),
    *,
    reclean: Reclean | None = None,
) -> ParsedUrl:
    """
    Replace a wrapper URL with its cleaned embedded target.

    The first candidate that parses as an absolute URL wins: it is run
    through the whole cleaning pipeline at `depth + 1` and the result
    replaces `url` entirely. Candidates that do not parse stay in the query
    for normal filtering.

    Depth and cycle limits are not errors: when `depth` reaches
    MAX_UNWRAP_DEPTH or the target was already seen, `url` comes back as-is.
    """
    matched = matched_rules(effective, url.host)
    if not matched:
        return url

    clean_inner = reclean if reclean is not None else _engine_reclean()

    for decoded in unwrap_candidates(url, matched):
        inner = try_parse_url(decoded)
        if inner is None:
            continue

        candidate = inner.normalized()
        if depth >= CleanerConfig.MAX_UNWRAP_DEPTH or candidate in seen:
            emit_debug_event(
                "unwrap_limit_reached",
                url=url.geturl(),
                target=candidate,
                depth=depth,
                cycle=candidate in seen,
            )
            return url

        emit_debug_event("url_unwrapped", url=url.geturl(), target=candidate, depth=depth + 1)
        return clean_inner(inner, effective, depth=depth + 1, seen=frozenset(seen) | {candidate})

    return url
