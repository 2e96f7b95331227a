"""Sanitization engine: parse, unwrap, filter, reserialize."""

from __future__ import annotations

from typing import TYPE_CHECKING, AbstractSet, Iterable

from core.models import EffectiveRuleSet, ParsedUrl
from cleaner.params import filter_query
from cleaner.unwrap import unwrap
from cleaner.urls import parse_url
from rules.hosts import matched_rules

if TYPE_CHECKING:
    from cleaner.batch import CleanResult


def clean_parsed(
    url: ParsedUrl,
    effective: EffectiveRuleSet,
    depth: int = 0,
    seen: AbstractSet[str] = frozenset(),
) -> ParsedUrl:
    """Run the unwrap -> host match -> filter pipeline on an already-parsed URL."""
    unwrapped = unwrap(url, effective, depth, seen, reclean=clean_parsed)
    matched = matched_rules(effective, unwrapped.host)
    return unwrapped.with_query(filter_query(unwrapped.query, effective, matched))


def clean_url(
    raw: str,
    effective: EffectiveRuleSet,
    *,
    strip_fragment_params: bool = False,
) -> str:
    """
    Clean one raw URL string.

    Args:
        raw: URL as pasted (surrounding whitespace and `<>` are tolerated)
        effective: Rule set built once per run by rules.load()
        strip_fragment_params: Also drop `#key=value` style tracking fragments

    Returns:
        The cleaned URL. Scheme, authority, path, and fragment are kept
        verbatim; the query only loses removed parameters.

    Raises:
        InvalidUrl: If `raw` is not an absolute URL with a scheme and host.
    """
    parsed = parse_url(raw)
    cleaned = clean_parsed(parsed, effective, depth=0, seen=frozenset({parsed.normalized()}))
    if strip_fragment_params and "=" in cleaned.fragment:
        cleaned = cleaned.without_fragment()
    return cleaned.geturl()


class UrlCleaner:
    """
    Reusable cleaner bound to one EffectiveRuleSet.

    Usage:
        cleaner = UrlCleaner(rules.load_effective("rules.yaml"))
        cleaner.clean("https://example.com/?utm_source=x&id=1")
    """

    def __init__(self, rules: EffectiveRuleSet, *, strip_fragment_params: bool = False):
        self.rules = rules
        self.strip_fragment_params = strip_fragment_params

    def clean(self, raw: str) -> str:
        """Clean one URL; raises InvalidUrl for unparseable input."""
        return clean_url(raw, self.rules, strip_fragment_params=self.strip_fragment_params)

    def clean_many(self, urls: Iterable[str], max_workers: int | None = None) -> list[CleanResult]:
        """Order-preserving batch clean; see cleaner.batch.clean_batch."""
        from cleaner.batch import clean_batch

        return clean_batch(
            urls,
            self.rules,
            max_workers=max_workers,
            strip_fragment_params=self.strip_fragment_params,
        )
