"""Unit tests for host matching and query-parameter filtering."""

import pytest

from cleaner.params import build_keep_set, build_remove_set, filter_query
from cleaner.urls import parse_url
from core.models import EffectiveRuleSet, RuleSet
from rules.hosts import matched_rules


pytestmark = pytest.mark.unit


def _names(url: str, rules: EffectiveRuleSet) -> list[str]:
    """Filter a URL's query with the rules matching its host; return kept names."""
    parsed = parse_url(url)
    kept = filter_query(parsed.query, rules, matched_rules(rules, parsed.host))
    return [param.name for param in kept]


# ============================================================================
# Host Matcher
# ============================================================================

class TestMatchedRules:

    @pytest.mark.parametrize(
        "host, expected_pattern",
        [
            ("www.google.com", "*.google.com"),
            ("google.com", "*.google.com"),
            ("WWW.GOOGLE.COM", "*.google.com"),
            ("l.facebook.com", "*.facebook.com"),
            ("out.reddit.com", "out.reddit.com"),
            ("youtu.be", "youtu.be"),
            ("m.youtube.com", "*.youtube.com"),
        ],
    )
    def test_builtin_wrappers_match(self, effective_rules, host, expected_pattern):
        matched = matched_rules(effective_rules, host)
        assert len(matched) == 1
        assert expected_pattern in matched[0].hosts

    @pytest.mark.parametrize("host", ["google.com.evil.com", "www.reddit.com", "example.com", ""])
    def test_non_wrapper_hosts_match_nothing(self, effective_rules, host):
        assert matched_rules(effective_rules, host) == ()

    def test_every_matching_rule_is_returned(self, make_effective):
        effective = make_effective(
            {"host_rules": [{"hosts": ["www.google.com"], "remove_params": ["sa"]}]}
        )
        matched = matched_rules(effective, "www.google.com")
        assert len(matched) == 2
        assert matched[0].remove_params == ("sa",)

    def test_trailing_dot_host(self, effective_rules):
        assert len(matched_rules(effective_rules, "www.google.com.")) == 1


# ============================================================================
# Parameter Filter
# ============================================================================

class TestFilterQuery:

    def test_global_exact_and_glob_removals(self, effective_rules):
        names = _names(
            "https://example.com/?utm_source=a&gclid=b&fbclid=c&msclkid=d&pk_kwd=e&id=42",
            effective_rules,
        )
        assert names == ["id"]

    def test_name_matching_is_case_insensitive(self, effective_rules):
        names = _names("https://example.com/?UTM_Source=a&GCLID=b&Id=1", effective_rules)
        assert names == ["Id"]

    def test_order_and_duplicates_preserved(self, effective_rules):
        parsed = parse_url("https://example.com/?b=1&utm_source=x&a=2&b=3&gclid=y&a=4")
        kept = filter_query(parsed.query, effective_rules, ())
        assert [param.raw for param in kept] == ["b=1", "a=2", "b=3", "a=4"]

    def test_global_keep_beats_global_remove(self, make_effective):
        effective = make_effective({"keep_params": ["utm_source", "gclid"]})
        names = _names("https://example.com/?utm_source=a&utm_medium=b&gclid=c", effective)
        assert names == ["utm_source", "gclid"]

    def test_host_keep_beats_global_remove(self, make_effective):
        effective = make_effective({"host_rules": [{"hosts": ["shop.example"], "keep_params": ["ref"]}]})
        assert _names("https://shop.example/?ref=abc&utm_source=x", effective) == ["ref"]
        assert _names("https://other.example/?ref=abc&utm_source=x", effective) == []

    def test_host_removals_only_apply_to_matching_hosts(self, make_effective):
        effective = make_effective(
            {"host_rules": [{"hosts": ["*.shop.example"], "remove_params": ["session"], "remove_param_globs": ["trk*"]}]}
        )
        assert _names("https://www.shop.example/?session=1&trkid=2&item=3", effective) == ["item"]
        assert _names("https://news.example/?session=1&trkid=2&item=3", effective) == ["session", "trkid", "item"]

    def test_strip_all_with_keep(self, make_effective):
        effective = make_effective(
            {"host_rules": [{"hosts": ["*.t.co"], "strip_all_params": True, "keep_params": ["id"]}]}
        )
        assert _names("https://t.co/?id=5&x=9&amp=1", effective) == ["id"]

    def test_strip_all_keep_is_union_across_rules(self, make_effective):
        effective = make_effective(
            {
                "host_rules": [
                    {"hosts": ["a.example"], "strip_all_params": True, "keep_params": ["id"]},
                    {"hosts": ["*.example"], "strip_all_params": True, "keep_params": ["page"]},
                ]
            }
        )
        assert _names("https://a.example/?x=1&page=2&id=3", effective) == ["page", "id"]

    def test_everything_stripped_is_valid(self, effective_rules):
        parsed = parse_url("https://example.com/?utm_source=a&utm_medium=b")
        assert filter_query(parsed.query, effective_rules, ()) == ()

    def test_empty_query(self, effective_rules):
        assert filter_query((), effective_rules, ()) == ()


def test_remove_and_keep_sets_are_folded():
    rules = RuleSet.from_document({"remove_params": ["Session"], "keep_params": ["ID"]})
    assert build_remove_set({"SESSION", "page"}, rules, ()) == {"session"}
    assert build_keep_set(rules, ()) == {"id"}
