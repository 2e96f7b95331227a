"""
Built-in rule set shipped with cleanshare.

Curated baseline of common trackers plus the redirect wrappers whose real
target travels in a query parameter. Treated as a constant: build_builtin()
always returns an equal, freshly validated RuleSet; nothing mutates it.
"""

from typing import Any

from core.models import RuleSet


# Exact parameter names (matched case-insensitively)
TRACKING_PARAMS = [
    "gclid",
    "gbraid",
    "wbraid",
    "fbclid",
    "igshid",
    "twclid",
    "mc_eid",
    "msclkid",
    "dclid",
    "icid",
    "mkt_tok",
    "vero_id",
    "vero_conv",
    "spm",
    "ncid",
    "epik",
    "si",
]

# Parameter-name families
TRACKING_PARAM_GLOBS = [
    "utm_*",
    "pk_*",  # Matomo/Piwik campaign params
    "mtm_*",
    "oly_*",
    "s_cid*",
    "aff*",
    "ref*",
]

# Known redirect wrappers with an embedded target URL
REDIRECT_WRAPPERS: list[dict[str, Any]] = [
    {"hosts": ["*.google.com"], "unwrap_params": ["url", "q", "u"]},
    {"hosts": ["*.facebook.com", "*.lm.facebook.com"], "unwrap_params": ["u"]},
    {"hosts": ["out.reddit.com"], "unwrap_params": ["url"]},
    {"hosts": ["*.youtube.com", "youtu.be"], "unwrap_params": ["q"]},
]

BUILTIN_DOCUMENT: dict[str, Any] = {
    "remove_params": TRACKING_PARAMS,
    "remove_param_globs": TRACKING_PARAM_GLOBS,
    "keep_params": [],
    "host_rules": REDIRECT_WRAPPERS,
}


def build_builtin() -> RuleSet:
    """Return the built-in rule set."""
    return RuleSet.from_document(BUILTIN_DOCUMENT)


BUILTIN_RULES: RuleSet = build_builtin()
