"""Core module for cleanshare."""

from core.config import CleanerConfig
from core.errors import CleanShareError, InvalidRuleSet, InvalidUrl
from core.glob import GlobPattern
from core.models import (
    EffectiveRuleSet,
    HostRule,
    ParsedUrl,
    QueryParam,
    RuleSet,
)

__all__ = [
    "CleanerConfig",
    "CleanShareError",
    "InvalidRuleSet",
    "InvalidUrl",
    "GlobPattern",
    "EffectiveRuleSet",
    "HostRule",
    "ParsedUrl",
    "QueryParam",
    "RuleSet",
]
