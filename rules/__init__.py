"""Rule model plumbing: built-in rules, merging, host matching, and loading."""

from rules.builtin import BUILTIN_RULES, build_builtin
from rules.hosts import matched_rules
from rules.loader import load_document, load_effective
from rules.merge import load, merge
from rules.schema import validate_document

__all__ = [
    "BUILTIN_RULES",
    "build_builtin",
    "matched_rules",
    "load_document",
    "load_effective",
    "load",
    "merge",
    "validate_document",
]
