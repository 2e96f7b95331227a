"""Case-insensitive wildcard matching for host names and parameter names."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable

from core.errors import InvalidRuleSet


HOST_WILDCARD_PREFIX = "*."


def _translate(pattern: str) -> str:
    """Translate a `*`/`?` glob into an anchored regex; everything else is literal."""
    parts: list[str] = []
    for char in pattern:
        if char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return "".join(parts)


@dataclass(frozen=True)
class GlobPattern:
    """
    A compiled glob pattern.

    - `*` matches any sequence (including empty, including dots)
    - `?` matches exactly one character
    - A leading `*.` also matches the bare suffix (`*.example.com` ~ `example.com`)
    """

    pattern: str
    _regex: re.Pattern[str] = field(init=False, repr=False, compare=False)
    _bare_suffix: str | None = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.pattern, str) or not self.pattern.strip():
            raise InvalidRuleSet(f"glob pattern must be a non-empty string, got {self.pattern!r}")
        regex = re.compile(_translate(self.pattern), re.IGNORECASE | re.DOTALL)
        object.__setattr__(self, "_regex", regex)
        bare = None
        if self.pattern.startswith(HOST_WILDCARD_PREFIX):
            bare = self.pattern[len(HOST_WILDCARD_PREFIX):].lower()
        object.__setattr__(self, "_bare_suffix", bare)

    def matches(self, candidate: str) -> bool:
        """Return True when `candidate` matches this pattern (case-insensitive)."""
        if self._regex.fullmatch(candidate):
            return True
        return self._bare_suffix is not None and candidate.lower() == self._bare_suffix


def compile_patterns(patterns: Iterable[str]) -> tuple[GlobPattern, ...]:
    """Compile patterns, raising InvalidRuleSet on the first empty one."""
    return tuple(GlobPattern(pattern) for pattern in patterns)


def matches(pattern: GlobPattern | str, candidate: str) -> bool:
    """Match one candidate against a pattern, compiling string patterns on the fly."""
    if isinstance(pattern, str):
        pattern = GlobPattern(pattern)
    return pattern.matches(candidate)


def matches_any(patterns: Iterable[GlobPattern], candidate: str) -> bool:
    """Return True when any compiled pattern matches the candidate."""
    return any(pattern.matches(candidate) for pattern in patterns)
