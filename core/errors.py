"""Typed errors raised by the cleaning engine and the rule loader."""

from __future__ import annotations


class CleanShareError(Exception):
    """Base class for all cleanshare errors."""


class InvalidUrl(CleanShareError, ValueError):
    """
    Raised when an input string is not a parseable absolute URL.

    Per-item failure: batch callers record it for that input and continue.
    """

    def __init__(self, url: str, reason: str = "not an absolute URL") -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Invalid URL {url!r}: {reason}")


class InvalidRuleSet(CleanShareError, ValueError):
    """
    Raised when a rule document violates the rule schema.

    Fatal for a run: no URL is cleaned with a malformed rule set.
    """

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Invalid rule set: {detail}")
