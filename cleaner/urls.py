"""Parse raw strings into ParsedUrl and check absolute-URL shape."""

from __future__ import annotations

import re
from urllib.parse import quote, urlsplit

from core.config import CleanerConfig
from core.errors import InvalidUrl
from core.models import ParsedUrl, QueryParam


# RFC 3986 scheme: ALPHA *( ALPHA / DIGIT / "+" / "-" / "." )
_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.\-]*$")
_WHITESPACE_RE = re.compile(r"\s")


def trim_input(raw: str) -> str:
    """Strip whitespace and the `<...>` wrappers pasted links often carry."""
    opener, closer = CleanerConfig.TRIM_CHARS
    return raw.strip().lstrip(opener).rstrip(closer).strip()


def _has_forbidden_chars(text: str) -> bool:
    """Whitespace and control characters never appear in a well-formed URL."""
    return any(ch.isspace() or ord(ch) < 0x20 or ord(ch) == 0x7F for ch in text)


def quote_whitespace(text: str) -> str:
    """Percent-encode whitespace inside a decoded URL (`a b` -> `a%20b`); ends are trimmed."""
    return _WHITESPACE_RE.sub(lambda match: quote(match.group(0)), text.strip())


def split_query(query: str) -> tuple[QueryParam, ...]:
    """Split a raw query string into ordered params; empty segments are dropped."""
    return tuple(QueryParam.from_segment(segment) for segment in query.split("&") if segment)


def parse_url(raw: str) -> ParsedUrl:
    """
    Parse an absolute URL.

    Rules:
    - Surrounding whitespace and `<`/`>` are trimmed first
    - Must have a valid scheme and a non-empty host
    - Port, if present, must be numeric and in range
    - No embedded whitespace or control characters

    Raises:
        InvalidUrl: If `raw` is not a syntactically valid absolute URL.
    """
    if not isinstance(raw, str):
        raise InvalidUrl(repr(raw), "expected a string")

    text = trim_input(raw)
    if not text:
        raise InvalidUrl(raw, "empty input")
    if _has_forbidden_chars(text):
        raise InvalidUrl(raw, "contains whitespace or control characters")

    try:
        parts = urlsplit(text)
        port = parts.port
    except ValueError as exc:
        raise InvalidUrl(raw, str(exc)) from exc

    if not _SCHEME_RE.match(parts.scheme):
        raise InvalidUrl(raw, "missing or invalid scheme")
    if not parts.netloc or not parts.hostname:
        raise InvalidUrl(raw, "missing host")

    return ParsedUrl(
        scheme=parts.scheme,
        netloc=parts.netloc,
        host=parts.hostname,
        port=port,
        path=parts.path,
        query=split_query(parts.query),
        fragment=parts.fragment,
    )


def try_parse_url(raw: str) -> ParsedUrl | None:
    """parse_url() that returns None instead of raising."""
    try:
        return parse_url(raw)
    except InvalidUrl:
        return None
