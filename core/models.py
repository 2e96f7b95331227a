"""
Core Pydantic models for cleanshare.

Design principles:
- Rule models are frozen once validated and shared read-only by every worker
- Unknown document fields are ignored; wrong shapes raise InvalidRuleSet
- Declaration order is kept (unwrap order depends on it), duplicates dropped
- Glob patterns are compiled once, when the model is built
"""

from typing import Any, FrozenSet, Iterable, Mapping, Optional, Tuple
from urllib.parse import unquote_plus

from pydantic import BaseModel, ConfigDict, PrivateAttr, ValidationError, field_validator

from core.errors import InvalidRuleSet
from core.glob import GlobPattern, compile_patterns


# ============================================================================
# Helpers
# ============================================================================

def _normalize_names(value: Any) -> Tuple[str, ...]:
    """Coerce a document list into a de-duplicated, order-preserving tuple."""
    if value is None:
        return ()
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple, set, frozenset)):
        raise ValueError("expected a list of strings")
    out: list[str] = []
    seen: set[str] = set()
    for item in value:
        if not isinstance(item, str):
            raise ValueError(f"expected a string, got {type(item).__name__}")
        cleaned = item.strip()
        if not cleaned:
            raise ValueError("entries must be non-empty strings")
        if cleaned not in seen:
            seen.add(cleaned)
            out.append(cleaned)
    return tuple(out)


def _fold(names: Iterable[str]) -> FrozenSet[str]:
    """Lowercase a set of parameter names for case-insensitive lookups."""
    return frozenset(name.lower() for name in names)


def describe_validation_error(exc: ValidationError) -> str:
    """Render a pydantic ValidationError as one readable line."""
    parts = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "<root>"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


_NAME_FIELDS = ("unwrap_params", "remove_params", "remove_param_globs", "keep_params")


# ============================================================================
# Rules
# ============================================================================

class HostRule(BaseModel):
    """
    Sanitization behavior scoped to hosts matching any pattern in `hosts`.

    Example:
      hosts = ("*.google.com",)        # also matches bare google.com
      unwrap_params = ("url", "q")     # real target travels in ?url= or ?q=
      strip_all_params = False
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    hosts: Tuple[str, ...]
    unwrap_params: Tuple[str, ...] = ()
    remove_params: Tuple[str, ...] = ()
    remove_param_globs: Tuple[str, ...] = ()
    keep_params: Tuple[str, ...] = ()
    strip_all_params: bool = False

    _host_globs: Tuple[GlobPattern, ...] = PrivateAttr(default=())
    _remove_globs: Tuple[GlobPattern, ...] = PrivateAttr(default=())
    _remove_names: FrozenSet[str] = PrivateAttr(default=frozenset())
    _keep_names: FrozenSet[str] = PrivateAttr(default=frozenset())
    _unwrap_names: Tuple[str, ...] = PrivateAttr(default=())

    @field_validator("hosts", *_NAME_FIELDS, mode="before")
    @classmethod
    def normalize_lists(cls, v: Any) -> Tuple[str, ...]:
        return _normalize_names(v)

    @field_validator("hosts")
    @classmethod
    def require_hosts(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        """A host rule without host patterns is ambiguous."""
        if not v:
            raise ValueError("a host rule must name at least one host pattern")
        return v

    @field_validator("strip_all_params", mode="before")
    @classmethod
    def default_strip_all(cls, v: Any) -> Any:
        return False if v is None else v

    def model_post_init(self, __context: Any) -> None:
        self._host_globs = compile_patterns(self.hosts)
        self._remove_globs = compile_patterns(self.remove_param_globs)
        self._remove_names = _fold(self.remove_params)
        self._keep_names = _fold(self.keep_params)
        unwrap_names: list[str] = []
        for name in self.unwrap_params:
            if name.lower() not in unwrap_names:
                unwrap_names.append(name.lower())
        self._unwrap_names = tuple(unwrap_names)

    def matches_host(self, host: str) -> bool:
        """True when any host pattern matches `host`."""
        if not host:
            return False
        return any(glob.matches(host) for glob in self._host_globs)

    @property
    def remove_globs(self) -> Tuple[GlobPattern, ...]:
        return self._remove_globs

    @property
    def remove_names(self) -> FrozenSet[str]:
        """Lowercased exact parameter names to remove."""
        return self._remove_names

    @property
    def keep_names(self) -> FrozenSet[str]:
        """Lowercased parameter names that are never removed."""
        return self._keep_names

    @property
    def unwrap_names(self) -> Tuple[str, ...]:
        """Lowercased unwrap parameter names, in declaration order."""
        return self._unwrap_names


class RuleSet(BaseModel):
    """
    A complete rule configuration (built-in constant or user document).

    Global fields apply to every URL; `host_rules` only to matching hosts.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    remove_params: Tuple[str, ...] = ()
    remove_param_globs: Tuple[str, ...] = ()
    keep_params: Tuple[str, ...] = ()
    host_rules: Tuple[HostRule, ...] = ()

    _remove_globs: Tuple[GlobPattern, ...] = PrivateAttr(default=())
    _remove_names: FrozenSet[str] = PrivateAttr(default=frozenset())
    _keep_names: FrozenSet[str] = PrivateAttr(default=frozenset())

    @field_validator("remove_params", "remove_param_globs", "keep_params", mode="before")
    @classmethod
    def normalize_lists(cls, v: Any) -> Tuple[str, ...]:
        return _normalize_names(v)

    @field_validator("host_rules", mode="before")
    @classmethod
    def default_host_rules(cls, v: Any) -> Any:
        if v is None:
            return ()
        if isinstance(v, (str, bytes, Mapping)):
            raise ValueError("expected a list of host rules")
        return v

    def model_post_init(self, __context: Any) -> None:
        self._remove_globs = compile_patterns(self.remove_param_globs)
        self._remove_names = _fold(self.remove_params)
        self._keep_names = _fold(self.keep_params)

    @classmethod
    def from_document(cls, document: Any) -> "RuleSet":
        """
        Build a rule set from an already-decoded document.

        Raises:
            InvalidRuleSet: If the document does not have the rule-set shape.
        """
        if isinstance(document, cls):
            return document
        if not isinstance(document, Mapping):
            raise InvalidRuleSet(f"rule document must be a mapping, got {type(document).__name__}")
        try:
            return cls.model_validate(dict(document))
        except ValidationError as exc:
            raise InvalidRuleSet(describe_validation_error(exc)) from exc

    @property
    def remove_globs(self) -> Tuple[GlobPattern, ...]:
        return self._remove_globs

    @property
    def remove_names(self) -> FrozenSet[str]:
        """Lowercased exact parameter names to remove."""
        return self._remove_names

    @property
    def keep_names(self) -> FrozenSet[str]:
        """Lowercased parameter names that are never removed."""
        return self._keep_names


class EffectiveRuleSet(RuleSet):
    """
    The merged, read-only rule set used for every URL in one run.

    Built once by rules.merge.load(); never mutated afterwards, so worker
    threads read it without locks.
    """


# ============================================================================
# Parsed URLs
# ============================================================================

class QueryParam(BaseModel):
    """
    One `key=value` segment of a query string.

    `name`/`value` are form-decoded for matching; `raw` is the segment exactly
    as it appeared, so retained parameters reserialize byte-for-byte.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    value: str
    raw: str

    @classmethod
    def from_segment(cls, segment: str) -> "QueryParam":
        key, _, value = segment.partition("=")
        return cls(name=unquote_plus(key), value=unquote_plus(value), raw=segment)

    @property
    def folded_name(self) -> str:
        return self.name.lower()

    @property
    def raw_value(self) -> str:
        return self.raw.partition("=")[2]


class ParsedUrl(BaseModel):
    """
    An absolute URL split into the parts the engine works with.

    `netloc` is the full authority (user-info, host, port) kept verbatim;
    `host` is the lowercased host name used for rule matching.
    """
    model_config = ConfigDict(frozen=True)

    scheme: str
    netloc: str
    host: str
    port: Optional[int] = None
    path: str = ""
    query: Tuple[QueryParam, ...] = ()
    fragment: str = ""

    @property
    def query_string(self) -> str:
        return "&".join(param.raw for param in self.query)

    def with_query(self, query: Iterable[QueryParam]) -> "ParsedUrl":
        return self.model_copy(update={"query": tuple(query)})

    def without_fragment(self) -> "ParsedUrl":
        return self.model_copy(update={"fragment": ""})

    def geturl(self) -> str:
        """Reserialize; the `?` is omitted when no parameters remain."""
        url = f"{self.scheme}://{self.netloc}{self.path}"
        query = self.query_string
        if query:
            url += f"?{query}"
        if self.fragment:
            url += f"#{self.fragment}"
        return url

    def normalized(self) -> str:
        """String form used for cycle detection (scheme and authority lowercased)."""
        return self.model_copy(update={"netloc": self.netloc.lower()}).geturl()
