"""
Default engine configuration for cleanshare.

These settings are IMMUTABLE: the engine reads them, nothing writes them.
The only knob that tests or embedding callers flip is DEBUG_EVENTS.
"""

from typing import Set, Tuple


class CleanerConfig:
    """
    Immutable engine settings.

    Rule semantics (what to strip, what to unwrap) live in the rule set,
    not here; this class only bounds how the engine runs.
    """

    # ========================================================================
    # Redirect Unwrapping
    # ========================================================================

    # Nested redirect wrappers are followed at most this many hops deep.
    # Past the limit the current URL is kept as-is (never an error).
    MAX_UNWRAP_DEPTH: int = 5
    """Maximum nested unwrap hops per input URL."""

    # ========================================================================
    # Input Handling
    # ========================================================================

    # Characters trimmed from both ends of pasted links ("<https://...>")
    TRIM_CHARS: Tuple[str, str] = ("<", ">")
    """Leading/trailing wrapper characters stripped before parsing."""

    # ========================================================================
    # Rule Files
    # ========================================================================

    # Extension -> document format
    RULE_FILE_EXTENSIONS: dict[str, str] = {
        ".yaml": "yaml",
        ".yml": "yaml",
        ".json": "json",
    }
    """Supported rule document extensions."""

    RULE_FORMATS: Set[str] = {"yaml", "json"}
    """Decoders available for rule documents."""

    # ========================================================================
    # Batch Processing
    # ========================================================================

    # Cleaning is CPU-light; a small pool is plenty for stdin/file batches.
    DEFAULT_BATCH_WORKERS: int = 4
    """Default worker threads for clean_batch()."""

    # ========================================================================
    # Observability
    # ========================================================================

    # Library code stays silent unless this is switched on.
    DEBUG_EVENTS: bool = False
    """Emit debug events (unwrap hops, limit stops) to stderr."""

    @classmethod
    def validate(cls) -> None:
        """
        Validate configuration at startup.

        Raises:
            AssertionError: If any constraint is violated.
        """
        assert (
            cls.MAX_UNWRAP_DEPTH >= 1
        ), "MAX_UNWRAP_DEPTH must be >= 1"

        assert (
            cls.DEFAULT_BATCH_WORKERS >= 1
        ), "DEFAULT_BATCH_WORKERS must be >= 1"

        assert (
            all(ext.startswith(".") for ext in cls.RULE_FILE_EXTENSIONS)
        ), "RULE_FILE_EXTENSIONS keys must start with '.'"

        assert (
            set(cls.RULE_FILE_EXTENSIONS.values()) <= cls.RULE_FORMATS
        ), "RULE_FILE_EXTENSIONS must map to a known format"


# Validate at module import time
CleanerConfig.validate()
