"""JSON-schema validation for decoded rule documents."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

import jsonschema

from core.errors import InvalidRuleSet


RULESET_SCHEMA_PATH = Path(__file__).resolve().parent / "ruleset.schema.json"


@lru_cache(maxsize=1)
def load_ruleset_schema() -> dict[str, Any]:
    """Load the rule-set JSON schema shipped with the package."""
    return json.loads(RULESET_SCHEMA_PATH.read_text(encoding="utf-8"))


def _error_location(error: jsonschema.ValidationError) -> str:
    """Render a schema error path as `host_rules.0.hosts`."""
    return ".".join(str(part) for part in error.absolute_path) or "<root>"


def validate_document(document: Any) -> None:
    """
    Validate a decoded rule document against ruleset.schema.json.

    Raises:
        InvalidRuleSet: On the first (most relevant) schema violation.
    """
    validator = jsonschema.Draft7Validator(load_ruleset_schema())
    error = jsonschema.exceptions.best_match(validator.iter_errors(document))
    if error is not None:
        raise InvalidRuleSet(f"{_error_location(error)}: {error.message}")
