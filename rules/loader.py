"""Read YAML/JSON rule documents from disk and build the effective rule set."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from core.config import CleanerConfig
from core.errors import InvalidRuleSet
from core.models import EffectiveRuleSet
from rules.builtin import build_builtin
from rules.merge import load


def _decode(text: str, fmt: str, path: Path) -> Any:
    """Decode document text in the given format."""
    try:
        if fmt == "yaml":
            return yaml.safe_load(text)
        return json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise InvalidRuleSet(f"failed to parse {fmt.upper()} rules file {path}: {exc}") from exc


def load_document(path: str | Path) -> dict[str, Any]:
    """
    Read and decode a rule document.

    Format is chosen by file extension (.yaml/.yml/.json). An empty file is an
    empty document.

    Raises:
        InvalidRuleSet: Unsupported extension, unreadable file, decode error,
            or a top level that is not a mapping.
    """
    rules_path = Path(path)
    fmt = CleanerConfig.RULE_FILE_EXTENSIONS.get(rules_path.suffix.lower())
    if fmt is None:
        raise InvalidRuleSet(f"unsupported rules file extension: {rules_path.suffix or '<none>'}")

    try:
        text = rules_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise InvalidRuleSet(f"failed to open rules file {rules_path}: {exc}") from exc

    document = _decode(text, fmt, rules_path)
    if document is None:
        return {}
    if not isinstance(document, dict):
        raise InvalidRuleSet(
            f"rules file {rules_path} must contain a mapping, got {type(document).__name__}"
        )
    return document


def load_effective(path: str | Path | None = None) -> EffectiveRuleSet:
    """Built-in rules merged with the optional rules file at `path`."""
    user_document = load_document(path) if path is not None else None
    return load(build_builtin(), user_document)
