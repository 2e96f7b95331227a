"""
Shared pytest fixtures and configuration for cleanshare tests.
"""

import json
from pathlib import Path
from typing import Any, Callable

import pytest
import yaml

from core.models import EffectiveRuleSet, RuleSet
from rules.builtin import build_builtin
from rules.merge import load


# ============================================================================
# Fixtures: Rule Sets
# ============================================================================

@pytest.fixture
def builtin_rules() -> RuleSet:
    """The built-in rule set constant."""
    return build_builtin()


@pytest.fixture
def effective_rules(builtin_rules: RuleSet) -> EffectiveRuleSet:
    """Built-in rules with no user override."""
    return load(builtin_rules)


@pytest.fixture
def make_effective(builtin_rules: RuleSet) -> Callable[[dict[str, Any]], EffectiveRuleSet]:
    """Factory: built-in rules merged with a user document."""

    def _make(document: dict[str, Any]) -> EffectiveRuleSet:
        return load(builtin_rules, document)

    return _make


@pytest.fixture
def google_unwrap_document() -> dict[str, Any]:
    """User rule unwrapping Google redirect links via ?q= / ?url=."""
    return {"host_rules": [{"hosts": ["*.google.com"], "unwrap_params": ["q", "url"]}]}


# ============================================================================
# Fixtures: File Paths
# ============================================================================

@pytest.fixture
def schema_path() -> Path:
    """Path to the rule-set JSON schema."""
    return Path(__file__).parent.parent / "rules" / "ruleset.schema.json"


@pytest.fixture
def write_rules_file(tmp_path: Path) -> Callable[..., Path]:
    """Factory: write a rule document to a temp YAML/JSON file."""

    def _write(document: Any, suffix: str = ".yaml") -> Path:
        path = tmp_path / f"rules{suffix}"
        if suffix == ".json":
            path.write_text(json.dumps(document), encoding="utf-8")
        else:
            path.write_text(yaml.safe_dump(document), encoding="utf-8")
        return path

    return _write


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "contract: contract schema compliance tests")
    config.addinivalue_line("markers", "integration: end-to-end integration tests")
    config.addinivalue_line("markers", "unit: unit tests")
