"""Integration tests for reading rule documents from disk."""

from pathlib import Path

import pytest

from cleaner.engine import clean_url
from core.errors import InvalidRuleSet
from rules.loader import load_document, load_effective


@pytest.mark.integration

def test_yaml_rules_file_loads(write_rules_file):
    """YAML rule documents decode into plain mappings."""
    path = write_rules_file({"remove_params": ["session"]}, suffix=".yaml")
    assert load_document(path) == {"remove_params": ["session"]}


@pytest.mark.integration

def test_yml_and_json_extensions(write_rules_file, tmp_path: Path):
    """`.yml` and `.json` are accepted too, case-insensitively."""
    json_path = write_rules_file({"keep_params": ["id"]}, suffix=".json")
    assert load_document(json_path) == {"keep_params": ["id"]}

    yml_path = tmp_path / "RULES.YML"
    yml_path.write_text("keep_params:\n  - page\n", encoding="utf-8")
    assert load_document(yml_path) == {"keep_params": ["page"]}


@pytest.mark.integration

def test_empty_file_is_empty_document(tmp_path: Path):
    path = tmp_path / "rules.yaml"
    path.write_text("", encoding="utf-8")
    assert load_document(path) == {}


@pytest.mark.integration
@pytest.mark.parametrize(
    "name, content",
    [
        ("rules.toml", "remove_params = []"),
        ("rules", "{}"),
        ("rules.yaml", "remove_params: [unclosed"),
        ("rules.json", "{not json"),
        ("rules.json", "[\"gclid\"]"),
        ("rules.yaml", "- gclid\n"),
    ],
)
def test_bad_files_raise_invalid_ruleset(tmp_path: Path, name: str, content: str):
    """Unsupported extension, decode errors and non-mapping roots are all fatal."""
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    with pytest.raises(InvalidRuleSet):
        load_document(path)


@pytest.mark.integration

def test_missing_file_raises_invalid_ruleset(tmp_path: Path):
    with pytest.raises(InvalidRuleSet, match="failed to open"):
        load_document(tmp_path / "missing.yaml")


@pytest.mark.integration

def test_load_effective_merges_user_rules(write_rules_file):
    """User rules apply on top of the built-in defaults."""
    path = write_rules_file(
        {
            "remove_params": ["session"],
            "host_rules": [{"hosts": ["*.t.co"], "strip_all_params": True, "keep_params": ["id"]}],
        }
    )
    effective = load_effective(path)

    assert clean_url("https://t.co/?id=5&x=9", effective) == "https://t.co/?id=5"
    assert clean_url("https://example.com/?session=1&gclid=2&a=3", effective) == "https://example.com/?a=3"


@pytest.mark.integration

def test_load_effective_without_path_is_builtin(effective_rules):
    assert load_effective() == effective_rules


@pytest.mark.integration

def test_load_effective_rejects_hostless_rule(write_rules_file):
    path = write_rules_file({"host_rules": [{"hosts": [], "unwrap_params": ["u"]}]}, suffix=".json")
    with pytest.raises(InvalidRuleSet):
        load_effective(path)
