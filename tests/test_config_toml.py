"""
Tests for Config Persistence (TOML).

Verifies that:
1. RewriteConfig.load() picks up [tool.rewrite_idioms] from pyproject.toml.
2. Explicit arguments (CLI flags) override TOML settings.
3. File traversal finds toml in parent directories.
4. Invalid keywords are rejected.
"""

import pytest
from pydantic import ValidationError

from rewrite_idioms.config import RewriteConfig
from rewrite_idioms.core.symbols import DEFAULT_PREFIX


@pytest.fixture
def toml_file(tmp_path):
  """Creates a dummy pyproject.toml in the temp dir."""
  fpath = tmp_path / "pyproject.toml"
  content = """
[project]
name = "demo"

[tool.rewrite_idioms]
navigation_keyword = "maybe"
temp_prefix = "_tmp"
trace = true
unknown_setting = 1
"""
  fpath.write_text(content, encoding="utf-8")
  return fpath


def test_defaults_without_toml(tmp_path):
  config = RewriteConfig.load(search_path=tmp_path)

  assert config.navigation_keyword == "andand"
  assert config.binding_keyword == "returning"
  assert config.temp_prefix == DEFAULT_PREFIX
  assert config.trace is False


def test_load_defaults_from_toml(tmp_path, toml_file):
  """
  Scenario: User runs CLI without args inside a configured project.
  Expect: Config matches TOML values, unknown keys are ignored.
  """
  config = RewriteConfig.load(search_path=tmp_path)

  assert config.navigation_keyword == "maybe"
  assert config.binding_keyword == "returning"
  assert config.temp_prefix == "_tmp"
  assert config.trace is True


def test_cli_overrides_toml(tmp_path, toml_file):
  """
  Scenario: User provides CLI arg which contradicts TOML.
  Expect: CLI arg takes precedence.
  """
  config = RewriteConfig.load(navigation_keyword="try_", trace=False, search_path=tmp_path)

  assert config.navigation_keyword == "try_"  # CLI wins
  assert config.temp_prefix == "_tmp"  # TOML fallback
  assert config.trace is False


def test_toml_found_in_parent(tmp_path, toml_file):
  nested = tmp_path / "src" / "pkg"
  nested.mkdir(parents=True)

  config = RewriteConfig.load(search_path=nested)
  assert config.navigation_keyword == "maybe"


def test_broken_toml_falls_back_to_defaults(tmp_path):
  (tmp_path / "pyproject.toml").write_text("[tool.rewrite_idioms\nbroken", encoding="utf-8")
  config = RewriteConfig.load(search_path=tmp_path)
  assert config.navigation_keyword == "andand"


def test_keywords_are_stripped():
  config = RewriteConfig(navigation_keyword="  maybe ")
  assert config.navigation_keyword == "maybe"


@pytest.mark.parametrize("value", ["", "two words", "9lives", "bar?"])
def test_invalid_keyword_rejected(value):
  with pytest.raises(ValidationError):
    RewriteConfig(binding_keyword=value)


def test_keywords_must_differ():
  with pytest.raises(ValidationError):
    RewriteConfig(navigation_keyword="same", binding_keyword="same")


def test_conflicting_override_rejected(tmp_path, toml_file):
  with pytest.raises(ValueError):
    RewriteConfig.load(binding_keyword="maybe", search_path=tmp_path)
