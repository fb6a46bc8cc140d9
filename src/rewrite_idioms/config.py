"""
Runtime Configuration Store.

Settings are read from ``[tool.rewrite_idioms]`` in the nearest
``pyproject.toml`` and may be overridden by explicit arguments (e.g. CLI
flags).
"""

import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

from rewrite_idioms.core.matcher import DEFAULT_BINDING_KEYWORD, DEFAULT_NAVIGATION_KEYWORD
from rewrite_idioms.core.symbols import DEFAULT_PREFIX

if sys.version_info >= (3, 11):
  import tomllib
else:
  try:
    import tomli as tomllib
  except ImportError:
    tomllib = None  # type: ignore

TOOL_SECTION = "rewrite_idioms"


class RewriteConfig(BaseModel):
  """
  Global configuration container for the rewriting engine.
  """

  navigation_keyword: str = Field(
    DEFAULT_NAVIGATION_KEYWORD, description="Selector introducing short-circuit navigation (e.g. 'andand')."
  )
  binding_keyword: str = Field(
    DEFAULT_BINDING_KEYWORD, description="Selector introducing bind-final-value (e.g. 'returning')."
  )
  temp_prefix: str = Field(DEFAULT_PREFIX, description="Reserved prefix for generated temporaries.")
  trace: bool = Field(False, description="If True, record every rewrite in a trace log.")

  @field_validator("navigation_keyword", "binding_keyword", "temp_prefix")
  @classmethod
  def validate_identifier(cls, v: str) -> str:
    """
    Ensures the value can be spelled as an identifier.

    Args:
        v (str): The raw value.

    Returns:
        str: The stripped value.

    Raises:
        ValueError: If the value is not a valid identifier.
    """
    v_clean = v.strip()
    if not v_clean.isidentifier():
      raise ValueError(f"Not a valid identifier: '{v_clean}'")
    return v_clean

  @model_validator(mode="after")
  def validate_distinct_keywords(self) -> "RewriteConfig":
    """Both idioms need their own keyword."""
    if self.navigation_keyword == self.binding_keyword:
      raise ValueError(f"Idiom keywords must differ, both are '{self.navigation_keyword}'")
    return self

  @classmethod
  def load(
    cls,
    navigation_keyword: Optional[str] = None,
    binding_keyword: Optional[str] = None,
    temp_prefix: Optional[str] = None,
    trace: Optional[bool] = None,
    search_path: Optional[Path] = None,
  ) -> "RewriteConfig":
    """
    Loads configuration from pyproject.toml and overrides with explicit arguments.

    Args:
        navigation_keyword (Optional[str]): Override for the navigation keyword.
        binding_keyword (Optional[str]): Override for the binding keyword.
        temp_prefix (Optional[str]): Override for the temporary prefix.
        trace (Optional[bool]): Override for trace recording.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        RewriteConfig: The fully resolved configuration object.
    """
    start_dir = search_path or Path.cwd()
    toml_config, _ = _load_toml_settings(start_dir)

    overrides: Dict[str, Any] = {
      "navigation_keyword": navigation_keyword,
      "binding_keyword": binding_keyword,
      "temp_prefix": temp_prefix,
      "trace": trace,
    }
    merged = {k: v for k, v in toml_config.items() if k in cls.model_fields}
    merged.update({k: v for k, v in overrides.items() if v is not None})

    return cls(**merged)


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Recursively searches parents for 'pyproject.toml' and extracts config.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory definition was found in.
  """
  if not tomllib:
    return {}, None

  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except (OSError, tomllib.TOMLDecodeError):
        return {}, None

      tool_section = data.get("tool", {})
      return tool_section.get(TOOL_SECTION, {}), parent

  return {}, None
