"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Isolation of the process-wide symbol generator so tests that install
  a custom one do not leak into each other.
- A deterministic ``__TEMP__`` generator for writing expected output literally.
"""

import sys
import pytest
from pathlib import Path

# Add src to path so we can import 'rewrite_idioms' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from rewrite_idioms.core.symbols import (  # noqa: E402
  FixedSymbolGenerator,
  get_symbol_generator,
  set_symbol_generator,
  use_symbol_generator,
)

TEMP = "__TEMP__"


@pytest.fixture(autouse=True)
def isolate_symbol_generator():
  """
  Restores whatever generator was installed before the test ran.
  """
  original = get_symbol_generator()
  yield
  set_symbol_generator(original)


@pytest.fixture
def fixed_temp():
  """Makes every fresh symbol ``__TEMP__`` for the duration of the test."""
  with use_symbol_generator(FixedSymbolGenerator(TEMP)) as gen:
    yield gen
