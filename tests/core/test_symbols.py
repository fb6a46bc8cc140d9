"""
Tests for Fresh Symbol Generation.
"""

import pytest

from rewrite_idioms.core.symbols import (
  DEFAULT_PREFIX,
  CallableSymbolGenerator,
  CounterSymbolGenerator,
  FixedSymbolGenerator,
  define_gensym,
  get_symbol_generator,
  reset_symbol_generator,
  set_symbol_generator,
  use_symbol_generator,
)


def test_counter_never_repeats():
  gen = CounterSymbolGenerator()
  names = [gen.next() for _ in range(100)]
  assert len(set(names)) == 100
  assert all(n.startswith(DEFAULT_PREFIX) for n in names)
  assert names[0] == f"{DEFAULT_PREFIX}1"


def test_counter_custom_prefix_and_start():
  gen = CounterSymbolGenerator("t", start=5)
  assert [gen.next(), gen.next()] == ["t5", "t6"]


@pytest.mark.parametrize("prefix", ["", "1abc", "-x"])
def test_counter_rejects_bad_prefix(prefix):
  with pytest.raises(ValueError):
    CounterSymbolGenerator(prefix)


def test_fixed_generator():
  gen = FixedSymbolGenerator("__TEMP__")
  assert gen.next() == gen.next() == "__TEMP__"


def test_callable_generator_stringifies():
  gen = CallableSymbolGenerator(lambda: 42)
  assert gen.next() == "42"


def test_set_returns_previous():
  first = FixedSymbolGenerator("a")
  second = FixedSymbolGenerator("b")
  set_symbol_generator(first)
  assert set_symbol_generator(second) is first
  assert get_symbol_generator() is second


def test_use_symbol_generator_restores_on_exit():
  before = get_symbol_generator()
  with use_symbol_generator(FixedSymbolGenerator("x")) as gen:
    assert get_symbol_generator() is gen
  assert get_symbol_generator() is before


def test_use_symbol_generator_restores_on_error():
  before = get_symbol_generator()
  with pytest.raises(RuntimeError):
    with use_symbol_generator(FixedSymbolGenerator("x")):
      raise RuntimeError("boom")
  assert get_symbol_generator() is before


def test_define_gensym_as_decorator():
  @define_gensym
  def _temp():
    return "__TEMP__"

  assert get_symbol_generator().next() == "__TEMP__"
  # the decorated function is returned unchanged
  assert _temp() == "__TEMP__"


def test_reset_installs_fresh_counter():
  set_symbol_generator(FixedSymbolGenerator("x"))
  reset_symbol_generator("q")
  gen = get_symbol_generator()
  assert isinstance(gen, CounterSymbolGenerator)
  assert gen.next() == "q1"
