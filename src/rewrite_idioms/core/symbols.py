"""
Fresh Symbol Generation.

Rules that introduce temporaries must not capture names the user's code
already binds. This module provides the ``SymbolGenerator`` service that
hands out such names, plus a process-wide default instance.

The default can be replaced at any time (``set_symbol_generator``,
``define_gensym`` or the ``use_symbol_generator`` context manager). A
replacement only affects calls made after it. Tests typically install a
``FixedSymbolGenerator`` so expected output can be written literally:

.. code-block:: python

    with use_symbol_generator(FixedSymbolGenerator("__TEMP__")):
        engine.process(tree)

Generators are not thread-safe. Hosts that rewrite several trees in
parallel should give each pass its own instance via ``TraversalEngine``.
"""

import itertools
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Callable, Iterator

DEFAULT_PREFIX = "__rw_tmp_"


class SymbolGenerator(ABC):
  """
  Abstract source of fresh identifiers.
  """

  @abstractmethod
  def next(self) -> str:
    """
    Returns an identifier suitable for a hygienic temporary.

    Returns:
        str: The identifier.
    """
    pass


class CounterSymbolGenerator(SymbolGenerator):
  """
  Default generator: ``prefix`` followed by an increasing counter.

  Never returns the same name twice. The prefix is reserved and should
  not be used by hand-written code.
  """

  def __init__(self, prefix: str = DEFAULT_PREFIX, start: int = 1) -> None:
    """
    Args:
        prefix: Reserved name prefix.
        start: First counter value.
    """
    if not prefix or not (prefix[0].isalpha() or prefix[0] == "_"):
      raise ValueError(f"Symbol prefix must start with a letter or underscore: {prefix!r}")
    self.prefix = prefix
    self._counter = itertools.count(start)

  def next(self) -> str:
    return f"{self.prefix}{next(self._counter)}"


class FixedSymbolGenerator(SymbolGenerator):
  """Always returns the same name. For deterministic tests only."""

  def __init__(self, name: str) -> None:
    self.name = name

  def next(self) -> str:
    return self.name


class CallableSymbolGenerator(SymbolGenerator):
  """Adapts a zero-argument callable to the generator interface."""

  def __init__(self, func: Callable[[], object]) -> None:
    self._func = func

  def next(self) -> str:
    return str(self._func())


_GLOBAL_GENERATOR: SymbolGenerator = CounterSymbolGenerator()


def get_symbol_generator() -> SymbolGenerator:
  """Returns the process-wide generator."""
  return _GLOBAL_GENERATOR


def set_symbol_generator(generator: SymbolGenerator) -> SymbolGenerator:
  """
  Installs a new process-wide generator.

  Args:
      generator: The replacement.

  Returns:
      SymbolGenerator: The previously installed generator.
  """
  global _GLOBAL_GENERATOR
  previous = _GLOBAL_GENERATOR
  _GLOBAL_GENERATOR = generator
  return previous


def reset_symbol_generator(prefix: str = DEFAULT_PREFIX) -> None:
  """Restores a fresh counter-based default."""
  set_symbol_generator(CounterSymbolGenerator(prefix))


def define_gensym(func: Callable[[], object]) -> Callable[[], object]:
  """
  Installs ``func`` as the process-wide generator.

  Usable as a decorator:

  .. code-block:: python

      @define_gensym
      def _temp():
          return "__TEMP__"
  """
  set_symbol_generator(CallableSymbolGenerator(func))
  return func


@contextmanager
def use_symbol_generator(generator: SymbolGenerator) -> Iterator[SymbolGenerator]:
  """
  Temporarily installs ``generator``, restoring the previous one on exit.
  """
  previous = set_symbol_generator(generator)
  try:
    yield generator
  finally:
    set_symbol_generator(previous)
