"""
Orchestration Engine.

This module provides the `RewriteEngine`, the primary driver for rewriting
Python source. It wires configuration, the symbol generator, the matcher
and rules into a `TraversalEngine` and pairs it with the Python host
adapter:

1.  **Parsing**: LibCST parses the source. Syntax errors propagate unchanged.
2.  **Rewriting**: Every expression is lifted, processed and, if changed,
    lowered back in place.
3.  **Rendering**: The module is printed; untouched code keeps its formatting.

For host-independent use, build a `TraversalEngine` directly and feed it
trees.
"""

from typing import Optional

from rewrite_idioms.config import RewriteConfig
from rewrite_idioms.core.conversion_result import ConversionResult
from rewrite_idioms.core.matcher import IdiomMatcher
from rewrite_idioms.core.symbols import DEFAULT_PREFIX, CounterSymbolGenerator, SymbolGenerator
from rewrite_idioms.core.tracer import TraceLogger
from rewrite_idioms.core.traversal import TraversalEngine
from rewrite_idioms.core.tree import Node
from rewrite_idioms.host.python import PythonHost
from rewrite_idioms.host.transformer import rewrite_module


class RewriteEngine:
  """
  The main rewriting unit for Python source.
  """

  def __init__(
    self,
    config: Optional[RewriteConfig] = None,
    symbols: Optional[SymbolGenerator] = None,
  ):
    """
    Initializes the Engine.

    Args:
        config (RewriteConfig, optional): Runtime configuration. Defaults to
            built-in settings (no TOML lookup).
        symbols (SymbolGenerator, optional): Fresh-name source. If None and
            the configured prefix is the default, the process-wide generator
            is used; otherwise a private counter with that prefix.
    """
    self.config = config or RewriteConfig()

    if symbols is None and self.config.temp_prefix != DEFAULT_PREFIX:
      symbols = CounterSymbolGenerator(self.config.temp_prefix)

    self.tracer: Optional[TraceLogger] = TraceLogger() if self.config.trace else None
    self.host = PythonHost()
    self.traversal = TraversalEngine(
      matcher=IdiomMatcher(self.config.navigation_keyword, self.config.binding_keyword),
      symbols=symbols,
      tracer=self.tracer,
    )

  def parse(self, code: str) -> Node:
    """
    Parses a Python expression into a tree.

    Raises:
        libcst.ParserSyntaxError: If the input is not a valid expression.
    """
    return self.host.parse(code)

  def render(self, tree: Node) -> str:
    """Renders a tree as a Python expression."""
    return self.host.render(tree)

  def process(self, tree: Node) -> Node:
    """Rewrites every idiom in ``tree``."""
    return self.traversal.process(tree)

  def rewrite_expression(self, code: str) -> str:
    """
    Convenience for ``render(process(parse(code)))``.

    Unchanged input is returned as given.
    """
    tree = self.parse(code)
    processed = self.process(tree)
    if processed is tree:
      return code
    return self.render(processed)

  def run(self, code: str) -> ConversionResult:
    """
    Rewrites a whole Python module.

    Args:
        code (str): Python source code.

    Returns:
        ConversionResult: The rewritten code and bookkeeping.

    Raises:
        libcst.ParserSyntaxError: If the input is not valid Python.
    """
    if self.tracer:
      self.tracer.start_phase("Rewriting", "Idiom rewriting pass")

    try:
      new_code, count = rewrite_module(code, self.traversal, self.host)
    finally:
      if self.tracer:
        self.tracer.end_phase()

    events = self.tracer.export() if self.tracer else []
    return ConversionResult(code=new_code, rewrite_count=count, trace_events=events)
