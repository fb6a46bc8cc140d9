"""
Core Rewriting Engine.

Host-independent building blocks:

- ``tree``: immutable node variants and path addressing.
- ``symbols``: fresh identifier generation.
- ``matcher``: idiom shape recognition.
- ``rules``: one replacement rule per shape.
- ``traversal``: the single-pass tree walker.
- ``printer``: Ruby-like diagnostic rendering.
"""

from rewrite_idioms.core.errors import MalformedNode, RewriteError, UnsupportedSyntax
from rewrite_idioms.core.matcher import BindingShape, IdiomMatcher, NavigationShape
from rewrite_idioms.core.printer import to_source
from rewrite_idioms.core.symbols import (
  CounterSymbolGenerator,
  FixedSymbolGenerator,
  SymbolGenerator,
  define_gensym,
  get_symbol_generator,
  set_symbol_generator,
  use_symbol_generator,
)
from rewrite_idioms.core.traversal import TraversalEngine
from rewrite_idioms.core.tree import (
  And,
  Assign,
  Block,
  Call,
  Ident,
  Invoke,
  Lambda,
  Literal,
  Node,
  Symbol,
  Verbatim,
)

__all__ = [
  "And",
  "Assign",
  "BindingShape",
  "Block",
  "Call",
  "CounterSymbolGenerator",
  "FixedSymbolGenerator",
  "Ident",
  "IdiomMatcher",
  "Invoke",
  "Lambda",
  "Literal",
  "MalformedNode",
  "NavigationShape",
  "Node",
  "RewriteError",
  "Symbol",
  "SymbolGenerator",
  "TraversalEngine",
  "UnsupportedSyntax",
  "Verbatim",
  "define_gensym",
  "get_symbol_generator",
  "set_symbol_generator",
  "to_source",
  "use_symbol_generator",
]
