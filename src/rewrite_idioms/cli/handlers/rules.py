"""CLI handler for the 'rules' command."""

from typing import List, Tuple

from rich.markup import escape
from rich.table import Table

from rewrite_idioms.config import RewriteConfig
from rewrite_idioms.core.matcher import IdiomMatcher
from rewrite_idioms.core.printer import to_source
from rewrite_idioms.core.symbols import FixedSymbolGenerator
from rewrite_idioms.core.traversal import TraversalEngine
from rewrite_idioms.core.tree import Block, Call, Ident, Literal, Node
from rewrite_idioms.utils.console import console, log_error


def _examples(config: RewriteConfig) -> List[Tuple[str, str, Node]]:
  nav = Call(Call(Ident("user"), config.navigation_keyword), "name")
  bind = Call(
    None,
    config.binding_keyword,
    args=(Literal(0),),
    block=Block(params=("total",), body=(Call(Ident("total"), "succ"),)),
  )
  return [
    ("short_circuit_navigation", config.navigation_keyword, nav),
    ("bind_final_value", config.binding_keyword, bind),
  ]


def handle_rules() -> int:
  """
  Handles 'rules' command.

  Prints each built-in rule with a before/after example using the
  keywords configured for the current project.
  """
  try:
    config = RewriteConfig.load()
  except ValueError as e:
    log_error(f"Invalid configuration: {escape(str(e))}")
    return 1

  engine = TraversalEngine(
    matcher=IdiomMatcher(config.navigation_keyword, config.binding_keyword),
    symbols=FixedSymbolGenerator("tmp"),
  )

  table = Table(title="rewrite-idioms Rules")
  table.add_column("Rule", style="cyan", no_wrap=True)
  table.add_column("Keyword", style="magenta")
  table.add_column("Before")
  table.add_column("After", style="green")

  for name, keyword, example in _examples(config):
    table.add_row(name, keyword, to_source(example), to_source(engine.process(example)))

  console.print(table)
  return 0
