"""
Traversal Engine.

Walks a tree depth-first and replaces every recognized idiom in one pass.

At each node the matcher is consulted first. A matched node is handed to
the rule registered for its shape and only the user-supplied parts of the
replacement (as reported by the rule) are traversed further; synthesized
scaffolding is never revisited. An unmatched node has its children
processed and is rebuilt only when one of them changed, so untouched
sub-trees keep their identity and callers can detect a no-op with ``is``.

Each rewrite removes exactly one idiom occurrence and adds none, so a
single pass is sufficient.
"""

import logging
from typing import Dict, Iterable, Optional, Type

from rewrite_idioms.core.matcher import IdiomMatcher, Shape
from rewrite_idioms.core.printer import to_source
from rewrite_idioms.core.rules import RewriteRule, default_rules
from rewrite_idioms.core.symbols import SymbolGenerator, get_symbol_generator
from rewrite_idioms.core.tracer import TraceLogger
from rewrite_idioms.core.tree import Call, Node, node_at, replace_at

logger = logging.getLogger(__name__)


class TraversalEngine:
  """
  Applies the matcher and rules over a whole tree.

  Instances hold no per-pass state besides ``last_rewrite_count``, so one
  engine can process many trees in sequence.
  """

  def __init__(
    self,
    matcher: Optional[IdiomMatcher] = None,
    rules: Optional[Iterable[RewriteRule]] = None,
    symbols: Optional[SymbolGenerator] = None,
    tracer: Optional[TraceLogger] = None,
  ) -> None:
    """
    Initializes the engine.

    Args:
        matcher: Shape recognizer. Defaults to the standard keywords.
        rules: Rules to dispatch to, one per shape type. Defaults to all
            built-in rules. Shapes without a rule are left alone.
        symbols: Fresh-name source for this engine. If None, the
            process-wide generator current at the start of each pass is used.
        tracer: Optional event recorder.
    """
    self.matcher = matcher or IdiomMatcher()
    self.symbols = symbols
    self.tracer = tracer
    self.last_rewrite_count = 0

    self._rules: Dict[Type[Shape], RewriteRule] = {}
    for rule in default_rules() if rules is None else rules:
      if rule.shape_type in self._rules:
        raise ValueError(f"Duplicate rule for {rule.shape_type.__name__}: {rule.name}")
      self._rules[rule.shape_type] = rule

  @property
  def rules(self) -> Dict[Type[Shape], RewriteRule]:
    """Registered rules keyed by the shape they consume."""
    return dict(self._rules)

  def process(self, tree: Node) -> Node:
    """
    Rewrites every idiom occurrence in ``tree``.

    Args:
        tree: The input tree. It is never mutated.

    Returns:
        Node: The rewritten tree, or ``tree`` itself if nothing matched.
    """
    symbols = self.symbols or get_symbol_generator()
    self.last_rewrite_count = 0
    return self._visit(tree, symbols)

  def _visit(self, node: Node, symbols: SymbolGenerator) -> Node:
    shape = self.matcher.match(node)
    rule = self._rules.get(type(shape)) if shape is not None else None

    if rule is None:
      self._inspect(node)
      return self._visit_children(node, symbols)

    rewrite = rule.apply(shape, symbols)
    result = rewrite.tree
    for path in rewrite.user_paths:
      original = node_at(result, path)
      processed = self._visit(original, symbols)
      if processed is not original:
        result = replace_at(result, path, processed)

    self.last_rewrite_count += 1
    if logger.isEnabledFor(logging.DEBUG):
      logger.debug("%s: %s -> %s", rule.name, to_source(node), to_source(result))
    if self.tracer is not None:
      self.tracer.log_rewrite(rule.name, to_source(node), to_source(result))
    return result

  def _visit_children(self, node: Node, symbols: SymbolGenerator) -> Node:
    updates = {}
    for step, child in node.child_slots():
      processed = self._visit(child, symbols)
      if processed is not child:
        updates[step] = processed
    return node.replace_children(updates)

  def _inspect(self, node: Node) -> None:
    """Records calls that use an idiom keyword but do not fit its shape."""
    if self.tracer is None or not isinstance(node, Call):
      return
    if node.selector in (self.matcher.navigation_keyword, self.matcher.binding_keyword):
      self.tracer.log_inspection(to_source(node), "unmatched", "Resembles an idiom but does not fit its shape")
