"""
Module Rewriter.

Applies the traversal engine to every expression of a Python module.

The ``IdiomTransformer`` lifts each ``Call`` and ``Attribute`` it meets into
the tree model, lets the engine process it and, if anything changed, swaps
in the lowered result without descending further. Opaque fragments inside
a rewritten expression are run through the transformer again while being
lowered, so idioms nested in them are not missed. Untouched code keeps its
original formatting byte for byte.

Expressions in binding positions (assignment, ``del`` and loop targets,
``as`` names, and the elements of tuple or list targets) are never
rewritten since the result would not be assignable.

Python rejects assignment expressions in a comprehension's iterable and in
any comprehension that sits directly in a class body. Navigation idioms
found there are left as written and reported as warnings.
"""

import logging
from typing import Dict, List, Optional, Set, Tuple

import libcst as cst

from rewrite_idioms.core.matcher import NavigationShape
from rewrite_idioms.core.traversal import TraversalEngine
from rewrite_idioms.core.tree import Node
from rewrite_idioms.host.python import PythonHost, code_for, is_primary

logger = logging.getLogger(__name__)

_COMPREHENSIONS = (cst.ListComp, cst.SetComp, cst.DictComp, cst.GeneratorExp)

# Scope kinds, keyed by the node that opens them
_CLASS = "class"
_FUNCTION = "function"
_COMPREHENSION = "comprehension"
_ITERABLE = "iterable"


class IdiomTransformer(cst.CSTTransformer):
  """
  LibCST Transformer that rewrites idioms in place.

  Attributes:
      rewrite_count (int): Number of idiom occurrences replaced so far.
      skipped_count (int): Number of expressions left alone because Python
          forbids assignment expressions at their position.
  """

  def __init__(self, engine: TraversalEngine, host: Optional[PythonHost] = None) -> None:
    """
    Initialize.

    Args:
        engine: The traversal engine doing the actual rewriting.
        host: Lifting/lowering adapter. Defaults to a new ``PythonHost``.
    """
    super().__init__()
    self.engine = engine
    self.host = host or PythonHost()
    self.rewrite_count = 0
    self.skipped_count = 0
    self._replacements: Dict[cst.CSTNode, cst.CSTNode] = {}
    self._protected: Set[cst.CSTNode] = set()
    self._bare_ok: Set[cst.CSTNode] = set()
    self._scope_roots: Dict[cst.CSTNode, str] = {}
    self._scopes: List[str] = []

  def on_visit(self, node: cst.CSTNode) -> bool:
    self._note_context(node)
    self._enter_scope(node)

    if not isinstance(node, (cst.Call, cst.Attribute)) or node in self._protected:
      return True

    tree = self.host.lift(node)
    if not self._walrus_allowed() and self._has_navigation(tree):
      self._skip(node)
      return False

    processed = self.engine.process(tree)
    if processed is tree:
      return True

    self.rewrite_count += self.engine.last_rewrite_count
    replacement = self.host.lower(processed, expand=self._expand)

    if node.lpar:
      replacement = replacement.with_changes(lpar=node.lpar, rpar=node.rpar)
    elif node not in self._bare_ok and not is_primary(replacement):
      replacement = replacement.with_changes(lpar=[cst.LeftParen()], rpar=[cst.RightParen()])

    self._replacements[node] = replacement
    return False

  def on_leave(self, original_node: cst.CSTNode, updated_node: cst.CSTNode) -> cst.CSTNode:
    self._leave_scope(original_node)
    replacement = self._replacements.pop(original_node, None)
    if replacement is not None:
      return replacement
    return updated_node

  def _expand(self, node: cst.CSTNode) -> cst.CSTNode:
    return node.visit(self)

  def _note_context(self, node: cst.CSTNode) -> None:
    """Marks children that must stay assignable or may skip parentheses."""
    if isinstance(node, cst.AssignTarget):
      self._protect(node.target)
    elif isinstance(node, (cst.AugAssign, cst.AnnAssign)):
      self._protect(node.target)
    elif isinstance(node, (cst.For, cst.CompFor)):
      self._protect(node.target)
    elif isinstance(node, cst.Del):
      self._protect(node.target)
    elif isinstance(node, cst.AsName):
      self._protect(node.name)

    if isinstance(node, cst.CompFor):
      self._scope_roots.setdefault(node.iter, _ITERABLE)
    elif isinstance(node, _COMPREHENSIONS):
      self._scope_roots.setdefault(node, _COMPREHENSION)
    elif isinstance(node, cst.ClassDef):
      self._scope_roots.setdefault(node.body, _CLASS)
    elif isinstance(node, (cst.FunctionDef, cst.Lambda)):
      self._scope_roots.setdefault(node.body, _FUNCTION)

    if isinstance(node, (cst.Expr, cst.Assign, cst.AnnAssign, cst.AugAssign, cst.Return, cst.NamedExpr)):
      if node.value is not None:
        self._bare_ok.add(node.value)
    elif isinstance(node, cst.Arg) and not node.star:
      self._bare_ok.add(node.value)
    elif isinstance(node, (cst.Element, cst.Index)):
      self._bare_ok.add(node.value)
    elif isinstance(node, cst.Lambda):
      self._bare_ok.add(node.body)

  def _protect(self, target: cst.CSTNode) -> None:
    self._protected.add(target)
    # a, *b = ... and [a, b] = ... unpack into every element
    if isinstance(target, (cst.Tuple, cst.List)):
      for element in target.elements:
        self._protect(element.value)

  def _enter_scope(self, node: cst.CSTNode) -> None:
    scope = self._scope_roots.get(node)
    if scope is not None:
      self._scopes.append(scope)

  def _leave_scope(self, node: cst.CSTNode) -> None:
    if node in self._scope_roots:
      self._scopes.pop()

  def _walrus_allowed(self) -> bool:
    """Whether an assignment expression is legal at the current position."""
    in_comprehension = False
    for scope in reversed(self._scopes):
      if scope == _FUNCTION:
        return True
      if scope == _ITERABLE:
        return False
      if scope == _COMPREHENSION:
        in_comprehension = True
      elif scope == _CLASS:
        return not in_comprehension
    return True

  def _has_navigation(self, tree: Node) -> bool:
    if isinstance(self.engine.matcher.match(tree), NavigationShape):
      return True
    return any(self._has_navigation(child) for _, child in tree.child_slots())

  def _skip(self, node: cst.CSTNode) -> None:
    code = code_for(node)
    message = f"Left '{code}' unchanged: assignment expressions are not allowed here"
    self.skipped_count += 1
    logger.warning(message)
    if self.engine.tracer is not None:
      self.engine.tracer.log_warning(message)


def rewrite_module(code: str, engine: TraversalEngine, host: Optional[PythonHost] = None) -> Tuple[str, int]:
  """
  Rewrites every idiom in a Python module.

  Args:
      code: Python source code.
      engine: The traversal engine to apply.
      host: Optional adapter override.

  Returns:
      Tuple[str, int]: The rewritten source and the number of rewrites.

  Raises:
      libcst.ParserSyntaxError: If ``code`` is not valid Python.
  """
  module = cst.parse_module(code)
  transformer = IdiomTransformer(engine, host)
  result = module.visit(transformer)
  logger.debug("Rewrote %d idiom occurrence(s)", transformer.rewrite_count)
  return result.code, transformer.rewrite_count
