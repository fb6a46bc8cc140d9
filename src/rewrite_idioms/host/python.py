"""
Python Host Adapter.

Translates between LibCST expressions and the engine's tree model so the
idioms can be written in ordinary Python source:

.. code-block:: python

    user.andand.name                    # short-circuit navigation
    user.andand.greet("hi")
    returning([], lambda acc: acc.append(1))   # bind-final-value

Lifting (LibCST -> tree):

*   ``Name`` -> ``Ident``; ``None``/``True``/``False`` and plain decimal
    ``Integer`` -> ``Literal``.
*   ``recv.attr`` -> ``Call(attribute=True)``; ``recv.f(a)`` / ``f(a)`` -> ``Call``.
*   A trailing positional ``lambda`` argument with plain parameters becomes
    the call's attached ``Block``.
*   ``a and b`` -> ``And``; ``(t := v)`` -> ``Assign``; ``lambda`` -> ``Lambda``;
    ``(lambda ...)(a)`` -> ``Invoke``.
*   Anything else (including keyword and star arguments) is kept as an
    opaque ``Verbatim`` that remembers its LibCST node.

Lowering is the inverse. A call that still matches its source call keeps
the original argument formatting. A multi-statement closure body is spelled
``(s1, ..., sn)[-1]`` so it evaluates in order and answers the last value;
assignments become parenthesized walrus expressions. Symbols and block-pass
arguments have no Python spelling and raise ``UnsupportedSyntax``.
"""

import math
from typing import Callable, List, Optional, Sequence, Tuple

import libcst as cst

from rewrite_idioms.core.errors import UnsupportedSyntax
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

# A dummy module used as a context to render detached nodes.
_RENDER_CTX = cst.Module(body=[])

_CONSTANTS = {"None": None, "True": True, "False": False}

# Expressions that may be used as a receiver or callee without parentheses.
_PRIMARIES = (
  cst.Name,
  cst.Attribute,
  cst.Call,
  cst.Subscript,
  cst.SimpleString,
  cst.ConcatenatedString,
  cst.FormattedString,
  cst.List,
  cst.Dict,
  cst.Set,
  cst.ListComp,
  cst.SetComp,
  cst.DictComp,
  cst.GeneratorExp,
)

Expander = Callable[[cst.CSTNode], cst.CSTNode]


def _identity(node: cst.CSTNode) -> cst.CSTNode:
  return node


def _parenthesize(expr: cst.BaseExpression) -> cst.BaseExpression:
  if expr.lpar:
    return expr
  return expr.with_changes(lpar=[cst.LeftParen()], rpar=[cst.RightParen()])


def _as_primary(expr: cst.BaseExpression) -> cst.BaseExpression:
  """Wraps ``expr`` in parentheses unless it binds tighter than member access."""
  if isinstance(expr, _PRIMARIES):
    return expr
  return _parenthesize(expr)


def is_primary(expr: cst.BaseExpression) -> bool:
  """True if ``expr`` can be placed anywhere without extra parentheses."""
  return isinstance(expr, _PRIMARIES) or bool(expr.lpar)


def code_for(node: cst.CSTNode) -> str:
  """Renders a detached LibCST node to source text."""
  return _RENDER_CTX.code_for_node(node)


class PythonHost:
  """
  Parser and renderer for Python expressions.
  """

  # --- Parsing ---

  def parse(self, text: str) -> Node:
    """
    Parses a Python expression into a tree.

    Raises:
        libcst.ParserSyntaxError: If ``text`` is not a valid expression.
    """
    return self.lift(cst.parse_expression(text))

  def lift(self, expr: cst.BaseExpression) -> Node:
    """
    Converts a LibCST expression into a tree.

    Args:
        expr: The expression node.

    Returns:
        Node: The equivalent tree. Unsupported constructs become ``Verbatim``.
    """
    if isinstance(expr, cst.Name):
      if expr.value in _CONSTANTS:
        return Literal(_CONSTANTS[expr.value])
      return Ident(expr.value)

    if isinstance(expr, cst.Integer):
      value = int(expr.evaluated_value)
      # 0x10, 1_000 and friends stay as written
      if expr.value == str(value):
        return Literal(value)

    if isinstance(expr, cst.Attribute):
      return Call(receiver=self.lift(expr.value), selector=expr.attr.value, attribute=True)

    if isinstance(expr, cst.Call):
      lifted = self._lift_call(expr)
      if lifted is not None:
        return lifted

    if isinstance(expr, cst.BooleanOperation) and isinstance(expr.operator, cst.And):
      return And(left=self.lift(expr.left), right=self.lift(expr.right))

    if isinstance(expr, cst.NamedExpr) and isinstance(expr.target, cst.Name):
      return Assign(target=expr.target.value, value=self.lift(expr.value))

    if isinstance(expr, cst.Lambda):
      params = _simple_params(expr.params)
      if params is not None:
        return Lambda(params=params, body=(self.lift(expr.body),))

    return Verbatim(code=code_for(expr), source=expr)

  def _lift_call(self, expr: cst.Call) -> Optional[Node]:
    args: List[Node] = [self._lift_arg(arg) for arg in expr.args]

    func = expr.func
    if isinstance(func, cst.Lambda) and _simple_params(func.params) is not None:
      return Invoke(fn=self.lift(func), args=tuple(args))

    if isinstance(func, cst.Attribute):
      receiver: Optional[Node] = self.lift(func.value)
      selector = func.attr.value
    elif isinstance(func, cst.Name) and func.value not in _CONSTANTS:
      receiver = None
      selector = func.value
    else:
      return None

    block = None
    last = expr.args[-1] if expr.args else None
    if last is not None and isinstance(args[-1], Lambda) and not last.keyword and not last.star:
      closure = args.pop()
      block = Block(params=closure.params, body=closure.body)

    return Call(receiver=receiver, selector=selector, args=tuple(args), block=block, pos=expr)

  def _lift_arg(self, arg: cst.Arg) -> Node:
    if arg.keyword is None and not arg.star:
      return self.lift(arg.value)
    detached = arg.with_changes(comma=cst.MaybeSentinel.DEFAULT)
    return Verbatim(code=code_for(detached), source=detached)

  # --- Rendering ---

  def render(self, tree: Node) -> str:
    """Renders a tree as Python source text."""
    return code_for(self.lower(tree))

  def lower(self, tree: Node, expand: Optional[Expander] = None) -> cst.BaseExpression:
    """
    Converts a tree into a LibCST expression.

    Args:
        tree: The tree to convert.
        expand: Applied to the original LibCST node of every ``Verbatim``
            fragment before it is spliced back (e.g. to rewrite idioms
            nested inside it). Defaults to identity.

    Returns:
        cst.BaseExpression: The expression node.

    Raises:
        UnsupportedSyntax: If the tree uses a construct Python cannot spell.
    """
    return _Lowering(expand or _identity).expr(tree)


class _Lowering:
  """Single-use tree -> LibCST converter."""

  def __init__(self, expand: Expander) -> None:
    self.expand = expand

  def expr(self, node: Node) -> cst.BaseExpression:
    if isinstance(node, Ident):
      return cst.Name(_py_name(node.kind.value, node.name))
    if isinstance(node, Literal):
      return _literal(node.value)
    if isinstance(node, Symbol):
      raise UnsupportedSyntax(node.kind.value, f"Python has no symbol literals (:{node.name})")
    if isinstance(node, Verbatim):
      return self._verbatim(node)
    if isinstance(node, Call):
      return self._call(node)
    if isinstance(node, Assign):
      return cst.NamedExpr(
        target=cst.Name(_py_name(node.kind.value, node.target)),
        value=self.expr(node.value),
        lpar=[cst.LeftParen()],
        rpar=[cst.RightParen()],
      )
    if isinstance(node, And):
      left = self.expr(node.left)
      right = self.expr(node.right)
      return cst.BooleanOperation(
        left=_operand(left, is_right=False),
        operator=cst.And(),
        right=_operand(right, is_right=True),
      )
    if isinstance(node, (Lambda, Block)):
      return self._closure(node.params, node.body)
    if isinstance(node, Invoke):
      return cst.Call(func=_as_primary(self.expr(node.fn)), args=[self._arg(a) for a in node.args])
    raise UnsupportedSyntax(node.kind.value, "unknown node kind")

  def _verbatim(self, node: Verbatim) -> cst.BaseExpression:
    source = node.source
    if isinstance(source, cst.BaseExpression):
      return self.expand(source)
    if isinstance(source, cst.Arg):
      raise UnsupportedSyntax(node.kind.value, f"'{node.code}' is only valid as a call argument")
    return self.expand(cst.parse_expression(node.code))

  def _arg(self, node: Node) -> cst.Arg:
    if isinstance(node, Verbatim) and isinstance(node.source, cst.Arg):
      return self.expand(node.source)
    return cst.Arg(value=self.expr(node))

  def _call(self, node: Call) -> cst.BaseExpression:
    selector = _py_name(node.kind.value, node.selector)
    if node.block_pass is not None:
      raise UnsupportedSyntax(node.kind.value, "Python has no block-pass arguments")

    if node.receiver is None:
      func: cst.BaseExpression = cst.Name(selector)
    else:
      func = cst.Attribute(value=_as_primary(self.expr(node.receiver)), attr=cst.Name(selector))

    if node.attribute:
      return func

    args = [self._arg(a) for a in node.args]
    if node.block is not None:
      args.append(cst.Arg(value=self._closure(node.block.params, node.block.body)))

    # Same call as in the source: keep its commas, comments and line breaks
    original = node.pos
    if isinstance(original, cst.Call) and len(original.args) == len(args):
      args = [old.with_changes(value=new.value) for old, new in zip(original.args, args)]
      return original.with_changes(func=func, args=args, lpar=(), rpar=())
    return cst.Call(func=func, args=args)

  def _closure(self, params: Sequence[str], body: Sequence[Node]) -> cst.Lambda:
    parameters = cst.Parameters(params=[cst.Param(name=cst.Name(_py_name("lambda", p))) for p in params])
    return cst.Lambda(params=parameters, body=self._body(body))

  def _body(self, body: Sequence[Node]) -> cst.BaseExpression:
    if not body:
      return cst.Name("None")
    if len(body) == 1:
      return self.expr(body[0])

    # (s1, ..., sn)[-1] evaluates left to right and answers sn
    elements = [cst.Element(value=self.expr(stmt)) for stmt in body]
    last = cst.Index(value=cst.UnaryOperation(operator=cst.Minus(), expression=cst.Integer("1")))
    return cst.Subscript(
      value=cst.Tuple(elements=elements, lpar=[cst.LeftParen()], rpar=[cst.RightParen()]),
      slice=[cst.SubscriptElement(slice=last)],
    )


def _simple_params(params: cst.Parameters) -> Optional[Tuple[str, ...]]:
  """Returns the names of plain positional parameters, or None if any are fancier."""
  if params.posonly_params or params.kwonly_params or params.star_kwarg is not None:
    return None
  if isinstance(params.star_arg, (cst.Param, cst.ParamStar)):
    return None
  names = []
  for param in params.params:
    if param.default is not None:
      return None
    names.append(param.name.value)
  return tuple(names)


def _py_name(kind: str, name: str) -> str:
  if not name.isidentifier():
    raise UnsupportedSyntax(kind, f"'{name}' is not a Python identifier")
  return name


def _literal(value: object) -> cst.BaseExpression:
  if value is None or isinstance(value, bool):
    return cst.Name(str(value))
  if isinstance(value, str):
    return cst.SimpleString(repr(value))
  if isinstance(value, float) and not math.isfinite(value):
    raise UnsupportedSyntax("literal", f"{value!r} has no literal spelling")

  number: cst.BaseExpression
  magnitude = abs(value)
  number = cst.Integer(str(magnitude)) if isinstance(value, int) else cst.Float(repr(magnitude))
  if value < 0:
    return cst.UnaryOperation(operator=cst.Minus(), expression=number)
  return number


def _operand(expr: cst.BaseExpression, is_right: bool) -> cst.BaseExpression:
  """Parenthesizes an ``and`` operand that would otherwise regroup."""
  if isinstance(expr, (cst.Lambda, cst.IfExp)):
    return _parenthesize(expr)
  if isinstance(expr, cst.BooleanOperation) and (is_right or isinstance(expr.operator, cst.Or)):
    return _parenthesize(expr)
  return expr
