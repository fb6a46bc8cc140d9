"""
Short-Circuit Navigation Rule.

Rewrites ``X.andand.method(args) { block }`` into::

    (TEMP = X) and TEMP.method(args) { block }

``TEMP`` is a fresh symbol so ``X`` is evaluated exactly once. If ``X`` is
falsy the whole expression yields it without evaluating the call; otherwise
the call's value is the result. Only the host's existing assignment and
logical-and semantics are used.

Three refinements are deliberately not applied: reusing ``X`` when it is
already a bare local, dropping the guard for a truthy literal, and
collapsing a ``nil`` receiver to ``nil``. The general form is always
emitted.
"""

from typing import List

from rewrite_idioms.core.matcher import NavigationShape
from rewrite_idioms.core.rules.interface import Rewrite, RewriteRule
from rewrite_idioms.core.symbols import SymbolGenerator
from rewrite_idioms.core.tree import And, Assign, Call, Ident, Path


class NavigationRule(RewriteRule):
  """
  Guards a call with a truthiness check on its receiver.
  """

  name = "short_circuit_navigation"
  shape_type = NavigationShape

  def apply(self, shape: NavigationShape, symbols: SymbolGenerator) -> Rewrite:
    temp = symbols.next()

    guard = Assign(target=temp, value=shape.receiver, pos=shape.pos)
    call = Call(
      receiver=Ident(temp, pos=shape.pos),
      selector=shape.method,
      args=shape.args,
      block=shape.block,
      block_pass=shape.block_pass,
      attribute=shape.attribute,
      pos=shape.pos,
    )
    tree = And(left=guard, right=call, pos=shape.pos)

    user_paths: List[Path] = [(("left", None), ("value", None))]
    user_paths.extend((("right", None), ("args", index)) for index in range(len(shape.args)))
    if shape.block is not None:
      user_paths.append((("right", None), ("block", None)))
    if shape.block_pass is not None:
      user_paths.append((("right", None), ("block_pass", None)))

    return Rewrite(tree=tree, user_paths=tuple(user_paths))
