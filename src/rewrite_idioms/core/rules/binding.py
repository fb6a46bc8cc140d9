"""
Bind-Final-Value Rule.

Rewrites ``returning(initial) { |param| body }`` into an immediately
invoked closure that answers ``param`` after the body ran::

    lambda { |param| body; param }.call(initial)

If the body reassigns ``param`` the new value is the result. No temporary
is introduced: ``param`` is already bound by the user's block.
"""

from rewrite_idioms.core.matcher import BindingShape
from rewrite_idioms.core.rules.interface import Rewrite, RewriteRule
from rewrite_idioms.core.symbols import SymbolGenerator
from rewrite_idioms.core.tree import Ident, Invoke, Lambda


class BindingRule(RewriteRule):
  """
  Turns a parameter-binding block into an immediately invoked closure.
  """

  name = "bind_final_value"
  shape_type = BindingShape

  def apply(self, shape: BindingShape, symbols: SymbolGenerator) -> Rewrite:
    body = shape.body + (Ident(shape.param, pos=shape.pos),)
    closure = Lambda(params=(shape.param,), body=body, pos=shape.pos)
    tree = Invoke(fn=closure, args=(shape.initial,), pos=shape.pos)

    user_paths = [(("args", 0),)]
    user_paths.extend((("fn", None), ("body", index)) for index in range(len(shape.body)))

    return Rewrite(tree=tree, user_paths=tuple(user_paths))
