"""
Rewrite Rules Package.

Each rule consumes one matcher shape and produces its replacement:

- ``NavigationRule``: ``X.andand.m(args)`` -> ``(T = X) and T.m(args)``.
- ``BindingRule``: ``returning(v) { |p| body }`` -> ``lambda { |p| body; p }.call(v)``.
"""

from typing import List

from rewrite_idioms.core.rules.interface import Rewrite, RewriteRule
from rewrite_idioms.core.rules.navigation import NavigationRule
from rewrite_idioms.core.rules.binding import BindingRule


def default_rules() -> List[RewriteRule]:
  """Returns a fresh instance of every built-in rule."""
  return [NavigationRule(), BindingRule()]


__all__ = [
  "BindingRule",
  "NavigationRule",
  "Rewrite",
  "RewriteRule",
  "default_rules",
]
