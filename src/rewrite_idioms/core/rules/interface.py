"""
Interface definition for Rewrite Rules.

This module defines the abstract base class every rule implements so the
``TraversalEngine`` can dispatch matched shapes to it, and the ``Rewrite``
value a rule hands back.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Tuple, Type

from rewrite_idioms.core.matcher import Shape
from rewrite_idioms.core.symbols import SymbolGenerator
from rewrite_idioms.core.tree import Node, Path


@dataclass(frozen=True)
class Rewrite:
  """
  Result of applying a rule.

  Attributes:
      tree: The replacement tree.
      user_paths: Paths inside ``tree`` that hold user-supplied code and
          still need traversal. Everything else is synthesized scaffolding.
  """

  tree: Node
  user_paths: Tuple[Path, ...] = ()


class RewriteRule(ABC):
  """
  Abstract contract for a single idiom rewrite.

  Rules are pure: they build a replacement from a matched shape and never
  look beyond it. Idioms nested in the shape's parts are handled by the
  traversal engine, not by the rule.
  """

  #: Human readable identifier used in logs and traces.
  name: str = ""

  #: The shape class this rule consumes.
  shape_type: Type[Shape]

  @abstractmethod
  def apply(self, shape: Shape, symbols: SymbolGenerator) -> Rewrite:
    """
    Produces the replacement for a matched idiom.

    Args:
        shape: The parts extracted by the matcher.
        symbols: Source of fresh identifiers for temporaries.

    Returns:
        Rewrite: The replacement and its user sub-positions.
    """
    pass
