"""
Idiom Pattern Matcher.

Decides whether a single node is one of the recognized idiom shapes and,
if so, extracts its parts into a ``Shape``. Matching is purely structural:
it looks at the node and at most one immediate child, never evaluates or
type-checks anything, and never raises. Input that resembles an idiom but
does not fit it exactly yields ``None`` and is left alone.

Shapes borrow the original sub-trees; they copy nothing.

Recognized shapes:

*   **Navigation** -- ``X.andand.method(args) { block }`` / ``(&bp)``
*   **Binding** -- ``returning(initial) { |param| body }``
"""

from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

from rewrite_idioms.core.tree import Block, Call, Node

DEFAULT_NAVIGATION_KEYWORD = "andand"
DEFAULT_BINDING_KEYWORD = "returning"


@dataclass(frozen=True)
class NavigationShape:
  """
  Parts of ``X.<keyword>.method(args) { block } (&block_pass)``.

  Attributes:
      receiver: ``X``, the real receiver expression.
      method: Selector of the outer call.
      args: Outer positional arguments.
      block: Outer attached block, if any.
      block_pass: Outer block-pass argument, if any.
      attribute: Whether the outer call was spelled as member access.
      pos: Source position of the outer call.
  """

  receiver: Node
  method: str
  args: Tuple[Node, ...]
  block: Optional[Block]
  block_pass: Optional[Node]
  attribute: bool = False
  pos: Any = None


@dataclass(frozen=True)
class BindingShape:
  """
  Parts of ``<keyword>(initial) { |param| body }``.

  Attributes:
      initial: The single positional argument.
      param: The block's only parameter.
      body: The block's statements.
      pos: Source position of the call.
  """

  initial: Node
  param: str
  body: Tuple[Node, ...]
  pos: Any = None


Shape = Union[NavigationShape, BindingShape]


def match_navigation(node: Node, keyword: str = DEFAULT_NAVIGATION_KEYWORD) -> Optional[NavigationShape]:
  """
  Matches the short-circuit navigation idiom.

  Args:
      node: Candidate node.
      keyword: Selector of the navigation call.

  Returns:
      Optional[NavigationShape]: The extracted parts, or None.
  """
  if not isinstance(node, Call):
    return None

  inner = node.receiver
  if not isinstance(inner, Call) or inner.selector != keyword:
    return None

  # `andand.bar` has no real receiver to guard
  if inner.receiver is None:
    return None
  if inner.args or inner.block is not None or inner.block_pass is not None:
    return None

  return NavigationShape(
    receiver=inner.receiver,
    method=node.selector,
    args=node.args,
    block=node.block,
    block_pass=node.block_pass,
    attribute=node.attribute,
    pos=node.pos,
  )


def match_binding(node: Node, keyword: str = DEFAULT_BINDING_KEYWORD) -> Optional[BindingShape]:
  """
  Matches the bind-final-value idiom.

  Args:
      node: Candidate node.
      keyword: Selector of the binding call.

  Returns:
      Optional[BindingShape]: The extracted parts, or None.
  """
  if not isinstance(node, Call) or node.selector != keyword:
    return None
  if node.receiver is not None or node.block_pass is not None:
    return None
  if len(node.args) != 1:
    return None

  block = node.block
  if block is None or len(block.params) != 1:
    return None

  return BindingShape(initial=node.args[0], param=block.params[0], body=block.body, pos=node.pos)


class IdiomMatcher:
  """
  Tries every known shape against a node.

  The keywords are configurable so a host can pick names that do not
  clash with its own vocabulary.
  """

  def __init__(
    self,
    navigation_keyword: str = DEFAULT_NAVIGATION_KEYWORD,
    binding_keyword: str = DEFAULT_BINDING_KEYWORD,
  ) -> None:
    """
    Args:
        navigation_keyword: Selector that introduces short-circuit navigation.
        binding_keyword: Selector that introduces bind-final-value.
    """
    if navigation_keyword == binding_keyword:
      raise ValueError(f"Idiom keywords must differ, both are {navigation_keyword!r}")
    self.navigation_keyword = navigation_keyword
    self.binding_keyword = binding_keyword

  def match(self, node: Node) -> Optional[Shape]:
    """
    Returns the shape ``node`` fits, or None.
    """
    shape: Optional[Shape] = match_navigation(node, self.navigation_keyword)
    if shape is not None:
      return shape
    return match_binding(node, self.binding_keyword)
