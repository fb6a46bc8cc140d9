"""
Error Taxonomy for the Rewriting Engine.

Only tree construction can fail inside the engine. Matching never raises:
input that does not exactly fit an idiom is reported as ``None`` and
passes through untouched. Errors from host parsers, renderers and
evaluators are not wrapped here; they propagate to the caller unchanged.
"""

from typing import Optional


class RewriteError(Exception):
  """Base class for all errors raised by rewrite_idioms."""


class MalformedNode(RewriteError):
  """
  Raised when a node's fields violate the shape required by its kind.

  This is an internal-consistency failure in whatever produced the tree,
  not a normal runtime condition.

  Attributes:
      kind (str): The tag of the node being constructed.
      field (Optional[str]): The offending field, if known.
  """

  def __init__(self, kind: str, message: str, field: Optional[str] = None) -> None:
    self.kind = kind
    self.field = field
    location = f"{kind}.{field}" if field else kind
    super().__init__(f"Malformed '{location}' node: {message}")


class UnsupportedSyntax(RewriteError):
  """
  Raised by a host adapter when a node has no spelling in the host language.

  Attributes:
      kind (str): The tag of the node that could not be rendered.
  """

  def __init__(self, kind: str, message: str) -> None:
    self.kind = kind
    super().__init__(f"Cannot render '{kind}' node: {message}")
