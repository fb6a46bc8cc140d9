"""
Syntax Tree Model.

This module defines the immutable, closed set of node variants the engine
rewrites. Each variant is a frozen dataclass tagged with a ``NodeKind``.

Construction validates the fields required by the kind and raises
``MalformedNode`` on violation, so a partially-built tree can never exist.
Lists supplied for sequence fields are normalized to tuples.

Equality is deep and structural. The opaque source position ``pos`` is
carried through rewrites for diagnostics but never takes part in
comparisons, so a hand-built expected tree equals a parsed one.

Sub-trees are addressed by *paths*: tuples of ``(field, index)`` steps
where ``index`` is ``None`` for single-valued fields. Rules report the
paths of user-supplied code inside their replacements and the traversal
engine uses ``node_at`` / ``replace_at`` to process exactly those.
"""

import dataclasses
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Iterator, Mapping, Optional, Tuple

from rewrite_idioms.core.errors import MalformedNode
from rewrite_idioms.enums import NodeKind

Step = Tuple[str, Optional[int]]
Path = Tuple[Step, ...]

_LITERAL_TYPES = (type(None), bool, int, float, str)


# --- Validation helpers ---


def _check_name(kind: NodeKind, name: str, value: Any) -> None:
  if not isinstance(value, str) or not value:
    raise MalformedNode(kind.value, f"expected a non-empty identifier, got {value!r}", name)


def _check_node(kind: NodeKind, name: str, value: Any, optional: bool = False) -> None:
  if value is None and optional:
    return
  if not isinstance(value, Node):
    raise MalformedNode(kind.value, f"expected a node, got {type(value).__name__}", name)


def _coerce_seq(node: "Node", name: str) -> Tuple[Any, ...]:
  value = getattr(node, name)
  if isinstance(value, list):
    value = tuple(value)
    object.__setattr__(node, name, value)
  if not isinstance(value, tuple):
    raise MalformedNode(node.kind.value, f"expected a sequence, got {type(value).__name__}", name)
  return value


def _check_nodes(node: "Node", name: str) -> None:
  for item in _coerce_seq(node, name):
    _check_node(node.kind, name, item)


def _check_names(node: "Node", name: str) -> None:
  items = _coerce_seq(node, name)
  for item in items:
    _check_name(node.kind, name, item)
  if len(set(items)) != len(items):
    raise MalformedNode(node.kind.value, f"duplicate parameter in {items!r}", name)


# --- Node variants ---


@dataclass(frozen=True)
class Node:
  """
  Base class for all tree nodes.

  Attributes:
      pos: Opaque source position supplied by the host parser. Ignored by
          equality and hashing.
  """

  kind: ClassVar[NodeKind]
  _children: ClassVar[Tuple[str, ...]] = ()

  pos: Any = field(default=None, compare=False, repr=False, kw_only=True)

  def __post_init__(self) -> None:
    self._validate()

  def _validate(self) -> None:
    pass

  def child_slots(self) -> Iterator[Tuple[Step, "Node"]]:
    """
    Yields every direct child with its step, in field order.

    Absent optional children are skipped.
    """
    for name in self._children:
      value = getattr(self, name)
      if value is None:
        continue
      if isinstance(value, tuple):
        for index, item in enumerate(value):
          yield (name, index), item
      else:
        yield (name, None), value

  def replace_children(self, updates: Mapping[Step, "Node"]) -> "Node":
    """
    Builds a copy of this node with the given children swapped in.

    Args:
        updates: Mapping of step to replacement child.

    Returns:
        Node: A new node, or ``self`` when ``updates`` is empty.
    """
    if not updates:
      return self

    changes: Dict[str, Any] = {}
    for (name, index), new_child in updates.items():
      if index is None:
        changes[name] = new_child
      else:
        items = list(changes.get(name, getattr(self, name)))
        items[index] = new_child
        changes[name] = tuple(items)
    return dataclasses.replace(self, **changes)

  def to_sexp(self) -> Tuple[Any, ...]:
    """
    Returns a nested-tuple view of the tree, kind tag first.

    Handy for debugging and for readable assertion diffs.
    """
    parts: list = [self.kind.value]
    for f in dataclasses.fields(self):
      if not f.compare:
        continue
      parts.append(_sexp_value(getattr(self, f.name)))
    return tuple(parts)


def _sexp_value(value: Any) -> Any:
  if isinstance(value, Node):
    return value.to_sexp()
  if isinstance(value, tuple):
    return tuple(_sexp_value(v) for v in value)
  return value


@dataclass(frozen=True)
class Ident(Node):
  """Reference to a local variable or bare identifier."""

  kind: ClassVar[NodeKind] = NodeKind.IDENT

  name: str

  def _validate(self) -> None:
    _check_name(self.kind, "name", self.name)


@dataclass(frozen=True, eq=False)
class Literal(Node):
  """
  A scalar literal. ``None`` is the host's canonical falsy ``nil``.

  Values compare by type as well as value, so ``true`` and ``1`` differ.
  """

  kind: ClassVar[NodeKind] = NodeKind.LITERAL

  value: Any

  def _validate(self) -> None:
    if type(self.value) not in _LITERAL_TYPES:
      raise MalformedNode(self.kind.value, f"unsupported literal type {type(self.value).__name__}", "value")

  def __eq__(self, other: object) -> bool:
    if other.__class__ is not self.__class__:
      return NotImplemented
    return type(self.value) is type(other.value) and self.value == other.value

  def __hash__(self) -> int:
    return hash((type(self.value).__name__, self.value))


@dataclass(frozen=True)
class Symbol(Node):
  """A symbol literal such as ``:x``."""

  kind: ClassVar[NodeKind] = NodeKind.SYMBOL

  name: str

  def _validate(self) -> None:
    _check_name(self.kind, "name", self.name)


@dataclass(frozen=True)
class Block(Node):
  """A block attached to a call: ``{ |params| body }``."""

  kind: ClassVar[NodeKind] = NodeKind.BLOCK
  _children: ClassVar[Tuple[str, ...]] = ("body",)

  params: Tuple[str, ...] = ()
  body: Tuple[Node, ...] = ()

  def _validate(self) -> None:
    _check_names(self, "params")
    _check_nodes(self, "body")


@dataclass(frozen=True)
class Call(Node):
  """
  A method call: ``receiver.selector(args) { block } (&block_pass)``.

  ``receiver`` is ``None`` for a receiverless (function-style) call.
  ``attribute`` marks a send spelled as plain member access (``foo.bar``)
  rather than an explicit call. Only hosts that distinguish the two care
  about it; it requires a receiver and forbids arguments and blocks.
  """

  kind: ClassVar[NodeKind] = NodeKind.CALL
  _children: ClassVar[Tuple[str, ...]] = ("receiver", "args", "block", "block_pass")

  receiver: Optional[Node]
  selector: str
  args: Tuple[Node, ...] = ()
  block: Optional[Block] = None
  block_pass: Optional[Node] = None
  attribute: bool = False

  def _validate(self) -> None:
    _check_node(self.kind, "receiver", self.receiver, optional=True)
    _check_name(self.kind, "selector", self.selector)
    _check_nodes(self, "args")
    if self.block is not None and not isinstance(self.block, Block):
      raise MalformedNode(self.kind.value, f"expected a block, got {type(self.block).__name__}", "block")
    _check_node(self.kind, "block_pass", self.block_pass, optional=True)
    if isinstance(self.block_pass, Block):
      raise MalformedNode(self.kind.value, "a block cannot be passed as a block argument", "block_pass")
    if self.block is not None and self.block_pass is not None:
      raise MalformedNode(self.kind.value, "both a block and a block argument given")
    if self.attribute:
      if self.receiver is None:
        raise MalformedNode(self.kind.value, "member access requires a receiver", "attribute")
      if self.args or self.block is not None or self.block_pass is not None:
        raise MalformedNode(self.kind.value, "member access cannot take arguments", "attribute")


@dataclass(frozen=True)
class Assign(Node):
  """Local variable assignment used as an expression: ``target = value``."""

  kind: ClassVar[NodeKind] = NodeKind.ASSIGN
  _children: ClassVar[Tuple[str, ...]] = ("value",)

  target: str
  value: Node

  def _validate(self) -> None:
    _check_name(self.kind, "target", self.target)
    _check_node(self.kind, "value", self.value)


@dataclass(frozen=True)
class And(Node):
  """Short-circuit boolean and: ``left and right``."""

  kind: ClassVar[NodeKind] = NodeKind.AND
  _children: ClassVar[Tuple[str, ...]] = ("left", "right")

  left: Node
  right: Node

  def _validate(self) -> None:
    _check_node(self.kind, "left", self.left)
    _check_node(self.kind, "right", self.right)


@dataclass(frozen=True)
class Lambda(Node):
  """A closure: ``lambda { |params| body }``. Evaluates to its last statement."""

  kind: ClassVar[NodeKind] = NodeKind.LAMBDA
  _children: ClassVar[Tuple[str, ...]] = ("body",)

  params: Tuple[str, ...] = ()
  body: Tuple[Node, ...] = ()

  def _validate(self) -> None:
    _check_names(self, "params")
    _check_nodes(self, "body")


@dataclass(frozen=True)
class Invoke(Node):
  """Immediate invocation of a callable: ``fn.call(args)``."""

  kind: ClassVar[NodeKind] = NodeKind.INVOKE
  _children: ClassVar[Tuple[str, ...]] = ("fn", "args")

  fn: Node
  args: Tuple[Node, ...] = ()

  def _validate(self) -> None:
    _check_node(self.kind, "fn", self.fn)
    _check_nodes(self, "args")


@dataclass(frozen=True)
class Verbatim(Node):
  """
  An opaque host fragment the engine never looks inside.

  ``code`` is the fragment's source text and defines equality. ``source``
  optionally carries the host's own node so an adapter can render it back
  without re-parsing.
  """

  kind: ClassVar[NodeKind] = NodeKind.VERBATIM

  code: str
  source: Any = field(default=None, compare=False, repr=False)

  def _validate(self) -> None:
    if not isinstance(self.code, str) or not self.code.strip():
      raise MalformedNode(self.kind.value, "expected non-empty source text", "code")


# --- Path addressing ---


def node_at(tree: Node, path: Path) -> Node:
  """
  Returns the sub-tree of ``tree`` addressed by ``path``.

  Raises:
      KeyError: If a step does not address an existing child.
  """
  current = tree
  for name, index in path:
    value = getattr(current, name, None)
    if index is not None:
      value = value[index] if isinstance(value, tuple) and index < len(value) else None
    if not isinstance(value, Node):
      raise KeyError(f"No child at step ({name!r}, {index!r}) of {current.kind.value}")
    current = value
  return current


def replace_at(tree: Node, path: Path, new: Node) -> Node:
  """
  Returns a copy of ``tree`` with the sub-tree at ``path`` replaced.

  Only the nodes along the path are rebuilt; siblings are shared.
  """
  if not path:
    return new
  step, rest = path[0], path[1:]
  child = node_at(tree, (step,))
  return tree.replace_children({step: replace_at(child, rest, new)})
