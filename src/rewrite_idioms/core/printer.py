"""
Tree Printer.

Renders trees in a compact Ruby-like notation for logs, traces, CLI output
and assertion messages::

    foo.andand.bar(5, &:x)
    (__TEMP__ = foo) and __TEMP__.bar(5, &:x)
    lambda { |person| step1; person }.call(Init)

This is a diagnostic projection, not a host renderer. Host adapters (see
``rewrite_idioms.host``) own the faithful round-trippable rendering.
"""

from typing import List

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


def to_source(node: Node) -> str:
  """
  Renders ``node`` as Ruby-like text.

  Args:
      node: The tree to print.

  Returns:
      str: One line of source text.
  """
  if isinstance(node, Ident):
    return node.name
  if isinstance(node, Literal):
    return _literal(node.value)
  if isinstance(node, Symbol):
    return f":{node.name}"
  if isinstance(node, Verbatim):
    return node.code
  if isinstance(node, Call):
    return _call(node)
  if isinstance(node, Block):
    return _block(node.params, node.body)
  if isinstance(node, Assign):
    return f"{node.target} = {_wrapped(node.value, Assign, And)}"
  if isinstance(node, And):
    return f"{_wrapped(node.left, Assign)} and {_wrapped(node.right, Assign, And)}"
  if isinstance(node, Lambda):
    return f"lambda {_block(node.params, node.body)}"
  if isinstance(node, Invoke):
    args = ", ".join(_wrapped(a, Assign, And) for a in node.args)
    return f"{_wrapped(node.fn, Assign, And)}.call({args})"
  raise TypeError(f"Cannot print {type(node).__name__}")


def _literal(value: object) -> str:
  if value is None:
    return "nil"
  if value is True:
    return "true"
  if value is False:
    return "false"
  if isinstance(value, str):
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'
  return repr(value)


def _wrapped(node: Node, *kinds: type) -> str:
  text = to_source(node)
  if isinstance(node, kinds):
    return f"({text})"
  return text


def _call(node: Call) -> str:
  text = node.selector
  if node.receiver is not None:
    text = f"{_wrapped(node.receiver, Assign, And)}.{text}"

  parts: List[str] = [_wrapped(a, Assign, And) for a in node.args]
  if node.block_pass is not None:
    parts.append(f"&{to_source(node.block_pass)}")
  if parts:
    text += f"({', '.join(parts)})"

  if node.block is not None:
    text += f" {_block(node.block.params, node.block.body)}"
  return text


def _block(params: tuple, body: tuple) -> str:
  inner = "; ".join(to_source(stmt) for stmt in body)
  head = f"|{', '.join(params)}|" if params else ""
  content = " ".join(part for part in (head, inner) if part)
  return f"{{ {content} }}" if content else "{}"
