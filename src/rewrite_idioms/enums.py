"""
Enumerations for rewrite_idioms.

This module defines the closed set of syntax tree node kinds understood by
the engine.
"""

from enum import Enum


class NodeKind(str, Enum):
  """
  Tag identifying the syntactic construct a tree node represents.
  """

  IDENT = "ident"  # local variable / identifier reference
  LITERAL = "literal"  # nil, booleans, numbers, strings
  SYMBOL = "symbol"  # :name
  CALL = "call"  # recv.selector(args) { block } (&block_pass)
  BLOCK = "block"  # { |params| body }
  ASSIGN = "assign"  # target = value
  AND = "and"  # left and right
  LAMBDA = "lambda"  # lambda { |params| body }
  INVOKE = "invoke"  # fn.call(args)
  VERBATIM = "verbatim"  # opaque host fragment
