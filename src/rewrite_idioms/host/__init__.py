"""
Host Adapters.

The engine itself is host-agnostic. This package provides the Python host:
a LibCST-based parser/renderer for expressions and a module-level rewriter.
"""

from rewrite_idioms.host.python import PythonHost
from rewrite_idioms.host.transformer import IdiomTransformer, rewrite_module

__all__ = ["IdiomTransformer", "PythonHost", "rewrite_module"]
