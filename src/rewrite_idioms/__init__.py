"""
rewrite-idioms Package.

A source-to-source rewriting engine that expands idioms into plain code the
host language already understands:

*   **Short-circuit navigation**: ``user.andand.name`` becomes
    ``(__rw_tmp_1 := user) and __rw_tmp_1.name``.
*   **Bind final value**: ``returning([], lambda acc: acc.append(1))``
    becomes ``(lambda acc: (acc.append(1), acc)[-1])([])``.

Usage
-----

Simple String Conversion
^^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    import rewrite_idioms
    print(rewrite_idioms.convert("name = user.andand.name"))
    # name = (__rw_tmp_1 := user) and __rw_tmp_1.name

Tree Level
^^^^^^^^^^

.. code-block:: python

    from rewrite_idioms.core import Call, Ident, TraversalEngine

    tree = Call(Call(Ident("foo"), "andand"), "bar")
    TraversalEngine().process(tree)
"""

from typing import Optional

from rewrite_idioms.config import RewriteConfig
from rewrite_idioms.core.engine import ConversionResult, RewriteEngine

__version__ = "0.1.0"


def convert(code: str, config: Optional[RewriteConfig] = None) -> str:
  """
  Rewrites every idiom in a string of Python code.

  This is a convenience wrapper around `RewriteEngine`.

  Args:
      code (str): The source code to convert.
      config (RewriteConfig, optional): Keywords and temporary prefix to use.

  Returns:
      str: The rewritten source code.

  Raises:
      libcst.ParserSyntaxError: If ``code`` is not valid Python.
  """
  engine = RewriteEngine(config=config)
  return engine.run(code).code


__all__ = [
  "ConversionResult",
  "RewriteConfig",
  "RewriteEngine",
  "convert",
  "__version__",
]
