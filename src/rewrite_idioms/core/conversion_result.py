"""
Data structures representing the output of a rewriting run.

This module defines the `ConversionResult` Pydantic model, which encapsulates
the generated code, the number of rewrites applied and the execution trace.
"""

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class ConversionResult(BaseModel):
  """
  Container for the results of a rewriting job.
  """

  code: str = Field(default="", description="The rewritten source code.")
  rewrite_count: int = Field(default=0, description="Number of idiom occurrences replaced.")
  trace_events: List[Dict[str, Any]] = Field(default_factory=list, description="Execution trace log data.")

  @property
  def changed(self) -> bool:
    """
    Check if any idiom was rewritten.

    Returns:
        True if one or more rewrites were applied.
    """
    return self.rewrite_count > 0
