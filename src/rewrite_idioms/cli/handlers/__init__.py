from .convert import handle_convert
from .rules import handle_rules

__all__ = [
  "handle_convert",
  "handle_rules",
]
