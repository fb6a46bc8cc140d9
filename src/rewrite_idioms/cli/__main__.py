"""
Main Entry Point for rewrite-idioms CLI.

This module handles argument parsing and dispatches to specific command
handlers defined in `rewrite_idioms.cli.handlers`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from rewrite_idioms import __version__
from rewrite_idioms.cli import handlers


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="rewrite-idioms: Source-to-source idiom expansion")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: CONVERT ---
  cmd_conv = subparsers.add_parser("convert", help="Rewrite idioms in a Python file")
  cmd_conv.add_argument("path", type=Path, help="Input source file, or '-' for stdin")
  cmd_conv.add_argument("--out", type=Path, default=None, help="Output file (default: stdout)")
  cmd_conv.add_argument("--navigation-keyword", default=None, help="Override the navigation keyword (default: from toml)")
  cmd_conv.add_argument("--binding-keyword", default=None, help="Override the binding keyword (default: from toml)")
  cmd_conv.add_argument("--json-trace", type=Path, default=None, help="Dump the rewrite trace to a JSON file.")
  cmd_conv.add_argument("-v", "--verbose", action="store_true", help="Log every individual rewrite")

  # --- Command: RULES ---
  subparsers.add_parser("rules", help="Show the built-in rewrite rules")

  args = parser.parse_args(argv)

  if args.command == "convert":
    return handlers.handle_convert(
      args.path,
      args.out,
      args.navigation_keyword,
      args.binding_keyword,
      args.json_trace,
      args.verbose,
    )

  elif args.command == "rules":
    return handlers.handle_rules()

  return 0


if __name__ == "__main__":
  sys.exit(main())
