"""
Convert Command Handler.

This module implements the logic for the `rewrite-idioms convert` command.
It orchestrates:
1. Configuration loading (pyproject.toml + CLI overrides).
2. Reading the source (a file or stdin).
3. Rewriting via the Engine.
4. Output writing and trace logging.
"""

import json
import sys
from pathlib import Path
from typing import Optional

import libcst as cst
from rich.markup import escape

from rewrite_idioms.config import RewriteConfig
from rewrite_idioms.core.engine import RewriteEngine
from rewrite_idioms.core.errors import RewriteError
from rewrite_idioms.utils.console import log_error, log_info, log_success, set_verbosity

STDIN_MARKER = "-"


def handle_convert(
  input_path: Path,
  output_path: Optional[Path],
  navigation_keyword: Optional[str] = None,
  binding_keyword: Optional[str] = None,
  json_trace_path: Optional[Path] = None,
  verbose: bool = False,
) -> int:
  """
  Handles the 'convert' command execution.

  Args:
      input_path: Source file, or ``-`` to read stdin.
      output_path: Where to write the result. Prints to stdout if None.
      navigation_keyword: Override for the navigation keyword.
      binding_keyword: Override for the binding keyword.
      json_trace_path: Optional path to dump the rewrite trace as JSON.
      verbose: If True, log every individual rewrite.

  Returns:
      int: Exit code (0 for success, 1 for failure).
  """
  set_verbosity(verbose)
  from_stdin = str(input_path) == STDIN_MARKER

  if not from_stdin and not input_path.is_file():
    log_error(f"Input not found: {input_path}")
    return 1

  try:
    config = RewriteConfig.load(
      navigation_keyword=navigation_keyword,
      binding_keyword=binding_keyword,
      trace=True if json_trace_path else None,
      search_path=Path.cwd() if from_stdin else input_path.parent,
    )
  except ValueError as e:
    log_error(f"Invalid configuration: {escape(str(e))}")
    return 1

  label = "<stdin>" if from_stdin else str(input_path)
  try:
    if from_stdin:
      code = sys.stdin.read()
    else:
      with open(input_path, "rt", encoding="utf-8") as f:
        code = f.read()
    result = RewriteEngine(config=config).run(code)
  except cst.ParserSyntaxError as e:
    log_error(f"Failed to parse {label}: {escape(str(e))}")
    return 1
  except (OSError, RewriteError) as e:
    log_error(f"Failed to convert {label}: {escape(str(e))}")
    return 1

  if json_trace_path:
    try:
      json_trace_path.parent.mkdir(parents=True, exist_ok=True)
      with open(json_trace_path, "wt", encoding="utf-8") as f:
        json.dump(result.trace_events, f, indent=2)
      log_info(f"Trace saved to [path]{json_trace_path}[/path]")
    except OSError as e:
      log_error(f"Failed to write trace: {escape(str(e))}")

  if output_path:
    try:
      output_path.parent.mkdir(parents=True, exist_ok=True)
      with open(output_path, "wt", encoding="utf-8") as f:
        f.write(result.code)
    except OSError as e:
      log_error(f"Failed to write {output_path}: {escape(str(e))}")
      return 1
    log_success(f"Rewrote {result.rewrite_count} idiom(s): [path]{label}[/path] -> [path]{output_path}[/path]")
  else:
    # Keep stdout clean for piping
    sys.stdout.write(result.code)

  return 0
