"""
Tests for Centralized Logging Utility and Injection Mechanics.

Verifies:
1. Proxy forwarding to the active Rich console.
2. Injection capabilities (`set_console`).
3. Standard logging wrappers and verbosity switching.
"""

import io
import logging

import pytest
from rich.console import Console
from rich.logging import RichHandler

from rewrite_idioms.utils.console import (
  console,
  log_error,
  log_info,
  log_success,
  log_warning,
  reset_console,
  set_console,
  set_verbosity,
)


@pytest.fixture(autouse=True)
def cleanup_console():
  """Ensures console is reset to stdout after every test."""
  reset_console()
  yield
  reset_console()
  set_verbosity(False)


def test_console_proxy_forwards():
  assert callable(console.print)
  # Forwarded attribute
  assert hasattr(console, "export_text")
  assert isinstance(console.backend, Console)


def test_custom_console_injection():
  capture_console = Console(record=True, file=io.StringIO())
  set_console(capture_console)

  log_info("Captured Log")
  log_success("Done")
  log_warning("Careful")
  log_error("Broken")

  output = capture_console.export_text()
  assert "Captured Log" in output
  assert "Done" in output
  assert "SUCCESS" in output
  assert "Careful" in output
  assert "Broken" in output


def test_only_one_rich_handler_installed():
  set_console(Console(file=io.StringIO()))
  set_console(Console(file=io.StringIO()))

  handlers = [h for h in logging.getLogger().handlers if isinstance(h, RichHandler)]
  assert len(handlers) == 1


def test_reset_functionality():
  temp = Console(file=io.StringIO())
  set_console(temp)
  assert console.backend is temp

  reset_console()
  assert console.backend is not temp


def test_verbosity_toggles_debug():
  capture_console = Console(record=True, file=io.StringIO())
  set_console(capture_console)

  logging.getLogger("rewrite_idioms.test").debug("hidden detail")
  assert "hidden detail" not in capture_console.export_text(clear=False)

  set_verbosity(True)
  logging.getLogger("rewrite_idioms.test").debug("shown detail")
  assert "shown detail" in capture_console.export_text()
