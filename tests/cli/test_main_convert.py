"""
Tests for the CLI 'convert' and 'rules' commands.

Verifies that:
1.  Argument parsing dispatches to the right handler with the right values.
2.  Files and stdin are rewritten, to ``--out`` or to stdout.
3.  Errors are reported and turned into a non-zero exit code.
"""

import io
import json
from pathlib import Path
from unittest.mock import patch

import pytest
from rich.console import Console

from rewrite_idioms.cli.__main__ import main
from rewrite_idioms.core.symbols import CounterSymbolGenerator, use_symbol_generator
from rewrite_idioms.utils.console import reset_console, set_console


@pytest.fixture(autouse=True)
def counter_symbols():
  with use_symbol_generator(CounterSymbolGenerator("t")):
    yield


@pytest.fixture
def captured_console():
  buf = io.StringIO()
  set_console(Console(file=buf, width=200, force_terminal=False))
  yield buf
  reset_console()


@pytest.fixture
def source_file(tmp_path):
  path = tmp_path / "app.py"
  path.write_text("name = user.andand.name\n", encoding="utf-8")
  return path


@patch("rewrite_idioms.cli.handlers.handle_convert", return_value=0)
def test_convert_argument_dispatch(mock_handle):
  ret = main(["convert", "in.py", "--out", "out.py", "--navigation-keyword", "maybe", "-v"])

  assert ret == 0
  mock_handle.assert_called_once_with(Path("in.py"), Path("out.py"), "maybe", None, None, True)


@patch("rewrite_idioms.cli.handlers.handle_rules", return_value=0)
def test_rules_dispatch(mock_handle):
  assert main(["rules"]) == 0
  mock_handle.assert_called_once_with()


def test_command_is_required():
  with pytest.raises(SystemExit):
    main([])


def test_convert_to_stdout(source_file, capsys):
  ret = main(["convert", str(source_file)])

  assert ret == 0
  assert capsys.readouterr().out == "name = (t1 := user) and t1.name\n"


def test_convert_to_file(source_file, tmp_path, captured_console):
  out = tmp_path / "build" / "app.py"
  ret = main(["convert", str(source_file), "--out", str(out)])

  assert ret == 0
  assert out.read_text(encoding="utf-8") == "name = (t1 := user) and t1.name\n"
  assert "Rewrote 1 idiom(s)" in captured_console.getvalue()


def test_convert_from_stdin(monkeypatch, capsys):
  monkeypatch.setattr("sys.stdin", io.StringIO("x = returning(0, lambda n: n)\n"))
  ret = main(["convert", "-"])

  assert ret == 0
  assert capsys.readouterr().out == "x = (lambda n: (n, n)[-1])(0)\n"


def test_convert_keyword_override(tmp_path, capsys):
  path = tmp_path / "app.py"
  path.write_text("a.maybe.b\na.andand.b\n", encoding="utf-8")

  ret = main(["convert", str(path), "--navigation-keyword", "maybe"])

  assert ret == 0
  assert capsys.readouterr().out == "(t1 := a) and t1.b\na.andand.b\n"


def test_convert_reads_project_config(tmp_path, capsys):
  (tmp_path / "pyproject.toml").write_text('[tool.rewrite_idioms]\ntemp_prefix = "_q"\n', encoding="utf-8")
  path = tmp_path / "app.py"
  path.write_text("a.andand.b\n", encoding="utf-8")

  assert main(["convert", str(path)]) == 0
  assert capsys.readouterr().out == "(_q1 := a) and _q1.b\n"


def test_convert_json_trace(source_file, tmp_path, captured_console):
  trace = tmp_path / "trace.json"
  out = tmp_path / "out.py"
  ret = main(["convert", str(source_file), "--out", str(out), "--json-trace", str(trace)])

  assert ret == 0
  events = json.loads(trace.read_text(encoding="utf-8"))
  mutations = [e for e in events if e["type"] == "ast_mutation"]
  assert len(mutations) == 1
  assert mutations[0]["metadata"]["rule"] == "short_circuit_navigation"


def test_missing_input(tmp_path, captured_console):
  ret = main(["convert", str(tmp_path / "nope.py")])
  assert ret == 1
  assert "Input not found" in captured_console.getvalue()


def test_syntax_error(tmp_path, captured_console):
  path = tmp_path / "bad.py"
  path.write_text("def broken(:\n", encoding="utf-8")

  ret = main(["convert", str(path)])
  assert ret == 1
  assert "Failed to parse" in captured_console.getvalue()


def test_invalid_keyword_option(source_file, captured_console):
  ret = main(["convert", str(source_file), "--binding-keyword", "not valid"])
  assert ret == 1
  assert "Invalid configuration" in captured_console.getvalue()


def test_rules_table(captured_console):
  assert main(["rules"]) == 0

  output = captured_console.getvalue()
  assert "short_circuit_navigation" in output
  assert "bind_final_value" in output
  assert "(tmp = user) and tmp.name" in output
  assert "lambda { |total| total.succ; total }.call(0)" in output
