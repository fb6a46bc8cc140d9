"""
Tests for the RewriteEngine orchestration and the top-level ``convert`` API.
"""

import libcst as cst
import pytest

import rewrite_idioms
from rewrite_idioms import ConversionResult, RewriteConfig, RewriteEngine
from rewrite_idioms.core.symbols import CounterSymbolGenerator, FixedSymbolGenerator
from rewrite_idioms.core.tracer import TraceEventType
from rewrite_idioms.core.tree import And, Assign, Call, Ident


def test_run_returns_conversion_result():
  engine = RewriteEngine(symbols=CounterSymbolGenerator("t"))
  result = engine.run("x = user.andand.name\n")

  assert isinstance(result, ConversionResult)
  assert result.code == "x = (t1 := user) and t1.name\n"
  assert result.rewrite_count == 1
  assert result.changed
  assert result.trace_events == []


def test_run_without_idioms():
  result = RewriteEngine().run("x = 1\n")
  assert result.code == "x = 1\n"
  assert not result.changed


def test_syntax_errors_propagate():
  with pytest.raises(cst.ParserSyntaxError):
    RewriteEngine().run("def broken(:\n")


def test_configured_keywords():
  config = RewriteConfig(navigation_keyword="maybe", binding_keyword="tap")
  engine = RewriteEngine(config=config, symbols=CounterSymbolGenerator("t"))

  assert engine.run("x = a.maybe.b\n").code == "x = (t1 := a) and t1.b\n"
  assert engine.run("x = a.andand.b\n").code == "x = a.andand.b\n"
  assert engine.run("x = tap(1, lambda v: v)\n").code == "x = (lambda v: (v, v)[-1])(1)\n"


def test_configured_prefix_gets_private_counter():
  engine = RewriteEngine(config=RewriteConfig(temp_prefix="_nav"))
  assert engine.run("a.andand.b\n").code == "(_nav1 := a) and _nav1.b\n"
  assert engine.run("a.andand.b\n").code == "(_nav2 := a) and _nav2.b\n"


def test_default_prefix_uses_global_generator(fixed_temp):
  engine = RewriteEngine()
  assert engine.run("a.andand.b\n").code == "(__TEMP__ := a) and __TEMP__.b\n"


def test_trace_enabled():
  engine = RewriteEngine(config=RewriteConfig(trace=True), symbols=CounterSymbolGenerator("t"))
  result = engine.run("a.andand.b\n")

  types = [e["type"] for e in result.trace_events]
  assert types == [TraceEventType.PHASE_START, TraceEventType.AST_MUTATION, TraceEventType.PHASE_END]
  assert result.trace_events[1]["metadata"]["after"] == "(t1 = a) and t1.b"


def test_trace_records_idioms_left_in_place():
  engine = RewriteEngine(config=RewriteConfig(trace=True), symbols=CounterSymbolGenerator("t"))
  result = engine.run("class C:\n    names = [u.andand.name for u in users]\n")

  assert not result.changed
  warnings = [e for e in result.trace_events if e["type"] == TraceEventType.ANALYSIS_WARNING]
  assert len(warnings) == 1
  assert "u.andand.name" in warnings[0]["description"]


def test_expression_level_api():
  engine = RewriteEngine(symbols=FixedSymbolGenerator("T"))
  tree = engine.parse("a.andand.b")
  processed = engine.process(tree)

  assert processed == And(Assign("T", Ident("a")), Call(Ident("T"), "b", attribute=True))
  assert engine.render(processed) == "(T := a) and T.b"
  assert engine.rewrite_expression("a.andand.b") == "(T := a) and T.b"


def test_rewrite_expression_returns_unchanged_input_verbatim():
  code = "foo( 1 ,2 )"
  assert RewriteEngine().rewrite_expression(code) is code


def test_convert_helper(fixed_temp):
  assert rewrite_idioms.convert("y = user.andand.name\n") == "y = (__TEMP__ := user) and __TEMP__.name\n"


def test_convert_helper_with_config():
  config = RewriteConfig(temp_prefix="tmp_")
  assert rewrite_idioms.convert("a.andand.b\n", config=config) == "(tmp_1 := a) and tmp_1.b\n"
