"""
Tests for the Tracing System.
"""

import json

from rewrite_idioms.core.tracer import TraceEventType, TraceLogger


def test_phase_nesting():
  logger = TraceLogger()

  p1 = logger.start_phase("Parent")
  logger.start_phase("Child")
  logger.end_phase()  # End Child
  logger.end_phase()  # End Parent

  events = logger.export()

  # 4 events: Start P, Start C, End C, End P
  assert len(events) == 4
  assert events[0]["type"] == TraceEventType.PHASE_START
  assert events[1]["parent_id"] == p1
  assert events[2]["type"] == TraceEventType.PHASE_END
  assert events[3]["parent_id"] == p1


def test_end_phase_without_start_is_noop():
  logger = TraceLogger()
  logger.end_phase()
  assert logger.export() == []


def test_rewrite_logging_metadata():
  logger = TraceLogger()
  phase = logger.start_phase("Rewriting")
  logger.log_rewrite("bind_final_value", "returning(1) { |p| }", "lambda { |p| p }.call(1)")

  events = logger.export()
  assert events[1]["type"] == TraceEventType.AST_MUTATION
  assert events[1]["parent_id"] == phase
  assert events[1]["description"] == "Applied bind_final_value"
  assert events[1]["metadata"]["after"] == "lambda { |p| p }.call(1)"
  assert logger.rewrite_count == 1


def test_warning_and_inspection():
  logger = TraceLogger()
  logger.log_warning("careful")
  logger.log_inspection("andand.bar", "unmatched", "no receiver")

  events = logger.export()
  assert events[0]["type"] == TraceEventType.ANALYSIS_WARNING
  assert events[1]["description"] == "Inspecting 'andand.bar'"
  assert events[1]["metadata"] == {"outcome": "unmatched", "detail": "no receiver"}
  assert logger.rewrite_count == 0


def test_export_is_json_serializable():
  logger = TraceLogger()
  logger.start_phase("Rewriting")
  logger.log_rewrite("r", "a", "b")
  logger.end_phase()

  data = json.loads(json.dumps(logger.export()))
  assert [e["type"] for e in data] == ["phase_start", "ast_mutation", "phase_end"]
