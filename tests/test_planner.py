"""Tests for extracting actions from assistant output."""

import json

from cortex.nyx.models import Action
from cortex.nyx.planner import extract_fragment, plan


class TestPlanStructuredOutput:
    def test_top_level_action_fields(self):
        raw = json.dumps({
            "reasoning": "User finished the task",
            "action_type": "update",
            "payload": "mark done",
            "table": "tasks",
            "id": "42",
            "data": {"id": "42", "done": True},
        })

        action = plan(raw)

        assert action.table == "tasks"
        assert action.id == "42"
        assert action.data == {"id": "42", "done": True}
        assert action.reasoning == "User finished the task"

    def test_action_nested_in_payload_object(self):
        raw = json.dumps({
            "reasoning": "Reschedule",
            "action_type": "update",
            "payload": {"table": "events", "id": "e1", "data": {"start": "09:00"}},
        })

        action = plan(raw)

        assert action.table == "events"
        assert action.id == "e1"
        assert action.data == {"start": "09:00"}
        assert action.reasoning == "Reschedule"

    def test_action_nested_in_payload_string(self):
        inner = json.dumps({"table": "habits", "data": {"id": "h1", "streak": 4}})
        raw = json.dumps({"reasoning": "Keep going", "payload": inner})

        action = plan(raw)

        assert action.table == "habits"
        assert action.data == {"id": "h1", "streak": 4}

    def test_fragment_wrapped_in_prose(self):
        raw = (
            "Sure! Here is what I suggest:\n```json\n"
            '{"reasoning": "Add a note", "payload": {"table": "notes", "data": {"body": "hi"}}}'
            "\n```\nLet me know."
        )

        action = plan(raw)

        assert action.table == "notes"
        assert action.data == {"body": "hi"}

    def test_trailing_braces_fall_back_to_balanced_scan(self):
        raw = (
            '{"reasoning": "r", "payload": {"table": "tasks", "data": {"id": "1"}}}'
            " and then {not json}"
        )

        action = plan(raw)

        assert action.table == "tasks"
        assert action.data == {"id": "1"}

    def test_numeric_id_is_stringified(self):
        raw = json.dumps({"payload": {"table": "tasks", "id": 7, "data": {"x": 1}}})
        assert plan(raw).id == "7"

    def test_reasoning_missing_is_empty(self):
        raw = json.dumps({"payload": {"table": "tasks", "data": {"x": 1}}})
        assert plan(raw).reasoning == ""


class TestPlanDegradesGracefully:
    def test_plain_text(self):
        raw = "I think you should rest today."
        assert plan(raw) == Action(reasoning=raw)

    def test_empty_text(self):
        assert plan("") == Action(reasoning="")

    def test_json_without_payload(self):
        raw = '{"reasoning": "no payload here"}'
        action = plan(raw)
        assert action.table == ""
        assert action.data == {}
        assert action.reasoning == raw

    def test_unparseable_payload_fragment(self):
        raw = '{"reasoning": "oops", "payload": {"table": "tasks", '
        assert plan(raw) == Action(reasoning=raw)

    def test_non_mapping_data_is_dropped(self):
        raw = json.dumps({"payload": {"table": "tasks", "data": ["not", "a", "dict"]}})
        action = plan(raw)
        assert action.table == "tasks"
        assert action.data == {}
        assert not action.is_applicable

    def test_non_string_table_is_dropped(self):
        raw = json.dumps({"payload": {"table": {"name": "tasks"}, "data": {"x": 1}}})
        assert plan(raw).table == ""

    def test_extract_fragment_none_for_text(self):
        assert extract_fragment("nothing structured") is None
