"""Tests for proposal/rubric template compilation and field ordering."""
import logging

from schema_engine.definitions import SIMPLE_VOTING_TEMPLATE
from schema_engine.field_compiler import (
    DEFAULT_FORMAT,
    compile_proposal_schema,
    compile_rubric_schema,
    get_rubric_scoring_info,
)
from schema_engine.field_order import get_explicit_order, get_proposal_field_order, merge_field_order


class TestFieldOrder:
    def test_explicit_order_first_then_declaration_order(self):
        properties = {"a": {}, "b": {}, "c": {}, "d": {}}
        assert merge_field_order(["c", "a"], properties) == ["c", "a", "b", "d"]

    def test_unknown_and_repeated_keys_dropped(self):
        properties = {"a": {}, "b": {}}
        assert merge_field_order(["b", "zz", "b", "a"], properties) == ["b", "a"]

    def test_ui_order_fallback(self):
        template = {"properties": {"a": {}, "b": {}}, "ui": {"ui:order": ["b", "a"]}}
        assert get_explicit_order(template) == ["b", "a"]

    def test_x_field_order_wins_over_ui_order(self):
        template = {
            "properties": {"a": {}, "b": {}},
            "x-field-order": ["a"],
            "ui": {"ui:order": ["b"]},
        }
        assert get_explicit_order(template) == ["a"]

    def test_non_string_entries_ignored(self):
        assert get_explicit_order({"x-field-order": ["a", 3, None, "b"]}) == ["a", "b"]

    def test_proposal_order_puts_system_fields_first(self):
        template = {
            "properties": {
                "summary": {},
                "budget": {},
                "title": {},
                "impact": {},
                "category": {},
            },
            "x-field-order": ["impact", "budget"],
        }
        order = get_proposal_field_order(template)
        assert order.system == ["title", "category", "budget"]
        assert order.dynamic == ["impact", "summary"]
        assert order.all == ["title", "category", "budget", "impact", "summary"]


class TestCompileRubricSchema:
    def test_each_key_exactly_once_in_merged_order(self, rubric_template):
        rubric_template["x-field-order"] = ["feasibility", "missing", "feasibility"]
        keys = [d.key for d in compile_rubric_schema(rubric_template)]
        assert keys == ["feasibility", "comments", "innovation"]

    def test_no_explicit_order_keeps_declaration_order(self):
        template = {"properties": {"z": {}, "a": {}, "m": {}}}
        assert [d.key for d in compile_rubric_schema(template)] == ["z", "a", "m"]

    def test_empty_or_missing_properties(self):
        assert compile_rubric_schema({}) == []
        assert compile_rubric_schema({"properties": {}}) == []
        assert compile_rubric_schema(None) == []

    def test_no_system_fields_in_rubrics(self):
        template = {"properties": {"title": {"type": "string"}}}
        [descriptor] = compile_rubric_schema(template)
        assert descriptor.is_system is False

    def test_format_defaults_and_options(self):
        template = {
            "properties": {
                "plain": {"type": "string"},
                "rich": {
                    "type": "string",
                    "x-format": "long-text",
                    "x-format-options": {"placeholder": "Explain your score"},
                },
            }
        }
        plain, rich = compile_rubric_schema(template)
        assert plain.format == DEFAULT_FORMAT
        assert plain.format_options == {}
        assert rich.format == "long-text"
        assert rich.format_options == {"placeholder": "Explain your score"}
        assert rich.schema["type"] == "string"


class TestCompileProposalSchema:
    def test_built_in_template(self):
        descriptors = compile_proposal_schema(SIMPLE_VOTING_TEMPLATE.proposal_template)
        assert [d.key for d in descriptors] == ["title", "budget", "summary"]
        assert [d.format for d in descriptors] == ["short-text", "money", "long-text"]
        assert [d.is_system for d in descriptors] == [True, True, False]

    def test_missing_title_still_compiles_other_fields(self, caplog):
        template = {
            "properties": {"summary": {"x-format": "long-text"}, "category": {}},
        }
        with caplog.at_level(logging.WARNING, logger="schema_engine.field_compiler"):
            descriptors = compile_proposal_schema(template)

        assert [d.key for d in descriptors] == ["category", "summary"]
        assert "missing required system field 'title'" in caplog.text

    def test_title_present_logs_nothing(self, caplog):
        with caplog.at_level(logging.WARNING, logger="schema_engine.field_compiler"):
            compile_proposal_schema({"properties": {"title": {}}})
        assert caplog.records == []

    def test_each_key_once(self):
        template = {
            "properties": {"title": {}, "a": {}, "b": {}},
            "x-field-order": ["b", "title", "b"],
        }
        assert [d.key for d in compile_proposal_schema(template)] == ["title", "b", "a"]


class TestRubricScoringInfo:
    def test_scored_and_qualitative_criteria(self, rubric_template):
        info = get_rubric_scoring_info(rubric_template)

        by_key = {c.key: c for c in info.criteria}
        assert [c.key for c in info.criteria] == ["innovation", "feasibility", "comments"]
        assert by_key["innovation"].scored is True
        assert by_key["innovation"].max_points == 5
        assert by_key["feasibility"].title == "feasibility"
        assert by_key["comments"].scored is False
        assert by_key["comments"].max_points == 0
        assert info.total_points == 15
        assert info.summary == {"dropdown": 1, "short-text": 1, "long-text": 1}

    def test_non_integer_or_bool_maximum_not_scored(self):
        template = {
            "properties": {
                "ratio": {"type": "number", "maximum": 1},
                "flag": {"type": "integer", "maximum": True},
                "open": {"type": "integer"},
            }
        }
        info = get_rubric_scoring_info(template)
        assert [c.scored for c in info.criteria] == [False, False, False]
        assert info.total_points == 0

    def test_empty_rubric(self):
        info = get_rubric_scoring_info({})
        assert info.criteria == []
        assert info.total_points == 0
        assert info.summary == {}
