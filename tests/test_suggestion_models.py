"""
Tests for suggestion records, editor state and buffer edits.
"""

import dataclasses
import os
import sys

import pytest

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from snipforge.suggestions.models import (
    BufferEdit,
    EditorState,
    SuggestionContext,
    SuggestionDataError,
    SuggestionRecord,
)


# ===========================================================================
# SuggestionRecord
# ===========================================================================

class TestSuggestionRecord:
    def test_from_dict_table_keys(self):
        record = SuggestionRecord.from_dict({
            "label": "Function",
            "description": "Insert a Python function",
            "replacement": "def function_name():\n    pass",
            "trigger": "def",
        })
        assert record.label == "Function"
        assert record.trigger == "def"
        assert record.replacement == "def function_name():\n    pass"
        assert record.context is SuggestionContext.NONE

    def test_from_dict_backend_keys(self):
        record = SuggestionRecord.from_dict({
            "label": "Greeting",
            "replaced_on_click": "Hello {{ name }}",
            "triggered_at": "{{",
        })
        assert record.replacement == "Hello {{ name }}"
        assert record.trigger == "{{"
        assert record.description == ""

    def test_from_dict_missing_values_become_empty(self):
        record = SuggestionRecord.from_dict({"label": "Bare"})
        assert record.replacement == ""
        assert record.trigger == ""

    def test_from_dict_jinja_context(self):
        record = SuggestionRecord.from_dict({
            "label": "If Statement",
            "replacement": "{% if condition %}\n  \n{% endif %}",
            "trigger": "{%",
            "context": "jinja_block",
        })
        assert record.context is SuggestionContext.JINJA_BLOCK

    def test_from_dict_requires_label(self):
        with pytest.raises(SuggestionDataError):
            SuggestionRecord.from_dict({"replacement": "x", "trigger": "x"})

    def test_from_dict_rejects_non_string_field(self):
        with pytest.raises(SuggestionDataError):
            SuggestionRecord.from_dict({"label": "Bad", "replacement": 3, "trigger": "x"})

    def test_from_dict_rejects_unknown_context(self):
        with pytest.raises(SuggestionDataError):
            SuggestionRecord.from_dict({"label": "Bad", "trigger": "x", "context": "nowhere"})

    def test_from_dict_rejects_non_object(self):
        with pytest.raises(SuggestionDataError):
            SuggestionRecord.from_dict(["label"])

    def test_to_dict_omits_default_context(self):
        record = SuggestionRecord(label="Loop", replacement="for x in y:\n    pass", trigger="for")
        assert record.to_dict() == {
            "label": "Loop",
            "description": "",
            "replacement": "for x in y:\n    pass",
            "trigger": "for",
        }

    def test_to_dict_keeps_jinja_context(self):
        record = SuggestionRecord(
            label="Upper", replacement="| upper", trigger="|",
            context=SuggestionContext.JINJA_BLOCK,
        )
        assert record.to_dict()["context"] == "jinja_block"
        assert SuggestionRecord.from_dict(record.to_dict()) == record

    def test_records_are_frozen(self):
        record = SuggestionRecord(label="Loop", replacement="x", trigger="for")
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.label = "Other"


# ===========================================================================
# EditorState / BufferEdit
# ===========================================================================

class TestEditorState:
    def test_cursor_out_of_range_raises(self):
        with pytest.raises(ValueError):
            EditorState(text="abc", cursor=4)
        with pytest.raises(ValueError):
            EditorState(text="abc", cursor=-1)

    def test_at_end(self):
        state = EditorState.at_end("abc")
        assert state.cursor == 3
        assert state.text_before_cursor == "abc"

    def test_current_line_and_indent(self):
        text = "class A:\n    def\n    pass"
        state = EditorState(text=text, cursor=text.index("def") + 3)
        assert state.current_line == "    def"
        assert state.line_indent == "    "
        assert state.line_start == text.index("    def")

    def test_tab_indent(self):
        state = EditorState.at_end("x\n\t\tfor")
        assert state.line_indent == "\t\t"

    def test_no_indent_on_first_line(self):
        state = EditorState.at_end("def")
        assert state.line_indent == ""
        assert state.line_start == 0


class TestBufferEdit:
    def test_apply_to(self):
        state = EditorState.at_end("x = 1\nfor")
        edit = BufferEdit(start=6, end=9, insert_text="for i in range(3):", cursor=24)
        result = edit.apply_to(state)
        assert result.text == "x = 1\nfor i in range(3):"
        assert result.cursor == 24

    def test_to_dict(self):
        edit = BufferEdit(start=1, end=2, insert_text="ab", cursor=3)
        assert edit.to_dict() == {"start": 1, "end": 2, "insert_text": "ab", "cursor": 3}
