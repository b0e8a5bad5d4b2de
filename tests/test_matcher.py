"""
Tests for trigger matching.
"""

import os
import sys

import pytest

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from snipforge.suggestions.matcher import TriggerMatcher, in_jinja_block
from snipforge.suggestions.models import SuggestionContext, SuggestionRecord
from snipforge.suggestions.registry import get_default_registry


IF_RECORD = SuggestionRecord(label="If", trigger="if", replacement="if (condition) {\n  \n}")
IF_ELSE = SuggestionRecord(label="If-Else", trigger="if", replacement="if (c) {\n} else {\n}")
ELIF = SuggestionRecord(label="Elif", trigger="elif", replacement="elif cond:\n    pass")
FILTER = SuggestionRecord(
    label="Upper", trigger="|", replacement="| upper",
    context=SuggestionContext.JINJA_BLOCK,
)
EMPTY = SuggestionRecord(label="Nothing", trigger="", replacement="x")


class TestTriggerMatcher:
    def test_matches_suffix(self):
        matcher = TriggerMatcher([IF_RECORD])
        assert matcher.match("x = 1\nif") == [IF_RECORD]

    def test_does_not_match_when_trigger_not_at_end(self):
        matcher = TriggerMatcher([IF_RECORD])
        assert matcher.match("x = 1\nifx") == []

    def test_case_sensitive(self):
        matcher = TriggerMatcher([IF_RECORD])
        assert matcher.match("IF") == []

    @pytest.mark.parametrize("text", ["if", "  if", "elif", "notif", "a\nif"])
    def test_match_iff_text_ends_with_trigger(self, text):
        matcher = TriggerMatcher([IF_RECORD, ELIF])
        expected = [r for r in (IF_RECORD, ELIF) if text.endswith(r.trigger)]
        assert matcher.match(text) == expected

    def test_shared_trigger_returns_all_in_order(self):
        matcher = TriggerMatcher([IF_ELSE, ELIF, IF_RECORD])
        assert matcher.match("if") == [IF_ELSE, IF_RECORD]

    def test_match_longest(self):
        matcher = TriggerMatcher([IF_RECORD, ELIF, IF_ELSE])
        assert matcher.match("elif") == [IF_RECORD, ELIF, IF_ELSE]
        assert matcher.match_longest("elif") == [ELIF]
        assert matcher.match_longest("if") == [IF_RECORD, IF_ELSE]
        assert matcher.match_longest("while") == []

    def test_empty_trigger_never_matches(self):
        matcher = TriggerMatcher([EMPTY])
        assert matcher.match("anything") == []
        assert matcher.match("") == []

    def test_jinja_context_enforced(self):
        matcher = TriggerMatcher([FILTER])
        assert matcher.match("{{ name |") == [FILTER]
        assert matcher.match("{% set x = y |") == [FILTER]
        assert matcher.match("cat file |") == []
        assert matcher.match("{{ name }} |") == []

    def test_jinja_context_can_be_disabled(self):
        matcher = TriggerMatcher([FILTER], enforce_context=False)
        assert matcher.match("cat file |") == [FILTER]


class TestInJinjaBlock:
    @pytest.mark.parametrize("text,expected", [
        ("{%", True),
        ("{{ user.name", True),
        ("{# note", True),
        ("{% if x %}", False),
        ("{{ a }} text", False),
        ("plain text", False),
        ("{% if x %}{{ y", True),
    ])
    def test_in_jinja_block(self, text, expected):
        assert in_jinja_block(text) is expected


class TestPackagedTables:
    def test_python_def(self):
        registry = get_default_registry()
        matches = TriggerMatcher(registry.get_suggestions("python")).match("def")
        assert [r.label for r in matches] == ["Function", "Generator"]

    def test_python_base_set_not_offered_outside_jinja(self):
        registry = get_default_registry()
        matcher = TriggerMatcher(registry.get_suggestions("python"))
        assert all(r.context is SuggestionContext.NONE for r in matcher.match("x = a |"))

    def test_jinja_statements_offered_in_any_language(self):
        registry = get_default_registry()
        matches = TriggerMatcher(registry.get_suggestions("rust")).match("<p>{%")
        assert matches
        assert all(r.trigger == "{%" for r in matches)
        assert matches[0].label == "If Statement"
