"""
Tests for suggestion table loading and the language registry.
"""

import json
import os
import sys

import pytest

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from snipforge.suggestions.loader import DATA_DIR, load_suggestion_file, load_table, load_tag_data
from snipforge.suggestions.models import SuggestionDataError, SuggestionRecord
from snipforge.suggestions.registry import (
    BASE_TABLE,
    LANGUAGE_TABLES,
    SuggestionRegistry,
    detect_language,
    get_default_registry,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def make_record(label, trigger="x", replacement=None):
    return SuggestionRecord(label=label, trigger=trigger, replacement=replacement or label.lower())


def write_table(directory, name, entries):
    path = directory / f"{name}.json"
    path.write_text(json.dumps(entries), encoding="utf-8")
    return path


BASE = (make_record("Base One", "{%"), make_record("Base Two", "|"))
PY = (make_record("Function", "def"), make_record("Loop", "for"))


# ===========================================================================
# Loader
# ===========================================================================

class TestLoader:
    def test_every_mapped_table_is_packaged(self):
        for table in set(LANGUAGE_TABLES.values()) | {BASE_TABLE}:
            assert (DATA_DIR / f"{table}.json").is_file(), table

    def test_load_packaged_python_table(self):
        records = load_table("python")
        assert isinstance(records, tuple)
        assert records[0].label == "Function"
        assert records[0].replacement == "def function_name():\n    pass"

    def test_missing_table_returns_none(self, tmp_path):
        assert load_table("cobol", tmp_path) is None

    def test_invalid_json_raises(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(SuggestionDataError, match="broken.json"):
            load_suggestion_file(path)

    def test_non_list_raises(self, tmp_path):
        path = write_table(tmp_path, "object", {"label": "x"})
        with pytest.raises(SuggestionDataError):
            load_suggestion_file(path)

    def test_bad_entry_names_index(self, tmp_path):
        path = write_table(tmp_path, "bad", [
            {"label": "Ok", "replacement": "a", "trigger": "a"},
            {"replacement": "b", "trigger": "b"},
        ])
        with pytest.raises(SuggestionDataError, match="entry 1"):
            load_suggestion_file(path)

    def test_tag_data(self):
        data = load_tag_data()
        assert "div" in data["html_tags"]
        assert data["html_templates"]["li"] == "li>VARIABLE_1</li>"
        assert "endfor" in data["jinja_tags"]

    def test_tag_data_falls_back_to_packaged(self, tmp_path):
        assert load_tag_data(tmp_path)["jinja_templates"]["endif"] == "endif %}"


# ===========================================================================
# Registry
# ===========================================================================

class TestSuggestionRegistry:
    def test_registered_language_is_base_then_language(self):
        registry = SuggestionRegistry(base=BASE, languages={"python": PY})
        assert registry.get_suggestions("python") == BASE + PY

    def test_unknown_language_returns_base_only(self):
        registry = SuggestionRegistry(base=BASE, languages={"python": PY})
        assert registry.get_suggestions("cobol") == BASE
        assert registry.get_suggestions(None) == BASE
        assert registry.get_suggestions("") == BASE

    def test_language_ids_are_case_insensitive(self):
        registry = SuggestionRegistry(base=BASE, languages={"Python": PY})
        assert registry.get_suggestions("PYTHON") == BASE + PY
        assert registry.is_registered("python")

    def test_register_overrides(self):
        registry = SuggestionRegistry(base=BASE, languages={"python": PY})
        replacement = (make_record("Class", "class"),)
        registry.register("python", replacement)
        assert registry.get_suggestions("python") == BASE + replacement

    def test_register_base(self):
        registry = SuggestionRegistry(base=BASE, languages={"python": PY})
        registry.register_base(())
        assert registry.get_suggestions("python") == PY

    def test_register_rejects_empty_id(self):
        with pytest.raises(ValueError):
            SuggestionRegistry().register("  ", PY)

    def test_duplicate_labels_are_kept(self):
        dup = (make_record("If", "if"), make_record("If", "if"))
        registry = SuggestionRegistry(languages={"python": dup})
        assert len(registry.get_suggestions("python")) == 2

    def test_suggestion_sets_are_immutable(self):
        registry = SuggestionRegistry(base=list(BASE), languages={"python": list(PY)})
        assert isinstance(registry.get_suggestions("python"), tuple)
        assert isinstance(registry.base, tuple)


class TestDefaultRegistry:
    def test_every_language_starts_with_base_set(self):
        registry = SuggestionRegistry.load_default()
        base = registry.base
        assert len(base) > 0
        for language in registry.languages():
            suggestions = registry.get_suggestions(language)
            assert suggestions[:len(base)] == base
            assert suggestions[len(base):] == registry.language_suggestions(language)

    def test_aliases_share_tables(self):
        registry = SuggestionRegistry.load_default()
        assert registry.get_suggestions("typescript") == registry.get_suggestions("javascript")
        assert registry.get_suggestions("bash") == registry.get_suggestions("shell")
        assert registry.get_suggestions("c") == registry.get_suggestions("cpp")

    def test_all_mapped_languages_registered(self):
        registry = SuggestionRegistry.load_default()
        assert sorted(registry.languages()) == sorted(LANGUAGE_TABLES)

    def test_unmapped_language_falls_back(self):
        registry = SuggestionRegistry.load_default()
        assert registry.get_suggestions("jinja") == registry.base
        assert registry.get_suggestions("haskell") == registry.base

    def test_base_set_is_jinja(self):
        registry = SuggestionRegistry.load_default()
        assert {record.trigger for record in registry.base} <= {"{%", "{#", "|"}

    def test_custom_data_dir(self, tmp_path):
        write_table(tmp_path, "jinja", [{"label": "Base", "replacement": "{{ x }}", "trigger": "{{"}])
        write_table(tmp_path, "python", [{"label": "Function", "replacement": "def f():\n    pass", "trigger": "def"}])

        registry = SuggestionRegistry.load_default(tmp_path)
        assert [r.label for r in registry.get_suggestions("python")] == ["Base", "Function"]
        # Tables missing from the directory are skipped
        assert registry.languages() == ["python"]
        assert registry.get_suggestions("rust") == registry.base

    def test_default_registry_is_cached(self):
        assert get_default_registry() is get_default_registry()


class TestDetectLanguage:
    @pytest.mark.parametrize("path,expected", [
        ("app/main.py", "python"),
        ("component.TSX", "typescript"),
        ("templates/base.j2", "jinja"),
        ("run.sh", "shell"),
        ("lib.rs", "rust"),
        ("README", None),
        ("notes.txt", None),
    ])
    def test_detect_language(self, path, expected):
        assert detect_language(path) == expected
