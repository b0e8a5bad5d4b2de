"""
snipforge suggestions module

Per-language snippet tables, trigger matching and snippet insertion.
"""

from .models import (
    BufferEdit,
    EditorState,
    LanguageSuggestionSet,
    SuggestionContext,
    SuggestionDataError,
    SuggestionRecord,
)
from .registry import SuggestionRegistry, detect_language, get_default_registry
from .matcher import TriggerMatcher
from .inserter import SnippetInserter, reindent
from .tag_completion import TagCompleter, TagContext, analyze_tag_context

__all__ = [
    'BufferEdit',
    'EditorState',
    'LanguageSuggestionSet',
    'SuggestionContext',
    'SuggestionDataError',
    'SuggestionRecord',
    'SuggestionRegistry',
    'detect_language',
    'get_default_registry',
    'TriggerMatcher',
    'SnippetInserter',
    'reindent',
    'TagCompleter',
    'TagContext',
    'analyze_tag_context',
]
