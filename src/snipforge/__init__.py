"""
snipforge - code snippet suggestions for editors

Per-language snippet tables, trigger matching and snippet insertion.
"""

__version__ = "0.1.0"

from snipforge.suggestions import (
    EditorState,
    SnippetInserter,
    SuggestionRecord,
    SuggestionRegistry,
    TriggerMatcher,
    get_default_registry,
)

__all__ = [
    "EditorState",
    "SnippetInserter",
    "SuggestionRecord",
    "SuggestionRegistry",
    "TriggerMatcher",
    "get_default_registry",
    "__version__",
]
