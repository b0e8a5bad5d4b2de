"""
Snippet autocomplete for the snipforge playground.

Surfaces the suggestions whose trigger was just typed, and tag suggestions
while the cursor is inside an HTML or Jinja tag.
"""

from typing import Iterable, Optional

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from snipforge.suggestions.inserter import SnippetInserter
from snipforge.suggestions.matcher import TriggerMatcher
from snipforge.suggestions.models import EditorState, SuggestionRecord
from snipforge.suggestions.registry import SuggestionRegistry
from snipforge.suggestions.tag_completion import TagCompleter, analyze_tag_context, supports_tag_completion


class SnippetCompleter(Completer):
    """
    Offers snippet completions for the active language.

    Accepting a completion replaces the trigger with the re-indented
    snippet, the same edit the suggestion service produces.
    """

    def __init__(
        self,
        registry: SuggestionRegistry,
        language: Optional[str] = None,
        enforce_context: bool = True,
        tag_completer: Optional[TagCompleter] = None,
    ):
        """
        Initialize the snippet completer.

        Args:
            registry: Suggestion registry
            language: Active language id
            enforce_context: Apply the Jinja block rule when matching
            tag_completer: Tag completion backend (default: packaged tag tables)
        """
        self.registry = registry
        self.enforce_context = enforce_context
        self.tag_completer = tag_completer or TagCompleter()
        self.inserter = SnippetInserter()
        self.set_language(language)

    def set_language(self, language: Optional[str]) -> None:
        """Switch the active language mode."""
        self.language = language
        self.suggestions = self.registry.get_suggestions(language)
        self.matcher = TriggerMatcher(
            self.suggestions,
            enforce_context=self.enforce_context,
            language=language,
        )

    def _snippet_completion(self, record: SuggestionRecord, state: EditorState) -> Completion:
        edit = self.inserter.plan(record, state)
        return Completion(
            text=edit.insert_text,
            start_position=edit.start - state.cursor,
            display=record.label,
            display_meta=record.trigger,
        )

    def get_completions(self, document: Document, complete_event) -> Iterable[Completion]:
        """
        Generate snippet completions.

        Args:
            document: Current prompt document
            complete_event: Completion event

        Yields:
            Completion objects for matching snippets
        """
        state = EditorState(text=document.text, cursor=document.cursor_position)

        # Once a tag name is being typed the trigger no longer ends the
        # text, so switch to prefix-filtered tag suggestions
        if supports_tag_completion(self.language, state.text, state.cursor):
            context = analyze_tag_context(state.text, state.cursor)
            if context.is_in_tag and context.prefix:
                for record in self.tag_completer.get_tag_suggestions(
                    state.text, state.cursor, self.language, registered=self.suggestions,
                ):
                    yield Completion(
                        text=record.replacement,
                        start_position=context.tag_start - state.cursor,
                        display=record.label,
                        display_meta=record.trigger,
                    )
                return

        for record in self.matcher.match(state.text_before_cursor):
            yield self._snippet_completion(record, state)
