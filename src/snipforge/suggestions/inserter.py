"""
Materializes an accepted suggestion into editor text.
"""

from snipforge.suggestions.models import BufferEdit, EditorState, SuggestionRecord
from snipforge.utils.logger import logger


def reindent(text: str, indent: str) -> str:
    """Prefix every line after the first with `indent`."""
    if not indent or '\n' not in text:
        return text
    first, *rest = text.split('\n')
    return '\n'.join([first] + [indent + line for line in rest])


class SnippetInserter:
    """Replaces the typed trigger with the suggestion's replacement text."""

    def plan(self, record: SuggestionRecord, state: EditorState) -> BufferEdit:
        """
        Build the edit that accepts `record` at the cursor.

        The trigger right before the cursor is deleted. If it is not there
        (stale match) nothing is deleted and the replacement is inserted
        at the cursor.

        Args:
            record: Accepted suggestion
            state: Current editor state

        Returns:
            BufferEdit leaving the cursor after the inserted text
        """
        trigger = record.trigger
        start = state.cursor
        if trigger and state.text_before_cursor.endswith(trigger):
            start = state.cursor - len(trigger)
        elif trigger:
            logger.stale_trigger(record.label, trigger)

        insert_text = reindent(record.replacement, state.line_indent)
        logger.snippet_applied(record.label, state.cursor - start, len(insert_text))

        return BufferEdit(
            start=start,
            end=state.cursor,
            insert_text=insert_text,
            cursor=start + len(insert_text),
        )

    def apply(self, record: SuggestionRecord, state: EditorState) -> EditorState:
        """Accept `record` and return the new editor state."""
        return self.plan(record, state).apply_to(state)
