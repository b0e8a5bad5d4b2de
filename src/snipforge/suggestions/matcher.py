"""
Trigger matching against the text before the cursor.
"""

from typing import Iterable, List, Optional

from snipforge.suggestions.models import SuggestionContext, SuggestionRecord
from snipforge.utils.logger import logger


def in_jinja_block(text_before_cursor: str) -> bool:
    """
    Check whether the cursor sits inside an unclosed Jinja block.

    A block is a statement `{% ... %}`, an expression `{{ ... }}` or a
    comment `{# ... #}`.
    """
    last_open = max(text_before_cursor.rfind(opener) for opener in ('{%', '{{', '{#'))
    if last_open == -1:
        return False
    last_close = max(text_before_cursor.rfind(closer) for closer in ('%}', '}}', '#}'))
    return last_open > last_close


class TriggerMatcher:
    """
    Finds the suggestions whose trigger ends the text before the cursor.

    Matching is exact and case-sensitive. Every matching record is
    returned in list order; choosing among them is left to the caller.
    """

    def __init__(
        self,
        suggestions: Iterable[SuggestionRecord],
        enforce_context: bool = True,
        language: Optional[str] = None,
    ):
        """
        Args:
            suggestions: Active suggestion set (base + language)
            enforce_context: Only offer Jinja-block suggestions inside an open Jinja block
            language: Language id, used for logging only
        """
        self.suggestions = tuple(suggestions)
        self.enforce_context = enforce_context
        self.language = language

    def _context_allows(self, record: SuggestionRecord, text_before_cursor: str) -> bool:
        if not self.enforce_context:
            return True
        if record.context is SuggestionContext.JINJA_BLOCK:
            return in_jinja_block(text_before_cursor)
        return True

    def match(self, text_before_cursor: str) -> List[SuggestionRecord]:
        """
        Get all suggestions triggered by the text before the cursor.

        Args:
            text_before_cursor: Buffer text up to the cursor

        Returns:
            Matching records in their original order
        """
        matches = [
            record for record in self.suggestions
            if record.trigger
            and text_before_cursor.endswith(record.trigger)
            and self._context_allows(record, text_before_cursor)
        ]
        logger.suggestions_matched(self.language, text_before_cursor[-20:], len(matches))
        return matches

    def match_longest(self, text_before_cursor: str) -> List[SuggestionRecord]:
        """Matches restricted to the longest matching trigger."""
        matches = self.match(text_before_cursor)
        if not matches:
            return []
        longest = max(len(record.trigger) for record in matches)
        return [record for record in matches if len(record.trigger) == longest]
