"""
Data model for snippet suggestions and editor buffer edits.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple


class SuggestionDataError(Exception):
    """Raised when a suggestion table or record is malformed"""
    pass


class SuggestionContext(str, Enum):
    """Where a suggestion is allowed to appear."""
    NONE = "none"
    # Cursor must be inside an unclosed {% %}, {{ }} or {# #} block
    JINJA_BLOCK = "jinja_block"


@dataclass(frozen=True)
class SuggestionRecord:
    """A canned snippet offered when its trigger is typed."""
    label: str
    replacement: str
    trigger: str
    description: str = ""
    context: SuggestionContext = SuggestionContext.NONE

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SuggestionRecord':
        """
        Create a record from a data-file entry.

        Accepts both the table keys (replacement, trigger) and the backend
        keys (replaced_on_click, triggered_at).

        Raises:
            SuggestionDataError: If the label is missing or a field is not a string
        """
        if not isinstance(data, dict):
            raise SuggestionDataError(f"Suggestion entry must be an object, got {type(data).__name__}")

        label = data.get('label')
        if not isinstance(label, str) or not label:
            raise SuggestionDataError(f"Suggestion entry is missing a label: {data!r}")

        replacement = data.get('replacement', data.get('replaced_on_click'))
        trigger = data.get('trigger', data.get('triggered_at'))
        description = data.get('description')
        fields = {
            'replacement': '' if replacement is None else replacement,
            'trigger': '' if trigger is None else trigger,
            'description': '' if description is None else description,
        }
        for name, value in fields.items():
            if not isinstance(value, str):
                raise SuggestionDataError(f"Suggestion '{label}': {name} must be a string")

        try:
            context = SuggestionContext(data.get('context') or SuggestionContext.NONE.value)
        except ValueError:
            raise SuggestionDataError(
                f"Suggestion '{label}': unknown context {data.get('context')!r}"
            ) from None

        return cls(label=label, context=context, **fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = {
            'label': self.label,
            'description': self.description,
            'replacement': self.replacement,
            'trigger': self.trigger,
        }
        if self.context is not SuggestionContext.NONE:
            data['context'] = self.context.value
        return data


# One language's suggestions, in display order
LanguageSuggestionSet = Tuple[SuggestionRecord, ...]


@dataclass(frozen=True)
class EditorState:
    """Buffer text and a cursor offset into it."""
    text: str
    cursor: int

    def __post_init__(self):
        if not 0 <= self.cursor <= len(self.text):
            raise ValueError(f"Cursor {self.cursor} outside buffer of length {len(self.text)}")

    @classmethod
    def at_end(cls, text: str) -> 'EditorState':
        """State with the cursor after the last character."""
        return cls(text=text, cursor=len(text))

    @property
    def text_before_cursor(self) -> str:
        return self.text[:self.cursor]

    @property
    def line_start(self) -> int:
        """Offset of the first character on the cursor's line."""
        return self.text.rfind('\n', 0, self.cursor) + 1

    @property
    def current_line(self) -> str:
        end = self.text.find('\n', self.cursor)
        if end == -1:
            end = len(self.text)
        return self.text[self.line_start:end]

    @property
    def line_indent(self) -> str:
        """Leading whitespace of the cursor's line."""
        line = self.current_line
        return line[:len(line) - len(line.lstrip(' \t'))]


@dataclass(frozen=True)
class BufferEdit:
    """
    Buffer mutation for an editor to perform.

    Delete [start, end), insert insert_text at start, then put the cursor
    at the absolute offset `cursor`.
    """
    start: int
    end: int
    insert_text: str
    cursor: int

    def apply_to(self, state: EditorState) -> EditorState:
        """Return the editor state after this edit."""
        text = state.text[:self.start] + self.insert_text + state.text[self.end:]
        return EditorState(text=text, cursor=self.cursor)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'start': self.start,
            'end': self.end,
            'insert_text': self.insert_text,
            'cursor': self.cursor,
        }
