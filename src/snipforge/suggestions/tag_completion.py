"""
Tag completion for HTML and Jinja templates.

Offers tag suggestions while the cursor is inside an opening or closing
HTML tag (`<tag>`, `</tag>`) or a Jinja statement tag (`{% tag %}`).
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from snipforge.suggestions.loader import load_tag_data
from snipforge.suggestions.models import SuggestionRecord


JINJA_LANGUAGES = ('jinja', 'jinja2')
TAG_LANGUAGES = ('html', 'jinja', 'jinja2', 'django', 'twig')

# How far past the cursor to look for the end of a tag
LOOKAHEAD = 100

_JINJA_TAG_NAME = re.compile(r'{%\s*(\w+)')
_HTML_TAG_NAME = re.compile(r'<(\w+)')


@dataclass
class TagContext:
    """Where the cursor sits relative to the surrounding tag."""
    is_in_tag: bool
    is_closing_tag: bool = False
    is_jinja_tag: bool = False
    prefix: str = ""
    tag_start: int = -1
    tag_end: Optional[int] = None


def _analyze_jinja_tag_context(text: str, cursor: int) -> TagContext:
    pos = cursor - 1
    tag_start = -1
    is_closing_tag = False

    # Walk back to the nearest '{%'; '%}' does not stop the search so that
    # '{%%}' still counts as being inside a tag
    search_pos = pos
    while search_pos >= 0:
        if search_pos + 1 < len(text) and text[search_pos:search_pos + 2] == '{%':
            tag_start = search_pos
            after_open = text[search_pos + 2:min(search_pos + 7, len(text))].strip()
            if after_open.lower().startswith('end'):
                is_closing_tag = True
            break
        search_pos -= 1

    if tag_start == -1:
        return TagContext(is_in_tag=False)

    tag_end = None
    for i in range(tag_start + 2, min(len(text), cursor + LOOKAHEAD)):
        if i + 1 >= len(text):
            break
        two_chars = text[i:i + 2]
        if two_chars == '%}':
            tag_end = i + 1
            break
        if two_chars == '{%':
            break

    prefix_start = tag_start + 2
    prefix_end = min(max(cursor, prefix_start), len(text))
    prefix = ''
    if prefix_end > prefix_start:
        prefix = text[prefix_start:prefix_end].strip()
        prefix = re.sub(r'^%+', '', prefix)

    return TagContext(
        is_in_tag=tag_end is None or cursor <= tag_end,
        is_closing_tag=is_closing_tag,
        is_jinja_tag=True,
        prefix=prefix,
        tag_start=tag_start,
        tag_end=tag_end,
    )


def _analyze_html_tag_context(text: str, cursor: int) -> TagContext:
    pos = cursor - 1

    if pos >= 0 and text[pos] == '>':
        return TagContext(is_in_tag=False)

    tag_start = -1
    is_closing_tag = False
    while pos >= 0:
        char = text[pos]
        if char == '>':
            return TagContext(is_in_tag=False)
        if char == '<':
            tag_start = pos
            is_closing_tag = pos + 1 < len(text) and text[pos + 1] == '/'
            break
        pos -= 1

    if tag_start == -1:
        return TagContext(is_in_tag=False)

    name_start = tag_start + 2 if is_closing_tag else tag_start + 1

    tag_end = None
    space_after_tag_name = None
    for i in range(name_start, min(len(text), cursor + LOOKAHEAD)):
        char = text[i]
        if char == '>':
            tag_end = i
            break
        if char in ' \n\t' and space_after_tag_name is None:
            space_after_tag_name = i

    prefix_end = min(max(cursor, name_start), len(text))
    prefix = ''
    if prefix_end > name_start:
        typed = text[name_start:prefix_end]
        space_index = typed.find(' ')
        if space_index != -1 and cursor <= name_start + space_index:
            prefix = typed[:space_index].strip()
        else:
            prefix = typed.strip()

    # Past the first whitespace we are in attributes, not the tag name
    in_tag_name = tag_end is None or cursor <= tag_end
    in_attributes = (
        space_after_tag_name is not None
        and cursor > space_after_tag_name
        and (tag_end is None or cursor < tag_end)
    )

    return TagContext(
        is_in_tag=in_tag_name and not in_attributes,
        is_closing_tag=is_closing_tag,
        prefix=prefix,
        tag_start=tag_start,
        tag_end=tag_end,
    )


def analyze_tag_context(text: str, cursor: int) -> TagContext:
    """
    Determine whether the cursor is inside a tag.

    Jinja tags are checked first, then HTML tags.

    Args:
        text: Full buffer text
        cursor: Cursor offset

    Returns:
        TagContext describing the tag around the cursor
    """
    if cursor < 0 or cursor > len(text):
        return TagContext(is_in_tag=False)

    jinja_context = _analyze_jinja_tag_context(text, cursor)
    if jinja_context.is_in_tag:
        return jinja_context

    return _analyze_html_tag_context(text, cursor)


def supports_tag_completion(
    language: Optional[str],
    text: Optional[str] = None,
    cursor: Optional[int] = None,
) -> bool:
    """
    Check whether tag completion applies.

    True for template/markup languages, and in any language while the
    cursor is inside a Jinja `{% %}` tag.
    """
    if text is not None and cursor is not None and 0 <= cursor <= len(text):
        if _analyze_jinja_tag_context(text, cursor).is_in_tag:
            return True

    if not language:
        return False
    return language.lower() in TAG_LANGUAGES


def process_tag_template(template: str) -> str:
    """Strip VARIABLE_N placeholders from a tag template for insertion."""
    processed = re.sub(r'<VARIABLE_\d+>', '', template)
    processed = re.sub(r'VARIABLE_\d+', '', processed)
    processed = processed.replace('<>', '')
    return re.sub(r'\n{3,}', '\n\n', processed)


def extract_tag_name(record: SuggestionRecord, is_jinja: bool) -> str:
    """Tag name a suggestion inserts, e.g. 'div' for '<div>...</div>'."""
    pattern = _JINJA_TAG_NAME if is_jinja else _HTML_TAG_NAME
    match = pattern.search(record.replacement)
    if match:
        return match.group(1)
    return '' if is_jinja else record.label.lower()


class TagCompleter:
    """Tag suggestions backed by the static HTML/Jinja tag tables."""

    def __init__(self, tag_data: Optional[Dict[str, Any]] = None,
                 data_dir: Optional[Union[str, Path]] = None):
        data = tag_data if tag_data is not None else load_tag_data(data_dir)
        self.html_tags: List[str] = list(data['html_tags'])
        self.html_templates: Dict[str, str] = dict(data['html_templates'])
        self.jinja_tags: List[str] = list(data['jinja_tags'])
        self.jinja_templates: Dict[str, str] = dict(data['jinja_templates'])

    def get_tag_template(self, tag_name: str, is_closing_tag: bool,
                         is_jinja_tag: bool = False) -> str:
        """
        Template for a tag, without its opening delimiter.

        Closing tags get just the tag name.
        """
        if is_closing_tag:
            return tag_name
        if is_jinja_tag and tag_name in self.jinja_templates:
            return self.jinja_templates[tag_name]
        if tag_name in self.html_templates:
            return self.html_templates[tag_name]
        if is_jinja_tag:
            return f'{tag_name} VARIABLE_1 %}}'
        return f'{tag_name}>VARIABLE_1</{tag_name}>'

    def get_insert_text_for_tag(self, tag_name: str, is_closing_tag: bool,
                                context: Optional[TagContext] = None) -> str:
        """Text to insert after the opening delimiter for a tag."""
        is_jinja = context.is_jinja_tag if context else False
        if is_closing_tag or (context is not None and context.is_closing_tag):
            return tag_name
        return process_tag_template(self.get_tag_template(tag_name, False, is_jinja_tag=is_jinja))

    def _static_suggestions(self, context: TagContext, language: Optional[str]) -> List[SuggestionRecord]:
        if context.is_jinja_tag:
            tags = list(self.jinja_tags)
        else:
            tags = list(self.html_tags)
            if language and language.lower() in JINJA_LANGUAGES:
                tags.extend(self.jinja_tags)

        records = []
        for tag in tags:
            is_jinja = context.is_jinja_tag or tag in self.jinja_tags
            processed = process_tag_template(self.get_tag_template(tag, False, is_jinja_tag=is_jinja))
            records.append(SuggestionRecord(
                label=tag,
                description=f"Insert a {tag} {'Jinja' if is_jinja else 'HTML'} tag",
                replacement=f'{{% {processed}' if is_jinja else f'<{processed}',
                trigger='{%' if is_jinja else '<',
            ))
        return records

    def get_tag_suggestions(
        self,
        text: str,
        cursor: int,
        language: Optional[str],
        registered: Optional[Sequence[SuggestionRecord]] = None,
    ) -> List[SuggestionRecord]:
        """
        Get tag suggestions for the cursor position.

        Inside `{% %}` only Jinja tags are offered; inside `<>` HTML tags,
        plus Jinja tags when the language is Jinja.

        Args:
            text: Full buffer text
            cursor: Cursor offset
            language: Editor language id
            registered: Active suggestions; used instead of the static tag
                tables when given so descriptions are kept

        Returns:
            Suggestions filtered by the typed prefix, prefix matches first,
            then by tag name
        """
        context = analyze_tag_context(text, cursor)
        if not context.is_in_tag:
            return []

        if registered:
            if context.is_jinja_tag:
                available = [s for s in registered if s.trigger == '{%']
            else:
                available = [s for s in registered if s.trigger == '<']
                if language and language.lower() in JINJA_LANGUAGES:
                    available.extend(s for s in registered if s.trigger == '{%')
        else:
            available = self._static_suggestions(context, language)

        prefix = context.prefix.lower()
        if prefix:
            available = [
                s for s in available
                if extract_tag_name(s, context.is_jinja_tag).lower().startswith(prefix)
            ]

        def sort_key(record: SuggestionRecord):
            name = extract_tag_name(record, context.is_jinja_tag)
            return (not name.lower().startswith(prefix), name)

        return sorted(available, key=sort_key)
