"""
Registry of suggestion tables keyed by editor language.

The base table (Jinja template snippets) is always offered; the active
language's table is appended after it.
"""

from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from snipforge.suggestions.loader import load_table
from snipforge.suggestions.models import LanguageSuggestionSet, SuggestionRecord
from snipforge.utils.logger import logger


BASE_TABLE = "jinja"

# Editor language id -> data table
LANGUAGE_TABLES: Dict[str, str] = {
    'html': 'html',
    'json': 'json',
    'sql': 'sql',
    'dart': 'dart',
    'python': 'python',
    'javascript': 'javascript',
    'typescript': 'javascript',
    'css': 'css',
    'markdown': 'markdown',
    'yaml': 'yaml',
    'xml': 'xml',
    'bash': 'shell',
    'shell': 'shell',
    'c': 'cpp',
    'cpp': 'cpp',
    'java': 'java',
    'go': 'go',
    'rust': 'rust',
    'php': 'php',
    'ruby': 'ruby',
    'swift': 'swift',
    'kotlin': 'kotlin',
    'csharp': 'csharp',
}

# File extension -> editor language id
EXTENSION_LANGUAGES: Dict[str, str] = {
    '.py': 'python',
    '.pyi': 'python',
    '.js': 'javascript',
    '.jsx': 'javascript',
    '.mjs': 'javascript',
    '.ts': 'typescript',
    '.tsx': 'typescript',
    '.java': 'java',
    '.go': 'go',
    '.rs': 'rust',
    '.cpp': 'cpp',
    '.cc': 'cpp',
    '.hpp': 'cpp',
    '.c': 'c',
    '.h': 'c',
    '.cs': 'csharp',
    '.rb': 'ruby',
    '.php': 'php',
    '.swift': 'swift',
    '.kt': 'kotlin',
    '.kts': 'kotlin',
    '.dart': 'dart',
    '.html': 'html',
    '.htm': 'html',
    '.css': 'css',
    '.json': 'json',
    '.sql': 'sql',
    '.md': 'markdown',
    '.markdown': 'markdown',
    '.yaml': 'yaml',
    '.yml': 'yaml',
    '.xml': 'xml',
    '.sh': 'shell',
    '.bash': 'bash',
    '.j2': 'jinja',
    '.jinja': 'jinja',
    '.jinja2': 'jinja',
}


def _normalize(language_id: Optional[str]) -> Optional[str]:
    if not language_id:
        return None
    return language_id.strip().lower() or None


def detect_language(file_path: str) -> Optional[str]:
    """Detect the editor language id from a file extension, or None."""
    return EXTENSION_LANGUAGES.get(Path(file_path).suffix.lower())


class SuggestionRegistry:
    """
    Holds the base suggestion set and one set per language.

    Lookups never fail: an unknown language yields only the base set.
    """

    def __init__(
        self,
        base: Iterable[SuggestionRecord] = (),
        languages: Optional[Dict[str, Iterable[SuggestionRecord]]] = None,
    ) -> None:
        self._base: LanguageSuggestionSet = tuple(base)
        self._languages: Dict[str, LanguageSuggestionSet] = {}
        for language_id, suggestions in (languages or {}).items():
            self.register(language_id, suggestions)

    def register(self, language_id: str, suggestions: Iterable[SuggestionRecord]) -> None:
        """Register or replace the suggestion list for a language"""
        key = _normalize(language_id)
        if key is None:
            raise ValueError("language_id must be a non-empty string")
        self._languages[key] = tuple(suggestions)

    def register_base(self, suggestions: Iterable[SuggestionRecord]) -> None:
        """Replace the always-included suggestion list"""
        self._base = tuple(suggestions)

    @property
    def base(self) -> LanguageSuggestionSet:
        return self._base

    def languages(self) -> List[str]:
        """List registered language ids"""
        return list(self._languages.keys())

    def is_registered(self, language_id: Optional[str]) -> bool:
        return _normalize(language_id) in self._languages

    def language_suggestions(self, language_id: Optional[str]) -> LanguageSuggestionSet:
        """Language-specific suggestions only (no base set)"""
        return self._languages.get(_normalize(language_id), ())

    def get_suggestions(self, language_id: Optional[str]) -> LanguageSuggestionSet:
        """
        Get the suggestions available in a language mode.

        Args:
            language_id: Editor language id (case-insensitive); None or unknown
                ids fall back to the base set

        Returns:
            Base suggestions followed by the language's suggestions
        """
        return self._base + self.language_suggestions(language_id)

    @classmethod
    def load_default(cls, data_dir: Optional[Union[str, Path]] = None) -> "SuggestionRegistry":
        """
        Load the default set of snippet tables.

        Args:
            data_dir: Directory of JSON tables (default: packaged data)

        Returns:
            SuggestionRegistry with every mapped language registered
        """
        registry = cls(base=load_table(BASE_TABLE, data_dir) or ())

        # Aliases share one loaded table
        tables: Dict[str, Optional[LanguageSuggestionSet]] = {}
        for language_id, table in LANGUAGE_TABLES.items():
            if table not in tables:
                tables[table] = load_table(table, data_dir)
            if tables[table] is not None:
                registry.register(language_id, tables[table])

        logger.registry_loaded(
            len(registry.base),
            len(registry.languages()),
            str(data_dir) if data_dir else "packaged data",
        )
        return registry


@lru_cache(maxsize=None)
def _cached_registry(data_dir: Optional[str]) -> SuggestionRegistry:
    return SuggestionRegistry.load_default(data_dir)


def get_default_registry(data_dir: Optional[Union[str, Path]] = None) -> SuggestionRegistry:
    """Process-wide registry, loaded once per data directory."""
    return _cached_registry(str(data_dir) if data_dir else None)
