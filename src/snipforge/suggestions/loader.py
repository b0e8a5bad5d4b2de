"""
Loading of suggestion tables from JSON data files.

Tables are stored one per file as a list of
{label, description, replacement, trigger, context?} objects.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from snipforge.suggestions.models import (
    LanguageSuggestionSet,
    SuggestionDataError,
    SuggestionRecord,
)
from snipforge.utils.logger import logger

DATA_DIR = Path(__file__).parent / "data"


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise SuggestionDataError(f"{path}: invalid JSON ({e})") from e


def load_suggestion_file(path: Union[str, Path]) -> LanguageSuggestionSet:
    """
    Load one suggestion table.

    Args:
        path: Path to a JSON table

    Returns:
        Records in file order

    Raises:
        FileNotFoundError: If the file does not exist
        SuggestionDataError: If the file is not a list of valid records
    """
    path = Path(path)
    data = _read_json(path)
    if not isinstance(data, list):
        raise SuggestionDataError(f"{path}: expected a list of suggestions, got {type(data).__name__}")

    records = []
    for index, entry in enumerate(data):
        try:
            records.append(SuggestionRecord.from_dict(entry))
        except SuggestionDataError as e:
            raise SuggestionDataError(f"{path} entry {index}: {e}") from e

    logger.table_loaded(path.stem, len(records), str(path))
    return tuple(records)


def load_table(name: str, data_dir: Optional[Union[str, Path]] = None) -> Optional[LanguageSuggestionSet]:
    """
    Load a named table, or None if its file is missing.

    Args:
        name: Table name (file stem, e.g. 'python')
        data_dir: Directory to read from (default: packaged data)
    """
    path = Path(data_dir or DATA_DIR) / f"{name}.json"
    if not path.is_file():
        logger.table_missing(name, str(path))
        return None
    return load_suggestion_file(path)


def load_tag_data(data_dir: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load the static tag lists and templates used by tag completion.

    Falls back to the packaged tags.json when data_dir has none.
    """
    path = Path(data_dir) / "tags.json" if data_dir else DATA_DIR / "tags.json"
    if not path.is_file():
        path = DATA_DIR / "tags.json"

    data = _read_json(path)
    if not isinstance(data, dict):
        raise SuggestionDataError(f"{path}: expected an object, got {type(data).__name__}")

    expected = {
        'html_tags': list,
        'html_templates': dict,
        'jinja_tags': list,
        'jinja_templates': dict,
    }
    for key, kind in expected.items():
        if not isinstance(data.get(key), kind):
            raise SuggestionDataError(f"{path}: '{key}' must be a {kind.__name__}")
    return data
