"""
Protocol definitions for editor <-> snipforge communication.

Uses JSON-RPC over stdio for communication.
"""

from typing import Dict, Any, Optional
from dataclasses import dataclass
import json


PARSE_ERROR = -32700
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


@dataclass
class SuggestionRequest:
    """Request for suggestions at a cursor position."""
    language: Optional[str]
    content: str
    cursor: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SuggestionRequest':
        """
        Create request from dictionary.

        The language comes from 'language', or is detected from 'file_path'.
        The cursor defaults to the end of the content.

        Raises:
            ValueError: If a parameter has the wrong type
        """
        from snipforge.suggestions.registry import detect_language

        for key in ('language', 'file_path'):
            if data.get(key) is not None and not isinstance(data[key], str):
                raise ValueError(f"{key} must be a string")

        content = data.get('content', '')
        if not isinstance(content, str):
            raise ValueError("content must be a string")

        cursor = data.get('cursor', len(content))
        if isinstance(cursor, bool) or not isinstance(cursor, int):
            raise ValueError("cursor must be an integer offset")

        file_path = data.get('file_path')
        language = data.get('language') or (detect_language(file_path) if file_path else None)
        return cls(language=language, content=content, cursor=cursor)


class JSONRPCMessage:
    """JSON-RPC 2.0 message format."""

    @staticmethod
    def request(method: str, params: Dict[str, Any], id: int) -> str:
        """Create a JSON-RPC request."""
        return json.dumps({
            'jsonrpc': '2.0',
            'method': method,
            'params': params,
            'id': id
        })

    @staticmethod
    def response(result: Any, id: Optional[int]) -> str:
        """Create a JSON-RPC response."""
        return json.dumps({
            'jsonrpc': '2.0',
            'result': result,
            'id': id
        })

    @staticmethod
    def error(code: int, message: str, id: Optional[int]) -> str:
        """Create a JSON-RPC error response."""
        return json.dumps({
            'jsonrpc': '2.0',
            'error': {
                'code': code,
                'message': message
            },
            'id': id
        })

    @staticmethod
    def parse(message: str) -> Dict[str, Any]:
        """Parse a JSON-RPC message."""
        return json.loads(message)
