"""
Suggestion service that communicates with an editor via stdio.

This service runs as a background process and answers suggestion,
matching and insertion requests.
"""

import sys
import json
import logging
import tempfile
import os
from typing import Any, Dict, List, Optional

from snipforge.suggestions.inserter import SnippetInserter
from snipforge.suggestions.matcher import TriggerMatcher
from snipforge.suggestions.models import EditorState, SuggestionDataError, SuggestionRecord
from snipforge.suggestions.protocol import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    JSONRPCMessage,
    SuggestionRequest,
)
from snipforge.suggestions.registry import SuggestionRegistry, get_default_registry
from snipforge.suggestions.tag_completion import TagCompleter


logger = logging.getLogger(__name__)


class SuggestionService:
    """
    Suggestion service that handles requests via JSON-RPC over stdio.
    """

    def __init__(
        self,
        registry: Optional[SuggestionRegistry] = None,
        enforce_context: bool = True,
        tag_completer: Optional[TagCompleter] = None,
    ):
        """
        Initialize suggestion service.

        Args:
            registry: Suggestion registry (default: process-wide packaged registry)
            enforce_context: Apply the Jinja block rule when matching
            tag_completer: Tag completion backend (default: packaged tag tables)
        """
        self.registry = registry or get_default_registry()
        self.enforce_context = enforce_context
        self.tag_completer = tag_completer or TagCompleter()
        self.inserter = SnippetInserter()
        logger.info(f"Suggestion service initialized with {len(self.registry.languages())} languages")

    def handle_request(self, request_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Handle a JSON-RPC request.

        Args:
            request_data: Parsed JSON-RPC request

        Returns:
            Response dictionary
        """
        method = request_data.get('method')
        params = request_data.get('params') or {}
        request_id = request_data.get('id')

        logger.debug(f"Handling request: method={method}, id={request_id}")

        handlers = {
            'ping': lambda p: {'status': 'ok'},
            'listLanguages': self._handle_list_languages,
            'getSuggestions': self._handle_get_suggestions,
            'match': self._handle_match,
            'apply': self._handle_apply,
            'getTagSuggestions': self._handle_get_tag_suggestions,
        }
        handler = handlers.get(method)
        if handler is None:
            return json.loads(JSONRPCMessage.error(
                code=METHOD_NOT_FOUND,
                message=f"Method not found: {method}",
                id=request_id
            ))

        try:
            if not isinstance(params, dict):
                raise ValueError("params must be an object")
            result = handler(params)
            return json.loads(JSONRPCMessage.response(result, request_id))

        except (ValueError, SuggestionDataError) as e:
            logger.warning(f"Invalid params for {method}: {e}")
            return json.loads(JSONRPCMessage.error(
                code=INVALID_PARAMS,
                message=str(e),
                id=request_id
            ))
        except Exception as e:
            logger.error(f"Error handling request: {e}", exc_info=True)
            return json.loads(JSONRPCMessage.error(
                code=INTERNAL_ERROR,
                message=str(e),
                id=request_id
            ))

    @staticmethod
    def _serialize(records: List[SuggestionRecord]) -> List[Dict[str, Any]]:
        return [record.to_dict() for record in records]

    def _handle_list_languages(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {'languages': sorted(self.registry.languages())}

    def _handle_get_suggestions(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Handle getSuggestions request.

        Args:
            params: Request parameters with 'language' or 'file_path'

        Returns:
            Every suggestion available in that language mode
        """
        request = SuggestionRequest.from_dict(params)
        suggestions = self.registry.get_suggestions(request.language)
        return {
            'language': request.language,
            'suggestions': self._serialize(list(suggestions)),
        }

    def _handle_match(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Handle match request.

        Args:
            params: language/file_path, content, cursor, optional longest flag

        Returns:
            Suggestions triggered at the cursor
        """
        request = SuggestionRequest.from_dict(params)
        state = EditorState(text=request.content, cursor=request.cursor)

        matcher = TriggerMatcher(
            self.registry.get_suggestions(request.language),
            enforce_context=self.enforce_context,
            language=request.language,
        )
        if params.get('longest'):
            matches = matcher.match_longest(state.text_before_cursor)
        else:
            matches = matcher.match(state.text_before_cursor)

        return {
            'language': request.language,
            'suggestions': self._serialize(matches),
        }

    def _handle_apply(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Handle apply request.

        Args:
            params: suggestion (record object), content, cursor

        Returns:
            The buffer edit plus the resulting content and cursor
        """
        request = SuggestionRequest.from_dict(params)
        record = SuggestionRecord.from_dict(params.get('suggestion'))
        state = EditorState(text=request.content, cursor=request.cursor)

        edit = self.inserter.plan(record, state)
        new_state = edit.apply_to(state)
        return {
            'edit': edit.to_dict(),
            'content': new_state.text,
            'cursor': new_state.cursor,
        }

    def _handle_get_tag_suggestions(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Handle getTagSuggestions request.

        Args:
            params: language/file_path, content, cursor

        Returns:
            Tag suggestions, or an empty list outside tags
        """
        request = SuggestionRequest.from_dict(params)
        state = EditorState(text=request.content, cursor=request.cursor)

        suggestions = self.tag_completer.get_tag_suggestions(
            state.text,
            state.cursor,
            request.language,
            registered=self.registry.get_suggestions(request.language),
        )
        return {
            'language': request.language,
            'suggestions': self._serialize(suggestions),
        }

    def run(self):
        """
        Run the service loop, reading from stdin and writing to stdout.
        """
        logger.info("Starting suggestion service loop")

        try:
            while True:
                line = sys.stdin.readline()

                if not line:
                    logger.info("EOF received, shutting down")
                    break

                line = line.strip()
                if not line:
                    continue

                logger.debug(f"Received: {line[:100]}...")

                try:
                    request_data = JSONRPCMessage.parse(line)
                except json.JSONDecodeError as e:
                    logger.error(f"Invalid JSON: {e}")
                    print(JSONRPCMessage.error(code=PARSE_ERROR, message="Parse error", id=None), flush=True)
                    continue

                if not isinstance(request_data, dict):
                    print(JSONRPCMessage.error(code=PARSE_ERROR, message="Parse error", id=None), flush=True)
                    continue

                response_str = json.dumps(self.handle_request(request_data))
                print(response_str, flush=True)
                logger.debug(f"Sent: {response_str[:100]}...")

        except KeyboardInterrupt:
            logger.info("Service interrupted by user")
        finally:
            logger.info("Suggestion service shutting down")


def main():
    """Main entry point for the suggestion service."""
    import argparse
    from dotenv import load_dotenv

    from snipforge.config import Config

    load_dotenv()
    config = Config()

    parser = argparse.ArgumentParser(description='snipforge suggestion service')
    parser.add_argument(
        '--data-dir',
        default=config.data_dir,
        help='Directory of JSON suggestion tables (default: packaged data)'
    )
    parser.add_argument(
        '--no-context',
        action='store_true',
        help='Offer Jinja suggestions outside {% %} / {{ }} blocks too'
    )
    args = parser.parse_args()

    # stdout carries the protocol, so log to a file
    log_file = os.path.join(tempfile.gettempdir(), 'snipforge-service.log')
    logging.basicConfig(
        filename=log_file,
        level=getattr(logging, config.log_level, logging.INFO),
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    registry = get_default_registry(args.data_dir)
    service = SuggestionService(
        registry=registry,
        enforce_context=config.enforce_context and not args.no_context,
        tag_completer=TagCompleter(data_dir=args.data_dir),
    )
    service.run()


if __name__ == '__main__':
    main()
