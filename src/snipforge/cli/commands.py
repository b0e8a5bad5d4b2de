"""
CLI commands for snipforge.

Main entry point: `snipforge <command>`
"""

import sys
from typing import Optional

import click
from dotenv import load_dotenv

from snipforge.cli import ui
from snipforge.config import Config
from snipforge.suggestions.inserter import SnippetInserter
from snipforge.suggestions.matcher import TriggerMatcher
from snipforge.suggestions.models import EditorState, SuggestionDataError
from snipforge.suggestions.registry import SuggestionRegistry, get_default_registry
from snipforge.utils.logger import logger


class CLIState:
    """Settings shared by subcommands."""

    def __init__(self, config: Config):
        self.config = config
        self._registry: Optional[SuggestionRegistry] = None

    @property
    def registry(self) -> SuggestionRegistry:
        if self._registry is None:
            self._registry = get_default_registry(self.config.data_dir)
        return self._registry


def _fail(message: str, code: int = 1) -> None:
    logger.error('CLI', message)
    ui.print_error(message)
    sys.exit(code)


@click.group()
@click.option(
    "--data-dir",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Directory of JSON suggestion tables (default: packaged data)",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Minimum log level for log files",
)
@click.option(
    "--context/--no-context",
    default=None,
    help="Only offer Jinja suggestions inside {% %} / {{ }} blocks",
)
@click.pass_context
def main(ctx, data_dir: str, log_level: str, context: Optional[bool]):
    """
    snipforge - code snippet suggestions per editor language

    Examples:
        snipforge languages
        snipforge list python
        snipforge match python "    def"
        snipforge expand python "    def"
        snipforge play --language html
    """
    load_dotenv()

    config = Config()
    if data_dir:
        config.data_dir = data_dir
    if log_level:
        config.log_level = log_level.upper()
        config.enable_logging = True
    if context is not None:
        config.enforce_context = context
    config.configure_logging()

    ctx.obj = CLIState(config)


@main.command()
@click.pass_obj
def languages(state: CLIState):
    """List languages with suggestion tables"""
    try:
        registry = state.registry
    except SuggestionDataError as e:
        _fail(str(e))

    counts = {
        language: len(registry.language_suggestions(language))
        for language in registry.languages()
    }
    ui.show_languages(counts, len(registry.base))


@main.command(name="list")
@click.argument("language", required=False)
@click.pass_obj
def list_suggestions(state: CLIState, language: Optional[str]):
    """List every suggestion available in LANGUAGE"""
    try:
        registry = state.registry
    except SuggestionDataError as e:
        _fail(str(e))

    if language and not registry.is_registered(language):
        logger.warning('CLI', f"no suggestion table for {language}")
        ui.print_warning(f"No table for '{language}', showing base suggestions only")
    ui.show_suggestions(registry.get_suggestions(language), title=f"Suggestions ({language or 'base'})")


@main.command()
@click.argument("language")
@click.argument("text")
@click.option("--longest", is_flag=True, help="Only keep matches with the longest trigger")
@click.pass_obj
def match(state: CLIState, language: str, text: str, longest: bool):
    """Show suggestions triggered by TEXT (the text before the cursor)"""
    try:
        registry = state.registry
    except SuggestionDataError as e:
        _fail(str(e))

    matcher = TriggerMatcher(
        registry.get_suggestions(language),
        enforce_context=state.config.enforce_context,
        language=language,
    )
    matches = matcher.match_longest(text) if longest else matcher.match(text)
    ui.show_suggestions(matches, title=f"Matches for {text!r} ({language})")


@main.command()
@click.argument("language")
@click.argument("text")
@click.option("--label", "-l", default=None, help="Label of the suggestion to apply (default: first match)")
@click.option("--indent", default=0, type=click.IntRange(min=0), help="Spaces of indentation before TEXT")
@click.pass_obj
def expand(state: CLIState, language: str, text: str, label: Optional[str], indent: int):
    """Apply a suggestion triggered by TEXT and print the result"""
    try:
        registry = state.registry
    except SuggestionDataError as e:
        _fail(str(e))

    matcher = TriggerMatcher(
        registry.get_suggestions(language),
        enforce_context=state.config.enforce_context,
        language=language,
    )
    buffer = " " * indent + text
    matches = matcher.match(buffer)
    if label:
        matches = [record for record in matches if record.label == label]
    if not matches:
        _fail(f"No suggestion matches {text!r} in {language}")

    result = SnippetInserter().apply(matches[0], EditorState.at_end(buffer))
    ui.show_snippet(result.text, language, title=matches[0].label)
    ui.console.print(f"[dim]Cursor at offset {result.cursor}[/dim]")


@main.command()
@click.pass_obj
def serve(state: CLIState):
    """Run the JSON-RPC suggestion service on stdio"""
    from snipforge.suggestions.service import SuggestionService
    from snipforge.suggestions.tag_completion import TagCompleter

    try:
        service = SuggestionService(
            registry=state.registry,
            enforce_context=state.config.enforce_context,
            tag_completer=TagCompleter(data_dir=state.config.data_dir),
        )
    except SuggestionDataError as e:
        _fail(str(e))
    service.run()


@main.command()
@click.option("--language", "-L", default=None, help="Language mode to start in")
@click.pass_obj
def play(state: CLIState, language: Optional[str]):
    """Try suggestions in an interactive playground"""
    from snipforge.cli.interactive import PlaygroundSession

    try:
        session = PlaygroundSession(
            registry=state.registry,
            language=language,
            enforce_context=state.config.enforce_context,
        )
        session.start()
    except SuggestionDataError as e:
        _fail(str(e))
    except KeyboardInterrupt:
        ui.console.print("\n")
        sys.exit(130)


@main.command()
def version():
    """Show version information"""
    from snipforge import __version__

    ui.console.print(f"\n[bold]snipforge[/bold] v{__version__}\n")
    ui.console.print("Per-language code snippet suggestions\n")


if __name__ == "__main__":
    main()
