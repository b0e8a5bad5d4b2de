"""
Interactive snippet playground.

A multi-line prompt acting as a tiny editor buffer: typing a trigger pops up
the matching snippets, and each submitted buffer is echoed back highlighted.
"""

from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.styles import Style
from rich.console import Console

from snipforge.cli import ui
from snipforge.cli.snippet_completer import SnippetCompleter
from snipforge.suggestions.registry import SuggestionRegistry


STYLE = Style.from_dict({
    'prompt': '#00d7ff bold',
    'language': '#22c55e',
    'completion-menu': 'bg:#1a1a1a #ffffff',
    'completion-menu.completion': 'bg:#1a1a1a #e0e0e0',
    'completion-menu.completion.current': 'bg:#00d7ff #000000 bold',
    'completion-menu.meta': 'bg:#1a1a1a #808080',
    'completion-menu.meta.current': 'bg:#00d7ff #000000',
    'bottom-toolbar': 'bg:#1a1a2e #888888',
})

COMMANDS = {
    '/lang': 'Switch language, e.g. /lang python',
    '/list': 'List suggestions for the current language',
    '/help': 'Show commands',
    '/exit': 'Leave the playground',
}


class PlaygroundSession:
    """
    Manages an interactive playground session.

    Enter inserts a newline, Esc+Enter submits the buffer.
    """

    def __init__(
        self,
        registry: SuggestionRegistry,
        language: Optional[str] = None,
        enforce_context: bool = True,
        console: Optional[Console] = None,
    ):
        self.registry = registry
        self.console = console or ui.console
        self.completer = SnippetCompleter(registry, language, enforce_context=enforce_context)
        self.session = PromptSession(
            completer=self.completer,
            complete_while_typing=True,
            multiline=True,
            key_bindings=self._key_bindings(),
            style=STYLE,
        )

    @property
    def language(self) -> Optional[str]:
        return self.completer.language

    def _key_bindings(self) -> KeyBindings:
        bindings = KeyBindings()

        @bindings.add('tab')
        def _(event):
            buffer = event.app.current_buffer
            if buffer.complete_state:
                buffer.complete_next()
            else:
                buffer.start_completion(select_first=True)

        return bindings

    def _prompt_message(self):
        return HTML(f'<language>[{self.language or "base"}]</language> <prompt>›</prompt> ')

    def _toolbar(self):
        return HTML(' Tab: complete  Esc+Enter: submit  /help: commands')

    def handle_command(self, text: str) -> bool:
        """
        Run a slash command.

        Returns:
            False when the session should end
        """
        command, _, argument = text.strip().partition(' ')
        if command == '/exit':
            return False
        if command == '/lang':
            language = argument.strip() or None
            self.completer.set_language(language)
            if language and not self.registry.is_registered(language):
                ui.print_warning(f"Unknown language '{language}', only base suggestions are offered")
            else:
                self.console.print(f"[dim]Language: {language or 'base'}[/dim]")
        elif command == '/list':
            ui.show_suggestions(self.completer.suggestions, title=f"Suggestions ({self.language or 'base'})")
        else:
            for name, description in COMMANDS.items():
                self.console.print(f"  [cyan]{name}[/cyan]  {description}")
        return True

    def start(self) -> None:
        """Run the prompt loop until /exit, Ctrl-D or Ctrl-C."""
        ui.show_welcome()
        while True:
            try:
                text = self.session.prompt(self._prompt_message, bottom_toolbar=self._toolbar)
            except (EOFError, KeyboardInterrupt):
                break

            if text.strip().startswith('/'):
                if not self.handle_command(text):
                    break
                continue

            if text.strip():
                ui.show_snippet(text, self.language, title="Buffer")
