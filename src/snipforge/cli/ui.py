"""
Terminal UI utilities using Rich.

Provides:
- Colored console output
- Suggestion tables
- Snippet previews with syntax highlighting
"""

from typing import Iterable, Optional

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from snipforge.suggestions.models import SuggestionRecord

# Global console instance
console = Console()

# Editor language id -> Pygments lexer, where they differ
LEXERS = {
    'shell': 'bash',
    'jinja': 'html+jinja',
    'jinja2': 'html+jinja',
}


def _first_line(text: str, width: int = 50) -> str:
    line = text.split('\n', 1)[0]
    if len(line) > width:
        return line[:width - 3] + "..."
    if '\n' in text:
        return line + " …"
    return line


def print_warning(message: str) -> None:
    """Print warning message"""
    console.print(f"\n[bold yellow]! {message}[/bold yellow]\n")


def print_error(message: str) -> None:
    """Print error message"""
    console.print(f"\n[bold red]✗ {message}[/bold red]\n")


def show_suggestions(records: Iterable[SuggestionRecord], title: str) -> None:
    """Show suggestions as a table of label, trigger and snippet preview."""
    table = Table(title=title, show_lines=False)
    table.add_column("#", style="dim", justify="right")
    table.add_column("Label", style="cyan")
    table.add_column("Trigger", style="magenta")
    table.add_column("Snippet")

    count = 0
    for count, record in enumerate(records, start=1):
        table.add_row(str(count), record.label, record.trigger, _first_line(record.replacement))

    if count == 0:
        console.print(f"[dim]{title}: no suggestions[/dim]")
        return
    console.print(table)


def show_languages(counts: dict, base_count: int) -> None:
    """Show registered languages with their suggestion counts."""
    table = Table(title="Languages")
    table.add_column("Language", style="cyan")
    table.add_column("Suggestions", justify="right")
    table.add_column("With base", justify="right", style="dim")

    for language, count in sorted(counts.items()):
        table.add_row(language, str(count), str(count + base_count))

    console.print(table)
    console.print(f"[dim]Base (always included): {base_count} suggestions[/dim]")


def show_snippet(text: str, language: Optional[str], title: str = "Result") -> None:
    """Show buffer text with syntax highlighting."""
    lexer = LEXERS.get((language or '').lower(), language or 'text')
    syntax = Syntax(text, lexer, line_numbers=True, word_wrap=True)
    console.print(Panel(syntax, title=title, border_style="cyan"))


def show_welcome() -> None:
    """Show welcome banner"""
    welcome_text = """
# snipforge

Type a trigger (e.g. `def`, `for`, `<`, `{%`) and pick a snippet from the menu.
"""
    console.print(Markdown(welcome_text))
