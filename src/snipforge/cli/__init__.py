"""
CLI module for snipforge - handles command-line interface and terminal UI.
"""

from snipforge.cli import ui
from snipforge.cli.commands import main

__all__ = ["main", "ui"]
