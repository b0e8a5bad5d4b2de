"""
Entry point for running the suggestion service as a module.

Usage:
    python -m snipforge.suggestions [--data-dir DIR] [--no-context]
"""

from snipforge.suggestions.service import main

if __name__ == '__main__':
    main()
