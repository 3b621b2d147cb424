"""Rich Console factory and theme for lockshaker output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

SHAKER_THEME = Theme(
    {
        "shaker.ok": "bold green",
        "shaker.error": "bold red",
        "shaker.warning": "bold yellow",
        "shaker.op": "bold cyan",
        "shaker.key": "dim",
        "shaker.path": "bold blue",
        "shaker.dev": "green",
        "shaker.prod": "yellow",
        "shaker.count": "magenta",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=SHAKER_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
