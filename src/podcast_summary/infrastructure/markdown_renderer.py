"""Terminal rendering of markdown summaries"""

from __future__ import annotations

import click
from rich.console import Console
from rich.markdown import Markdown


def render_markdown(text: str, console: Console | None = None, raw: bool = False) -> None:
    """Print a summary to stdout

    Args:
        text: Markdown text
        console: Rich console (creates new if None)
        raw: Print the markdown source instead of rendering it
    """
    if raw:
        click.echo(text)
        return
    console = console if console is not None else Console()
    console.print(Markdown(text))
