"""
Interactive selection prompt for repobase.
"""

from typing import Sequence

import click
from rich.console import Console

from ..exit_codes import PromptCancelledError

console = Console(stderr=True)


def select_one(message: str, options: Sequence[str]) -> str:
    """
    Ask the user to pick one option from a numbered list.

    Returns:
        The chosen option string

    Raises:
        PromptCancelledError: if the user aborts (Ctrl+C, EOF) or there is nothing to choose
    """
    if not options:
        raise PromptCancelledError("nothing to choose from")

    console.print(f"[bold]{message}[/bold]")
    for i, option in enumerate(options, 1):
        console.print(f"  [cyan]{i}[/cyan]. {option}")

    try:
        choice = click.prompt(
            "Choice",
            type=click.IntRange(1, len(options)),
            default=1,
            err=True,
        )
    except (click.Abort, EOFError, KeyboardInterrupt) as e:
        raise PromptCancelledError() from e

    return options[choice - 1]
