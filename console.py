"""
Terminal input and output for the memory match game.

Both classes wrap a single Rich Console so prompts, the board and messages
share one output stream.
"""
from typing import Optional, Tuple

from rich.console import Console

from classes import InputClosedError, parse_coordinates


class ConsoleOutput:
    """Prints lines to the terminal exactly as given, optionally coloured."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def print_line(self, text: str = "", style: Optional[str] = None) -> None:
        # Board text prints verbatim: no markup, highlighting or wrapping
        self.console.print(text, style=style, markup=False, highlight=False, soft_wrap=True)


class ConsoleInput:
    """Reads the player's answers one line at a time."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def read_line(self, prompt: str) -> str:
        try:
            return self.console.input(prompt, markup=False)
        except EOFError:
            raise InputClosedError("Input closed before the game was finished.") from None

    def read_two_integers(self, prompt: str) -> Tuple[int, int]:
        return parse_coordinates(self.read_line(prompt))

    def await_acknowledgment(self, prompt: str) -> None:
        self.read_line(prompt)
