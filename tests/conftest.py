import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from classes import Board, Card, InputClosedError, parse_coordinates


class ScriptedInput:
    """Input provider that replays prepared lines, then behaves like a closed stdin."""

    def __init__(self, lines):
        self.lines = list(lines)
        self.prompts = []

    def read_line(self, prompt):
        self.prompts.append(prompt)
        if not self.lines:
            raise InputClosedError("Input closed before the game was finished.")
        return self.lines.pop(0)

    def read_two_integers(self, prompt):
        return parse_coordinates(self.read_line(prompt))

    def await_acknowledgment(self, prompt):
        self.read_line(prompt)


class RecordingOutput:
    def __init__(self):
        self.lines = []

    def print_line(self, text="", style=None):
        self.lines.append((text, style))

    @property
    def text(self):
        return "\n".join(text for text, _ in self.lines)


def board_from_rows(*rows):
    """Build a board from strings, one symbol per character."""
    return Board([[Card(symbol) for symbol in row] for row in rows])


@pytest.fixture
def output():
    return RecordingOutput()


@pytest.fixture
def scripted():
    return ScriptedInput


@pytest.fixture
def fixed_board():
    # (1,1) and (1,3) hold the same symbol; (1,2) does not
    return board_from_rows(
        "ABAC",
        "DBCE",
        "FGEH",
        "DHGF",
    )


@pytest.fixture
def make_board():
    return board_from_rows
