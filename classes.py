import logging
import random
import re
import string
import time
from enum import Enum
from typing import List, Optional, Tuple

from shared.models import GameConfig, GameStats

logger = logging.getLogger(__name__)

# Uppercase letters, then lowercase, then digits 0-5: 58 symbols.
SYMBOL_CATALOG = (string.ascii_uppercase + string.ascii_lowercase + string.digits)[:58]

# Plain ASCII decimal, optionally signed
INTEGER_TOKEN = re.compile(r"[+-]?[0-9]+")


class MemoryMatchError(Exception):
    """Base class for every error raised by the memory match game."""


class ConfigurationError(MemoryMatchError):
    """The board configuration cannot produce a playable game."""


class InputClosedError(MemoryMatchError):
    """The player's input stream ended before the game was finished."""


class PickError(MemoryMatchError):
    """
    A card pick was rejected. Recoverable: the message is shown to the
    player and the current attempt is abandoned.
    """
    message = "Invalid pick."

    def __init__(self, message=None):
        super().__init__(message or self.message)


class ParseError(PickError):
    message = "Invalid input. Please enter two numbers."


class OutOfRangeError(PickError):
    message = "Coordinates out of range. Try again."


class AlreadyMatchedError(PickError):
    message = "That card is already matched. Pick another."


class AlreadyRevealedError(PickError):
    message = "That card is already revealed this turn. Pick another."


class SameCardError(PickError):
    message = "You picked the same card twice. Try again."


def symbol_pool(total_pairs: int) -> List[str]:
    """
    Get one distinct symbol per pair, in catalog order.

    Args:
        total_pairs: Number of pairs on the board

    Returns:
        List of the first total_pairs catalog symbols

    Raises:
        ConfigurationError: If the catalog is too small
    """
    if total_pairs > len(SYMBOL_CATALOG):
        raise ConfigurationError(
            f"Not enough unique symbols to create {total_pairs} pairs "
            f"(only {len(SYMBOL_CATALOG)} available). Reduce board size."
        )
    return list(SYMBOL_CATALOG[:total_pairs])


def shuffle(items: list, rng: Optional[random.Random] = None) -> None:
    """Fisher-Yates shuffle of items, in place."""
    rng = rng or random
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]


def validate_config(config: GameConfig) -> None:
    """
    Reject board configurations that cannot be played.

    Raises:
        ConfigurationError: On non-positive dimensions, an odd or too small
            card count, or a symbol catalog too small for the pair count
    """
    if config.rows < 1 or config.cols < 1:
        raise ConfigurationError(
            f"Board dimensions must be positive (got {config.rows}x{config.cols})."
        )
    if config.total_cards % 2 != 0:
        raise ConfigurationError("BOARD_ROWS * BOARD_COLS must be even (pairs).")
    if config.total_cards < 2:
        raise ConfigurationError("The board needs at least two cards.")
    if len(config.hidden_glyph) != 1:
        raise ConfigurationError("The hidden card glyph must be a single character.")
    # Raises when the catalog runs out
    symbol_pool(config.total_pairs)


class Card:
    """
    A card on the board. The symbol never changes; the card is shown
    while revealed during a turn, or for good once matched.
    """

    __slots__ = ("_symbol", "revealed", "matched")

    def __init__(self, symbol):
        self._symbol = symbol
        self.revealed = False
        self.matched = False

    @property
    def symbol(self):
        return self._symbol

    @property
    def is_visible(self):
        return self.revealed or self.matched

    def __repr__(self):
        return f"Card(symbol={self._symbol!r}, revealed={self.revealed}, matched={self.matched})"


class Board:
    """
    The grid of cards for one game.
    Positions are 0-based (row, col) pairs; the rendering labels them 1-based.
    """

    def __init__(self, grid: List[List[Card]], hidden_glyph: str = "*"):
        """
        Initialize a board from an already filled grid.
        Use Board.create to deal a new shuffled board.

        Args:
            grid: Rows of cards, all rows the same length
            hidden_glyph: Character shown for cards that are face down
        """
        self.grid = grid
        self.rows = len(grid)
        self.cols = len(grid[0]) if grid else 0
        self.hidden_glyph = hidden_glyph

    @classmethod
    def create(cls, rows: int, cols: int, rng: Optional[random.Random] = None,
               hidden_glyph: str = "*") -> "Board":
        """
        Deal a new board with every symbol placed in exactly two cells.

        Args:
            rows: Number of rows in the grid
            cols: Number of columns in the grid
            rng: Random source for the shuffle (module random if None)
            hidden_glyph: Character shown for face-down cards

        Returns:
            Fully initialized Board, every card hidden and unmatched

        Raises:
            ConfigurationError: If the dimensions cannot be dealt
        """
        validate_config(GameConfig(rows=rows, cols=cols, hidden_glyph=hidden_glyph))

        symbols = []
        for symbol in symbol_pool(rows * cols // 2):
            symbols.extend((symbol, symbol))
        shuffle(symbols, rng)

        # Fill row-major
        grid = [
            [Card(symbols[r * cols + c]) for c in range(cols)]
            for r in range(rows)
        ]
        logger.debug("Dealt a %dx%d board with %d pairs", rows, cols, len(symbols) // 2)
        return cls(grid, hidden_glyph=hidden_glyph)

    @property
    def total_pairs(self) -> int:
        return self.rows * self.cols // 2

    def in_range(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def get(self, row: int, col: int) -> Card:
        """Get the card at a 0-based position."""
        if not self.in_range(row, col):
            raise IndexError(f"Position ({row}, {col}) is off the board")
        return self.grid[row][col]

    def reveal(self, row: int, col: int) -> None:
        self.get(row, col).revealed = True

    def hide(self, row: int, col: int) -> None:
        self.get(row, col).revealed = False

    def mark_matched(self, row: int, col: int) -> None:
        """Mark a card as permanently matched; it is no longer just revealed."""
        card = self.get(row, col)
        card.matched = True
        card.revealed = False

    def positions(self):
        """Iterate over every (row, col, card) in row-major order."""
        for r, row in enumerate(self.grid):
            for c, card in enumerate(row):
                yield r, c, card

    def render(self) -> str:
        """
        Return the bordered text grid shown to the player.
        Visible cards show their symbol, others the hidden glyph.
        """
        border = "   +" + "---+" * self.cols
        lines = ["   " + "".join(f" {c + 1:^3}" for c in range(self.cols)), border]
        for r, row in enumerate(self.grid):
            cells = "".join(
                f" {card.symbol if card.is_visible else self.hidden_glyph} |"
                for card in row
            )
            lines.append(f"{r + 1:>2} |" + cells)
            lines.append(border)
        return "\n".join(lines)

    def __str__(self):
        return self.render()


class GameSession:
    """
    Everything one game needs to track: the board and the counters.
    """

    def __init__(self, board: Board, start_time: Optional[float] = None):
        """
        Initialize a new session.

        Args:
            board: The board this session exclusively owns
            start_time: UNIX timestamp the game started (now if None)
        """
        self.board = board
        self.total_pairs = board.total_pairs
        self.pairs_found = 0
        self.moves = 0
        self.start_time = time.time() if start_time is None else start_time

    @property
    def is_complete(self) -> bool:
        return self.pairs_found == self.total_pairs

    def record_move(self, matched: bool) -> None:
        """Count one completed two-card attempt."""
        self.moves += 1
        if matched:
            self.pairs_found += 1

    def finish(self, end_time: Optional[float] = None) -> GameStats:
        """
        End the session and calculate statistics.

        Args:
            end_time: UNIX timestamp the game ended (now if None)

        Returns:
            GameStats for this session
        """
        end_time = time.time() if end_time is None else end_time
        stats = GameStats.create_from_game_end(
            moves=self.moves,
            pairs_found=self.pairs_found,
            total_pairs=self.total_pairs,
            start_time=self.start_time,
            end_time=end_time
        )
        logger.debug("Session finished: %s", stats.to_dict())
        return stats


class TurnState(Enum):
    AWAITING_FIRST_PICK = "awaiting_first_pick"
    AWAITING_SECOND_PICK = "awaiting_second_pick"
    MATCH = "match"
    MISMATCH = "mismatch"
    TERMINAL = "terminal"


class TurnOutcome(Enum):
    MATCH = "match"
    MISMATCH = "mismatch"
    ABANDONED = "abandoned"


def parse_coordinates(line: str) -> Tuple[int, int]:
    """
    Parse a player's "row col" entry.

    Args:
        line: Raw input line

    Returns:
        The first two whitespace-separated integers, as typed (1-based)

    Raises:
        ParseError: If the line does not start with two integers
    """
    tokens = line.split()
    if len(tokens) < 2:
        raise ParseError()
    row, col = tokens[0], tokens[1]
    if not (INTEGER_TOKEN.fullmatch(row) and INTEGER_TOKEN.fullmatch(col)):
        raise ParseError()
    return int(row), int(col)


class TurnController:
    """
    Drives one attempt at a time: pick two cards, compare, update the session.

    The input provider must offer read_two_integers(prompt) and
    await_acknowledgment(prompt); the output must offer
    print_line(text, style=None).
    """

    def __init__(self, session: GameSession, input_provider, output):
        self.session = session
        self.board = session.board
        self.input = input_provider
        self.output = output
        self.state = TurnState.TERMINAL if session.is_complete else TurnState.AWAITING_FIRST_PICK

    def show_board(self) -> None:
        self.output.print_line()
        self.output.print_line(self.board.render())
        self.output.print_line()

    def validate_pick(self, row: int, col: int,
                      first: Optional[Tuple[int, int]] = None) -> Tuple[int, int]:
        """
        Check a 1-based pick against the board.

        Args:
            row: Row as typed by the player
            col: Column as typed by the player
            first: 0-based position of the first pick, when validating a second pick

        Returns:
            The 0-based (row, col) position

        Raises:
            OutOfRangeError, SameCardError, AlreadyMatchedError, AlreadyRevealedError
        """
        if not (1 <= row <= self.board.rows and 1 <= col <= self.board.cols):
            raise OutOfRangeError()
        position = (row - 1, col - 1)
        if first is not None and position == first:
            raise SameCardError()
        card = self.board.get(*position)
        if card.matched:
            raise AlreadyMatchedError()
        if card.revealed:
            raise AlreadyRevealedError()
        return position

    def pick_card(self, first: Optional[Tuple[int, int]] = None) -> Tuple[int, int]:
        """Ask the player for a card and return its validated 0-based position."""
        prompt = (f"Enter row (1-{self.board.rows}) and column (1-{self.board.cols}) "
                  "separated by space: ")
        row, col = self.input.read_two_integers(prompt)
        return self.validate_pick(row, col, first)

    def _report(self, error: PickError) -> None:
        self.output.print_line(str(error), style="red")
        self.output.print_line()

    def play_turn(self) -> TurnOutcome:
        """
        Run one attempt until it is resolved or abandoned.

        Returns:
            TurnOutcome describing how the attempt ended
        """
        if self.state is TurnState.TERMINAL:
            raise RuntimeError("The game is already over")

        self.state = TurnState.AWAITING_FIRST_PICK
        self.show_board()

        self.output.print_line("Pick first card:")
        try:
            first = self.pick_card()
        except PickError as e:
            logger.debug("First pick rejected: %s", type(e).__name__)
            self._report(e)
            return TurnOutcome.ABANDONED

        self.board.reveal(*first)
        self.show_board()
        self.state = TurnState.AWAITING_SECOND_PICK

        self.output.print_line("Pick second card:")
        try:
            second = self.pick_card(first=first)
        except PickError as e:
            # The whole attempt is dropped, not just the second pick
            logger.debug("Second pick rejected: %s", type(e).__name__)
            self._report(e)
            self.board.hide(*first)
            self.state = TurnState.AWAITING_FIRST_PICK
            return TurnOutcome.ABANDONED

        self.board.reveal(*second)
        self.show_board()

        matched = self.board.get(*first).symbol == self.board.get(*second).symbol
        self.session.record_move(matched)

        if matched:
            self.state = TurnState.MATCH
            self.board.mark_matched(*first)
            self.board.mark_matched(*second)
            self.output.print_line("Nice! It's a match.", style="green")
            self.output.print_line()
            outcome = TurnOutcome.MATCH
        else:
            self.state = TurnState.MISMATCH
            self.output.print_line("Not a match. Cards will be hidden.", style="yellow")
            self.output.print_line()
            self.input.await_acknowledgment("Press Enter to continue...")
            self.board.hide(*first)
            self.board.hide(*second)
            outcome = TurnOutcome.MISMATCH

        logger.debug("Move %d: %s (%d/%d pairs)", self.session.moves, outcome.value,
                     self.session.pairs_found, self.session.total_pairs)
        self.state = TurnState.TERMINAL if self.session.is_complete else TurnState.AWAITING_FIRST_PICK
        return outcome
