import logging
import random
import sys
import time

from rich.console import Console
from rich.logging import RichHandler

from classes import (Board, ConfigurationError, GameSession, InputClosedError,
                     TurnController, validate_config)
from console import ConsoleInput, ConsoleOutput
from shared.models import GameConfig, GameStats

logger = logging.getLogger(__name__)

# Board settings
BOARD_ROWS = 4
BOARD_COLS = 4
HIDDEN_GLYPH = "*"

LOG_LEVEL = logging.WARNING

# Exit statuses
EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_INPUT_CLOSED = 2
EXIT_INTERRUPTED = 130


def configure_logging(level=LOG_LEVEL):
    """Send log records to stderr so they never mix with the game transcript."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def run_game(config, input_provider, output, rng=None, clock=time.time) -> GameStats:
    """
    Play one full game and print the final summary.

    Args:
        config: GameConfig with the board dimensions
        input_provider: Source of the player's picks and acknowledgments
        output: Destination for the board and messages
        rng: Random source for dealing (seeded from the clock if None)
        clock: Callable returning the current UNIX timestamp

    Returns:
        GameStats for the finished game

    Raises:
        ConfigurationError: If the board cannot be dealt
        InputClosedError: If the player's input ends mid-game
    """
    # Reject the configuration before seeding, dealing or printing anything
    validate_config(config)
    if rng is None:
        rng = random.Random(clock())

    board = Board.create(config.rows, config.cols, rng=rng, hidden_glyph=config.hidden_glyph)

    output.print_line("Welcome to Memory Match!")
    output.print_line(f"Match all {board.total_pairs} pairs. "
                      "Enter coordinates as row and column (1-based).")
    output.print_line()

    session = GameSession(board, start_time=clock())
    controller = TurnController(session, input_provider, output)

    while not session.is_complete:
        controller.play_turn()

    stats = session.finish(end_time=clock())

    output.print_line("CONGRATULATIONS! You matched all pairs.", style="bold green")
    output.print_line(f"Moves: {stats.moves}")
    output.print_line(f"Time: {stats.format_duration()} (minutes:seconds)")
    return stats


def main(config=None, input_provider=None, output=None) -> int:
    """Main function to run the game. Returns the process exit status."""
    configure_logging()
    config = config or GameConfig(rows=BOARD_ROWS, cols=BOARD_COLS, hidden_glyph=HIDDEN_GLYPH)
    console = Console()
    output = output or ConsoleOutput(console)
    input_provider = input_provider or ConsoleInput(console)

    try:
        run_game(config, input_provider, output)
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        return EXIT_CONFIG_ERROR
    except InputClosedError as e:
        output.print_line()
        output.print_line(f"{e} Game aborted.", style="red")
        return EXIT_INPUT_CLOSED
    except KeyboardInterrupt:
        output.print_line()
        output.print_line("Game interrupted.", style="red")
        return EXIT_INTERRUPTED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
