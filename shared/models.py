"""
Shared data models for the game modules.
Keeps configuration and end-of-game statistics as plain data.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class GameConfig:
    """Board configuration data model."""
    rows: int = 4
    cols: int = 4
    hidden_glyph: str = "*"

    @property
    def total_cards(self):
        return self.rows * self.cols

    @property
    def total_pairs(self):
        return self.total_cards // 2


@dataclass
class GameStats:
    """Game statistics data model."""
    moves: int
    pairs_found: int
    total_pairs: int
    start_time: float
    end_time: float
    duration_seconds: int

    @property
    def completed(self):
        return self.pairs_found == self.total_pairs

    def format_duration(self):
        """Return the duration as minutes:seconds, seconds zero-padded."""
        minutes, seconds = divmod(self.duration_seconds, 60)
        return f"{minutes}:{seconds:02d}"

    def to_dict(self):
        """Convert the GameStats object to a dictionary."""
        return {
            'moves': self.moves,
            'pairs_found': self.pairs_found,
            'total_pairs': self.total_pairs,
            'start_time': self.start_time,
            'end_time': self.end_time,
            'duration_seconds': self.duration_seconds,
            'completed': self.completed
        }

    @classmethod
    def create_from_game_end(cls, moves, pairs_found, total_pairs, start_time, end_time):
        """Create a GameStats object from game end data."""
        # Whole seconds, truncated like difftime cast to int.
        duration = max(0, int(end_time - start_time))

        return cls(
            moves=moves,
            pairs_found=pairs_found,
            total_pairs=total_pairs,
            start_time=start_time,
            end_time=end_time,
            duration_seconds=duration
        )
