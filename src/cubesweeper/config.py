"""
Configuration for cubesweeper rounds.

Defines the difficulty levels, the per-difficulty trigger ratios and the
dataclasses that describe a grid and the runtime settings of a round.
"""
import math
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Dict, Optional, Union

from .errors import ConfigurationError


# ============================================================================
# Difficulty
# ============================================================================

class Difficulty(IntEnum):
    """Difficulty level; the value is the half-extent of the cube."""

    EASY = 1
    MEDIUM = 2
    HARD = 3

    @property
    def label(self) -> str:
        """Human readable name, e.g. ``"Easy"``."""
        return self.name.capitalize()

    @classmethod
    def parse(cls, value: Union["Difficulty", int, str]) -> "Difficulty":
        """
        Convert user input into a Difficulty.

        Accepts members, the integers 1-3, numeric strings and names
        (case-insensitive).

        Raises:
            ConfigurationError: If the value names no difficulty.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            text = value.strip()
            if text.isascii() and text.isdigit():
                value = int(text)
            else:
                try:
                    return cls[text.upper()]
                except KeyError:
                    raise ConfigurationError(
                        f"Unknown difficulty: {value!r}"
                    ) from None
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigurationError(f"Unknown difficulty: {value!r}")
        try:
            return cls(value)
        except ValueError:
            raise ConfigurationError(
                f"Difficulty must be 1, 2 or 3 (got {value})"
            ) from None


TRIGGER_RATIOS: Dict[Difficulty, float] = {
    Difficulty.EASY: 0.18,
    Difficulty.MEDIUM: 0.22,
    Difficulty.HARD: 0.25,
}

DEFAULT_CASCADE_PROBABILITY = 0.2


# ============================================================================
# Grid Configuration
# ============================================================================

@dataclass(frozen=True)
class GridConfig:
    """
    Configuration for a cubic grid.

    Attributes:
        difficulty: Difficulty level (also the half-extent of the cube).
        trigger_ratio: Fraction of the cube volume that becomes triggers.
            Defaults to the ratio for the difficulty.
    """

    difficulty: Difficulty = Difficulty.EASY
    trigger_ratio: Optional[float] = None

    def __post_init__(self) -> None:
        """Normalize and validate configuration after initialization."""
        object.__setattr__(self, "difficulty", Difficulty.parse(self.difficulty))
        if self.trigger_ratio is None:
            object.__setattr__(
                self, "trigger_ratio", TRIGGER_RATIOS[self.difficulty]
            )
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if not 0.0 <= self.trigger_ratio < 1.0:
            raise ConfigurationError("Trigger ratio must be in [0, 1)")
        if self.trigger_count >= self.total_cells:
            raise ConfigurationError(
                f"Too many triggers ({self.trigger_count} for "
                f"{self.total_cells} cells)"
            )

    @property
    def half_extent(self) -> int:
        return int(self.difficulty)

    @property
    def side(self) -> int:
        """Edge length of the cube, origin included."""
        return 2 * self.half_extent + 1

    @property
    def volume(self) -> int:
        return self.side ** 3

    @property
    def total_cells(self) -> int:
        """Number of cells; the origin is not part of the grid."""
        return self.volume - 1

    @property
    def trigger_count(self) -> int:
        # Computed on the full cube volume, origin included.
        return math.floor(self.volume * self.trigger_ratio)

    @property
    def goal(self) -> int:
        return self.total_cells - self.trigger_count


# Preset difficulty levels
EASY = GridConfig(Difficulty.EASY)
MEDIUM = GridConfig(Difficulty.MEDIUM)
HARD = GridConfig(Difficulty.HARD)


# ============================================================================
# Round Settings
# ============================================================================

@dataclass
class GameSettings:
    """
    Runtime settings for a round.

    Attributes:
        cascade_probability: Chance that each hidden safe neighbor of a
            revealed cell is revealed too.
        auto_begin: Enter PLAYING as soon as the grid is configured. When
            False the caller must invoke ``RoundState.begin_playing``.
        auto_reset: Return to IDLE right after a win or loss. When False
            the caller must invoke ``RoundState.reset_game``.
        score_path: JSON file for best scores; None keeps them in memory.
    """

    cascade_probability: float = DEFAULT_CASCADE_PROBABILITY
    auto_begin: bool = True
    auto_reset: bool = True
    score_path: Optional[Path] = None

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if not 0.0 <= self.cascade_probability <= 1.0:
            raise ConfigurationError(
                "Cascade probability must be between 0 and 1"
            )
        if self.score_path is not None:
            self.score_path = Path(self.score_path)
