"""
Round state machine for cubesweeper.

A RoundState owns the grid of the active round, the cleared-cell
bookkeeping and the round clock. It is the object a presentation layer
talks to.

Phases::

    IDLE -> CONFIGURING -> PLAYING -> WON  -> IDLE
                                   -> LOST -> IDLE
"""
import logging
import random
from enum import Enum, auto
from typing import Iterable, Optional, Union

from .cell import Cell, Mark
from .config import Difficulty, GameSettings, GridConfig
from .coordinate import Coordinate
from .errors import InvalidStateError
from .grid import Grid
from .reveal import Outcome, RevealEngine, RevealResult
from .score_store import JsonFileKeyValueStore, ScoreStore, normalize_score

logger = logging.getLogger(__name__)


class RoundPhase(Enum):
    """Possible phases of a round."""

    IDLE = auto()
    CONFIGURING = auto()
    PLAYING = auto()
    WON = auto()
    LOST = auto()


_STARTABLE = (RoundPhase.IDLE, RoundPhase.WON, RoundPhase.LOST)


class RoundState:
    """
    Finite-state machine for one round at a time.

    Args:
        settings: Runtime settings; defaults apply if omitted.
        score_store: Best-score store used on a win. Built from
            ``settings.score_path`` if omitted.
        rng: Random source for trigger placement and the cascade.
        seed: Seed for a fresh random source when ``rng`` is omitted.
    """

    def __init__(
        self,
        settings: Optional[GameSettings] = None,
        score_store: Optional[ScoreStore] = None,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
    ) -> None:
        self.settings = settings or GameSettings()
        if score_store is None:
            backend = None
            if self.settings.score_path is not None:
                backend = JsonFileKeyValueStore(self.settings.score_path)
            score_store = ScoreStore(backend)
        self.score_store = score_store
        self.rng = rng or random.Random(seed)
        self.engine = RevealEngine(self.settings.cascade_probability, self.rng)

        self._phase = RoundPhase.IDLE
        self._grid: Optional[Grid] = None
        self._difficulty: Optional[Difficulty] = None
        self._cleared_count = 0
        self._goal = 0
        self._elapsed_time = 0.0
        self._last_outcome: Optional[RoundPhase] = None
        self._last_score: Optional[int] = None

    # ========================================================================
    # Lifecycle
    # ========================================================================

    def start(
        self,
        difficulty: Union[Difficulty, int, str],
        triggers: Optional[Iterable[Coordinate]] = None,
    ) -> Grid:
        """
        Start a new round.

        Args:
            difficulty: Difficulty level (1-3, member or name).
            triggers: Fixed trigger layout; random placement if omitted.

        Returns:
            The new grid.

        Raises:
            ConfigurationError: If the difficulty or layout is invalid.
            InvalidStateError: If a round is being configured or played.
        """
        config = GridConfig(Difficulty.parse(difficulty))
        if self._phase not in _STARTABLE:
            raise InvalidStateError(
                f"Cannot start a round while {self._phase.name}"
            )

        if triggers is None:
            grid = Grid.generate(config, self.rng)
        else:
            grid = Grid.from_triggers(config, triggers)

        self._set_phase(RoundPhase.CONFIGURING)
        self._grid = grid
        self._difficulty = config.difficulty
        self._elapsed_time = 0.0
        self._cleared_count = 0
        self._goal = grid.goal
        self._last_outcome = None
        self._last_score = None

        if self.settings.auto_begin:
            self.begin_playing()
        return grid

    def begin_playing(self) -> None:
        """Finish configuration and accept player input."""
        self._require(RoundPhase.CONFIGURING)
        self._set_phase(RoundPhase.PLAYING)

    def reset_game(self) -> None:
        """Return from a finished round to IDLE."""
        if self._phase not in (RoundPhase.WON, RoundPhase.LOST):
            raise InvalidStateError(
                f"Cannot reset while {self._phase.name}"
            )
        self._set_phase(RoundPhase.IDLE)

    # ========================================================================
    # Player Actions
    # ========================================================================

    def reveal_at(self, coord: Coordinate) -> RevealResult:
        """
        Reveal a cell and cascade from it.

        Unknown or already revealed coordinates are no-ops.

        Raises:
            InvalidStateError: If no round is being played.
        """
        self._require(RoundPhase.PLAYING)
        result = self.engine.reveal(self._grid, coord)
        if result.outcome is Outcome.LOSS:
            self.lose()
            return result

        self._cleared_count += result.cleared
        if self._cleared_count == self._goal:
            self.win()
        return result

    def toggle_mark(self, coord: Coordinate) -> Optional[Mark]:
        """
        Cycle the mark of a hidden cell.

        Returns:
            The new mark, or None if the cell is unknown or revealed.

        Raises:
            InvalidStateError: If no round is being played.
        """
        self._require(RoundPhase.PLAYING)
        cell = self._grid.get_cell(coord)
        if cell is None or not cell.cycle_mark():
            return None
        return cell.mark

    def tick(self, delta: float) -> None:
        """Advance the round clock; ignored outside PLAYING."""
        if self._phase is RoundPhase.PLAYING:
            self._elapsed_time += delta

    # ========================================================================
    # Round End
    # ========================================================================

    def lose(self) -> None:
        """End the round as lost."""
        self._require(RoundPhase.PLAYING)
        self._set_phase(RoundPhase.LOST)
        self._last_outcome = RoundPhase.LOST
        self._finish()

    def win(self) -> None:
        """End the round as won and record the score."""
        self._require(RoundPhase.PLAYING)
        self._set_phase(RoundPhase.WON)
        self._last_outcome = RoundPhase.WON
        self._last_score = normalize_score(self._elapsed_time, self._difficulty)
        self.score_store.save(self._last_score, self._difficulty)
        self._finish()

    def _finish(self) -> None:
        if self.settings.auto_reset:
            self.reset_game()

    # ========================================================================
    # Helpers
    # ========================================================================

    def _require(self, phase: RoundPhase) -> None:
        if self._phase is not phase:
            raise InvalidStateError(
                f"Expected {phase.name}, round is {self._phase.name}"
            )

    def _set_phase(self, phase: RoundPhase) -> None:
        logger.info("Round %s -> %s", self._phase.name, phase.name)
        self._phase = phase

    # ========================================================================
    # State Accessors
    # ========================================================================

    @property
    def phase(self) -> RoundPhase:
        return self._phase

    @property
    def is_playing(self) -> bool:
        return self._phase is RoundPhase.PLAYING

    @property
    def is_won(self) -> bool:
        """True once the last round ended in a win."""
        return self._last_outcome is RoundPhase.WON

    @property
    def is_lost(self) -> bool:
        return self._last_outcome is RoundPhase.LOST

    @property
    def last_outcome(self) -> Optional[RoundPhase]:
        return self._last_outcome

    @property
    def last_score(self) -> Optional[int]:
        """Normalized score of the last win in this round, if any."""
        return self._last_score

    @property
    def grid(self) -> Optional[Grid]:
        return self._grid

    @property
    def difficulty(self) -> Optional[Difficulty]:
        return self._difficulty

    @property
    def cleared_count(self) -> int:
        return self._cleared_count

    @property
    def goal(self) -> int:
        return self._goal

    @property
    def remaining(self) -> int:
        return self._goal - self._cleared_count

    @property
    def elapsed_time(self) -> float:
        return self._elapsed_time

    @property
    def elapsed_seconds(self) -> int:
        """Whole seconds for the clock display."""
        return int(self._elapsed_time)

    def get_cell(self, coord: Coordinate) -> Optional[Cell]:
        if self._grid is None:
            return None
        return self._grid.get_cell(coord)
