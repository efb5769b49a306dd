"""
cubesweeper - rules engine for volumetric Minesweeper.

Provides grid generation, the cascading reveal, the round state machine
and best-score bookkeeping.
"""
from .coordinate import Coordinate, ORIGIN, NEIGHBOR_OFFSETS
from .cell import Cell, Mark
from .config import (
    Difficulty,
    GridConfig,
    GameSettings,
    TRIGGER_RATIOS,
    EASY,
    MEDIUM,
    HARD,
)
from .errors import CubesweeperError, ConfigurationError, InvalidStateError
from .grid import Grid, adjacent_trigger_count, iter_shells
from .reveal import Outcome, RevealEngine, RevealResult
from .round_state import RoundPhase, RoundState
from .score_store import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    ScoreStore,
    normalize_score,
)
from .environment import CubesweeperEnv, make_vec_env

__all__ = [
    "Coordinate",
    "ORIGIN",
    "NEIGHBOR_OFFSETS",
    "Cell",
    "Mark",
    "Difficulty",
    "GridConfig",
    "GameSettings",
    "TRIGGER_RATIOS",
    "EASY",
    "MEDIUM",
    "HARD",
    "CubesweeperError",
    "ConfigurationError",
    "InvalidStateError",
    "Grid",
    "adjacent_trigger_count",
    "iter_shells",
    "Outcome",
    "RevealEngine",
    "RevealResult",
    "RoundPhase",
    "RoundState",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "ScoreStore",
    "normalize_score",
    "CubesweeperEnv",
    "make_vec_env",
]
