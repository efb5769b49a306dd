"""
Pytest configuration and shared fixtures.
"""
import random
import sys
from pathlib import Path

import pytest

# Add src and the project root (main.py) to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from cubesweeper import (
    Cell,
    Coordinate,
    Difficulty,
    GameSettings,
    Grid,
    GridConfig,
    InMemoryKeyValueStore,
    RoundState,
    ScoreStore,
)


# ============================================================================
# Grid Fixtures
# ============================================================================

@pytest.fixture
def rng() -> random.Random:
    """Seeded random source."""
    return random.Random(1234)


@pytest.fixture
def easy_config() -> GridConfig:
    return GridConfig(Difficulty.EASY)


@pytest.fixture
def easy_grid(easy_config: GridConfig, rng: random.Random) -> Grid:
    """Randomly generated easy grid."""
    return Grid.generate(easy_config, rng)


@pytest.fixture
def single_trigger_grid(easy_config: GridConfig) -> Grid:
    """Easy grid with one trigger at (1, 0, 0)."""
    return Grid.from_triggers(easy_config, [Coordinate(1, 0, 0)])


@pytest.fixture
def safe_grid(easy_config: GridConfig) -> Grid:
    """Easy grid without triggers."""
    return Grid.from_triggers(easy_config, [])


# ============================================================================
# Round Fixtures
# ============================================================================

@pytest.fixture
def backend() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def score_store(backend: InMemoryKeyValueStore) -> ScoreStore:
    return ScoreStore(backend)


@pytest.fixture
def no_cascade() -> GameSettings:
    """Settings with the random cascade switched off."""
    return GameSettings(cascade_probability=0.0)


@pytest.fixture
def round_state(no_cascade: GameSettings, score_store: ScoreStore) -> RoundState:
    """Idle round without cascade."""
    return RoundState(settings=no_cascade, score_store=score_store, seed=7)


# ============================================================================
# Cell Fixtures
# ============================================================================

@pytest.fixture
def hidden_cell() -> Cell:
    """Create a hidden cell."""
    return Cell()


@pytest.fixture
def trigger_cell() -> Cell:
    """Create a trigger cell."""
    return Cell(is_trigger=True)
