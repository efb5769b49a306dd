"""
Gymnasium environment wrapper for cubesweeper.

Provides a standard RL interface over a RoundState.
"""
import random
from typing import Any, Dict, Optional, SupportsFloat, Tuple, Union

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .config import Difficulty, GameSettings, GridConfig
from .grid import OBS_VOID
from .round_state import RoundPhase, RoundState
from .score_store import ScoreStore


# ============================================================================
# Cubesweeper Environment
# ============================================================================

class CubesweeperEnv(gym.Env):
    """
    Gymnasium environment for cubesweeper.

    Observation:
        3D array of side 2d+1 where:
        - -1 = hidden cell
        - -2 = flagged cell
        - -3 = questioned cell
        - -4 = origin (not part of the grid)
        - 0-26 = revealed cell with adjacent trigger count

    Actions:
        Discrete action space of size total_cells. Action i reveals the
        cell at ``grid.coordinate_at(i)``.

    Rewards:
        - +1 for a reveal that clears cells
        - +10 for winning the round
        - -10 for hitting a trigger
        - -0.1 for invalid action (already revealed)
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        difficulty: Union[Difficulty, int, str] = Difficulty.EASY,
        settings: Optional[GameSettings] = None,
        score_store: Optional[ScoreStore] = None,
        render_mode: Optional[str] = None,
        seconds_per_step: float = 1.0,
        seed: Optional[int] = None,
    ) -> None:
        """
        Initialize the environment.

        Args:
            difficulty: Difficulty of every round.
            settings: Round settings (cascade probability, ...).
            score_store: Best-score store shared by all rounds.
            render_mode: How to render the environment.
            seconds_per_step: Round clock advance per step.
            seed: Seed for trigger placement and the cascade.
        """
        super().__init__()

        self.config = GridConfig(Difficulty.parse(difficulty))
        self.settings = settings or GameSettings()
        self.score_store = score_store or ScoreStore()
        self.render_mode = render_mode
        self.seconds_per_step = seconds_per_step
        self._rng = random.Random(seed)

        side = self.config.side
        self.observation_space = spaces.Box(
            low=OBS_VOID,
            high=26,
            shape=(side, side, side),
            dtype=np.int8,
        )
        self.action_space = spaces.Discrete(self.config.total_cells)

        self._steps = 0
        self.round = self._new_round()

    def _new_round(self) -> RoundState:
        round_state = RoundState(
            settings=self.settings,
            score_store=self.score_store,
            rng=self._rng,
        )
        round_state.start(self.config.difficulty)
        if not round_state.is_playing:
            round_state.begin_playing()
        return round_state

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Reset the environment for a new round.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        if seed is not None:
            self._rng = random.Random(seed)
        self.round = self._new_round()
        self._steps = 0
        return self.round.grid.get_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Execute one action in the environment.

        Args:
            action: Arena index of the cell to reveal.

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        self._steps += 1
        self.round.tick(self.seconds_per_step)
        reward = self._calculate_reward(int(action))

        observation = self.round.grid.get_observation()
        terminated = not self.round.is_playing
        truncated = False

        return observation, reward, terminated, truncated, self._get_info()

    def _calculate_reward(self, action: int) -> float:
        """Reveal the cell behind ``action`` and score the result."""
        if not self.round.is_playing:
            return -0.1
        coord = self.round.grid.coordinate_at(action)
        if self.round.get_cell(coord).is_revealed:
            return -0.1

        result = self.round.reveal_at(coord)
        if result.is_loss:
            return -10.0
        if self.round.is_won:
            return 10.0
        return 1.0

    def _game_state(self) -> str:
        if self.round.is_playing:
            return RoundPhase.PLAYING.name
        if self.round.last_outcome is not None:
            return self.round.last_outcome.name
        return self.round.phase.name

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        grid = self.round.grid
        return {
            "steps": self._steps,
            "revealed": grid.revealed_count,
            "total_safe": grid.goal,
            "game_state": self._game_state(),
            "valid_actions": len(grid.hidden_coordinates()),
            "elapsed": self.round.elapsed_seconds,
        }

    def render(self) -> Optional[str]:
        """Render the current grid state."""
        if self.render_mode == "ansi":
            return self._render_ansi()
        if self.render_mode == "human":
            print(self._render_ansi())
        return None

    def _render_ansi(self) -> str:
        """Render the cube as one ASCII block per z layer."""
        obs = self.round.grid.get_observation()
        offset = self.config.half_extent
        symbols = {-1: ".", -2: "F", -3: "?", OBS_VOID: "#", 0: " "}
        blocks = []

        for z in range(self.config.side):
            lines = [f"z={z - offset:+d}"]
            for y in range(self.config.side):
                row_str = ""
                for x in range(self.config.side):
                    val = int(obs[x, y, z])
                    row_str += symbols.get(val, str(val)).rjust(2) + " "
                lines.append(row_str.rstrip())
            blocks.append("\n".join(lines))

        return "\n\n".join(blocks)

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of valid actions.

        Returns:
            Boolean array where True = hidden cell.
        """
        grid = self.round.grid
        mask = np.zeros(self.action_space.n, dtype=bool)
        for coord in grid.hidden_coordinates():
            mask[grid.index_of(coord)] = True
        return mask


# ============================================================================
# Vectorized Environment Factory
# ============================================================================

def make_vec_env(
    n_envs: int = 4,
    difficulty: Union[Difficulty, int, str] = Difficulty.EASY,
) -> gym.vector.VectorEnv:
    """
    Create vectorized environment for parallel training.

    Args:
        n_envs: Number of parallel environments.
        difficulty: Difficulty of every round.

    Returns:
        Vectorized environment.
    """
    def make_env() -> CubesweeperEnv:
        return CubesweeperEnv(difficulty=difficulty)

    return gym.vector.AsyncVectorEnv([make_env for _ in range(n_envs)])
