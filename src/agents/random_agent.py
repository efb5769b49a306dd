"""
Random agent for cubesweeper.

Serves as a baseline by selecting random valid actions.
"""
from typing import Optional

import numpy as np

from cubesweeper.config import GridConfig

from .base_agent import BaseAgent


# ============================================================================
# Random Agent
# ============================================================================

class RandomAgent(BaseAgent):
    """
    Agent that selects hidden cells uniformly at random.

    This provides a baseline for comparing other agents.
    """

    def __init__(self, config: GridConfig, seed: Optional[int] = None) -> None:
        """
        Initialize the random agent.

        Args:
            config: Grid configuration the agent plays on.
            seed: Random seed for reproducibility.
        """
        super().__init__(config)
        self.rng = np.random.default_rng(seed)

    def select_action(
        self,
        observation: np.ndarray,
        valid_actions: Optional[np.ndarray] = None,
    ) -> int:
        """
        Select a random valid action.

        Args:
            observation: 3D array of cell states.
            valid_actions: Optional mask of valid actions.

        Returns:
            Random action index from valid actions.
        """
        if valid_actions is None:
            valid_actions = self.get_valid_actions_from_obs(observation)

        valid_indices = np.flatnonzero(valid_actions)

        if len(valid_indices) == 0:
            # No valid actions, return any action (will be invalid)
            return 0

        return int(self.rng.choice(valid_indices))
