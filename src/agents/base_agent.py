"""
Base agent interface for cubesweeper AI.

Defines the abstract interface that all agents must implement.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

import numpy as np

from cubesweeper.config import GridConfig
from cubesweeper.coordinate import Coordinate
from cubesweeper.grid import iter_shells


# ============================================================================
# Base Agent Interface
# ============================================================================

class BaseAgent(ABC):
    """
    Abstract base class for cubesweeper agents.

    All agents must implement the select_action method to choose
    which cell to reveal based on the current observation.
    """

    def __init__(self, config: GridConfig) -> None:
        """
        Initialize the agent.

        Args:
            config: Grid configuration the agent plays on.
        """
        self.config = config
        # Same order as the grid arena, so list index == action index.
        self.coordinates: List[Coordinate] = list(iter_shells(config.half_extent))
        self._actions = {coord: i for i, coord in enumerate(self.coordinates)}
        self.num_actions = len(self.coordinates)

    @abstractmethod
    def select_action(
        self,
        observation: np.ndarray,
        valid_actions: Optional[np.ndarray] = None,
    ) -> int:
        """
        Select an action based on the current observation.

        Args:
            observation: 3D array of cell states.
            valid_actions: Optional mask of valid actions.

        Returns:
            Arena index of the cell to reveal.
        """
        pass

    def action_to_coordinate(self, action: int) -> Coordinate:
        return self.coordinates[action]

    def coordinate_to_action(self, coord: Coordinate) -> Optional[int]:
        return self._actions.get(coord)

    def observe(self, observation: np.ndarray, coord: Coordinate) -> int:
        """Observation value at a lattice coordinate."""
        offset = self.config.half_extent
        return int(observation[coord.x + offset, coord.y + offset, coord.z + offset])

    def get_valid_actions_from_obs(self, observation: np.ndarray) -> np.ndarray:
        """
        Get valid actions mask from observation.

        Returns:
            Boolean mask where True = hidden (unmarked or marked) cell.
        """
        return np.array(
            [self.observe(observation, coord) < 0 for coord in self.coordinates],
            dtype=bool,
        )

    def reset(self) -> None:
        """Reset agent state for new round."""
        pass
