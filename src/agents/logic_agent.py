"""
Logic-based agent for cubesweeper.

Propagates the single-cell constraints of revealed counts to find cells
that are certainly safe or certainly triggers, and falls back to the
lowest estimated trigger probability when no certain move exists.
"""
from typing import Dict, List, Optional, Set, Tuple

import numpy as np

from cubesweeper.config import GridConfig
from cubesweeper.coordinate import Coordinate

from .base_agent import BaseAgent


# ============================================================================
# Logic Agent
# ============================================================================

class LogicAgent(BaseAgent):
    """
    Agent that deduces safe cells from revealed counts.

    Strategy:
        1. For every revealed count, compare it with the known triggers and
           the unknown hidden cells around it
        2. A satisfied count makes its unknown neighbors safe; a count equal
           to its unknown neighbors makes them all triggers
        3. Repeat until nothing changes, then reveal a safe cell
        4. Otherwise guess the cell with the lowest estimated probability
    """

    def __init__(self, config: GridConfig, seed: Optional[int] = None) -> None:
        super().__init__(config)
        self.rng = np.random.default_rng(seed)

    def select_action(
        self,
        observation: np.ndarray,
        valid_actions: Optional[np.ndarray] = None,
    ) -> int:
        """
        Select the best action by constraint propagation.

        Args:
            observation: 3D array of cell states.
            valid_actions: Optional mask of valid actions.

        Returns:
            Best action index based on analysis.
        """
        if valid_actions is None:
            valid_actions = self.get_valid_actions_from_obs(observation)

        valid_indices = np.flatnonzero(valid_actions)
        if len(valid_indices) == 0:
            return 0

        safe_cells, trigger_cells = self.deduce(observation)
        valid = set(int(i) for i in valid_indices)

        for coord in sorted(safe_cells):
            action = self.coordinate_to_action(coord)
            if action in valid:
                return action

        return self._select_by_probability(observation, valid, trigger_cells)

    # ========================================================================
    # Deduction
    # ========================================================================

    def deduce(
        self, observation: np.ndarray
    ) -> Tuple[Set[Coordinate], Set[Coordinate]]:
        """
        Find cells that are certainly safe and certainly triggers.

        Returns:
            Tuple of (safe coordinates, trigger coordinates).
        """
        safe: Set[Coordinate] = set()
        triggers: Set[Coordinate] = set()
        constraints = self._constraints(observation)

        changed = True
        while changed:
            changed = False
            for count, hidden in constraints:
                known = hidden & triggers
                unknown = hidden - triggers - safe
                if not unknown:
                    continue
                remaining = count - len(known)
                if remaining == 0:
                    safe |= unknown
                    changed = True
                elif remaining == len(unknown):
                    triggers |= unknown
                    changed = True

        return safe, triggers

    def _constraints(
        self, observation: np.ndarray
    ) -> List[Tuple[int, Set[Coordinate]]]:
        """(count, hidden neighbors) for every revealed cell with hidden neighbors."""
        constraints = []
        for coord in self.coordinates:
            count = self.observe(observation, coord)
            if count < 0:
                continue
            hidden = {
                n for n in self._grid_neighbors(coord)
                if self.observe(observation, n) < 0
            }
            if hidden:
                constraints.append((count, hidden))
        return constraints

    def _grid_neighbors(self, coord: Coordinate) -> List[Coordinate]:
        return [n for n in coord.neighbors() if self.coordinate_to_action(n) is not None]

    # ========================================================================
    # Guessing
    # ========================================================================

    def _select_by_probability(
        self,
        observation: np.ndarray,
        valid: Set[int],
        trigger_cells: Set[Coordinate],
    ) -> int:
        """Pick the valid cell with the lowest estimated trigger probability."""
        estimates: Dict[int, float] = {}
        default = self.config.trigger_count / max(self.num_actions, 1)

        for action in valid:
            coord = self.action_to_coordinate(action)
            if coord in trigger_cells:
                continue
            estimates[action] = default

        for count, hidden in self._constraints(observation):
            unknown = hidden - trigger_cells
            if not unknown:
                continue
            remaining = count - len(hidden & trigger_cells)
            probability = remaining / len(unknown)
            for coord in unknown:
                action = self.coordinate_to_action(coord)
                if action in estimates:
                    estimates[action] = max(estimates[action], probability)

        if not estimates:
            # Only known triggers left
            return int(self.rng.choice(sorted(valid)))

        lowest = min(estimates.values())
        candidates = sorted(a for a, p in estimates.items() if p == lowest)
        return int(self.rng.choice(candidates))
