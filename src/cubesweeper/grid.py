"""
Grid module for cubesweeper.

Builds the cubic lattice for a round, places triggers and answers
adjacency queries.
"""
import logging
import random
from typing import Dict, Iterable, Iterator, List, Optional

import numpy as np

from .cell import Cell
from .config import GridConfig
from .coordinate import ORIGIN, Coordinate
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

# Observation code for the unused origin slot.
OBS_VOID = -4


# ============================================================================
# Lattice Enumeration
# ============================================================================

def iter_shells(half_extent: int) -> Iterator[Coordinate]:
    """
    Enumerate the cube of the given half-extent by expanding shells.

    Shell ``i`` walks every point with Chebyshev norm <= ``i``; points
    already emitted by an inner shell and the origin are skipped, so each
    lattice point is yielded exactly once.
    """
    seen = set()
    for i in range(1, half_extent + 1):
        for x in range(-i, i + 1):
            for y in range(-i, i + 1):
                for z in range(-i, i + 1):
                    coord = Coordinate(x, y, z)
                    if coord != ORIGIN and coord not in seen:
                        seen.add(coord)
                        yield coord


# ============================================================================
# Grid Class
# ============================================================================

class Grid:
    """
    Cubic grid of cells for a single round.

    Cells live in a flat arena; ``index_of`` maps a coordinate to its arena
    slot. The arena order is also the action order used by agents.
    """

    def __init__(self, config: GridConfig, coordinates: List[Coordinate]) -> None:
        self.config = config
        self._coordinates = coordinates
        self._index: Dict[Coordinate, int] = {
            coord: i for i, coord in enumerate(coordinates)
        }
        self._cells = [Cell() for _ in coordinates]
        self._trigger_count = 0

    # ========================================================================
    # Construction
    # ========================================================================

    @classmethod
    def generate(
        cls, config: GridConfig, rng: Optional[random.Random] = None
    ) -> "Grid":
        """
        Create a grid with randomly placed triggers.

        Args:
            config: Grid configuration.
            rng: Random source; the module-level generator if omitted.

        Returns:
            A freshly generated grid.
        """
        rng = rng or random.Random()
        grid = cls(config, list(iter_shells(config.half_extent)))
        triggers = rng.sample(grid._coordinates, config.trigger_count)
        grid._place_triggers(triggers)
        logger.debug(
            "Generated %s grid: %d cells, %d triggers",
            config.difficulty.label, len(grid), grid.trigger_count,
        )
        return grid

    @classmethod
    def from_triggers(
        cls, config: GridConfig, triggers: Iterable[Coordinate]
    ) -> "Grid":
        """
        Create a grid with a fixed trigger layout.

        Raises:
            ConfigurationError: If a trigger lies outside the grid, appears
                twice, or the layout leaves no safe cell.
        """
        grid = cls(config, list(iter_shells(config.half_extent)))
        triggers = list(triggers)
        for coord in triggers:
            if coord not in grid:
                raise ConfigurationError(f"Trigger {coord} is not in the grid")
        if len(set(triggers)) != len(triggers):
            raise ConfigurationError("Trigger layout contains duplicates")
        if len(triggers) >= len(grid):
            raise ConfigurationError("Trigger layout leaves no safe cell")
        grid._place_triggers(triggers)
        return grid

    def _place_triggers(self, triggers: Iterable[Coordinate]) -> None:
        for coord in triggers:
            self._cells[self._index[coord]].is_trigger = True
            self._trigger_count += 1

    # ========================================================================
    # Queries
    # ========================================================================

    def __len__(self) -> int:
        return len(self._cells)

    def __contains__(self, coord: object) -> bool:
        return coord in self._index

    def __iter__(self) -> Iterator[Coordinate]:
        return iter(self._coordinates)

    @property
    def coordinates(self) -> List[Coordinate]:
        return list(self._coordinates)

    @property
    def trigger_count(self) -> int:
        return self._trigger_count

    @property
    def goal(self) -> int:
        """Number of safe cells that must be revealed to win."""
        return len(self._cells) - self._trigger_count

    @property
    def revealed_count(self) -> int:
        return sum(1 for cell in self._cells if cell.is_revealed)

    def index_of(self, coord: Coordinate) -> Optional[int]:
        """Arena slot of a coordinate, or None if it is not in the grid."""
        return self._index.get(coord)

    def coordinate_at(self, index: int) -> Coordinate:
        return self._coordinates[index]

    def get_cell(self, coord: Coordinate) -> Optional[Cell]:
        """Get cell at coordinate, or None if absent."""
        index = self._index.get(coord)
        if index is None:
            return None
        return self._cells[index]

    def neighbors(self, coord: Coordinate) -> List[Coordinate]:
        """Neighbors of ``coord`` that are part of the grid."""
        return [n for n in coord.neighbors() if n in self._index]

    def adjacent_trigger_count(self, coord: Coordinate) -> int:
        return adjacent_trigger_count(self, coord)

    def trigger_coordinates(self) -> List[Coordinate]:
        return [
            coord
            for coord, cell in zip(self._coordinates, self._cells)
            if cell.is_trigger
        ]

    def hidden_coordinates(self) -> List[Coordinate]:
        return [
            coord
            for coord, cell in zip(self._coordinates, self._cells)
            if not cell.is_revealed
        ]

    def get_observation(self) -> np.ndarray:
        """
        Get grid state as a numpy cube for agents.

        Returns:
            3D int8 array of side ``2d+1`` indexed ``[x+d, y+d, z+d]`` where:
                -1 = hidden
                -2 = flagged
                -3 = questioned
                -4 = origin (not part of the grid)
                0-26 = revealed with adjacent trigger count
        """
        side = self.config.side
        offset = self.config.half_extent
        obs = np.full((side, side, side), OBS_VOID, dtype=np.int8)
        for coord, cell in zip(self._coordinates, self._cells):
            obs[coord.x + offset, coord.y + offset, coord.z + offset] = (
                cell.to_observation()
            )
        return obs


# ============================================================================
# Adjacency
# ============================================================================

def adjacent_trigger_count(grid: Grid, coord: Coordinate) -> int:
    """
    Count triggers among the neighbors of ``coord``.

    Neighbors outside the grid are absent and contribute nothing.
    """
    count = 0
    for neighbor in coord.neighbors():
        cell = grid.get_cell(neighbor)
        if cell is not None and cell.is_trigger:
            count += 1
    return count
