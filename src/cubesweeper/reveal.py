"""
Cascading reveal over a grid.

Revealing a safe cell may spill over to its hidden safe neighbors: each of
them is revealed too with a fixed probability, independently of how many
triggers surround the cell. The spill-over repeats for every cell it
reaches, so a single reveal can clear a large region.
"""
import logging
import random
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional

from .config import DEFAULT_CASCADE_PROBABILITY
from .coordinate import Coordinate
from .errors import ConfigurationError
from .grid import Grid

logger = logging.getLogger(__name__)


class Outcome(Enum):
    """Result of a reveal request."""

    CONTINUE = auto()
    LOSS = auto()


@dataclass
class RevealResult:
    """
    Cells revealed by one request and the resulting outcome.

    Attributes:
        outcome: LOSS if the origin was a trigger, else CONTINUE.
        revealed: Newly revealed coordinates, in reveal order.
    """

    outcome: Outcome = Outcome.CONTINUE
    revealed: List[Coordinate] = field(default_factory=list)

    @property
    def cleared(self) -> int:
        return len(self.revealed)

    @property
    def is_loss(self) -> bool:
        return self.outcome is Outcome.LOSS


class RevealEngine:
    """
    Iterative implementation of the randomized cascade.

    Args:
        cascade_probability: Chance of spilling into each hidden safe
            neighbor. 0 disables the cascade.
        rng: Random source for the cascade draws.
    """

    def __init__(
        self,
        cascade_probability: float = DEFAULT_CASCADE_PROBABILITY,
        rng: Optional[random.Random] = None,
    ) -> None:
        if not 0.0 <= cascade_probability <= 1.0:
            raise ConfigurationError(
                "Cascade probability must be between 0 and 1"
            )
        self.cascade_probability = cascade_probability
        self.rng = rng or random.Random()

    def reveal(self, grid: Grid, origin: Coordinate) -> RevealResult:
        """
        Reveal ``origin`` and cascade from it.

        Unknown and already revealed coordinates are no-ops. A trigger
        yields a loss without revealing anything.
        """
        cell = grid.get_cell(origin)
        if cell is None or cell.is_revealed:
            return RevealResult()
        if cell.is_trigger:
            logger.debug("Trigger hit at %s", origin)
            return RevealResult(outcome=Outcome.LOSS)

        result = RevealResult()
        stack = [origin]
        while stack:
            coord = stack.pop()
            current = grid.get_cell(coord)
            if not current.reveal():
                continue
            result.revealed.append(coord)
            current.adjacent_trigger_count = self._count_and_spread(
                grid, coord, stack
            )

        logger.debug("Reveal at %s cleared %d cells", origin, result.cleared)
        return result

    def _count_and_spread(
        self, grid: Grid, coord: Coordinate, stack: List[Coordinate]
    ) -> int:
        """Count adjacent triggers and queue neighbors the cascade reaches."""
        count = 0
        for neighbor in grid.neighbors(coord):
            cell = grid.get_cell(neighbor)
            if cell.is_trigger:
                count += 1
            elif not cell.is_revealed and self._spreads():
                stack.append(neighbor)
        return count

    def _spreads(self) -> bool:
        if self.cascade_probability <= 0.0:
            return False
        return self.rng.random() < self.cascade_probability
