"""
Cell module for cubesweeper.

Represents a single lattice position with its trigger flag, reveal flag,
player mark and cached adjacency count.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


# ============================================================================
# Constants
# ============================================================================

class Mark(Enum):
    """Player annotation on a hidden cell."""

    NORMAL = "normal"
    FLAGGED = "flagged"
    QUESTIONED = "questioned"

    def next(self) -> "Mark":
        """Return the mark that follows this one in the toggle cycle."""
        return _MARK_CYCLE[self]


_MARK_CYCLE = {
    Mark.NORMAL: Mark.FLAGGED,
    Mark.FLAGGED: Mark.QUESTIONED,
    Mark.QUESTIONED: Mark.NORMAL,
}

# Observation codes for cells that do not show a count.
OBS_HIDDEN = -1
OBS_FLAGGED = -2
OBS_QUESTIONED = -3


# ============================================================================
# Cell Data Class
# ============================================================================

@dataclass
class Cell:
    """
    Represents a single cell of the cubic grid.

    Attributes:
        is_trigger: Whether this cell is a trigger. Fixed at generation.
        is_revealed: Whether the cell has been revealed. Never reverts.
        mark: Player annotation, ignored once the cell is revealed.
        adjacent_trigger_count: Triggers among the 26 neighbors (0-26).
            None until the cell is first revealed.
    """

    is_trigger: bool = False
    is_revealed: bool = False
    mark: Mark = Mark.NORMAL
    adjacent_trigger_count: Optional[int] = None

    def reveal(self) -> bool:
        """
        Reveal this cell.

        Returns:
            True if the cell changed state, False if already revealed.
        """
        if self.is_revealed:
            return False
        self.is_revealed = True
        return True

    def cycle_mark(self) -> bool:
        """
        Advance the mark NORMAL -> FLAGGED -> QUESTIONED -> NORMAL.

        Returns:
            True if the mark changed, False if the cell is revealed.
        """
        if self.is_revealed:
            return False
        self.mark = self.mark.next()
        return True

    @property
    def is_hidden(self) -> bool:
        return not self.is_revealed

    @property
    def is_flagged(self) -> bool:
        return self.mark is Mark.FLAGGED

    @property
    def is_questioned(self) -> bool:
        return self.mark is Mark.QUESTIONED

    def to_observation(self) -> int:
        """
        Convert cell to observation value for agents.

        Returns:
            -1: Hidden cell
            -2: Flagged cell
            -3: Questioned cell
            0-26: Revealed cell with adjacent trigger count
        """
        if not self.is_revealed:
            if self.mark is Mark.FLAGGED:
                return OBS_FLAGGED
            if self.mark is Mark.QUESTIONED:
                return OBS_QUESTIONED
            return OBS_HIDDEN
        return self.adjacent_trigger_count or 0
