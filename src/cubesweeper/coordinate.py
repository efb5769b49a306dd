"""
Integer lattice points for the cubic grid.
"""
from dataclasses import dataclass
from itertools import product
from typing import Iterator, Tuple


@dataclass(frozen=True, order=True)
class Coordinate:
    """
    A point of the 3D integer lattice.

    Immutable; equality and hashing are structural so coordinates can be
    used as mapping keys.
    """

    x: int
    y: int
    z: int

    def __add__(self, other: "Coordinate") -> "Coordinate":
        if not isinstance(other, Coordinate):
            return NotImplemented
        return Coordinate(self.x + other.x, self.y + other.y, self.z + other.z)

    def __iter__(self) -> Iterator[int]:
        return iter((self.x, self.y, self.z))

    def chebyshev_norm(self) -> int:
        """Largest absolute component, i.e. the shell this point lies on."""
        return max(abs(self.x), abs(self.y), abs(self.z))

    def neighbors(self) -> Iterator["Coordinate"]:
        """Yield the 26 points of the surrounding 3x3x3 cube."""
        for offset in NEIGHBOR_OFFSETS:
            yield self + offset

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.x, self.y, self.z)


ORIGIN = Coordinate(0, 0, 0)

NEIGHBOR_OFFSETS: Tuple[Coordinate, ...] = tuple(
    Coordinate(dx, dy, dz)
    for dx, dy, dz in product((-1, 0, 1), repeat=3)
    if (dx, dy, dz) != (0, 0, 0)
)
