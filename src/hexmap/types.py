"""Core coordinate types for the hex grid."""

from enum import IntFlag
from typing import Iterator

from pydantic import BaseModel, model_validator

from .exceptions import UnknownDirectionError


class HexDirection(IntFlag):
    """The six edges of a hex cell.

    Flags combine into a connection mask: a cell can be left through every
    edge whose bit is set.
    """

    NONE = 0
    NW = 0x01
    N = 0x02
    NE = 0x04
    SE = 0x08
    S = 0x10
    SW = 0x20

    @property
    def opposite(self) -> "HexDirection":
        """Direction pointing back across the same edge."""
        return _OPPOSITES[direction_check(self)]


class HexDirections:
    """Composite direction masks."""

    NORTHERN = HexDirection.NW | HexDirection.N | HexDirection.NE
    SOUTHERN = HexDirection.SW | HexDirection.S | HexDirection.SE
    ALL = NORTHERN | SOUTHERN


# Fixed iteration order for neighbor expansion
DIRECTIONS: tuple[HexDirection, ...] = (
    HexDirection.NW,
    HexDirection.N,
    HexDirection.NE,
    HexDirection.SE,
    HexDirection.S,
    HexDirection.SW,
)

# Axial (q, r) deltas per direction
# Q: top left to bottom right, R: top to bottom
DIRECTION_OFFSETS: dict[HexDirection, tuple[int, int]] = {
    HexDirection.NW: (-1, 0),
    HexDirection.N: (0, -1),
    HexDirection.NE: (1, -1),
    HexDirection.SE: (1, 0),
    HexDirection.S: (0, 1),
    HexDirection.SW: (-1, 1),
}

_OFFSET_DIRECTIONS: dict[tuple[int, int], HexDirection] = {
    offset: direction for direction, offset in DIRECTION_OFFSETS.items()
}

_OPPOSITES: dict[HexDirection, HexDirection] = {
    HexDirection.NW: HexDirection.SE,
    HexDirection.N: HexDirection.S,
    HexDirection.NE: HexDirection.SW,
    HexDirection.SE: HexDirection.NW,
    HexDirection.S: HexDirection.N,
    HexDirection.SW: HexDirection.NE,
}


def direction_check(direction: HexDirection) -> HexDirection:
    """Return direction unchanged if it names exactly one edge.

    Raises:
        UnknownDirectionError: For NONE, composite masks, or stray bits.
    """
    if direction not in DIRECTION_OFFSETS:
        raise UnknownDirectionError(f"Not a single hex direction: {direction!r}")
    return direction


class AxialCoordinate(BaseModel, frozen=True):
    """Immutable two-axis hex cell address.

    The third cube axis is implicit, which makes this the form used for
    storage and as dictionary key.
    """

    q: int
    r: int

    def __add__(self, other: "AxialCoordinate") -> "AxialCoordinate":
        return AxialCoordinate(q=self.q + other.q, r=self.r + other.r)

    def __sub__(self, other: "AxialCoordinate") -> "AxialCoordinate":
        return AxialCoordinate(q=self.q - other.q, r=self.r - other.r)

    def __hash__(self) -> int:
        return hash((self.q, self.r))

    def __str__(self) -> str:
        return f"({self.q}, {self.r})"

    def __repr__(self) -> str:
        return f"AxialCoordinate(q={self.q}, r={self.r})"

    def neighbor(self, direction: HexDirection) -> "AxialCoordinate":
        """Return the adjacent cell across the given edge."""
        dq, dr = DIRECTION_OFFSETS[direction_check(direction)]
        return AxialCoordinate(q=self.q + dq, r=self.r + dr)

    def neighbors(self) -> Iterator[tuple[HexDirection, "AxialCoordinate"]]:
        """Yield (direction, coordinate) for all six neighbors, NW first."""
        for direction in DIRECTIONS:
            yield direction, self.neighbor(direction)

    def to_cube(self) -> "CubeCoordinate":
        return axial_to_cube(self)

    @property
    def nw(self) -> "AxialCoordinate":
        return self.neighbor(HexDirection.NW)

    @property
    def n(self) -> "AxialCoordinate":
        return self.neighbor(HexDirection.N)

    @property
    def ne(self) -> "AxialCoordinate":
        return self.neighbor(HexDirection.NE)

    @property
    def se(self) -> "AxialCoordinate":
        return self.neighbor(HexDirection.SE)

    @property
    def s(self) -> "AxialCoordinate":
        return self.neighbor(HexDirection.S)

    @property
    def sw(self) -> "AxialCoordinate":
        return self.neighbor(HexDirection.SW)


class CubeCoordinate(BaseModel, frozen=True):
    """Three-axis hex address with x + y + z == 0.

    Only used as an intermediate for rounding and direction math. Store
    AxialCoordinate instead.
    """

    x: int
    y: int
    z: int

    @model_validator(mode="after")
    def _check_plane(self) -> "CubeCoordinate":
        if self.x + self.y + self.z != 0:
            raise ValueError("For cube coords, x + y + z must be 0")
        return self

    def __add__(self, other: "CubeCoordinate") -> "CubeCoordinate":
        return CubeCoordinate(
            x=self.x + other.x, y=self.y + other.y, z=self.z + other.z
        )

    def __sub__(self, other: "CubeCoordinate") -> "CubeCoordinate":
        return CubeCoordinate(
            x=self.x - other.x, y=self.y - other.y, z=self.z - other.z
        )

    def __hash__(self) -> int:
        return hash((self.x, self.y, self.z))

    def __str__(self) -> str:
        return f"({self.x}, {self.y}, {self.z})"

    def to_axial(self) -> AxialCoordinate:
        return cube_to_axial(self)


def axial_to_cube(a: AxialCoordinate) -> CubeCoordinate:
    x = a.q
    z = a.r
    y = -(x + z)
    return CubeCoordinate(x=x, y=y, z=z)


def cube_to_axial(c: CubeCoordinate) -> AxialCoordinate:
    return AxialCoordinate(q=c.x, r=c.z)


def direction_offset(direction: HexDirection) -> AxialCoordinate:
    """Axial offset for a single direction.

    Raises:
        UnknownDirectionError: If direction is not one of the six edges.
    """
    dq, dr = DIRECTION_OFFSETS[direction_check(direction)]
    return AxialCoordinate(q=dq, r=dr)


def cube_direction_offset(direction: HexDirection) -> CubeCoordinate:
    """Cube offset for a single direction."""
    return axial_to_cube(direction_offset(direction))


def direction_from_offset(offset: AxialCoordinate) -> HexDirection:
    """Direction matching a unit offset, or NONE for any other offset."""
    return _OFFSET_DIRECTIONS.get((offset.q, offset.r), HexDirection.NONE)


ORIGIN = AxialCoordinate(q=0, r=0)
