"""Conversion between hex cells and continuous unit space."""

import math
from typing import Iterable

import numpy as np
from numpy.typing import NDArray

from .types import AxialCoordinate, CubeCoordinate, HexDirection

SIDE_LENGTH = 1.0
CORNER_DISTANCE = SIDE_LENGTH

# Orthogonal distance from a cell center to any side: sqrt(1 - 1/4)
SIDE_DISTANCE = math.sqrt(3.0) / 2.0

UNIT_WIDTH = 2.0 * CORNER_DISTANCE
UNIT_HEIGHT = 2.0 * SIDE_DISTANCE

# (q, r) -> (x, y); the inverse is derived from this, never written by hand
HEX_TO_UNIT_MATRIX: NDArray[np.float64] = np.array(
    [
        [1.5 * SIDE_LENGTH, 0.0],
        [SIDE_DISTANCE, UNIT_HEIGHT],
    ]
)
UNIT_TO_HEX_MATRIX: NDArray[np.float64] = np.linalg.inv(HEX_TO_UNIT_MATRIX)

# Walk order for ring traversal, starting from the SW corner
_RING_WALK: tuple[HexDirection, ...] = (
    HexDirection.SE,
    HexDirection.NE,
    HexDirection.N,
    HexDirection.NW,
    HexDirection.SW,
    HexDirection.S,
)


def hex_to_unit(coordinate: AxialCoordinate) -> tuple[float, float]:
    """Center of a cell in unit space."""
    x, y = HEX_TO_UNIT_MATRIX @ np.array([coordinate.q, coordinate.r], dtype=np.float64)
    return float(x), float(y)


def hexes_to_units(coordinates: Iterable[AxialCoordinate]) -> NDArray[np.float64]:
    """Bulk variant of hex_to_unit.

    Returns:
        Array of shape (n, 2) holding (x, y) rows in input order.
    """
    qr = np.array([(c.q, c.r) for c in coordinates], dtype=np.float64).reshape(-1, 2)
    return qr @ HEX_TO_UNIT_MATRIX.T


def unit_to_hex(x: float, y: float) -> AxialCoordinate:
    """Cell containing a unit-space position."""
    q, r = UNIT_TO_HEX_MATRIX @ np.array([x, y], dtype=np.float64)
    return hex_round(float(q), float(-q - r), float(r))


def _round_half_away(value: float) -> float:
    return math.copysign(math.floor(abs(value) + 0.5), value)


def hex_round(x: float, y: float, z: float) -> AxialCoordinate:
    """Round fractional cube coordinates to the nearest cell.

    Each component is rounded half away from zero. Rounding three values
    independently can break x + y + z == 0 by one on a single axis, so the
    axis with the largest rounding delta is recomputed from the other two.
    Ties between deltas resolve in the order x, y, z.
    """
    rx, ry, rz = _round_half_away(x), _round_half_away(y), _round_half_away(z)
    dx, dy, dz = abs(rx - x), abs(ry - y), abs(rz - z)

    if dx >= dy and dx >= dz:
        rx = -(ry + rz)
    elif dy >= dz:
        ry = -(rx + rz)
    else:
        rz = -(rx + ry)

    return CubeCoordinate(x=int(rx), y=int(ry), z=int(rz)).to_axial()


def hex_distance(a: AxialCoordinate, b: AxialCoordinate) -> int:
    """Number of steps between two cells."""
    ax, ay, az = a.q, -a.q - a.r, a.r
    bx, by, bz = b.q, -b.q - b.r, b.r
    return max(abs(ax - bx), abs(ay - by), abs(az - bz))


def ring(center: AxialCoordinate, radius: int) -> list[AxialCoordinate]:
    """Cells at exactly radius steps from center, walking clockwise from SW."""
    if radius < 0:
        raise ValueError("radius must be non-negative")
    if radius == 0:
        return [center]

    cell = AxialCoordinate(q=center.q - radius, r=center.r + radius)
    cells: list[AxialCoordinate] = []
    for direction in _RING_WALK:
        for _ in range(radius):
            cells.append(cell)
            cell = cell.neighbor(direction)
    return cells


def hexagon(center: AxialCoordinate, radius: int) -> list[AxialCoordinate]:
    """Cells within radius steps of center, center first, ring by ring."""
    if radius < 0:
        raise ValueError("radius must be non-negative")
    cells: list[AxialCoordinate] = []
    for k in range(radius + 1):
        cells.extend(ring(center, k))
    return cells


def line(start: tuple[float, float], end: tuple[float, float]) -> list[AxialCoordinate]:
    """Cells touched by a unit-space segment, in visiting order.

    The segment is sampled every SIDE_DISTANCE, which is fine enough to hit
    every crossed cell; the end cell is always included.
    """
    origin = np.array(start, dtype=np.float64)
    target = np.array(end, dtype=np.float64)
    delta = target - origin
    distance = float(np.linalg.norm(delta))

    cells: dict[AxialCoordinate, None] = {}
    if distance > 0.0:
        direction = delta / distance
        for sample in np.arange(0.0, distance, SIDE_DISTANCE):
            x, y = origin + direction * sample
            cells[unit_to_hex(float(x), float(y))] = None
    else:
        cells[unit_to_hex(*start)] = None

    cells[unit_to_hex(*end)] = None
    return list(cells)


def extents(coordinates: Iterable[AxialCoordinate]) -> tuple[float, float, float, float]:
    """Bounding rectangle of cell centers as (min_x, min_y, width, height).

    An empty input yields all zeros.
    """
    points = hexes_to_units(coordinates)
    if points.size == 0:
        return 0.0, 0.0, 0.0, 0.0
    low = points.min(axis=0)
    high = points.max(axis=0)
    size = high - low
    return float(low[0]), float(low[1]), float(size[0]), float(size[1])
