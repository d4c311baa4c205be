"""Terrain generators that fill a tile layer."""

import structlog

from .conversion import hexagon
from .entities import Tile, TileConfiguration, create_tile
from .identity import IdentityAllocator
from .layer import Layer
from .types import AxialCoordinate

logger = structlog.get_logger()


class RectangleGenerator:
    """Fills the axial rectangle q in [start.q, end.q), r in [start.r, end.r)."""

    def __init__(
        self,
        start: AxialCoordinate,
        end: AxialCoordinate,
        configuration: TileConfiguration,
    ):
        self.start = start
        self.end = end
        self.configuration = configuration

    def coordinates(self) -> list[AxialCoordinate]:
        return [
            AxialCoordinate(q=q, r=r)
            for q in range(self.start.q, self.end.q)
            for r in range(self.start.r, self.end.r)
        ]

    def generate(self, layer: Layer[Tile], allocator: IdentityAllocator) -> bool:
        """Add one tile per cell.

        Returns:
            True if every cell was added, False if any was already taken.
        """
        return _fill(layer, allocator, self.configuration, self.coordinates())


class HexagonGenerator:
    """Fills every cell within radius steps of center."""

    def __init__(
        self,
        center: AxialCoordinate,
        radius: int,
        configuration: TileConfiguration,
    ):
        if radius < 0:
            raise ValueError("radius must be non-negative")
        self.center = center
        self.radius = radius
        self.configuration = configuration

    def coordinates(self) -> list[AxialCoordinate]:
        return hexagon(self.center, self.radius)

    def generate(self, layer: Layer[Tile], allocator: IdentityAllocator) -> bool:
        """Add one tile per cell; True if every cell was added."""
        return _fill(layer, allocator, self.configuration, self.coordinates())


def _fill(
    layer: Layer[Tile],
    allocator: IdentityAllocator,
    configuration: TileConfiguration,
    coordinates: list[AxialCoordinate],
) -> bool:
    added = 0
    for coordinate in coordinates:
        tile = create_tile(allocator, configuration, coordinate)
        if layer.try_add(coordinate, tile):
            added += 1

    logger.info(
        "terrain_generated",
        layer=layer.name,
        terrain=configuration.kind.value,
        requested=len(coordinates),
        added=added,
    )
    return added == len(coordinates)
