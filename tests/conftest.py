"""Shared test fixtures for hex map tests."""

import pytest

from hexmap.entities import (
    MovementCostTable,
    TerrainKind,
    Tile,
    TileConfiguration,
    UnitConfiguration,
    create_tile,
)
from hexmap.generator import RectangleGenerator
from hexmap.identity import IdentityAllocator
from hexmap.layer import EntityLayer, Layer
from hexmap.types import AxialCoordinate


def coord(q: int, r: int) -> AxialCoordinate:
    return AxialCoordinate(q=q, r=r)


class EventRecorder:
    """Subscribes to every event of a layer and records (name, coordinate)."""

    def __init__(self, layer: Layer):
        self.calls: list[tuple[str, AxialCoordinate]] = []
        self.subscriptions = []
        for name in ("adding", "added", "removing", "removed"):
            self.subscriptions.append(
                getattr(layer, name).subscribe(self._item_handler(name))
            )
            self.subscriptions.append(
                getattr(layer, f"{name}_at").subscribe(self._at_handler(f"{name}_at"))
            )

    def _item_handler(self, name: str):
        def handler(layer, item, coordinate):
            self.calls.append((name, coordinate))

        return handler

    def _at_handler(self, name: str):
        def handler(layer, coordinate):
            self.calls.append((name, coordinate))

        return handler

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def count(self, name: str) -> int:
        return sum(1 for n, _ in self.calls if n == name)


@pytest.fixture
def allocator() -> IdentityAllocator:
    return IdentityAllocator()


@pytest.fixture
def tundra() -> TileConfiguration:
    return TileConfiguration(kind=TerrainKind.TUNDRA)


@pytest.fixture
def rocks() -> TileConfiguration:
    return TileConfiguration(kind=TerrainKind.ROCKS)


@pytest.fixture
def blocked() -> TileConfiguration:
    return TileConfiguration(kind=TerrainKind.BLOCKED)


@pytest.fixture
def uniform_costs() -> MovementCostTable:
    """Every terrain except BLOCKED costs 1.0."""
    return MovementCostTable.uniform(1.0)


@pytest.fixture
def scout_config(uniform_costs: MovementCostTable) -> UnitConfiguration:
    return UnitConfiguration(key="scout", movement_costs=uniform_costs, max_water=3.0)


@pytest.fixture
def make_tile(allocator: IdentityAllocator):
    """Factory for tiles placed at (q, r)."""

    def factory(q: int, r: int, configuration: TileConfiguration) -> Tile:
        return create_tile(allocator, configuration, coord(q, r))

    return factory


@pytest.fixture
def open_terrain(allocator: IdentityAllocator, tundra: TileConfiguration) -> EntityLayer[Tile]:
    """7x7 axial rectangle of fully connected tundra, q and r in [0, 7).

    Center (3, 3) has complete rings out to radius 3.
    """
    layer: EntityLayer[Tile] = EntityLayer(name="terrain")
    RectangleGenerator(coord(0, 0), coord(7, 7), tundra).generate(layer, allocator)
    return layer


@pytest.fixture
def center() -> AxialCoordinate:
    return coord(3, 3)
