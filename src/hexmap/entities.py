"""Placeable entities and their immutable configurations."""

import math
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, Field, TypeAdapter, field_validator

from .identity import IdentityAllocator
from .types import (
    AxialCoordinate,
    HexDirection,
    HexDirections,
    direction_check,
    direction_from_offset,
)

ALL_CONNECTIONS = int(HexDirections.ALL)


class TerrainKind(str, Enum):
    """Terrain kinds a tile can carry."""

    OPEN = "open"
    TUNDRA = "tundra"
    ROCKS = "rocks"
    DUNES = "dunes"
    CANYON = "canyon"
    BLOCKED = "blocked"


class MovementCostTable(BaseModel, frozen=True):
    """Cost of entering a tile, per terrain kind.

    Kinds missing from the table, or mapped to None, are impassable.
    """

    costs: dict[TerrainKind, float | None] = Field(default_factory=dict)

    @field_validator("costs")
    @classmethod
    def _non_negative(
        cls, costs: dict[TerrainKind, float | None]
    ) -> dict[TerrainKind, float | None]:
        for kind, cost in costs.items():
            if cost is not None and (math.isnan(cost) or cost < 0):
                raise ValueError(f"Movement cost for {kind.value} must be >= 0, got {cost}")
        return costs

    @classmethod
    def uniform(cls, cost: float, kinds: list[TerrainKind] | None = None) -> "MovementCostTable":
        """Table charging the same cost for every listed kind (default: all but BLOCKED)."""
        if kinds is None:
            kinds = [k for k in TerrainKind if k is not TerrainKind.BLOCKED]
        return cls(costs={kind: cost for kind in kinds})

    def cost_of(self, kind: TerrainKind) -> float:
        """Cost of entering terrain of the given kind; math.inf if impassable."""
        cost = self.costs.get(kind)
        return math.inf if cost is None else cost

    def is_passable(self, kind: TerrainKind) -> bool:
        return math.isfinite(self.cost_of(kind))


class TileConfiguration(BaseModel, frozen=True):
    """Template shared by all tiles of one terrain kind."""

    kind: TerrainKind
    connections: int = Field(default=ALL_CONNECTIONS, ge=0, le=ALL_CONNECTIONS)


class UnitConfiguration(BaseModel, frozen=True):
    """Template for a unit class."""

    key: str
    movement_costs: MovementCostTable = Field(default_factory=MovementCostTable)
    max_health: float = 10.0
    max_water: float = 10.0
    speed: float = 5.0


class BuildingConfiguration(BaseModel, frozen=True):
    """Template for a building class."""

    key: str


class _EntityBase(BaseModel, frozen=True):
    identity: int
    location: AxialCoordinate | None = None
    owner: str | None = None

    @property
    def is_placed(self) -> bool:
        return self.location is not None

    def with_location(self, location: AxialCoordinate | None):
        """Return copy at a new location; identity is preserved."""
        return self.model_copy(update={"location": location})


class Tile(_EntityBase, frozen=True):
    """Terrain cell with a connection mask over its six edges."""

    kind: Literal["tile"] = "tile"
    configuration: TileConfiguration
    connections: int = Field(default=ALL_CONNECTIONS, ge=0, le=ALL_CONNECTIONS)

    @property
    def terrain(self) -> TerrainKind:
        return self.configuration.kind

    @property
    def is_blocked(self) -> bool:
        return self.terrain is TerrainKind.BLOCKED

    @property
    def is_open(self) -> bool:
        return self.terrain is TerrainKind.OPEN

    @property
    def connection_mask(self) -> HexDirection:
        return HexDirection(self.connections)

    def is_connected(self, direction: HexDirection) -> bool:
        """Whether the tile can be left through the given edge."""
        return bool(self.connections & direction_check(direction))

    def connect(self, direction: HexDirection) -> "Tile":
        """Return copy with the edge opened."""
        return self.model_copy(
            update={"connections": int(self.connections | direction_check(direction))}
        )

    def disconnect(self, direction: HexDirection) -> "Tile":
        """Return copy with the edge closed."""
        return self.model_copy(
            update={"connections": int(self.connections & ~direction_check(direction))}
        )


class Unit(_EntityBase, frozen=True):
    """Mobile entity; water is its movement budget."""

    kind: Literal["unit"] = "unit"
    configuration: UnitConfiguration
    health: float = 10.0
    water: float = 10.0
    speed: float = 5.0

    @property
    def movement_costs(self) -> MovementCostTable:
        return self.configuration.movement_costs

    def with_water(self, water: float) -> "Unit":
        """Return copy with water clamped to [0, max_water]."""
        clamped = min(max(water, 0.0), self.configuration.max_water)
        return self.model_copy(update={"water": clamped})


class Building(_EntityBase, frozen=True):
    """Static structure."""

    kind: Literal["building"] = "building"
    configuration: BuildingConfiguration


Entity = Annotated[Tile | Unit | Building, Field(discriminator="kind")]

ENTITY_ADAPTER: TypeAdapter[Tile | Unit | Building] = TypeAdapter(Entity)


def parse_entity(data: dict) -> Tile | Unit | Building:
    """Validate a plain mapping into the matching entity variant."""
    return ENTITY_ADAPTER.validate_python(data)


def create_tile(
    allocator: IdentityAllocator,
    configuration: TileConfiguration,
    location: AxialCoordinate | None = None,
) -> Tile:
    return Tile(
        identity=allocator.next_identity(),
        location=location,
        configuration=configuration,
        connections=configuration.connections,
    )


def create_unit(
    allocator: IdentityAllocator,
    configuration: UnitConfiguration,
    location: AxialCoordinate | None = None,
    owner: str | None = None,
) -> Unit:
    return Unit(
        identity=allocator.next_identity(),
        location=location,
        owner=owner,
        configuration=configuration,
        health=configuration.max_health,
        water=configuration.max_water,
        speed=configuration.speed,
    )


def create_building(
    allocator: IdentityAllocator,
    configuration: BuildingConfiguration,
    location: AxialCoordinate | None = None,
    owner: str | None = None,
) -> Building:
    return Building(
        identity=allocator.next_identity(),
        location=location,
        owner=owner,
        configuration=configuration,
    )


def are_connected(first: Tile, second: Tile) -> bool:
    """Whether two tiles are adjacent and both open toward each other."""
    if first.location is None or second.location is None:
        return False
    direction = direction_from_offset(second.location - first.location)
    if direction is HexDirection.NONE:
        return False
    return first.is_connected(direction) and second.is_connected(direction.opposite)
