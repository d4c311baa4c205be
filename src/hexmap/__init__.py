"""Hex grid core: coordinates, layers and movement reachability."""

from .constrained import ConstrainedLayer, constrain
from .conversion import (
    SIDE_DISTANCE,
    SIDE_LENGTH,
    UNIT_HEIGHT,
    UNIT_WIDTH,
    extents,
    hex_distance,
    hex_round,
    hex_to_unit,
    hexagon,
    hexes_to_units,
    line,
    ring,
    unit_to_hex,
)
from .entities import (
    Building,
    BuildingConfiguration,
    Entity,
    MovementCostTable,
    TerrainKind,
    Tile,
    TileConfiguration,
    Unit,
    UnitConfiguration,
    are_connected,
    create_building,
    create_tile,
    create_unit,
    parse_entity,
)
from .events import Event, Subscription
from .exceptions import ConfigError, HexMapError, UnknownDirectionError
from .generator import HexagonGenerator, RectangleGenerator
from .identity import IdentityAllocator
from .layer import EntityLayer, Layer
from .map import Map
from .movement import (
    ReachabilityEngine,
    compute_reachable,
    compute_unit_reachable,
    reachable_layer,
)
from .types import (
    DIRECTION_OFFSETS,
    DIRECTIONS,
    AxialCoordinate,
    CubeCoordinate,
    HexDirection,
    HexDirections,
    axial_to_cube,
    cube_to_axial,
    direction_from_offset,
    direction_offset,
)

__all__ = [
    # Types
    "HexDirection",
    "HexDirections",
    "DIRECTIONS",
    "DIRECTION_OFFSETS",
    "AxialCoordinate",
    "CubeCoordinate",
    "axial_to_cube",
    "cube_to_axial",
    "direction_offset",
    "direction_from_offset",
    # Conversion
    "SIDE_LENGTH",
    "SIDE_DISTANCE",
    "UNIT_WIDTH",
    "UNIT_HEIGHT",
    "hex_to_unit",
    "hexes_to_units",
    "unit_to_hex",
    "hex_round",
    "hex_distance",
    "ring",
    "hexagon",
    "line",
    "extents",
    # Events
    "Event",
    "Subscription",
    # Identity
    "IdentityAllocator",
    # Entities
    "TerrainKind",
    "MovementCostTable",
    "TileConfiguration",
    "UnitConfiguration",
    "BuildingConfiguration",
    "Tile",
    "Unit",
    "Building",
    "Entity",
    "parse_entity",
    "create_tile",
    "create_unit",
    "create_building",
    "are_connected",
    # Layers
    "Layer",
    "EntityLayer",
    "ConstrainedLayer",
    "constrain",
    # Movement
    "ReachabilityEngine",
    "compute_reachable",
    "compute_unit_reachable",
    "reachable_layer",
    # Map
    "Map",
    "RectangleGenerator",
    "HexagonGenerator",
    # Exceptions
    "HexMapError",
    "UnknownDirectionError",
    "ConfigError",
]
