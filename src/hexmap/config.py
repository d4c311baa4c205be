"""Map configuration loading from TOML files."""

import tomllib
from pathlib import Path

import structlog
from pydantic import BaseModel, Field

from .entities import (
    ALL_CONNECTIONS,
    BuildingConfiguration,
    MovementCostTable,
    TerrainKind,
    Tile,
    TileConfiguration,
    UnitConfiguration,
    create_building,
    create_tile,
    create_unit,
)
from .exceptions import ConfigError
from .identity import IdentityAllocator
from .map import Map
from .types import AxialCoordinate

logger = structlog.get_logger()


class MapSection(BaseModel):
    """[map] table."""

    name: str = "untitled"


class TerrainConfig(BaseModel):
    """Per-terrain defaults from TOML."""

    connections: int = Field(default=ALL_CONNECTIONS, ge=0, le=ALL_CONNECTIONS)


class UnitClassConfig(BaseModel):
    """Unit class from TOML. Terrain kinds left out of movement_costs are impassable."""

    movement_costs: dict[TerrainKind, float] = Field(default_factory=dict)
    max_health: float = 10.0
    max_water: float = 10.0
    speed: float = 5.0


class BuildingClassConfig(BaseModel):
    """Building class from TOML."""

    pass


class TilePlacement(BaseModel):
    q: int
    r: int
    terrain: TerrainKind
    connections: int | None = Field(default=None, ge=0, le=ALL_CONNECTIONS)


class UnitPlacement(BaseModel):
    q: int
    r: int
    unit: str
    owner: str | None = None
    water: float | None = None


class BuildingPlacement(BaseModel):
    q: int
    r: int
    building: str
    owner: str | None = None


class Config(BaseModel):
    """Complete configuration for one map."""

    map: MapSection = Field(default_factory=MapSection)
    terrain: dict[TerrainKind, TerrainConfig] = Field(default_factory=dict)
    units: dict[str, UnitClassConfig] = Field(default_factory=dict)
    buildings: dict[str, BuildingClassConfig] = Field(default_factory=dict)
    tiles: list[TilePlacement] = Field(default_factory=list)
    unit_placements: list[UnitPlacement] = Field(default_factory=list)
    building_placements: list[BuildingPlacement] = Field(default_factory=list)

    def tile_configuration(self, kind: TerrainKind) -> TileConfiguration:
        """Tile template for a terrain kind; unlisted kinds connect on all edges."""
        terrain = self.terrain.get(kind, TerrainConfig())
        return TileConfiguration(kind=kind, connections=terrain.connections)

    def unit_configuration(self, key: str) -> UnitConfiguration:
        """Unit template by class key.

        Raises:
            ConfigError: If no [units.<key>] table exists.
        """
        if key not in self.units:
            raise ConfigError(f"Unit class '{key}' is not defined")
        unit = self.units[key]
        return UnitConfiguration(
            key=key,
            movement_costs=MovementCostTable(costs=dict(unit.movement_costs)),
            max_health=unit.max_health,
            max_water=unit.max_water,
            speed=unit.speed,
        )

    def building_configuration(self, key: str) -> BuildingConfiguration:
        """Building template by class key.

        Raises:
            ConfigError: If no [buildings.<key>] table exists.
        """
        if key not in self.buildings:
            raise ConfigError(f"Building class '{key}' is not defined")
        return BuildingConfiguration(key=key)


def load_config(config_path: Path) -> Config:
    """Load configuration from a TOML file.

    Args:
        config_path: Path to the TOML config file.

    Returns:
        Parsed Config object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If TOML is malformed.
        pydantic.ValidationError: If values don't fit the schema.
    """
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    return Config.model_validate(data)


CONFIGS_DIR = Path(__file__).parent / "configs"


def find_config(name: str, search_dir: Path | None = None) -> Path:
    """Resolve a map name or a path to a TOML file.

    A name holding a "/" or ending in .toml is taken as a path. A bare name
    is looked up in search_dir (the maps bundled with the package by
    default), first with a .toml suffix and then as given.

    Raises:
        FileNotFoundError: If no matching file exists.
    """
    if "/" in name or name.endswith(".toml"):
        candidates = [Path(name)]
    else:
        directory = search_dir or CONFIGS_DIR
        candidates = [directory / f"{name}.toml", directory / name]

    found = next((path for path in candidates if path.is_file()), None)
    if found is None:
        known = ", ".join(list_configs(search_dir)) or "none"
        raise FileNotFoundError(f"No map config {name!r} (known maps: {known})")
    return found


def list_configs(search_dir: Path | None = None) -> list[str]:
    """Names of the maps find_config can resolve without a path."""
    directory = search_dir or CONFIGS_DIR
    return sorted(path.stem for path in directory.glob("*.toml"))


def config_to_map(config: Config, allocator: IdentityAllocator | None = None) -> Map:
    """Build a Map by adding every configured placement through the layers.

    Tiles go first so that buildings and units find terrain under them.
    Placements the layers refuse (duplicates, no terrain) are logged and
    skipped.

    Raises:
        ConfigError: If a placement names an undefined unit or building class.
    """
    game_map = Map(config.map.name, allocator)

    for placement in config.tiles:
        template = config.tile_configuration(placement.terrain)
        location = AxialCoordinate(q=placement.q, r=placement.r)
        tile = create_tile(game_map.allocator, template, location)
        if placement.connections is not None:
            tile = tile.model_copy(update={"connections": placement.connections})
        if not game_map.try_add_entity(tile):
            logger.warning(
                "config_placement_rejected", kind="tile", coordinate=str(location)
            )

    for placement in config.building_placements:
        template = config.building_configuration(placement.building)
        location = AxialCoordinate(q=placement.q, r=placement.r)
        building = create_building(
            game_map.allocator, template, location, owner=placement.owner
        )
        if not game_map.try_add_entity(building):
            logger.warning(
                "config_placement_rejected",
                kind="building",
                key=placement.building,
                coordinate=str(location),
            )

    for placement in config.unit_placements:
        template = config.unit_configuration(placement.unit)
        location = AxialCoordinate(q=placement.q, r=placement.r)
        unit = create_unit(game_map.allocator, template, location, owner=placement.owner)
        if placement.water is not None:
            unit = unit.with_water(placement.water)
        if not game_map.try_add_entity(unit):
            logger.warning(
                "config_placement_rejected",
                kind="unit",
                key=placement.unit,
                coordinate=str(location),
            )

    logger.info(
        "map_loaded",
        map=game_map.name,
        tiles=len(game_map.tiles),
        buildings=len(game_map.buildings),
        units=len(game_map.units),
    )
    return game_map


def _tile_placement(coordinate: AxialCoordinate, tile: Tile) -> TilePlacement:
    connections = tile.connections
    return TilePlacement(
        q=coordinate.q,
        r=coordinate.r,
        terrain=tile.terrain,
        connections=None if connections == tile.configuration.connections else connections,
    )


def map_to_config(game_map: Map) -> Config:
    """Describe a map's current contents as a Config.

    Class tables are rebuilt from the configurations the entities carry.
    """
    config = Config(map=MapSection(name=game_map.name))

    for coordinate, tile in sorted(game_map.tiles.items(), key=lambda e: (e[0].q, e[0].r)):
        config.terrain.setdefault(
            tile.terrain, TerrainConfig(connections=tile.configuration.connections)
        )
        config.tiles.append(_tile_placement(coordinate, tile))

    for coordinate, building in game_map.buildings.items():
        config.buildings.setdefault(building.configuration.key, BuildingClassConfig())
        config.building_placements.append(
            BuildingPlacement(
                q=coordinate.q,
                r=coordinate.r,
                building=building.configuration.key,
                owner=building.owner,
            )
        )

    for coordinate, unit in game_map.units.items():
        template = unit.configuration
        config.units.setdefault(
            template.key,
            UnitClassConfig(
                movement_costs={
                    kind: cost
                    for kind, cost in template.movement_costs.costs.items()
                    if cost is not None
                },
                max_health=template.max_health,
                max_water=template.max_water,
                speed=template.speed,
            ),
        )
        config.unit_placements.append(
            UnitPlacement(
                q=coordinate.q,
                r=coordinate.r,
                unit=template.key,
                owner=unit.owner,
                water=None if unit.water == template.max_water else unit.water,
            )
        )

    return config
