"""Tests for entity models and configurations."""

import math

import pytest
from pydantic import ValidationError

from hexmap.entities import (
    Building,
    BuildingConfiguration,
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
from hexmap.exceptions import UnknownDirectionError
from hexmap.types import HexDirection, HexDirections

from conftest import coord


class TestMovementCostTable:
    """Tests for MovementCostTable."""

    def test_missing_kind_is_impassable(self):
        table = MovementCostTable(costs={TerrainKind.TUNDRA: 1.0})
        assert table.cost_of(TerrainKind.TUNDRA) == 1.0
        assert table.cost_of(TerrainKind.ROCKS) == math.inf
        assert not table.is_passable(TerrainKind.ROCKS)

    def test_none_is_impassable(self):
        table = MovementCostTable(costs={TerrainKind.DUNES: None})
        assert table.cost_of(TerrainKind.DUNES) == math.inf

    def test_zero_cost_is_passable(self):
        table = MovementCostTable(costs={TerrainKind.OPEN: 0.0})
        assert table.is_passable(TerrainKind.OPEN)

    def test_negative_cost_rejected(self):
        with pytest.raises(ValidationError):
            MovementCostTable(costs={TerrainKind.TUNDRA: -1.0})

    def test_nan_cost_rejected(self):
        with pytest.raises(ValidationError):
            MovementCostTable(costs={TerrainKind.TUNDRA: math.nan})

    def test_uniform_skips_blocked(self):
        table = MovementCostTable.uniform(2.0)
        assert table.cost_of(TerrainKind.CANYON) == 2.0
        assert not table.is_passable(TerrainKind.BLOCKED)

    def test_uniform_with_kinds(self):
        table = MovementCostTable.uniform(1.0, [TerrainKind.ROCKS])
        assert table.is_passable(TerrainKind.ROCKS)
        assert not table.is_passable(TerrainKind.TUNDRA)


class TestTile:
    """Tests for Tile."""

    def test_created_with_template_connections(self, allocator):
        template = TileConfiguration(kind=TerrainKind.CANYON, connections=0b111101)
        tile = create_tile(allocator, template, coord(1, 1))

        assert tile.connections == 0b111101
        assert tile.terrain is TerrainKind.CANYON
        assert not tile.is_connected(HexDirection.N)
        assert tile.is_connected(HexDirection.S)

    def test_connect_and_disconnect_return_copies(self, make_tile, tundra):
        tile = make_tile(0, 0, tundra)
        closed = tile.disconnect(HexDirection.NE)

        assert tile.is_connected(HexDirection.NE)
        assert not closed.is_connected(HexDirection.NE)
        assert closed.identity == tile.identity
        assert closed.connect(HexDirection.NE).connections == tile.connections

    def test_connection_mask(self, make_tile, tundra):
        tile = make_tile(0, 0, tundra)
        assert tile.connection_mask == HexDirections.ALL

    def test_composite_direction_rejected(self, make_tile, tundra):
        tile = make_tile(0, 0, tundra)
        with pytest.raises(UnknownDirectionError):
            tile.is_connected(HexDirections.NORTHERN)

    def test_connections_out_of_range(self, tundra):
        with pytest.raises(ValidationError):
            Tile(identity=1, configuration=tundra, connections=64)

    def test_flags(self, make_tile, blocked):
        tile = make_tile(0, 0, blocked)
        assert tile.is_blocked
        assert not tile.is_open

    def test_with_location_keeps_identity(self, make_tile, tundra):
        tile = make_tile(0, 0, tundra)
        moved = tile.with_location(coord(4, 4))
        assert moved.identity == tile.identity
        assert moved.location == coord(4, 4)
        assert tile.location == coord(0, 0)


class TestAreConnected:
    """Tests for are_connected."""

    def test_adjacent_open_tiles(self, make_tile, tundra):
        assert are_connected(make_tile(0, 0, tundra), make_tile(1, 0, tundra))

    def test_closed_on_one_side(self, make_tile, tundra):
        first = make_tile(0, 0, tundra).disconnect(HexDirection.SE)
        second = make_tile(1, 0, tundra)
        assert not are_connected(first, second)
        assert not are_connected(second, first)

    def test_facing_side_checked(self, make_tile, tundra):
        first = make_tile(0, 0, tundra)
        second = make_tile(1, 0, tundra).disconnect(HexDirection.NW)
        assert not are_connected(first, second)

    def test_not_adjacent(self, make_tile, tundra):
        assert not are_connected(make_tile(0, 0, tundra), make_tile(2, 0, tundra))

    def test_unplaced(self, allocator, tundra, make_tile):
        loose = create_tile(allocator, tundra)
        assert not are_connected(loose, make_tile(0, 0, tundra))


class TestUnit:
    """Tests for Unit."""

    def test_create_unit_takes_template_values(self, allocator, scout_config):
        unit = create_unit(allocator, scout_config, coord(2, 2), owner="red")

        assert unit.water == scout_config.max_water
        assert unit.health == scout_config.max_health
        assert unit.speed == scout_config.speed
        assert unit.owner == "red"
        assert unit.movement_costs == scout_config.movement_costs

    def test_with_water_clamps(self, allocator, scout_config):
        unit = create_unit(allocator, scout_config)
        assert unit.with_water(-2.0).water == 0.0
        assert unit.with_water(99.0).water == scout_config.max_water
        assert unit.with_water(1.5).water == 1.5

    def test_unplaced_by_default(self, allocator, scout_config):
        assert not create_unit(allocator, scout_config).is_placed

    def test_frozen(self, allocator, scout_config):
        unit = create_unit(allocator, scout_config)
        with pytest.raises(ValidationError):
            unit.water = 1.0  # type: ignore


class TestParseEntity:
    """Tests for the discriminated entity union."""

    def test_round_trip_each_variant(self, allocator, tundra, scout_config):
        entities = [
            create_tile(allocator, tundra, coord(0, 0)),
            create_unit(allocator, scout_config, coord(0, 0)),
            create_building(allocator, BuildingConfiguration(key="camp"), coord(0, 0)),
        ]
        for entity in entities:
            parsed = parse_entity(entity.model_dump())
            assert type(parsed) is type(entity)
            assert parsed == entity

    def test_kind_selects_variant(self):
        parsed = parse_entity(
            {
                "kind": "unit",
                "identity": 3,
                "configuration": {"key": "scout"},
                "location": {"q": 1, "r": 2},
            }
        )
        assert isinstance(parsed, Unit)
        assert parsed.location == coord(1, 2)
        assert isinstance(parsed.configuration, UnitConfiguration)

    def test_unknown_kind(self):
        with pytest.raises(ValidationError):
            parse_entity({"kind": "river", "identity": 1})

    def test_building(self):
        parsed = parse_entity(
            {"kind": "building", "identity": 9, "configuration": {"key": "well"}}
        )
        assert isinstance(parsed, Building)
        assert parsed.configuration.key == "well"
