"""Map: the owner of a level's terrain and overlay layers."""

from typing import Iterator, Protocol

import structlog

from .constrained import ConstrainedLayer
from .entities import Building, Tile, Unit
from .identity import IdentityAllocator
from .layer import EntityLayer, Layer, entity_identity
from .movement import ReachabilityEngine
from .types import AxialCoordinate

logger = structlog.get_logger()


class TerrainGenerator(Protocol):
    def generate(self, layer: Layer[Tile], allocator: IdentityAllocator) -> bool: ...


class Map:
    """
    A named part of the hex world with its tiles, units and buildings.

    Units and buildings live in layers constrained to the tile layer: they
    can only be placed on existing terrain and are removed when their tile
    is. The map owns its layers; display code subscribes to their events
    and never mutates them.
    """

    def __init__(self, name: str, allocator: IdentityAllocator | None = None):
        self.name = name
        self.allocator = allocator or IdentityAllocator()

        self.tiles: EntityLayer[Tile] = EntityLayer(name=f"{name}.tiles")
        self.units: ConstrainedLayer[Unit] = ConstrainedLayer(
            self.tiles, name=f"{name}.units", identify=entity_identity
        )
        self.buildings: ConstrainedLayer[Building] = ConstrainedLayer(
            self.tiles, name=f"{name}.buildings", identify=entity_identity
        )

        self._engine = ReachabilityEngine(self.tiles)

    def __repr__(self) -> str:
        return (
            f"Map(name={self.name!r}, tiles={len(self.tiles)}, "
            f"units={len(self.units)}, buildings={len(self.buildings)})"
        )

    # --- Entities ---

    def layer_for(self, entity: Tile | Unit | Building) -> Layer:
        """Layer an entity variant belongs in."""
        match entity:
            case Tile():
                return self.tiles
            case Unit():
                return self.units
            case Building():
                return self.buildings
        raise TypeError(f"Not a map entity: {type(entity).__name__}")

    def try_add_entity(self, entity: Tile | Unit | Building) -> bool:
        """Place entity at its own location. Unplaced entities are refused."""
        if entity.location is None:
            logger.debug(
                "entity_add_rejected",
                map=self.name,
                identity=entity.identity,
                reason="unplaced",
            )
            return False
        return self.layer_for(entity).try_add(entity.location, entity)

    def try_remove_entity(self, entity: Tile | Unit | Building) -> bool:
        """Remove entity from wherever its layer holds it."""
        layer = self.layer_for(entity)
        coordinate = layer.get_coordinates(entity)
        if coordinate is None:
            return False
        return layer.try_remove(coordinate)

    def entities(self) -> Iterator[Tile | Unit | Building]:
        """All entities: tiles, then buildings, then units."""
        for layer in (self.tiles, self.buildings, self.units):
            for _, entity in layer.items():
                yield entity

    # --- Generation ---

    def generate(self, generator: TerrainGenerator) -> bool:
        return generator.generate(self.tiles, self.allocator)

    # --- Movement ---

    def reachable_for(self, unit: Unit) -> dict[AxialCoordinate, float]:
        """Cells the unit can enter with its current water."""
        coordinate = self.units.get_coordinates(unit)
        if coordinate is None:
            coordinate = unit.location
        if coordinate is None:
            return {}
        return self._engine.compute(coordinate, unit.movement_costs, unit.water)

    def move_unit(self, unit: Unit, destination: AxialCoordinate) -> Unit | None:
        """Move a placed unit, paying the path cost out of its water.

        Returns:
            The updated unit, or None if the destination is unreachable,
            already holds another unit, the unit is not on this map, or the
            destination refused the unit mid-move (the unit is then put
            back at its origin).
        """
        origin = self.units.get_coordinates(unit)
        if origin is None:
            return None
        # The stored copy carries the current water
        unit = self.units.get(origin) or unit
        if origin == destination:
            return unit

        reachable = self.reachable_for(unit)
        if destination not in reachable or self.units.contains(destination):
            logger.debug(
                "unit_move_rejected",
                map=self.name,
                identity=unit.identity,
                destination=str(destination),
                reachable=destination in reachable,
            )
            return None

        moved = unit.with_location(destination).with_water(
            unit.water - reachable[destination]
        )
        if not self.units.try_remove(origin):
            return None
        if not self.units.try_add(destination, moved):
            # Destination refused during the move; put the unit back
            restored = self.units.try_add(origin, unit)
            logger.warning(
                "unit_move_failed",
                map=self.name,
                identity=unit.identity,
                destination=str(destination),
                restored=restored,
            )
            return None
        logger.debug(
            "unit_moved",
            map=self.name,
            identity=unit.identity,
            origin=str(origin),
            destination=str(destination),
            cost=reachable[destination],
        )
        return moved

    # --- Lifecycle ---

    def unload(self) -> None:
        """Remove everything through the layers so subscribers observe it."""
        counts = {
            "units": len(self.units),
            "buildings": len(self.buildings),
            "tiles": len(self.tiles),
        }
        self.units.clear()
        self.buildings.clear()
        self.tiles.clear()
        logger.info("map_unloaded", map=self.name, **counts)

    def close(self) -> None:
        """Unload, then tear down every subscription held by the layers."""
        self.unload()
        self.units.close()
        self.buildings.close()
        self.tiles.close()
