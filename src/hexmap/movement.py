"""Cost-bounded reachability over terrain layers."""

import math
from collections import deque

import structlog

from .entities import MovementCostTable, Tile, Unit
from .layer import Layer
from .types import AxialCoordinate

logger = structlog.get_logger()


class ReachabilityEngine:
    """
    Computes which cells a mover can enter within a cost budget.

    Terrain is read, never mutated. A step from A to B is possible when A's
    connection mask is open toward B and B exists in the terrain layer; the
    step costs whatever the cost table charges for B's terrain. Leaving the
    origin is free of the origin's own terrain cost.

    Algorithm (relaxation over a FIFO work queue):
    1. Seed costs with origin -> 0 and enqueue the origin
    2. Pop a cell, price each open neighbor at cost[cell] + step cost
    3. Record and re-enqueue the neighbor if the price fits the budget and
       beats any recorded cost (a cell may be improved after it was queued)
    4. Stop when the queue is empty
    """

    def __init__(self, tiles: Layer[Tile]):
        self.tiles = tiles

    def compute(
        self,
        origin: AxialCoordinate,
        costs: MovementCostTable,
        budget: float,
    ) -> dict[AxialCoordinate, float]:
        """Minimal accumulated cost for every cell reachable within budget.

        Args:
            origin: Starting cell.
            costs: Per-terrain cost of entering a cell.
            budget: Maximum total cost, inclusive.

        Returns:
            Mapping of coordinate -> cost, origin included at 0.0. Empty when
            the origin has no terrain or the budget is negative.
        """
        if not self.tiles.contains(origin) or budget < 0:
            logger.debug(
                "reachability_empty",
                origin=str(origin),
                budget=budget,
                has_terrain=self.tiles.contains(origin),
            )
            return {}

        cost: dict[AxialCoordinate, float] = {origin: 0.0}
        queue: deque[AxialCoordinate] = deque([origin])
        expansions = 0

        while queue:
            current = queue.popleft()
            tile = self.tiles.get(current)
            if tile is None:
                continue
            expansions += 1

            for direction, candidate in current.neighbors():
                if not tile.is_connected(direction):
                    continue
                candidate_tile = self.tiles.get(candidate)
                if candidate_tile is None:
                    continue

                step = costs.cost_of(candidate_tile.terrain)
                if not math.isfinite(step):
                    continue

                total = cost[current] + step
                if total <= budget and total < cost.get(candidate, math.inf):
                    cost[candidate] = total
                    queue.append(candidate)

        logger.debug(
            "reachability_computed",
            origin=str(origin),
            budget=budget,
            cells=len(cost),
            expansions=expansions,
        )
        return cost

    def compute_for(self, unit: Unit) -> dict[AxialCoordinate, float]:
        """Reachable cells for a unit, spending its water as budget."""
        if unit.location is None:
            return {}
        return self.compute(unit.location, unit.movement_costs, unit.water)


def compute_reachable(
    origin: AxialCoordinate,
    tiles: Layer[Tile],
    costs: MovementCostTable,
    budget: float,
) -> dict[AxialCoordinate, float]:
    """Functional form of ReachabilityEngine.compute."""
    return ReachabilityEngine(tiles).compute(origin, costs, budget)


def compute_unit_reachable(unit: Unit, tiles: Layer[Tile]) -> dict[AxialCoordinate, float]:
    """Functional form of ReachabilityEngine.compute_for."""
    return ReachabilityEngine(tiles).compute_for(unit)


def reachable_layer(
    origin: AxialCoordinate,
    tiles: Layer[Tile],
    costs: MovementCostTable,
    budget: float,
) -> Layer[float]:
    """Reachability result as a transient Layer for display consumers."""
    layer: Layer[float] = Layer(name="reachable")
    for coordinate, total in compute_reachable(origin, tiles, costs, budget).items():
        layer.try_add(coordinate, total)
    return layer
