"""Coordinate-keyed containers with change notification."""

from operator import attrgetter
from typing import Callable, Generic, Hashable, Iterator, TypeVar

import structlog

from .events import Event
from .types import AxialCoordinate

logger = structlog.get_logger()

T = TypeVar("T")


class Layer(Generic[T]):
    """
    Holds at most one item per coordinate.

    Mutation goes through try_add / try_remove only; both return False
    instead of overwriting or raising. Every successful mutation fires, in
    order: the item-level pre event, the coordinate-only pre event, the
    change itself, the item-level post event, the coordinate-only post event.

    Reverse lookup (item -> coordinate) depends on `identify`:
    - None: equality scan over all items, O(n). The same value may sit at
      several coordinates, which suits plain data layers such as costs.
    - a key function: an index keyed by identify(item), O(1). A second
      item with an identity already present is rejected, so the layer is a
      bijection between coordinates and identities.

    Usage:
        layer = Layer[float]()
        layer.added_at.subscribe(lambda layer, coordinate: ...)
        layer.try_add(AxialCoordinate(q=0, r=0), 1.5)
    """

    def __init__(
        self,
        name: str = "layer",
        identify: Callable[[T], Hashable] | None = None,
    ):
        self.name = name
        self._identify = identify
        self._items: dict[AxialCoordinate, T] = {}
        self._index: dict[Hashable, AxialCoordinate] = {}
        self._adding: set[AxialCoordinate] = set()
        self._removing: set[AxialCoordinate] = set()

        # Item-level events: (layer, item, coordinate)
        self.adding: Event = Event()
        self.added: Event = Event()
        self.removing: Event = Event()
        self.removed: Event = Event()

        # Coordinate-only events: (layer, coordinate)
        self.adding_at: Event = Event()
        self.added_at: Event = Event()
        self.removing_at: Event = Event()
        self.removed_at: Event = Event()

    # --- Mutation ---

    def try_add(self, coordinate: AxialCoordinate, item: T) -> bool:
        """Add item at coordinate.

        Returns:
            False, with no mutation and no events, if the coordinate is
            occupied, already being added to, or the layer refuses the
            item; True otherwise. If an adding handler makes the item
            unacceptable (for example by placing the same identity
            elsewhere), the add is abandoned after the pre events and
            False is returned.
        """
        reason = self._add_conflict(coordinate, item)
        if reason is not None:
            logger.debug(
                "layer_add_rejected",
                layer=self.name,
                coordinate=str(coordinate),
                reason=reason,
            )
            return False

        self._adding.add(coordinate)
        try:
            self.adding.fire(self, item, coordinate)
            self.adding_at.fire(self, coordinate)
        finally:
            self._adding.discard(coordinate)

        reason = self._add_conflict(coordinate, item)
        if reason is not None:
            logger.warning(
                "layer_add_abandoned",
                layer=self.name,
                coordinate=str(coordinate),
                reason=reason,
            )
            return False

        self._items[coordinate] = item
        if self._identify is not None:
            self._index[self._identify(item)] = coordinate
        self.added.fire(self, item, coordinate)
        self.added_at.fire(self, coordinate)
        return True

    def try_remove(self, coordinate: AxialCoordinate) -> bool:
        """Remove whatever sits at coordinate.

        Returns:
            False if the coordinate is empty or already being removed,
            True otherwise.
        """
        if coordinate not in self._items or coordinate in self._removing:
            logger.debug(
                "layer_remove_rejected", layer=self.name, coordinate=str(coordinate)
            )
            return False

        item = self._items[coordinate]
        # Removing handlers may not remove the same coordinate again
        self._removing.add(coordinate)
        try:
            self.removing.fire(self, item, coordinate)
            self.removing_at.fire(self, coordinate)
        finally:
            self._removing.discard(coordinate)
        del self._items[coordinate]
        if self._identify is not None:
            del self._index[self._identify(item)]
        self.removed.fire(self, item, coordinate)
        self.removed_at.fire(self, coordinate)
        return True

    def clear(self) -> None:
        """Remove every entry through try_remove so subscribers see each one."""
        for coordinate in list(self._items):
            self.try_remove(coordinate)

    def close(self) -> None:
        """Drop all subscribers. The layer's contents are left untouched."""
        for event in (
            self.adding,
            self.added,
            self.removing,
            self.removed,
            self.adding_at,
            self.added_at,
            self.removing_at,
            self.removed_at,
        ):
            event.clear()

    def _add_conflict(self, coordinate: AxialCoordinate, item: T) -> str | None:
        if coordinate in self._items:
            return "occupied"
        if coordinate in self._adding:
            return "add_in_progress"
        return self._reject_reason(coordinate, item)

    def _reject_reason(self, coordinate: AxialCoordinate, item: T) -> str | None:
        """Subclass hook: return why item may not be added, or None."""
        if self._identify is not None and self._identify(item) in self._index:
            return "duplicate_identity"
        return None

    # --- Queries ---

    def get(self, coordinate: AxialCoordinate) -> T | None:
        return self._items.get(coordinate)

    def contains(self, coordinate: AxialCoordinate) -> bool:
        return coordinate in self._items

    def contains_item(self, item: T) -> bool:
        return self.get_coordinates(item) is not None

    def get_coordinates(self, item: T) -> AxialCoordinate | None:
        """Coordinate holding item, or None if it is not in the layer."""
        if self._identify is not None:
            return self._index.get(self._identify(item))
        for coordinate, stored in self._items.items():
            if stored == item:
                return coordinate
        return None

    def coordinates(self) -> list[AxialCoordinate]:
        return list(self._items)

    def items(self) -> list[tuple[AxialCoordinate, T]]:
        """Snapshot of (coordinate, item) pairs."""
        return list(self._items.items())

    def snapshot(self) -> dict[AxialCoordinate, T]:
        """Plain copy of the coordinate -> item mapping."""
        return dict(self._items)

    @property
    def is_empty(self) -> bool:
        return not self._items

    @property
    def is_constrained(self) -> bool:
        return False

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[AxialCoordinate]:
        return iter(list(self._items))

    def __contains__(self, coordinate: object) -> bool:
        return coordinate in self._items

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, count={len(self)})"


entity_identity: Callable[[object], Hashable] = attrgetter("identity")


class EntityLayer(Layer[T]):
    """Layer of entities, indexed by their `identity` attribute."""

    def __init__(self, name: str = "entities"):
        super().__init__(name=name, identify=entity_identity)
