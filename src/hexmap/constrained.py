"""Layers whose membership follows another layer."""

from typing import Callable, Hashable, TypeVar

import structlog

from .events import Subscription
from .layer import Layer
from .types import AxialCoordinate

logger = structlog.get_logger()

T = TypeVar("T")


class ConstrainedLayer(Layer[T]):
    """
    Overlay that only accepts coordinates present in a base layer.

    When a coordinate is about to leave the base, the matching entry here is
    removed first, firing this layer's own removal events. The base is
    borrowed, not owned: call detach() (or close()) before discarding the
    base so the subscription does not keep this layer alive.

    Example:
        terrain = EntityLayer[Tile]("tiles")
        water = constrain(terrain, name="water")
        terrain.try_add(c, tile)
        water.try_add(c, 0.5)     # True
        water.try_add(other, 1.0) # False, no terrain at other
        terrain.try_remove(c)     # water loses c as well
    """

    def __init__(
        self,
        base: Layer,
        name: str = "constrained",
        identify: Callable[[T], Hashable] | None = None,
    ):
        super().__init__(name=name, identify=identify)
        self._base: Layer | None = base
        self._subscription: Subscription | None = base.removing_at.subscribe(
            self._on_base_removing
        )

    @property
    def base(self) -> Layer | None:
        """The constraining layer, or None once detached."""
        return self._base

    @property
    def is_constrained(self) -> bool:
        return True

    def _reject_reason(self, coordinate: AxialCoordinate, item: T) -> str | None:
        if self._base is None:
            return "detached"
        if not self._base.contains(coordinate):
            return "outside_base"
        return super()._reject_reason(coordinate, item)

    def _on_base_removing(self, base: Layer, coordinate: AxialCoordinate) -> None:
        if self.contains(coordinate):
            logger.debug(
                "constrained_cascade",
                layer=self.name,
                base=base.name,
                coordinate=str(coordinate),
            )
            self.try_remove(coordinate)

    def detach(self) -> None:
        """Stop following the base layer. Later adds are refused."""
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        self._base = None

    def close(self) -> None:
        self.detach()
        super().close()


def constrain(
    base: Layer,
    name: str = "constrained",
    identify: Callable[[T], Hashable] | None = None,
) -> ConstrainedLayer[T]:
    """Build a ConstrainedLayer over base."""
    return ConstrainedLayer(base, name=name, identify=identify)
