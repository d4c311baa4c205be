"""Synchronous observer lists with explicit unsubscribe handles."""

from dataclasses import dataclass, field
from typing import Callable, Generic, ParamSpec

P = ParamSpec("P")


@dataclass(eq=False)
class Subscription:
    """Handle returned by Event.subscribe.

    Calling unsubscribe more than once is harmless.
    """

    _event: "Event | None"
    _handler: Callable

    @property
    def active(self) -> bool:
        return self._event is not None

    def unsubscribe(self) -> None:
        if self._event is None:
            return
        self._event._detach(self)
        self._event = None


@dataclass(eq=False)
class Event(Generic[P]):
    """Ordered list of handlers called on the firing thread.

    Usage:
        removed = Event[[Layer, AxialCoordinate]]()
        sub = removed.subscribe(on_removed)
        removed.fire(layer, coordinate)
        sub.unsubscribe()
    """

    _subscriptions: list[Subscription] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self._subscriptions)

    def subscribe(self, handler: Callable[P, None]) -> Subscription:
        subscription = Subscription(self, handler)
        self._subscriptions.append(subscription)
        return subscription

    def fire(self, *args: P.args, **kwargs: P.kwargs) -> None:
        """Call every handler in subscription order.

        Iterates over a snapshot, so handlers may unsubscribe during dispatch.
        Handler exceptions propagate to the caller.
        """
        for subscription in list(self._subscriptions):
            if subscription.active:
                subscription._handler(*args, **kwargs)

    def clear(self) -> None:
        """Drop every handler, deactivating their subscriptions."""
        for subscription in list(self._subscriptions):
            subscription.unsubscribe()

    def _detach(self, subscription: Subscription) -> None:
        self._subscriptions.remove(subscription)
