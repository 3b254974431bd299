"""BaseViewModel: event-bus subscriptions released by ``dispose()``."""

from __future__ import annotations

from typing import Callable, Optional, Type

from adminlist.events.bus import EventBus, Subscription


class BaseViewModel:
    def __init__(self) -> None:
        self._subscriptions: list[Subscription] = []
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def subscribe_event(
        self,
        event_bus: EventBus,
        event_type: Type,
        handler: Callable,
        namespace: Optional[str] = None,
    ) -> Subscription:
        sub = event_bus.subscribe(event_type, handler, namespace=namespace)
        self._subscriptions.append(sub)
        return sub

    def dispose(self) -> None:
        for sub in self._subscriptions:
            sub.cancel()
        self._subscriptions.clear()
        self._disposed = True
