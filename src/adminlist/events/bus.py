"""Synchronous in-process event bus shared by the listing components."""

import logging
import threading
import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional, Type


@dataclass(kw_only=True)
class Event:
    """Base event class."""
    timestamp: datetime = field(default_factory=datetime.now)
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))


@dataclass
class Subscription:
    """Handle returned by subscribe(); can be used to unsubscribe."""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    event_type: Type = Event
    handler: Callable = field(default=lambda e: None)
    namespace: Optional[str] = None
    active: bool = True

    def accepts(self, event: Event) -> bool:
        if not self.active:
            return False
        return self.namespace is None or getattr(event, "namespace", None) == self.namespace

    def cancel(self):
        self.active = False


class EventBus:
    def __init__(self, logger: logging.Logger = None):
        self._logger = logger or logging.getLogger(__name__)
        self._handlers: Dict[Type[Event], List[Subscription]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(
        self,
        event_type: Type[Event],
        handler: Callable,
        namespace: Optional[str] = None,
    ) -> Subscription:
        """Register *handler* for *event_type*.

        With *namespace* set, only events whose ``namespace`` attribute
        matches are delivered.
        """
        sub = Subscription(event_type=event_type, handler=handler, namespace=namespace)
        with self._lock:
            self._handlers[event_type].append(sub)
        return sub

    def unsubscribe(self, subscription: Subscription):
        subscription.active = False
        with self._lock:
            subs = self._handlers.get(subscription.event_type, [])
            if subscription in subs:
                subs.remove(subscription)

    def publish(self, event: Event):
        event_type = type(event)

        with self._lock:
            subs = list(self._handlers[event_type])

        for sub in subs:
            if not sub.accepts(event):
                continue
            try:
                sub.handler(event)
            except Exception as exc:
                self._logger.error("Handler failed for %s: %s", event_type.__name__, exc)
