"""Typed, multi-subscriber event channels.

The EventBus keeps one ObserverManager per event type. Publishing an event
notifies the subscribers of its exact type, then every registered
HmiObserver.
"""

import logging
from collections.abc import Callable
from threading import Lock
from typing import Any

from pedalhmi.model_manager import ObserverManager

from .events import EVENT_TYPES, ProtocolEvent
from .observers import HmiObserver

logger = logging.getLogger(__name__)

EventCallback = Callable[[Any], None]


class EventBus:
    """
    Fire-and-forget event distribution from the dispatcher to consumers.

    Example:
        ```python
        bus = EventBus()
        bus.subscribe(TunerReading, lambda reading: print(reading.note))
        bus.publish(TunerReading(frequency=440.0, note="A4", cents=0))
        ```
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._channels: dict[type[ProtocolEvent], ObserverManager[EventCallback]] = {
            event_type: ObserverManager[EventCallback](observer_type_name=event_type.__name__)
            for event_type in EVENT_TYPES
        }
        self._observers = ObserverManager[Callable[[ProtocolEvent], None]](
            observer_type_name="hmi"
        )
        self._published = 0

    def _channel(self, event_type: type[ProtocolEvent]) -> ObserverManager[EventCallback]:
        with self._lock:
            channel = self._channels.get(event_type)
            if channel is None:
                channel = ObserverManager[EventCallback](observer_type_name=event_type.__name__)
                self._channels[event_type] = channel
            return channel

    def subscribe(self, event_type: type[ProtocolEvent], callback: EventCallback) -> None:
        """Call ``callback(event)`` for every published event of ``event_type``."""
        self._channel(event_type).register(callback)

    def unsubscribe(self, event_type: type[ProtocolEvent], callback: EventCallback) -> None:
        self._channel(event_type).unregister(callback)

    def register_observer(self, observer: HmiObserver) -> None:
        """Register an observer for all events."""
        self._observers.register(observer.on_hmi_event)

    def unregister_observer(self, observer: HmiObserver) -> None:
        self._observers.unregister(observer.on_hmi_event)

    def publish(self, event: ProtocolEvent) -> int:
        """
        Deliver an event to its subscribers.

        Subscriber exceptions are logged and never reach the publisher.

        Returns:
            Number of subscribers that handled the event without raising
        """
        with self._lock:
            self._published += 1
        logger.debug(f"Publishing {event!r}")
        delivered = self._channel(type(event)).notify(event)
        delivered += self._observers.notify(event)
        return delivered

    def subscriber_count(self, event_type: type[ProtocolEvent]) -> int:
        return len(self._channel(event_type))

    @property
    def published_count(self) -> int:
        """Number of events published since creation."""
        with self._lock:
            return self._published

    def clear(self) -> None:
        """Remove every subscriber and observer."""
        with self._lock:
            channels = list(self._channels.values())
        for channel in channels:
            channel.clear()
        self._observers.clear()
