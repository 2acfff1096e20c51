"""Thread-safe subscriber list.

ObserverManager keeps an ordered list of callables and invokes each of them
on notification. It is the building block for every event channel in the
bridge: one manager per ProtocolEvent type.
"""

import logging
from collections.abc import Callable
from threading import Lock
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Callable[..., Any])


class ObserverManager(Generic[T]):
    """
    Ordered, thread-safe list of subscriber callables.

    Type Parameters:
        T: The subscriber callable type (e.g. ``Callable[[TunerReading], None]``)

    Thread Safety:
        All operations are thread-safe. The lock is released before calling
        subscribers, so a subscriber may subscribe or unsubscribe others (or
        itself) while being notified.

    Example:
        ```python
        channel = ObserverManager[Callable[[TunerReading], None]](observer_type_name="tuner")
        channel.register(display.on_tuner)
        channel.notify(TunerReading(frequency=440.0, note="A4", cents=0))
        ```
    """

    def __init__(self, lock: "Lock | None" = None, observer_type_name: str = "observer"):
        """
        Initialize the observer manager.

        Args:
            lock: Optional threading lock to use. If None, creates a new lock.
            observer_type_name: Name of the channel for logging (e.g., "tuner")
        """
        self._observers: list[T] = []
        self._lock = lock or Lock()
        self._observer_type_name = observer_type_name

    def register(self, observer: T) -> None:
        """Register a subscriber (idempotent, duplicates are ignored)."""
        with self._lock:
            if observer not in self._observers:
                self._observers.append(observer)
                logger.debug(f"Registered {self._observer_type_name} subscriber: {observer}")
            else:
                logger.debug(f"{self._observer_type_name} subscriber already registered: {observer}")

    def unregister(self, observer: T) -> None:
        """Unregister a subscriber. Unknown subscribers are logged and ignored."""
        with self._lock:
            if observer in self._observers:
                self._observers.remove(observer)
                logger.debug(f"Unregistered {self._observer_type_name} subscriber: {observer}")
            else:
                logger.warning(
                    f"Attempted to unregister unknown {self._observer_type_name} subscriber: {observer}"
                )

    def notify(self, *args: Any, **kwargs: Any) -> int:
        """
        Call every subscriber with the given arguments.

        The subscriber list is copied under the lock and called without it.
        Exceptions raised by a subscriber are logged and do not reach the
        caller or the remaining subscribers.

        Returns:
            Number of subscribers that returned without raising
        """
        with self._lock:
            observers = list(self._observers)

        delivered = 0
        for observer in observers:
            try:
                observer(*args, **kwargs)
                delivered += 1
            except Exception as e:
                logger.error(
                    f"Error notifying {self._observer_type_name} subscriber {observer}: {e}",
                    exc_info=True,
                )
        return delivered

    def clear(self) -> None:
        """Remove all registered subscribers."""
        with self._lock:
            count = len(self._observers)
            self._observers.clear()
            if count > 0:
                logger.debug(f"Cleared {count} {self._observer_type_name} subscriber(s)")

    def __contains__(self, observer: T) -> bool:
        with self._lock:
            return observer in self._observers

    def __len__(self) -> int:
        with self._lock:
            return len(self._observers)

    def __bool__(self) -> bool:
        with self._lock:
            return len(self._observers) > 0
