"""Observer protocol for components that consume protocol events."""

from typing import Protocol, runtime_checkable

from .events import ProtocolEvent


@runtime_checkable
class HmiObserver(Protocol):
    """
    Observer that receives every protocol event.

    Components that only care about one kind of event should subscribe a
    plain callable for that event type on the EventBus instead.
    """

    def on_hmi_event(self, event: ProtocolEvent) -> None:
        """
        Handle a protocol event.

        Args:
            event: The event, one of the ProtocolEvent subclasses

        Threading:
            Called synchronously from the session thread that received the
            command. Implementations should return quickly: the peer is
            waiting for its acknowledgement.

        Error Handling:
            Exceptions are caught and logged by the EventBus. They do not
            affect the acknowledgement sent to the peer.
        """
        ...
