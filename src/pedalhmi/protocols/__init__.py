"""Protocol events and the channels that carry them to consumers.

- Events: immutable notifications produced from inbound host commands
- Observers: protocol for components that react to every event
- EventBus: one subscriber channel per event type
"""

from .bus import EventBus
from .events import (
    EVENT_TYPES,
    FileParameterChanged,
    MenuItemChanged,
    PedalboardChanged,
    PedalboardCleared,
    PedalboardLoaded,
    PedalboardNameSet,
    ProfilesList,
    ProtocolEvent,
    SnapshotsList,
    TunerReading,
)
from .observers import HmiObserver

__all__ = [
    "EVENT_TYPES",
    # Bus
    "EventBus",
    # Events
    "FileParameterChanged",
    # Observers
    "HmiObserver",
    "MenuItemChanged",
    "PedalboardChanged",
    "PedalboardCleared",
    "PedalboardLoaded",
    "PedalboardNameSet",
    "ProfilesList",
    "ProtocolEvent",
    "SnapshotsList",
    "TunerReading",
]
