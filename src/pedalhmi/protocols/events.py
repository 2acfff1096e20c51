"""Protocol events emitted by the command dispatcher.

Each inbound command that carries information for the presentation layer
becomes one of these immutable events:
- Pedalboard events: the host switched, loaded, cleared or renamed a pedalboard
- Tuner events: a pitch reading
- List events: snapshot and profile lists with the current selection
- Menu events: a host menu value changed
- File parameter events: a plugin file parameter now points to another file

Events are point-in-time notifications. The only ordering guarantee is
arrival order on the connection that carried them.
"""

from pydantic import BaseModel, ConfigDict, Field


class ProtocolEvent(BaseModel):
    """Base class for every event published on the event bus."""

    model_config = ConfigDict(frozen=True)


class PedalboardChanged(ProtocolEvent):
    """The host is switching to the pedalboard at ``index``."""

    index: int = Field(description="Pedalboard index in the current bank")


class PedalboardLoaded(ProtocolEvent):
    """The host finished loading a pedalboard."""

    index: int = Field(description="Pedalboard index in the current bank")
    identifier: str = Field(description="Pedalboard bundle identifier as sent by the host")


class PedalboardCleared(ProtocolEvent):
    """The host removed every plugin from the current pedalboard."""


class PedalboardNameSet(ProtocolEvent):
    """The current pedalboard was renamed."""

    name: str


class TunerReading(ProtocolEvent):
    """One tuner measurement."""

    frequency: float = Field(description="Detected frequency in Hz")
    note: str = Field(description="Note name, '?' when no pitch is detected")
    cents: int = Field(description="Offset from the note in cents")

    @property
    def is_valid(self) -> bool:
        """True if the tuner detected a pitch."""
        return self.note != "?"


class SnapshotsList(ProtocolEvent):
    """Snapshots of the current pedalboard."""

    current_index: int = Field(description="Index of the active snapshot (-1 if none)")
    snapshots: list[tuple[int, str]] = Field(
        default_factory=list, description="(index, name) pairs in host order"
    )


class ProfilesList(ProtocolEvent):
    """User profiles known to the host."""

    current_index: int = Field(description="Index of the active profile")
    profiles: list[str] = Field(default_factory=list, description="Profile names in host order")


class MenuItemChanged(ProtocolEvent):
    """A host menu value changed (tempo, bypass, MIDI clock, ...)."""

    menu_id: int
    # Integer or float depending on how the host formatted the literal
    value: int | float


class FileParameterChanged(ProtocolEvent):
    """A plugin file parameter was pointed at another file."""

    instance: str = Field(description="Plugin instance on the current pedalboard")
    param_uri: str = Field(description="File parameter identifier")
    path: str = Field(description="New file path")


EVENT_TYPES: tuple[type[ProtocolEvent], ...] = (
    PedalboardChanged,
    PedalboardLoaded,
    PedalboardCleared,
    PedalboardNameSet,
    TunerReading,
    SnapshotsList,
    ProfilesList,
    MenuItemChanged,
    FileParameterChanged,
)
