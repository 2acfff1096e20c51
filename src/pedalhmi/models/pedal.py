"""Pedal instance model: one plugin placed on a pedalboard."""

from pydantic import BaseModel, Field

from .plugin import ControlParameter, FileParameter, PluginDescription


class PedalInstance(BaseModel):
    """
    A plugin instance on a pedalboard with its live values.

    The static schema is shared through ``description``; ``values`` and
    ``file_values`` carry the current state and may be updated by protocol
    events after the pedalboard has been resolved.
    """

    instance: str = Field(description="Instance name, unique within the pedalboard")
    plugin_uri: str = Field(description="Identifier of the instantiated plugin")
    instance_number: int = Field(default=0, description="Host-side ordinal of the instance")
    enabled: bool = Field(default=True, description="False when bypassed")
    values: dict[str, float] = Field(
        default_factory=dict, description="Control symbol -> current value"
    )
    file_values: dict[str, str] = Field(
        default_factory=dict, description="File parameter identifier -> current path"
    )
    description: PluginDescription | None = Field(
        default=None, description="Resolved plugin schema (None if the plugin is unknown)"
    )

    @property
    def has_metadata(self) -> bool:
        """True if the plugin was found in the metadata cache."""
        return self.description is not None

    @property
    def label(self) -> str:
        """Display label, falling back to the instance name."""
        if self.description is not None:
            return self.description.label
        return self.instance

    @property
    def brand(self) -> str | None:
        return self.description.brand if self.description else None

    @property
    def thumbnail_path(self) -> str | None:
        return self.description.thumbnail_path if self.description else None

    @property
    def controls(self) -> list[tuple[ControlParameter, float]]:
        """Control parameters paired with their current value (default if unset)."""
        if self.description is None:
            return []
        return [
            (param, self.values.get(param.symbol, param.default))
            for param in self.description.control_parameters
        ]

    @property
    def file_parameters(self) -> list[FileParameter]:
        """File parameters with the current path merged in."""
        if self.description is None:
            return []
        return [
            param.model_copy(update={"path": self.file_values.get(param.uri)})
            for param in self.description.file_parameters
        ]

    def get_value(self, symbol: str) -> float | None:
        """Current value of a control, or its default, or None if unknown."""
        if symbol in self.values:
            return self.values[symbol]
        if self.description is not None:
            param = self.description.get_control(symbol)
            if param is not None:
                return param.default
        return None

    def set_value(self, symbol: str, value: float) -> float:
        """
        Apply a live control change.

        The value is normalized against the schema when the control is known.

        Returns:
            The value actually stored
        """
        if self.description is not None:
            param = self.description.get_control(symbol)
            if param is not None:
                value = param.normalize(value)
        self.values[symbol] = value
        return value

    def set_file_value(self, uri: str, path: str | None) -> None:
        """Apply a live file parameter change (None clears it)."""
        if path:
            self.file_values[uri] = path
        else:
            self.file_values.pop(uri, None)

    def matches_instance(self, name: str) -> bool:
        """
        Check whether a host-side instance reference names this pedal.

        The host may address instances by bare name (``delay``), by graph
        path (``/graph/delay``) or in angle brackets.
        """
        name = name.strip("<>")
        return name == self.instance or name.rsplit("/", 1)[-1] == self.instance
