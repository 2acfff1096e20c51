"""Static plugin schema extracted from LV2 bundles."""

from pydantic import BaseModel, ConfigDict, Field


class ScalePoint(BaseModel):
    """A named discrete value on an enumeration control."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(description="Display label")
    value: float = Field(description="Numeric value sent to the host")


class ControlParameter(BaseModel):
    """A numeric control port of a plugin."""

    model_config = ConfigDict(frozen=True)

    symbol: str = Field(description="Port symbol, unique within the plugin")
    name: str = Field(description="Display name (defaults to the symbol)")
    minimum: float = Field(default=0.0, description="Lower bound")
    maximum: float = Field(default=1.0, description="Upper bound")
    default: float = Field(default=0.0, description="Default value")
    toggle: bool = Field(default=False, description="On/off switch")
    integer: bool = Field(default=False, description="Only whole numbers are meaningful")
    trigger: bool = Field(default=False, description="Momentary trigger")
    enumeration: bool = Field(default=False, description="Value is one of scale_points")
    output: bool = Field(default=False, description="Plugin writes this port (meter/readout)")
    scale_points: list[ScalePoint] = Field(
        default_factory=list, description="Enumeration choices sorted by value"
    )

    def normalize(self, value: float) -> float:
        """Clamp a value into range, rounding it for integer and toggle ports."""
        low, high = sorted((self.minimum, self.maximum))
        value = min(max(value, low), high)
        if self.toggle:
            return high if value > (low + high) / 2 else low
        if self.integer:
            return float(round(value))
        return value

    def label_for(self, value: float) -> str | None:
        """Return the scale point label matching value, if any."""
        for point in self.scale_points:
            if point.value == value:
                return point.label
        return None


class FileParameter(BaseModel):
    """A writable path-valued plugin parameter (sample, IR, model file...)."""

    model_config = ConfigDict(frozen=True)

    uri: str = Field(description="Parameter identifier")
    label: str = Field(description="Display label")
    file_types: list[str] = Field(
        default_factory=list, description="Accepted file-type tags (normalized ids)"
    )
    path: str | None = Field(default=None, description="Current file path, if known")


class PluginDescription(BaseModel):
    """Everything the UI needs to know about one installed plugin."""

    model_config = ConfigDict(frozen=True)

    uri: str = Field(description="Plugin identifier")
    bundle_path: str = Field(description="Directory of the bundle providing the plugin")
    label: str = Field(description="Display label")
    brand: str | None = Field(default=None, description="Maker shown on the pedal")
    thumbnail_path: str | None = Field(default=None, description="Small GUI image")
    screenshot_path: str | None = Field(default=None, description="Full GUI image")
    control_parameters: list[ControlParameter] = Field(default_factory=list)
    file_parameters: list[FileParameter] = Field(default_factory=list)

    def get_control(self, symbol: str) -> ControlParameter | None:
        """Look up a control parameter by symbol."""
        for param in self.control_parameters:
            if param.symbol == symbol:
                return param
        return None

    def get_file_parameter(self, uri: str) -> FileParameter | None:
        """Look up a file parameter by identifier."""
        for param in self.file_parameters:
            if param.uri == uri:
                return param
        return None


# Bump whenever PluginDescription (or a nested model) gains a field, so old
# documents are discarded instead of yielding half-populated descriptions.
CACHE_SCHEMA_VERSION = 2


class PluginCacheDocument(BaseModel):
    """On-disk form of the plugin metadata cache."""

    version: int = Field(default=CACHE_SCHEMA_VERSION, description="Schema version")
    plugins: dict[str, PluginDescription] = Field(
        default_factory=dict, description="Plugin identifier -> description"
    )

    @property
    def is_current(self) -> bool:
        """True if the document was written with the current schema."""
        return self.version == CACHE_SCHEMA_VERSION
