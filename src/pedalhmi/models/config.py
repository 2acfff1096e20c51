"""Application configuration model."""

import os
from pathlib import Path

from pydantic import BaseModel, Field, field_serializer, field_validator

from pedalhmi.model_manager.persistence import PydanticPersistence

from .file_types import default_user_files_dir

DEFAULT_CONFIG_DIR = Path.home() / ".pedalhmi"
DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_DIR / "config.json"


def _default_lv2_paths() -> list[Path]:
    return [Path("/usr/lib/lv2"), Path("/usr/local/lib/lv2"), Path.home() / ".lv2"]


def _default_data_dir() -> Path:
    return Path(os.environ.get("MOD_DATA_DIR", str(Path.home() / "data")))


class AppConfig(BaseModel):
    """Application configuration and settings."""

    # Protocol server
    host: str = Field(default="0.0.0.0", description="Address the HMI server binds to")
    port: int = Field(default=9898, ge=0, le=65535, description="TCP port of the HMI server")
    max_frame_bytes: int = Field(
        default=65536,
        gt=0,
        description="Largest unterminated frame a session may buffer before it is dropped",
    )
    socket_timeout: float = Field(
        default=1.0,
        gt=0,
        description="Receive timeout (seconds) so session threads notice shutdown",
    )

    # Plugin metadata
    lv2_paths: list[Path] = Field(
        default_factory=_default_lv2_paths,
        description="LV2 bundle roots, searched in order (first match wins)",
    )
    cache_path: Path = Field(
        default_factory=lambda: Path.home() / ".cache" / "pedalhmi" / "lv2_cache.json",
        description="Plugin metadata cache document",
    )

    # Host data
    pedalboards_dir: Path = Field(
        default_factory=lambda: Path.home() / ".pedalboards",
        description="Directory holding pedalboard bundles",
    )
    user_files_dir: Path = Field(
        default_factory=default_user_files_dir,
        description="Root of user files (samples, IRs, models)",
    )
    data_dir: Path = Field(
        default_factory=_default_data_dir,
        description="Host data directory containing banks.json",
    )

    @field_validator("cache_path", "pedalboards_dir", "user_files_dir", "data_dir")
    @classmethod
    def expand_path(cls, path: Path) -> Path:
        """Expand a leading ~."""
        return path.expanduser()

    @field_validator("lv2_paths")
    @classmethod
    def expand_paths(cls, paths: list[Path]) -> list[Path]:
        return [path.expanduser() for path in paths]

    @field_serializer("cache_path", "pedalboards_dir", "user_files_dir", "data_dir")
    def serialize_path(self, path: Path) -> str:
        """Serialize Path to string."""
        return str(path)

    @field_serializer("lv2_paths")
    def serialize_paths(self, paths: list[Path]) -> list[str]:
        return [str(path) for path in paths]

    @property
    def banks_path(self) -> Path:
        return self.data_dir / "banks.json"

    @classmethod
    def load_or_default(cls, path: Path | None = None) -> "AppConfig":
        """
        Load config from file or return default.

        Args:
            path: Path to config file. If None, uses default location
                  (~/.pedalhmi/config.json).

        Raises:
            ConfigFileInvalidError: If config file has invalid JSON syntax
            ConfigValidationError: If config values fail validation
        """
        if path is None:
            path = DEFAULT_CONFIG_PATH
        return PydanticPersistence.load_json_or_default(path, cls)

    def save(self, path: Path | None = None) -> None:
        """Save config to file."""
        if path is None:
            path = DEFAULT_CONFIG_PATH
        PydanticPersistence.save_json(self, path)
