"""Data models for the HMI bridge."""

from .bank import ALL_PEDALBOARDS_BANK_ID, Bank
from .config import AppConfig
from .file_types import (
    FILE_TYPES,
    FileInfo,
    FileTypeConfig,
    get_file_type,
    list_files,
    normalize_file_type,
    normalize_file_types,
)
from .pedal import PedalInstance
from .pedalboard import Pedalboard
from .plugin import (
    CACHE_SCHEMA_VERSION,
    ControlParameter,
    FileParameter,
    PluginCacheDocument,
    PluginDescription,
    ScalePoint,
)

__all__ = [
    "ALL_PEDALBOARDS_BANK_ID",
    "CACHE_SCHEMA_VERSION",
    "FILE_TYPES",
    "AppConfig",
    "Bank",
    # Plugin schema
    "ControlParameter",
    "FileInfo",
    "FileParameter",
    "FileTypeConfig",
    # Pedalboards
    "PedalInstance",
    "Pedalboard",
    "PluginCacheDocument",
    "PluginDescription",
    "ScalePoint",
    # File types
    "get_file_type",
    "list_files",
    "normalize_file_type",
    "normalize_file_types",
]
