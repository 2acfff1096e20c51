"""File types accepted by plugin file parameters.

Plugins declare accepted file types with free-form tags ("nam", "nammodel",
"cabsim", ...). Tags are normalized to the ids of the registry below, which
also knows where the host keeps user files of each type.
"""

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

DEFAULT_USER_FILES_DIR = Path("/data/user-files")


def default_user_files_dir() -> Path:
    """User files root, honoring MOD_USER_FILES_DIR."""
    return Path(os.environ.get("MOD_USER_FILES_DIR", str(DEFAULT_USER_FILES_DIR)))


class FileTypeConfig(BaseModel):
    """A kind of user file and where the host stores it."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Normalized file type id")
    label: str = Field(description="Display label")
    directory: str = Field(description="Sub-directory of the user files root")
    extensions: tuple[str, ...] = Field(description="Lower-case extensions including the dot")

    def directory_path(self, base_dir: Path | None = None) -> Path:
        return (base_dir or default_user_files_dir()) / self.directory

    def matches_file(self, path: str | Path) -> bool:
        return str(path).lower().endswith(self.extensions)


class FileInfo(BaseModel):
    """A user file that a file parameter can point to."""

    model_config = ConfigDict(frozen=True)

    path: str
    name: str
    file_type: FileTypeConfig


FILE_TYPES: dict[str, FileTypeConfig] = {
    config.id: config
    for config in (
        FileTypeConfig(
            id="audiosample",
            label="Audio Samples",
            directory="Audio Samples",
            extensions=(".wav", ".flac", ".ogg", ".mp3", ".aiff", ".aif"),
        ),
        FileTypeConfig(
            id="cabsim",
            label="Speaker Cabinets IRs",
            directory="Speaker Cabinets IRs",
            extensions=(".wav", ".flac"),
        ),
        FileTypeConfig(
            id="ir",
            label="Reverb IRs",
            directory="Reverb IRs",
            extensions=(".wav", ".flac"),
        ),
        FileTypeConfig(
            id="sf2",
            label="SF2 Instruments",
            directory="SF2 Instruments",
            extensions=(".sf2", ".sf3"),
        ),
        FileTypeConfig(
            id="sfz",
            label="SFZ Instruments",
            directory="SFZ Instruments",
            extensions=(".sfz",),
        ),
        FileTypeConfig(
            id="aidadspmodel",
            label="Aida DSP Models",
            directory="Aida DSP Models",
            extensions=(".aidax", ".json"),
        ),
        FileTypeConfig(
            id="nammodel",
            label="NAM Models",
            directory="NAM Models",
            extensions=(".nam",),
        ),
        FileTypeConfig(
            id="midifile",
            label="MIDI Files",
            directory="MIDI Files",
            extensions=(".mid", ".midi"),
        ),
    )
}

# Raw spellings seen in plugin descriptions -> registry id
FILE_TYPE_ALIASES: dict[str, str] = {
    "nam": "nammodel",
    "aidax": "aidadspmodel",
    "aida": "aidadspmodel",
    "sf3": "sf2",
    "mid": "midifile",
    "midi": "midifile",
    "midiclip": "midifile",
    "midisong": "midifile",
    "wav": "audiosample",
    "sample": "audiosample",
    "samples": "audiosample",
    "reverbir": "ir",
    "cabinet": "cabsim",
}


def normalize_file_type(raw: str) -> str | None:
    """
    Map one raw file-type tag to its shared id.

    Accepts bare tags ("nam"), typed references ending in a fragment or path
    component ("http://moddevices.com/ns/mod#nammodel"), any case and
    surrounding whitespace. Unknown tags are returned lower-cased.

    Returns:
        Normalized id, or None for an empty tag
    """
    tag = raw.strip().rstrip("/")
    tag = tag.rsplit("#", 1)[-1].rsplit("/", 1)[-1].strip().lower()
    if not tag:
        return None
    return FILE_TYPE_ALIASES.get(tag, tag)


def normalize_file_types(raw_tags: Iterable[str]) -> list[str]:
    """
    Normalize a collection of tags, splitting comma-separated strings.

    Order of first appearance is kept and duplicates are dropped.
    """
    result: list[str] = []
    for raw in raw_tags:
        for part in raw.split(","):
            tag = normalize_file_type(part)
            if tag and tag not in result:
                result.append(tag)
    return result


def get_file_type(file_type_id: str) -> FileTypeConfig | None:
    """Look up a registry entry by id or alias."""
    normalized = normalize_file_type(file_type_id)
    if normalized is None:
        return None
    return FILE_TYPES.get(normalized)


def list_files(file_types: Iterable[str], base_dir: Path | None = None) -> list[FileInfo]:
    """
    List user files matching any of the given file types.

    Directories that don't exist are skipped. Results are sorted by file
    name, case-insensitively.
    """
    configs: list[FileTypeConfig] = []
    for file_type in file_types:
        config = get_file_type(file_type)
        if config is not None and config not in configs:
            configs.append(config)

    files: list[FileInfo] = []
    for config in configs:
        directory = config.directory_path(base_dir)
        if not directory.is_dir():
            logger.debug(f"No user files directory for {config.id}: {directory}")
            continue
        try:
            files.extend(
                FileInfo(path=str(entry), name=entry.name, file_type=config)
                for entry in directory.rglob("*")
                if entry.is_file() and config.matches_file(entry.name)
            )
        except OSError as e:
            logger.warning(f"Cannot list user files in {directory}: {e}")

    files.sort(key=lambda info: info.name.lower())
    return files
