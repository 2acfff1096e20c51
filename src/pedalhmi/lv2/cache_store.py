"""Disk persistence of extracted plugin descriptions."""

import logging
from collections.abc import Mapping
from pathlib import Path

from pedalhmi.exceptions import ConfigurationError
from pedalhmi.model_manager import PydanticPersistence
from pedalhmi.models import PluginCacheDocument, PluginDescription

logger = logging.getLogger(__name__)


class DiskCacheStore:
    """
    Loads and saves the plugin cache document.

    The document is the source of truth at cold start. A missing, corrupt or
    outdated document is never an error: it reads as an empty cache.
    Callers must serialize ``save`` calls (the plugin cache uses a single
    background writer).
    """

    def __init__(self, path: Path):
        self.path = Path(path).expanduser()

    def load(self) -> dict[str, PluginDescription]:
        """
        Read the cached descriptions.

        Returns:
            Plugin identifier -> description (empty on a cold cache)
        """
        try:
            document = PydanticPersistence.load_json(self.path, PluginCacheDocument)
        except FileNotFoundError:
            logger.debug(f"No plugin cache at {self.path}")
            return {}
        except ConfigurationError as e:
            logger.warning(f"Ignoring unreadable plugin cache {self.path}: {e.get_full_message()}")
            return {}

        if not document.is_current:
            logger.warning(
                f"Ignoring plugin cache {self.path}: schema version {document.version} is outdated"
            )
            return {}

        logger.info(f"Loaded {len(document.plugins)} plugins from disk cache")
        return dict(document.plugins)

    def save(self, plugins: Mapping[str, PluginDescription]) -> None:
        """
        Replace the document with the given descriptions.

        Raises:
            OSError: If the file cannot be written
            ConfigurationError: If serialization fails
        """
        document = PluginCacheDocument(plugins=dict(plugins))
        PydanticPersistence.save_json(document, self.path, indent=None)
        logger.debug(f"Saved {len(plugins)} plugins to {self.path}")

    def delete(self) -> bool:
        """Remove the document. Returns False if there was none."""
        try:
            return PydanticPersistence.delete(self.path)
        except OSError as e:
            logger.warning(f"Failed to delete plugin cache {self.path}: {e}")
            return False
