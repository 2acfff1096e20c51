"""Shared utilities for Pydantic model persistence.

Loads and saves Pydantic models to/from JSON files. Used for the
application configuration and for the plugin metadata cache document.

Safety Features:
    - Atomic writes using temp file + rename
    - Optional .bak backup before overwriting
    - Low-level Pydantic/IO errors are converted into ConfigurationError
      subclasses with recovery hints
"""

import logging
import shutil
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from pedalhmi.exceptions import ConfigFileInvalidError, ConfigurationError, wrap_pydantic_error

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class PydanticPersistence:
    """
    Stateless load/save helpers for Pydantic models.

    Example Usage:
        ```python
        config = PydanticPersistence.load_json(Path("config.json"), AppConfig)
        PydanticPersistence.save_json(config, Path("config.json"))
        ```

    Thread-Safety:
        All methods operate on their parameters only. Callers writing the
        same file from several threads must serialize those writes.
    """

    @staticmethod
    def load_json(path: Path, model_type: type[T]) -> T:
        """
        Load and validate a Pydantic model from a JSON file.

        Args:
            path: Path to the JSON file to load
            model_type: The Pydantic model class to validate against

        Returns:
            Validated model instance

        Raises:
            FileNotFoundError: If the file doesn't exist
            ConfigFileInvalidError: If the file is empty, unreadable or not JSON
            ConfigValidationError: If the JSON content fails Pydantic validation
        """
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        try:
            json_content = path.read_text(encoding="utf-8")

            if not json_content or not json_content.strip():
                raise ConfigFileInvalidError(str(path), "File is empty")

            model = model_type.model_validate_json(json_content)

            logger.debug(f"Loaded {model_type.__name__} from {path}")
            return model

        except ValidationError as e:
            logger.error(f"Validation error loading {model_type.__name__} from {path}: {e}")
            raise wrap_pydantic_error(e, str(path)) from e

        except ConfigurationError:
            raise

        except Exception as e:
            logger.error(f"Unexpected error loading {model_type.__name__} from {path}: {e}")
            raise ConfigFileInvalidError(str(path), f"Unexpected error: {e}") from e

    @staticmethod
    def save_json(
        data: BaseModel,
        path: Path,
        indent: int | None = 2,
        create_parents: bool = True,
        backup: bool = False,
    ) -> None:
        """
        Save a Pydantic model to a JSON file using an atomic write.

        Args:
            data: The Pydantic model instance to save
            path: Path where the file should be saved
            indent: JSON indentation level (None for compact output)
            create_parents: Create parent directories if they don't exist
            backup: Copy an existing file to ``<name>.bak`` before overwriting

        Raises:
            OSError: If the file cannot be written (permission denied, disk full, etc.)
            ConfigurationError: If serialization fails
        """
        try:
            if create_parents and path.parent:
                path.parent.mkdir(parents=True, exist_ok=True)

            if backup and path.exists():
                backup_path = path.with_suffix(path.suffix + ".bak")
                shutil.copy2(path, backup_path)
                logger.debug(f"Created backup: {backup_path}")

            json_content = data.model_dump_json(indent=indent)

            temp_path = path.with_suffix(path.suffix + ".tmp")
            try:
                temp_path.write_text(json_content, encoding="utf-8")
                temp_path.replace(path)
                logger.debug(f"Saved {type(data).__name__} to {path}")
            finally:
                if temp_path.exists():
                    temp_path.unlink()

        except OSError as e:
            logger.error(f"OS error saving {type(data).__name__} to {path}: {e}")
            raise

        except Exception as e:
            logger.error(f"Unexpected error saving {type(data).__name__} to {path}: {e}")
            raise ConfigurationError(
                user_message=f"Failed to save {path.name}",
                technical_message=f"Failed to save {type(data).__name__} to {path}: {e}",
                recovery_hint="Check file permissions and disk space.",
            ) from e

    @staticmethod
    def load_json_or_default(
        path: Path, model_type: type[T], default_factory: Callable[[], T] | None = None
    ) -> T:
        """
        Load a model from JSON, or return a default if the file doesn't exist.

        Args:
            path: Path to the JSON file
            model_type: The Pydantic model class
            default_factory: Optional callable that returns a default instance.
                           If None, calls model_type() to get defaults.

        Raises:
            ConfigFileInvalidError: If the file exists but has invalid JSON syntax
            ConfigValidationError: If the file exists but has invalid values
        """
        try:
            return PydanticPersistence.load_json(path, model_type)
        except FileNotFoundError:
            logger.info(f"File not found: {path}, using default {model_type.__name__}")
            if default_factory:
                return default_factory()
            return model_type()

    @staticmethod
    def delete(path: Path) -> bool:
        """
        Delete a persisted document if present.

        Returns:
            True if a file was removed, False if there was nothing to delete
        """
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        logger.debug(f"Deleted {path}")
        return True
