"""Plugin metadata exceptions.

- MetadataError: Base class for plugin/pedalboard description problems
- BundleParseError: A description file inside a bundle could not be parsed
"""

from pathlib import Path

from .base import PedalHmiError


class MetadataError(PedalHmiError):
    """Plugin or pedalboard metadata could not be read."""

    def __init__(self, user_message: str, path: Path | None = None, **kwargs):
        """
        Initialize metadata error.

        Args:
            user_message: User-friendly error message
            path: File or bundle involved (if applicable)
        """
        kwargs.setdefault("recoverable", True)
        super().__init__(user_message, **kwargs)
        self.path = path


class BundleParseError(MetadataError):
    """A Turtle description file is unreadable or malformed."""

    def __init__(self, path: Path, original_error: str):
        """
        Initialize bundle parse error.

        Args:
            path: The description file that failed to parse
            original_error: Parser or I/O error message
        """
        super().__init__(
            user_message=f"Cannot parse {path.name}",
            technical_message=f"Failed to parse {path}: {original_error}",
            path=path,
            recovery_hint="Reinstall the plugin bundle or run 'pedalhmi plugins refresh'",
        )
        self.original_error = original_error
