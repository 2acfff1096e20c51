"""Pedalboard model."""

import logging
from pathlib import Path

from .pedal import PedalInstance

logger = logging.getLogger(__name__)


class Pedalboard:
    """
    A saved pedalboard bundle.

    The pedal list is resolved lazily by the pedalboard state loader and kept
    here afterwards. It is never re-parsed automatically: live changes coming
    from the host are applied to the resolved list with ``apply_parameter``
    and ``apply_file_parameter``.
    """

    def __init__(self, name: str, path: Path, ttl_name: str):
        """
        Initialize a pedalboard.

        Args:
            name: Display name
            path: Bundle directory
            ttl_name: Main instance-graph file, relative to the bundle
        """
        self.name = name
        self.path = Path(path)
        self.ttl_name = ttl_name
        self._pedals: list[PedalInstance] | None = None

    @property
    def ttl_path(self) -> Path:
        return self.path / self.ttl_name

    @property
    def is_resolved(self) -> bool:
        """True once the pedal list has been computed."""
        return self._pedals is not None

    @property
    def pedals(self) -> list[PedalInstance] | None:
        """The resolved pedal list, or None if not loaded yet."""
        return self._pedals

    def set_pedals(self, pedals: list[PedalInstance]) -> None:
        self._pedals = pedals

    def clear_pedals(self) -> None:
        """Forget the resolved pedal list so the next request re-parses the bundle."""
        self._pedals = None

    def find_pedal(self, instance: str) -> PedalInstance | None:
        """Find a resolved pedal by host-side instance reference."""
        for pedal in self._pedals or []:
            if pedal.matches_instance(instance):
                return pedal
        return None

    def apply_parameter(self, instance: str, symbol: str, value: float) -> bool:
        """
        Apply a control value change to the resolved pedal list.

        Returns:
            True if a resolved pedal matched the instance
        """
        pedal = self.find_pedal(instance)
        if pedal is None:
            logger.debug(f"{self.name}: no resolved pedal for instance '{instance}'")
            return False
        pedal.set_value(symbol, value)
        return True

    def apply_file_parameter(self, instance: str, param_uri: str, path: str | None) -> bool:
        """
        Apply a file parameter change to the resolved pedal list.

        Returns:
            True if a resolved pedal matched the instance
        """
        pedal = self.find_pedal(instance)
        if pedal is None:
            logger.debug(f"{self.name}: no resolved pedal for instance '{instance}'")
            return False
        pedal.set_file_value(param_uri, path)
        return True

    def __repr__(self) -> str:
        return f"Pedalboard({self.name!r}, {str(self.path)!r})"
