"""Pedalboards: library enumeration, banks and instance state resolution."""

from .banks import load_banks
from .library import list_pedalboards, read_pedalboard
from .loader import PedalboardStateLoader
from .state_file import parse_file_parameter_state, read_file_parameter_state

__all__ = [
    "PedalboardStateLoader",
    "list_pedalboards",
    "load_banks",
    "parse_file_parameter_state",
    "read_file_parameter_state",
    "read_pedalboard",
]
