"""CLI commands for pedalhmi."""

from .config import config
from .pedalboards import banks_group, pedalboards_group
from .plugins import plugins_group
from .serve import serve

__all__ = ["banks_group", "config", "pedalboards_group", "plugins_group", "serve"]
