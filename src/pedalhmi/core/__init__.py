"""Application facade."""

from .bridge import HmiBridge

__all__ = ["HmiBridge"]
