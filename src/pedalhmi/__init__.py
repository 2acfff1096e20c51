"""pedalhmi: control-plane bridge between a touchscreen HMI and an LV2 pedalboard host."""

__version__ = "0.1.0"

# Application facade
from .core import HmiBridge

__all__ = ["HmiBridge"]
