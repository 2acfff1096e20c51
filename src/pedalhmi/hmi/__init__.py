"""HMI protocol engine.

- FrameReader: splits the byte stream into sentinel-terminated frames
- CommandDispatcher: validates inbound commands and publishes their events
- HmiCommands: outbound, fire-and-forget commands
- HmiServer / Session: connection handling and broadcast
"""

from .commands import HmiCommands, encode_frame, format_command
from .dispatcher import CommandDispatcher, Responder
from .framing import FrameReader
from .server import HmiServer, Session

__all__ = [
    "CommandDispatcher",
    "FrameReader",
    "HmiCommands",
    "HmiServer",
    "Responder",
    "Session",
    "encode_frame",
    "format_command",
]
