"""Protocol and connection exceptions.

This module defines exceptions raised by the HMI protocol engine:
- ProtocolError: Base class for malformed inbound commands
- UnknownCommandError: Verb is not part of the protocol
- CommandArgumentError: Wrong argument count or unparsable argument
- ConnectionLimitError: A peer exceeded a per-session resource limit
- FrameTooLargeError: A peer sent too many bytes without a terminator
- ServerBindError: The listening endpoint could not be bound
"""

from .base import PedalHmiError


class ProtocolError(PedalHmiError):
    """An inbound frame could not be turned into a valid command."""

    def __init__(self, user_message: str, verb: str | None = None, **kwargs):
        """
        Initialize protocol error.

        Args:
            user_message: User-friendly error message
            verb: The command verb involved (if known)
        """
        kwargs.setdefault("recoverable", True)
        super().__init__(user_message, **kwargs)
        self.verb = verb


class UnknownCommandError(ProtocolError):
    """The frame's verb is not recognized."""

    def __init__(self, verb: str):
        """
        Initialize unknown command error.

        Args:
            verb: The unrecognized verb
        """
        super().__init__(
            user_message=f"Unknown command: {verb}",
            verb=verb,
        )


class CommandArgumentError(ProtocolError):
    """A known verb was sent with the wrong number or shape of arguments."""

    def __init__(self, verb: str, reason: str):
        """
        Initialize command argument error.

        Args:
            verb: The command verb
            reason: Why the arguments were rejected
        """
        super().__init__(
            user_message=f"{verb}: {reason}",
            technical_message=f"Invalid arguments for '{verb}': {reason}",
            verb=verb,
        )
        self.reason = reason


class ConnectionLimitError(PedalHmiError):
    """A connected peer exceeded a per-session limit."""

    def __init__(self, user_message: str, peer: str | None = None, **kwargs):
        """
        Initialize connection limit error.

        Args:
            user_message: User-friendly error message
            peer: Peer address description (if known)
        """
        super().__init__(user_message, **kwargs)
        self.peer = peer


class FrameTooLargeError(ConnectionLimitError):
    """Session buffer grew past the configured maximum without a frame terminator."""

    def __init__(self, size: int, limit: int, peer: str | None = None):
        """
        Initialize frame too large error.

        Args:
            size: Current buffer size in bytes
            limit: Configured maximum in bytes
            peer: Peer address description (if known)
        """
        super().__init__(
            user_message="Peer sent an oversized frame",
            technical_message=f"Session buffer {size} bytes exceeds limit of {limit} bytes",
            peer=peer,
            recovery_hint="Increase 'max_frame_bytes' in the configuration if the host sends large frames",
        )
        self.size = size
        self.limit = limit


class ServerBindError(PedalHmiError):
    """The listening socket could not be bound."""

    def __init__(self, host: str, port: int, original_error: str | None = None):
        """
        Initialize server bind error.

        Args:
            host: Address that was requested
            port: Port that was requested
            original_error: The underlying OS error message
        """
        tech_msg = f"Cannot bind {host}:{port}"
        if original_error:
            tech_msg += f": {original_error}"

        super().__init__(
            user_message=f"Cannot listen on {host}:{port}",
            technical_message=tech_msg,
            recoverable=False,
            recovery_hint=(
                "Make sure no other bridge instance is running, or pick another port "
                "with 'pedalhmi serve --port'"
            ),
        )
        self.host = host
        self.port = port
