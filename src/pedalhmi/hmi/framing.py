"""Splitting a byte stream into sentinel-terminated frames."""

import logging

from pedalhmi.exceptions import FrameTooLargeError

from .constants import SENTINEL

logger = logging.getLogger(__name__)


class FrameReader:
    """
    Per-connection frame buffer.

    Bytes are appended in arrival order. Every complete frame (the bytes
    before a zero byte) is decoded as UTF-8, stripped of surrounding
    whitespace and returned; frames that are empty after stripping are
    dropped. The output does not depend on how the stream was chunked.

    Only the thread serving the connection may use a reader.
    """

    def __init__(self, max_buffer: int | None = None, peer: str | None = None):
        """
        Initialize frame reader.

        Args:
            max_buffer: Largest number of buffered bytes without a terminator
                        (None = unbounded)
            peer: Peer description used in errors
        """
        self._buffer = bytearray()
        self._max_buffer = max_buffer
        self._peer = peer

    def feed(self, data: bytes) -> list[str]:
        """
        Append a chunk and extract the complete frames it finished.

        Raises:
            FrameTooLargeError: If the unterminated remainder exceeds max_buffer
        """
        self._buffer.extend(data)

        frames: list[str] = []
        while True:
            end = self._buffer.find(SENTINEL)
            if end == -1:
                break
            raw = bytes(self._buffer[:end])
            del self._buffer[: end + 1]

            text = raw.decode("utf-8", errors="replace").strip()
            if text:
                frames.append(text)
            else:
                logger.debug("Dropping empty frame")

        if self._max_buffer is not None and len(self._buffer) > self._max_buffer:
            size = len(self._buffer)
            self._buffer.clear()
            raise FrameTooLargeError(size, self._max_buffer, peer=self._peer)

        return frames

    @property
    def pending(self) -> int:
        """Number of buffered bytes not yet part of a complete frame."""
        return len(self._buffer)

    def reset(self) -> None:
        self._buffer.clear()
