"""TCP connection manager for the HMI protocol.

One accept thread hands every connection to its own daemon thread. Each
thread owns its Session (socket plus frame buffer) and feeds complete
frames to the shared CommandDispatcher, so acknowledgements always go back
to the peer that sent the frame and are written in arrival order.

The peer list is the only state shared between sessions. It is guarded by
a lock and copied before broadcasting.
"""

import logging
import socket
import threading

from pedalhmi.exceptions import ConnectionLimitError, ServerBindError

from . import constants
from .commands import encode_frame
from .dispatcher import CommandDispatcher
from .framing import FrameReader

logger = logging.getLogger(__name__)

RECV_SIZE = 4096


class Session:
    """
    One connected peer.

    The frame buffer is only touched by the thread running ``serve``.
    Writes are serialized by a per-session lock because broadcasts come
    from other threads.
    """

    def __init__(
        self,
        sock: socket.socket,
        peer: str,
        dispatcher: CommandDispatcher,
        max_frame_bytes: int | None = None,
        timeout: float = 1.0,
    ):
        """
        Initialize session.

        Args:
            sock: Connected socket
            peer: Peer description for logging ("host:port")
            dispatcher: Dispatcher receiving this peer's frames
            max_frame_bytes: Buffer ceiling for an unterminated frame
            timeout: Receive timeout so the thread notices shutdown
        """
        self.peer = peer
        self._sock = sock
        self._sock.settimeout(timeout)
        self._dispatcher = dispatcher
        self._reader = FrameReader(max_buffer=max_frame_bytes, peer=peer)
        self._write_lock = threading.Lock()
        self._closed = threading.Event()

    @property
    def is_open(self) -> bool:
        return not self._closed.is_set()

    def send(self, command: str) -> bool:
        """
        Write one frame to the peer.

        Returns:
            False if the peer is gone (the session is then closed)
        """
        if self._closed.is_set():
            return False
        data = encode_frame(command)
        try:
            with self._write_lock:
                self._sock.sendall(data)
        except OSError as e:
            logger.warning(f"<{self.peer}> write failed: {e}")
            self.close()
            return False
        logger.debug(f"<{self.peer}> sent: {command}")
        return True

    def send_response(self, status: int, data: str | None = None) -> None:
        """Acknowledge the frame being processed."""
        if data is not None:
            self.send(f"{constants.RESPONSE} {status} {data}")
        else:
            self.send(f"{constants.RESPONSE} {status}")

    def serve(self) -> None:
        """Read and dispatch frames until the peer disconnects or the session is closed."""
        while not self._closed.is_set():
            try:
                chunk = self._sock.recv(RECV_SIZE)
            except TimeoutError:
                continue
            except OSError as e:
                if not self._closed.is_set():
                    logger.warning(f"<{self.peer}> read failed: {e}")
                break

            if not chunk:
                break

            try:
                frames = self._reader.feed(chunk)
            except ConnectionLimitError as e:
                logger.warning(f"<{self.peer}> {e.get_full_message()}")
                break

            for frame in frames:
                self._dispatcher.dispatch(frame, self)

        self.close()

    def close(self) -> None:
        if self._closed.is_set():
            return
        self._closed.set()
        self._reader.reset()
        try:
            self._sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            # Peer already gone
            pass
        self._sock.close()


class HmiServer:
    """
    Accepts HMI connections and broadcasts outbound commands.

    Several peers may be connected at once for broadcast purposes; the
    request/response pairing is per peer.

    Example:
        ```python
        with HmiServer(dispatcher, port=9898) as server:
            server.broadcast("tuner-on")
        ```
    """

    def __init__(
        self,
        dispatcher: CommandDispatcher,
        host: str = "0.0.0.0",
        port: int = constants.DEFAULT_PORT,
        max_frame_bytes: int | None = 65536,
        socket_timeout: float = 1.0,
    ):
        """
        Initialize server.

        Args:
            dispatcher: Dispatcher shared by all sessions
            host: Address to bind
            port: Port to bind (0 picks a free port)
            max_frame_bytes: Per-session buffer ceiling
            socket_timeout: Timeout of accept/recv calls in seconds
        """
        self._dispatcher = dispatcher
        self._host = host
        self._port = port
        self._max_frame_bytes = max_frame_bytes
        self._socket_timeout = socket_timeout

        self._server_sock: socket.socket | None = None
        self._accept_thread: threading.Thread | None = None
        self._running = False
        self._sessions: list[Session] = []
        self._threads: list[threading.Thread] = []
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def address(self) -> tuple[str, int]:
        """Bound (host, port); the real port once started."""
        if self._server_sock is not None:
            host, port = self._server_sock.getsockname()[:2]
            return host, port
        return self._host, self._port

    @property
    def peer_count(self) -> int:
        with self._lock:
            return len(self._sessions)

    @property
    def peers(self) -> list[str]:
        with self._lock:
            return [session.peer for session in self._sessions]

    def start(self) -> None:
        """
        Bind the listening socket and start accepting connections.

        Raises:
            ServerBindError: If the address cannot be bound
        """
        if self._running:
            logger.warning("HmiServer is already running")
            return

        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((self._host, self._port))
            sock.listen()
        except OSError as e:
            sock.close()
            raise ServerBindError(self._host, self._port, str(e)) from e
        sock.settimeout(self._socket_timeout)

        self._server_sock = sock
        self._running = True
        self._accept_thread = threading.Thread(
            target=self._accept_loop, name="hmi-accept", daemon=True
        )
        self._accept_thread.start()

        host, port = self.address
        logger.info(f"HMI server is running at <{host}:{port}>")

    def stop(self) -> None:
        """Stop accepting, close every session and wait for their threads."""
        if not self._running:
            return
        self._running = False

        if self._server_sock is not None:
            self._server_sock.close()

        with self._lock:
            sessions = list(self._sessions)
            threads = list(self._threads)
        for session in sessions:
            session.close()

        if self._accept_thread and self._accept_thread.is_alive():
            self._accept_thread.join(timeout=self._socket_timeout * 2)
        for thread in threads:
            if thread.is_alive():
                thread.join(timeout=self._socket_timeout * 2)

        self._server_sock = None
        logger.info("HMI server stopped")

    def broadcast(self, command: str) -> int:
        """
        Write a command to every connected peer without waiting for replies.

        Returns:
            Number of peers the frame was written to
        """
        with self._lock:
            sessions = list(self._sessions)

        sent = 0
        for session in sessions:
            if session.send(command):
                sent += 1
            else:
                self._remove(session)
        logger.debug(f"Broadcast to {sent} peer(s): {command}")
        return sent

    def _accept_loop(self) -> None:
        while self._running:
            try:
                conn, addr = self._server_sock.accept()
            except TimeoutError:
                continue
            except OSError:
                if self._running:
                    logger.exception("Accept failed")
                break

            peer = f"{addr[0]}:{addr[1]}"
            session = Session(
                conn,
                peer,
                self._dispatcher,
                max_frame_bytes=self._max_frame_bytes,
                timeout=self._socket_timeout,
            )
            thread = threading.Thread(
                target=self._serve_session, args=(session,), name=f"hmi-{peer}", daemon=True
            )
            with self._lock:
                self._sessions.append(session)
                self._threads.append(thread)
            logger.info(f"<{peer}> connected.")
            thread.start()

    def _serve_session(self, session: Session) -> None:
        try:
            session.serve()
        except Exception:
            logger.exception(f"<{session.peer}> session crashed")
            session.close()
        finally:
            self._remove(session)
            with self._lock:
                current = threading.current_thread()
                if current in self._threads:
                    self._threads.remove(current)
            logger.info(f"<{session.peer}> disconnected.")

    def _remove(self, session: Session) -> None:
        with self._lock:
            if session in self._sessions:
                self._sessions.remove(session)

    def __enter__(self):
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.stop()
        return False
