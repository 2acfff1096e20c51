"""High-level application facade for the HMI bridge."""

import logging
import threading
from pathlib import Path

from pedalhmi.exceptions import handle_errors
from pedalhmi.hmi import CommandDispatcher, HmiCommands, HmiServer
from pedalhmi.lv2 import PluginMetadataCache
from pedalhmi.models import (
    AppConfig,
    Bank,
    FileInfo,
    Pedalboard,
    PedalInstance,
    PluginDescription,
    list_files,
)
from pedalhmi.pedalboards import PedalboardStateLoader, list_pedalboards, load_banks
from pedalhmi.protocols import (
    EventBus,
    FileParameterChanged,
    PedalboardChanged,
    PedalboardCleared,
    PedalboardLoaded,
    PedalboardNameSet,
    ProtocolEvent,
)

logger = logging.getLogger(__name__)


class HmiBridge:
    """
    Wires the protocol engine to the plugin and pedalboard metadata.

    Separates concerns:
    - HmiServer / CommandDispatcher: connections and inbound commands
    - EventBus: typed subscriptions for the presentation layer
    - HmiCommands: outbound actions
    - PluginMetadataCache / PedalboardStateLoader: pull-based metadata
    - HmiBridge: lifecycle, the active pedalboard and its live values

    The bridge observes its own event bus so the active pedalboard's
    resolved pedal list follows what the host reports, without re-parsing.
    """

    def __init__(
        self,
        config: AppConfig | None = None,
        cache: PluginMetadataCache | None = None,
    ):
        """
        Initialize bridge.

        Args:
            config: Application configuration (loads default if None)
            cache: Plugin metadata cache (built from the config if None)
        """
        self.config = config or AppConfig.load_or_default()

        self.bus = EventBus()
        self.dispatcher = CommandDispatcher(self.bus)
        self.server = HmiServer(
            self.dispatcher,
            host=self.config.host,
            port=self.config.port,
            max_frame_bytes=self.config.max_frame_bytes,
            socket_timeout=self.config.socket_timeout,
        )
        self.commands = HmiCommands(self.server.broadcast)

        self.cache = cache or PluginMetadataCache.from_paths(
            self.config.cache_path, self.config.lv2_paths
        )
        self.loader = PedalboardStateLoader(self.cache)

        self._lock = threading.Lock()
        self._pedalboards: list[Pedalboard] | None = None
        self._current: Pedalboard | None = None
        self._is_running = False

        self.bus.register_observer(self)

    @property
    def is_running(self) -> bool:
        return self._is_running

    # =================================================================
    # Lifecycle
    # =================================================================

    def start(self) -> None:
        """
        Start accepting host connections.

        Raises:
            ServerBindError: If the listening endpoint cannot be bound
        """
        if self._is_running:
            logger.warning("Bridge already running")
            return
        self.server.start()
        self._is_running = True
        logger.info("HMI bridge started")

    def stop(self) -> None:
        """Close connections and write pending cache changes."""
        if not self._is_running:
            self.cache.close()
            return
        self.server.stop()
        self.cache.close()
        self._is_running = False
        logger.info("HMI bridge stopped")

    def __enter__(self):
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.stop()
        return False

    # =================================================================
    # Pull API
    # =================================================================

    def get_plugin_info(self, uri: str) -> PluginDescription | None:
        """Description of an installed plugin, or None if unknown."""
        return self.cache.get(uri)

    def pedalboards(self, reload: bool = False) -> list[Pedalboard]:
        """Pedalboards on disk, in host order (read once, unless reload)."""
        with self._lock:
            if self._pedalboards is None or reload:
                self._pedalboards = list_pedalboards(self.config.pedalboards_dir)
                self._current = None
            return list(self._pedalboards)

    def get_pedalboard(self, index: int) -> Pedalboard | None:
        boards = self.pedalboards()
        if 0 <= index < len(boards):
            return boards[index]
        return None

    def get_pedals(self, pedalboard: Pedalboard | None = None) -> list[PedalInstance]:
        """Resolved pedals of a pedalboard (default: the active one)."""
        target = pedalboard or self.current_pedalboard
        if target is None:
            return []
        return self.loader.get_pedals(target)

    def banks(self) -> list[Bank]:
        return load_banks(self.config.banks_path)

    def list_files(self, file_types: list[str]) -> list[FileInfo]:
        """User files a file parameter accepting ``file_types`` can point to."""
        return list_files(file_types, base_dir=Path(self.config.user_files_dir))

    # =================================================================
    # Active pedalboard
    # =================================================================

    @property
    def current_pedalboard(self) -> Pedalboard | None:
        with self._lock:
            return self._current

    def select_pedalboard(self, index: int) -> Pedalboard | None:
        """Mark a pedalboard as active without contacting the host."""
        pedalboard = self.get_pedalboard(index)
        if pedalboard is None:
            logger.warning(f"Invalid pedalboard index: {index}")
            return None
        with self._lock:
            self._current = pedalboard
        return pedalboard

    def load_pedalboard(self, index: int, bank_id: int | None = None) -> int:
        """Ask the host to load a pedalboard and make it the active one."""
        self.select_pedalboard(index)
        return self.commands.load_pedalboard(index, bank_id=bank_id)

    def set_parameter(self, instance: str, symbol: str, value: float) -> int:
        """Send a control change and apply it to the active pedal list."""
        current = self.current_pedalboard
        if current is not None:
            current.apply_parameter(instance, symbol, value)
        return self.commands.set_parameter(instance, symbol, value)

    def set_file_parameter(self, instance: str, param_uri: str, path: str) -> int:
        """Send a file parameter change and apply it to the active pedal list."""
        current = self.current_pedalboard
        if current is not None:
            current.apply_file_parameter(instance, param_uri, path)
        return self.commands.set_file_parameter(instance, param_uri, path)

    # =================================================================
    # Event handling
    # =================================================================

    def on_hmi_event(self, event: ProtocolEvent) -> None:
        self.apply_event(event)

    @handle_errors(operation_name="apply host event", re_raise=False, fallback_value=False, log_level=logging.WARNING)
    def apply_event(self, event: ProtocolEvent) -> bool:
        """
        Keep the active pedalboard in sync with a host event.

        Returns:
            True if the event changed bridge state
        """
        if isinstance(event, PedalboardChanged):
            return self.select_pedalboard(event.index) is not None

        if isinstance(event, PedalboardLoaded):
            pedalboard = self._find_loaded(event)
            if pedalboard is None:
                return False
            pedalboard.clear_pedals()
            with self._lock:
                self._current = pedalboard
            return True

        current = self.current_pedalboard
        if current is None:
            return False

        if isinstance(event, PedalboardCleared):
            current.set_pedals([])
            return True

        if isinstance(event, PedalboardNameSet):
            current.name = event.name
            return True

        if isinstance(event, FileParameterChanged):
            return current.apply_file_parameter(event.instance, event.param_uri, event.path)

        return False

    def _find_loaded(self, event: PedalboardLoaded) -> Pedalboard | None:
        """Match by bundle directory name first, then by index."""
        boards = self.pedalboards()
        bundle_name = Path(event.identifier.strip()).name
        if bundle_name:
            for pedalboard in boards:
                if pedalboard.path.name == bundle_name:
                    return pedalboard
        if 0 <= event.index < len(boards):
            return boards[event.index]
        logger.warning(f"Loaded pedalboard not found: index={event.index}, {event.identifier}")
        return None
