"""Memory-resident plugin metadata cache backed by a disk document.

Lookup order for ``get(uri)``:

1. Memory map.
2. One-time initialization: the disk document is loaded into memory and
   seeds the bundle index. A warm document means no filesystem scan.
3. Bundle index. If the identifier is unknown and the filesystem has not
   been scanned yet, the bundle roots are scanned once.
4. Extraction, after which the whole memory map is persisted in the
   background.

Unknown identifiers return None.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path

from pedalhmi.exceptions import ErrorContext
from pedalhmi.models import PluginDescription

from .bundle_index import BundleIndexBuilder, seed_index
from .cache_store import DiskCacheStore
from .extractor import MetadataExtractor

logger = logging.getLogger(__name__)


class PluginMetadataCache:
    """
    Plugin identifier -> PluginDescription, populated on demand.

    Thread Safety:
        ``_lock`` guards the memory map and index. ``_build_lock`` makes the
        disk load and the filesystem scan run at most once: late callers
        wait for the in-flight build instead of scanning again. Persistence
        runs on a single background worker, so writes to the document never
        interleave.

    A ``refresh`` racing with an in-flight extraction may leave that one
    entry in memory; the next ``refresh`` clears it.
    """

    def __init__(
        self,
        store: DiskCacheStore,
        index_builder: BundleIndexBuilder,
        extractor: MetadataExtractor | None = None,
    ):
        """
        Initialize plugin cache.

        Args:
            store: Disk document store
            index_builder: Bundle scanner
            extractor: Description extractor (default: MetadataExtractor())
        """
        self._store = store
        self._index_builder = index_builder
        self._extractor = extractor or MetadataExtractor()

        self._lock = threading.Lock()
        self._build_lock = threading.Lock()
        self._plugins: dict[str, PluginDescription] = {}
        self._index: dict[str, str] = {}
        self._index_built = False
        self._scanned = False

        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="plugin-cache")
        self._last_persist: Future | None = None
        self._closed = False

    @classmethod
    def from_paths(cls, cache_path: Path, lv2_paths: list[Path]) -> "PluginMetadataCache":
        """Create a cache with default collaborators."""
        return cls(DiskCacheStore(cache_path), BundleIndexBuilder(lv2_paths))

    @property
    def index_builder(self) -> BundleIndexBuilder:
        return self._index_builder

    @property
    def is_index_built(self) -> bool:
        with self._lock:
            return self._index_built

    def get(self, uri: str) -> PluginDescription | None:
        """
        Look up a plugin's description.

        Returns:
            The description, or None if no installed bundle declares the plugin
        """
        with self._lock:
            description = self._plugins.get(uri)
        if description is not None:
            return description

        self._ensure_index()

        with self._lock:
            description = self._plugins.get(uri)
            bundle_path = self._index.get(uri)
        if description is not None:
            return description

        if bundle_path is None:
            bundle_path = self._scan_for(uri)
        if bundle_path is None:
            logger.warning(f"Unknown plugin URI: {uri}")
            return None

        description = self._extractor.extract(uri, bundle_path)
        with self._lock:
            self._plugins[uri] = description
        self._schedule_persist()
        return description

    def known_plugins(self) -> dict[str, str]:
        """Plugin identifier -> bundle path for every indexed plugin (builds the index)."""
        self._ensure_index()
        with self._lock:
            return dict(self._index)

    def rebuild_index(self) -> dict[str, str]:
        """Scan the bundle roots now, adding new plugins to the index."""
        self._ensure_index()
        with self._build_lock:
            self._merge_scan()
        with self._lock:
            return dict(self._index)

    def cached_plugins(self) -> list[str]:
        """Identifiers with a description in memory."""
        with self._lock:
            return sorted(self._plugins)

    def refresh(self) -> None:
        """
        Forget everything: memory map, index and disk document.

        The next ``get`` rebuilds the index from a full scan and re-extracts.
        """
        self.flush()
        with self._build_lock:
            with self._lock:
                self._plugins.clear()
                self._index.clear()
                self._index_built = False
                self._scanned = False
            self._store.delete()
        logger.info("LV2 plugin cache cleared")

    def flush(self, timeout: float | None = None) -> None:
        """Wait until every scheduled persist has been written."""
        with self._lock:
            pending = self._last_persist
        if pending is not None:
            pending.result(timeout=timeout)

    def close(self) -> None:
        """Write pending changes and stop the background writer."""
        if self._closed:
            return
        self.flush()
        self._executor.shutdown(wait=True)
        self._closed = True

    # =================================================================
    # Internals
    # =================================================================

    def _ensure_index(self) -> None:
        if self._index_built:
            return
        with self._build_lock:
            if self._index_built:
                return
            cached = self._store.load()
            seed = seed_index(cached)
            index = self._index_builder.build(seed)
            with self._lock:
                for uri, description in cached.items():
                    self._plugins.setdefault(uri, description)
                for uri, bundle_path in index.items():
                    self._index.setdefault(uri, bundle_path)
                self._scanned = not seed
                self._index_built = True

    def _scan_for(self, uri: str) -> str | None:
        """Scan once for identifiers missing from a seeded index."""
        with self._build_lock:
            with self._lock:
                bundle_path = self._index.get(uri)
                scanned = self._scanned
            if bundle_path is not None or scanned:
                return bundle_path
            self._merge_scan()
        with self._lock:
            return self._index.get(uri)

    def _merge_scan(self) -> None:
        """Scan and merge into the index. Must be called with _build_lock held."""
        index = self._index_builder.scan()
        with self._lock:
            for uri, bundle_path in index.items():
                self._index.setdefault(uri, bundle_path)
            self._scanned = True

    def _schedule_persist(self) -> None:
        if self._closed:
            return
        future = self._executor.submit(self._persist)
        with self._lock:
            self._last_persist = future

    def _persist(self) -> None:
        with self._lock:
            snapshot = dict(self._plugins)
        with ErrorContext("persist plugin cache", logger, re_raise=False, log_level=logging.WARNING):
            self._store.save(snapshot)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
