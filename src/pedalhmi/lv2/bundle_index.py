"""Plugin identifier -> bundle directory index.

Only each bundle's ``manifest.ttl`` is parsed: it lists the plugins the
bundle provides. The heavier per-plugin description files are left to the
metadata extractor.
"""

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path

from rdflib.namespace import RDF

from pedalhmi.exceptions import collect_errors
from pedalhmi.models import PluginDescription

from .rdf import LV2, parse_turtle

logger = logging.getLogger(__name__)

BUNDLE_SUFFIX = ".lv2"
MANIFEST = "manifest.ttl"


def seed_index(descriptions: Mapping[str, PluginDescription]) -> dict[str, str]:
    """Index entries recorded in previously extracted descriptions."""
    return {uri: description.bundle_path for uri, description in descriptions.items()}


class BundleIndexBuilder:
    """
    Walks bundle roots and maps plugin identifiers to bundle directories.

    Roots are searched in order and the first bundle declaring an identifier
    wins. Roots that don't exist are skipped. ``scan_count`` counts the
    filesystem scans performed, so callers can verify that a warm cache
    never touches the disk.
    """

    def __init__(self, lv2_paths: Iterable[Path]):
        """
        Initialize builder.

        Args:
            lv2_paths: Bundle root directories, in priority order
        """
        self.lv2_paths = [Path(p).expanduser() for p in lv2_paths]
        self.scan_count = 0

    def iter_bundles(self) -> Iterable[Path]:
        """Yield bundle directories (``*.lv2`` with a manifest), root by root, sorted by name."""
        for root in self.lv2_paths:
            if not root.is_dir():
                logger.debug(f"Skipping missing LV2 path: {root}")
                continue
            try:
                entries = sorted(root.iterdir())
            except OSError as e:
                logger.warning(f"Skipping unreadable LV2 path {root}: {e}")
                continue
            for bundle in entries:
                if bundle.is_dir() and bundle.name.endswith(BUNDLE_SUFFIX):
                    if (bundle / MANIFEST).is_file():
                        yield bundle

    def read_manifest(self, bundle: Path) -> list[str]:
        """
        Plugin identifiers declared by one bundle's manifest.

        Raises:
            BundleParseError: If the manifest is malformed
        """
        graph = parse_turtle(bundle / MANIFEST)
        return sorted(str(subject) for subject in graph.subjects(RDF.type, LV2.Plugin))

    def scan(self) -> dict[str, str]:
        """
        Scan every root.

        A malformed manifest only excludes its own bundle.

        Returns:
            Plugin identifier -> bundle directory
        """
        self.scan_count += 1
        index: dict[str, str] = {}
        collector = collect_errors("LV2 bundle scan")

        for bundle in self.iter_bundles():
            with collector.try_operation(bundle.name):
                for uri in self.read_manifest(bundle):
                    index.setdefault(uri, str(bundle))

        if collector.has_errors:
            logger.warning(collector.get_summary())

        logger.info(f"LV2 plugin index built with {len(index)} plugins")
        return index

    def build(self, seed: Mapping[str, str] | None = None) -> dict[str, str]:
        """
        Build the index, skipping the scan when a seed is available.

        Args:
            seed: Entries known from the disk cache. A non-empty seed is
                  returned as is; an empty one forces a full scan.
        """
        if seed:
            logger.debug(f"Index seeded with {len(seed)} cached plugins, skipping scan")
            return dict(seed)
        return self.scan()
