"""LV2 plugin metadata.

- DiskCacheStore: JSON document of extracted descriptions
- BundleIndexBuilder: plugin identifier -> bundle directory, from manifests
- MetadataExtractor: PluginDescription from a bundle's description files
- PluginMetadataCache: on-demand lookup combining the three
"""

from .bundle_index import BundleIndexBuilder
from .cache_store import DiskCacheStore
from .extractor import MetadataExtractor, sort_scale_points
from .plugin_cache import PluginMetadataCache

__all__ = [
    "BundleIndexBuilder",
    "DiskCacheStore",
    "MetadataExtractor",
    "PluginMetadataCache",
    "sort_scale_points",
]
