"""Tests for the plugin identifier -> bundle index."""

from pathlib import Path

import pytest

from conftest import CHORUS_URI, DELAY_URI, FX_MANIFEST, NAMED_URI, write_bundle
from pedalhmi.exceptions import BundleParseError
from pedalhmi.lv2 import BundleIndexBuilder, DiskCacheStore, PluginMetadataCache


@pytest.mark.unit
class TestBundleIndexBuilder:
    """Test manifest scanning."""

    def test_scan_maps_plugins_to_bundles(self, lv2_root):
        builder = BundleIndexBuilder([lv2_root])
        index = builder.scan()

        assert index[DELAY_URI] == str(lv2_root / "fx.lv2")
        assert index[CHORUS_URI] == str(lv2_root / "fx.lv2")
        assert index[NAMED_URI] == str(lv2_root / "named.lv2")
        assert len(index) == 5
        assert builder.scan_count == 1

    def test_broken_manifest_only_excludes_its_bundle(self, lv2_root):
        index = BundleIndexBuilder([lv2_root]).scan()
        assert all("broken.lv2" not in path for path in index.values())

    def test_directories_without_suffix_are_ignored(self, lv2_root):
        bundles = [bundle.name for bundle in BundleIndexBuilder([lv2_root]).iter_bundles()]
        assert "notabundle" not in bundles
        assert bundles == sorted(bundles)

    def test_missing_roots_are_skipped(self, tmp_path, lv2_root):
        index = BundleIndexBuilder([tmp_path / "nowhere", lv2_root]).scan()
        assert DELAY_URI in index

    def test_first_root_wins(self, tmp_path, lv2_root):
        second = tmp_path / "lv2-extra"
        write_bundle(second, "aaa-copy.lv2", {"manifest.ttl": FX_MANIFEST})
        index = BundleIndexBuilder([lv2_root, second]).scan()
        assert index[DELAY_URI] == str(lv2_root / "fx.lv2")

        index = BundleIndexBuilder([second, lv2_root]).scan()
        assert index[DELAY_URI] == str(second / "aaa-copy.lv2")

    def test_read_manifest(self, lv2_root):
        uris = BundleIndexBuilder([lv2_root]).read_manifest(lv2_root / "fx.lv2")
        assert uris == sorted([DELAY_URI, CHORUS_URI])

    def test_read_broken_manifest_raises(self, lv2_root):
        with pytest.raises(BundleParseError):
            BundleIndexBuilder([lv2_root]).read_manifest(lv2_root / "broken.lv2")

    def test_build_with_seed_skips_scan(self, lv2_root):
        builder = BundleIndexBuilder([lv2_root])
        index = builder.build({DELAY_URI: "/cached/fx.lv2"})
        assert index == {DELAY_URI: "/cached/fx.lv2"}
        assert builder.scan_count == 0

    def test_build_without_seed_scans(self, lv2_root):
        builder = BundleIndexBuilder([lv2_root])
        assert DELAY_URI in builder.build({})
        assert builder.scan_count == 1


@pytest.mark.unit
class TestUnreadableRoots:
    """Test roots that exist but cannot be listed."""

    @pytest.fixture
    def deny_listing(self, monkeypatch):
        def deny(root):
            original = Path.iterdir

            def iterdir(self):
                if self == root:
                    raise PermissionError(13, "Permission denied", str(self))
                return original(self)

            monkeypatch.setattr(Path, "iterdir", iterdir)
        return deny

    def test_unreadable_root_is_skipped(self, tmp_path, lv2_root, deny_listing):
        second = tmp_path / "lv2-extra"
        write_bundle(second, "fx.lv2", {"manifest.ttl": FX_MANIFEST})
        deny_listing(lv2_root)

        index = BundleIndexBuilder([lv2_root, second]).scan()
        assert index[DELAY_URI] == str(second / "fx.lv2")

    def test_unknown_plugin_when_only_root_is_unreadable(self, tmp_path, lv2_root, deny_listing):
        deny_listing(lv2_root)
        cache = PluginMetadataCache(
            DiskCacheStore(tmp_path / "cache.json"), BundleIndexBuilder([lv2_root])
        )
        try:
            assert cache.get(DELAY_URI) is None
        finally:
            cache.close()
