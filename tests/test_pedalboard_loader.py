"""Tests for pedalboard enumeration, state files and pedal resolution."""

from pathlib import Path

import pytest

from conftest import CHORUS_URI, DELAY_URI, PEDALBOARD_MANIFEST, write_bundle
from pedalhmi.exceptions import MetadataError
from pedalhmi.lv2 import PluginMetadataCache
from pedalhmi.pedalboards import (
    PedalboardStateLoader,
    list_pedalboards,
    parse_file_parameter_state,
    read_file_parameter_state,
    read_pedalboard,
)
from pedalhmi.pedalboards.loader import parse_enabled
from pedalhmi.pedalboards.state_file import is_file_value, state_file_path

IR_PATH = "/data/user-files/Reverb IRs/hall.wav"


@pytest.fixture
def cache(tmp_path, lv2_root):
    cache = PluginMetadataCache.from_paths(tmp_path / "cache.json", [lv2_root])
    yield cache
    cache.close()


@pytest.fixture
def board_a(pedalboards_dir):
    return pedalboards_dir / "a-board.pedalboard"


@pytest.mark.unit
class TestLibrary:
    """Test pedalboard enumeration."""

    def test_sorted_by_path(self, pedalboards_dir):
        pedalboards = list_pedalboards(pedalboards_dir)
        assert [pb.path.name for pb in pedalboards] == ["a-board.pedalboard", "b-board.pedalboard"]

    def test_names(self, pedalboards_dir):
        names = [pb.name for pb in list_pedalboards(pedalboards_dir)]
        assert names == ["Board A", "b-board"]

    def test_pedals_not_resolved_by_listing(self, pedalboards_dir):
        assert not any(pb.is_resolved for pb in list_pedalboards(pedalboards_dir))

    def test_main_file(self, board_a):
        pedalboard = read_pedalboard(board_a)
        assert pedalboard.ttl_name == "a-board.ttl"
        assert pedalboard.ttl_path == board_a / "a-board.ttl"

    def test_missing_directory(self, tmp_path):
        assert list_pedalboards(tmp_path / "nowhere") == []

    def test_unreadable_directory(self, pedalboards_dir, monkeypatch):
        def iterdir(self):
            raise PermissionError(13, "Permission denied", str(self))

        monkeypatch.setattr(Path, "iterdir", iterdir)
        assert list_pedalboards(pedalboards_dir) == []

    def test_bundle_without_manifest_is_skipped(self, pedalboards_dir):
        (pedalboards_dir / "empty.pedalboard").mkdir()
        (pedalboards_dir / "notes.txt").write_text("not a bundle")
        assert len(list_pedalboards(pedalboards_dir)) == 2

    def test_read_without_manifest_raises(self, tmp_path):
        with pytest.raises(MetadataError):
            read_pedalboard(tmp_path)

    def test_manifest_without_description_raises(self, tmp_path):
        bundle = write_bundle(tmp_path, "x.pedalboard", {"manifest.ttl": "<x> a lv2:Plugin .\n"})
        with pytest.raises(MetadataError):
            read_pedalboard(bundle)


@pytest.mark.unit
class TestStateFile:
    """Test per-instance state parsing."""

    def test_only_paths_are_kept(self):
        content = (
            f'<{DELAY_URI}#ir> "{IR_PATH}" .\n'
            f'<{DELAY_URI}#a> "None" .\n'
            f'<{DELAY_URI}#b> "none" .\n'
            f'<{DELAY_URI}#c> "" .\n'
            f'<{DELAY_URI}#d> "plain" .\n'
        )
        assert parse_file_parameter_state(content) == {f"{DELAY_URI}#ir": IR_PATH}

    @pytest.mark.parametrize(
        "value, expected",
        [("/a/b.wav", True), ("", False), ("None", False), ("NONE", False), ("file.wav", False)],
    )
    def test_is_file_value(self, value, expected):
        assert is_file_value(value) is expected

    def test_state_file_path(self, board_a):
        assert state_file_path(board_a, 3) == board_a / "effect-3" / "effect.ttl"

    def test_read(self, board_a):
        assert read_file_parameter_state(board_a, 0) == {f"{DELAY_URI}#ir": IR_PATH}

    def test_read_missing(self, board_a):
        assert read_file_parameter_state(board_a, 7) == {}


@pytest.mark.unit
class TestPedalboardStateLoader:
    """Test instance graph parsing and resolution."""

    def test_pedals_sorted_by_instance_number(self, cache, board_a):
        pedalboard = PedalboardStateLoader(cache).load(board_a)
        assert [pedal.instance for pedal in pedalboard.pedals] == ["delay_1", "ghost_1", "reverb_1"]
        assert [pedal.instance_number for pedal in pedalboard.pedals] == [0, 1, 2]

    def test_block_without_prototype_is_skipped(self, cache, board_a):
        pedalboard = PedalboardStateLoader(cache).load(board_a)
        assert pedalboard.find_pedal("orphan_1") is None

    def test_resolved_pedal(self, cache, board_a):
        delay = PedalboardStateLoader(cache).load(board_a).find_pedal("delay_1")
        assert delay.plugin_uri == DELAY_URI
        assert delay.has_metadata
        assert delay.label == "Tape Delay"
        assert delay.enabled
        assert delay.values == {"time": 1.25, "mode": 2.0}
        assert delay.get_value("bypass") == 0.0

    def test_file_values_from_state(self, cache, board_a):
        delay = PedalboardStateLoader(cache).load(board_a).find_pedal("delay_1")
        assert delay.file_values == {f"{DELAY_URI}#ir": IR_PATH}
        assert delay.file_parameters[0].path == IR_PATH

    def test_bypassed_pedal(self, cache, board_a):
        reverb = PedalboardStateLoader(cache).load(board_a).find_pedal("reverb_1")
        assert reverb.plugin_uri == CHORUS_URI
        assert not reverb.enabled
        assert reverb.values == {"rate": 0.25}

    def test_unknown_plugin_has_no_metadata(self, cache, board_a):
        ghost = PedalboardStateLoader(cache).load(board_a).find_pedal("ghost_1")
        assert not ghost.has_metadata
        assert ghost.label == "ghost_1"
        assert ghost.controls == []

    def test_without_cache(self, board_a):
        pedals = PedalboardStateLoader().load(board_a).pedals
        assert len(pedals) == 3
        assert not any(pedal.has_metadata for pedal in pedals)

    def test_get_pedals_is_cached(self, cache, board_a):
        loader = PedalboardStateLoader(cache)
        pedalboard = read_pedalboard(board_a)
        first = loader.get_pedals(pedalboard)
        assert loader.get_pedals(pedalboard) is first

    def test_live_changes_survive_without_reparse(self, cache, board_a):
        loader = PedalboardStateLoader(cache)
        pedalboard = loader.load(board_a)
        assert pedalboard.apply_parameter("delay_1", "time", 1.5)
        assert pedalboard.apply_file_parameter("delay_1", f"{DELAY_URI}#ir", "/data/room.wav")

        delay = loader.get_pedals(pedalboard)[0]
        assert delay.values["time"] == 1.5
        assert delay.file_values[f"{DELAY_URI}#ir"] == "/data/room.wav"

    def test_empty_pedalboard(self, cache, pedalboards_dir):
        pedalboard = PedalboardStateLoader(cache).load(pedalboards_dir / "b-board.pedalboard")
        assert pedalboard.pedals == []

    def test_unreadable_graph_yields_empty_list(self, cache, tmp_path):
        bundle = write_bundle(tmp_path, "bad.pedalboard", {"manifest.ttl": PEDALBOARD_MANIFEST.format(name="bad")})
        (bundle / "bad.ttl").write_text("<not turtle", encoding="utf-8")
        pedalboard = PedalboardStateLoader(cache).load(bundle)
        assert pedalboard.name == "bad"
        assert pedalboard.pedals == []

    def test_equal_instance_numbers_sort_by_name(self, tmp_path):
        graph = "".join(
            f"<{name}> a ingen:Block ; lv2:prototype <{DELAY_URI}> .\n" for name in ("zeta", "alpha")
        )
        bundle = write_bundle(
            tmp_path,
            "tie.pedalboard",
            {"manifest.ttl": PEDALBOARD_MANIFEST.format(name="tie"), "tie.ttl": graph},
        )
        pedals = PedalboardStateLoader().load(bundle).pedals
        assert [pedal.instance for pedal in pedals] == ["alpha", "zeta"]
        assert [pedal.instance_number for pedal in pedals] == [0, 0]


@pytest.mark.unit
class TestParseEnabled:
    """Test ingen:enabled interpretation."""

    def test_absent_means_enabled(self):
        assert parse_enabled(None)

    def test_literals(self):
        from rdflib import Literal

        assert parse_enabled(Literal(True))
        assert not parse_enabled(Literal(False))
        assert not parse_enabled(Literal("false"))
        assert parse_enabled(Literal("true"))
