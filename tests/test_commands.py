"""Tests for outbound command formatting and sending."""

from unittest.mock import Mock

import pytest

from pedalhmi.hmi import HmiCommands, encode_frame, format_command
from pedalhmi.hmi.commands import (
    encode_text,
    format_beats_per_bar,
    format_bypass,
    format_float,
    format_load_pedalboard,
    format_midi_clock_send,
    format_midi_clock_source,
    format_play,
    format_quick_bypass,
    format_set_file_parameter,
    format_set_parameter,
    format_snapshot_rename,
    format_snapshot_save_as,
    format_tempo,
    format_tuner_input,
    format_tuner_ref_freq,
)


@pytest.mark.unit
class TestFormatting:
    """Test pure formatting functions."""

    def test_encode_frame_appends_sentinel(self):
        assert encode_frame("ping") == b"ping\x00"

    def test_encode_frame_is_utf8(self):
        assert encode_frame("pedalboard-name-set Café") == "pedalboard-name-set Café\x00".encode()

    def test_format_command(self):
        assert format_command("snapshot-load", 2) == "snapshot-load 2"
        assert format_command("pedalboard-save") == "pedalboard-save"

    def test_format_float_always_has_decimal_point(self):
        assert format_float(1) == "1.0"
        assert format_float(0.25) == "0.25"

    def test_encode_text_has_no_spaces(self):
        assert encode_text("Verse One") == "Verse%20One"
        assert encode_text("A/B") == "A%2FB"

    def test_load_pedalboard(self):
        assert format_load_pedalboard(2, 5) == "pedalboard-load 2 5"

    def test_set_parameter(self):
        assert format_set_parameter("delay_1", "time", 0.5) == "control-param-set delay_1 time 0.5"
        assert format_set_parameter("delay_1", "mode", 2) == "control-param-set delay_1 mode 2.0"

    def test_set_file_parameter(self):
        assert (
            format_set_file_parameter("delay_1", "urn:ir", "/data/hall.wav")
            == "file-param-set delay_1 urn:ir /data/hall.wav"
        )

    def test_tuner(self):
        assert format_tuner_input(2) == "tuner-input 2"
        assert format_tuner_ref_freq(432) == "tuner-ref-freq 432"

    def test_snapshot_names_are_encoded(self):
        assert format_snapshot_save_as("Verse One") == "snapshot-save-as Verse%20One"
        assert format_snapshot_rename(2, "A/B") == "snapshot-rename 2 A%2FB"


@pytest.mark.unit
class TestMenuItems:
    """Test menu item wrappers."""

    def test_tempo(self):
        assert format_tempo(120) == "menu-item-change 9 120.0"

    def test_beats_per_bar(self):
        assert format_beats_per_bar(4) == "menu-item-change 10 4"

    def test_play(self):
        assert format_play(True) == "menu-item-change 4 1"
        assert format_play(False) == "menu-item-change 4 0"

    def test_bypass_channels(self):
        assert format_bypass(1, True) == "menu-item-change 11 1"
        assert format_bypass(2, False) == "menu-item-change 12 0"

    def test_bypass_invalid_channel(self):
        with pytest.raises(ValueError):
            format_bypass(3, True)

    def test_quick_bypass(self):
        assert format_quick_bypass(True) == "menu-item-change 3 1"

    def test_midi_clock(self):
        assert format_midi_clock_source(2) == "menu-item-change 5 2"
        assert format_midi_clock_send(False) == "menu-item-change 6 0"


@pytest.mark.unit
class TestHmiCommands:
    """Test the command sender."""

    @pytest.fixture
    def broadcast(self):
        return Mock(return_value=1)

    @pytest.fixture
    def commands(self, broadcast):
        return HmiCommands(broadcast)

    def test_default_bank_is_all_pedalboards(self, commands, broadcast):
        assert commands.current_bank_id == 1
        assert commands.load_pedalboard(3) == 1
        broadcast.assert_called_once_with("pedalboard-load 1 3")

    def test_current_bank_is_used(self, commands, broadcast):
        commands.set_current_bank(4)
        commands.load_pedalboard(3)
        broadcast.assert_called_once_with("pedalboard-load 4 3")

    def test_explicit_bank_wins(self, commands, broadcast):
        commands.set_current_bank(4)
        commands.load_pedalboard(3, bank_id=2)
        broadcast.assert_called_once_with("pedalboard-load 2 3")
        assert commands.current_bank_id == 4

    def test_returns_peer_count(self, broadcast):
        broadcast.return_value = 0
        assert HmiCommands(broadcast).tuner_on() == 0

    @pytest.mark.parametrize(
        "call, expected",
        [
            (lambda c: c.save_pedalboard(), "pedalboard-save"),
            (lambda c: c.tuner_on(), "tuner-on"),
            (lambda c: c.tuner_off(), "tuner-off"),
            (lambda c: c.set_tuner_input(1), "tuner-input 1"),
            (lambda c: c.set_tuner_ref_freq(440), "tuner-ref-freq 440"),
            (lambda c: c.request_snapshots(), "snapshots-request"),
            (lambda c: c.load_snapshot(1), "snapshot-load 1"),
            (lambda c: c.save_snapshot(1), "snapshot-save 1"),
            (lambda c: c.save_snapshot_as("Solo"), "snapshot-save-as Solo"),
            (lambda c: c.delete_snapshot(0), "snapshot-delete 0"),
            (lambda c: c.rename_snapshot(0, "Big Solo"), "snapshot-rename 0 Big%20Solo"),
            (lambda c: c.load_profile(2), "profile-load 2"),
            (lambda c: c.store_profile(2), "profile-store 2"),
            (lambda c: c.set_parameter("delay_1", "time", 0.75), "control-param-set delay_1 time 0.75"),
            (lambda c: c.set_file_parameter("d", "urn:p", "/f.wav"), "file-param-set d urn:p /f.wav"),
            (lambda c: c.set_menu_item(9, 99), "menu-item-change 9 99"),
            (lambda c: c.set_tempo(96.5), "menu-item-change 9 96.5"),
            (lambda c: c.set_beats_per_bar(3), "menu-item-change 10 3"),
            (lambda c: c.set_play(True), "menu-item-change 4 1"),
            (lambda c: c.set_bypass(2, True), "menu-item-change 12 1"),
            (lambda c: c.set_quick_bypass(False), "menu-item-change 3 0"),
            (lambda c: c.set_midi_clock_source(1), "menu-item-change 5 1"),
            (lambda c: c.set_midi_clock_send(True), "menu-item-change 6 1"),
        ],
    )
    def test_each_action_sends_one_frame(self, commands, broadcast, call, expected):
        call(commands)
        broadcast.assert_called_once_with(expected)
