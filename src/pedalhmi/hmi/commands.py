"""Outbound commands: bridge-initiated actions sent to the host.

The ``format_*`` functions are pure: each returns the text of exactly one
frame. ``HmiCommands`` wraps them with a broadcast callable and the
session's current bank. Outbound commands are fire-and-forget: the host's
acknowledgement arrives later as an ordinary inbound frame and is not
matched to the call that caused it.
"""

import logging
from collections.abc import Callable
from urllib.parse import quote

from pedalhmi.models import ALL_PEDALBOARDS_BANK_ID

from . import constants

logger = logging.getLogger(__name__)


def encode_frame(command: str) -> bytes:
    """Terminate a command with the sentinel and encode it for the wire."""
    return command.encode("utf-8") + constants.SENTINEL


def format_command(verb: str, *args: object) -> str:
    """Join a verb and its arguments with single spaces."""
    return " ".join([verb, *(str(arg) for arg in args)])


def encode_text(text: str) -> str:
    """Percent-encode a free-text argument so it holds no spaces."""
    return quote(text, safe="")


def format_float(value: float) -> str:
    """Format a number so that it always carries a decimal point."""
    return repr(float(value))


def format_bool(value: bool) -> str:
    return "1" if value else "0"


# =================================================================
# Pedalboards and parameters
# =================================================================

def format_load_pedalboard(bank_id: int, index: int) -> str:
    return format_command(constants.CMD_PEDALBOARD_LOAD, bank_id, index)


def format_set_parameter(instance: str, symbol: str, value: float) -> str:
    return format_command(constants.CMD_CONTROL_PARAM_SET, instance, symbol, format_float(value))


def format_set_file_parameter(instance: str, param_uri: str, path: str) -> str:
    return format_command(constants.CMD_FILE_PARAM_SET, instance, param_uri, path)


def format_save_pedalboard() -> str:
    return constants.CMD_PEDALBOARD_SAVE


# =================================================================
# Tuner
# =================================================================

def format_tuner_on() -> str:
    return constants.CMD_TUNER_ON


def format_tuner_off() -> str:
    return constants.CMD_TUNER_OFF


def format_tuner_input(port: int) -> str:
    return format_command(constants.CMD_TUNER_INPUT, port)


def format_tuner_ref_freq(frequency: int) -> str:
    return format_command(constants.CMD_TUNER_REF_FREQ, frequency)


# =================================================================
# Snapshots and profiles
# =================================================================

def format_snapshots_request() -> str:
    return constants.CMD_SNAPSHOTS_REQUEST


def format_snapshot_load(index: int) -> str:
    return format_command(constants.CMD_SNAPSHOT_LOAD, index)


def format_snapshot_save(index: int) -> str:
    return format_command(constants.CMD_SNAPSHOT_SAVE, index)


def format_snapshot_save_as(name: str) -> str:
    return format_command(constants.CMD_SNAPSHOT_SAVE_AS, encode_text(name))


def format_snapshot_delete(index: int) -> str:
    return format_command(constants.CMD_SNAPSHOT_DELETE, index)


def format_snapshot_rename(index: int, name: str) -> str:
    return format_command(constants.CMD_SNAPSHOT_RENAME, index, encode_text(name))


def format_profile_load(index: int) -> str:
    return format_command(constants.CMD_PROFILE_LOAD, index)


def format_profile_store(index: int) -> str:
    return format_command(constants.CMD_PROFILE_STORE, index)


# =================================================================
# Menu items
# =================================================================

def format_menu_item(menu_id: int, value: int | float | str) -> str:
    return format_command(constants.CMD_MENU_ITEM_CHANGE, menu_id, value)


def format_tempo(bpm: float) -> str:
    return format_menu_item(constants.MENU_TEMPO, format_float(bpm))


def format_beats_per_bar(beats: int) -> str:
    return format_menu_item(constants.MENU_BEATS_PER_BAR, int(beats))


def format_play(playing: bool) -> str:
    return format_menu_item(constants.MENU_PLAY_STATUS, format_bool(playing))


def format_bypass(channel: int, bypassed: bool) -> str:
    """Bypass one of the two stereo channels (1 or 2)."""
    if channel not in (1, 2):
        raise ValueError(f"Bypass channel must be 1 or 2, got {channel}")
    menu_id = constants.MENU_BYPASS1 if channel == 1 else constants.MENU_BYPASS2
    return format_menu_item(menu_id, format_bool(bypassed))


def format_quick_bypass(bypassed: bool) -> str:
    return format_menu_item(constants.MENU_QUICK_BYPASS, format_bool(bypassed))


def format_midi_clock_source(source: int) -> str:
    return format_menu_item(constants.MENU_MIDI_CLOCK_SOURCE, int(source))


def format_midi_clock_send(enabled: bool) -> str:
    return format_menu_item(constants.MENU_MIDI_CLOCK_SEND, format_bool(enabled))


class HmiCommands:
    """
    One method per user-facing action, each broadcasting one frame.

    The "current bank" is UI-local state: it is only used as the default
    bank of ``load_pedalboard``.
    """

    def __init__(self, broadcast: Callable[[str], int]):
        """
        Initialize command sender.

        Args:
            broadcast: Writes a command to every connected peer and returns
                       the number of peers reached
        """
        self._broadcast = broadcast
        self._current_bank_id = ALL_PEDALBOARDS_BANK_ID

    def send(self, command: str) -> int:
        logger.debug(f"Sending: {command}")
        return self._broadcast(command)

    @property
    def current_bank_id(self) -> int:
        return self._current_bank_id

    def set_current_bank(self, bank_id: int) -> None:
        """Set the bank used by load_pedalboard when none is given."""
        self._current_bank_id = bank_id
        logger.info(f"Current bank set to: {bank_id}")

    def load_pedalboard(self, index: int, bank_id: int | None = None) -> int:
        """Ask the host to load a pedalboard from a bank (default: current bank)."""
        effective_bank_id = self._current_bank_id if bank_id is None else bank_id
        logger.info(f"Requesting pedalboard load: bank={effective_bank_id}, index={index}")
        return self.send(format_load_pedalboard(effective_bank_id, index))

    def set_parameter(self, instance: str, symbol: str, value: float) -> int:
        logger.info(f"Setting parameter: {instance}/{symbol} = {value}")
        return self.send(format_set_parameter(instance, symbol, value))

    def set_file_parameter(self, instance: str, param_uri: str, path: str) -> int:
        logger.info(f"Setting file parameter: {instance} {param_uri} = {path}")
        return self.send(format_set_file_parameter(instance, param_uri, path))

    def save_pedalboard(self) -> int:
        logger.info("Saving pedalboard")
        return self.send(format_save_pedalboard())

    # Tuner

    def tuner_on(self) -> int:
        logger.info("Turning tuner on")
        return self.send(format_tuner_on())

    def tuner_off(self) -> int:
        logger.info("Turning tuner off")
        return self.send(format_tuner_off())

    def set_tuner_input(self, port: int) -> int:
        """Select the tuner input port (1 or 2)."""
        logger.info(f"Setting tuner input to port {port}")
        return self.send(format_tuner_input(port))

    def set_tuner_ref_freq(self, frequency: int) -> int:
        """Set the tuner reference frequency in Hz (host default 440)."""
        logger.info(f"Setting tuner reference frequency to {frequency} Hz")
        return self.send(format_tuner_ref_freq(frequency))

    # Snapshots

    def request_snapshots(self) -> int:
        return self.send(format_snapshots_request())

    def load_snapshot(self, index: int) -> int:
        logger.info(f"Loading snapshot {index}")
        return self.send(format_snapshot_load(index))

    def save_snapshot(self, index: int) -> int:
        logger.info(f"Saving snapshot {index}")
        return self.send(format_snapshot_save(index))

    def save_snapshot_as(self, name: str) -> int:
        logger.info(f"Saving snapshot as '{name}'")
        return self.send(format_snapshot_save_as(name))

    def delete_snapshot(self, index: int) -> int:
        logger.info(f"Deleting snapshot {index}")
        return self.send(format_snapshot_delete(index))

    def rename_snapshot(self, index: int, name: str) -> int:
        logger.info(f"Renaming snapshot {index} to '{name}'")
        return self.send(format_snapshot_rename(index, name))

    # Profiles

    def load_profile(self, index: int) -> int:
        logger.info(f"Loading profile {index}")
        return self.send(format_profile_load(index))

    def store_profile(self, index: int) -> int:
        logger.info(f"Storing profile {index}")
        return self.send(format_profile_store(index))

    # Menu items

    def set_menu_item(self, menu_id: int, value: int | float | str) -> int:
        return self.send(format_menu_item(menu_id, value))

    def set_tempo(self, bpm: float) -> int:
        logger.info(f"Setting tempo to {bpm} BPM")
        return self.send(format_tempo(bpm))

    def set_beats_per_bar(self, beats: int) -> int:
        logger.info(f"Setting beats per bar to {beats}")
        return self.send(format_beats_per_bar(beats))

    def set_play(self, playing: bool) -> int:
        logger.info(f"Transport {'play' if playing else 'stop'}")
        return self.send(format_play(playing))

    def set_bypass(self, channel: int, bypassed: bool) -> int:
        logger.info(f"Bypass channel {channel}: {bypassed}")
        return self.send(format_bypass(channel, bypassed))

    def set_quick_bypass(self, bypassed: bool) -> int:
        logger.info(f"Quick bypass: {bypassed}")
        return self.send(format_quick_bypass(bypassed))

    def set_midi_clock_source(self, source: int) -> int:
        logger.info(f"MIDI clock source: {source}")
        return self.send(format_midi_clock_source(source))

    def set_midi_clock_send(self, enabled: bool) -> int:
        logger.info(f"MIDI clock send: {enabled}")
        return self.send(format_midi_clock_send(enabled))
