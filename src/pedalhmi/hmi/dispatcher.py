"""Inbound command interpretation.

The dispatcher turns one decoded frame into at most one ProtocolEvent and
exactly one acknowledgement. Frames are split on single spaces into a verb
and positional arguments; each known verb declares its minimum arity and
how its arguments are parsed. Anything that does not fit is answered with
``response -1`` and leaves no trace besides a warning in the log.
"""

import logging
import re
from collections.abc import Callable
from typing import Protocol
from urllib.parse import unquote

from pedalhmi.exceptions import CommandArgumentError, ProtocolError, UnknownCommandError
from pedalhmi.protocols import (
    EventBus,
    FileParameterChanged,
    MenuItemChanged,
    PedalboardChanged,
    PedalboardCleared,
    PedalboardLoaded,
    PedalboardNameSet,
    ProfilesList,
    ProtocolEvent,
    SnapshotsList,
    TunerReading,
)

from . import constants

logger = logging.getLogger(__name__)

_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")


class Responder(Protocol):
    """Where acknowledgements go: the session that sent the frame."""

    def send_response(self, status: int, data: str | None = None) -> None: ...


def parse_int(verb: str, name: str, literal: str) -> int:
    """Parse a decimal integer argument."""
    if not _INT_RE.fullmatch(literal):
        raise CommandArgumentError(verb, f"{name} must be an integer, got '{literal}'")
    return int(literal)


def parse_float(verb: str, name: str, literal: str) -> float:
    """Parse a decimal number argument."""
    if not _FLOAT_RE.fullmatch(literal):
        raise CommandArgumentError(verb, f"{name} must be a number, got '{literal}'")
    return float(literal)


def parse_number(verb: str, name: str, literal: str) -> int | float:
    """Parse a number whose type follows its formatting: float if it has a decimal point."""
    if "." in literal:
        return parse_float(verb, name, literal)
    return parse_int(verb, name, literal)


def decode_text(literal: str) -> str:
    """Percent-decode a free-text argument."""
    return unquote(literal)


# verb, arguments -> (event to publish, response data)
Handler = Callable[[str, list[str]], tuple[ProtocolEvent | None, str | None]]


class CommandDispatcher:
    """
    Validates inbound frames, publishes their events and acknowledges them.

    Dispatch is synchronous: the event (if any) is published and the
    acknowledgement written before ``dispatch`` returns, so frames from
    one peer are answered in arrival order.
    """

    def __init__(self, bus: EventBus):
        """
        Initialize dispatcher.

        Args:
            bus: Event bus receiving the events of valid commands
        """
        self._bus = bus
        # verb -> (minimum argument count, handler)
        self._handlers: dict[str, tuple[int, Handler]] = {
            constants.CMD_PING: (0, self._ack_only),
            constants.CMD_GUI_CONNECTED: (0, self._gui_connected),
            constants.CMD_GUI_DISCONNECTED: (0, self._gui_disconnected),
            constants.CMD_PEDALBOARD_CHANGE: (1, self._pedalboard_change),
            constants.CMD_PEDALBOARD_LOAD: (2, self._pedalboard_load),
            constants.CMD_PEDALBOARD_CLEAR: (0, self._pedalboard_clear),
            constants.CMD_PEDALBOARD_NAME_SET: (1, self._pedalboard_name_set),
            constants.CMD_TUNER: (3, self._tuner),
            constants.CMD_SNAPSHOTS_LIST: (1, self._snapshots_list),
            constants.CMD_PROFILE_LIST: (1, self._profile_list),
            constants.CMD_MENU_ITEM_CHANGE: (2, self._menu_item_change),
            constants.CMD_FILE_PARAM_CHANGED: (3, self._file_param_changed),
        }

    @property
    def verbs(self) -> list[str]:
        """Recognized inbound verbs."""
        return list(self._handlers)

    def parse(self, frame: str) -> tuple[ProtocolEvent | None, str | None]:
        """
        Interpret a frame without side effects.

        Returns:
            The event to publish (None for acknowledgement-only verbs) and
            optional response data

        Raises:
            UnknownCommandError: If the verb is not recognized
            CommandArgumentError: If the arguments are missing or malformed
        """
        verb, *args = frame.split(" ")
        entry = self._handlers.get(verb)
        if entry is None:
            raise UnknownCommandError(verb)

        min_args, handler = entry
        if len(args) < min_args:
            raise CommandArgumentError(
                verb, f"expected at least {min_args} argument(s), got {len(args)}"
            )
        return handler(verb, args)

    def dispatch(self, frame: str, responder: Responder) -> int:
        """
        Process one frame: publish its event and write its acknowledgement.

        Returns:
            The acknowledgement status that was sent
        """
        logger.debug(f"Received: {frame}")
        try:
            event, data = self.parse(frame)
        except ProtocolError as e:
            logger.warning(f"Rejected '{frame}': {e}")
            responder.send_response(constants.STATUS_ERROR)
            return constants.STATUS_ERROR

        if event is not None:
            self._bus.publish(event)
        responder.send_response(constants.STATUS_OK, data)
        return constants.STATUS_OK

    # =================================================================
    # Verb handlers
    # =================================================================

    def _ack_only(self, verb: str, args: list[str]) -> tuple[None, None]:
        return None, None

    def _gui_connected(self, verb: str, args: list[str]) -> tuple[None, None]:
        logger.info("GUI connected notification received")
        return None, None

    def _gui_disconnected(self, verb: str, args: list[str]) -> tuple[None, None]:
        logger.info("GUI disconnected notification received")
        return None, None

    def _pedalboard_change(self, verb: str, args: list[str]) -> tuple[ProtocolEvent, None]:
        index = parse_int(verb, "index", args[0])
        logger.info(f"Pedalboard change to index: {index}")
        return PedalboardChanged(index=index), None

    def _pedalboard_load(self, verb: str, args: list[str]) -> tuple[ProtocolEvent, None]:
        index = parse_int(verb, "index", args[0])
        identifier = args[1]
        logger.info(f"Pedalboard load: index={index}, identifier={identifier}")
        return PedalboardLoaded(index=index, identifier=identifier), None

    def _pedalboard_clear(self, verb: str, args: list[str]) -> tuple[ProtocolEvent, None]:
        logger.info("Pedalboard cleared")
        return PedalboardCleared(), None

    def _pedalboard_name_set(self, verb: str, args: list[str]) -> tuple[ProtocolEvent, None]:
        name = " ".join(args)
        logger.info(f"Pedalboard name set: {name}")
        return PedalboardNameSet(name=name), None

    def _tuner(self, verb: str, args: list[str]) -> tuple[ProtocolEvent, None]:
        frequency = parse_float(verb, "frequency", args[0])
        note = args[1]
        cents = parse_int(verb, "cents", args[2])
        logger.debug(f"Tuner: freq={frequency}, note={note}, cents={cents}")
        return TunerReading(frequency=frequency, note=note, cents=cents), None

    def _snapshots_list(self, verb: str, args: list[str]) -> tuple[ProtocolEvent, None]:
        current = parse_int(verb, "current index", args[0])
        snapshots = [(index, decode_text(name)) for index, name in enumerate(args[1:])]
        logger.info(f"Snapshots list: {len(snapshots)} snapshot(s), current={current}")
        return SnapshotsList(current_index=current, snapshots=snapshots), None

    def _profile_list(self, verb: str, args: list[str]) -> tuple[ProtocolEvent, None]:
        current = parse_int(verb, "current index", args[0])
        profiles = [decode_text(name) for name in args[1:]]
        logger.info(f"Profile list: {len(profiles)} profile(s), current={current}")
        return ProfilesList(current_index=current, profiles=profiles), None

    def _menu_item_change(self, verb: str, args: list[str]) -> tuple[ProtocolEvent, None]:
        menu_id = parse_int(verb, "menu id", args[0])
        value = parse_number(verb, "value", args[1])
        logger.info(f"Menu item {menu_id} changed to {value}")
        return MenuItemChanged(menu_id=menu_id, value=value), None

    def _file_param_changed(self, verb: str, args: list[str]) -> tuple[ProtocolEvent, None]:
        instance, param_uri = args[0], args[1]
        path = " ".join(args[2:])
        logger.info(f"File parameter changed: {instance} {param_uri} -> {path}")
        return FileParameterChanged(instance=instance, param_uri=param_uri, path=path), None
