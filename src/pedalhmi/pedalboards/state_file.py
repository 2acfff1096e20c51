"""Per-instance plugin state saved inside a pedalboard bundle.

The host stores each instance's LV2 state in
``<pedalboard>/effect-<instance number>/effect.ttl``. File parameters
appear there as ``<parameter uri> "path"`` pairs, which is all this reader
extracts. Values that are not real paths (empty, ``None``, no ``/``) are
dropped.
"""

import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

STATE_FILE_PATTERN = re.compile(r'<([^>]+)>\s+"([^"]*)"')


def state_file_path(pedalboard_dir: Path, instance_number: int) -> Path:
    return Path(pedalboard_dir) / f"effect-{instance_number}" / "effect.ttl"


def is_file_value(value: str) -> bool:
    """True if a stored value looks like a file path."""
    return bool(value) and value.lower() != "none" and "/" in value


def parse_file_parameter_state(content: str) -> dict[str, str]:
    """Extract file parameter identifier -> path pairs from state file text."""
    values: dict[str, str] = {}
    for match in STATE_FILE_PATTERN.finditer(content):
        param_uri, value = match.group(1), match.group(2)
        if is_file_value(value):
            values[param_uri] = value
    return values


def read_file_parameter_state(pedalboard_dir: Path, instance_number: int) -> dict[str, str]:
    """
    Read the persisted file parameter values of one instance.

    Returns:
        File parameter identifier -> path (empty if there is no state file)
    """
    path = state_file_path(pedalboard_dir, instance_number)
    if not path.is_file():
        return {}
    try:
        content = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.debug(f"Could not read state for effect-{instance_number}: {e}")
        return {}
    return parse_file_parameter_state(content)
