"""Wire-level constants of the HMI protocol."""

# Frame terminator
SENTINEL = b"\x00"

DEFAULT_PORT = 9898

# Acknowledgement
RESPONSE = "response"
STATUS_OK = 0
STATUS_ERROR = -1

# Inbound (host -> bridge)
CMD_PING = "ping"
CMD_GUI_CONNECTED = "gui-connected"
CMD_GUI_DISCONNECTED = "gui-disconnected"
CMD_PEDALBOARD_CHANGE = "pedalboard-change"
CMD_PEDALBOARD_LOAD = "pedalboard-load"
CMD_PEDALBOARD_CLEAR = "pedalboard-clear"
CMD_PEDALBOARD_NAME_SET = "pedalboard-name-set"
CMD_TUNER = "tuner-reading"
CMD_SNAPSHOTS_LIST = "snapshots-list"
CMD_PROFILE_LIST = "profile-list"
CMD_MENU_ITEM_CHANGE = "menu-item-change"
CMD_FILE_PARAM_CHANGED = "file-param-changed"

# Outbound (bridge -> host)
CMD_CONTROL_PARAM_SET = "control-param-set"
CMD_FILE_PARAM_SET = "file-param-set"
CMD_PEDALBOARD_SAVE = "pedalboard-save"
CMD_TUNER_ON = "tuner-on"
CMD_TUNER_OFF = "tuner-off"
CMD_TUNER_INPUT = "tuner-input"
CMD_TUNER_REF_FREQ = "tuner-ref-freq"
CMD_SNAPSHOTS_REQUEST = "snapshots-request"
CMD_SNAPSHOT_LOAD = "snapshot-load"
CMD_SNAPSHOT_SAVE = "snapshot-save"
CMD_SNAPSHOT_SAVE_AS = "snapshot-save-as"
CMD_SNAPSHOT_DELETE = "snapshot-delete"
CMD_SNAPSHOT_RENAME = "snapshot-rename"
CMD_PROFILE_LOAD = "profile-load"
CMD_PROFILE_STORE = "profile-store"

# Host menu item ids
MENU_QUICK_BYPASS = 3
MENU_PLAY_STATUS = 4
MENU_MIDI_CLOCK_SOURCE = 5
MENU_MIDI_CLOCK_SEND = 6
MENU_TEMPO = 9
MENU_BEATS_PER_BAR = 10
MENU_BYPASS1 = 11
MENU_BYPASS2 = 12
