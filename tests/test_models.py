"""Tests for data models."""

import pytest
from pydantic import ValidationError

from pedalhmi.models import (
    CACHE_SCHEMA_VERSION,
    Bank,
    ControlParameter,
    FileParameter,
    PedalInstance,
    Pedalboard,
    PluginCacheDocument,
    PluginDescription,
    ScalePoint,
)

DELAY_URI = "http://example.org/plugins/delay"
IR_URI = f"{DELAY_URI}#ir"


@pytest.fixture
def description():
    return PluginDescription(
        uri=DELAY_URI,
        bundle_path="/usr/lib/lv2/fx.lv2",
        label="Tape Delay",
        brand="Example",
        control_parameters=[
            ControlParameter(symbol="time", name="Time", minimum=0.0, maximum=2.0, default=0.5),
            ControlParameter(symbol="mode", name="Mode", maximum=2.0, integer=True, enumeration=True),
            ControlParameter(symbol="bypass", name="Bypass", toggle=True),
        ],
        file_parameters=[FileParameter(uri=IR_URI, label="Impulse", file_types=["ir"])],
    )


@pytest.fixture
def pedal(description):
    return PedalInstance(
        instance="delay_1",
        plugin_uri=DELAY_URI,
        values={"time": 1.0},
        description=description,
    )


@pytest.mark.unit
class TestControlParameter:
    """Test value normalization."""

    def test_clamps(self):
        param = ControlParameter(symbol="gain", name="Gain", minimum=-12.0, maximum=12.0)
        assert param.normalize(20.0) == 12.0
        assert param.normalize(-20.0) == -12.0
        assert param.normalize(3.5) == 3.5

    def test_inverted_range(self):
        param = ControlParameter(symbol="x", name="X", minimum=1.0, maximum=0.0)
        assert param.normalize(2.0) == 1.0

    def test_integer_rounds(self):
        param = ControlParameter(symbol="mode", name="Mode", maximum=4.0, integer=True)
        assert param.normalize(2.6) == 3.0

    def test_toggle_snaps(self):
        param = ControlParameter(symbol="on", name="On", toggle=True)
        assert param.normalize(0.7) == 1.0
        assert param.normalize(0.2) == 0.0

    def test_label_for(self):
        param = ControlParameter(
            symbol="mode",
            name="Mode",
            scale_points=[ScalePoint(label="Slow", value=0), ScalePoint(label="Fast", value=1)],
        )
        assert param.label_for(1.0) == "Fast"
        assert param.label_for(0.5) is None

    def test_frozen(self):
        param = ControlParameter(symbol="x", name="X")
        with pytest.raises(ValidationError):
            param.maximum = 5.0


@pytest.mark.unit
class TestPluginDescription:
    """Test lookups and the cache document."""

    def test_lookups(self, description):
        assert description.get_control("mode").integer
        assert description.get_control("missing") is None
        assert description.get_file_parameter(IR_URI).label == "Impulse"
        assert description.get_file_parameter("urn:none") is None

    def test_json_round_trip(self, description):
        assert PluginDescription.model_validate_json(description.model_dump_json()) == description

    def test_cache_document_version(self, description):
        document = PluginCacheDocument(plugins={DELAY_URI: description})
        assert document.version == CACHE_SCHEMA_VERSION
        assert document.is_current
        assert not PluginCacheDocument(version=CACHE_SCHEMA_VERSION - 1).is_current


@pytest.mark.unit
class TestPedalInstance:
    """Test live values on a pedal."""

    def test_display_fields(self, pedal):
        assert pedal.has_metadata
        assert pedal.label == "Tape Delay"
        assert pedal.brand == "Example"

    def test_unresolved_pedal(self):
        pedal = PedalInstance(instance="ghost_1", plugin_uri="urn:missing")
        assert not pedal.has_metadata
        assert pedal.label == "ghost_1"
        assert pedal.brand is None
        assert pedal.controls == []
        assert pedal.file_parameters == []

    def test_controls_use_defaults(self, pedal):
        values = {param.symbol: value for param, value in pedal.controls}
        assert values == {"time": 1.0, "mode": 0.0, "bypass": 0.0}

    def test_get_value(self, pedal):
        assert pedal.get_value("time") == 1.0
        assert pedal.get_value("mode") == 0.0
        assert pedal.get_value("unknown") is None

    def test_set_value_normalizes(self, pedal):
        assert pedal.set_value("time", 5.0) == 2.0
        assert pedal.set_value("mode", 1.4) == 1.0
        assert pedal.values["time"] == 2.0

    def test_set_value_unknown_symbol_is_stored(self, pedal):
        assert pedal.set_value("extra", 7.5) == 7.5

    def test_file_values(self, pedal):
        pedal.set_file_value(IR_URI, "/data/hall.wav")
        assert pedal.file_parameters[0].path == "/data/hall.wav"
        pedal.set_file_value(IR_URI, None)
        assert pedal.file_parameters[0].path is None

    @pytest.mark.parametrize("reference", ["delay_1", "/graph/delay_1", "<delay_1>"])
    def test_matches_instance(self, pedal, reference):
        assert pedal.matches_instance(reference)

    def test_does_not_match_other_instance(self, pedal):
        assert not pedal.matches_instance("delay_10")


@pytest.mark.unit
class TestPedalboard:
    """Test the resolved pedal list."""

    @pytest.fixture
    def pedalboard(self, tmp_path):
        return Pedalboard("Board", tmp_path / "board.pedalboard", "board.ttl")

    def test_unresolved(self, pedalboard):
        assert not pedalboard.is_resolved
        assert pedalboard.pedals is None
        assert not pedalboard.apply_parameter("delay_1", "time", 1.0)

    def test_apply_parameter(self, pedalboard, pedal):
        pedalboard.set_pedals([pedal])
        assert pedalboard.is_resolved
        assert pedalboard.apply_parameter("/graph/delay_1", "time", 1.5)
        assert pedal.values["time"] == 1.5
        assert not pedalboard.apply_parameter("reverb_1", "time", 1.5)

    def test_apply_file_parameter(self, pedalboard, pedal):
        pedalboard.set_pedals([pedal])
        assert pedalboard.apply_file_parameter("delay_1", IR_URI, "/data/room.wav")
        assert pedal.file_values == {IR_URI: "/data/room.wav"}

    def test_clear_pedals(self, pedalboard, pedal):
        pedalboard.set_pedals([pedal])
        pedalboard.clear_pedals()
        assert not pedalboard.is_resolved

    def test_ttl_path(self, pedalboard, tmp_path):
        assert pedalboard.ttl_path == tmp_path / "board.pedalboard" / "board.ttl"


@pytest.mark.unit
class TestBank:
    """Test bank model."""

    def test_all_pedalboards(self):
        bank = Bank.all_pedalboards()
        assert bank.id == 1
        assert bank.is_all_pedalboards
        assert bank.title == "All Pedalboards"

    def test_ids_start_at_one(self):
        with pytest.raises(ValidationError):
            Bank(id=0)

    def test_default_title(self):
        assert Bank(id=2).title == "Unnamed Bank"
