"""Tests for the Magnesium front-end control object"""

import pytest
from loguru import logger

import rfplane
from rfplane.device import MagnesiumRadioCtrl
from rfplane.device.magnesium import (
    MAGNESIUM_DEFAULT_BANDWIDTH,
    MAGNESIUM_TICK_RATE,
)
from rfplane.rpc import MockRPCClient
from rfplane.tree import PropertyTree
from rfplane.types import (
    RX_DIRECTION,
    TX_DIRECTION,
    ControlPlaneError,
    FrontendError,
    InvalidArgumentError,
    MetaRange,
    RemoteError,
    SessionNotAttachedError,
)
from rfplane.util import TEST_LOGLEVEL


def _warnings(records):
    return [r["message"] for r in records if r["level"].name == "WARNING"]


class TestMagnesiumFrontend:
    @pytest.fixture(autouse=True, scope="class")
    def client_log(self):
        rfplane.util.start_client_log(
            log_level=TEST_LOGLEVEL, log_to_stdout=True, log_to_file=False
        )
        yield
        rfplane.util.shutdown_client_log()

    @pytest.fixture(autouse=True, scope="function")
    def log(self, request):
        logger.warning("STARTED Test '{}'".format(request.node.originalname))

        def fin():
            logger.warning("COMPLETED Test '{}' \n".format(request.node.originalname))

        request.addfinalizer(fin)

    def test_set_frequency_forwards_which_token(
        self, attached_radio: MagnesiumRadioCtrl, rpcc: MockRPCClient
    ):
        rpcc.set_response("db_0_set_freq", lambda which, freq, skip: 2.4e9 + 1.5)
        result = attached_radio.set_frequency(2.4e9, 1, RX_DIRECTION)
        assert result.is_executed
        assert result.value == 2.4e9 + 1.5
        assert rpcc.calls == [("request", "db_0_set_freq", ("RX2", 2.4e9, False))]

    def test_get_frequency_is_never_cached(
        self, attached_radio: MagnesiumRadioCtrl, rpcc: MockRPCClient
    ):
        attached_radio.set_frequency(1e9, 0, TX_DIRECTION)
        rpcc.state[("freq", "TX1")] = 1.1e9  # changed behind our back
        assert attached_radio.get_frequency(0, TX_DIRECTION).value == 1.1e9
        assert attached_radio.get_frequency(0, TX_DIRECTION).value == 1.1e9
        assert rpcc.methods_called().count("db_0_get_freq") == 2

    def test_lo_sibling_sees_retune(
        self, attached_radio: MagnesiumRadioCtrl, rpcc: MockRPCClient
    ):
        attached_radio.set_frequency(3e9, 0, RX_DIRECTION)
        assert attached_radio.get_frequency(1, RX_DIRECTION).value == 3e9
        assert attached_radio.get_lo_siblings(0, RX_DIRECTION) == (1,)
        assert rpcc.calls[-1] == ("request", "db_0_get_freq", ("RX2",))

    def test_separate_lo_groups(self, tree: PropertyTree):
        radio = MagnesiumRadioCtrl(tree, lo_groups=((0,), (1,)))
        assert radio.get_lo_siblings(0, RX_DIRECTION) == ()
        assert radio.get_lo_siblings(1, TX_DIRECTION) == ()

    def test_overlapping_lo_groups(self, tree: PropertyTree):
        with pytest.raises(InvalidArgumentError):
            MagnesiumRadioCtrl(tree, lo_groups=((0, 1), (1,)))

    def test_gain_is_not_clamped(
        self, attached_radio: MagnesiumRadioCtrl, rpcc: MockRPCClient
    ):
        # out of the advisory range, still forwarded unchanged
        result = attached_radio.set_gain(55.0, 0, TX_DIRECTION)
        assert result.value == 55.0
        assert rpcc.calls[-1] == ("request", "db_0_set_gain", ("TX1", 55.0))
        assert attached_radio.get_gain(0, TX_DIRECTION).value == 55.0

    def test_invalid_channel_makes_no_call(
        self, attached_radio: MagnesiumRadioCtrl, rpcc: MockRPCClient
    ):
        with pytest.raises(InvalidArgumentError):
            attached_radio.set_frequency(1e9, 2, RX_DIRECTION)
        with pytest.raises(InvalidArgumentError):
            attached_radio.get_gain(-1, TX_DIRECTION)
        with pytest.raises(InvalidArgumentError):
            attached_radio.set_antenna("RX2", 5, RX_DIRECTION)
        assert rpcc.calls == []

    @pytest.mark.parametrize("value", ["high", None, True, [1e9]])
    def test_non_numeric_values_make_no_call(
        self, attached_radio: MagnesiumRadioCtrl, rpcc: MockRPCClient, value
    ):
        with pytest.raises(InvalidArgumentError):
            attached_radio.set_frequency(value, 0, RX_DIRECTION)
        with pytest.raises(InvalidArgumentError):
            attached_radio.set_gain(value, 1, TX_DIRECTION)
        with pytest.raises(InvalidArgumentError):
            attached_radio.tree.set("/dboards/A/rx_frontends/0/gains/null/value", value)
        assert rpcc.calls == []

    def test_integer_values_accepted(
        self, attached_radio: MagnesiumRadioCtrl, rpcc: MockRPCClient
    ):
        assert attached_radio.set_gain(10, 0, RX_DIRECTION).value == 10
        assert attached_radio.set_frequency(2_000_000_000, 0, RX_DIRECTION).value == 2e9

    def test_antenna_stubs(
        self, attached_radio: MagnesiumRadioCtrl, rpcc: MockRPCClient, log_records
    ):
        result = attached_radio.set_antenna("RX2", 0, RX_DIRECTION)
        assert result.is_unsupported
        assert result.value is None
        result = attached_radio.get_antenna(1, TX_DIRECTION)
        assert result.is_unsupported
        assert result.value == "RX1"
        assert rpcc.calls == []
        assert len(_warnings(log_records)) == 2

    def test_bandwidth_stubs(
        self, attached_radio: MagnesiumRadioCtrl, rpcc: MockRPCClient, log_records
    ):
        result = attached_radio.set_bandwidth(20e6, 0, RX_DIRECTION)
        assert result.is_unsupported
        assert result.value == MAGNESIUM_DEFAULT_BANDWIDTH
        assert attached_radio.get_bandwidth(1, RX_DIRECTION).value == 40e6
        assert rpcc.calls == []
        assert any("bandwidth" in msg for msg in _warnings(log_records))

    def test_bandwidth_rx_only(self, attached_radio: MagnesiumRadioCtrl):
        with pytest.raises(InvalidArgumentError):
            attached_radio.set_bandwidth(20e6, 0, TX_DIRECTION)
        with pytest.raises(InvalidArgumentError):
            attached_radio.get_bandwidth(0, TX_DIRECTION)

    def test_set_rate(self, radio: MagnesiumRadioCtrl, log_records):
        assert radio.set_rate(MAGNESIUM_TICK_RATE).is_executed
        assert _warnings(log_records) == []
        result = radio.set_rate(100e6)
        assert result.is_unsupported
        assert result.value == MAGNESIUM_TICK_RATE
        assert radio.get_rate() == MAGNESIUM_TICK_RATE
        assert len(_warnings(log_records)) == 1

    def test_rates_and_ranges(self, radio: MagnesiumRadioCtrl):
        assert radio.get_output_samp_rate(0) == 125e6
        assert radio.get_freq_range() == MetaRange(300e6, 6e9)
        assert radio.get_gain_range(RX_DIRECTION) == MetaRange(0.0, 30.0, 0.5)
        assert radio.get_gain_range(TX_DIRECTION) == MetaRange(0.0, 41.95, 0.05)

    def test_remote_failure_propagates(
        self, attached_radio: MagnesiumRadioCtrl, rpcc: MockRPCClient
    ):
        rpcc.fail("db_0_get_gain", "transceiver not ready")
        with pytest.raises(ControlPlaneError) as exc_info:
            attached_radio.get_gain(0, RX_DIRECTION)
        assert exc_info.value.procedure == "db_0_get_gain"
        assert isinstance(exc_info.value.__cause__, RemoteError)

    def test_legacy_api(self, attached_radio: MagnesiumRadioCtrl, rpcc: MockRPCClient):
        assert attached_radio.set_rx_frequency(1e9, 0) == 1e9
        assert attached_radio.get_rx_frequency(1) == 1e9
        assert attached_radio.set_tx_gain(10.0, 1) == 10.0
        assert attached_radio.get_tx_gain(1) == 10.0
        assert attached_radio.get_rx_antenna(0) == "RX1"
        assert attached_radio.get_rx_bandwidth(0) == 40e6
        assert attached_radio.set_rx_antenna("RX2", 0) is None

    def test_frontend_interface(
        self, attached_radio: MagnesiumRadioCtrl, rpcc: MockRPCClient
    ):
        tx1 = attached_radio.frontend(TX_DIRECTION, 1)
        assert tx1.which == "TX2"
        tx1.set_gain(3.0)
        assert rpcc.calls[-1] == ("request", "db_0_set_gain", ("TX2", 3.0))
        assert tx1.get_gain().value == 3.0
        assert tx1.get_gain_range().stop == 41.95
        with pytest.raises(InvalidArgumentError):
            attached_radio.frontend(RX_DIRECTION, 2)


class TestRemoteSession:
    def test_unattached_raises(self, radio: MagnesiumRadioCtrl):
        assert not radio.is_connected()
        with pytest.raises(SessionNotAttachedError):
            radio.get_frequency(0, RX_DIRECTION)
        with pytest.raises(SessionNotAttachedError):
            radio.init_defaults()

    def test_stubs_need_no_session(self, radio: MagnesiumRadioCtrl):
        assert radio.get_antenna(0, RX_DIRECTION).is_unsupported

    def test_attach_validates_protocol(self, radio: MagnesiumRadioCtrl):
        with pytest.raises(InvalidArgumentError):
            radio.attach_remote_session(object(), {})
        assert not radio.is_connected()

    def test_attach_once(self, radio: MagnesiumRadioCtrl, rpcc: MockRPCClient):
        radio.attach_remote_session(rpcc, {"x": 1})
        radio.attach_remote_session(rpcc, {"x": 2})  # same client, no-op
        assert radio.block_args == {"x": 1}
        with pytest.raises(FrontendError):
            radio.attach_remote_session(MockRPCClient(), {})
        assert radio.open()[0]

    def test_close_detaches(self, attached_radio: MagnesiumRadioCtrl):
        attached_radio.close()
        assert not attached_radio.open()[0]
        with pytest.raises(SessionNotAttachedError):
            attached_radio.get_gain(0, RX_DIRECTION)

    def test_reattach_after_close(self, attached_radio, tree: PropertyTree):
        attached_radio.close()
        other = MockRPCClient()
        attached_radio.attach_remote_session(other)
        tree.get("/dboards/A/eeprom")
        assert other.calls == [("request", "get_db_eeprom", (0,))]

    def test_eeprom_wiring(self, tree: PropertyTree, rpcc: MockRPCClient):
        radio = MagnesiumRadioCtrl(tree, slot="B", db_idx=1, rpc_prefix="db_1_")
        rpcc.set_response("get_db_eeprom", {"serial": "31A3F5B"})
        radio.attach_remote_session(rpcc, {})
        assert tree.get("/dboards/B/eeprom") == {"serial": "31A3F5B"}
        tree.set("/dboards/B/eeprom", {"serial": "X"})
        assert rpcc.calls == [
            ("request", "get_db_eeprom", (1,)),
            ("notify", "set_db_eeprom", (1, {"serial": "X"})),
        ]

    def test_metadata(self, radio: MagnesiumRadioCtrl):
        metadata = radio.unroll_metadata()
        assert metadata["slot"] == "A"
        assert metadata["db_idx"] == 0
        assert metadata["rpc_prefix"] == "db_0_"
        assert "tree" not in metadata

    def test_required_config_types(self, tree: PropertyTree):
        with pytest.raises(ValueError):
            MagnesiumRadioCtrl(tree, db_idx=True)
