"""Front-end control for the Magnesium daughterboard (AD9371 transceiver).

One `MagnesiumRadioCtrl` exists per daughterboard slot. It owns no hardware
state of its own: every frequency or gain access is a synchronous call to the
remote control service, and whatever that service answers is what the caller
gets. The object also registers the slot's front-ends in a property tree so
generic tooling can tune the radio through paths like
``/dboards/A/rx_frontends/0/freq/value``.

Hardware notes
--------------
The AD9371 has one LO per direction. Tuning RX channel 0 retunes RX channel 1
as well, and vice versa. Reads are therefore never served from a local copy:
a getter always asks the remote service, so the two channels of an LO group
can never disagree with the hardware.

Antenna switching and analog bandwidth control are not wired to this control
plane yet. Those operations are stubs that log a warning and return an
``UNSUPPORTED`` `FrontendResult` carrying a fallback value.

Examples
--------
```python
tree = PropertyTree()
radio = MagnesiumRadioCtrl(tree, slot="A", db_idx=0, rpc_prefix="db_0_")
radio.attach_remote_session(rpcc, {})
radio.init_defaults()
radio.set_frequency(1e9, 0, RX_DIRECTION).value  # realized frequency
tree.get("/dboards/A/rx_frontends/1/freq/value")  # same LO, re-queried
```
"""

from __future__ import annotations

from numbers import Real
from typing import Any, Mapping, Optional, Sequence, Union

from loguru import logger

from rfplane.device.device import Device
from rfplane.tree import PropertyTree, join_path
from rfplane.types import (
    NUM_CHANS_PER_DIRECTION,
    RX_DIRECTION,
    TX_DIRECTION,
    ControlPlaneError,
    Direction,
    FrontendError,
    FrontendInterface,
    FrontendResult,
    InvalidArgumentError,
    MetaRange,
    RPCClientProtocol,
    SessionNotAttachedError,
    get_fe_path,
    get_which,
    validate_chan,
)

MAGNESIUM_TICK_RATE = 125e6  # Hz
MAGNESIUM_RADIO_RATE = 125e6  # Hz
MAGNESIUM_MIN_FREQ = 300e6  # Hz
MAGNESIUM_MAX_FREQ = 6e9  # Hz
MAGNESIUM_MIN_RX_GAIN = 0.0  # dB
MAGNESIUM_MAX_RX_GAIN = 30.0  # dB
MAGNESIUM_RX_GAIN_STEP = 0.5
MAGNESIUM_MIN_TX_GAIN = 0.0  # dB
MAGNESIUM_MAX_TX_GAIN = 41.95  # dB
MAGNESIUM_TX_GAIN_STEP = 0.05
MAGNESIUM_CENTER_FREQ = 2.5e9  # Hz
MAGNESIUM_DEFAULT_RX_ANTENNA = "RX2"
MAGNESIUM_DEFAULT_TX_ANTENNA = "TX/RX"
MAGNESIUM_PLACEHOLDER_ANTENNA = "RX1"  # reported until antenna control exists
MAGNESIUM_DEFAULT_GAIN = 0.0  # dB
MAGNESIUM_DEFAULT_BANDWIDTH = 40e6  # Hz
MAGNESIUM_NUM_RX_CHANS = NUM_CHANS_PER_DIRECTION
MAGNESIUM_NUM_TX_CHANS = NUM_CHANS_PER_DIRECTION
MAGNESIUM_DEFAULT_LO_GROUPS = ((0, 1),)
MAGNESIUM_GAIN_NAME = "null"  # legacy gain stage name in the tree

FREQ_RANGE = MetaRange(MAGNESIUM_MIN_FREQ, MAGNESIUM_MAX_FREQ)
GAIN_RANGES = {
    RX_DIRECTION: MetaRange(
        MAGNESIUM_MIN_RX_GAIN, MAGNESIUM_MAX_RX_GAIN, MAGNESIUM_RX_GAIN_STEP
    ),
    TX_DIRECTION: MetaRange(
        MAGNESIUM_MIN_TX_GAIN, MAGNESIUM_MAX_TX_GAIN, MAGNESIUM_TX_GAIN_STEP
    ),
}
BANDWIDTH_RANGE = MetaRange(MAGNESIUM_DEFAULT_BANDWIDTH, MAGNESIUM_DEFAULT_BANDWIDTH)

LOGroups = Sequence[Sequence[int]]


def _validate_lo_groups(groups: LOGroups) -> tuple[tuple[int, ...], ...]:
    seen = set()
    validated = []
    for group in groups:
        group = tuple(validate_chan(chan) for chan in group)
        if seen.intersection(group):
            raise InvalidArgumentError(f"Channel listed in more than one LO group: {groups}")
        seen.update(group)
        validated.append(group)
    return tuple(validated)


def _validate_number(value: Any, what: str) -> None:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidArgumentError(f"{what} must be a number, got {value!r}")


class MagnesiumRadioCtrl(Device):
    """Control object for one Magnesium daughterboard slot.

    Parameters
    ----------
    tree : PropertyTree
        Tree the slot's front-ends are registered in
    slot : str, optional
        Slot letter, by default "A"
    db_idx : int, optional
        Daughterboard index used for EEPROM calls, by default 0
    rpc_prefix : str, optional
        Prefix of the transceiver procedures for this slot, by default "db_0_"
    num_rx_ports : int, optional
        RX ports discovered for this slot, by default MAGNESIUM_NUM_RX_CHANS
    num_tx_ports : int, optional
        TX ports discovered for this slot, by default MAGNESIUM_NUM_TX_CHANS
    lo_groups : sequence of channel groups, or mapping Direction -> groups
        Channels sharing one LO. A plain sequence applies to both directions.
        By default channels 0 and 1 share an LO in each direction.
    """

    required_config = {"slot": str, "db_idx": int, "rpc_prefix": str}

    def __init__(
        self,
        tree: PropertyTree,
        slot: str = "A",
        db_idx: int = 0,
        rpc_prefix: str = "db_0_",
        num_rx_ports: int = MAGNESIUM_NUM_RX_CHANS,
        num_tx_ports: int = MAGNESIUM_NUM_TX_CHANS,
        lo_groups: Union[LOGroups, Mapping[Direction, LOGroups], None] = None,
    ):
        super().__init__(slot=slot, db_idx=db_idx, rpc_prefix=rpc_prefix)
        logger.trace("Entering MagnesiumRadioCtrl ctor for slot {}...", slot)
        self._tree = tree
        self._rpcc: Optional[RPCClientProtocol] = None
        self._block_args: dict[str, Any] = {}
        self._eeprom_wired = False
        self._num_rx_ports = num_rx_ports
        self._num_tx_ports = num_tx_ports
        self._tick_rate = MAGNESIUM_TICK_RATE
        self._rx_bandwidth = MAGNESIUM_DEFAULT_BANDWIDTH

        if lo_groups is None:
            lo_groups = MAGNESIUM_DEFAULT_LO_GROUPS
        if not isinstance(lo_groups, Mapping):
            lo_groups = {RX_DIRECTION: lo_groups, TX_DIRECTION: lo_groups}
        self._lo_groups = {
            direction: _validate_lo_groups(lo_groups.get(direction, ()))
            for direction in (RX_DIRECTION, TX_DIRECTION)
        }
        logger.trace("Slot {}: RPC prefix `{}', LO groups {}", slot, rpc_prefix, self._lo_groups)

        self._root_path = join_path("dboards", slot)
        self._init_prop_tree()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(slot={self.slot}, rpc_prefix={self.rpc_prefix})"

    # ==========================================================================
    # Device API
    # ==========================================================================

    def open(self) -> tuple[bool, str]:
        if not self.is_connected():
            return False, f"Slot {self.slot}: no remote session attached"
        return True, f"Slot {self.slot}: remote session attached"

    def close(self):
        logger.trace("Detaching remote session from slot {}", self.slot)
        self._rpcc = None

    def is_connected(self) -> bool:
        return self._rpcc is not None

    @property
    def tree(self) -> PropertyTree:
        return self._tree

    @property
    def root_path(self) -> str:
        return self._root_path

    @property
    def block_args(self) -> dict[str, Any]:
        return dict(self._block_args)

    # ==========================================================================
    # Remote session
    # ==========================================================================

    def attach_remote_session(
        self, rpcc: RPCClientProtocol, block_args: Optional[Mapping[str, Any]] = None
    ) -> None:
        """Bind the RPC client and call-time arguments to this slot.

        Also wires the slot's EEPROM leaf: writes are sent with
        ``set_db_eeprom`` and reads fetched with ``get_db_eeprom``, both keyed
        by the daughterboard index.

        Raises
        ------
        InvalidArgumentError
            If `rpcc` does not implement RPCClientProtocol
        FrontendError
            If a different session is already attached
        """
        if not isinstance(rpcc, RPCClientProtocol):
            raise InvalidArgumentError(
                f"{type(rpcc).__name__} does not implement RPCClientProtocol"
            )
        if self._rpcc is not None:
            if self._rpcc is rpcc:
                logger.debug("Slot {}: session already attached", self.slot)
                return
            raise FrontendError(f"Slot {self.slot} already has a remote session")

        self._rpcc = rpcc
        self._block_args = dict(block_args or {})
        logger.debug("Slot {}: attached remote session {}", self.slot, rpcc)

        if not self._eeprom_wired:
            db_idx = self.db_idx
            self._tree.access(join_path(self._root_path, "eeprom")).add_subscriber(
                lambda db_eeprom: self._call_remote(
                    "set_db_eeprom", db_idx, db_eeprom, notify=True
                )
            ).set_publisher(lambda: self._call_remote("get_db_eeprom", db_idx))
            self._eeprom_wired = True

    def _call_remote(self, method: str, *args, notify: bool = False) -> Any:
        if self._rpcc is None:
            raise SessionNotAttachedError(
                f"Slot {self.slot}: attach a remote session before calling {method}"
            )
        logger.trace("Calling {} with {}", method, args)
        try:
            if notify:
                retval = self._rpcc.notify_with_token(method, *args)
            else:
                retval = self._rpcc.request_with_token(method, *args)
        except Exception as e:
            logger.error("Slot {}: {} failed: {}", self.slot, method, e)
            raise ControlPlaneError(f"{method} failed: {e}", procedure=method) from e
        logger.trace("{} returned {}", method, retval)
        return retval

    def _request(self, method: str, *args) -> Any:
        """Call a transceiver procedure of this slot (RPC prefix applied)."""
        return self._call_remote(self.rpc_prefix + method, *args)

    # ==========================================================================
    # Transceiver controls
    # ==========================================================================

    def get_lo_siblings(self, chan: int, direction: Direction) -> tuple[int, ...]:
        """Other channels retuned along with `chan` (same direction, same LO)."""
        get_which(direction, chan)
        for group in self._lo_groups[direction]:
            if chan in group:
                return tuple(c for c in group if c != chan)
        return ()

    def set_frequency(
        self, freq: float, chan: int, direction: Direction, skip_sync: bool = False
    ) -> FrontendResult:
        """Tune the LO serving `chan`, return the frequency the hardware realized.

        The LO is shared, so this also moves every sibling channel. Getters
        always re-query, so they tell the truth afterwards.
        """
        which = get_which(direction, chan)
        _validate_number(freq, "Frequency")
        siblings = self.get_lo_siblings(chan, direction)
        if siblings:
            logger.debug(
                "Tuning {} also retunes {} channel(s) {}", which, direction.name, siblings
            )
        retval = self._request("set_freq", which, freq, skip_sync)
        return FrontendResult.executed(retval)

    def get_frequency(self, chan: int, direction: Direction) -> FrontendResult:
        which = get_which(direction, chan)
        return FrontendResult.executed(self._request("get_freq", which))

    def set_gain(self, gain: float, chan: int, direction: Direction) -> FrontendResult:
        # ranges are advisory, the remote service coerces
        which = get_which(direction, chan)
        _validate_number(gain, "Gain")
        if gain not in GAIN_RANGES[direction]:
            logger.debug("Requested gain {} outside {} on {}", gain, GAIN_RANGES[direction], which)
        return FrontendResult.executed(self._request("set_gain", which, gain))

    def get_gain(self, chan: int, direction: Direction) -> FrontendResult:
        which = get_which(direction, chan)
        return FrontendResult.executed(self._request("get_gain", which))

    def set_antenna(self, ant: str, chan: int, direction: Direction) -> FrontendResult:
        get_which(direction, chan)
        # TODO: route through the CPLD once antenna switching is exposed remotely
        logger.warning("Ignoring attempt to set antenna to {}", ant)
        return FrontendResult.unsupported()

    def get_antenna(self, chan: int, direction: Direction) -> FrontendResult:
        get_which(direction, chan)
        logger.warning("Ignoring attempt to get antenna")
        return FrontendResult.unsupported(MAGNESIUM_PLACEHOLDER_ANTENNA)

    def _require_rx(self, direction: Direction, what: str) -> None:
        if direction != RX_DIRECTION:
            raise InvalidArgumentError(f"{what} is only exposed for RX")

    def set_bandwidth(
        self, bandwidth: float, chan: int, direction: Direction
    ) -> FrontendResult:
        get_which(direction, chan)
        self._require_rx(direction, "Bandwidth control")
        logger.warning("Ignoring attempt to set bandwidth to {}", bandwidth)
        return FrontendResult.unsupported(self._rx_bandwidth)

    def get_bandwidth(self, chan: int, direction: Direction) -> FrontendResult:
        get_which(direction, chan)
        self._require_rx(direction, "Bandwidth control")
        logger.warning("Ignoring attempt to get bandwidth")
        return FrontendResult.unsupported(self._rx_bandwidth)

    def set_rate(self, rate: float) -> FrontendResult:
        """The tick rate is fixed, any other request is rejected."""
        if rate != self.get_rate():
            logger.warning("Attempting to set sampling rate to invalid value {}", rate)
            return FrontendResult.unsupported(self.get_rate())
        return FrontendResult.executed(self.get_rate())

    def get_rate(self) -> float:
        return self._tick_rate

    def get_output_samp_rate(self, port: int = 0) -> float:
        return MAGNESIUM_RADIO_RATE

    def get_gain_range(self, direction: Direction) -> MetaRange:
        return GAIN_RANGES[direction]

    def get_freq_range(self) -> MetaRange:
        return FREQ_RANGE

    def frontend(self, direction: Direction, chan: int) -> FrontendInterface:
        return FrontendInterface(self, direction, chan)

    # ==========================================================================
    # Legacy radio API (plain values)
    # ==========================================================================

    def set_rx_frequency(self, freq: float, chan: int) -> float:
        return self.set_frequency(freq, chan, RX_DIRECTION).value

    def set_tx_frequency(self, freq: float, chan: int) -> float:
        return self.set_frequency(freq, chan, TX_DIRECTION).value

    def get_rx_frequency(self, chan: int) -> float:
        return self.get_frequency(chan, RX_DIRECTION).value

    def get_tx_frequency(self, chan: int) -> float:
        return self.get_frequency(chan, TX_DIRECTION).value

    def set_rx_gain(self, gain: float, chan: int) -> float:
        return self.set_gain(gain, chan, RX_DIRECTION).value

    def set_tx_gain(self, gain: float, chan: int) -> float:
        return self.set_gain(gain, chan, TX_DIRECTION).value

    def get_rx_gain(self, chan: int) -> float:
        return self.get_gain(chan, RX_DIRECTION).value

    def get_tx_gain(self, chan: int) -> float:
        return self.get_gain(chan, TX_DIRECTION).value

    def set_rx_antenna(self, ant: str, chan: int) -> None:
        self.set_antenna(ant, chan, RX_DIRECTION)

    def set_tx_antenna(self, ant: str, chan: int) -> None:
        self.set_antenna(ant, chan, TX_DIRECTION)

    def get_rx_antenna(self, chan: int) -> str:
        return self.get_antenna(chan, RX_DIRECTION).value

    def get_tx_antenna(self, chan: int) -> str:
        return self.get_antenna(chan, TX_DIRECTION).value

    def set_rx_bandwidth(self, bandwidth: float, chan: int) -> float:
        return self.set_bandwidth(bandwidth, chan, RX_DIRECTION).value

    def get_rx_bandwidth(self, chan: int) -> float:
        return self.get_bandwidth(chan, RX_DIRECTION).value

    # ==========================================================================
    # Init helpers
    # ==========================================================================

    def _init_prop_tree(self) -> None:
        for direction, num_chans in (
            (RX_DIRECTION, MAGNESIUM_NUM_RX_CHANS),
            (TX_DIRECTION, MAGNESIUM_NUM_TX_CHANS),
        ):
            for chan in range(num_chans):
                self._register_frontend(direction, chan)

        # EEPROM publisher/subscriber are wired by attach_remote_session
        self._tree.create(join_path(self._root_path, "eeprom"), {})

        self._tree.create(
            join_path("rx_codecs", self.slot, "name"), "AD9361 Dual ADC", read_only=True
        )
        self._tree.create(
            join_path("tx_codecs", self.slot, "name"), "AD9361 Dual DAC", read_only=True
        )

        # shared by all slots of a motherboard, the first slot creates it
        if not self._tree.exists("tick_rate"):
            self._tree.create(
                "tick_rate",
                MAGNESIUM_TICK_RATE,
                coercer=lambda rate: self.set_rate(rate).value,
            )

    def _register_frontend(self, direction: Direction, chan: int) -> None:
        fe_path = get_fe_path(self.slot, direction, chan)
        logger.trace("Adding FE at {}", fe_path)
        tree = self._tree
        label = direction.token_prefix

        tree.create(join_path(fe_path, "name"), f"Magnesium {label} {chan}")
        tree.create(join_path(fe_path, "connection"), "IQ")

        default_ant = get_which(direction, chan)
        tree.create(
            join_path(fe_path, "antenna", "value"),
            default_ant,
            publisher=lambda: self.get_antenna(chan, direction).value,
        ).add_subscriber(lambda ant: self.set_antenna(ant, chan, direction))
        tree.create(
            join_path(fe_path, "antenna", "options"), [default_ant], read_only=True
        )

        tree.create(
            join_path(fe_path, "freq", "value"),
            MAGNESIUM_CENTER_FREQ,
            coercer=lambda freq: self.set_frequency(freq, chan, direction).value,
            publisher=lambda: self.get_frequency(chan, direction).value,
        )
        tree.create(join_path(fe_path, "freq", "range"), FREQ_RANGE, read_only=True)

        gain_path = join_path(fe_path, "gains", MAGNESIUM_GAIN_NAME)
        tree.create(
            join_path(gain_path, "value"),
            MAGNESIUM_DEFAULT_GAIN,
            coercer=lambda gain: self.set_gain(gain, chan, direction).value,
            publisher=lambda: self.get_gain(chan, direction).value,
        )
        tree.create(
            join_path(gain_path, "range"), GAIN_RANGES[direction], read_only=True
        )

        if direction == RX_DIRECTION:
            tree.create(
                join_path(fe_path, "bandwidth", "value"),
                MAGNESIUM_DEFAULT_BANDWIDTH,
                coercer=lambda bw: self.set_bandwidth(bw, chan, direction).value,
                publisher=lambda: self.get_bandwidth(chan, direction).value,
            )
        else:
            tree.create(
                join_path(fe_path, "bandwidth", "value"), MAGNESIUM_DEFAULT_BANDWIDTH
            )
        tree.create(
            join_path(fe_path, "bandwidth", "range"), BANDWIDTH_RANGE, read_only=True
        )

    def init_defaults(self) -> None:
        """Apply power-on defaults to every discovered channel, RX first.

        Port counts that differ from the reference topology are reported, not
        fatal. Channels beyond what the transceiver can address are skipped.

        Raises
        ------
        SessionNotAttachedError
            If no remote session is attached
        ControlPlaneError
            If a remote call fails
        """
        logger.trace("Initializing defaults...")
        if self._rpcc is None:
            raise SessionNotAttachedError(
                f"Slot {self.slot}: attach a remote session before init_defaults"
            )
        num_rx_chans = self._checked_port_count(
            RX_DIRECTION, self._num_rx_ports, MAGNESIUM_NUM_RX_CHANS
        )
        num_tx_chans = self._checked_port_count(
            TX_DIRECTION, self._num_tx_ports, MAGNESIUM_NUM_TX_CHANS
        )
        logger.trace("Num TX chans: {} Num RX chans: {}", num_tx_chans, num_rx_chans)

        logger.trace("Setting tick rate to {} MHz", MAGNESIUM_TICK_RATE / 1e6)
        self.set_rate(MAGNESIUM_TICK_RATE)

        for chan in range(num_rx_chans):
            fe_path = get_fe_path(self.slot, RX_DIRECTION, chan)
            self._tree.set(join_path(fe_path, "freq", "value"), MAGNESIUM_CENTER_FREQ)
            self._tree.set(
                join_path(fe_path, "gains", MAGNESIUM_GAIN_NAME, "value"),
                MAGNESIUM_DEFAULT_GAIN,
            )
            self._tree.set(
                join_path(fe_path, "antenna", "value"), MAGNESIUM_DEFAULT_RX_ANTENNA
            )
            self._tree.set(
                join_path(fe_path, "bandwidth", "value"), MAGNESIUM_DEFAULT_BANDWIDTH
            )

        for chan in range(num_tx_chans):
            fe_path = get_fe_path(self.slot, TX_DIRECTION, chan)
            self._tree.set(join_path(fe_path, "freq", "value"), MAGNESIUM_CENTER_FREQ)
            self._tree.set(
                join_path(fe_path, "gains", MAGNESIUM_GAIN_NAME, "value"),
                MAGNESIUM_DEFAULT_GAIN,
            )
            self._tree.set(
                join_path(fe_path, "antenna", "value"), MAGNESIUM_DEFAULT_TX_ANTENNA
            )

    def _checked_port_count(
        self, direction: Direction, discovered: int, expected: int
    ) -> int:
        if discovered != expected:
            logger.warning(
                "Slot {}: {} {} ports discovered, reference topology has {}",
                self.slot,
                discovered,
                direction.name,
                expected,
            )
        if discovered > NUM_CHANS_PER_DIRECTION:
            logger.warning(
                "Slot {}: only initializing the first {} {} channels",
                self.slot,
                NUM_CHANS_PER_DIRECTION,
                direction.name,
            )
            return NUM_CHANS_PER_DIRECTION
        return max(discovered, 0)
