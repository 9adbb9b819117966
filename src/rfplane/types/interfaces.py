"""Per-channel interfaces over a daughterboard control object.

A radio control object exposes every operation parametrized by
``(chan, direction)``. Host tooling that works on one signal path at a time
gets a `FrontendInterface` instead, which binds the pair once and offers the
operations without direction-specific code.

Example
-------
    rx0 = radio.frontend(RX_DIRECTION, 0)
    realized = rx0.set_frequency(2.45e9).value
    rx0.get_frequency().value  # re-queried from hardware

See Also
--------
rfplane.device.magnesium : Control object implementation
rfplane.types.results : FrontendResult
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rfplane.types.direction import Direction, get_which
from rfplane.types.results import FrontendResult, MetaRange

if TYPE_CHECKING:
    from rfplane.device.magnesium import MagnesiumRadioCtrl


class FrontendInterface:
    """One (direction, channel) signal path of a daughterboard.

    Parameters
    ----------
    radio : MagnesiumRadioCtrl
        Control object owning the slot
    direction : Direction
        RX or TX
    chan : int
        Zero-based channel index

    Raises
    ------
    InvalidArgumentError
        If the direction/channel pair cannot be addressed
    """

    def __init__(self, radio: MagnesiumRadioCtrl, direction: Direction, chan: int):
        self.which = get_which(direction, chan)
        self._radio = radio
        self.direction = direction
        self.chan = chan

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(slot={self._radio.slot}, which={self.which})"

    def set_frequency(self, freq: float) -> FrontendResult:
        """Tune the LO serving this channel, return the realized frequency.

        The other channel(s) in the same LO group are retuned too.
        """
        return self._radio.set_frequency(freq, self.chan, self.direction)

    def get_frequency(self) -> FrontendResult:
        return self._radio.get_frequency(self.chan, self.direction)

    def set_gain(self, gain: float) -> FrontendResult:
        return self._radio.set_gain(gain, self.chan, self.direction)

    def get_gain(self) -> FrontendResult:
        return self._radio.get_gain(self.chan, self.direction)

    def set_antenna(self, ant: str) -> FrontendResult:
        return self._radio.set_antenna(ant, self.chan, self.direction)

    def get_antenna(self) -> FrontendResult:
        return self._radio.get_antenna(self.chan, self.direction)

    def set_bandwidth(self, bandwidth: float) -> FrontendResult:
        return self._radio.set_bandwidth(bandwidth, self.chan, self.direction)

    def get_bandwidth(self) -> FrontendResult:
        return self._radio.get_bandwidth(self.chan, self.direction)

    def get_gain_range(self) -> MetaRange:
        return self._radio.get_gain_range(self.direction)

    def get_freq_range(self) -> MetaRange:
        return self._radio.get_freq_range()
