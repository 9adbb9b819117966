"""Signal directions and channel addressing.

Every front-end operation is addressed by a (direction, channel) pair. This
module turns that pair into the two names the rest of the package needs:

- the "which" token passed to the remote transceiver procedures
  (``"RX1"``, ``"RX2"``, ``"TX1"``, ``"TX2"``; 1-based), and
- the property tree path of the front-end
  (``/dboards/A/rx_frontends/0``; 0-based).

Both mappings are pure and validate their arguments.
"""

from __future__ import annotations

from enum import Enum

from .exceptions import InvalidArgumentError

NUM_CHANS_PER_DIRECTION = 2  # channels addressable by the transceiver API


class Direction(str, Enum):
    """Signal path direction."""

    RX = "rx"
    TX = "tx"

    @property
    def token_prefix(self) -> str:
        return self.value.upper()

    @property
    def frontends_name(self) -> str:
        """Name of the front-end container in the property tree."""
        return f"{self.value}_frontends"


RX_DIRECTION = Direction.RX
TX_DIRECTION = Direction.TX


def validate_chan(chan: int) -> int:
    # bool is an int subclass, but True is not a channel
    if isinstance(chan, bool) or not isinstance(chan, int):
        raise InvalidArgumentError(f"Channel must be an int, got {chan!r}")
    if chan < 0 or chan >= NUM_CHANS_PER_DIRECTION:
        raise InvalidArgumentError(
            f"Invalid channel {chan}, must be in 0..{NUM_CHANS_PER_DIRECTION - 1}"
        )
    return chan


def validate_direction(direction: Direction) -> Direction:
    if not isinstance(direction, Direction):
        raise InvalidArgumentError(f"Invalid direction {direction!r}")
    return direction


def get_which(direction: Direction, chan: int) -> str:
    """Return the 'which' token for transceiver API calls.

    Parameters
    ----------
    direction : Direction
        RX or TX
    chan : int
        Zero-based channel index (0 or 1)

    Returns
    -------
    str
        Token of the form "RX1", "TX2", ...

    Raises
    ------
    InvalidArgumentError
        If the direction or channel is invalid
    """
    validate_direction(direction)
    validate_chan(chan)
    return f"{direction.token_prefix}{chan + 1}"


def get_dboard_fe_from_chan(chan: int, direction: Direction) -> str:
    validate_direction(direction)
    return str(validate_chan(chan))


def get_chan_from_dboard_fe(fe: str, direction: Direction) -> int:
    validate_direction(direction)
    try:
        chan = int(fe)
    except (TypeError, ValueError):
        raise InvalidArgumentError(f"Invalid front-end name {fe!r}")
    return validate_chan(chan)


def get_fe_path(slot: str, direction: Direction, chan: int) -> str:
    """Property tree path of a front-end, e.g. ``/dboards/A/rx_frontends/0``."""
    fe = get_dboard_fe_from_chan(chan, direction)
    return f"/dboards/{slot}/{direction.frontends_name}/{fe}"
