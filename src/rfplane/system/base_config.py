"""Configuration dataclasses for rfplane radios."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from rfplane.device.magnesium import (
    MAGNESIUM_DEFAULT_LO_GROUPS,
    MAGNESIUM_NUM_RX_CHANS,
    MAGNESIUM_NUM_TX_CHANS,
)
from rfplane.util import DEFAULT_HOST_ADDR, DEFAULT_PORT, DEFAULT_RETRIES, DEFAULT_TIMEOUT


@dataclass
class SlotConfig:
    """Configuration of one daughterboard slot.

    Attributes
    ----------
    slot : str
        Slot letter
    db_idx : int
        Daughterboard index used for EEPROM calls
    rpc_prefix : str
        Prefix of the slot's transceiver procedures, ``db_<db_idx>_`` if not given
    rx_ports : int
        RX ports discovered on the slot
    tx_ports : int
        TX ports discovered on the slot
    lo_groups : tuple[tuple[int, ...], ...]
        Channels sharing one LO, applied to both directions
    """

    slot: str
    db_idx: int = 0
    rpc_prefix: Optional[str] = None
    rx_ports: int = MAGNESIUM_NUM_RX_CHANS
    tx_ports: int = MAGNESIUM_NUM_TX_CHANS
    lo_groups: tuple[tuple[int, ...], ...] = MAGNESIUM_DEFAULT_LO_GROUPS

    def __post_init__(self):
        if self.rpc_prefix is None:
            self.rpc_prefix = f"db_{self.db_idx}_"


@dataclass
class RadioConfig:
    """Radio configuration loaded from INI files.

    Attributes
    ----------
    radio_name : str
        Name of the radio configuration
    host : str
        Address of the remote hardware service
    port : int
        Port of the remote hardware service
    token : str, optional
        Session token handed to the RPC client
    timeout : float
        Seconds to wait for each RPC reply
    retries : int
        RPC resends before giving up
    slots : dict[str, SlotConfig]
        Mapping of slot letters to slot configurations
    """

    radio_name: str
    host: str = DEFAULT_HOST_ADDR
    port: int = DEFAULT_PORT
    token: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    retries: int = DEFAULT_RETRIES
    slots: dict[str, SlotConfig] = field(default_factory=dict)
