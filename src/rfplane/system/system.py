# -*- coding: utf-8 -*-
"""
This is a class to define a radio.
It builds one daughterboard control object per configured slot, registers
them in a shared property tree and hands them the remote session.
"""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable, Optional, ParamSpec, TypeVar

from loguru import logger

from rfplane.device import MagnesiumRadioCtrl
from rfplane.rpc import RPCClient
from rfplane.system.base_config import RadioConfig
from rfplane.system.sysconfig import load_radio_config
from rfplane.tree import PropertyTree
from rfplane.types import (
    Direction,
    FrontendInterface,
    InvalidArgumentError,
    RPCClientProtocol,
    SessionNotAttachedError,
)

P = ParamSpec("P")
T = TypeVar("T")


def requires_started_up(func: Callable[P, T]) -> Callable[P, T]:
    """Decorator to check the radio has a remote session before `func` runs.

    Raises
    ------
    SessionNotAttachedError
        If `startup` (or `connect`) has not been called
    """

    @wraps(func)
    def wrapper(self: RadioSystem, *args: P.args, **kwargs: P.kwargs) -> T:
        if self.rpcc is None:
            raise SessionNotAttachedError(
                f"Cannot call {func.__name__}: "
                "no remote session. Call startup() first."
            )
        return func(self, *args, **kwargs)

    return wrapper


class RadioSystem(object):
    """One radio: a remote hardware service and the daughterboards behind it.

    Parameters
    ----------
    config : str | RadioConfig
        Either a radio name to load from config file, or a RadioConfig
    tree : PropertyTree, optional
        Tree to register the front-ends in, a new one by default

    Raises
    ------
    ValueError
        If radio configuration is invalid or not found
    """

    hardware_started_up: bool = False

    def __init__(self, config: str | RadioConfig, tree: Optional[PropertyTree] = None):
        self.device_status: dict[str, dict[str, bool | str]] = dict()
        self._rpcc: Optional[RPCClientProtocol] = None
        self._owns_client = False

        if isinstance(config, str):
            logger.info(f"Loading radio configuration '{config}'")
            config = load_radio_config(config)
        self.config = config
        self.tree = tree if tree is not None else PropertyTree()

        self._radios: dict[str, MagnesiumRadioCtrl] = {}
        try:
            for slot, slot_config in config.slots.items():
                self._radios[slot] = MagnesiumRadioCtrl(
                    self.tree,
                    slot=slot,
                    db_idx=slot_config.db_idx,
                    rpc_prefix=slot_config.rpc_prefix,
                    num_rx_ports=slot_config.rx_ports,
                    num_tx_ports=slot_config.tx_ports,
                    lo_groups=slot_config.lo_groups,
                )
                logger.info(f"Initialized slot {slot} of radio {config.radio_name}")
        except Exception:
            logger.exception("Error initialising daughterboards.")
            raise

    def __repr__(self) -> str:
        return f"RadioSystem({self.config.radio_name}, slots={self.slots})"

    @property
    def rpcc(self) -> Optional[RPCClientProtocol]:
        return self._rpcc

    @property
    def slots(self) -> list[str]:
        return list(self._radios)

    def connect(
        self, rpcc: Optional[RPCClientProtocol] = None
    ) -> dict[str, dict[str, bool | str]]:
        """Attach a remote session to every slot.

        Parameters
        ----------
        rpcc : RPCClientProtocol, optional
            Client to use, an `RPCClient` for the configured host by default

        Returns
        -------
        dict[str, dict[str, bool | str]]
            Per slot ``{"status": ..., "message": ...}``
        """
        created = False
        if rpcc is None and self._rpcc is not None:
            # already connected, e.g. startup() retried after init_defaults failed
            rpcc = self._rpcc
        elif rpcc is None:
            rpcc = RPCClient(
                self.config.host,
                self.config.port,
                token=self.config.token,
                timeout=self.config.timeout,
                request_retries=self.config.retries,
            )
            created = True

        dev_status: dict[str, dict[str, bool | str]] = dict()
        attached: list[MagnesiumRadioCtrl] = []
        try:
            for slot, radio in self._radios.items():
                slot_config = self.config.slots[slot]
                radio.attach_remote_session(
                    rpcc,
                    {"db_idx": slot_config.db_idx, "rpc_prefix": slot_config.rpc_prefix},
                )
                attached.append(radio)
                ok, msg = radio.open()
                dev_status[slot] = {"status": ok, "message": msg}
        except Exception:
            logger.exception("Error attaching remote session.")
            if created:
                for radio in attached:
                    radio.close()
                rpcc.close()
            raise

        if created:
            self._owns_client = True
        self._rpcc = rpcc
        self.device_status = dev_status
        return dev_status

    def startup(
        self, rpcc: Optional[RPCClientProtocol] = None
    ) -> dict[str, dict[str, bool | str]]:
        """Connect and apply power-on defaults to every slot."""
        ret = self.connect(rpcc)
        self.init_defaults()
        self.hardware_started_up = True
        return ret

    @requires_started_up
    def init_defaults(self) -> None:
        for slot, radio in self._radios.items():
            logger.info(f"Applying defaults to slot {slot}")
            radio.init_defaults()

    def packdown(self):
        for radio in self._radios.values():
            radio.close()
        if self._owns_client and self._rpcc is not None:
            self._rpcc.close()
        self._rpcc = None
        self._owns_client = False
        self.hardware_started_up = False

    def get_radio(self, slot: str) -> MagnesiumRadioCtrl:
        """Get the control object of a slot.

        Raises
        ------
        InvalidArgumentError
            If the slot is not configured
        """
        try:
            return self._radios[slot.upper()]
        except KeyError:
            raise InvalidArgumentError(
                f"No slot {slot} on radio {self.config.radio_name}, have {self.slots}"
            )

    def frontend(self, slot: str, direction: Direction, chan: int) -> FrontendInterface:
        return self.get_radio(slot).frontend(direction, chan)

    def get_metadata(self) -> dict[str, Any]:
        """Unroll the metadata of every slot, plus the radio's own settings."""
        param_dict: dict[str, Any] = {
            f"slot_{slot}": radio.unroll_metadata()
            for slot, radio in self._radios.items()
        }
        param_dict["radio_name"] = self.config.radio_name
        param_dict["host"] = self.config.host
        param_dict["port"] = self.config.port
        return param_dict
