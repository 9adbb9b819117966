"""Device base class.

All daughterboard control objects inherit from `Device`, which provides:
1. Configuration validation (`required_config`)
2. Connection state (`open`, `close`, `is_connected`)
3. Attribute access for metadata dumps

For a daughterboard, "connected" means a remote session to the embedded
control service is attached; the hardware itself is only reachable through
that session.
"""

from __future__ import annotations

from typing import Type

from loguru import logger

_METADATA_TYPES = (str, int, float, bool, tuple, list, dict)


class Device:
    """Base class for all hardware devices in rfplane.

    Attributes
    ----------
    required_config : dict[str, Type]
        Required configuration parameters and their types. Each is set as an
        attribute of the instance by `__init__`.

    Examples
    --------
    ```python
    class MyBoard(Device):
        required_config = {"slot": str, "db_idx": int}

        def __init__(self, slot: str, db_idx: int):
            super().__init__(slot=slot, db_idx=db_idx)
            self._session = None

        def open(self) -> tuple[bool, str]:
            return self.is_connected(), "..."

        def close(self):
            self._session = None

        def is_connected(self) -> bool:
            return self._session is not None
    ```
    """

    required_config: dict[str, Type] = {}  # Required configuration keys

    def __init__(self, **config_kwargs):
        for key, value in config_kwargs.items():
            setattr(self, key, value)
        for key, value in self.required_config.items():
            if not hasattr(self, key):
                logger.error(
                    f"Device {self.__class__.__name__} missing required config key: "
                    + f"{key}"
                )
                raise ValueError(
                    f"Device {self.__class__.__name__} missing required config "
                    + f"key: {key}"
                )
            # bool passes isinstance(.., int), but is never a valid index
            attr = getattr(self, key)
            if not isinstance(attr, value) or (
                value is int and isinstance(attr, bool)
            ):
                logger.error(
                    f"Device {self.__class__.__name__} config key {key} "
                    + f"has wrong type: {type(attr)} (expected {value})"
                )
                raise ValueError(
                    f"Device {self.__class__.__name__} config key {key} has "
                    + f"wrong type: {type(attr)} (expected {value})"
                )

    def open(self) -> tuple[bool, str]:
        raise NotImplementedError()

    def close(self):
        raise NotImplementedError()

    def is_connected(self) -> bool:
        raise NotImplementedError()

    def get_all_attrs(self):
        """
        Function to return all of the managed attributes of the class
        Managed attributes are the ones that start with a underscore and hold
        plain data (collaborators such as trees and clients are skipped)
        """
        attrs = {}
        for key, value in self.__dict__.items():
            # single underscore attr are managed
            if key[0] == "_" and not key.startswith(f"_{self.__class__.__name__}"):
                if isinstance(value, _METADATA_TYPES):
                    attrs[key[1:]] = value
        return attrs

    def unroll_metadata(self):
        metadata = {key: getattr(self, key) for key in self.required_config}
        metadata.update(self.get_all_attrs())
        return metadata
