# -*- coding: utf-8 -*-
"""
Radio configuration and management for rfplane.

A `RadioSystem` represents one radio: the remote hardware service it talks
to and the daughterboard slots it carries. It includes:

- Configuration dataclasses (`RadioConfig`, `SlotConfig`)
- INI loading and validation of radio configurations
- Slot lookup and per-channel front-end access

Examples
--------
Starting up the packaged mock radio:
```python
from rfplane.system import RadioSystem
radio = RadioSystem("mock")
radio.startup()
radio.frontend("A", RX_DIRECTION, 0).get_frequency().value
radio.packdown()
```

See Also
--------
rfplane.device : Daughterboard control objects
rfplane.tree : Property tree
"""

from .base_config import RadioConfig, SlotConfig
from .sysconfig import (
    list_available_radios,
    load_radio_config,
    parse_lo_groups,
    parse_radio_config,
    validate_radio_config,
)
from .system import RadioSystem, requires_started_up

__all__ = [
    "RadioConfig",
    "SlotConfig",
    "RadioSystem",
    "requires_started_up",
    "list_available_radios",
    "load_radio_config",
    "parse_lo_groups",
    "parse_radio_config",
    "validate_radio_config",
]
