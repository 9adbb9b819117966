# -*- coding: utf-8 -*-
"""
Daughterboard control objects for rfplane.

Each control object owns one daughterboard slot and implements the common
interface defined by the `Device` base class. Front-end parameters are
reachable both through methods and through the property tree the object
registers its leaves in.

Examples
--------
Tuning a channel of slot A:
```python
from rfplane.device import MagnesiumRadioCtrl
from rfplane.tree import PropertyTree
from rfplane.types import RX_DIRECTION
radio = MagnesiumRadioCtrl(PropertyTree(), slot="A")
radio.attach_remote_session(rpcc)
radio.set_frequency(2.4e9, 0, RX_DIRECTION).value
```

See Also
--------
rfplane.system : Radio configuration and management
rfplane.types.interfaces : Per-channel views of a daughterboard
"""

from .device import Device
from .magnesium import MagnesiumRadioCtrl
