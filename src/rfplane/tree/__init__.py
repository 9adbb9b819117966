"""
Observable parameter store.

A `PropertyTree` maps paths to `Property` leaves. Leaves may coerce writes
and publish reads, which is how radio control objects route tree access to
remote hardware calls.

Examples
--------
```python
from rfplane.tree import PropertyTree
tree = PropertyTree()
tree.create("/tick_rate", 125e6)
tree.create("/dboards/A/rx_frontends/0/freq/value", 2.5e9,
            coercer=tune, publisher=read_back)
tree.set("/dboards/A/rx_frontends/0/freq/value", 1e9)  # returns realized value
```
"""

from .property import NOVALUE, Property
from .tree import PropertyTree, join_path, normalize_path

__all__ = ["NOVALUE", "Property", "PropertyTree", "join_path", "normalize_path"]
