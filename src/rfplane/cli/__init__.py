"""
Command-line interface for rfplane.

This module provides command-line tools for inspecting and tuning the RF
front-ends of a radio through its property tree.

The CLI is built using the Click framework and provides a hierarchical
command structure with consistent help documentation.

Examples
--------
Tuning RX channel 0 of slot A on the "lab" radio:
```bash
$ rfplane set /dboards/A/rx_frontends/0/freq/value 1e9 -n lab
```

See Also
--------
rfplane.system : Radio configuration and management
rfplane.tree : Property tree


CLI Tree
--------

```
$ rfplane --tree
cli
└── get
└── init
└── ls
└── radios
└── set
```
"""

from .base import cli, parse_value, tree_option

__all__ = ["cli", "parse_value", "tree_option"]
