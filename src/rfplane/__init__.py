# -*- coding: utf-8 -*-
"""# rfplane Documentation

`RF front-end control plane`

A (python) library for controlling the RF front-ends of SDR daughterboards.
The front-end hardware lives behind a remote control service; rfplane
addresses its channels, forwards tuning and gain requests over RPC, and
exposes every front-end parameter in an observable property tree.

- `rfplane.device`: daughterboard control objects (Magnesium)
- `rfplane.tree`: the property tree front-end parameters are registered in
- `rfplane.rpc`: RPC clients for the remote service (ZeroMQ, mock)
- `rfplane.system`: radio configuration files and slot management
- `rfplane.cli`: the `rfplane` command line interface
"""

from ._version import __version__
