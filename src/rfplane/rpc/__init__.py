# -*- coding: utf-8 -*-
"""
RPC clients for the remote hardware service.

Control objects accept any object satisfying
`rfplane.types.RPCClientProtocol`. Two are provided:

- `RPCClient`: MessagePack requests over a ZeroMQ REQ socket, with
  timeout/retry handling and session-token authentication.
- `MockRPCClient`: records calls and emulates a device in-process, for tests
  and dry runs.

See Also
--------
rfplane.rpc.client : ZeroMQ client
rfplane.types.messages : Wire message classes
"""

from .client import RPCClient
from .mock import MockRPCClient

__all__ = ["RPCClient", "MockRPCClient"]
