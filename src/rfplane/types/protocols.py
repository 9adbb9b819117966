"""Protocols for the collaborators the control plane consumes.

The front-end control objects never depend on a concrete RPC client class.
Anything with the methods below can be attached as a remote session: the
ZeroMQ client in `rfplane.rpc`, the recording mock used in tests, or an
adapter around another transport.

Example
-------
    class MyTransport:
        def request_with_token(self, method: str, *args): ...
        def notify_with_token(self, method: str, *args) -> None: ...

    radio.attach_remote_session(MyTransport(), {})
"""

from __future__ import annotations

from typing import Any, Callable, Protocol, runtime_checkable


@runtime_checkable
class RPCClientProtocol(Protocol):
    """Methods required of a remote session.

    Both methods block until the remote service answers and raise on any
    failure (unreachable service, rejected call, invalid or expired token).
    Timeouts and retries are the implementation's business.
    """

    request_with_token: Callable[..., Any]
    """Call ``method(*args)`` remotely with the session token, return its result."""

    notify_with_token: Callable[..., None]
    """Call ``method(*args)`` remotely with the session token, expect only an ack."""
