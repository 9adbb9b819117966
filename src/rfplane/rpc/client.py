# -*- coding: utf-8 -*-
"""
ZeroMQ client for the remote hardware service.

Every call is a single MessagePack-encoded `RPCRequest` on a REQ socket,
answered by one `RPCResponse`. The client implements the "lazy pirate"
pattern: it polls for the reply, and if none arrives within the timeout it
throws the confused socket away, reconnects and resends, giving up after a
fixed number of retries.

The session token is owned here. Control objects only ever call
`request_with_token` / `notify_with_token` and never see the token.

Examples
--------
```python
from rfplane.rpc import RPCClient
with RPCClient("192.168.10.2", token=token) as rpcc:
    rpcc.request_with_token("db_0_get_freq", "RX1")
```
"""

from __future__ import annotations

from typing import Any, Optional

import zmq
from loguru import logger

from rfplane.types import (
    CommsError,
    ErrorResponse,
    RemoteError,
    RPCRequest,
    RPCResponse,
)
from rfplane.util import (
    DEFAULT_HOST_ADDR,
    DEFAULT_PORT,
    DEFAULT_RETRIES,
    DEFAULT_TIMEOUT,
    format_error_response,
)


class RPCClient:
    """Synchronous request/response client with session-token authentication.

    Parameters
    ----------
    host : str, optional
        Address of the remote service, by default DEFAULT_HOST_ADDR
    port : int, optional
        Port of the remote service, by default DEFAULT_PORT
    token : str, optional
        Session token, can also be supplied later with `set_token`
    timeout : float, optional
        Seconds to wait for each reply, by default DEFAULT_TIMEOUT
    request_retries : int, optional
        Number of resends before giving up, by default DEFAULT_RETRIES

    Raises
    ------
    CommsError
        If the socket cannot be opened
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST_ADDR,
        port: int = DEFAULT_PORT,
        token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        request_retries: int = DEFAULT_RETRIES,
    ):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.request_retries = request_retries
        self._token = token
        self._context = zmq.Context()
        self._socket: Optional[zmq.Socket] = None
        self._closed = False
        self._open_socket()

    def __repr__(self) -> str:
        return f"RPCClient({self.host}:{self.port})"

    def __enter__(self) -> RPCClient:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Connection handling
    # ------------------------------------------------------------------

    @property
    def address(self) -> str:
        return f"tcp://{self.host}:{self.port}"

    def _open_socket(self) -> None:
        logger.info("Connecting to remote service on {}.", self.address)
        try:
            self._socket = self._context.socket(zmq.REQ)
            self._socket.connect(self.address)
        except Exception:
            logger.exception("Error during connection.")
            raise CommsError(f"Error during connection: {format_error_response()}")

    def _close_socket(self) -> None:
        if self._socket is not None:
            self._socket.setsockopt(zmq.LINGER, 0)
            self._socket.close()
            self._socket = None

    def is_connected(self) -> bool:
        return self._socket is not None

    def close(self) -> None:
        logger.info("Closing connection to {}.", self.address)
        self._closed = True
        self._close_socket()
        self._context.term()

    # ------------------------------------------------------------------
    # Session token
    # ------------------------------------------------------------------

    def set_token(self, token: str) -> None:
        self._token = token

    def get_token(self) -> Optional[str]:
        return self._token

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def _get_response(self, request: RPCRequest) -> RPCResponse:
        """Send `request` and wait for its response, resending on timeout.

        Raises
        ------
        CommsError
            If the client was closed, no reply arrives after all retries, or
            the reply cannot be decoded
        """
        if self._closed:
            raise CommsError(f"Connection to {self.address} is closed")
        if self._socket is None:
            # dropped after a previous call gave up
            self._open_socket()

        retries_left = self.request_retries + 1  # +1 for the first attempt
        logger.trace("*REQUEST* (client->): {}", request)
        payload = request.to_msgpack()
        self._socket.send(payload)
        while True:
            try:
                if self._socket.poll(int(1000 * self.timeout), zmq.POLLIN):
                    raw = self._socket.recv()
                    try:
                        resp = RPCResponse.from_msgpack(raw)
                    except Exception:
                        logger.exception("Could not decode response.")
                        raise CommsError(
                            f"Bad response to {request.method}: "
                            f"{format_error_response()}"
                        )
                    logger.trace("*RESPONSE* (client<-): {}", resp)
                    return resp
            except zmq.ZMQError as e:
                logger.warning(f"ZMQ error: {e}")

            retries_left -= 1
            logger.warning("No response from {} to {}...", self.address, request.method)
            # Socket is confused. Close and remove it.
            self._close_socket()
            if retries_left == 0:
                logger.error("Remote service seems to be offline, abandoning.")
                raise CommsError(
                    f"No response from {self.address} to {request.method}"
                )
            logger.info("Reconnecting to remote service...")
            self._open_socket()
            self._socket.send(payload)

    def _call(
        self, method: str, params: list[Any], token: Optional[str], notify: bool
    ) -> Any:
        request = RPCRequest(method=method, params=params, token=token, notify=notify)
        resp = self._get_response(request)
        if isinstance(resp, ErrorResponse):
            logger.error("Remote error from {}: '{}'", method, resp.value)
            raise RemoteError(resp.value, method=method)
        return resp.value

    def _require_token(self, method: str) -> str:
        if not self._token:
            raise CommsError(f"No session token set, cannot call {method}")
        return self._token

    def request(self, method: str, *args) -> Any:
        """Call an unauthenticated remote procedure, return its result."""
        return self._call(method, list(args), None, False)

    def request_with_token(self, method: str, *args) -> Any:
        """Call a remote procedure with the session token, return its result."""
        return self._call(method, list(args), self._require_token(method), False)

    def notify_with_token(self, method: str, *args) -> None:
        """Call a remote procedure with the session token, expect an ack only."""
        self._call(method, list(args), self._require_token(method), True)

    def ping(self, data: str = "rfplane") -> bool:
        """Check the remote service echoes `data` back."""
        try:
            return self.request("ping", data) == data
        except CommsError:
            logger.exception("Ping to {} failed.", self.address)
            return False
