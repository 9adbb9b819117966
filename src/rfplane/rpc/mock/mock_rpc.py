from __future__ import annotations

import re
from typing import Any, Callable, Sequence, Union

from loguru import logger

from rfplane.types import RemoteError

_PREFIX_RE = re.compile(r"^db_\d+_")
_WHICH_RE = re.compile(r"^(RX|TX)(\d)$")


class MockRPCClient:  # Protocol compliance checked on attach
    """In-process stand-in for the remote hardware service.

    Records every call as ``(kind, method, args)`` in `calls`, where kind is
    ``"request"`` or ``"notify"``.

    Responses come from `responses`, keyed by full method name: a plain value
    is returned as-is, a callable is called with the call arguments, an
    exception instance is raised. Unscripted methods emulate a simple device:
    ``set_<x>(key, value, ...)`` stores and returns `value`,
    ``get_<x>(key)`` returns what was stored (None if nothing was). A frequency
    write to ``"RX1"`` or ``"TX2"`` lands on every channel of its LO group in
    `lo_groups` (channel indices from 0), by default one LO per direction.
    """

    def __init__(
        self,
        responses: dict[str, Union[Any, Callable]] = None,
        token: str = "mock",
        lo_groups: Sequence[Sequence[int]] = ((0, 1),),
    ):
        self.responses = dict(responses or {})
        self.calls: list[tuple[str, str, tuple]] = []
        self.state: dict[tuple[str, Any], Any] = {}
        self._token = token
        self.lo_groups = tuple(tuple(group) for group in lo_groups)
        self.closed = False

    def __repr__(self) -> str:
        return f"MockRPCClient({len(self.calls)} calls)"

    def set_response(self, method: str, response: Union[Any, Callable]) -> None:
        self.responses[method] = response

    def fail(self, method: str, message: str = "mock failure") -> None:
        """Make every subsequent call to `method` raise a RemoteError."""
        self.responses[method] = RemoteError(message, method=method)

    def get_token(self) -> str:
        return self._token

    def _lo_siblings(self, which: Any) -> list[Any]:
        match = _WHICH_RE.match(which) if isinstance(which, str) else None
        if match is None:
            return [which]
        chan = int(match.group(2)) - 1
        for group in self.lo_groups:
            if chan in group:
                return [f"{match.group(1)}{c + 1}" for c in group]
        return [which]

    def _emulate(self, method: str, args: tuple) -> Any:
        name = _PREFIX_RE.sub("", method)
        if name.startswith("set_") and len(args) >= 2:
            param, key, value = name[4:], args[0], args[1]
            keys = [key]
            if param == "freq":
                keys = self._lo_siblings(key)
            for k in keys:
                self.state[(param, k)] = value
            return value
        if name.startswith("get_") and args:
            return self.state.get((name[4:], args[0]))
        return None

    def _respond(self, method: str, args: tuple) -> Any:
        if method not in self.responses:
            return self._emulate(method, args)
        response = self.responses[method]
        if isinstance(response, BaseException):
            raise response
        if callable(response):
            return response(*args)
        return response

    def request_with_token(self, method: str, *args) -> Any:
        self.calls.append(("request", method, args))
        logger.trace("MockRPCClient request {}{}", method, args)
        return self._respond(method, args)

    def notify_with_token(self, method: str, *args) -> None:
        self.calls.append(("notify", method, args))
        logger.trace("MockRPCClient notify {}{}", method, args)
        self._respond(method, args)

    def close(self) -> None:
        self.closed = True

    def methods_called(self) -> list[str]:
        return [method for _, method, _ in self.calls]

    def clear(self) -> None:
        self.calls.clear()
