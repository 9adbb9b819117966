"""Message types for the request/response link to the remote hardware service."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from mashumaro.mixins.msgpack import DataClassMessagePackMixin
from mashumaro.types import Discriminator


@dataclass
class Message(DataClassMessagePackMixin):
    """Base class for all messages."""

    def __repr__(self):
        msg = self.__class__.__name__ + "("
        for i, (field, val) in enumerate(self.__dict__.items()):
            if i not in (0, len(self.__dict__)):
                msg += ", "
            if isinstance(val, (bytes, bytearray)):
                msg += f"{field}=<{len(val)} bytes>"
            else:
                msg += f"{field}={val!r}"
        return msg + ")"


@dataclass(repr=False)
class RPCRequest(Message):
    """A call to a named remote procedure.

    ``token`` is the session token; it is None only for unauthenticated calls
    (e.g. ping). ``notify`` requests only expect an acknowledgement.
    """

    method: str
    params: list[Any] = field(default_factory=list)
    token: str | None = None
    notify: bool = False


@dataclass(kw_only=True, repr=False)
class RPCResponse(Message):
    """A response from the remote service."""

    type: str  # subclass to define
    value: Any  # subclass to define

    class Config:
        discriminator = Discriminator(field="type", include_subtypes=True)


@dataclass(kw_only=True, repr=False)
class ValueResponse(RPCResponse):
    type: str = "value"
    value: Any = None


@dataclass(kw_only=True, repr=False)
class AckResponse(RPCResponse):
    type: str = "ack"
    value: str = ""


@dataclass(kw_only=True, repr=False)
class ErrorResponse(RPCResponse):
    type: str = "error"
    value: str = ""
