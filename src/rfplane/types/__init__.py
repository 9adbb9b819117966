"""
Shared types for the RF front-end control plane.

1. Addressing
    - `Direction` and the (direction, channel) -> "which" token mapping
    - Property tree paths of front-ends

2. Results and errors
    - `FrontendResult` tags each operation as executed by hardware or stubbed
    - Exception hierarchy separating local argument errors from remote failures

3. Collaborator contracts
    - `RPCClientProtocol`, the remote session interface
    - Message classes for the MessagePack-over-ZeroMQ RPC link

4. Interfaces
    - `FrontendInterface`, a per-channel view of a daughterboard

Examples
--------
Addressing a channel:
```python
from rfplane.types import RX_DIRECTION, get_which
get_which(RX_DIRECTION, 1)  # "RX2"
```

Telling stubs from real hardware operations:
```python
result = radio.set_antenna("RX2", 0, RX_DIRECTION)
if result.is_unsupported:
    print("antenna switching not wired yet")
```

See Also
--------
rfplane.device : Daughterboard control objects
rfplane.rpc : RPC client implementations
"""

from __future__ import annotations

from .direction import (
    NUM_CHANS_PER_DIRECTION,
    RX_DIRECTION,
    TX_DIRECTION,
    Direction,
    get_chan_from_dboard_fe,
    get_dboard_fe_from_chan,
    get_fe_path,
    get_which,
    validate_chan,
    validate_direction,
)
from .exceptions import (
    CommsError,
    ControlPlaneError,
    FrontendError,
    InvalidArgumentError,
    PropertyTreeError,
    ReadOnlyPropertyError,
    RemoteError,
    SessionNotAttachedError,
)
from .interfaces import FrontendInterface
from .messages import (
    AckResponse,
    ErrorResponse,
    Message,
    RPCRequest,
    RPCResponse,
    ValueResponse,
)
from .protocols import RPCClientProtocol
from .results import FrontendResult, MetaRange, ResultStatus

__all__ = [
    "NUM_CHANS_PER_DIRECTION",
    "RX_DIRECTION",
    "TX_DIRECTION",
    "Direction",
    "get_chan_from_dboard_fe",
    "get_dboard_fe_from_chan",
    "get_fe_path",
    "get_which",
    "validate_chan",
    "validate_direction",
    "CommsError",
    "ControlPlaneError",
    "FrontendError",
    "InvalidArgumentError",
    "PropertyTreeError",
    "ReadOnlyPropertyError",
    "RemoteError",
    "SessionNotAttachedError",
    "FrontendInterface",
    "AckResponse",
    "ErrorResponse",
    "Message",
    "RPCRequest",
    "RPCResponse",
    "ValueResponse",
    "RPCClientProtocol",
    "FrontendResult",
    "MetaRange",
    "ResultStatus",
]
