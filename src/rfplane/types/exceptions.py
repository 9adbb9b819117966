"""Exceptions raised by the control plane and its collaborators.

The split matters to callers: an `InvalidArgumentError` never reached the
remote service, a `ControlPlaneError` means the remote service (or the path to
it) failed. Stubbed operations do not raise at all, see
`rfplane.types.results.FrontendResult`.
"""


class FrontendError(Exception):
    """Base exception for front-end control errors."""

    pass


class InvalidArgumentError(FrontendError, ValueError):
    """Raised for a malformed direction/channel tuple, before any remote call."""

    pass


class SessionNotAttachedError(FrontendError):
    """Raised when an RPC-backed operation runs before a session is attached."""

    pass


class ControlPlaneError(FrontendError):
    """Raised when a remote call could not be completed.

    The original exception from the RPC client is chained as ``__cause__``.
    """

    def __init__(self, message, procedure=None):
        super().__init__(message)
        self.procedure = procedure


class CommsError(Exception):
    """Base exception for communication errors."""

    pass


class RemoteError(CommsError):
    """Raised when the remote service answers a request with an error."""

    def __init__(self, message, method=None):
        super().__init__(message)
        self.method = method


class PropertyTreeError(KeyError):
    """Raised for a missing or duplicate path in a property tree."""

    pass


class ReadOnlyPropertyError(PropertyTreeError):
    """Raised when writing to a read-only property."""

    pass
