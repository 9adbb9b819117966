from .mock_rpc import MockRPCClient

__all__ = ["MockRPCClient"]
