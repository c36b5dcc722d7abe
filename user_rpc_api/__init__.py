"""
Top-level package for the User RPC API.

The server application lives in ``user_rpc_api.app`` and the Python
client for its procedures in ``user_rpc_api.client``.
"""

__all__ = []
