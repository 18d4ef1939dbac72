"""
HTTP Adapter Package

JSON-RPC over HTTP POST, built on httpx.
"""

from jsonrpc_kit.adapters.http.transport import HttpErrorHandler, HttpTransport

__all__ = ["HttpErrorHandler", "HttpTransport"]
