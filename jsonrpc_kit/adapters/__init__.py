"""
Transport Adapters Module

- adapter_interface: transport contract consumed by the client core
- http: httpx based HTTP transport and status error mapping
"""

from .adapter_interface import TransportInterface, TransportResponse
from .http import HttpErrorHandler, HttpTransport

__all__ = [
    "TransportInterface",
    "TransportResponse",
    "HttpErrorHandler",
    "HttpTransport"
]
