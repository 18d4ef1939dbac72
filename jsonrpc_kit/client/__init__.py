"""
JSON-RPC 2.0 Client Module

- request: request envelopes and batch buffering
- response: result extraction and error code translation
- session: cookie continuity across requests
- client: the client facade tying them to a transport
"""

from .client import Client
from .request import RequestBuilder
from .response import ErrorTranslator, ResponseParser
from .session import SessionState

__all__ = ["Client", "RequestBuilder", "ErrorTranslator", "ResponseParser", "SessionState"]
