"""
JSON-RPC 2.0 toolkit

Message-processing core shared by a procedure server and a request client:

1. Server: procedure registry, argument binding (positional or named), batch
   dispatch and response encoding
2. Client: request building, batch aggregation, response parsing with typed
   error translation, and cookie continuity across requests
3. Transport: HTTP via httpx behind a small adapter interface

Server and client record OpenTelemetry metrics and propagate trace context.
"""

from jsonrpc_kit.client import Client
from jsonrpc_kit.server import ProcedureRegistry, Server

__version__ = "0.1.0"

__all__ = ["Client", "Server", "ProcedureRegistry"]
