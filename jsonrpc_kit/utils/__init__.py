"""
Utility Module

- serialization: JSON encoding/decoding of JSON-RPC envelopes
"""

from .serialization import SerializationError, from_json, to_json_bytes

__all__ = ["SerializationError", "from_json", "to_json_bytes"]
