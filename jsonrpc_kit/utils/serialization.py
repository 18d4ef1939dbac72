"""
JSON serialization tools

Converts JSON-RPC envelopes between Python structures and UTF-8 wire bytes.
"""

import json
from typing import Any, Union


class SerializationError(ValueError):
    """Raised when a value tree cannot be represented as JSON text"""


def _default(value: Any) -> Any:
    # bytes are accepted only when they already hold valid UTF-8 text
    if isinstance(value, (bytes, bytearray)):
        try:
            return bytes(value).decode("utf-8")
        except UnicodeDecodeError as e:
            raise SerializationError(f"byte sequence is not valid UTF-8: {e}") from e
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    raise SerializationError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_json_bytes(data: Any) -> bytes:
    """Serialize data to UTF-8 encoded JSON

    Args:
        data: Dictionary, list or scalar to serialize

    Returns:
        bytes: UTF-8 JSON text

    Raises:
        SerializationError: A value has no JSON representation
    """
    try:
        text = json.dumps(data, default=_default, ensure_ascii=False, allow_nan=False)
        return text.encode("utf-8")
    except SerializationError:
        raise
    except (TypeError, ValueError, UnicodeEncodeError, RecursionError) as e:
        raise SerializationError(str(e)) from e


def from_json(payload: Union[bytes, bytearray, str]) -> Any:
    """Deserialize JSON text or UTF-8 bytes

    Raises:
        SerializationError: Payload is not valid JSON
    """
    if isinstance(payload, (bytes, bytearray)):
        try:
            payload = bytes(payload).decode("utf-8")
        except UnicodeDecodeError as e:
            raise SerializationError(f"payload is not valid UTF-8: {e}") from e
    try:
        return json.loads(payload)
    except ValueError as e:
        raise SerializationError(str(e)) from e


def pretty(data: Any) -> str:
    """Human-readable JSON for debug logging"""
    try:
        return json.dumps(data, indent=4, default=repr, ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(data)
