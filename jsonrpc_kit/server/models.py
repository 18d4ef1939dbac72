"""
Server-side message types
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Sequence, Union

from jsonrpc_kit.exceptions import RpcError

_MISSING = object()


@dataclass
class Invocation:
    """A single call under resolution

    ``id`` is left as the module-private ``_MISSING`` sentinel for
    notifications, so that an explicit ``null`` id still gets a response.
    """
    procedure: str
    arguments: Union[Sequence[Any], Mapping[str, Any]] = field(default_factory=list)
    id: Any = _MISSING

    @property
    def is_notification(self) -> bool:
        return self.id is _MISSING

    @classmethod
    def from_request(cls, request: Mapping[str, Any]) -> "Invocation":
        """Build from a decoded request object (``method``/``params``/``id``)"""
        return cls(
            procedure=request.get("method"),
            arguments=request.get("params", []),
            id=request.get("id", _MISSING),
        )


@dataclass
class RpcResponse:
    """Outcome of one invocation: exactly one of result or error"""
    id: Any = None
    result: Any = None
    error: Optional[Dict[str, Any]] = None

    @classmethod
    def success(cls, id: Any, result: Any) -> "RpcResponse":
        return cls(id=id, result=result)

    @classmethod
    def failure(cls, id: Any, error: RpcError) -> "RpcResponse":
        return cls(id=id, error=error.to_error())

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation"""
        response = {"jsonrpc": "2.0"}
        if self.error is not None:
            response["error"] = self.error
        else:
            response["result"] = self.result
        response["id"] = self.id
        return response
