"""
JSON-RPC error taxonomy

Typed errors shared by the server core (registry, argument binding, response
encoding) and the client core (server-reported error codes, HTTP failures).
Every error carries the JSON-RPC code it is reported under on the wire.
"""

from typing import Any, Dict, Optional

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class RpcError(Exception):
    """Base class for every error raised by jsonrpc_kit"""

    code = INTERNAL_ERROR
    prefix = ""

    def __init__(self, message: str = "", data: Any = None, code: Optional[int] = None):
        self.message = message
        self.data = data
        if code is not None:
            self.code = code
        super().__init__(f"{self.prefix}{message}" if self.prefix else message)

    def to_error(self) -> Dict[str, Any]:
        """Render as a JSON-RPC error object

        Returns:
            Dict: ``{"code", "message"}`` plus ``data`` when present
        """
        error = {"code": self.code, "message": self.message}
        if self.data is not None:
            error["data"] = self.data
        return error


class ProcedureNotFoundError(RpcError):
    """Procedure name is not registered (or the server answered -32601)"""

    code = METHOD_NOT_FOUND
    prefix = "Procedure not found: "


class TargetNotFoundError(ProcedureNotFoundError):
    """The class or object a procedure is bound to cannot be resolved"""

    prefix = "Target not found: "


class MethodNotFoundError(ProcedureNotFoundError):
    """The bound method does not exist on the resolved target"""

    prefix = "Method not found: "


class InvalidArgumentsError(RpcError):
    code = INVALID_PARAMS
    prefix = "Invalid arguments: "


class ArityError(InvalidArgumentsError):
    """Supplied arguments do not fit the target's parameter list

    ``kind`` is one of ``too_many``, ``too_few`` or ``missing``; for
    ``missing``, ``missing`` names the required parameter that was not given.
    """

    TOO_MANY = "too_many"
    TOO_FEW = "too_few"
    MISSING = "missing"

    def __init__(self, kind: str, message: str = "", missing: Optional[str] = None):
        self.kind = kind
        self.missing = missing
        if not message:
            if kind == self.TOO_MANY:
                message = "Too many arguments"
            elif kind == self.TOO_FEW:
                message = "Wrong number of arguments"
            else:
                message = f"Missing argument: {missing}"
        super().__init__(message)


class ParseError(RpcError):
    code = PARSE_ERROR
    prefix = "Parse error: "


class InvalidRequestError(RpcError):
    code = INVALID_REQUEST
    prefix = "Invalid Request: "


class InternalError(RpcError):
    code = INTERNAL_ERROR
    prefix = "Internal error: "


class ResponseEncodingFailure(RpcError):
    """A response tree holds values that cannot be written as JSON text"""

    code = INTERNAL_ERROR
    prefix = "Unable to encode response: "


class GenericResponseError(RpcError):
    """Catch-all for server errors outside the standard code set"""

    def __init__(self, code: int, message: str = "", data: Any = None):
        super().__init__(message, data=data, code=code)


class TransportError(RpcError):
    """Failure below the JSON-RPC layer (connection, HTTP status)"""


class ConnectionFailureError(TransportError, ConnectionError):
    pass


class AccessDeniedError(TransportError):
    pass


class ServerError(TransportError):
    pass
