"""
Response parsing and error translation

Splits batch responses, extracts results and turns server-reported JSON-RPC
errors into typed exceptions, raised or returned depending on configuration.
"""

import logging
from typing import Any, List, Mapping, Union

from jsonrpc_kit.exceptions import (
    GenericResponseError,
    InvalidArgumentsError,
    InvalidRequestError,
    ParseError,
    ProcedureNotFoundError,
    RpcError,
)
from jsonrpc_kit.server.binder import is_positional_arguments
from jsonrpc_kit.telemetry.metrics import increment_counter

logger = logging.getLogger(__name__)

ERROR_TYPES = {
    -32700: ParseError,
    -32600: InvalidRequestError,
    -32601: ProcedureNotFoundError,
    -32602: InvalidArgumentsError,
}


class ErrorTranslator:
    """Maps JSON-RPC error objects to the typed error taxonomy"""

    def __init__(self, suppress_errors: bool = False):
        self.suppress_errors = suppress_errors

    def build(self, error: Mapping[str, Any]) -> RpcError:
        """Typed error for a JSON-RPC error object (not raised)"""
        code = error.get("code")
        message = str(error.get("message", ""))
        data = error.get("data")
        error_class = ERROR_TYPES.get(code)
        if error_class is None:
            return GenericResponseError(code, message, data)
        return error_class(message, data=data)

    def translate(self, error: Mapping[str, Any]) -> RpcError:
        """Raise the typed error, or return it when errors are suppressed

        Raises:
            RpcError: Unless ``suppress_errors`` is set
        """
        exc = self.build(error)
        increment_counter("rpc.client.errors", 1, {"type": "rpc_error", "code": str(error.get("code"))})
        logger.debug(f"RPC error {error.get('code')}: {error.get('message')}")
        if self.suppress_errors:
            return exc
        raise exc


class ResponseParser:
    """Extracts results from decoded single or batch responses"""

    def __init__(self, translator: ErrorTranslator):
        self.translator = translator

    @staticmethod
    def is_batch_response(payload: Any) -> bool:
        if isinstance(payload, list):
            return True
        return isinstance(payload, Mapping) and len(payload) > 0 and is_positional_arguments(payload)

    def parse_response(self, payload: Any) -> Union[Any, List[Any]]:
        """Return the result of a response, or the list of results of a batch

        Batch results keep the order in which responses were received.
        """
        if self.is_batch_response(payload):
            responses = payload.values() if isinstance(payload, Mapping) else payload
            return [self.get_result(response) for response in responses]
        return self.get_result(payload)

    def get_result(self, payload: Any) -> Any:
        if not isinstance(payload, Mapping):
            return None
        error = payload.get("error")
        if isinstance(error, Mapping) and "code" in error:
            return self.translator.translate(error)
        return payload.get("result")
