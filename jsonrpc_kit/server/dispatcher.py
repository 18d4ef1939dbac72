"""
JSON-RPC 2.0 server core

Looks up procedures, binds arguments, executes the target and packages the
outcome as JSON-RPC responses. Transport-independent: ``handle`` takes a raw
request body and returns the raw response body.
"""

import logging
import time
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Union

from jsonrpc_kit.exceptions import (
    InternalError,
    InvalidRequestError,
    ParseError,
    RpcError,
)
from jsonrpc_kit.server.binder import bind_arguments, parameters_of, split_call_arguments
from jsonrpc_kit.server.encoder import ResponseEncoder
from jsonrpc_kit.server.models import Invocation, RpcResponse
from jsonrpc_kit.server.registry import ProcedureRegistry, TargetRef
from jsonrpc_kit.telemetry.metrics import increment_counter, record_latency
from jsonrpc_kit.telemetry.tracer import create_span, extract_trace_context, with_trace_context
from jsonrpc_kit.utils.serialization import SerializationError, from_json

logger = logging.getLogger(__name__)


class Server:
    """
    JSON-RPC 2.0 procedure server
    Supports single calls, batches and notifications
    """

    def __init__(self, registry: Optional[ProcedureRegistry] = None, encoder: Optional[ResponseEncoder] = None):
        """Initialize server

        Args:
            registry: Procedure registry (a fresh one by default)
            encoder: Response encoder
        """
        self.registry = registry if registry is not None else ProcedureRegistry()
        self.encoder = encoder or ResponseEncoder()

    def register(self, name: str, function: Callable) -> "Server":
        """Register a callable as procedure ``name``"""
        self.registry.register(name, function)
        return self

    def bind(self, name: str, target: TargetRef, method_name: str) -> "Server":
        """Bind procedure ``name`` to ``target.method_name``

        Args:
            name: Procedure name
            target: Class, dotted class path or instance
            method_name: Method to call
        """
        self.registry.bind(name, target, method_name)
        return self

    def procedure(self, name: Optional[str] = None):
        """Decorator registering a function as a procedure

        Args:
            name: Procedure name, defaults to the function name
        """
        def decorator(function: Callable) -> Callable:
            self.registry.register(name or function.__name__, function)
            return function
        return decorator

    def execute_procedure(self, name: str, arguments: Any = None) -> Any:
        """Resolve, bind and run one procedure

        Args:
            name: Procedure name
            arguments: List of positional values or mapping of named values

        Returns:
            The procedure's return value

        Raises:
            ProcedureNotFoundError: Unknown procedure
            TargetNotFoundError: Bound class cannot be located
            MethodNotFoundError: Bound method is missing
            ArityError: Arguments do not fit the signature
        """
        binding = self.registry.resolve(name)
        target = binding.resolve()
        params = parameters_of(target)
        values = bind_arguments(arguments if arguments is not None else [], params)
        args, kwargs = split_call_arguments(values, params)

        increment_counter("rpc.server.method.calls", 1, {"method": name})
        return target(*args, **kwargs)

    def execute_batch(self, invocations: Iterable[Union[Invocation, Mapping[str, Any]]]) -> List[RpcResponse]:
        """Run each invocation in order, capturing failures per entry

        Args:
            invocations: Invocation objects or request dicts

        Returns:
            List[RpcResponse]: One response per invocation, in request order
        """
        responses = []
        for item in invocations:
            invocation = item if isinstance(item, Invocation) else Invocation.from_request(item)
            responses.append(self._invoke(invocation))
        return responses

    def handle_request(self, request: Any) -> Optional[RpcResponse]:
        """Dispatch one decoded request object

        Returns:
            RpcResponse, or None for a notification
        """
        try:
            invocation = self._validate(request)
        except InvalidRequestError as e:
            increment_counter("rpc.server.errors", 1, {"type": "invalid_request"})
            request_id = request.get("id") if isinstance(request, dict) else None
            return RpcResponse.failure(request_id, e)

        response = self._invoke(invocation)
        if invocation.is_notification:
            increment_counter("rpc.server.notifications", 1, {"method": invocation.procedure})
            logger.debug(f"Notification {invocation.procedure} handled, no response sent")
            return None
        return response

    def handle(self, payload: Union[bytes, str], headers: Optional[Dict[str, str]] = None) -> bytes:
        """Process a raw request body

        Args:
            payload: Request body (single request or batch array)
            headers: Transport headers, used for trace context propagation

        Returns:
            bytes: Encoded response, empty when only notifications were sent

        Raises:
            ResponseEncodingFailure: The result of a single call could not be
                encoded (batch entries carry the error in their own response)
        """
        start_time = time.time()
        increment_counter("rpc.server.requests.received", 1)

        try:
            request = from_json(payload)
        except SerializationError as e:
            logger.error(f"JSON parse error: {e}")
            increment_counter("rpc.server.errors", 1, {"type": "parse_error"})
            return self.encoder.encode(RpcResponse.failure(None, ParseError(str(e))))

        logger.debug(f"Received request: {str(request)[:200]}")

        with with_trace_context(extract_trace_context(headers)):
            if isinstance(request, list):
                with create_span("jsonrpc.server.batch", {"rpc.batch.size": len(request)}):
                    body = self._handle_batch(request)
            else:
                method = request.get("method") if isinstance(request, dict) else None
                with create_span("jsonrpc.server.request", {"rpc.method": str(method)}):
                    response = self.handle_request(request)
                body = self.encoder.encode(response) if response is not None else b""

        latency_ms = (time.time() - start_time) * 1000
        record_latency("rpc.server.request.latency", latency_ms)
        logger.debug(f"Response ready, took {latency_ms:.2f}ms")
        return body

    def _handle_batch(self, requests: List[Any]) -> bytes:
        if not requests:
            increment_counter("rpc.server.errors", 1, {"type": "invalid_request"})
            return self.encoder.encode(RpcResponse.failure(None, InvalidRequestError("empty batch")))

        responses = [r for r in (self.handle_request(req) for req in requests) if r is not None]
        if not responses:
            return b""
        return self.encoder.encode_batch(responses)

    def _validate(self, request: Any) -> Invocation:
        if not isinstance(request, dict):
            raise InvalidRequestError("request must be an object")
        if "jsonrpc" in request and request["jsonrpc"] != "2.0":
            raise InvalidRequestError("Not a valid JSON-RPC 2.0 request")
        if not isinstance(request.get("method"), str) or not request["method"]:
            raise InvalidRequestError("Method not specified")
        if "params" in request and not isinstance(request["params"], (list, dict)):
            raise InvalidRequestError("params must be an array or an object")
        return Invocation.from_request(request)

    def _invoke(self, invocation: Invocation) -> RpcResponse:
        response_id = None if invocation.is_notification else invocation.id
        try:
            result = self.execute_procedure(invocation.procedure, invocation.arguments)
        except RpcError as e:
            logger.warning(f"Procedure {invocation.procedure} failed: {e}")
            increment_counter("rpc.server.errors", 1, {"type": type(e).__name__, "method": str(invocation.procedure)})
            return RpcResponse.failure(response_id, e)
        except Exception as e:
            logger.error(f"Error while executing procedure {invocation.procedure}: {e}", exc_info=True)
            increment_counter("rpc.server.errors", 1, {"type": "internal_error", "method": str(invocation.procedure)})
            return RpcResponse.failure(response_id, InternalError(str(e)))
        return RpcResponse.success(response_id, result)
