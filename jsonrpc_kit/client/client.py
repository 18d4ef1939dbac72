"""
JSON-RPC 2.0 client

Builds requests, sends them through a transport (HTTP by default), keeps
cookies across calls and parses results, including batches.
"""

import base64
import logging
import time
from typing import Any, Dict, List, Mapping, Optional, Union

from jsonrpc_kit.adapters.adapter_interface import TransportInterface, TransportResponse
from jsonrpc_kit.adapters.http.transport import HttpErrorHandler, HttpTransport
from jsonrpc_kit.client.request import Params, RequestBuilder
from jsonrpc_kit.client.response import ErrorTranslator, ResponseParser
from jsonrpc_kit.client.session import SessionState
from jsonrpc_kit.config import ClientConfig
from jsonrpc_kit.exceptions import RpcError
from jsonrpc_kit.telemetry.metrics import increment_counter, record_latency
from jsonrpc_kit.telemetry.tracer import create_span, inject_trace_context
from jsonrpc_kit.utils.serialization import SerializationError, from_json, pretty, to_json_bytes

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": "JSON-RPC Python Client",
    "Content-Type": "application/json",
    "Accept": "application/json",
    "Connection": "close",
}


class Client:
    """
    JSON-RPC client
    Procedures can be called with execute() or as attributes: client.add(1, 2)
    """

    def __init__(self,
                 url: str,
                 timeout: float = 3.0,
                 headers: Optional[Dict[str, str]] = None,
                 suppress_errors: bool = False,
                 named_arguments: bool = True,
                 transport: Optional[TransportInterface] = None,
                 ssl_verify: bool = True,
                 ssl_cert: Optional[str] = None,
                 max_redirects: int = 2,
                 debug: bool = False):
        """Initialize client

        Args:
            url: Server URL
            timeout: HTTP timeout in seconds
            headers: Extra headers merged over the defaults
            suppress_errors: Return RPC errors instead of raising them
            named_arguments: Treat a single dict argument as named params
            transport: Custom transport (an HttpTransport for ``url`` by default)
            ssl_verify: Verify server certificates
            ssl_cert: Client certificate file
            max_redirects: Redirects followed by the HTTP transport
            debug: Log full request and response payloads
        """
        self.url = url
        self.timeout = timeout
        self.named_arguments = named_arguments
        self.debug = debug
        self.headers = dict(DEFAULT_HEADERS)
        self.headers.update(headers or {})
        self.username = None
        self.password = None

        self.transport = transport or HttpTransport(
            url,
            timeout=timeout,
            ssl_verify=ssl_verify,
            ssl_cert=ssl_cert,
            max_redirects=max_redirects
        )
        self.http_errors = HttpErrorHandler()
        self.requests = RequestBuilder()
        self.translator = ErrorTranslator(suppress_errors)
        self.parser = ResponseParser(self.translator)
        self.session = SessionState()

    @classmethod
    def from_config(cls, config: ClientConfig, transport: Optional[TransportInterface] = None) -> "Client":
        client = cls(
            config.url,
            timeout=config.timeout,
            headers=config.headers,
            suppress_errors=config.suppress_errors,
            named_arguments=config.named_arguments,
            transport=transport,
            ssl_verify=config.ssl_verify,
            ssl_cert=config.ssl_cert,
            max_redirects=config.max_redirects,
            debug=config.debug
        )
        if config.username and config.password:
            client.authentication(config.username, config.password)
        return client

    def __getattr__(self, name: str):
        if name.startswith("_"):
            raise AttributeError(name)

        def call(*args, **kwargs):
            return self.execute(name, self._procedure_params(args, kwargs))

        call.__name__ = name
        return call

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self) -> None:
        """Close the transport"""
        self.transport.close()

    @property
    def suppress_errors(self) -> bool:
        return self.translator.suppress_errors

    @suppress_errors.setter
    def suppress_errors(self, value: bool) -> None:
        self.translator.suppress_errors = bool(value)

    @property
    def is_batch(self) -> bool:
        return self.requests.is_batch

    def authentication(self, username: str, password: str) -> "Client":
        """Send HTTP basic credentials with every request"""
        self.username = username
        self.password = password
        return self

    def batch(self) -> "Client":
        """Start a batch: following calls are queued until send()"""
        self.requests.start_batch()
        return self

    def send(self) -> List[Any]:
        """Send the queued batch

        Returns:
            List: One result (or suppressed error) per queued call
        """
        requests = self.requests.flush()
        increment_counter("rpc.client.requests", 1, {"method": "batch"})
        with create_span("jsonrpc.client.batch", {"rpc.batch.size": len(requests)}):
            return self.parse_response(self._do_request(requests, "batch"))

    def execute(self, procedure: str, params: Optional[Params] = None) -> Any:
        """Call a procedure

        Args:
            procedure: Procedure name
            params: Positional list or named mapping

        Returns:
            The procedure result, or the client itself while a batch is open

        Raises:
            RpcError: Server-reported error (unless suppressed)
            TransportError: Connection or HTTP failure
        """
        if self.requests.is_batch:
            self.requests.add(procedure, params)
            return self

        increment_counter("rpc.client.requests", 1, {"method": procedure})
        with create_span("jsonrpc.client.call", {"rpc.method": procedure}):
            payload = self._do_request(self.requests.prepare_request(procedure, params), procedure)
            result = self.parse_response(payload)

        if not isinstance(result, RpcError):
            increment_counter("rpc.client.success", 1, {"method": procedure})
        return result

    def prepare_request(self, procedure: str, params: Optional[Params] = None) -> Dict[str, Any]:
        return self.requests.prepare_request(procedure, params)

    def parse_response(self, payload: Any) -> Union[Any, List[Any]]:
        return self.parser.parse_response(payload)

    def handle_rpc_errors(self, error: Mapping[str, Any]) -> RpcError:
        """Translate an error object (raised unless errors are suppressed)"""
        return self.translator.translate(error)

    def get_cookies(self) -> Dict[str, str]:
        return self.session.get_cookies()

    def set_cookies(self, cookies: Mapping[str, str], replace: bool = False) -> None:
        self.session.set_cookies(cookies, replace)

    def build_headers(self) -> Dict[str, str]:
        """Headers for the next request: defaults, credentials, cookies, trace context"""
        headers = dict(self.headers)
        if self.username and self.password:
            token = base64.b64encode(f"{self.username}:{self.password}".encode("utf-8")).decode("ascii")
            headers["Authorization"] = f"Basic {token}"
        headers.update(self.session.cookie_header())
        inject_trace_context(headers)
        return headers

    def _procedure_params(self, args: tuple, kwargs: Dict[str, Any]) -> Params:
        if kwargs:
            return kwargs
        if self.named_arguments and len(args) == 1 and isinstance(args[0], Mapping):
            return args[0]
        return list(args)

    def _do_request(self, payload: Union[Dict[str, Any], List[Dict[str, Any]]], method: str) -> Any:
        self.transport.check_url(self.url)
        try:
            body = to_json_bytes(payload)
        except SerializationError as e:
            raise ValueError(f"Request parameters are not JSON encodable: {e}") from e

        start_time = time.time()
        response: TransportResponse = self.transport.send(body, self.build_headers())
        latency_ms = (time.time() - start_time) * 1000
        record_latency("rpc.client.latency", latency_ms, {"method": method})

        self.session.update_from_headers(response.get_all("Set-Cookie"))

        try:
            decoded = from_json(response.body) if response.body else None
        except SerializationError:
            logger.warning(f"Response body of {method} is not valid JSON")
            decoded = None

        if self.debug:
            logger.info(f"==> Request:\n{pretty(payload)}")
            logger.info(f"==> Response:\n{pretty(decoded)}")
        else:
            logger.debug(f"Received response for {method}, latency: {latency_ms:.2f}ms")

        self.http_errors.check(response.status_codes or [response.status_code])

        return decoded if isinstance(decoded, (dict, list)) else {}
