"""
HTTP transport adapter

POSTs JSON-RPC payloads with httpx and maps failing HTTP statuses to the
client error taxonomy.
"""

import logging
import time
from typing import Dict, Iterable, Optional

import httpx

from jsonrpc_kit.adapters.adapter_interface import TransportInterface, TransportResponse
from jsonrpc_kit.exceptions import AccessDeniedError, ConnectionFailureError, ServerError
from jsonrpc_kit.telemetry.metrics import increment_counter, record_latency

logger = logging.getLogger(__name__)


class HttpErrorHandler:
    """Raises typed errors for HTTP statuses the client cannot parse past"""

    STATUS_ERRORS = {
        401: AccessDeniedError,
        403: AccessDeniedError,
        404: ConnectionFailureError,
        500: ServerError,
    }

    def check(self, status_codes: Iterable[int]) -> None:
        """Scan a status chain (redirects first, final status last)

        Raises:
            AccessDeniedError: 401 or 403
            ConnectionFailureError: 404
            ServerError: 500
        """
        for status in status_codes:
            error_class = self.STATUS_ERRORS.get(status)
            if error_class is not None:
                increment_counter("rpc.client.errors", 1, {"type": "http_status", "code": str(status)})
                raise error_class(f"Response: HTTP/1.1 {status}")


class HttpTransport(TransportInterface):
    """
    httpx based transport
    One POST per exchange; connections are pooled by the underlying client
    """

    def __init__(self,
                 url: str,
                 timeout: float = 3.0,
                 ssl_verify: bool = True,
                 ssl_cert: Optional[str] = None,
                 max_redirects: int = 2,
                 client: Optional[httpx.Client] = None):
        """Initialize HTTP transport

        Args:
            url: Server endpoint
            timeout: Request timeout in seconds
            ssl_verify: Verify the server certificate
            ssl_cert: Client certificate file
            max_redirects: Redirects followed before giving up
            client: Preconfigured httpx client (its own settings then apply)
        """
        self.url = url.strip() if url else url
        self.timeout = timeout
        self._owns_client = client is None
        if client is None:
            options = {}
            if ssl_cert:
                options["cert"] = ssl_cert
            client = httpx.Client(
                timeout=timeout,
                verify=ssl_verify,
                follow_redirects=True,
                max_redirects=max_redirects,
                **options
            )
        self.client = client

    def check_url(self, url: Optional[str] = None) -> None:
        """Reject addresses that cannot be resolved to an HTTP endpoint

        Raises:
            ConnectionFailureError: Malformed URL, non-HTTP scheme or no host
        """
        url = url if url is not None else self.url
        try:
            parsed = httpx.URL(url or "")
        except (httpx.InvalidURL, TypeError) as e:
            raise ConnectionFailureError(f"Unable to establish a connection: {e}") from e
        if parsed.scheme not in ("http", "https") or not parsed.host:
            raise ConnectionFailureError(f"Unable to establish a connection: invalid URL {url!r}")

    def send(self, payload: bytes, headers: Dict[str, str]) -> TransportResponse:
        """POST ``payload`` and collect the response

        Raises:
            ConnectionFailureError: Malformed URL, network failure or timeout
        """
        self.check_url()
        start_time = time.time()
        try:
            response = self.client.post(self.url, content=payload, headers=headers)
        except httpx.TimeoutException as e:
            logger.error(f"Request to {self.url} timed out after {self.timeout}s")
            increment_counter("rpc.client.errors", 1, {"type": "timeout"})
            raise ConnectionFailureError(f"Unable to establish a connection: timeout ({self.timeout}s)") from e
        except (httpx.RequestError, httpx.InvalidURL) as e:
            logger.error(f"HTTP error talking to {self.url}: {e}")
            increment_counter("rpc.client.errors", 1, {"type": "connection"})
            raise ConnectionFailureError(f"Unable to establish a connection: {e}") from e

        record_latency("rpc.client.http.latency", (time.time() - start_time) * 1000)
        # cookies are owned by the JSON-RPC client session, not by httpx
        self.client.cookies.clear()
        return TransportResponse(
            body=response.content,
            headers=list(response.headers.multi_items()),
            status_code=response.status_code,
            status_codes=[r.status_code for r in response.history] + [response.status_code],
        )

    def close(self) -> None:
        if self._owns_client:
            self.client.close()
