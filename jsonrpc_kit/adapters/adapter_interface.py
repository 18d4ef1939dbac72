"""
Transport adapter interface

The client core hands encoded request bytes and headers to a transport and
receives the response body, headers and HTTP status chain back. Everything
below that boundary (connections, TLS, redirects) belongs to the adapter.
"""

import abc
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


@dataclass
class TransportResponse:
    """Raw outcome of one exchange"""
    body: bytes = b""
    headers: List[Tuple[str, str]] = field(default_factory=list)
    status_code: int = 200
    status_codes: List[int] = field(default_factory=list)

    def get_all(self, name: str) -> List[str]:
        """All values of header ``name`` (case-insensitive)"""
        name = name.lower()
        return [value for key, value in self.headers if key.lower() == name]


class TransportInterface(abc.ABC):
    """Transport interface, implemented by every client transport"""

    @abc.abstractmethod
    def send(self, payload: bytes, headers: Dict[str, str]) -> TransportResponse:
        """Deliver a request body and wait for the response

        Args:
            payload: Encoded JSON-RPC request or batch
            headers: Request headers

        Returns:
            TransportResponse: Response body, headers and status chain

        Raises:
            ConnectionFailureError: Target unreachable or address malformed
        """
        pass

    @abc.abstractmethod
    def close(self) -> None:
        """Release connections and resources"""
        pass

    def check_url(self, url: Optional[str]) -> None:
        """Validate the target address before any send (no-op by default)"""
        return None
