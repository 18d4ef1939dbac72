"""
Request building

Creates JSON-RPC 2.0 request envelopes and buffers them while a batch is open.
"""

import logging
import random
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

logger = logging.getLogger(__name__)

Params = Union[Sequence[Any], Mapping[str, Any]]

MAX_REQUEST_ID = 2 ** 31 - 1


class RequestBuilder:
    """Builds request envelopes; accumulates them in batch mode"""

    def __init__(self):
        self.is_batch = False
        self.batch: List[Dict[str, Any]] = []
        self._random = random.Random()

    def next_id(self) -> int:
        """Fresh correlation id (collisions are tolerated)"""
        return self._random.randint(0, MAX_REQUEST_ID)

    def prepare_request(self, procedure: str, params: Optional[Params] = None) -> Dict[str, Any]:
        """Build a request envelope

        Args:
            procedure: Procedure name
            params: Positional list or named mapping; omitted from the
                envelope when empty

        Returns:
            Dict: ``{"jsonrpc", "method", "id"[, "params"]}``
        """
        payload = {
            "jsonrpc": "2.0",
            "method": procedure,
            "id": self.next_id(),
        }
        if params:
            payload["params"] = list(params) if isinstance(params, tuple) else params
        return payload

    def start_batch(self) -> None:
        self.is_batch = True
        self.batch = []

    def add(self, procedure: str, params: Optional[Params] = None) -> Dict[str, Any]:
        """Append a prepared request to the open batch"""
        request = self.prepare_request(procedure, params)
        self.batch.append(request)
        logger.debug(f"Queued {procedure} in batch (size {len(self.batch)})")
        return request

    def flush(self) -> List[Dict[str, Any]]:
        """Close the batch and hand over the buffered requests"""
        requests = self.batch
        self.is_batch = False
        self.batch = []
        return requests
