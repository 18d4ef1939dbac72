"""
Response encoding

Serializes one response or a batch of responses to wire bytes.
"""

import logging
from typing import Any, Dict, List, Mapping, Union

from jsonrpc_kit.exceptions import ResponseEncodingFailure
from jsonrpc_kit.server.models import RpcResponse
from jsonrpc_kit.utils.serialization import SerializationError, to_json_bytes

logger = logging.getLogger(__name__)

Encodable = Union[RpcResponse, Mapping[str, Any]]


class ResponseEncoder:
    """Encodes RpcResponse objects (or plain response dicts) as UTF-8 JSON"""

    def encode(self, response: Union[Encodable, List[Encodable]]) -> bytes:
        """Serialize a response or a list of responses

        Args:
            response: Single response or batch

        Returns:
            bytes: Wire payload

        Raises:
            ResponseEncodingFailure: A value in the tree has no JSON text form
        """
        if isinstance(response, (list, tuple)):
            data = [self._as_dict(item) for item in response]
        else:
            data = self._as_dict(response)

        try:
            return to_json_bytes(data)
        except SerializationError as e:
            logger.warning(f"Response is not JSON encodable: {e}")
            raise ResponseEncodingFailure(str(e)) from e

    def encode_batch(self, responses: List[RpcResponse]) -> bytes:
        """Serialize a batch entry by entry

        An entry whose result cannot be encoded is replaced by an error
        response with the same id; the other entries are kept.
        """
        parts = []
        for response in responses:
            try:
                parts.append(to_json_bytes(self._as_dict(response)))
            except SerializationError as e:
                logger.warning(f"Batch entry {response.id!r} is not JSON encodable: {e}")
                failure = RpcResponse.failure(response.id, ResponseEncodingFailure(str(e)))
                parts.append(to_json_bytes(failure.to_dict()))
        return b"[" + b",".join(parts) + b"]"

    def get_response(self, data: Dict[str, Any], payload: Mapping[str, Any]) -> bytes:
        """Encode a response dict for the request ``payload`` (adds ``id``)"""
        response = {"jsonrpc": "2.0"}
        response.update(data)
        response["id"] = payload.get("id")
        return self.encode(response)

    @staticmethod
    def _as_dict(response: Encodable) -> Mapping[str, Any]:
        if isinstance(response, RpcResponse):
            return response.to_dict()
        return response
