"""
Tests for response encoding
"""
import json

import pytest

from jsonrpc_kit.exceptions import ResponseEncodingFailure
from jsonrpc_kit.server import ResponseEncoder, RpcResponse


class TestResponseEncoder:
    def test_invalid_response(self):
        with pytest.raises(ResponseEncodingFailure):
            ResponseEncoder().get_response({"result": [bytes.fromhex("c32e")]}, {"id": 1})

    def test_invalid_response_object(self):
        with pytest.raises(ResponseEncodingFailure):
            ResponseEncoder().encode(RpcResponse(id=1, result={"blob": b"\xff\xfe"}))

    def test_lone_surrogate_fails(self):
        with pytest.raises(ResponseEncodingFailure):
            ResponseEncoder().encode(RpcResponse(id=1, result="\ud800"))

    def test_unserializable_object_fails(self):
        with pytest.raises(ResponseEncodingFailure):
            ResponseEncoder().encode(RpcResponse(id=1, result=object()))

    def test_utf8_bytes_are_text(self):
        body = ResponseEncoder().encode(RpcResponse(id=1, result="é".encode("utf-8")))
        assert json.loads(body)["result"] == "é"

    def test_get_response_adds_id(self):
        body = ResponseEncoder().get_response({"result": 5}, {"id": 9})
        assert json.loads(body) == {"jsonrpc": "2.0", "result": 5, "id": 9}

    def test_batch(self):
        body = ResponseEncoder().encode([
            RpcResponse(id=1, result=1),
            RpcResponse(id=2, error={"code": -32601, "message": "x"}),
        ])
        assert json.loads(body) == [
            {"jsonrpc": "2.0", "result": 1, "id": 1},
            {"jsonrpc": "2.0", "error": {"code": -32601, "message": "x"}, "id": 2},
        ]

    def test_error_without_result_key(self):
        body = json.loads(ResponseEncoder().encode(RpcResponse(id=1, error={"code": -1, "message": "m"})))
        assert "result" not in body

    def test_batch_entry_failure_is_isolated(self):
        body = ResponseEncoder().encode_batch([
            RpcResponse(id=1, result=b"\xc3\x2e"),
            RpcResponse(id=2, result="fine"),
        ])
        first, second = json.loads(body)
        assert first["id"] == 1
        assert first["error"]["code"] == -32603
        assert second == {"jsonrpc": "2.0", "result": "fine", "id": 2}
