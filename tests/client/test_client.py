"""
Client contract tests

Runs the client against an in-process server through a loopback transport,
verifying batch aggregation, error translation and cookie continuity.
"""
import base64
import json

import pytest

from jsonrpc_kit.adapters import TransportInterface, TransportResponse
from jsonrpc_kit.client import Client
from jsonrpc_kit.config import ClientConfig
from jsonrpc_kit.exceptions import (
    AccessDeniedError,
    ConnectionFailureError,
    GenericResponseError,
    InvalidArgumentsError,
    ProcedureNotFoundError,
    ServerError,
)
from jsonrpc_kit.server import Server

TEST_URL = "http://127.0.0.1:18080/jsonrpc"


class LoopbackTransport(TransportInterface):
    """Hands requests to a Server and records every exchange"""

    def __init__(self, server, set_cookies=None, status_code=200):
        self.server = server
        self.set_cookies = list(set_cookies or [])
        self.status_code = status_code
        self.sent = []
        self.closed = False

    def send(self, payload, headers):
        self.sent.append((json.loads(payload), dict(headers)))
        body = self.server.handle(payload, headers)
        return TransportResponse(
            body=body,
            headers=[("Set-Cookie", value) for value in self.set_cookies],
            status_code=self.status_code,
            status_codes=[self.status_code],
        )

    def close(self):
        self.closed = True


@pytest.fixture
def server():
    server = Server()
    server.register("sum", lambda a, b, c=0: a + b + c)
    server.register("echo", lambda value: value)
    server.register("ping", lambda: "pong")
    return server


@pytest.fixture
def transport(server):
    return LoopbackTransport(server)


@pytest.fixture
def client(transport):
    return Client(TEST_URL, transport=transport)


class TestCalls:
    def test_execute(self, client):
        assert client.execute("sum", [1, 2]) == 3

    def test_execute_named(self, client):
        assert client.execute("sum", {"a": 1, "b": 2, "c": 3}) == 6

    def test_attribute_proxy_positional(self, client):
        assert client.sum(1, 2) == 3

    def test_attribute_proxy_keywords(self, client):
        assert client.sum(a=1, b=5) == 6

    def test_attribute_proxy_single_dict_is_named(self, client, transport):
        assert client.sum({"a": 2, "b": 2}) == 4
        request, _ = transport.sent[-1]
        assert request["params"] == {"a": 2, "b": 2}

    def test_single_dict_positional_when_named_arguments_off(self, client, transport):
        client.named_arguments = False
        assert client.echo({"a": 1}) == {"a": 1}
        request, _ = transport.sent[-1]
        assert request["params"] == [{"a": 1}]

    def test_params_omitted_when_empty(self, client, transport):
        assert client.ping() == "pong"
        request, _ = transport.sent[-1]
        assert "params" not in request
        assert request["jsonrpc"] == "2.0"
        assert isinstance(request["id"], int)

    def test_default_headers(self, client, transport):
        client.ping()
        _, headers = transport.sent[-1]
        assert headers["Content-Type"] == "application/json"
        assert headers["Accept"] == "application/json"
        assert "Cookie" not in headers
        assert "Authorization" not in headers

    def test_custom_headers_merge(self, transport):
        client = Client(TEST_URL, headers={"X-Api-Key": "k", "User-Agent": "custom"}, transport=transport)
        client.ping()
        _, headers = transport.sent[-1]
        assert headers["X-Api-Key"] == "k"
        assert headers["User-Agent"] == "custom"

    def test_authentication(self, client, transport):
        assert client.authentication("user", "secret") is client
        client.ping()
        _, headers = transport.sent[-1]
        expected = base64.b64encode(b"user:secret").decode("ascii")
        assert headers["Authorization"] == f"Basic {expected}"

    def test_context_manager_closes_transport(self, transport):
        with Client(TEST_URL, transport=transport) as client:
            client.ping()
        assert transport.closed is True


class TestBatch:
    def test_batch_results_in_order(self, client, transport):
        results = client.batch().sum(1, 2).echo("x").ping().send()
        assert results == [3, "x", "pong"]
        assert len(transport.sent) == 1
        payload, _ = transport.sent[0]
        assert [r["method"] for r in payload] == ["sum", "echo", "ping"]

    def test_batch_resets_after_send(self, client, transport):
        client.batch()
        client.execute("sum", [1, 1])
        assert client.is_batch is True
        assert client.send() == [2]
        assert client.is_batch is False
        assert client.sum(2, 2) == 4

    def test_batch_error_raises(self, client):
        with pytest.raises(ProcedureNotFoundError):
            client.batch().sum(1, 2).missing().send()

    def test_batch_suppressed_errors_in_place(self, transport):
        client = Client(TEST_URL, transport=transport, suppress_errors=True)
        results = client.batch().sum(1, 2).missing().echo(5).send()
        assert results[0] == 3
        assert isinstance(results[1], ProcedureNotFoundError)
        assert results[2] == 5


class TestErrors:
    def test_procedure_not_found(self, client):
        with pytest.raises(ProcedureNotFoundError) as exc_info:
            client.missing()
        assert "missing" in str(exc_info.value)

    def test_invalid_arguments(self, client):
        with pytest.raises(InvalidArgumentsError):
            client.sum(1)

    def test_generic_error(self, server, client):
        def quota():
            raise GenericResponseError(-32050, "Quota", {"left": 0})

        server.register("quota", quota)
        with pytest.raises(GenericResponseError) as exc_info:
            client.quota()
        assert exc_info.value.code == -32050
        assert exc_info.value.data == {"left": 0}

    def test_suppressed_error_returned(self, transport):
        client = Client(TEST_URL, transport=transport, suppress_errors=True)
        error = client.missing()
        assert isinstance(error, ProcedureNotFoundError)

    @pytest.mark.parametrize("status, error_class", [
        (401, AccessDeniedError),
        (403, AccessDeniedError),
        (404, ConnectionFailureError),
        (500, ServerError),
    ])
    def test_http_status_errors(self, server, status, error_class):
        client = Client(TEST_URL, transport=LoopbackTransport(server, status_code=status))
        with pytest.raises(error_class):
            client.ping()

    def test_http_errors_not_suppressed(self, server):
        client = Client(TEST_URL, transport=LoopbackTransport(server, status_code=403), suppress_errors=True)
        with pytest.raises(AccessDeniedError):
            client.ping()

    def test_unencodable_params(self, client):
        with pytest.raises(ValueError):
            client.echo(object())

    def test_invalid_url_fails_before_send(self):
        client = Client("not a url")
        with pytest.raises(ConnectionFailureError):
            client.ping()

    def test_non_json_body_is_none(self):
        class Blank(TransportInterface):
            def send(self, payload, headers):
                return TransportResponse(body=b"<html></html>")

            def close(self):
                pass

        assert Client(TEST_URL, transport=Blank()).ping() is None


class TestCookies:
    def test_cookie_propagation(self, server):
        transport = LoopbackTransport(server, set_cookies=["sid=abc; Path=/"])
        client = Client(TEST_URL, transport=transport)
        client.ping()
        assert "Cookie" not in transport.sent[0][1]
        assert client.get_cookies() == {"sid": "abc"}

        transport.set_cookies = []
        client.ping()
        assert transport.sent[1][1]["Cookie"] == "sid=abc"

    def test_multiple_cookies_joined(self, server):
        transport = LoopbackTransport(server, set_cookies=["sid=abc; Path=/", "lang=en; HttpOnly"])
        client = Client(TEST_URL, transport=transport)
        client.ping()
        client.ping()
        assert transport.sent[1][1]["Cookie"] == "sid=abc; lang=en"

    def test_set_cookies_merge_and_replace(self, client, transport):
        client.set_cookies({"a": "1", "b": "2"})
        client.set_cookies({"b": "3"})
        assert client.get_cookies() == {"a": "1", "b": "3"}
        client.set_cookies({"c": "4"}, replace=True)
        assert client.get_cookies() == {"c": "4"}
        client.ping()
        assert transport.sent[-1][1]["Cookie"] == "c=4"


class TestFromConfig:
    def test_from_config(self, transport):
        config = ClientConfig(url=TEST_URL, suppress_errors=True, username="u", password="p",
                              headers={"X-Trace": "1"})
        client = Client.from_config(config, transport=transport)
        assert client.suppress_errors is True
        assert isinstance(client.missing(), ProcedureNotFoundError)
        _, headers = transport.sent[-1]
        assert headers["X-Trace"] == "1"
        assert headers["Authorization"].startswith("Basic ")
