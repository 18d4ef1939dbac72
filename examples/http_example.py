#!/usr/bin/env python
"""
HTTP Example

Serves a jsonrpc_kit Server from a FastAPI route (uvicorn, background thread)
and calls it with the Client: single calls, named arguments, a batch and a
suppressed error. Needs the ``examples`` extra.
"""

import logging
import threading
import time

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import Response

from jsonrpc_kit import Client, Server
from jsonrpc_kit.exceptions import RpcError

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

HOST = "127.0.0.1"
PORT = 8765

rpc = Server()
app = FastAPI()


@rpc.procedure()
def add(a, b, c=0):
    return a + b + c


class Counter:
    def __init__(self):
        self.value = 0

    def increment(self, step=1):
        self.value += step
        return self.value


rpc.bind("counter.increment", Counter(), "increment")


@app.post("/jsonrpc")
async def jsonrpc_endpoint(request: Request) -> Response:
    body = rpc.handle(await request.body(), dict(request.headers))
    response = Response(content=body, media_type="application/json")
    response.set_cookie("session", "example")
    return response


def start_server() -> uvicorn.Server:
    server = uvicorn.Server(uvicorn.Config(app, host=HOST, port=PORT, log_level="warning"))
    threading.Thread(target=server.run, daemon=True).start()
    while not server.started:
        time.sleep(0.05)
    return server


def main():
    server = start_server()
    url = f"http://{HOST}:{PORT}/jsonrpc"
    logger.info(f"JSON-RPC server listening on {url}")

    try:
        with Client(url, suppress_errors=True) as client:
            logger.info(f"add(1, 2) = {client.add(1, 2)}")
            logger.info(f"add(a=1, b=2, c=3) = {client.add(a=1, b=2, c=3)}")
            logger.info(f"batch = {client.batch().add(1, 1).execute('counter.increment', {'step': 5}).send()}")

            error = client.unknown_procedure()
            if isinstance(error, RpcError):
                logger.info(f"suppressed error: {type(error).__name__} ({error.code})")
            logger.info(f"cookies: {client.get_cookies()}")
    finally:
        server.should_exit = True


if __name__ == "__main__":
    main()
