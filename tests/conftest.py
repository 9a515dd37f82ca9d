from __future__ import annotations

import json
import os as _os
import sys as _sys

import httpx
import pytest
import structlog

# Ensure project root is importable (so `import ebc` works without installing the package)
_project_root = _os.path.dirname(_os.path.dirname(__file__))
if _project_root not in _sys.path:
    _sys.path.insert(0, _project_root)

from ebc.errors import RPCCallError  # noqa: E402
from ebc.rpc import Block, decode_quantity  # noqa: E402


class FixedClient:
    """Test double that always reports the same block number."""

    def __init__(self, number: str = "0x1", endpoint: str = "goodClient.com"):
        self.endpoint = endpoint
        self.number = number
        self.calls = 0
        self.closed = False

    def fetch_latest(self) -> Block:
        self.calls += 1
        return Block(number=self.number, height=decode_quantity(self.number))

    def close(self) -> None:
        self.closed = True


class ErrorClient:
    """Test double whose fetch always fails."""

    def __init__(self, message: str = "errorClient", endpoint: str = "errorClient.com"):
        self.endpoint = endpoint
        self.message = message

    def fetch_latest(self) -> Block:
        raise RPCCallError(self.message, endpoint=self.endpoint)


def fake_node(number: str | None = "0x1", seen: list | None = None) -> httpx.MockTransport:
    """Transport answering every JSON-RPC request with a block of the given number."""

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if seen is not None:
            seen.append((request, body))
        return httpx.Response(
            200,
            json={"id": body["id"], "jsonrpc": "2.0", "result": {"number": number}},
        )

    return httpx.MockTransport(handler)


def rpc_reply(payload, status_code: int = 200) -> httpx.MockTransport:
    """Transport answering every request with a fixed JSON payload."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=payload)

    return httpx.MockTransport(handler)


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo logging configuration done by the CLI so later tests log to a live stream."""
    yield
    structlog.reset_defaults()
