from __future__ import annotations

import itertools
import re
from dataclasses import dataclass
from typing import Any, Protocol
from urllib.parse import urlsplit

import httpx

from .errors import RPCCallError, RPCConnectionError

DIALABLE_SCHEMES = {"http", "https"}

# Ethereum "quantity": 0x prefix, at least one digit, no leading zeros.
QUANTITY_RE = re.compile(r"0x(0|[1-9a-fA-F][0-9a-fA-F]*)")
HEX_DIGITS_RE = re.compile(r"[0-9a-fA-F]+")


@dataclass(frozen=True)
class Block:
    number: str  # as reported by the node
    height: int


class HeightClient(Protocol):
    @property
    def endpoint(self) -> str: ...

    def fetch_latest(self) -> Block: ...


def normalize_localhost(endpoint: str) -> str:
    if endpoint.startswith("localhost"):
        return "http://" + endpoint
    return endpoint


def decode_quantity(value: Any) -> int:
    """Decode a hex-encoded quantity such as "0x1b4" into an int."""
    if not isinstance(value, str):
        raise ValueError(f"expected hex string, got {type(value).__name__}")
    if not value.startswith(("0x", "0X")):
        raise ValueError(f"hex string without 0x prefix: {value!r}")
    if len(value) == 2:
        raise ValueError("hex string \"0x\"")
    if not QUANTITY_RE.fullmatch(value.replace("0X", "0x", 1)):
        if value[2] == "0" and HEX_DIGITS_RE.fullmatch(value[2:]):
            raise ValueError(f"hex number with leading zero digits: {value!r}")
        raise ValueError(f"invalid hex string: {value!r}")
    return int(value[2:], 16)


def validate_endpoint(endpoint: str) -> str:
    """Return the URL to dial for an endpoint or raise RPCConnectionError."""
    if not endpoint or not endpoint.strip():
        raise RPCConnectionError("empty endpoint address")
    url = normalize_localhost(endpoint)
    try:
        parts = urlsplit(url)
        parts.port  # noqa: B018 - raises ValueError on a bad port
    except ValueError as e:
        raise RPCConnectionError(f"invalid endpoint address {endpoint!r}: {e}") from e
    scheme = parts.scheme.lower()
    if scheme not in DIALABLE_SCHEMES:
        raise RPCConnectionError(f"no known transport for URL scheme {scheme!r} in endpoint {endpoint!r}")
    if not parts.hostname:
        raise RPCConnectionError(f"endpoint {endpoint!r} has no host")
    try:
        httpx.URL(url)
    except httpx.InvalidURL as e:
        raise RPCConnectionError(f"invalid endpoint address {endpoint!r}: {e}") from e
    return url


class RPCClient:
    """JSON-RPC 2.0 client for one node.

    Owns its own httpx.Client; nothing is dialed until the first call.
    """

    def __init__(
        self,
        endpoint: str,
        insecure: bool = False,
        timeout_s: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._url = validate_endpoint(endpoint)
        self._ids = itertools.count(1)
        self._http = httpx.Client(
            timeout=timeout_s,
            verify=not insecure,
            follow_redirects=False,
            transport=transport,
        )

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def call(self, method: str, *params: Any) -> Any:
        """Invoke `method` on the node and return the decoded `result`."""
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": list(params)}
        try:
            resp = self._http.post(self._url, json=payload)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise RPCCallError(f"{self._endpoint}: {type(e).__name__}: {e}", endpoint=self._endpoint) from e

        if not resp.is_success:
            body = resp.text.strip()[:200]
            raise RPCCallError(
                f"{self._endpoint}: HTTP {resp.status_code} {resp.reason_phrase}: {body}",
                endpoint=self._endpoint,
            )
        try:
            data = resp.json()
        except ValueError as e:
            raise RPCCallError(f"{self._endpoint}: invalid JSON response: {e}", endpoint=self._endpoint) from e
        if not isinstance(data, dict):
            raise RPCCallError(f"{self._endpoint}: unexpected response: {data!r}", endpoint=self._endpoint)

        err = data.get("error")
        if err is not None:
            if isinstance(err, dict):
                code = err.get("code")
                message = err.get("message", "")
            else:
                code, message = None, str(err)
            raise RPCCallError(
                f"{self._endpoint}: {method}: {message} (code {code})",
                endpoint=self._endpoint,
                code=code if isinstance(code, int) else None,
            )
        if "result" not in data:
            raise RPCCallError(f"{self._endpoint}: response has no result", endpoint=self._endpoint)
        return data["result"]

    def fetch_latest(self) -> Block:
        result = self.call("eth_getBlockByNumber", "latest", False)
        if result is None:
            raise RPCCallError(f"{self._endpoint}: latest block not found", endpoint=self._endpoint)
        if not isinstance(result, dict):
            raise RPCCallError(f"{self._endpoint}: unexpected block: {result!r}", endpoint=self._endpoint)
        number = result.get("number")
        try:
            height = decode_quantity(number)
        except ValueError as e:
            raise RPCCallError(f"{self._endpoint}: block number: {e}", endpoint=self._endpoint) from e
        return Block(number=number, height=height)

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> RPCClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
