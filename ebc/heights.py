from __future__ import annotations

import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from .api_models import ComparisonResult, EndpointHeight
from .errors import ConfigurationError, RPCCallError, RPCConnectionError, UpstreamError
from .log import get_logger
from .rpc import Block, HeightClient, RPCClient

logger = get_logger("heights")

THRESHOLD_RE = re.compile(r"[0-9]+")


class ThresholdError(ValueError):
    pass


def parse_threshold(text: str) -> int:
    """Parse a non-negative base-10 integer (no sign, no separators)."""
    raw = (text or "").strip()
    if not raw:
        raise ThresholdError("threshold is empty")
    if raw.startswith("-") and THRESHOLD_RE.fullmatch(raw[1:]):
        raise ThresholdError(f"threshold must not be negative: {text!r}")
    if not THRESHOLD_RE.fullmatch(raw):
        raise ThresholdError(f"threshold is not a base-10 integer: {text!r}")
    return int(raw)


def difference(a: int, b: int) -> int:
    return abs(a - b)


def status_for_difference(threshold: int, diff: int) -> int:
    """200 while diff <= threshold (boundary included), 500 beyond it."""
    if diff > threshold:
        return 500
    return 200


@dataclass(frozen=True)
class HeightsOutcome:
    status_code: int
    result: ComparisonResult

    @property
    def healthy(self) -> bool:
        return self.status_code == 200


class HeightComparator:
    """Compares the latest block height of two nodes against a threshold."""

    def __init__(self, client1: HeightClient, client2: HeightClient, threshold: int):
        if threshold < 0:
            raise ThresholdError(f"threshold must not be negative: {threshold}")
        self._client1 = client1
        self._client2 = client2
        self._threshold = threshold

    @classmethod
    def from_config(
        cls,
        endpoint1: str,
        endpoint2: str,
        threshold_text: str,
        insecure: bool = False,
        timeout_s: float = 10.0,
    ) -> HeightComparator:
        """Validate configuration and build both RPC clients.

        Every problem found is reported in a single ConfigurationError.
        """
        errors: list[Exception] = []
        clients: list[RPCClient] = []

        threshold = 0
        try:
            threshold = parse_threshold(threshold_text)
        except ThresholdError as e:
            errors.append(e)

        for endpoint in (endpoint1, endpoint2):
            try:
                clients.append(RPCClient(endpoint, insecure=insecure, timeout_s=timeout_s))
            except RPCConnectionError as e:
                errors.append(e)

        merr = ConfigurationError.combine(*errors)
        if merr is not None:
            for c in clients:
                c.close()
            raise merr
        return cls(clients[0], clients[1], threshold)

    @property
    def threshold(self) -> int:
        return self._threshold

    @property
    def clients(self) -> tuple[HeightClient, HeightClient]:
        return self._client1, self._client2

    def evaluate(self) -> HeightsOutcome:
        """Fetch both heights and classify their difference.

        Raises UpstreamError if either node failed; no partial result.
        """
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="ebc-fetch") as pool:
            fut1 = pool.submit(self._client1.fetch_latest)
            fut2 = pool.submit(self._client2.fetch_latest)
            latest1, err1 = _settle(fut1)
            latest2, err2 = _settle(fut2)

        merr = UpstreamError.combine(err1, err2)
        if merr is not None:
            raise merr

        diff = difference(latest1.height, latest2.height)
        result = self.build_result(latest1, latest2, diff)
        logger.info("heights_compared", **result.model_dump())
        return HeightsOutcome(status_code=status_for_difference(self._threshold, diff), result=result)

    def build_result(self, latest1: Block, latest2: Block, diff: int) -> ComparisonResult:
        return ComparisonResult(
            difference=str(diff),
            threshold=str(self._threshold),
            endpoints=[
                EndpointHeight(url=self._client1.endpoint, number=latest1.number),
                EndpointHeight(url=self._client2.endpoint, number=latest2.number),
            ],
        )

    def close(self) -> None:
        for c in (self._client1, self._client2):
            close = getattr(c, "close", None)
            if close is not None:
                close()


def _settle(fut) -> tuple[Block | None, RPCCallError | None]:
    try:
        return fut.result(), None
    except RPCCallError as e:
        return None, e
