"""HTTP surface for the comparer.

GET /heights:
  200 -> heights within threshold
  500 -> heights too far apart (body still carries the comparison)
  502 -> a node could not be queried
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from . import __version__
from .api_models import ComparisonResult, ErrorResponse
from .errors import UpstreamError
from .heights import HeightComparator
from .log import get_logger

logger = get_logger("api")


def create_app(comparator: HeightComparator) -> FastAPI:
    """Build the FastAPI app around an already validated comparator."""

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        yield
        comparator.close()

    app = FastAPI(
        title="Ethereum block-height comparer",
        description="Compares the latest block height of two JSON-RPC nodes.",
        version=__version__,
        lifespan=lifespan,
    )

    @app.get(
        "/heights",
        response_model=ComparisonResult,
        responses={500: {"model": ComparisonResult}, 502: {"model": ErrorResponse}},
    )
    def heights() -> JSONResponse:
        try:
            outcome = comparator.evaluate()
        except UpstreamError as e:
            logger.error("upstream_error", error=str(e), failures=len(e.errors))
            return JSONResponse(status_code=502, content=ErrorResponse(error=str(e)).model_dump())
        return JSONResponse(status_code=outcome.status_code, content=outcome.result.model_dump())

    return app
