from __future__ import annotations

import argparse
import sys

import uvicorn

from . import __version__
from .api import create_app
from .errors import ConfigurationError
from .heights import HeightComparator
from .log import get_logger, setup_logging
from .settings import settings

logger = get_logger("cli")

LOG_LEVELS = ["critical", "error", "warning", "info", "debug", "trace"]


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="ebc",
        description="Compare the latest block height of two Ethereum JSON-RPC nodes and serve the result on GET /heights.",
    )
    p.add_argument("endpoint1", help="First node RPC address, e.g. http://10.0.0.2:8545")
    p.add_argument("endpoint2", help="Second node RPC address")
    p.add_argument(
        "-t",
        "--threshold",
        default=settings.threshold,
        help="Difference in block height tolerated before /heights returns an error (default: %(default)s)",
    )
    p.add_argument(
        "--insecure",
        action="store_true",
        default=settings.insecure,
        help="Skip verification of the node's certificate chain and host name (self-signed certs)",
    )
    p.add_argument("--host", default=settings.host, help="Listen address (default: %(default)s)")
    p.add_argument("--port", type=int, default=settings.port, help="Listen port (default: %(default)s)")
    p.add_argument("--timeout", type=float, default=settings.rpc_timeout_s, help="RPC timeout in seconds")
    p.add_argument(
        "--log-level",
        type=str.lower,
        choices=LOG_LEVELS,
        default=settings.log_level,
        help="Log level for the service and the HTTP server (default: %(default)s)",
    )
    p.add_argument("--log-format", choices=["auto", "json", "console"], default=settings.log_format)
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.log_level not in LOG_LEVELS:
        parser.error(f"invalid log level {args.log_level!r} (choose from {', '.join(LOG_LEVELS)})")
    setup_logging(args.log_level, args.log_format)

    try:
        comparator = HeightComparator.from_config(
            args.endpoint1,
            args.endpoint2,
            args.threshold,
            insecure=args.insecure,
            timeout_s=args.timeout,
        )
    except ConfigurationError as e:
        logger.error("invalid_configuration", error=str(e), problems=len(e.errors))
        return 1

    logger.info(
        "comparing_block_heights",
        endpoint1=args.endpoint1,
        endpoint2=args.endpoint2,
        threshold=str(comparator.threshold),
        insecure=args.insecure,
    )
    uvicorn.run(create_app(comparator), host=args.host, port=args.port, log_level=args.log_level)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
