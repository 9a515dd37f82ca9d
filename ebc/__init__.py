"""Ethereum block-height comparer (ebc).

Small HTTP liveness probe that:
 - asks two JSON-RPC nodes for their latest block
 - compares the heights against a threshold
 - answers GET /heights with 200 (in sync), 500 (too far apart) or 502 (a node failed)

Load balancers and monitors poll it and act on the status code.
"""

__version__ = "1.0.1"
