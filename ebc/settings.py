from __future__ import annotations

import os
from dataclasses import dataclass


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    # HTTP server
    host: str = os.getenv("EBC_HOST", "0.0.0.0")
    port: int = _env_int("EBC_PORT", 8080)

    # Comparison
    # Kept as text; parsed and validated when the comparator is built.
    threshold: str = os.getenv("EBC_THRESHOLD", "20")

    # Outbound RPC
    # Skip certificate verification (self-signed node certs).
    insecure: bool = _env_bool("EBC_INSECURE", False)
    rpc_timeout_s: float = _env_float("EBC_RPC_TIMEOUT_S", 10.0)

    # Logging
    log_level: str = os.getenv("EBC_LOG_LEVEL", "INFO")
    log_format: str = os.getenv("EBC_LOG_FORMAT", "auto")  # auto|json|console


settings = Settings()
