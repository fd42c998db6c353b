from __future__ import annotations
import logging
import os
from dataclasses import dataclass

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class ServerConfig:
    api_key: str | None = None
    rate_limit_n: int = 30
    rate_limit_window_sec: float = 1.0
    trust_proxy: bool = False  # honor X-Forwarded-For from a fronting proxy
    host: str = "0.0.0.0"
    port: int = 8000


def get_server_config() -> ServerConfig:
    return ServerConfig(
        api_key=os.getenv("API_KEY") or None,
        rate_limit_n=int(os.getenv("RATE_LIMIT_N", "30")),
        rate_limit_window_sec=float(os.getenv("RATE_LIMIT_WINDOW_SEC", "1.0")),
        trust_proxy=os.getenv("TRUST_PROXY", "").lower() in ("1", "true", "yes"),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
    )


def configure_logging(level: str | None = None) -> None:
    lvl = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=getattr(logging, lvl, logging.INFO), format=LOG_FORMAT)
