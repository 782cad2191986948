# phivolcs_api/config.py
from __future__ import annotations
import os
from dataclasses import dataclass, field
from typing import Tuple
from urllib.parse import urlsplit

from dotenv import load_dotenv

PHIVOLCS_URL = "https://earthquake.phivolcs.dost.gov.ph/"
CACHE_TTL_SECONDS = 5 * 60
REQUEST_TIMEOUT_SECONDS = 15.0
USER_AGENT = "PHIVOLCS-API-Client/1.0"
MAX_COUNT = 50
EVENT_LOG_SIZE = 1000

_TRUE = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUE


def _env_list(name: str, default: str) -> Tuple[str, ...]:
    raw = os.getenv(name, default)
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    source_url: str = PHIVOLCS_URL
    cache_ttl_seconds: float = CACHE_TTL_SECONDS
    request_timeout: float = REQUEST_TIMEOUT_SECONDS
    user_agent: str = USER_AGENT
    relaxed_tls: bool = True
    cors_origins: Tuple[str, ...] = field(default=("*",))
    log_level: str = "INFO"
    event_log_size: int = EVENT_LOG_SIZE

    @property
    def source_host(self) -> str:
        return (urlsplit(self.source_url).hostname or "").lower()

    @property
    def relaxed_tls_hosts(self) -> frozenset:
        # PHIVOLCS serves an incomplete certificate chain; only its own host gets the exception
        if not self.relaxed_tls or not self.source_host:
            return frozenset()
        return frozenset({self.source_host})

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            source_url=os.getenv("PHIVOLCS_URL", PHIVOLCS_URL),
            cache_ttl_seconds=float(os.getenv("CACHE_TTL_SECONDS", CACHE_TTL_SECONDS)),
            request_timeout=float(os.getenv("REQUEST_TIMEOUT_SECONDS", REQUEST_TIMEOUT_SECONDS)),
            user_agent=os.getenv("PHIVOLCS_USER_AGENT", USER_AGENT),
            relaxed_tls=_env_bool("PHIVOLCS_RELAXED_TLS", True),
            cors_origins=_env_list("API_CORS_ORIGINS", "*") or ("*",),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            event_log_size=int(os.getenv("EVENT_LOG_SIZE", EVENT_LOG_SIZE)),
        )
