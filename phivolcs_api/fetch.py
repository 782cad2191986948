# phivolcs_api/fetch.py
from __future__ import annotations
import logging
from typing import FrozenSet, Iterable, Optional
from urllib.parse import urlsplit

import httpx

from phivolcs_api.config import PHIVOLCS_URL, REQUEST_TIMEOUT_SECONDS, USER_AGENT, Settings
from phivolcs_api.errors import NetworkError

logger = logging.getLogger(__name__)


def _host(url: str) -> str:
    return (urlsplit(url).hostname or "").lower()


class Fetcher:
    """
    Downloads the raw PHIVOLCS page.

    Certificate verification is switched off only for hosts in
    ``relaxed_tls_hosts`` (normally just the PHIVOLCS host, whose chain is
    broken). Every other URL is fetched with full verification.
    """

    def __init__(self,
                 url: str = PHIVOLCS_URL,
                 timeout: float = REQUEST_TIMEOUT_SECONDS,
                 user_agent: str = USER_AGENT,
                 relaxed_tls_hosts: Iterable[str] = (),
                 client: Optional[httpx.Client] = None):
        self.url = url
        self.timeout = timeout
        self.user_agent = user_agent
        self.relaxed_tls_hosts: FrozenSet[str] = frozenset(h.lower() for h in relaxed_tls_hosts)
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings, client: Optional[httpx.Client] = None) -> "Fetcher":
        return cls(
            url=settings.source_url,
            timeout=settings.request_timeout,
            user_agent=settings.user_agent,
            relaxed_tls_hosts=settings.relaxed_tls_hosts,
            client=client,
        )

    def verifies(self, url: str) -> bool:
        return _host(url) not in self.relaxed_tls_hosts

    def fetch(self, url: Optional[str] = None, timeout: Optional[float] = None) -> str:
        target = url or self.url
        timeout = self.timeout if timeout is None else timeout

        client = self._client
        close_client = False
        if client is None:
            client = httpx.Client(timeout=timeout, verify=self.verifies(target))
            close_client = True

        try:
            resp = client.get(target, headers={"User-Agent": self.user_agent}, timeout=timeout)
            resp.raise_for_status()
            logger.debug("fetched %s: %d bytes", target, len(resp.content))
            return resp.text
        except httpx.HTTPStatusError as exc:
            raise NetworkError(f"upstream returned HTTP {exc.response.status_code} for {target}") from exc
        except httpx.TimeoutException as exc:
            raise NetworkError(f"timed out after {timeout}s fetching {target}") from exc
        except httpx.HTTPError as exc:
            raise NetworkError(f"failed to fetch {target}: {exc}") from exc
        finally:
            if close_client:
                client.close()
