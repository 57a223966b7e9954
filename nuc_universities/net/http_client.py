"""HTTP client wrapper with retry logic and bounded timeouts."""

from __future__ import annotations

import logging

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

logger = logging.getLogger("nuc_universities")

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


class HttpClient:
    """Thin wrapper around :class:`requests.Session` that adds automatic
    retries on transient errors, a ``(connect, read)`` timeout on every
    request and a configurable ``User-Agent`` header.

    A single client is shared by all source workers of a cycle;
    :class:`requests.Session` connection pooling is safe for concurrent
    GETs.

    Usage::

        with HttpClient(timeout=(5, 20)) as client:
            response = client.get("https://www.nuc.edu.ng/")
    """

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: tuple[float, float] = (10, 30),
        max_retries: int = 3,
        verify: bool = True,
    ) -> None:
        self.timeout = timeout
        self.verify = verify

        self._session = requests.Session()
        self._session.headers["User-Agent"] = user_agent

        # Configure retry strategy for transient server errors.
        retry = Retry(
            total=max_retries,
            backoff_factor=1,
            status_forcelist=[500, 502, 503, 504],
            allowed_methods=["GET", "HEAD"],
        )
        adapter = HTTPAdapter(max_retries=retry, pool_maxsize=16)
        self._session.mount("http://", adapter)
        self._session.mount("https://", adapter)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get(self, url: str, **kwargs) -> requests.Response:
        """Perform a GET request.

        Raises :class:`requests.HTTPError` on 4xx/5xx responses (after
        retries are exhausted for 5xx) and any other
        :class:`requests.RequestException` from the transport.
        """
        kwargs.setdefault("timeout", self.timeout)
        kwargs.setdefault("verify", self.verify)
        logger.debug("GET", extra={"url": url})
        response = self._session.get(url, **kwargs)
        response.raise_for_status()
        return response

    def close(self) -> None:
        """Close the underlying :class:`requests.Session`."""
        self._session.close()

    # ------------------------------------------------------------------
    # Context-manager protocol
    # ------------------------------------------------------------------

    def __enter__(self) -> HttpClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
