"""Source fetcher -- download a listing page and parse it, failures as values."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

import requests
from bs4 import BeautifulSoup

from nuc_universities.net.http_client import HttpClient

logger = logging.getLogger("nuc_universities")


@dataclass(frozen=True)
class FetchError:
    """A failed fetch: the URL and the underlying failure message."""

    url: str
    message: str

    def __str__(self) -> str:
        return f"{self.url}: {self.message}"


FetchResult = Union[BeautifulSoup, FetchError]


class SourceFetcher:
    """Retrieve one listing document per call.

    :meth:`fetch` never raises for network or HTTP failures; they come
    back as :class:`FetchError`. A body the parser chokes on is logged
    and treated as an empty document (zero rows).
    """

    def __init__(self, http_client: HttpClient, parser: str = "lxml"):
        self.client = http_client
        self.parser = parser

    def fetch(self, url: str) -> FetchResult:
        try:
            response = self.client.get(url)
        except requests.RequestException as e:
            return FetchError(url=url, message=str(e) or type(e).__name__)

        # Bytes, so decoding follows the page's own charset
        return self.parse(response.content, url)

    def parse(self, html: str | bytes, url: str = "") -> BeautifulSoup:
        """Parse *html*, falling back to an empty document on parser errors."""
        try:
            return BeautifulSoup(html, self.parser)
        except Exception as e:
            logger.warning(
                "Document parse failed, treating as empty",
                extra={"url": url, "error": str(e)},
            )
            return BeautifulSoup("", self.parser)
