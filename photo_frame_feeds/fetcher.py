"""Fetching shared album pages."""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import requests

from .config import FetchConfig
from .errors import AlbumUnreachable

logger = logging.getLogger(__name__)


class PageFetcher(ABC):
    """Abstract base class for album page fetchers."""

    @abstractmethod
    def fetch(self, url: str) -> str:
        """
        Fetch a page and return its raw text.

        Raises:
            AlbumUnreachable: If the page cannot be retrieved.
        """
        pass


class RequestsPageFetcher(PageFetcher):
    """Fetch album pages over HTTP with requests."""

    def __init__(self, config: Optional[FetchConfig] = None, session: Optional[requests.Session] = None):
        self.config = config or FetchConfig()
        self.session = session or requests.Session()

    def fetch(self, url: str) -> str:
        headers = {
            "User-Agent": self.config.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        }
        try:
            response = self.session.get(
                url,
                headers=headers,
                timeout=self.config.timeout,
                allow_redirects=True,
            )
        except requests.RequestException as e:
            logger.error(f"Error fetching album {url}: {e}")
            raise AlbumUnreachable(f"Cannot access album: {e}")

        if not 200 <= response.status_code < 300:
            logger.warning(f"Album fetch for {url} returned HTTP {response.status_code}")
            raise AlbumUnreachable(upstream_status=response.status_code)

        logger.info(f"Fetched album page {url} ({len(response.text)} chars)")
        return response.text
