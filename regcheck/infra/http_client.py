"""
HTTP client infrastructure for regcheck.

Two primitives are all the release checks need:
- exists(url): HEAD with redirects followed, True iff the final response is OK
- fetch_json(url): GET with redirects followed, the parsed body or None

Neither ever raises for transport problems and neither retries: a refused
connection, a DNS failure or a timeout is reported exactly like a 404.
"""

import logging
from typing import Any, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "regcheck"


class HttpClient:
    """
    Thin requests.Session wrapper used for release probing.

    Example:
        client = HttpClient()
        if client.exists("https://github.com/o/r/releases/download/v1.0/main.js"):
            manifest = client.fetch_json(".../manifest.json")
    """

    def __init__(self, timeout: Optional[float] = None, user_agent: str = DEFAULT_USER_AGENT):
        """
        Initialize HttpClient.

        Args:
            timeout: Per-request timeout in seconds (None uses the transport default)
            user_agent: User-Agent header sent with every request
        """
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            'User-Agent': user_agent,
        })

    def exists(self, url: str) -> bool:
        """Probe a URL with HEAD, following redirects."""
        try:
            response = self.session.head(url, allow_redirects=True, timeout=self.timeout)
        except requests.RequestException as e:
            logger.debug(f"HEAD {url} failed: {e}")
            return False

        logger.debug(f"HEAD {url} -> {response.status_code}")
        return response.ok

    def fetch_json(self, url: str) -> Optional[Any]:
        """
        GET a URL and parse the body as JSON.

        Returns:
            The decoded document, or None on any non-2xx status, transport
            error, or unparseable body
        """
        try:
            response = self.session.get(url, allow_redirects=True, timeout=self.timeout)
        except requests.RequestException as e:
            logger.debug(f"GET {url} failed: {e}")
            return None

        if not response.ok:
            logger.debug(f"GET {url} -> {response.status_code}")
            return None

        try:
            return response.json()
        except ValueError as e:
            logger.debug(f"GET {url} returned invalid JSON: {e}")
            return None
