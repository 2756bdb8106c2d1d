# core/openlibrary/base_client.py
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import requests

from core.config import settings
from core.errors import NotFound, RemoteUnavailable

class BaseFetcher(ABC):
    """Base class for Open Library fetchers: HTTP access, error mapping, normalization hook."""

    # Endpoint family used in error messages ("edition", "works", ...)
    kind: str = ''

    # Multiplier applied to the configured timeout for slow endpoints
    timeout_factor: float = 1.0

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None
    ):
        """
        Initialize the fetcher.

        Args:
            session: Shared requests session; a new one is created if omitted
            base_url: Open Library base URL (defaults to settings.openlibrary_base_url)
            timeout: Per-call timeout in seconds (defaults to settings.openlibrary_timeout)
        """
        self.session = session or requests.Session()
        self.base_url = (base_url or settings.openlibrary_base_url).rstrip('/')
        self.timeout = timeout if timeout is not None else settings.openlibrary_timeout
        self.logger = logging.getLogger(self.__class__.__name__)

    def build_url(self, path: str, params: Optional[Dict[str, Any]] = None) -> str:
        """
        Construct a URL with query parameters.

        Args:
            path: Path below the base URL, starting with '/'
            params: Dictionary of query parameters

        Returns:
            The constructed URL as a string
        """
        url = f"{self.base_url}{path}"
        return f"{url}?{urlencode(params)}" if params else url

    def get_json(self, url: str, criteria: Optional[str]) -> Any:
        """
        GET a URL and decode its JSON body. No retries.

        Args:
            url: The URL to download
            criteria: Identifier or search term, for error reporting

        Returns:
            The decoded JSON document

        Raises:
            NotFound: On HTTP 404
            RemoteUnavailable: On timeout, connection failure, other non-2xx status or a non-JSON body
        """
        self.logger.debug(f"Fetching {url}")
        try:
            response = self.session.get(url, timeout=self.timeout * self.timeout_factor)
        except requests.Timeout as e:
            raise RemoteUnavailable(self.kind, criteria, f"timed out: {e}") from e
        except requests.RequestException as e:
            raise RemoteUnavailable(self.kind, criteria, f"request failed: {e}") from e

        if response.status_code == 404:
            raise NotFound(self.kind, criteria)
        if not 200 <= response.status_code < 300:
            raise RemoteUnavailable(self.kind, criteria, f"HTTP {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise RemoteUnavailable(self.kind, criteria, "response body is not JSON") from e

    @abstractmethod
    def get_url(self, criteria: Optional[str], page: int = 1) -> str:
        """
        Get the URL for a criteria value.
        Must be implemented by derived classes.
        """
        pass

    @abstractmethod
    def extract_data(self, data: Any, criteria: Optional[str]) -> Any:
        """
        Map a raw Open Library document into its normalized shape.
        Must be implemented by derived classes.
        """
        pass

    def fetch(self, criteria: Optional[str] = None, page: int = 1) -> Any:
        """
        Main fetch method that coordinates download and normalization.

        Args:
            criteria: OLID or search term
            page: Page number for paginated endpoints

        Returns:
            The normalized record
        """
        url = self.get_url(criteria, page)
        data = self.get_json(url, criteria)
        record = self.extract_data(data, criteria)
        self.logger.info(f"Fetched {self.kind} '{criteria}' from Open Library")
        return record


def text_value(value: Any) -> Optional[str]:
    """Open Library stores free text either as a string or as {type, value}"""
    if isinstance(value, dict):
        value = value.get('value')
    if isinstance(value, str) and value.strip():
        return value
    return None


def first_string(*candidates: Any) -> Optional[str]:
    """Return the first non-empty string, taking element 0 of list candidates"""
    for candidate in candidates:
        if isinstance(candidate, list):
            candidate = candidate[0] if candidate else None
        if isinstance(candidate, str) and candidate.strip():
            return candidate.strip()
    return None
