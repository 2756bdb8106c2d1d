# core/openlibrary/client.py
from typing import Any, Dict, Optional

import requests

from core.errors import InvalidFormat, MissingIdentifier
from .base_client import BaseFetcher
from .edition import EditionFetcher
from .work import WorkFetcher
from .author import AuthorFetcher
from .search import SearchFetcher
from .languages import LanguagesFetcher

FETCHERS = {
    'edition': EditionFetcher,
    'works': WorkFetcher,
    'author': AuthorFetcher,
    'search': SearchFetcher,
    'languages': LanguagesFetcher,
}

class OpenLibraryClient:
    """Single entry point over the per-endpoint fetchers, sharing one HTTP session."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None
    ):
        self.session = session or requests.Session()
        self.fetchers: Dict[str, BaseFetcher] = {
            kind: fetcher_class(session=self.session, base_url=base_url, timeout=timeout)
            for kind, fetcher_class in FETCHERS.items()
        }

    def fetch(self, kind: str, criteria: Optional[str] = None, page: int = 1) -> Any:
        """Fetch and normalize one Open Library resource.

        Args:
            kind: One of "search", "edition", "author", "works", "languages"
            criteria: OLID or search title; not used for "languages"
            page: Result page for "search"

        Returns:
            The normalized record (a list of languages for "languages")

        Raises:
            InvalidFormat: Unknown kind
            MissingIdentifier: criteria missing for a kind that needs it
            NotFound: Open Library answered 404
            RemoteUnavailable: Network failure, timeout or unexpected status
        """
        fetcher = self.fetchers.get(kind)
        if fetcher is None:
            raise InvalidFormat(f"Unsupported Open Library resource type '{kind}'")
        if kind != 'languages' and not criteria:
            raise MissingIdentifier(f"Criteria is required for '{kind}' requests")
        return fetcher.fetch(criteria, page)

    def close(self) -> None:
        self.session.close()
