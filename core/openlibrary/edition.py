# core/openlibrary/edition.py
from typing import Any, Dict, Optional
from core.config import settings
from core.utils.olid import format_prefix
from .base_client import BaseFetcher, text_value, first_string

class EditionFetcher(BaseFetcher):
    """Fetcher for /books/{olid}.json edition records."""

    kind = 'edition'

    def get_url(self, edition_olid: Optional[str], page: int = 1) -> str:
        return self.build_url(f"/books/{edition_olid}.json")

    def extract_data(self, data: Dict[str, Any], edition_olid: Optional[str]) -> Dict[str, Any]:
        """Extract edition data; languages are returned as keys, authors as OLIDs"""
        publishers = data.get('publishers')
        if not isinstance(publishers, list):
            publishers = []

        return {
            'edition_olid': edition_olid,
            'work_olid': format_prefix('works', data.get('works')),
            'title': data.get('title'),
            'publish_date': data.get('publish_date'),
            'publishers': [p for p in publishers if isinstance(p, str)],
            'isbn': self._extract_isbn(data),
            'description': text_value(data.get('description')),
            # Covers are addressed by OLID, never taken from the payload
            'cover_url': f"{settings.openlibrary_covers_url}/b/olid/{edition_olid}-M.jpg",
            'languages': format_prefix('languages', data.get('languages')),
            'authors': format_prefix('authors', data.get('authors')),
        }

    def _extract_isbn(self, data: Dict[str, Any]) -> Optional[str]:
        """Prefer ISBN-13, then ISBN-10, then a generic isbn field"""
        return first_string(data.get('isbn_13'), data.get('isbn_10'), data.get('isbn'))
