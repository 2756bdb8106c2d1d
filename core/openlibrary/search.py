# core/openlibrary/search.py
from typing import Any, Dict, Optional
from core.utils.olid import to_title_case
from .base_client import BaseFetcher

class SearchFetcher(BaseFetcher):
    """Fetcher for /search.json title searches."""

    kind = 'search'
    timeout_factor = 2.0

    def get_url(self, title: Optional[str], page: int = 1) -> str:
        return self.build_url('/search.json', {'title': title, 'page': page})

    def extract_data(self, data: Dict[str, Any], title: Optional[str]) -> Dict[str, Any]:
        docs = data.get('docs') if isinstance(data, dict) else None
        if not isinstance(docs, list):
            self.logger.warning(f"Search for '{title}' returned no docs array")
            docs = []

        return {
            'num_found': data.get('num_found', 0) if isinstance(data, dict) else 0,
            'page': data.get('page') if isinstance(data, dict) else None,
            'docs': [self._extract_doc(doc) for doc in docs if self._is_doc(doc)],
        }

    def _is_doc(self, doc: Any) -> bool:
        if isinstance(doc, dict) and isinstance(doc.get('key'), str):
            return True
        self.logger.warning(f"Skipping malformed search doc: {doc!r}")
        return False

    def _extract_doc(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        """Summarize a search document"""
        author_names = doc.get('author_name') or []
        return {
            'work_olid': doc['key'].rstrip('/').split('/')[-1],
            'title': doc.get('title'),
            'author_names': [to_title_case(name) for name in author_names if isinstance(name, str)],
            'author_olids': [key for key in doc.get('author_key') or [] if isinstance(key, str)],
            'first_publish_year': doc.get('first_publish_year'),
            'cover_edition_olid': doc.get('cover_edition_key'),
            'cover_id': doc.get('cover_i'),
            'edition_count': doc.get('edition_count', 0),
            'languages': [lang for lang in doc.get('language') or [] if isinstance(lang, str)],
        }
