# core/openlibrary/work.py
from typing import Any, Dict, List, Optional
from core.utils.olid import format_prefix
from .base_client import BaseFetcher, text_value

class WorkFetcher(BaseFetcher):
    """Fetcher for /works/{olid}.json work records."""

    kind = 'works'

    def get_url(self, work_olid: Optional[str], page: int = 1) -> str:
        return self.build_url(f"/works/{work_olid}.json")

    def extract_data(self, data: Dict[str, Any], work_olid: Optional[str]) -> Dict[str, Any]:
        subjects = data.get('subjects')
        if not isinstance(subjects, list):
            subjects = []

        cover_edition = None
        if isinstance(data.get('cover_edition'), dict):
            cover_edition = format_prefix('edition', [data['cover_edition']])

        return {
            'work_olid': work_olid,
            'title': data.get('title'),
            'first_publication_date': data.get('first_publish_date') or data.get('first_publication_date'),
            'subjects': [s for s in subjects if isinstance(s, str) and s.strip()],
            'description': text_value(data.get('description')),
            'authors': self._extract_authors(data.get('authors'), work_olid),
            'cover_edition': cover_edition,
        }

    def _extract_authors(self, authors: Any, work_olid: Optional[str]) -> List[str]:
        """Work records nest author keys as [{author: {key}}]"""
        if not isinstance(authors, list):
            self.logger.warning(f"Work {work_olid} has no authors array")
            return []

        keyed = []
        for entry in authors:
            author = entry.get('author') if isinstance(entry, dict) else None
            if isinstance(author, dict) and isinstance(author.get('key'), str):
                keyed.append({'key': author['key']})
            else:
                self.logger.warning(f"Skipping malformed author entry on work {work_olid}: {entry!r}")
        return format_prefix('authors', keyed)
