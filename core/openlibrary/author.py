# core/openlibrary/author.py
from typing import Any, Dict, Optional
from core.config import settings
from core.utils.olid import to_title_case
from .base_client import BaseFetcher, text_value

class AuthorFetcher(BaseFetcher):
    """Fetcher for /authors/{olid}.json author records."""

    kind = 'author'

    def get_url(self, author_olid: Optional[str], page: int = 1) -> str:
        return self.build_url(f"/authors/{author_olid}.json")

    def extract_data(self, data: Dict[str, Any], author_olid: Optional[str]) -> Dict[str, Any]:
        return {
            'author_olid': author_olid,
            'name': to_title_case(data.get('name')),
            'bio': text_value(data.get('bio')),
            'birth_date': data.get('birth_date'),
            'death_date': data.get('death_date'),
            'pic_url': self._extract_pic_url(data),
        }

    def _extract_pic_url(self, data: Dict[str, Any]) -> Optional[str]:
        """Build the photo URL from the first photo id; -1 marks a removed photo"""
        photos = data.get('photos')
        if photos is None:
            photos = data.get('pics')
        photo_id = photos[0] if isinstance(photos, list) and photos else photos
        if isinstance(photo_id, int) and not isinstance(photo_id, bool) and photo_id > 0:
            return f"{settings.openlibrary_covers_url}/a/id/{photo_id}-M.jpg"
        return None
