# core/openlibrary/languages.py
from typing import Any, Dict, List, Optional
from core.utils.olid import format_prefix
from .base_client import BaseFetcher

class LanguagesFetcher(BaseFetcher):
    """Fetcher for the /languages.json catalogue."""

    kind = 'languages'
    timeout_factor = 4.0

    def get_url(self, criteria: Optional[str] = None, page: int = 1) -> str:
        return self.build_url('/languages.json')

    def extract_data(self, data: Any, criteria: Optional[str] = None) -> List[Dict[str, str]]:
        if not isinstance(data, list):
            self.logger.warning("Languages response is not a list")
            return []

        languages = []
        for entry in data:
            if isinstance(entry, dict) and isinstance(entry.get('key'), str) and isinstance(entry.get('name'), str):
                languages.append({
                    'language': entry['name'],
                    'key': format_prefix('languages', [entry])[0],
                })
            else:
                self.logger.warning(f"Skipping malformed language entry: {entry!r}")
        return languages
