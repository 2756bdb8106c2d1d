# core/resolvers/resolver.py
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Iterable, List, Optional

from core.errors import InvalidFormat, InvalidMode, MissingIdentifier, NotFound, RemoteUnavailable
from core.openlibrary import OpenLibraryClient
from core.sa.repositories import InsertResult
from core.services.cache_store import CacheStore
from core.services.reference_cache import ReferenceSnapshot
from core.utils.image import ImageCache
from core.utils.olid import validate_olid

logger = logging.getLogger(__name__)

MODES = ('cached', 'uncached', 'all')
ENTITY_TYPES = ('edition', 'work', 'author')

# Entity type -> Open Library client kind
REMOTE_KINDS = {'edition': 'edition', 'work': 'works', 'author': 'author'}

# Edition descriptions shorter than this are replaced by the work's
MIN_DESCRIPTION_LENGTH = 60


class Resolver:
    """Cache-or-fetch resolution of editions, works and authors.

    Modes:
        cached: local store only; None when absent, never calls Open Library
        uncached: Open Library only; never reads the store
        all: store first, otherwise fetch, persist and read back
    """

    def __init__(
        self,
        store: CacheStore,
        client: OpenLibraryClient,
        snapshot: ReferenceSnapshot,
        image_cache: Optional[ImageCache] = None,
        max_workers: int = 4
    ):
        self.store = store
        self.client = client
        self.snapshot = snapshot
        self.image_cache = image_cache
        self.max_workers = max_workers

    def resolve(self, entity_type: str, olid: Optional[str], mode: str = 'all') -> Optional[Dict[str, Any]]:
        """
        Resolve an entity to a unified record.

        Args:
            entity_type: "edition", "work" or "author"
            olid: OLID whose suffix matches entity_type
            mode: "cached", "uncached" or "all"

        Returns:
            The record with an is_cached flag, or None in cached mode when absent

        Raises:
            InvalidMode: Unknown mode
            InvalidFormat: Unknown entity type, malformed OLID or OLID of another type
            MissingIdentifier: Empty OLID
            NotFound / RemoteUnavailable: Remote failures in uncached and all modes
        """
        if mode not in MODES:
            raise InvalidMode(mode)
        if entity_type not in ENTITY_TYPES:
            raise InvalidFormat(f"Unsupported entity type '{entity_type}'")
        if not olid:
            raise MissingIdentifier(f"An OLID is required to resolve a {entity_type}")
        olid_type = validate_olid(olid)
        if olid_type != entity_type:
            raise InvalidFormat(f"OLID '{olid}' identifies a {olid_type}, not a {entity_type}")

        if mode == 'cached':
            return self._read_cached(entity_type, olid)
        if mode == 'uncached':
            return self._read_remote(entity_type, olid)

        record = self._read_cached(entity_type, olid)
        if record is not None:
            return record
        return self._fetch_and_cache(entity_type, olid)

    def add_to_collection(self, user_id: int, edition_olid: str, status_id: int = 1) -> InsertResult:
        """Resolve an edition (caching it if needed) and add it to a user's collection"""
        self.resolve('edition', edition_olid, 'all')
        result = self.store.put_user_edition(user_id, edition_olid, status_id)
        if result.inserted:
            logger.info(f"User {user_id} added edition {edition_olid}")
        return result

    # Store reads

    def _read_cached(self, entity_type: str, olid: str) -> Optional[Dict[str, Any]]:
        if entity_type == 'edition':
            record = self._cached_edition(olid)
        elif entity_type == 'work':
            record = self._cached_work(olid)
        else:
            record = self.store.get_author(olid)
        if record is not None:
            record['is_cached'] = True
        return record

    def _cached_edition(self, edition_olid: str) -> Optional[Dict[str, Any]]:
        edition = self.store.get_edition(edition_olid)
        if edition is None:
            return None
        edition['authors'] = self.store.get_edition_authors(edition_olid)
        edition['languages'] = self.store.get_edition_languages(edition_olid)
        return edition

    def _cached_work(self, work_olid: str) -> Optional[Dict[str, Any]]:
        work = self.store.get_work(work_olid)
        if work is None:
            return None
        work['subjects'] = [subject['name'] for subject in self.store.get_work_subjects(work_olid)]
        work['editions'] = self.store.get_work_editions(work_olid)

        author_olids = []
        for edition in work['editions']:
            for author in self.store.get_edition_authors(edition['edition_olid']):
                if author['author_olid'] not in author_olids:
                    author_olids.append(author['author_olid'])
        work['author_olids'] = author_olids
        return work

    # Remote reads

    def _read_remote(self, entity_type: str, olid: str) -> Dict[str, Any]:
        record = dict(self.client.fetch(REMOTE_KINDS[entity_type], olid))
        if entity_type == 'edition':
            record['authors'] = self._fetch_authors(record.get('authors') or [])
            record['languages'] = self.snapshot.languages_by_keys(record.get('languages') or [])
        elif entity_type == 'work':
            record['author_olids'] = record.pop('authors', [])
        record['is_cached'] = False
        return record

    def _fetch_authors(self, author_olids: Iterable[str]) -> List[Dict[str, Any]]:
        """Fetch authors concurrently; authors Open Library no longer has are skipped"""
        olids = list(dict.fromkeys(author_olids))
        if not olids:
            return []
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [(olid, executor.submit(self.client.fetch, 'author', olid)) for olid in olids]
            authors = []
            for olid, future in futures:
                try:
                    authors.append(future.result())
                except NotFound:
                    logger.warning(f"Author {olid} not found on Open Library; skipped")
        return authors

    # Fetch and persist

    def _fetch_and_cache(self, entity_type: str, olid: str) -> Dict[str, Any]:
        logger.info(f"Cache miss for {entity_type} {olid}; fetching from Open Library")
        if entity_type == 'edition':
            return self._cache_edition(olid)
        if entity_type == 'work':
            return self._cache_work(olid)
        return self._cache_author(olid)

    def _cache_work(self, work_olid: str) -> Dict[str, Any]:
        fetched = self.client.fetch('works', work_olid)
        self.store.put_ol_work_graph(fetched, fetched.get('subjects') or [])

        record = self._cached_work(work_olid)
        record['author_olids'] = list(fetched.get('authors') or [])
        record['is_cached'] = False
        return record

    def _cache_author(self, author_olid: str) -> Dict[str, Any]:
        fetched = self.client.fetch('author', author_olid)
        self._store_author(fetched)
        record = self.store.get_author(author_olid)
        record['is_cached'] = False
        return record

    def _store_author(self, author: Dict[str, Any]) -> None:
        self.store.put_ol_author(author)
        if self.image_cache and author.get('pic_url'):
            self.image_cache.cache_image('author', author['pic_url'])

    def _cache_edition(self, edition_olid: str) -> Dict[str, Any]:
        fetched = dict(self.client.fetch('edition', edition_olid))
        work_olid = fetched.get('work_olid')
        if not work_olid:
            raise RemoteUnavailable('edition', edition_olid, 'edition record has no work reference')

        # Parent work first; the edition row references it
        work = None
        if not self.snapshot.is_known('work', work_olid):
            work = self._resolve_parent_work(edition_olid, work_olid)
        self._apply_work_fallback(fetched, work)

        author_olids = self._ensure_authors(fetched.get('authors') or [])
        language_ids = [language['id'] for language in self._ensure_languages(fetched.get('languages') or [])]

        # Edition row and its links last, in one transaction
        self.store.put_ol_edition_graph(fetched, author_olids, language_ids)
        if self.image_cache and fetched.get('cover_url'):
            self.image_cache.cache_image('edition', fetched['cover_url'])

        record = self._cached_edition(edition_olid)
        record['is_cached'] = False
        return record

    def _resolve_parent_work(self, edition_olid: str, work_olid: str) -> Dict[str, Any]:
        try:
            return self.resolve('work', work_olid, 'all')
        except InvalidFormat as e:
            raise RemoteUnavailable('edition', edition_olid, f"bad work reference '{work_olid}'") from e

    def _apply_work_fallback(self, edition: Dict[str, Any], work: Optional[Dict[str, Any]]) -> None:
        """Fill missing authors and a weak description from the parent work.

        A description shorter than MIN_DESCRIPTION_LENGTH counts as weak. The
        work is fetched from Open Library unless it was fetched just now; a
        failed fetch leaves the edition as it is.
        """
        description = (edition.get('description') or '').strip()
        weak_description = len(description) < MIN_DESCRIPTION_LENGTH
        if edition.get('authors') and not weak_description:
            return

        if work is None or work.get('is_cached'):
            try:
                work = self._read_remote('work', edition['work_olid'])
            except (NotFound, RemoteUnavailable) as e:
                logger.warning(f"Work fallback for edition {edition['edition_olid']} unavailable: {e}")
                return

        if not edition.get('authors') and work.get('author_olids'):
            edition['authors'] = list(work['author_olids'])
            logger.info(f"Edition {edition['edition_olid']} uses the authors of work {edition['work_olid']}")

        work_description = (work.get('description') or '').strip()
        if weak_description and len(work_description) >= MIN_DESCRIPTION_LENGTH:
            edition['description'] = work_description

    def _ensure_authors(self, author_olids: Iterable[str]) -> List[str]:
        """Cache any authors not stored yet and return the OLIDs that are now stored"""
        olids = list(dict.fromkeys(author_olids))
        unknown = [olid for olid in olids if not self.snapshot.is_known('author', olid)]
        stored = {author['author_olid'] for author in self.store.get_authors(unknown)}
        missing = [olid for olid in unknown if olid not in stored]

        for author in self._fetch_authors(missing):
            self._store_author(author)
            stored.add(author['author_olid'])

        return [olid for olid in olids if olid in stored or self.snapshot.is_known('author', olid)]

    def _ensure_languages(self, keys: Iterable[str]) -> List[Dict[str, Any]]:
        """Map language keys to rows, inserting keys the snapshot has never seen"""
        languages = []
        for key in keys:
            language = self.snapshot.language_by_key(key)
            if language is None:
                logger.warning(f"Language '{key}' missing from reference cache; inserting it")
                _, language_id = self.store.put_ol_language(key, key)
                language = {'id': language_id, 'language': key, 'key': key}
            languages.append(language)
        return languages
