# core/services/reference_cache.py
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError

from core.errors import InvalidFormat, OpenShelfError, StartupError
from core.openlibrary import OpenLibraryClient
from core.sa.database import Database
from core.services.cache_store import CacheStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReferenceSnapshot:
    """Read-only lookup tables loaded once at startup.

    The OLID sets are a fast-path hint for "is this already cached?"; the
    store stays authoritative, so a stale miss only costs a query.
    """
    statuses: Tuple[Dict[str, Any], ...] = ()
    subjects: Tuple[Dict[str, Any], ...] = ()
    languages: Tuple[Dict[str, Any], ...] = ()
    work_olids: FrozenSet[str] = frozenset()
    edition_olids: FrozenSet[str] = frozenset()
    author_olids: FrozenSet[str] = frozenset()
    _languages_by_key: Dict[str, Dict[str, Any]] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self):
        # frozen dataclass: populate the derived index through object.__setattr__
        object.__setattr__(self, '_languages_by_key', {lang['key']: lang for lang in self.languages})

    @classmethod
    def from_records(
        cls,
        statuses: Iterable[Dict[str, Any]] = (),
        subjects: Iterable[Dict[str, Any]] = (),
        languages: Iterable[Dict[str, Any]] = (),
        known_olids: Optional[Dict[str, Iterable[str]]] = None
    ) -> 'ReferenceSnapshot':
        known_olids = known_olids or {}
        return cls(
            statuses=tuple(statuses),
            subjects=tuple(subjects),
            languages=tuple(languages),
            work_olids=frozenset(known_olids.get('work', ())),
            edition_olids=frozenset(known_olids.get('edition', ())),
            author_olids=frozenset(known_olids.get('author', ())),
        )

    def is_known(self, kind: str, olid: str) -> bool:
        """Whether the OLID was cached when the snapshot was taken"""
        if kind == 'work':
            return olid in self.work_olids
        if kind == 'edition':
            return olid in self.edition_olids
        if kind == 'author':
            return olid in self.author_olids
        raise InvalidFormat(f"Unsupported entity type '{kind}'")

    def language_by_key(self, key: str) -> Optional[Dict[str, Any]]:
        """Look up one language by its cleaned key, e.g. "eng" """
        return self._languages_by_key.get(key)

    def languages_by_keys(self, keys: Iterable[str]) -> List[Dict[str, Any]]:
        """Look up several languages, keeping input order and skipping unknown keys"""
        found = []
        for key in keys:
            language = self._languages_by_key.get(key)
            if language is None:
                logger.warning(f"Language key '{key}' not in reference cache")
                continue
            found.append(language)
        return found

    def status_name(self, status_id: int) -> Optional[str]:
        for status in self.statuses:
            if status['id'] == status_id:
                return status['name']
        return None


def refresh_languages(store: CacheStore, client: OpenLibraryClient, max_workers: int = 8) -> int:
    """Insert remote languages missing from the local table.

    Inserts run concurrently; a failed insert is logged and does not stop
    the others.

    Returns:
        Number of languages newly inserted
    """
    remote = client.fetch('languages')
    known = {lang['key'] for lang in store.list_languages()}
    missing = [lang for lang in remote if lang['key'] not in known]
    if not missing:
        return 0

    logger.info(f"Inserting {len(missing)} new languages")
    inserted = 0
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(store.put_ol_language, lang['language'], lang['key']): lang['key']
            for lang in missing
        }
        for future, key in futures.items():
            try:
                result, _ = future.result()
            except OpenShelfError as e:
                logger.error(f"Failed to insert language '{key}': {e}")
                continue
            if result.inserted:
                inserted += 1
    return inserted


def load_snapshot(store: CacheStore) -> ReferenceSnapshot:
    """Run the four reference queries concurrently and build a snapshot"""
    with ThreadPoolExecutor(max_workers=4) as executor:
        statuses = executor.submit(store.list_statuses)
        subjects = executor.submit(store.list_subjects)
        languages = executor.submit(store.list_languages)
        known_olids = executor.submit(store.list_known_olids)
        return ReferenceSnapshot.from_records(
            statuses=statuses.result(),
            subjects=subjects.result(),
            languages=languages.result(),
            known_olids=known_olids.result(),
        )


def init_db_and_cache(
    database: Database,
    client: OpenLibraryClient,
    store: Optional[CacheStore] = None
) -> ReferenceSnapshot:
    """Prepare the database and load the reference snapshot.

    Args:
        database: Database to create tables in
        client: Open Library client used for the language refresh
        store: CacheStore over the database; built from it if omitted

    Returns:
        The ReferenceSnapshot to inject into the Resolver and API

    Raises:
        StartupError: If any step fails; the process must not serve requests
    """
    store = store or CacheStore(database)
    try:
        database.init_db()
        seeded = store.seed_statuses()
        if seeded:
            logger.info(f"Seeded {seeded} reading statuses")
        inserted = refresh_languages(store, client, max_workers=store.enrich_workers)
        logger.info(f"Language refresh inserted {inserted} rows")
        snapshot = load_snapshot(store)
    except (OpenShelfError, SQLAlchemyError) as e:
        logger.error(f"Startup cache population failed: {e}")
        raise StartupError(f"Startup cache population failed: {e}") from e

    logger.info(
        f"Reference cache ready: {len(snapshot.statuses)} statuses, "
        f"{len(snapshot.subjects)} subjects, {len(snapshot.languages)} languages, "
        f"{len(snapshot.work_olids)} works, {len(snapshot.edition_olids)} editions, "
        f"{len(snapshot.author_olids)} authors"
    )
    return snapshot
