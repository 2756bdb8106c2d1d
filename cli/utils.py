import click
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from core.config import settings
from core.errors import StartupError
from core.openlibrary import OpenLibraryClient
from core.resolvers.resolver import Resolver
from core.sa.database import Database
from core.scoring import score_to_stars
from core.services.auth import AuthService
from core.services.cache_store import CacheStore
from core.services.library_service import LibraryService
from core.services.reference_cache import ReferenceSnapshot, init_db_and_cache
from core.utils.image import ImageCache

@dataclass
class AppContext:
    """Objects every command needs, built once per invocation"""
    database: Database
    client: OpenLibraryClient
    store: CacheStore
    snapshot: ReferenceSnapshot
    resolver: Resolver
    library: LibraryService
    auth: AuthService

def bootstrap(database_url: Optional[str] = None) -> AppContext:
    """Create tables, load the reference cache and wire the services.

    Exits with status 1 if the reference cache cannot be loaded.
    """
    database = Database(database_url)
    client = OpenLibraryClient()
    store = CacheStore(database)
    try:
        snapshot = init_db_and_cache(database, client, store)
    except StartupError as e:
        click.echo(click.style(f"Startup failed: {e}", fg='red'), err=True)
        raise SystemExit(1)

    image_cache = ImageCache() if settings.download_images else None
    resolver = Resolver(store, client, snapshot, image_cache=image_cache)
    return AppContext(
        database=database,
        client=client,
        store=store,
        snapshot=snapshot,
        resolver=resolver,
        library=LibraryService(store, resolver, snapshot),
        auth=AuthService(store)
    )

def print_record(record: Dict[str, Any], skip: tuple = ()) -> None:
    """Print a resolved record as aligned key/value lines"""
    for key, value in record.items():
        if key in skip:
            continue
        if isinstance(value, list):
            value = ', '.join(_label(item) for item in value) or '-'
        click.echo(click.style(f"{key:>24}: ", fg='blue') + str(value if value is not None else '-'))

def _label(item: Any) -> str:
    if isinstance(item, dict):
        return str(item.get('name') or item.get('language') or item.get('title') or item)
    return str(item)

def print_books(books: List[Dict[str, Any]]) -> None:
    for book in books:
        stars = book.get('stars') or score_to_stars(book.get('score'))
        authors = ', '.join(a['name'] for a in book.get('authors', [])) or 'Unknown author'
        click.echo(
            click.style(f"{book['edition_olid']:<14}", fg='cyan') +
            f" {book['title']} - {authors} " +
            click.style(f"[{book['status']}]", fg='yellow') +
            f" {stars.render()}"
        )
