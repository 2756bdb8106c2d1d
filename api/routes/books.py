# api/routes/books.py

from fastapi import APIRouter, Depends, HTTPException, Query

from core.openlibrary import OpenLibraryClient
from core.resolvers.resolver import Resolver
from core.services.library_service import LibraryService
from api.deps import get_client, get_library, get_resolver
from api.schemas.book import AuthorSchema, EditionSchema, SearchResult, WorkSchema

router = APIRouter(tags=["books"])

MODE_QUERY = Query("all", description="cached, uncached or all")

@router.get("/search", response_model=SearchResult)
def search_books(
    title: str = Query(..., min_length=1, description="Title to search for"),
    page: int = Query(1, ge=1, description="Page number"),
    client: OpenLibraryClient = Depends(get_client)
):
    """
    Search Open Library by title. Results are not cached.

    Args:
        title: Title search term
        page: Page number (1-based)

    Returns:
        SearchResult with one summary per matching work
    """
    return client.fetch('search', title, page)

@router.get("/editions/{edition_olid}", response_model=EditionSchema)
def get_edition(
    edition_olid: str,
    mode: str = MODE_QUERY,
    resolver: Resolver = Depends(get_resolver)
):
    """Get an edition with its authors and languages"""
    return _found(resolver.resolve('edition', edition_olid, mode), 'edition', edition_olid)

@router.get("/works/{work_olid}", response_model=WorkSchema)
def get_work(
    work_olid: str,
    mode: str = MODE_QUERY,
    resolver: Resolver = Depends(get_resolver),
    library: LibraryService = Depends(get_library)
):
    """Get a work with its subjects, cached editions and average score"""
    work = _found(resolver.resolve('work', work_olid, mode), 'work', work_olid)
    work['score'] = library.work_score(work_olid)
    return work

@router.get("/authors/{author_olid}", response_model=AuthorSchema)
def get_author(
    author_olid: str,
    mode: str = MODE_QUERY,
    resolver: Resolver = Depends(get_resolver)
):
    return _found(resolver.resolve('author', author_olid, mode), 'author', author_olid)

def _found(record, kind: str, olid: str):
    # Cached mode reports absence as None
    if record is None:
        raise HTTPException(status_code=404, detail=f"{kind} {olid} is not cached")
    return record
