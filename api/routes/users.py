# api/routes/users.py

from fastapi import APIRouter, Depends, HTTPException, Response, status

from core.services.auth import AuthService
from core.services.cache_store import CacheStore
from core.services.library_service import LibraryService
from api.deps import get_auth, get_library, get_store
from api.schemas.user import (
    AddBookRequest, AddBookResponse, LoginRequest, Review, ReviewRequest,
    StatusUpdate, User, UserBookList, UserCreate
)

router = APIRouter(tags=["users"])

@router.post("/users", response_model=User, status_code=status.HTTP_201_CREATED)
def create_user(user: UserCreate, auth: AuthService = Depends(get_auth)):
    return auth.register(user.username, user.password, user.email)

@router.post("/login", response_model=User)
def login(credentials: LoginRequest, auth: AuthService = Depends(get_auth)):
    return auth.authenticate(credentials.username, credentials.password)

@router.get("/users/{user_id}/books", response_model=UserBookList)
def get_user_books(
    user_id: int,
    store: CacheStore = Depends(get_store),
    library: LibraryService = Depends(get_library)
):
    """
    Get every book in a user's collection.

    Args:
        user_id: The ID of the user

    Returns:
        UserBookList; an empty list when the user has no books
    """
    _require_user(store, user_id)
    books = library.get_books(user_id) or []
    return {"items": books, "total": len(books)}

@router.get("/users/{user_id}/reviews", response_model=UserBookList)
def get_user_reviews(
    user_id: int,
    store: CacheStore = Depends(get_store),
    library: LibraryService = Depends(get_library)
):
    """Get the reviewed books of a user's collection"""
    _require_user(store, user_id)
    books = library.get_reviews(user_id) or []
    return {"items": books, "total": len(books)}

@router.post("/users/{user_id}/books", response_model=AddBookResponse)
def add_user_book(
    user_id: int,
    request: AddBookRequest,
    response: Response,
    store: CacheStore = Depends(get_store),
    library: LibraryService = Depends(get_library)
):
    """
    Add an edition to a user's collection.

    Returns 201 when the book was added and 200 when it was already there.
    """
    _require_user(store, user_id)
    result = library.add_book(user_id, request.edition_olid, request.status_id)
    response.status_code = status.HTTP_201_CREATED if result.inserted else status.HTTP_200_OK
    return {"edition_olid": request.edition_olid, "result": result.value}

@router.put("/users/{user_id}/books/{edition_olid}/status")
def update_book_status(
    user_id: int,
    edition_olid: str,
    update: StatusUpdate,
    library: LibraryService = Depends(get_library)
):
    if not library.set_status(user_id, edition_olid, update.status_id):
        raise HTTPException(status_code=404, detail="Book not in collection")
    return {"message": "Status updated"}

@router.put("/users/{user_id}/books/{edition_olid}/review", response_model=Review)
def review_book(
    user_id: int,
    edition_olid: str,
    review: ReviewRequest,
    library: LibraryService = Depends(get_library)
):
    saved = library.review(user_id, edition_olid, review.score, review.review)
    if saved is None:
        raise HTTPException(status_code=404, detail="Book not in collection")
    return saved

@router.delete("/users/{user_id}/books/{edition_olid}")
def remove_book(
    user_id: int,
    edition_olid: str,
    library: LibraryService = Depends(get_library)
):
    if not library.remove_book(user_id, edition_olid):
        raise HTTPException(status_code=404, detail="Book not in collection")
    return {"message": "Book removed"}

def _require_user(store: CacheStore, user_id: int) -> None:
    if store.get_user(user_id) is None:
        raise HTTPException(status_code=404, detail="User not found")
