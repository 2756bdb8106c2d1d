# api/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from core.config import configure_logging, settings
from core.errors import (
    AuthenticationError, InvalidFormat, MissingIdentifier, NotFound,
    OpenShelfError, RemoteUnavailable, StorageError, ValidationError
)
from core.openlibrary import OpenLibraryClient
from core.resolvers.resolver import Resolver
from core.sa.database import Database
from core.services.auth import AuthService
from core.services.cache_store import CacheStore
from core.services.library_service import LibraryService
from core.services.reference_cache import init_db_and_cache
from core.utils.image import ImageCache
from api.routes import books, users

logger = logging.getLogger(__name__)

# CORS configuration
origins = [
    "http://localhost:5173",
    "http://localhost:4173",
    "http://127.0.0.1:5173",
    "http://localhost",
]

ERROR_STATUS = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (InvalidFormat, status.HTTP_400_BAD_REQUEST),
    (MissingIdentifier, status.HTTP_400_BAD_REQUEST),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (NotFound, status.HTTP_404_NOT_FOUND),
    (RemoteUnavailable, status.HTTP_502_BAD_GATEWAY),
    (StorageError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def create_app(
    database: Optional[Database] = None,
    client: Optional[OpenLibraryClient] = None
) -> FastAPI:
    """Build the API. Startup runs init_db_and_cache; a StartupError aborts it."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging()
        db = database or Database()
        ol_client = client or OpenLibraryClient()
        store = CacheStore(db)
        snapshot = init_db_and_cache(db, ol_client, store)
        image_cache = ImageCache() if settings.download_images else None

        app.state.store = store
        app.state.client = ol_client
        app.state.snapshot = snapshot
        app.state.resolver = Resolver(store, ol_client, snapshot, image_cache=image_cache)
        app.state.library = LibraryService(store, app.state.resolver, snapshot)
        app.state.auth = AuthService(store)
        logger.info("API ready")
        yield
        if database is None:
            db.dispose()

    app = FastAPI(title="openshelf", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(OpenShelfError)
    async def openshelf_error_handler(request: Request, exc: OpenShelfError):
        for error_class, status_code in ERROR_STATUS:
            if isinstance(exc, error_class):
                break
        else:
            status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

        if status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc}")
        content = {"detail": str(exc)}
        if isinstance(exc, ValidationError):
            content["errors"] = exc.errors
        return JSONResponse(status_code=status_code, content=content)

    @app.get("/")
    async def root():
        return {"message": "openshelf"}

    app.include_router(books.router)
    app.include_router(users.router)
    return app


app = create_app()
