# api/deps.py
from fastapi import Request

from core.openlibrary import OpenLibraryClient
from core.resolvers.resolver import Resolver
from core.services.auth import AuthService
from core.services.cache_store import CacheStore
from core.services.library_service import LibraryService
from core.services.reference_cache import ReferenceSnapshot

# Objects are built once in the app lifespan and kept on app.state

def get_store(request: Request) -> CacheStore:
    return request.app.state.store

def get_client(request: Request) -> OpenLibraryClient:
    return request.app.state.client

def get_snapshot(request: Request) -> ReferenceSnapshot:
    return request.app.state.snapshot

def get_resolver(request: Request) -> Resolver:
    return request.app.state.resolver

def get_library(request: Request) -> LibraryService:
    return request.app.state.library

def get_auth(request: Request) -> AuthService:
    return request.app.state.auth
