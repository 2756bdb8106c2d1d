# core/errors.py
from typing import Optional


class OpenShelfError(Exception):
    """Base class for all errors raised by the book cache layer"""
    pass


class InvalidFormat(OpenShelfError):
    """Malformed OLID or unsupported entity-type/mode argument"""
    pass


class InvalidMode(InvalidFormat):
    """Resolution mode outside cached/uncached/all"""

    def __init__(self, mode):
        super().__init__(f"Invalid mode '{mode}'. Expected one of: cached, uncached, all")
        self.mode = mode


class MissingIdentifier(OpenShelfError):
    """A required identifier or search criteria was not supplied"""
    pass


class NotFound(OpenShelfError):
    """Open Library confirmed the entity does not exist"""

    def __init__(self, kind: str, criteria: Optional[str]):
        super().__init__(f"Open Library has no {kind} for '{criteria}' (404)")
        self.kind = kind
        self.criteria = criteria


class RemoteUnavailable(OpenShelfError):
    """Network error, timeout or unexpected status from Open Library"""

    def __init__(self, kind: str, criteria: Optional[str], reason: str):
        super().__init__(f"Open Library request for {kind} '{criteria}' failed: {reason}")
        self.kind = kind
        self.criteria = criteria
        self.reason = reason


class StorageError(OpenShelfError):
    """Persistence failure other than a unique-constraint conflict"""

    def __init__(self, entity: str, identifier, cause: Optional[Exception] = None):
        message = f"Storage failure on {entity} '{identifier}'"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.entity = entity
        self.identifier = identifier
        self.cause = cause


class StartupError(OpenShelfError):
    """Reference cache population failed; the application must not serve requests"""
    pass


class ValidationError(OpenShelfError):
    """User-supplied account data failed validation"""

    def __init__(self, errors: list[dict]):
        super().__init__("; ".join(f"{e['field']}: {e['message']}" for e in errors))
        self.errors = errors


class AuthenticationError(OpenShelfError):
    """Username/password mismatch or inactive account"""
    pass
