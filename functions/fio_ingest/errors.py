"""
Exceptions raised while ingesting FIO transaction history.

Every account-scoped failure carries the pipeline stage it came from so the
orchestrator can report which step broke for which account. Only
AuthenticationError aborts a whole request.
"""

from enum import Enum
from typing import Optional


class Stage(str, Enum):
    AUTH = "auth"
    SECRET = "secret"
    FETCH = "fetch"
    PERSIST = "persist"


class IngestError(Exception):
    """Base exception for all ingestion errors."""

    stage: Stage = Stage.AUTH

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class AuthenticationError(IngestError):
    """The ambient credential could not be obtained."""

    stage = Stage.AUTH


class SecretRetrievalError(IngestError):
    """Key Vault lookup for an account token failed."""

    stage = Stage.SECRET


class FetchError(IngestError):
    """The FIO API call failed."""

    stage = Stage.FETCH


class TransportError(FetchError):
    """Network-level failure: timeout, refused connection, TLS, ..."""


class HTTPStatusError(FetchError):
    """The FIO API answered with a non-2xx status."""

    def __init__(self, status_code: int, body: str, message: Optional[str] = None):
        self.status_code = status_code
        self.body = body
        super().__init__(message or f"API returned non-200 status: {status_code}, Response: {body}")


class PersistError(IngestError):
    """Blob upload failed."""

    stage = Stage.PERSIST
