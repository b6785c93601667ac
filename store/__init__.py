#Marks store as a package.
#Re-exports the hosted data store client and its error classes so other
#modules import from store without knowing internal file names.
#No business logic.

from .client import StoreClient, default_client
from .errors import (
    StoreError,
    NotFoundError,
    DuplicateEntryError,
    ForeignKeyError,
    TableNotFoundError,
    NetworkError,
    AuthError,
    ValidationError,
    error_from_payload,
    log_error,
    retry_request,
)

__all__ = [
    "StoreClient",
    "default_client",
    "StoreError",
    "NotFoundError",
    "DuplicateEntryError",
    "ForeignKeyError",
    "TableNotFoundError",
    "NetworkError",
    "AuthError",
    "ValidationError",
    "error_from_payload",
    "log_error",
    "retry_request",
]
