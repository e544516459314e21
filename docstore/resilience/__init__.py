"""
Docstore Resilience Module
==========================

Error taxonomy shared by the management engine and the RPC layer.
"""

from .errors import (
    AuthorizationError,
    DocstoreError,
    NotFoundError,
    StorageError,
    ValidationError,
    raise_validation,
)

__all__ = [
    "DocstoreError",
    "AuthorizationError",
    "ValidationError",
    "NotFoundError",
    "StorageError",
    "raise_validation",
]
