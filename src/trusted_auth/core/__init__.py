"""Core building blocks shared by the trusted-auth features."""

from .exceptions import (
    TrustedAuthError,
    AuthenticationError,
    UnsupportedIdentityMappingError,
    ConfigurationError,
    DirectoryError,
    GroupQueryError,
    PersistenceStoreError,
    EncryptionError,
    create_error_response,
)
from .value_objects import DocumentReference, Principal

__all__ = [
    "TrustedAuthError",
    "AuthenticationError",
    "UnsupportedIdentityMappingError",
    "ConfigurationError",
    "DirectoryError",
    "GroupQueryError",
    "PersistenceStoreError",
    "EncryptionError",
    "create_error_response",
    "DocumentReference",
    "Principal",
]
