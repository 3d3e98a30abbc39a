"""Authentication-specific exceptions for trusted-auth."""

from .base import TrustedAuthError


class AuthenticationError(TrustedAuthError):
    """Base exception for authentication errors."""
    pass


class UnsupportedIdentityMappingError(AuthenticationError):
    """Raised when the adapter reports an identity the engine cannot map.

    The name based resolution only handles adapters whose unique id and
    display name are the same non-blank value.
    """
    pass


class UserSynchronizationError(AuthenticationError):
    """Raised when a user profile or its groups cannot be synchronized."""
    pass


class PersistenceStoreError(TrustedAuthError):
    """Base exception for persistence store errors."""
    pass


class EncryptionError(PersistenceStoreError):
    """Raised when the persistence cipher cannot be set up or used."""
    pass
