"""User directory and document store exceptions for trusted-auth."""

from .base import TrustedAuthError


class DirectoryError(TrustedAuthError):
    """Base exception for user directory errors."""
    pass


class GroupQueryError(DirectoryError):
    """Raised when the groups of a member cannot be listed."""
    pass


class DocumentStoreError(DirectoryError):
    """Raised when a document cannot be loaded or saved."""
    pass
