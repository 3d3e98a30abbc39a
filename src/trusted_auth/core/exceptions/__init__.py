"""Exception hierarchy for trusted-auth."""

from .base import TrustedAuthError, create_error_response
from .auth import (
    AuthenticationError,
    UnsupportedIdentityMappingError,
    UserSynchronizationError,
    PersistenceStoreError,
    EncryptionError,
)
from .configuration import (
    ConfigurationError,
    InvalidDynamicRoleConfigurationError,
    InvalidValueFormatError,
    UnknownComponentError,
)
from .directory import DirectoryError, GroupQueryError, DocumentStoreError

__all__ = [
    "TrustedAuthError",
    "create_error_response",
    "AuthenticationError",
    "UnsupportedIdentityMappingError",
    "UserSynchronizationError",
    "PersistenceStoreError",
    "EncryptionError",
    "ConfigurationError",
    "InvalidDynamicRoleConfigurationError",
    "InvalidValueFormatError",
    "UnknownComponentError",
    "DirectoryError",
    "GroupQueryError",
    "DocumentStoreError",
]
