"""Trusted-auth - trusted header/attribute authentication bridge.

Trusts an upstream reverse proxy or SSO layer to assert the user identity,
then maps it onto local user profiles and group memberships.
"""

# Initialize logging configuration on import
from .config.logging_config import setup_logging
setup_logging()

from .__version__ import __version__

from .config import (
    CaseStyle,
    TrustedAuthSettings,
    get_settings,
)

from .core.exceptions import (
    # Base Exception
    TrustedAuthError,
    
    # Common Exceptions
    ConfigurationError,
    AuthenticationError,
    UnsupportedIdentityMappingError,
    DirectoryError,
    PersistenceStoreError,
    
    # Utility Functions
    create_error_response,
)

from .core.value_objects import DocumentReference, Principal

from .features.auth import (
    AuthRequest,
    TrustedAuthConfiguration,
    TrustedAuthenticator,
    TrustedAuthService,
    TrustedAuthServiceFactory,
    configure_trusted_auth_middleware,
    create_trusted_auth_service_factory,
)

from .features.users import (
    DefaultUserManager,
    InMemoryDocumentStore,
    ShardingUserManager,
)

__all__ = [
    "__version__",
    "CaseStyle",
    "TrustedAuthSettings",
    "get_settings",
    "TrustedAuthError",
    "ConfigurationError",
    "AuthenticationError",
    "UnsupportedIdentityMappingError",
    "DirectoryError",
    "PersistenceStoreError",
    "create_error_response",
    "DocumentReference",
    "Principal",
    "AuthRequest",
    "TrustedAuthConfiguration",
    "TrustedAuthenticator",
    "TrustedAuthService",
    "TrustedAuthServiceFactory",
    "configure_trusted_auth_middleware",
    "create_trusted_auth_service_factory",
    "DefaultUserManager",
    "InMemoryDocumentStore",
    "ShardingUserManager",
]
