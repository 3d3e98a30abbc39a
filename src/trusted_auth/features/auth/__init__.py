"""Auth feature module - trusted header/attribute authentication.

An authenticating reverse proxy or SSO layer asserts who the user is through
request headers or attributes. This module maps that identity onto local
user profiles and group memberships:

- Identity adapters reading headers or request attributes
- Session or encrypted cookie persistence of the authenticated user
- Static group mappings and dynamic role rules deriving groups from roles
- Field provenance records for auto-created groups
- FastAPI middleware exposing the user as ``request.state.trusted_user``

Usage Example:
```python
from trusted_auth.features.auth import (
    create_trusted_auth_service_factory,
    configure_trusted_auth_middleware,
)

factory = create_trusted_auth_service_factory(document_store=my_document_store)
configure_trusted_auth_middleware(app, factory.get_service())

@router.get("/whoami")
async def whoami(request: Request):
    return {"user": request.state.trusted_user}
```
"""

# Entities
from .entities import (
    AddGroupToFieldConfiguration,
    AuthRequest,
    DynamicRoleConfiguration,
    GroupDelta,
    ResponseCookie,
    ValueTemplate,
)

# Protocol interfaces
from .entities.protocols import (
    AuthenticationListener,
    FallbackAuthenticatorProtocol,
    IdentityAdapterProtocol,
    PersistenceStoreProtocol,
)

# Configuration
from .configuration import TrustedAuthConfiguration

# Adapters and persistence stores
from .adapters import AttributesTrustedAuthAdapter, HeadersTrustedAuthAdapter
from .persistence import (
    CookieAuthenticationPersistenceStore,
    PrincipalEncryption,
    SessionAuthenticationPersistenceStore,
)

# Services
from .services import (
    FieldProvenanceBatch,
    RequestMatcher,
    TrustedAuthenticator,
    TrustedAuthService,
    normalize_user_name,
)

# FastAPI integration
from .middleware import TrustedAuthMiddleware, configure_trusted_auth_middleware

from .factory import TrustedAuthServiceFactory, create_trusted_auth_service_factory

__all__ = [
    "AddGroupToFieldConfiguration",
    "AuthRequest",
    "DynamicRoleConfiguration",
    "GroupDelta",
    "ResponseCookie",
    "ValueTemplate",
    "AuthenticationListener",
    "FallbackAuthenticatorProtocol",
    "IdentityAdapterProtocol",
    "PersistenceStoreProtocol",
    "TrustedAuthConfiguration",
    "AttributesTrustedAuthAdapter",
    "HeadersTrustedAuthAdapter",
    "CookieAuthenticationPersistenceStore",
    "PrincipalEncryption",
    "SessionAuthenticationPersistenceStore",
    "FieldProvenanceBatch",
    "RequestMatcher",
    "TrustedAuthenticator",
    "TrustedAuthService",
    "normalize_user_name",
    "TrustedAuthMiddleware",
    "configure_trusted_auth_middleware",
    "TrustedAuthServiceFactory",
    "create_trusted_auth_service_factory",
]
