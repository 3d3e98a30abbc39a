"""Trusted auth entities."""

from .dynamic_role import DynamicRoleConfiguration
from .field_provenance import AddGroupToFieldConfiguration, ValueTemplate
from .group_delta import GroupDelta
from .protocols import (
    AuthenticationListener,
    FallbackAuthenticatorProtocol,
    IdentityAdapterProtocol,
    PersistenceStoreProtocol,
)
from .request import AuthRequest, ResponseCookie

__all__ = [
    "DynamicRoleConfiguration",
    "AddGroupToFieldConfiguration",
    "ValueTemplate",
    "GroupDelta",
    "AuthenticationListener",
    "FallbackAuthenticatorProtocol",
    "IdentityAdapterProtocol",
    "PersistenceStoreProtocol",
    "AuthRequest",
    "ResponseCookie",
]
