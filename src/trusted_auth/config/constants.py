"""Constants and enums for trusted-auth.

This module defines the configuration keys, their defaults and the wiki
class names used throughout the trusted-auth library.
"""

from enum import Enum
from typing import Final, FrozenSet


class CaseStyle(str, Enum):
    """Case folding applied to user names before building profile names."""
    
    LOWERCASE = "lowercase"
    UPPERCASE = "uppercase"
    TITLECASE = "titlecase"
    NONE = "none"


class PropertyPrefixes:
    """Prefixes of the two property layers."""
    
    PREFERENCE: Final[str] = "trustedauth"
    CONFIGURATION: Final[str] = "authentication.trusted"


class ConfigKeys:
    """Trusted authentication property names."""
    
    ADAPTER_HINT: Final[str] = "adapterHint"
    PERSISTENCE_STORE_HINT: Final[str] = "persistenceStoreHint"
    PERSISTENCE_STORE_TRUSTED: Final[str] = "isPersistenceStoreTrusted"
    PERSISTENCE_STORE_TRUSTED_ON_MISSING_AUTH: Final[str] = (
        "isPersistenceStoreTrustedOnMissingAuthentication"
    )
    PERSISTENCE_STORE_TTL: Final[str] = "persistenceStoreTTL"
    AUTHORITATIVE: Final[str] = "isAuthoritative"
    FALLBACK_AUTHENTICATOR: Final[str] = "fallbackAuthenticator"
    USER_PROFILE_CASE: Final[str] = "userProfileCase"
    USER_PROFILE_REPLACEMENTS: Final[str] = "userProfileReplacements"
    GROUPS_MAPPING: Final[str] = "groupsMapping"
    PROPERTIES_MAPPING: Final[str] = "propertiesMapping"
    ADD_GROUP_TO_FIELD_PREFIX: Final[str] = "addGroupToField."
    DYNAMIC_ROLE_CONFIGURATIONS: Final[str] = "dynamicRole.configurations"
    DYNAMIC_ROLE_CONFIGURATION_PREFIX: Final[str] = "dynamicRole.configuration."


class DynamicRoleKeys:
    """Per rule dynamic role property suffixes."""
    
    ROLE_PREFIX: Final[str] = "rolePrefix"
    ROLE_SUFFIX: Final[str] = "roleSuffix"
    ROLE_REGEX: Final[str] = "roleRegex"
    REPLACEMENT: Final[str] = "replacement"
    GROUP_PREFIX: Final[str] = "groupPrefix"
    GROUP_SUFFIX: Final[str] = "groupSuffix"
    AUTO_CREATE: Final[str] = "autocreate"


class AddGroupToFieldKeys:
    """Field provenance property suffixes."""
    
    PAGE: Final[str] = "page"
    CLASS_NAME: Final[str] = "className"
    OBJECT_NUMBER: Final[str] = "objectNumber"
    PROPERTY_NAME: Final[str] = "propertyName"
    SEPARATOR: Final[str] = "separator"
    VALUE_REGEX: Final[str] = "valueRegex"
    VALUE_FORMAT: Final[str] = "valueFormat"


class AdapterKeys:
    """Request field adapter property names."""
    
    AUTH_FIELD: Final[str] = "auth_field"
    ID_FIELD: Final[str] = "id_field"
    SECRET_FIELD: Final[str] = "secret_field"
    SECRET_VALUE: Final[str] = "secret_value"
    GROUP_FIELD: Final[str] = "group_field"
    GROUP_VALUE_SEPARATOR: Final[str] = "group_value_separator"
    LOGOUT_URL: Final[str] = "logout_url"
    HEADER_ENCODING: Final[str] = "header_encoding"
    ATTRIBUTE_ENCODING: Final[str] = "attribute_encoding"


class Defaults:
    """Default configuration values."""
    
    ADAPTER_HINT: Final[str] = "headers"
    PERSISTENCE_STORE_HINT: Final[str] = "session"
    PERSISTENCE_STORE_TTL: Final[int] = -1
    USER_PROFILE_CASE: Final[CaseStyle] = CaseStyle.LOWERCASE
    LIST_SEPARATOR: Final[str] = "|"
    AUTH_FIELD: Final[str] = "remote_user"
    GROUP_VALUE_SEPARATOR: Final[str] = r"\|"
    LOGOUT_REDIRECT_PLACEHOLDER: Final[str] = "__REDIRECT__"
    LOGOUT_PAGE_PATTERN: Final[str] = r"(/|/[^/]+/|/wiki/[^/]+/)logout/*"
    FIELD_SEPARATOR: Final[str] = "|"
    FIELD_VALUE_REGEX: Final[str] = r"^(?P<group>[^=]+)=[\s\S]*"
    FIELD_VALUE_FORMAT: Final[str] = "{group.fullName}={role}"
    COOKIE_NAME: Final[str] = "TRUSTEDAUTH"
    COOKIE_PATH: Final[str] = "/"


class WikiClasses:
    """Wiki classes and properties touched by the user directory."""
    
    USERS: Final[str] = "XWiki.XWikiUsers"
    GROUPS: Final[str] = "XWiki.XWikiGroups"
    GROUP_MEMBER: Final[str] = "member"
    USER_ACTIVE: Final[str] = "active"
    USER_FIELDS: Final[FrozenSet[str]] = frozenset({
        "first_name",
        "last_name",
        "email",
        "company",
        "phone",
        "address",
        "blog",
        "blogfeed",
        "comment",
        "imaccount",
        "imtype",
        "active",
        "avatar",
    })


class Comments:
    """Save comments written by the authenticator."""
    
    PROFILE_SYNC: Final[str] = "Trusted authenticator user profile synchronization"
    GROUP_SYNC: Final[str] = "Trusted authentication group synchronization"
    FIELD_PROVENANCE: Final[str] = "Add a new role/group from the trusted authenticator"
    USER_CREATION: Final[str] = "Trusted authenticator user creation"
