"""Shared logic of the adapters reading identity facts from request fields."""

import codecs
import logging
import re
from abc import abstractmethod
from typing import Any, Optional, Set
from urllib.parse import quote_plus

from ..entities.protocols import IdentityAdapterProtocol
from ..entities.request import AuthRequest
from ....config.constants import AdapterKeys, Defaults
from ....config.properties import PropertiesConfig

logger = logging.getLogger(__name__)

GROUP_FIELD_SEPARATOR = ","


class RequestFieldTrustedAuthAdapter(IdentityAdapterProtocol):
    """Base adapter reading identity facts from named request fields.
    
    Subclasses only say how to read a raw field and which property holds the
    charset used to re-decode its value.
    """
    
    # Property naming the charset of transported values
    encoding_key: str = ""
    # Kind of field, used in log messages
    field_kind: str = "field"
    
    def __init__(self, configuration: PropertiesConfig):
        self.configuration = configuration
    
    @abstractmethod
    def get_raw_field(self, request: AuthRequest, name: str) -> Optional[Any]:
        """Read a field from the request, without decoding."""
        ...
    
    def get_field(self, request: AuthRequest, name: Optional[str]) -> Optional[str]:
        """Read a field and re-decode it with the configured charset.
        
        Values are assumed to have been transported as ISO-8859-1. When the
        charset is unknown or decoding fails the raw value is returned.
        """
        if not name or not name.strip():
            return None
        
        value = self.get_raw_field(request, name)
        if value is None:
            return None
        if not isinstance(value, str):
            value = str(value)
        
        if value.strip():
            encoding = self.configuration.get_custom_property(self.encoding_key)
            if encoding and encoding.strip():
                value = self._decode(name, value, encoding.strip())
        
        return value
    
    def _decode(self, name: str, value: str, encoding: str) -> str:
        try:
            codecs.lookup(encoding)
        except LookupError:
            logger.debug(f"Unsupported charset [{encoding}] requested for decoding {self.field_kind}s.")
            return value
        
        try:
            return value.encode("iso-8859-1").decode(encoding)
        except UnicodeError as e:
            logger.debug(f"Failed to decode {self.field_kind} [{name}] using charset [{encoding}]: {e}")
            return value
    
    def get_user_uid(self, request: AuthRequest) -> Optional[str]:
        return self.get_field(
            request, self.configuration.get_custom_property(AdapterKeys.AUTH_FIELD, Defaults.AUTH_FIELD)
        )
    
    def get_user_name(self, request: AuthRequest) -> Optional[str]:
        return self.get_field(
            request, self.configuration.get_custom_property(AdapterKeys.ID_FIELD, Defaults.AUTH_FIELD)
        )
    
    def get_user_property(self, request: AuthRequest, name: str) -> Optional[str]:
        return self.get_field(request, name)
    
    def is_user_in_role(self, request: AuthRequest, role: str) -> bool:
        return role in self.get_user_roles(request)
    
    def get_user_roles(self, request: AuthRequest) -> Set[str]:
        """Collect the roles found in every configured group field."""
        group_fields = self.configuration.get_custom_property_as_list(
            AdapterKeys.GROUP_FIELD, GROUP_FIELD_SEPARATOR, None
        )
        
        roles: Set[str] = set()
        if not group_fields:
            return roles
        
        separator = self.configuration.get_custom_property(
            AdapterKeys.GROUP_VALUE_SEPARATOR, Defaults.GROUP_VALUE_SEPARATOR
        )
        for group_field in group_fields:
            value = self.get_field(request, group_field.strip())
            if value and value.strip():
                roles.update(role for role in re.split(separator, value) if role)
        
        return roles
    
    def get_logout_url(self, request: AuthRequest, location: Optional[str]) -> Optional[str]:
        """Build the external logout URL.
        
        The ``__REDIRECT__`` placeholder is replaced by the URL-encoded location.
        """
        logout_url = self.configuration.get_custom_property(AdapterKeys.LOGOUT_URL)
        if not logout_url or not logout_url.strip():
            return None
        
        if location is not None:
            logout_url = logout_url.replace(Defaults.LOGOUT_REDIRECT_PLACEHOLDER, quote_plus(location))
        return logout_url
