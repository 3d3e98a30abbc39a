"""Trusted authentication configuration.

Reads the trusted authentication properties (runtime preferences first,
then static configuration) and exposes them as typed values.
"""

import importlib
import re
import logging
from typing import Any, Dict, List, Optional, Set

from .entities.dynamic_role import DynamicRoleConfiguration
from .entities.field_provenance import AddGroupToFieldConfiguration
from ...config.constants import (
    CaseStyle,
    ConfigKeys,
    Defaults,
    DynamicRoleKeys,
    PropertyPrefixes,
)
from ...config.properties import PropertiesConfig
from ...config.settings import TrustedAuthSettings, get_settings
from ...core.exceptions import ConfigurationError, InvalidDynamicRoleConfigurationError

logger = logging.getLogger(__name__)

_UNSET = object()


class TrustedAuthConfiguration(PropertiesConfig):
    """Typed view over the trusted authentication properties."""
    
    def __init__(self, settings: Optional[TrustedAuthSettings] = None):
        self.settings = settings or get_settings()
        super().__init__(
            properties=self.settings.load_properties(),
            preferences=self.settings.preferences,
            preference_prefix=PropertyPrefixes.PREFERENCE,
            configuration_prefix=PropertyPrefixes.CONFIGURATION,
        )
        self._dynamic_role_configurations: Any = _UNSET
    
    # Components
    
    def get_adapter_hint(self) -> str:
        return self.get_custom_property(ConfigKeys.ADAPTER_HINT, Defaults.ADAPTER_HINT)
    
    def get_persistence_store_hint(self) -> str:
        return self.get_custom_property(ConfigKeys.PERSISTENCE_STORE_HINT, Defaults.PERSISTENCE_STORE_HINT)
    
    # Persistence store
    
    def is_persistence_store_trusted(self) -> bool:
        return self.get_custom_property_as_boolean(ConfigKeys.PERSISTENCE_STORE_TRUSTED, False)
    
    def is_persistence_store_trusted_on_missing_authentication(self) -> bool:
        return self.get_custom_property_as_boolean(ConfigKeys.PERSISTENCE_STORE_TRUSTED_ON_MISSING_AUTH, False)
    
    def get_persistence_ttl(self) -> int:
        """Cookie lifetime in seconds, -1 for a session cookie."""
        ttl = self.get_custom_property(ConfigKeys.PERSISTENCE_STORE_TTL)
        if ttl is not None:
            try:
                return int(ttl.strip())
            except ValueError:
                logger.warning(f"Ignoring invalid persistence store TTL [{ttl}]")
        return Defaults.PERSISTENCE_STORE_TTL
    
    # User profile
    
    def get_user_profile_case_style(self) -> CaseStyle:
        value = self.get_custom_property(ConfigKeys.USER_PROFILE_CASE)
        if value:
            try:
                return CaseStyle(value.strip().lower())
            except ValueError:
                logger.warning(f"Unknown user profile case [{value}], using {Defaults.USER_PROFILE_CASE.value}")
        return Defaults.USER_PROFILE_CASE
    
    def get_user_profile_replacements(self) -> Dict[str, str]:
        """Literal replacements applied to user names, in configuration order."""
        return self.get_custom_property_as_map(
            ConfigKeys.USER_PROFILE_REPLACEMENTS, Defaults.LIST_SEPARATOR, {}
        )
    
    def get_user_property_mappings(self) -> Dict[str, str]:
        """Mapping of user profile field to adapter property name."""
        return self.get_custom_property_as_map(ConfigKeys.PROPERTIES_MAPPING, Defaults.LIST_SEPARATOR, {})
    
    def get_group_mappings(self) -> Dict[str, Set[str]]:
        """Mapping of group name to the roles granting membership."""
        return self.get_custom_property_as_map_of_set(ConfigKeys.GROUPS_MAPPING, Defaults.LIST_SEPARATOR, {})
    
    # Fallback
    
    def is_authoritative(self) -> bool:
        return self.get_custom_property_as_boolean(ConfigKeys.AUTHORITATIVE, False)
    
    def get_fallback_authenticator(self) -> Optional[Any]:
        """Instantiate the configured fallback authenticator.
        
        The property is either ``package.module:Class`` or ``package.module.Class``.
        """
        path = self.get_custom_property(ConfigKeys.FALLBACK_AUTHENTICATOR)
        if not path:
            return None
        
        module_name, sep, attribute = path.partition(":")
        if not sep:
            module_name, _, attribute = path.rpartition(".")
        
        try:
            authenticator_class = getattr(importlib.import_module(module_name), attribute)
            return authenticator_class()
        except (ImportError, AttributeError, TypeError, ValueError) as e:
            logger.error(f"Failed to get fallback authenticator [{path}]: {e}")
            return None
    
    # Wiki
    
    @property
    def main_wiki(self) -> str:
        return self.settings.main_wiki
    
    @property
    def user_space(self) -> str:
        return self.settings.user_space
    
    def get_logout_page_pattern(self) -> str:
        return self.settings.logout_page or Defaults.LOGOUT_PAGE_PATTERN
    
    def get_sharded_groups(self) -> List[str]:
        return list(self.settings.sharded_groups)
    
    # Dynamic roles
    
    def get_dynamic_role_configurations(self) -> Optional[List[DynamicRoleConfiguration]]:
        """Get the dynamic role rules, in evaluation order.
        
        The result is computed once. It is None when the rules are disabled:
        a rule without group prefix and suffix would match any group the user
        is in, and an invalid field provenance configuration cannot be applied
        safely.
        """
        if self._dynamic_role_configurations is _UNSET:
            try:
                self._dynamic_role_configurations = self._load_dynamic_role_configurations()
            except ConfigurationError as e:
                logger.error(
                    f"{e.message} To be safe, dynamic roles are disabled until the configuration is fixed."
                )
                self._dynamic_role_configurations = None
        return self._dynamic_role_configurations
    
    def _load_dynamic_role_configurations(self) -> List[DynamicRoleConfiguration]:
        names = self.get_custom_property_as_list(
            ConfigKeys.DYNAMIC_ROLE_CONFIGURATIONS, Defaults.LIST_SEPARATOR, []
        )
        if not names:
            return []
        
        global_field_conf = AddGroupToFieldConfiguration.parse(self, ConfigKeys.ADD_GROUP_TO_FIELD_PREFIX)
        
        configurations = []
        for name in names:
            configuration = self._load_dynamic_role_configuration(name, global_field_conf)
            if configuration.is_unsafe:
                raise InvalidDynamicRoleConfigurationError(
                    f"Dynamic role configuration [{name}] doesn't specify any group prefix or suffix.",
                    details={"configuration": name},
                )
            configurations.append(configuration)
        
        return configurations
    
    def _load_dynamic_role_configuration(
        self, name: str, global_field_conf: Optional[AddGroupToFieldConfiguration]
    ) -> DynamicRoleConfiguration:
        prefix = f"{ConfigKeys.DYNAMIC_ROLE_CONFIGURATION_PREFIX}{name}."
        
        def prop(key: str) -> str:
            return self.get_custom_property(prefix + key, "")
        
        field_conf = AddGroupToFieldConfiguration.parse(
            self, prefix + ConfigKeys.ADD_GROUP_TO_FIELD_PREFIX, global_field_conf
        )
        
        try:
            return DynamicRoleConfiguration(
                name=name,
                role_prefix=prop(DynamicRoleKeys.ROLE_PREFIX),
                role_suffix=prop(DynamicRoleKeys.ROLE_SUFFIX),
                role_regex=prop(DynamicRoleKeys.ROLE_REGEX),
                replacement=prop(DynamicRoleKeys.REPLACEMENT),
                group_prefix=prop(DynamicRoleKeys.GROUP_PREFIX),
                group_suffix=prop(DynamicRoleKeys.GROUP_SUFFIX),
                auto_create=self.get_custom_property_as_boolean(prefix + DynamicRoleKeys.AUTO_CREATE, True),
                add_group_to_field=field_conf,
            )
        except re.error as e:
            raise InvalidDynamicRoleConfigurationError(
                f"Dynamic role configuration [{name}] has an invalid role regex: {e}.",
                details={"configuration": name},
            ) from e
