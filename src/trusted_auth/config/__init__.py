"""Configuration module for trusted-auth.

Typed settings, layered string properties, constants and logging.
"""

from .constants import (
    CaseStyle,
    PropertyPrefixes,
    ConfigKeys,
    DynamicRoleKeys,
    AddGroupToFieldKeys,
    AdapterKeys,
    Defaults,
    WikiClasses,
    Comments,
)

from .settings import TrustedAuthSettings, get_settings, read_properties_file
from .properties import PropertiesConfig, split_escaped

# Logging configuration
from .logging_config import (
    setup_logging,
    LogVerbosity,
    LogFormat,
    LoggingConfig,
)

__all__ = [
    "CaseStyle",
    "PropertyPrefixes",
    "ConfigKeys",
    "DynamicRoleKeys",
    "AddGroupToFieldKeys",
    "AdapterKeys",
    "Defaults",
    "WikiClasses",
    "Comments",
    "TrustedAuthSettings",
    "get_settings",
    "read_properties_file",
    "PropertiesConfig",
    "split_escaped",
    "setup_logging",
    "LogVerbosity",
    "LogFormat",
    "LoggingConfig",
]
