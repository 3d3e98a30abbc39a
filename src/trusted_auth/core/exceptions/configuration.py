"""Configuration exceptions for trusted-auth."""

from .base import TrustedAuthError


class ConfigurationError(TrustedAuthError):
    """Raised when there's a configuration issue."""
    pass


class InvalidDynamicRoleConfigurationError(ConfigurationError):
    """Raised when a dynamic role rule would match groups unsafely."""
    pass


class InvalidValueFormatError(ConfigurationError):
    """Raised when a field provenance value template cannot be parsed."""
    pass


class UnknownComponentError(ConfigurationError):
    """Raised when a configured adapter or store hint is not registered."""
    pass
