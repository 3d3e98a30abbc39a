"""Trusted authentication service with fallback."""

import logging
from typing import Any, Optional

from .authenticator import TrustedAuthenticator
from ..configuration import TrustedAuthConfiguration
from ..entities.protocols import FallbackAuthenticatorProtocol
from ..entities.request import AuthRequest
from ....core.value_objects.references import Principal

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class TrustedAuthService:
    """Authenticates requests with the trusted authenticator, then the fallback.
    
    When the trusted authenticator finds no user and the configuration is not
    authoritative, the configured fallback authenticator gets a chance.
    """
    
    def __init__(
        self,
        authenticator: TrustedAuthenticator,
        configuration: TrustedAuthConfiguration,
        fallback: Optional[FallbackAuthenticatorProtocol] = _UNSET,
    ):
        self.authenticator = authenticator
        self.configuration = configuration
        self._fallback = fallback
    
    @property
    def fallback(self) -> Optional[FallbackAuthenticatorProtocol]:
        if self._fallback is _UNSET:
            self._fallback = self.configuration.get_fallback_authenticator()
        return self._fallback
    
    def check_auth(self, request: AuthRequest) -> Optional[Principal]:
        """Get the principal of the request, or None for public access."""
        user = self.authenticator.authenticate(request)
        if user is not None:
            return user.serialize()
        
        if self.configuration.is_authoritative():
            logger.debug("Trusted authentication is authoritative, no fallback.")
            return None
        
        fallback = self.fallback
        if fallback is None:
            return None
        
        logger.debug(f"Falling back to [{type(fallback).__name__}]")
        return fallback.check_auth(request)
