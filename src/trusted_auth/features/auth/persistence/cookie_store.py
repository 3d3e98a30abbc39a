"""Persistence store keeping the encrypted principal in a cookie."""

import logging
from typing import List, Optional, Sequence

from .encryption import PrincipalEncryption
from ..entities.protocols import PersistenceStoreProtocol
from ..entities.request import AuthRequest, ResponseCookie
from ....config.constants import Defaults
from ....core.exceptions import EncryptionError
from ....core.value_objects.references import Principal

logger = logging.getLogger(__name__)

COOKIE_DOT_PREFIX = "."


def conform_cookie_domain(domain: str) -> str:
    """Prefix a domain with a dot, as expected by RFC 2109."""
    if domain and not domain.startswith(COOKIE_DOT_PREFIX):
        return COOKIE_DOT_PREFIX + domain
    return domain


class CookieAuthenticationPersistenceStore(PersistenceStoreProtocol):
    """Stores the principal in an encrypted cookie.
    
    Cookies are queued on the request and written to the response by the
    HTTP middleware.
    """
    
    def __init__(
        self,
        encryption_key: Optional[str],
        cookie_prefix: str = "",
        cookie_path: str = Defaults.COOKIE_PATH,
        cookie_domains: Optional[Sequence[str]] = None,
        ttl: int = Defaults.PERSISTENCE_STORE_TTL,
    ):
        self.encryption = PrincipalEncryption(encryption_key)
        self.cookie_name = f"{cookie_prefix}{Defaults.COOKIE_NAME}"
        self.cookie_path = cookie_path or Defaults.COOKIE_PATH
        self.cookie_domains: List[str] = [
            conform_cookie_domain(domain.strip()) for domain in (cookie_domains or []) if domain.strip()
        ]
        self.ttl = ttl
    
    def store(self, request: AuthRequest, principal: Principal) -> None:
        self._set_cookie(request, self.encryption.encrypt(principal), self.ttl)
    
    def retrieve(self, request: AuthRequest) -> Optional[Principal]:
        value = request.get_cookie(self.cookie_name)
        if not value:
            return None
        
        try:
            return self.encryption.decrypt(value, ttl=self.ttl if self.ttl > 0 else None)
        except EncryptionError:
            logger.warning(f"Ignoring invalid or expired authentication cookie [{self.cookie_name}]")
            return None
    
    def clear(self, request: AuthRequest) -> None:
        self._set_cookie(request, "", 0)
    
    def get_cookie_domain(self, request: AuthRequest) -> Optional[str]:
        """Get the first configured domain the server name belongs to."""
        if not self.cookie_domains:
            return None
        
        # Conform the server name too so that both example.com and
        # www.example.com match the .example.com domain
        server_name = conform_cookie_domain(request.server_name)
        for domain in self.cookie_domains:
            if server_name.endswith(domain):
                logger.debug(f"Cookie domain is: {domain}")
                return domain
        return None
    
    def _set_cookie(self, request: AuthRequest, value: str, max_age: int) -> None:
        request.add_cookie(
            ResponseCookie(
                key=self.cookie_name,
                value=value,
                max_age=max_age if max_age >= 0 else None,
                path=self.cookie_path,
                domain=self.get_cookie_domain(request),
                secure=request.is_secure,
            )
        )
