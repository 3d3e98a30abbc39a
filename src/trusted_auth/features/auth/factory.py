"""Factory wiring the trusted authentication components together."""

import logging
from typing import Dict, Iterable, List, Optional, Type

from .adapters import AttributesTrustedAuthAdapter, HeadersTrustedAuthAdapter
from .adapters.base import RequestFieldTrustedAuthAdapter
from .configuration import TrustedAuthConfiguration
from .entities.protocols import (
    AuthenticationListener,
    IdentityAdapterProtocol,
    PersistenceStoreProtocol,
)
from .persistence import CookieAuthenticationPersistenceStore, SessionAuthenticationPersistenceStore
from .services.auth_service import TrustedAuthService
from .services.authenticator import TrustedAuthenticator
from ..users.entities.protocols import DocumentStoreProtocol, UserDirectoryProtocol
from ..users.repositories.document_store import InMemoryDocumentStore
from ..users.services.sharding import GroupShardingManager, ShardingUserManager
from ..users.services.user_manager import DefaultUserManager
from ...config.settings import TrustedAuthSettings, get_settings
from ...core.exceptions import UnknownComponentError

logger = logging.getLogger(__name__)

SESSION_STORE_HINT = "session"
COOKIE_STORE_HINT = "cookie"


class TrustedAuthServiceFactory:
    """Factory for creating and configuring trusted auth services."""
    
    ADAPTERS: Dict[str, Type[RequestFieldTrustedAuthAdapter]] = {
        "headers": HeadersTrustedAuthAdapter,
        "attributes": AttributesTrustedAuthAdapter,
    }
    
    PERSISTENCE_STORES = (SESSION_STORE_HINT, COOKIE_STORE_HINT)
    
    def __init__(
        self,
        settings: Optional[TrustedAuthSettings] = None,
        document_store: Optional[DocumentStoreProtocol] = None,
        listeners: Optional[Iterable[AuthenticationListener]] = None,
    ):
        """Initialize trusted auth service factory."""
        self.settings = settings or get_settings()
        self.listeners: List[AuthenticationListener] = list(listeners or [])
        
        # Lazy-initialized services
        self._document_store = document_store
        self._configuration: Optional[TrustedAuthConfiguration] = None
        self._adapter: Optional[IdentityAdapterProtocol] = None
        self._persistence_store: Optional[PersistenceStoreProtocol] = None
        self._user_manager: Optional[UserDirectoryProtocol] = None
        self._authenticator: Optional[TrustedAuthenticator] = None
        self._service: Optional[TrustedAuthService] = None
    
    def get_configuration(self) -> TrustedAuthConfiguration:
        """Get or create the trusted auth configuration."""
        if not self._configuration:
            self._configuration = TrustedAuthConfiguration(self.settings)
        return self._configuration
    
    def get_document_store(self) -> DocumentStoreProtocol:
        """Get or create the document store, in memory unless one was provided."""
        if not self._document_store:
            logger.warning("No document store provided, using an in-memory document store")
            self._document_store = InMemoryDocumentStore()
        return self._document_store
    
    def get_adapter(self) -> IdentityAdapterProtocol:
        """Get or create the identity adapter selected by the adapter hint."""
        if not self._adapter:
            configuration = self.get_configuration()
            hint = configuration.get_adapter_hint()
            adapter_class = self.ADAPTERS.get(hint)
            if adapter_class is None:
                raise UnknownComponentError(
                    f"Failed to load authentication adapter [{hint}]",
                    details={"hint": hint, "available": sorted(self.ADAPTERS)},
                )
            self._adapter = adapter_class(configuration)
        return self._adapter
    
    def get_persistence_store(self) -> PersistenceStoreProtocol:
        """Get or create the persistence store selected by the store hint."""
        if not self._persistence_store:
            configuration = self.get_configuration()
            hint = configuration.get_persistence_store_hint()
            if hint == SESSION_STORE_HINT:
                self._persistence_store = SessionAuthenticationPersistenceStore()
            elif hint == COOKIE_STORE_HINT:
                encryption_key = self.settings.encryption_key
                self._persistence_store = CookieAuthenticationPersistenceStore(
                    encryption_key=encryption_key.get_secret_value() if encryption_key else None,
                    cookie_prefix=self.settings.cookie_prefix,
                    cookie_path=self.settings.cookie_path,
                    cookie_domains=self.settings.cookie_domains,
                    ttl=configuration.get_persistence_ttl(),
                )
            else:
                raise UnknownComponentError(
                    f"Failed to load persistence store [{hint}]",
                    details={"hint": hint, "available": list(self.PERSISTENCE_STORES)},
                )
        return self._persistence_store
    
    def get_user_manager(self) -> UserDirectoryProtocol:
        """Get or create the user manager, sharding groups when configured."""
        if not self._user_manager:
            configuration = self.get_configuration()
            document_store = self.get_document_store()
            user_manager: UserDirectoryProtocol = DefaultUserManager(document_store)
            
            sharded_groups = configuration.get_sharded_groups()
            if sharded_groups:
                user_manager = ShardingUserManager(
                    user_manager,
                    GroupShardingManager(document_store, sharded_groups, configuration.main_wiki),
                )
            self._user_manager = user_manager
        return self._user_manager
    
    def get_authenticator(self) -> TrustedAuthenticator:
        """Get or create the trusted authenticator."""
        if not self._authenticator:
            self._authenticator = TrustedAuthenticator(
                configuration=self.get_configuration(),
                adapter=self.get_adapter(),
                persistence_store=self.get_persistence_store(),
                user_manager=self.get_user_manager(),
                document_store=self.get_document_store(),
                listeners=self.listeners,
            )
        return self._authenticator
    
    def get_service(self) -> TrustedAuthService:
        """Get or create the trusted auth service."""
        if not self._service:
            self._service = TrustedAuthService(
                authenticator=self.get_authenticator(),
                configuration=self.get_configuration(),
            )
        return self._service


def create_trusted_auth_service_factory(
    settings: Optional[TrustedAuthSettings] = None,
    document_store: Optional[DocumentStoreProtocol] = None,
    listeners: Optional[Iterable[AuthenticationListener]] = None,
) -> TrustedAuthServiceFactory:
    """Create configured trusted auth service factory.
    
    Args:
        settings: Trusted auth settings, read from the environment when omitted
        document_store: Wiki document store (optional)
        listeners: Callables notified after each synchronized authentication
    
    Returns:
        Configured TrustedAuthServiceFactory instance
    """
    return TrustedAuthServiceFactory(
        settings=settings,
        document_store=document_store,
        listeners=listeners,
    )
