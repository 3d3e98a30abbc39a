"""Protocol interfaces for the trusted auth feature."""

from abc import abstractmethod
from typing import Optional, Protocol, Set, runtime_checkable

from ....core.value_objects.references import DocumentReference, Principal
from .request import AuthRequest


@runtime_checkable
class IdentityAdapterProtocol(Protocol):
    """Protocol for the source of trusted identity facts."""
    
    @abstractmethod
    def get_user_uid(self, request: AuthRequest) -> Optional[str]:
        """Get the unique id of the authenticated user, blank or None when absent."""
        ...
    
    @abstractmethod
    def get_user_name(self, request: AuthRequest) -> Optional[str]:
        """Get the user name used to build the profile name."""
        ...
    
    @abstractmethod
    def get_user_property(self, request: AuthRequest, name: str) -> Optional[str]:
        """Get an extended user property."""
        ...
    
    @abstractmethod
    def is_user_in_role(self, request: AuthRequest, role: str) -> bool:
        """Check whether the user holds ``role``."""
        ...
    
    @abstractmethod
    def get_user_roles(self, request: AuthRequest) -> Optional[Set[str]]:
        """Get every role of the user, None on failure."""
        ...
    
    @abstractmethod
    def get_logout_url(self, request: AuthRequest, location: str) -> Optional[str]:
        """Get the external logout URL redirecting back to ``location``, if any."""
        ...


@runtime_checkable
class PersistenceStoreProtocol(Protocol):
    """Protocol for the cache of the last authenticated principal."""
    
    @abstractmethod
    def store(self, request: AuthRequest, principal: Principal) -> None:
        """Remember ``principal`` for the following requests."""
        ...
    
    @abstractmethod
    def retrieve(self, request: AuthRequest) -> Optional[Principal]:
        """Get the remembered principal, if any."""
        ...
    
    @abstractmethod
    def clear(self, request: AuthRequest) -> None:
        """Forget the remembered principal."""
        ...


@runtime_checkable
class FallbackAuthenticatorProtocol(Protocol):
    """Protocol for the authenticator used when no trusted identity is found."""
    
    @abstractmethod
    def check_auth(self, request: AuthRequest) -> Optional[Principal]:
        """Authenticate the request by other means."""
        ...


@runtime_checkable
class AuthenticationListener(Protocol):
    """Callable notified after a user was authenticated and synchronized."""
    
    def __call__(self, user: DocumentReference) -> None:
        ...
