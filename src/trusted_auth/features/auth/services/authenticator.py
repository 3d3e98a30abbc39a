"""Trusted authentication reconciliation.

One call to :meth:`TrustedAuthenticator.authenticate` per request decides
which local user the request belongs to:

1. A user cached in a trusted persistence store is returned right away.
2. Otherwise the adapter is asked for the user uid. Without one, the cached
   user is either kept (trusted on missing authentication) or forgotten.
3. The user name is normalized into a profile reference. When it matches the
   cached user nothing is synchronized.
4. Otherwise the profile is created or updated, group memberships are
   synchronized from static mappings and dynamic role rules, and the user is
   cached and announced to listeners.

Logout requests additionally clear the persistence store and install the
external logout redirection, whatever the outcome.
"""

import logging
from typing import Dict, Iterable, List, Optional, Set

from .field_recorder import FieldProvenanceBatch
from .naming import normalize_user_name
from .request_matcher import RequestMatcher
from ..configuration import TrustedAuthConfiguration
from ..entities.dynamic_role import DynamicRoleConfiguration
from ..entities.group_delta import GroupDelta
from ..entities.protocols import (
    AuthenticationListener,
    IdentityAdapterProtocol,
    PersistenceStoreProtocol,
)
from ..entities.request import AuthRequest
from ...users.entities.protocols import DocumentStoreProtocol, UserDirectoryProtocol
from ....config.constants import Comments
from ....core.exceptions import DirectoryError, GroupQueryError, UnsupportedIdentityMappingError
from ....core.value_objects.references import DocumentReference, Principal

logger = logging.getLogger(__name__)


class TrustedAuthenticator:
    """Maps the identity asserted by a trusted upstream onto local users and groups."""
    
    def __init__(
        self,
        configuration: TrustedAuthConfiguration,
        adapter: IdentityAdapterProtocol,
        persistence_store: PersistenceStoreProtocol,
        user_manager: UserDirectoryProtocol,
        document_store: DocumentStoreProtocol,
        listeners: Optional[Iterable[AuthenticationListener]] = None,
    ):
        self.configuration = configuration
        self.adapter = adapter
        self.persistence_store = persistence_store
        self.user_manager = user_manager
        self.document_store = document_store
        self.listeners: List[AuthenticationListener] = list(listeners or [])
        
        # Lazily initialized
        self._group_mappings: Optional[Dict[DocumentReference, Set[str]]] = None
        self._logout_matcher: Optional[RequestMatcher] = None
    
    def add_listener(self, listener: AuthenticationListener) -> None:
        self.listeners.append(listener)
    
    def authenticate(self, request: AuthRequest) -> Optional[DocumentReference]:
        """Authenticate a request.
        
        Returns:
            The user profile reference, or None for public access
            
        Raises:
            UnsupportedIdentityMappingError: When the adapter reports a user
                name that is blank or differs from the uid
        """
        logger.debug("Starting trusted authentication...")
        try:
            return self._authenticate_from_store(request, self.persistence_store.retrieve(request))
        finally:
            if self.is_logout_request(request):
                self._wrap_response_for_logout_redirection(request)
                self.persistence_store.clear(request)
    
    def _authenticate_from_store(
        self, request: AuthRequest, current_user: Optional[Principal]
    ) -> Optional[DocumentReference]:
        if self.configuration.is_persistence_store_trusted() and current_user is not None:
            logger.debug(f"User [{current_user}] authenticated from trusted persistence store.")
            return self.resolve_principal(current_user)
        
        return self._authenticate_uid(request, current_user, self.adapter.get_user_uid(request))
    
    def _authenticate_uid(
        self, request: AuthRequest, previous_user: Optional[Principal], user_uid: Optional[str]
    ) -> Optional[DocumentReference]:
        # Some upstreams send an empty value rather than no value at all
        if not user_uid or not user_uid.strip():
            logger.debug("No user available from trusted authenticator.")
            if previous_user is not None:
                if self.configuration.is_persistence_store_trusted_on_missing_authentication():
                    logger.debug(
                        f"User [{previous_user}] authenticated from 'trusted on missing authentication' "
                        "persistence store."
                    )
                    return self.resolve_principal(previous_user)
                logger.debug(f"Clearing persistence store, removing [{previous_user}].")
                self.persistence_store.clear(request)
            logger.debug("Trusted authentication ended with public access.")
            return None
        
        logger.debug(f"User [{user_uid}] retrieved from the authentication adapter.")
        return self._authenticate_profile(
            request, previous_user, self.get_user_profile_reference(request, user_uid)
        )
    
    def _authenticate_profile(
        self, request: AuthRequest, previous_user: Optional[Principal], user_profile: DocumentReference
    ) -> Optional[DocumentReference]:
        authenticated_user = user_profile.serialize()
        
        if previous_user is not None:
            logger.debug(f"User [{previous_user}] retrieved from untrusted persistence store.")
            if authenticated_user == previous_user:
                logger.debug(f"User [{user_profile}] authenticated from the authentication adapter, no synchronization.")
                return user_profile
            logger.debug(f"Authentication changed, clearing persistence store, removing [{previous_user}].")
            self.persistence_store.clear(request)
        
        if not self.synchronize_user(request, user_profile):
            logger.error(f"Unable to synchronize user profile for user [{authenticated_user}], ended with public access.")
            return None
        
        self.persistence_store.store(request, authenticated_user)
        logger.debug(f"User [{authenticated_user}] authenticated from the authentication adapter and saved to persistence store.")
        
        self._notify_listeners(user_profile)
        return user_profile
    
    def get_user_profile_reference(self, request: AuthRequest, user_uid: str) -> DocumentReference:
        """Build the profile reference of the user reported by the adapter."""
        user_name = self.adapter.get_user_name(request)
        if not user_name or not user_name.strip():
            raise UnsupportedIdentityMappingError(
                "Cannot work with an empty user name",
                details={"uid": user_uid},
            )
        if user_uid != user_name:
            raise UnsupportedIdentityMappingError(
                "Mapping a user uid to a different user name is not supported",
                details={"uid": user_uid, "name": user_name},
            )
        
        name = normalize_user_name(
            user_name,
            self.configuration.get_user_profile_case_style(),
            self.configuration.get_user_profile_replacements(),
        )
        return DocumentReference(self.configuration.main_wiki, (self.configuration.user_space,), name)
    
    def resolve_principal(self, principal: Principal) -> DocumentReference:
        return DocumentReference.resolve(principal, self.configuration.main_wiki, self.configuration.user_space)
    
    def resolve_group(self, group: str) -> DocumentReference:
        return DocumentReference.resolve(group, self.configuration.main_wiki, self.configuration.user_space)
    
    # Synchronization
    
    def synchronize_user(self, request: AuthRequest, user: DocumentReference) -> bool:
        """Create or update the user profile, then its groups."""
        extended_info = self.get_extended_information(request)
        
        try:
            exists = self.user_manager.exists(user)
            if not exists:
                logger.debug(f"Creating user [{user}]...")
                if not self.user_manager.create_user(user, extended_info):
                    return False
        except DirectoryError as e:
            logger.error(f"Failed to synchronize profile of user [{user}]: {e}")
            return False

        if exists and extended_info:
            self._update_user_properties(user, extended_info)

        return self.synchronize_groups(request, user)

    def _update_user_properties(self, user: DocumentReference, extended_info: Dict[str, str]) -> None:
        """Best effort: an existing profile stays usable when its update fails."""
        logger.debug(f"Synchronizing profile for user [{user}]...")
        try:
            synchronized = self.user_manager.synchronize_user_properties(user, extended_info, Comments.PROFILE_SYNC)
        except DirectoryError as e:
            logger.warning(f"Profile of user [{user}] could not be synchronized, keeping it as is: {e}")
            return
        if not synchronized:
            logger.warning(f"Profile of user [{user}] could not be synchronized, keeping it as is.")
    
    def get_extended_information(self, request: AuthRequest) -> Dict[str, str]:
        """Collect the mapped user properties reported by the adapter."""
        extended_info: Dict[str, str] = {}
        for field_name, property_name in self.configuration.get_user_property_mappings().items():
            value = self.adapter.get_user_property(request, property_name)
            if value and value.strip():
                extended_info[field_name] = value.strip()
        return extended_info
    
    def synchronize_groups(self, request: AuthRequest, user: DocumentReference) -> bool:
        delta = self.compute_group_delta(request, user)
        if delta is None:
            return False
        
        if not delta.is_empty():
            logger.debug(f"Synchronizing groups for user [{user}]...")
            synchronized = self.user_manager.synchronize_groups_membership(
                user,
                delta.groups_in,
                delta.groups_in_with_autocreate,
                delta.groups_out,
                Comments.GROUP_SYNC,
            )
            if not synchronized:
                logger.warning(f"Some group memberships of user [{user}] could not be synchronized.")
        
        return True
    
    def compute_group_delta(self, request: AuthRequest, user: DocumentReference) -> Optional[GroupDelta]:
        """Compute the group memberships to apply for ``user``.
        
        Returns:
            The delta, or None when the dynamic roles could not be evaluated
        """
        delta = GroupDelta()
        self._populate_groups_from_mappings(request, delta)
        
        configurations = self.configuration.get_dynamic_role_configurations()
        if configurations is None:
            logger.debug("Dynamic roles are disabled by an invalid configuration.")
        elif configurations:
            if not self._populate_groups_from_dynamic_roles(request, user, configurations, delta):
                return None
        
        return delta
    
    def get_group_mappings(self) -> Dict[DocumentReference, Set[str]]:
        if self._group_mappings is None:
            self._group_mappings = {
                self.resolve_group(group): roles
                for group, roles in self.configuration.get_group_mappings().items()
            }
        return self._group_mappings
    
    def _populate_groups_from_mappings(self, request: AuthRequest, delta: GroupDelta) -> None:
        for group, roles in self.get_group_mappings().items():
            is_member = any(self.adapter.is_user_in_role(request, role) for role in roles)
            delta.add_static(group, is_member)
    
    def _populate_groups_from_dynamic_roles(
        self,
        request: AuthRequest,
        user: DocumentReference,
        configurations: List[DynamicRoleConfiguration],
        delta: GroupDelta,
    ) -> bool:
        if not self._add_groups_from_dynamic_roles(request, configurations, delta):
            return False
        return self._remove_groups_from_dynamic_roles(user, configurations, delta)
    
    def _add_groups_from_dynamic_roles(
        self, request: AuthRequest, configurations: List[DynamicRoleConfiguration], delta: GroupDelta
    ) -> bool:
        roles = self.adapter.get_user_roles(request)
        logger.debug(f"Found roles: {roles}")
        if roles is None:
            logger.error("The authentication adapter failed to provide the user roles.")
            return False
        
        batch = FieldProvenanceBatch(self.document_store, self.configuration.main_wiki, self.configuration.user_space)
        
        for role in sorted(roles):
            configuration = next((conf for conf in configurations if conf.matches_role(role)), None)
            if configuration is None:
                logger.debug(f"Did not find any dynamic configuration for role [{role}]")
                continue
            
            group = self.resolve_group(configuration.group_name_for_role(role))
            logger.debug(f"Found group [{group}] for role [{role}] with configuration [{configuration.name}]")
            
            if not delta.add_dynamic(group, configuration.auto_create):
                logger.debug(f"Group [{group}] is mapped out statically and will not be added.")
                continue
            
            if configuration.auto_create:
                batch.add(group, role, configuration)
        
        batch.save()
        return True
    
    def _remove_groups_from_dynamic_roles(
        self, user: DocumentReference, configurations: List[DynamicRoleConfiguration], delta: GroupDelta
    ) -> bool:
        try:
            current_groups = self.user_manager.get_groups_for_member(user)
        except GroupQueryError as e:
            logger.error(f"Failed to get user groups [{user}]: {e}")
            return False
        
        logger.debug(f"User is in these groups: {current_groups}")
        
        user_space = self.configuration.user_space
        for group in delta.removal_candidates(current_groups):
            if any(conf.matches_group(group, user_space) for conf in configurations):
                delta.remove_dynamic(group)
        
        logger.debug(f"The user will be removed from these groups: {delta.groups_out}")
        return True
    
    # Logout
    
    def is_logout_request(self, request: AuthRequest) -> bool:
        if self._logout_matcher is None:
            self._logout_matcher = RequestMatcher(self.configuration.get_logout_page_pattern())
        return self._logout_matcher.match(request)
    
    def _wrap_response_for_logout_redirection(self, request: AuthRequest) -> None:
        if self.adapter.get_logout_url(request, None) is None:
            return
        
        logger.debug("Installing external logout redirection.")
        request.logout_rewriter = lambda location: self.adapter.get_logout_url(request, location)
    
    # Listeners
    
    def _notify_listeners(self, user: DocumentReference) -> None:
        for listener in self.listeners:
            try:
                listener(user)
            except Exception as e:
                logger.error(f"Authentication listener failed for user [{user}]: {e}")
