"""User profile and group membership management on top of a document store."""

import logging
from typing import Collection, Dict, Mapping, Optional, Set

from ..entities.protocols import DocumentStoreProtocol, UserDirectoryProtocol
from ....config.constants import Comments, WikiClasses
from ....core.exceptions import DocumentStoreError, GroupQueryError
from ....core.value_objects.references import DocumentReference

logger = logging.getLogger(__name__)


class DefaultUserManager(UserDirectoryProtocol):
    """User directory storing profiles and groups as wiki documents.
    
    A user profile is a document holding a ``XWiki.XWikiUsers`` object. A group
    is a document holding one ``XWiki.XWikiGroups`` object per member, the
    ``member`` property being the user reference serialized relative to the
    wiki of the group.
    """
    
    def __init__(
        self,
        document_store: DocumentStoreProtocol,
        user_fields: Optional[Collection[str]] = None,
    ):
        self.document_store = document_store
        self.user_fields = frozenset(user_fields) if user_fields is not None else WikiClasses.USER_FIELDS
    
    def exists(self, user: DocumentReference) -> bool:
        return self.document_store.exists(user)
    
    def create_user(self, user: DocumentReference, extended_info: Mapping[str, str]) -> bool:
        """Create a user profile, active unless told otherwise."""
        logger.debug(f"Creating new user [{user}]")
        
        extended: Dict[str, str] = dict(extended_info or {})
        if extended.get(WikiClasses.USER_ACTIVE) is None:
            extended[WikiClasses.USER_ACTIVE] = "1"
        
        try:
            document = self.document_store.get_document(user)
            if not document.is_new:
                logger.error(f"Failed to create user [{user}]: the profile already exists")
                return False
            
            user_object = document.new_object(WikiClasses.USERS)
            for key, value in extended.items():
                if key not in self.user_fields:
                    logger.warning(f"User property [{key}] does not exist in user profile and will be ignored")
                    continue
                user_object.set(key, value)
            
            self.document_store.save_document(document, Comments.USER_CREATION)
        except DocumentStoreError as e:
            logger.error(f"Failed to create user [{user}]: {e}")
            return False
        
        return True
    
    def synchronize_user_properties(
        self, user: DocumentReference, extended_info: Mapping[str, str], comment: str
    ) -> bool:
        """Update the known profile fields whose value changed, with a single save."""
        try:
            document = self.document_store.get_document(user)
            if document.is_new:
                logger.error(f"User [{user}] does not exist and will not be synchronized")
                return False
            
            user_object = document.get_first_object_of_class(WikiClasses.USERS)
            if user_object is None:
                user_object = document.new_object(WikiClasses.USERS)
            
            changed: Dict[str, str] = {}
            for key, value in extended_info.items():
                if key not in self.user_fields:
                    logger.warning(f"User property [{key}] does not exist in user profile and will not be synchronized")
                    continue
                if user_object.get(key) != value:
                    changed[key] = value
            
            if changed:
                for key, value in changed.items():
                    user_object.set(key, value)
                self.document_store.save_document(document, comment)
                logger.debug(f"Synchronized properties {sorted(changed)} of user [{user}]")
        except DocumentStoreError as e:
            logger.error(f"Failed to synchronize profile properties for user [{user}]: {e}")
            return False
        
        return True
    
    def get_groups_for_member(self, user: DocumentReference) -> Set[DocumentReference]:
        try:
            return set(self.document_store.get_all_groups_for_member(user))
        except GroupQueryError:
            raise
        except DocumentStoreError as e:
            raise GroupQueryError(
                f"Failed to list groups of user [{user}]: {e}",
                details={"user": str(user)},
            ) from e
    
    def synchronize_groups_membership(
        self,
        user: DocumentReference,
        groups_in: Collection[DocumentReference],
        groups_in_with_autocreate: Collection[DocumentReference],
        groups_out: Collection[DocumentReference],
        comment: str,
    ) -> bool:
        """Apply a membership delta against the current groups of the user.
        
        Only groups the user is not yet in are joined, only groups the user is
        currently in are left, and only auto-create groups may be created.
        """
        logger.debug(f"Groups the user should be a member of: {groups_in}, with auto-creation: {groups_in_with_autocreate}")
        logger.debug(f"Groups the user should not be a member of: {groups_out}")
        
        try:
            current_groups = self.get_groups_for_member(user)
        except GroupQueryError as e:
            logger.error(f"Failed to synchronize groups for user [{user}]: {e}")
            return False
        
        logger.debug(f"Groups the user is currently a member of: {current_groups}")
        
        success = True
        for group in groups_in:
            if group not in current_groups:
                success &= self.add_to_group(user, group, comment, False)
        for group in groups_in_with_autocreate:
            if group not in current_groups:
                success &= self.add_to_group(user, group, comment, True)
        for group in groups_out:
            if group in current_groups:
                success &= self.remove_from_group(user, group, comment)
        
        return success
    
    def add_to_group(
        self, user: DocumentReference, group: DocumentReference, comment: str, create: bool
    ) -> bool:
        member = user.compact(group.wiki)
        
        try:
            document = self.document_store.get_document(group)
            if document.is_new:
                if not create:
                    logger.error(f"User [{user}] cannot be added to unknown group [{group}]")
                    return False
                logger.debug(f"Group [{group}] created to be able to add user [{user}]")
            
            if document.find_object(WikiClasses.GROUPS, WikiClasses.GROUP_MEMBER, member) is None:
                member_object = document.new_object(WikiClasses.GROUPS)
                member_object.set(WikiClasses.GROUP_MEMBER, member)
                self.document_store.save_document(document, comment)
                logger.debug(f"User [{user}] added to group [{group}]")
        except DocumentStoreError as e:
            logger.error(f"Failed to add user [{user}] to group [{group}]: {e}")
            return False
        
        return True
    
    def remove_from_group(self, user: DocumentReference, group: DocumentReference, comment: str) -> bool:
        member = user.compact(group.wiki)
        
        try:
            document = self.document_store.get_document(group)
            if document.is_new:
                logger.warning(f"User [{user}] cannot be removed from unknown group [{group}]")
                return False
            
            member_object = document.find_object(WikiClasses.GROUPS, WikiClasses.GROUP_MEMBER, member)
            if member_object is not None:
                document.remove_object(member_object)
                self.document_store.save_document(document, comment)
                logger.debug(f"User [{user}] removed from group [{group}]")
        except DocumentStoreError as e:
            logger.error(f"Failed to remove user [{user}] from group [{group}]: {e}")
            return False
        
        return True
