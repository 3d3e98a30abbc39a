"""Group sharding.

Very large groups are split into shard groups: a member of a sharded group is
stored in ``<group>-Shard<X>`` (same space), where ``X`` is the first hex digit
of the SHA-256 of the member's reference, and each shard is itself a member
of the original group.
"""

import hashlib
import logging
from typing import Collection, Mapping, Set

from ..entities.documents import WikiDocument
from ..entities.protocols import DocumentStoreProtocol, UserDirectoryProtocol
from ....config.constants import WikiClasses
from ....core.exceptions import DocumentStoreError
from ....core.value_objects.references import DocumentReference

logger = logging.getLogger(__name__)


class GroupShardingManager:
    """Maps sharded groups to the shard of a given user."""
    
    def __init__(
        self,
        document_store: DocumentStoreProtocol,
        sharded_groups: Collection[str],
        main_wiki: str,
    ):
        self.document_store = document_store
        self.sharded_groups = frozenset(sharded_groups)
        self.main_wiki = main_wiki
    
    def is_sharded(self, group: DocumentReference) -> bool:
        return group.name in self.sharded_groups
    
    def get_sharded_group_reference(
        self, group: DocumentReference, user: DocumentReference
    ) -> DocumentReference:
        """Get the shard of ``group`` holding ``user``, or ``group`` when it is not sharded."""
        if not self.is_sharded(group):
            return group
        
        digest = hashlib.sha256(user.compact(self.main_wiki).encode("utf-8")).hexdigest()
        return group.sibling(f"{group.name}-Shard{digest.upper()[0]}")
    
    def setup_group_shard(self, group: DocumentReference, shard: DocumentReference) -> None:
        """Make ``shard`` a member of ``group`` if it is not already one."""
        try:
            if shard in self.document_store.get_members(group):
                return
            
            document = self.document_store.get_document(group)
            self.add_group_shard(document, shard)
            self.document_store.save_document(document, f"Add shard [{shard.name}]")
            logger.info(f"Shard [{shard}] added to group [{group}]")
        except DocumentStoreError as e:
            logger.error(f"Failed to set up group shard for group [{group}] and shard [{shard}]: {e}")
    
    @staticmethod
    def add_group_shard(document: WikiDocument, shard: DocumentReference) -> None:
        group_object = document.new_object(WikiClasses.GROUPS)
        group_object.set(WikiClasses.GROUP_MEMBER, shard.compact(document.reference.wiki))


class ShardingUserManager(UserDirectoryProtocol):
    """User directory decorator storing sharded group memberships in shards."""
    
    def __init__(self, user_manager: UserDirectoryProtocol, sharding_manager: GroupShardingManager):
        self.user_manager = user_manager
        self.sharding_manager = sharding_manager
    
    def exists(self, user: DocumentReference) -> bool:
        return self.user_manager.exists(user)
    
    def create_user(self, user: DocumentReference, extended_info: Mapping[str, str]) -> bool:
        return self.user_manager.create_user(user, extended_info)
    
    def synchronize_user_properties(
        self, user: DocumentReference, extended_info: Mapping[str, str], comment: str
    ) -> bool:
        return self.user_manager.synchronize_user_properties(user, extended_info, comment)
    
    def get_groups_for_member(self, user: DocumentReference) -> Set[DocumentReference]:
        return self.user_manager.get_groups_for_member(user)
    
    def synchronize_groups_membership(
        self,
        user: DocumentReference,
        groups_in: Collection[DocumentReference],
        groups_in_with_autocreate: Collection[DocumentReference],
        groups_out: Collection[DocumentReference],
        comment: str,
    ) -> bool:
        sharded_in = {
            self.sharding_manager.get_sharded_group_reference(group, user) for group in groups_in
        }
        
        sharded_in_with_autocreate: Set[DocumentReference] = set()
        for group in groups_in_with_autocreate:
            shard = self.sharding_manager.get_sharded_group_reference(group, user)
            if shard != group:
                self.sharding_manager.setup_group_shard(group, shard)
            sharded_in_with_autocreate.add(shard)
        
        # The user also leaves the original group, in case it was joined before sharding
        sharded_out: Set[DocumentReference] = set()
        for group in groups_out:
            sharded_out.add(self.sharding_manager.get_sharded_group_reference(group, user))
            sharded_out.add(group)
        
        # Shards of kept groups show up as current groups and must not be left
        sharded_out -= sharded_in | sharded_in_with_autocreate
        
        return self.user_manager.synchronize_groups_membership(
            user, sharded_in, sharded_in_with_autocreate, sharded_out, comment
        )
    
    def add_to_group(
        self, user: DocumentReference, group: DocumentReference, comment: str, create: bool
    ) -> bool:
        return self.user_manager.add_to_group(user, group, comment, create)
    
    def remove_from_group(self, user: DocumentReference, group: DocumentReference, comment: str) -> bool:
        return self.user_manager.remove_from_group(user, group, comment)
