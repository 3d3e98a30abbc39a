"""Protocol interfaces for the users feature."""

from abc import abstractmethod
from typing import Collection, Mapping, Protocol, Set, runtime_checkable

from ....core.value_objects.references import DocumentReference
from .documents import WikiDocument


@runtime_checkable
class DocumentStoreProtocol(Protocol):
    """Protocol for the wiki document storage."""
    
    @abstractmethod
    def exists(self, reference: DocumentReference) -> bool:
        """Check whether a document exists."""
        ...
    
    @abstractmethod
    def get_document(self, reference: DocumentReference) -> WikiDocument:
        """Load a document, or a new empty one when it does not exist."""
        ...
    
    @abstractmethod
    def save_document(self, document: WikiDocument, comment: str) -> None:
        """Save a document, raising DocumentStoreError on failure."""
        ...
    
    @abstractmethod
    def get_all_groups_for_member(self, member: DocumentReference) -> Set[DocumentReference]:
        """List every group ``member`` belongs to, directly or through other groups.
        
        Raises GroupQueryError on failure.
        """
        ...
    
    @abstractmethod
    def get_members(self, group: DocumentReference) -> Set[DocumentReference]:
        """List the direct members of a group."""
        ...


@runtime_checkable
class UserDirectoryProtocol(Protocol):
    """Protocol for user profile and group membership management."""
    
    @abstractmethod
    def exists(self, user: DocumentReference) -> bool:
        """Check whether the user profile exists."""
        ...
    
    @abstractmethod
    def create_user(self, user: DocumentReference, extended_info: Mapping[str, str]) -> bool:
        """Create a user profile."""
        ...
    
    @abstractmethod
    def synchronize_user_properties(
        self, user: DocumentReference, extended_info: Mapping[str, str], comment: str
    ) -> bool:
        """Update the profile fields that changed."""
        ...
    
    @abstractmethod
    def get_groups_for_member(self, user: DocumentReference) -> Set[DocumentReference]:
        """List the groups of a user, raising GroupQueryError on failure."""
        ...
    
    @abstractmethod
    def synchronize_groups_membership(
        self,
        user: DocumentReference,
        groups_in: Collection[DocumentReference],
        groups_in_with_autocreate: Collection[DocumentReference],
        groups_out: Collection[DocumentReference],
        comment: str,
    ) -> bool:
        """Apply a group membership delta."""
        ...
    
    @abstractmethod
    def add_to_group(
        self, user: DocumentReference, group: DocumentReference, comment: str, create: bool
    ) -> bool:
        """Add the user to a group, creating the group when allowed."""
        ...
    
    @abstractmethod
    def remove_from_group(self, user: DocumentReference, group: DocumentReference, comment: str) -> bool:
        """Remove the user from a group."""
        ...
