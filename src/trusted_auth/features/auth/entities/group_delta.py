"""Group membership delta computed for one authentication."""

from dataclasses import dataclass, field
from typing import Iterable, Set

from ....core.value_objects.references import DocumentReference


@dataclass
class GroupDelta:
    """Groups to add (plain or with auto-creation) and groups to remove.
    
    The three sets are kept disjoint. Statically mapped groups take
    precedence over dynamically derived ones:
    
    * a group removed by a static mapping is never added dynamically
    * a group added by a static mapping is never removed dynamically
    * a group present in both add sets is only kept in the auto-create one
    """
    
    groups_in: Set[DocumentReference] = field(default_factory=set)
    groups_in_with_autocreate: Set[DocumentReference] = field(default_factory=set)
    groups_out: Set[DocumentReference] = field(default_factory=set)
    static_in: Set[DocumentReference] = field(default_factory=set, repr=False)
    static_out: Set[DocumentReference] = field(default_factory=set, repr=False)
    
    def add_static(self, group: DocumentReference, member: bool) -> None:
        """Record the result of a static group mapping."""
        if member:
            self.static_out.discard(group)
            self.groups_out.discard(group)
            self.static_in.add(group)
            if group not in self.groups_in_with_autocreate:
                self.groups_in.add(group)
        else:
            self.static_in.discard(group)
            self.groups_in.discard(group)
            self.groups_in_with_autocreate.discard(group)
            self.static_out.add(group)
            self.groups_out.add(group)
    
    def add_dynamic(self, group: DocumentReference, auto_create: bool) -> bool:
        """Record a dynamically derived group.
        
        Returns:
            False when a static mapping excluded the group
        """
        if group in self.static_out:
            return False
        
        self.groups_out.discard(group)
        if auto_create:
            self.groups_in.discard(group)
            self.groups_in_with_autocreate.add(group)
        elif group not in self.groups_in_with_autocreate:
            self.groups_in.add(group)
        return True
    
    def remove_dynamic(self, group: DocumentReference) -> bool:
        """Record a dynamically derived group the user lost.
        
        Returns:
            False when the group is being added
        """
        if group in self.static_in or group in self.added:
            return False
        self.groups_out.add(group)
        return True
    
    @property
    def added(self) -> Set[DocumentReference]:
        """All groups being added."""
        return self.groups_in | self.groups_in_with_autocreate
    
    def removal_candidates(self, current: Iterable[DocumentReference]) -> Set[DocumentReference]:
        """Current groups that are neither added nor statically kept."""
        return set(current) - self.added - self.static_in
    
    def is_empty(self) -> bool:
        return not (self.groups_in or self.groups_in_with_autocreate or self.groups_out)
