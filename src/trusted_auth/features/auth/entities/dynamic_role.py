"""Dynamic role rules.

A dynamic role rule derives a group from a role asserted by the identity
source. Roles are selected by prefix, suffix and an optional regular
expression; the group name is built either by swapping the role prefix and
suffix for the group ones, or by a regular expression substitution.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional, Pattern

from ....core.value_objects.references import WIKI_SEPARATOR, DocumentReference
from .field_provenance import AddGroupToFieldConfiguration

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DynamicRoleConfiguration:
    """One dynamic role rule."""
    
    name: str
    role_prefix: str = ""
    role_suffix: str = ""
    role_regex: str = ""
    replacement: str = ""
    group_prefix: str = ""
    group_suffix: str = ""
    auto_create: bool = True
    add_group_to_field: Optional[AddGroupToFieldConfiguration] = None
    _compiled_regex: Optional[Pattern] = field(default=None, init=False, repr=False, compare=False)
    
    def __post_init__(self):
        if self.role_regex:
            object.__setattr__(self, "_compiled_regex", re.compile(self.role_regex))
    
    @property
    def is_unsafe(self) -> bool:
        """A rule without group prefix and suffix would match every group."""
        return not self.group_prefix and not self.group_suffix
    
    def matches_role(self, role: Optional[str]) -> bool:
        """Check whether this rule applies to ``role``."""
        if role is None or not (self.role_prefix or self.role_suffix or self.role_regex):
            return False
        
        if not role.startswith(self.role_prefix) or not role.endswith(self.role_suffix):
            return False
        
        # Prefix and suffix may not overlap inside a short role
        if len(role) < len(self.role_prefix) + len(self.role_suffix):
            return False
        
        if self._compiled_regex is not None and self._compiled_regex.fullmatch(role) is None:
            return False
        
        return True
    
    def group_name_for_role(self, role: str) -> str:
        """Derive the (unresolved) group name for a matching role."""
        if not self.role_regex or not self.replacement:
            radical = role[len(self.role_prefix):len(role) - len(self.role_suffix)]
            return f"{self.group_prefix}{radical}{self.group_suffix}"
        return self._compiled_regex.sub(self.replacement, role, count=1)
    
    @property
    def unqualified_group_prefix(self) -> str:
        """Group prefix without its wiki qualifier."""
        return self.group_prefix.split(WIKI_SEPARATOR, 1)[-1]
    
    def matches_group(self, group: DocumentReference, default_space: str) -> bool:
        """Check whether ``group`` looks like a group produced by this rule.
        
        Groups resolved in the default space may have been configured without
        their space, so the bare page name is checked as well.
        """
        candidates = [group.local()]
        if group.spaces == (default_space,):
            candidates.append(group.name)
        
        prefix = self.unqualified_group_prefix
        for candidate in candidates:
            if candidate.startswith(prefix) and candidate.endswith(self.group_suffix):
                logger.debug(f"Group [{group}] matches configuration [{self.name}]")
                return True
        
        logger.debug(f"Group [{group}] does not match configuration [{self.name}]")
        return False
    
    def __str__(self) -> str:
        return (
            f"name: {self.name}, role prefix: {self.role_prefix}, role suffix: {self.role_suffix}, "
            f"role regex: {self.role_regex}, replacement: {self.replacement}, "
            f"group prefix: {self.group_prefix}, group suffix: {self.group_suffix}, "
            f"auto create groups: {self.auto_create}"
        )
