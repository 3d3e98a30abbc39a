"""User directory services."""

from .sharding import GroupShardingManager, ShardingUserManager
from .user_manager import DefaultUserManager

__all__ = ["DefaultUserManager", "GroupShardingManager", "ShardingUserManager"]
