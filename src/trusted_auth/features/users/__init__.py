"""Users feature: wiki documents, user profiles and group membership."""

from .entities import DocumentStoreProtocol, UserDirectoryProtocol, WikiDocument, WikiObject
from .repositories import InMemoryDocumentStore
from .services import DefaultUserManager, GroupShardingManager, ShardingUserManager

__all__ = [
    "DocumentStoreProtocol",
    "UserDirectoryProtocol",
    "WikiDocument",
    "WikiObject",
    "InMemoryDocumentStore",
    "DefaultUserManager",
    "GroupShardingManager",
    "ShardingUserManager",
]
