"""User directory entities."""

from .documents import WikiDocument, WikiObject
from .protocols import DocumentStoreProtocol, UserDirectoryProtocol

__all__ = ["WikiDocument", "WikiObject", "DocumentStoreProtocol", "UserDirectoryProtocol"]
