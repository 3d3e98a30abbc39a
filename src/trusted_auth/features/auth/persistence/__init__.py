"""Persistence stores, selected by hint."""

from .cookie_store import CookieAuthenticationPersistenceStore
from .encryption import PrincipalEncryption
from .session_store import SessionAuthenticationPersistenceStore

__all__ = [
    "CookieAuthenticationPersistenceStore",
    "PrincipalEncryption",
    "SessionAuthenticationPersistenceStore",
]
