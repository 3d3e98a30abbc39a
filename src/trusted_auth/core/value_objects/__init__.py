"""Value objects for trusted-auth."""

from .references import DocumentReference, Principal

__all__ = ["DocumentReference", "Principal"]
