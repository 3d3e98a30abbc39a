"""Identity adapters, selected by hint."""

from .attributes import AttributesTrustedAuthAdapter
from .base import RequestFieldTrustedAuthAdapter
from .headers import HeadersTrustedAuthAdapter

__all__ = [
    "AttributesTrustedAuthAdapter",
    "HeadersTrustedAuthAdapter",
    "RequestFieldTrustedAuthAdapter",
]
