"""Trusted auth services."""

from .auth_service import TrustedAuthService
from .authenticator import TrustedAuthenticator
from .field_recorder import FieldProvenanceBatch
from .naming import apply_replacements, normalize_case, normalize_user_name
from .request_matcher import RequestMatcher

__all__ = [
    "TrustedAuthService",
    "TrustedAuthenticator",
    "FieldProvenanceBatch",
    "apply_replacements",
    "normalize_case",
    "normalize_user_name",
    "RequestMatcher",
]
