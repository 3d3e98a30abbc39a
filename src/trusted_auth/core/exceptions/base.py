"""Root of the trusted-auth error hierarchy.

Every error carries a machine readable ``error_code`` (the class name unless
given) and a ``details`` mapping, which the middleware renders through
:func:`create_error_response`.
"""

from typing import Any, Dict, Optional


class TrustedAuthError(Exception):
    """Base class for errors raised by trusted-auth."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or type(self).__name__
        self.details = dict(details) if details else {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        extra = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({extra})"


def create_error_response(exception: TrustedAuthError) -> Dict[str, Any]:
    """Render an error as the JSON body returned by the middleware."""
    return {
        "error": {
            "code": exception.error_code,
            "message": exception.message,
            "details": exception.details,
            "type": type(exception).__name__,
        }
    }
