"""Framework independent view of an incoming request.

The authenticator runs synchronously and does not know about the web
framework. The HTTP middleware copies what it needs into an
:class:`AuthRequest`, runs the authenticator, then applies the queued
cookies and the logout location rewriter to the response.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, MutableMapping, Optional


@dataclass
class ResponseCookie:
    """Cookie to be set on the response.
    
    A ``max_age`` of ``None`` makes a session cookie, 0 deletes the cookie.
    """
    
    key: str
    value: str
    max_age: Optional[int] = None
    path: str = "/"
    domain: Optional[str] = None
    secure: bool = False
    httponly: bool = True


@dataclass
class AuthRequest:
    """Request data consumed by adapters, persistence stores and the authenticator."""
    
    path: str = "/"
    headers: Dict[str, str] = field(default_factory=dict)
    attributes: Dict[str, Any] = field(default_factory=dict)
    cookies: Dict[str, str] = field(default_factory=dict)
    session: Optional[MutableMapping[str, Any]] = None
    server_name: str = "localhost"
    server_url: str = "http://localhost"
    is_secure: bool = False
    
    # Filled while authenticating
    response_cookies: List[ResponseCookie] = field(default_factory=list)
    logout_rewriter: Optional[Callable[[str], Optional[str]]] = None
    
    def __post_init__(self):
        self.headers = {key.lower(): value for key, value in self.headers.items()}
    
    def get_header(self, name: str) -> Optional[str]:
        """Get a header value, case-insensitively."""
        return self.headers.get(name.lower())
    
    def get_attribute(self, name: str) -> Any:
        """Get a request attribute."""
        return self.attributes.get(name)
    
    def get_cookie(self, name: str) -> Optional[str]:
        """Get a request cookie value."""
        return self.cookies.get(name)
    
    def add_cookie(self, cookie: ResponseCookie) -> None:
        """Queue a cookie for the response, replacing a previous one with the same key."""
        self.response_cookies = [c for c in self.response_cookies if c.key != cookie.key]
        self.response_cookies.append(cookie)
    
    @classmethod
    def from_mappings(
        cls,
        path: str = "/",
        headers: Optional[Mapping[str, str]] = None,
        attributes: Optional[Mapping[str, Any]] = None,
        **kwargs,
    ) -> "AuthRequest":
        """Build a request from plain mappings."""
        return cls(
            path=path,
            headers=dict(headers or {}),
            attributes=dict(attributes or {}),
            **kwargs,
        )
