"""Tests for the FastAPI trusted authentication middleware."""

from unittest.mock import MagicMock
from urllib.parse import quote_plus

import pytest
from fastapi import FastAPI, Request
from fastapi.responses import RedirectResponse
from fastapi.testclient import TestClient

from trusted_auth.features.auth.factory import TrustedAuthServiceFactory
from trusted_auth.features.auth.middleware import (
    TrustedAuthMiddleware,
    configure_trusted_auth_middleware,
)
from trusted_auth.features.auth.services.auth_service import TrustedAuthService

from tests.fakes import make_settings, trusted_properties, user_ref

LOGOUT_URL = "https://sso.example.com/logout?next=__REDIRECT__"


def create_app() -> FastAPI:
    app = FastAPI()
    
    @app.get("/whoami")
    async def whoami(request: Request):
        return {"user": request.state.trusted_user}
    
    @app.get("/bin/logout/XWiki/XWikiLogout")
    async def logout():
        return RedirectResponse("/bin/view/Main/")
    
    @app.get("/health")
    async def health():
        return {"status": "ok"}
    
    return app


@pytest.fixture
def make_client(document_store):
    """Build a test client protected by the middleware."""
    def factory(**properties):
        defaults = {
            "adapterHint": "headers",
            "persistenceStoreHint": "cookie",
            "auth_field": "X-Remote-User",
            "id_field": "X-Remote-User",
            "logout_url": LOGOUT_URL,
        }
        settings = make_settings(
            trusted_properties(**{**defaults, **properties}),
            encryption_key="middleware-secret",
        )
        app = create_app()
        service_factory = TrustedAuthServiceFactory(settings=settings, document_store=document_store)
        configure_trusted_auth_middleware(app, service_factory.get_service())
        return TestClient(app)
    return factory


class TestTrustedAuthMiddleware:
    """Test cases for TrustedAuthMiddleware."""
    
    def test_authenticated_request(self, make_client, document_store):
        """Test that the asserted user is exposed and persisted in a cookie."""
        client = make_client()
        
        response = client.get("/whoami", headers={"X-Remote-User": "Alice"})
        
        assert response.status_code == 200
        assert response.json() == {"user": "xwiki:XWiki.alice"}
        assert "TRUSTEDAUTH=" in response.headers["set-cookie"]
        assert "xwiki:XWiki.alice" not in response.headers["set-cookie"]
        assert document_store.exists(user_ref("alice"))
    
    def test_anonymous_request(self, make_client):
        """Test public access without identity headers."""
        response = make_client().get("/whoami")
        
        assert response.json() == {"user": None}
        assert "set-cookie" not in response.headers
    
    def test_cookie_trusted_on_missing_authentication(self, make_client):
        """Test that the cookie keeps the user when the header disappears."""
        client = make_client(isPersistenceStoreTrustedOnMissingAuthentication="true")
        client.get("/whoami", headers={"X-Remote-User": "alice"})
        
        response = client.get("/whoami")
        
        assert response.json() == {"user": "xwiki:XWiki.alice"}
    
    def test_cookie_cleared_on_missing_authentication(self, make_client):
        """Test that the cookie is expired when the header disappears."""
        client = make_client()
        client.get("/whoami", headers={"X-Remote-User": "alice"})
        
        response = client.get("/whoami")
        
        assert response.json() == {"user": None}
        assert "Max-Age=0" in response.headers["set-cookie"]
    
    def test_misconfigured_identity_mapping(self, make_client):
        """Test that an unsupported identity mapping is a server error."""
        client = make_client(id_field="X-Remote-Name")
        
        response = client.get("/whoami", headers={"X-Remote-User": "u-123", "X-Remote-Name": "alice"})
        
        assert response.status_code == 500
        assert response.json()["error"] == "authentication_misconfigured"
    
    def test_logout_redirection_is_rewritten(self, make_client):
        """Test that logout redirections go through the external logout URL."""
        client = make_client()
        
        response = client.get(
            "/bin/logout/XWiki/XWikiLogout",
            headers={"X-Remote-User": "alice"},
            follow_redirects=False,
        )
        
        assert 300 <= response.status_code < 400
        assert response.headers["location"] == (
            "https://sso.example.com/logout?next=" + quote_plus("http://testserver/bin/view/Main/")
        )
        assert "Max-Age=0" in response.headers["set-cookie"]
    
    def test_other_redirections_are_kept(self, make_client):
        """Test that redirections outside logout are untouched."""
        app = create_app()
        
        @app.get("/go")
        async def go():
            return RedirectResponse("/bin/view/Main/")
        
        service = MagicMock(spec=TrustedAuthService)
        service.check_auth.return_value = None
        configure_trusted_auth_middleware(app, service)
        
        response = TestClient(app).get("/go", follow_redirects=False)
        
        assert response.headers["location"] == "/bin/view/Main/"
    
    def test_excluded_paths(self):
        """Test that excluded paths skip authentication."""
        app = create_app()
        service = MagicMock(spec=TrustedAuthService)
        service.check_auth.return_value = "xwiki:XWiki.alice"
        middleware = configure_trusted_auth_middleware(app, service)
        client = TestClient(app)
        
        assert client.get("/health").json() == {"status": "ok"}
        service.check_auth.assert_not_called()
        
        assert client.get("/whoami").json() == {"user": "xwiki:XWiki.alice"}
        service.check_auth.assert_called_once()
        assert isinstance(middleware, TrustedAuthMiddleware)
    
    def test_build_auth_request(self):
        """Test copying request data into an AuthRequest."""
        scope = {
            "type": "http",
            "method": "GET",
            "scheme": "https",
            "server": ("wiki.example.com", 443),
            "path": "/bin/view/Main/",
            "root_path": "",
            "query_string": b"",
            "headers": [
                (b"host", b"wiki.example.com"),
                (b"x-remote-user", b"alice"),
                (b"cookie", b"TRUSTEDAUTH=token"),
            ],
            "state": {"REMOTE_USER": "alice"},
        }
        
        auth_request = TrustedAuthMiddleware.build_auth_request(Request(scope))
        
        assert auth_request.path == "/bin/view/Main/"
        assert auth_request.get_header("X-Remote-User") == "alice"
        assert auth_request.get_cookie("TRUSTEDAUTH") == "token"
        assert auth_request.get_attribute("REMOTE_USER") == "alice"
        assert auth_request.session is None
        assert auth_request.server_name == "wiki.example.com"
        assert auth_request.server_url == "https://wiki.example.com"
        assert auth_request.is_secure is True
