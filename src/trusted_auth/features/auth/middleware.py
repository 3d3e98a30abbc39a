"""FastAPI middleware for trusted authentication."""

import logging
import time
from typing import Callable, List, Optional

from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from .entities.request import AuthRequest
from .services.auth_service import TrustedAuthService
from ...core.exceptions import UnsupportedIdentityMappingError

logger = logging.getLogger(__name__)


class TrustedAuthMiddleware:
    """Authenticates every request from the identity asserted by a trusted upstream.
    
    The principal (or None) is exposed as ``request.state.trusted_user``.
    """
    
    def __init__(
        self,
        service: TrustedAuthService,
        excluded_paths: Optional[List[str]] = None,
    ):
        """Initialize trusted auth middleware."""
        self.service = service
        self.excluded_paths = excluded_paths or [
            "/docs",
            "/redoc",
            "/openapi.json",
            "/health",
            "/ping",
        ]
    
    async def __call__(self, request: Request, call_next: Callable) -> Response:
        """Process request through trusted auth middleware."""
        if self._should_exclude_path(request.url.path):
            return await call_next(request)
        
        auth_request = self.build_auth_request(request)
        
        try:
            principal = await run_in_threadpool(self.service.check_auth, auth_request)
        except UnsupportedIdentityMappingError as e:
            logger.error(f"Trusted authentication misconfigured: {e.message} {e.details}")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "error": "authentication_misconfigured",
                    "message": e.message,
                    "timestamp": time.time(),
                },
            )
        
        request.state.trusted_user = principal
        if principal is not None:
            logger.debug(f"Authenticated request: {request.method} {request.url.path} User: {principal}")
        
        response = await call_next(request)
        
        response = self._rewrite_logout_redirection(auth_request, response)
        return self._add_cookies(auth_request, response)
    
    def _should_exclude_path(self, path: str) -> bool:
        """Check if path should be excluded from auth processing."""
        return any(path.startswith(excluded) for excluded in self.excluded_paths)
    
    @staticmethod
    def build_auth_request(request: Request) -> AuthRequest:
        """Copy the request data used by adapters and persistence stores."""
        url = request.url
        return AuthRequest(
            path=url.path,
            headers={key: value for key, value in request.headers.items()},
            attributes=dict(request.scope.get("state") or {}),
            cookies=dict(request.cookies),
            session=request.session if "session" in request.scope else None,
            server_name=url.hostname or "localhost",
            server_url=f"{url.scheme}://{url.netloc}",
            is_secure=url.scheme in ("https", "wss"),
        )
    
    @staticmethod
    def _rewrite_logout_redirection(auth_request: AuthRequest, response: Response) -> Response:
        """Send redirections of a logout request through the external logout URL."""
        if auth_request.logout_rewriter is None or not 300 <= response.status_code < 400:
            return response
        
        location = response.headers.get("location")
        if not location:
            return response
        
        if location.startswith("/"):
            location = auth_request.server_url + location
        
        redirect = auth_request.logout_rewriter(location)
        if redirect:
            logger.debug(f"Redirection to [{location}] rewritten to [{redirect}]")
            response.headers["location"] = redirect
        return response
    
    @staticmethod
    def _add_cookies(auth_request: AuthRequest, response: Response) -> Response:
        for cookie in auth_request.response_cookies:
            response.set_cookie(
                key=cookie.key,
                value=cookie.value,
                max_age=cookie.max_age,
                path=cookie.path,
                domain=cookie.domain,
                secure=cookie.secure,
                httponly=cookie.httponly,
            )
        return response


def configure_trusted_auth_middleware(
    app: FastAPI,
    service: TrustedAuthService,
    excluded_paths: Optional[List[str]] = None,
) -> TrustedAuthMiddleware:
    """Configure trusted auth middleware on FastAPI app."""
    trusted_auth_middleware = TrustedAuthMiddleware(
        service=service,
        excluded_paths=excluded_paths,
    )
    
    app.middleware("http")(trusted_auth_middleware)
    logger.info("Added trusted auth middleware")
    return trusted_auth_middleware
