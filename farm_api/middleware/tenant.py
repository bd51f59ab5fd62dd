"""
Tenant Middleware

Puts the caller's tenant into the request context as early as possible so
that every log line and error handler can report it.

The tenant always comes from the verified bearer token. Clients may also
send an X-Tenant-ID header (the web frontend does); when present it must be
an integer and must match the token's tenant, otherwise the request is
rejected before it reaches a handler.

NOTE: This middleware only checks the signature. Whether the user and
tenant are still active is checked by the auth dependency, which does the
database lookup.
"""
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from typing import Optional
import logging

from farm_api.core.security import decode_access_token
from farm_api.utils.logging import log_security_event
from farm_api.utils.responses import error_body

logger = logging.getLogger(__name__)

TENANT_HEADER = "X-Tenant-ID"


class TenantMiddleware(BaseHTTPMiddleware):
    """
    Middleware to extract tenant context from the bearer token.

    SECURITY: A token issued for tenant A can never be combined with an
    X-Tenant-ID header naming tenant B.
    """

    def __init__(self, app):
        super().__init__(app)
        self.excluded_paths = [
            "/docs",
            "/redoc",
            "/openapi.json",
            "/health",
        ]

    async def dispatch(self, request: Request, call_next):
        """Process each request and inject tenant context."""

        if any(request.url.path.startswith(path) for path in self.excluded_paths):
            return await call_next(request)

        payload = self._token_payload(request)
        token_tenant_id = payload.get("tenant_id") if payload else None

        if token_tenant_id is not None:
            request.state.tenant_id = token_tenant_id
            request.state.user_id = payload.get("sub")

        header_value = request.headers.get(TENANT_HEADER)
        if header_value is not None and token_tenant_id is not None:
            try:
                header_tenant_id = int(header_value)
            except ValueError:
                return JSONResponse(
                    status_code=400,
                    content=error_body("X-Tenant-ID inválido", 400)
                )

            if header_tenant_id != token_tenant_id:
                log_security_event(
                    "tenant_header_mismatch",
                    {
                        "tenant_id": token_tenant_id,
                        "header_tenant_id": header_tenant_id,
                        "path": request.url.path,
                    },
                    logger
                )
                return JSONResponse(
                    status_code=403,
                    content=error_body("Acceso denegado al tenant solicitado", 403)
                )

        return await call_next(request)

    def _token_payload(self, request: Request) -> Optional[dict]:
        auth_header = request.headers.get("Authorization", "")
        scheme, _, token = auth_header.partition(" ")
        if scheme.lower() != "bearer" or not token:
            return None
        return decode_access_token(token.strip())
