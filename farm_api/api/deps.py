"""
API Dependencies

Reusable FastAPI dependencies for authentication.
These are used across all API endpoints to ensure consistent security.

PATTERN: FastAPI's dependency injection system is powerful and clean.
Dependencies can be composed and reused easily.
"""
from dataclasses import dataclass
from typing import Optional
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from farm_api.database import get_db
from farm_api.models.user import User
from farm_api.models.tenant import Tenant
from farm_api.core.security import decode_access_token
from farm_api.core.exceptions import MissingToken, InvalidToken, UserInactive, TenantInactive
from farm_api.utils.logging import get_logger, log_security_event

logger = get_logger(__name__)

# auto_error=False so a missing header raises our own MissingToken
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class CurrentUser:
    """Identity of the caller, as verified against the database."""
    user_id: int
    tenant_id: int
    email: str
    rol: str
    nombre: str


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> CurrentUser:
    """
    Get current authenticated user.

    This dependency:
    1. Validates the JWT signature and expiry
    2. Re-loads the user from the database (claims are not trusted)
    3. Rejects inactive users and users of inactive tenants

    SECURITY: Revocation is enforced by this live lookup. A token stays
    cryptographically valid for 24h, but stops working as soon as its
    user or tenant is deactivated.
    """
    if credentials is None or not credentials.credentials:
        raise MissingToken()

    payload = decode_access_token(credentials.credentials)
    if not payload:
        raise InvalidToken()

    try:
        user_id = int(payload["sub"])
        token_tenant_id = int(payload["tenant_id"])
    except (KeyError, TypeError, ValueError):
        raise InvalidToken()

    user = db.get(User, user_id)
    if not user or not user.activo:
        log_security_event(
            "revoked_token",
            {"reason": "user_inactive", "user_id": user_id},
            logger
        )
        raise UserInactive()

    # A user never moves between tenants; a mismatch means a forged claim set
    if user.tenant_id != token_tenant_id:
        raise InvalidToken()

    tenant = db.get(Tenant, user.tenant_id)
    if not tenant or not tenant.activo:
        log_security_event(
            "revoked_token",
            {"reason": "tenant_inactive", "user_id": user_id, "tenant_id": user.tenant_id},
            logger
        )
        raise TenantInactive()

    # Available to the error handlers and log lines for the rest of the request
    request.state.tenant_id = user.tenant_id
    request.state.user_id = user.id

    return CurrentUser(
        user_id=user.id,
        tenant_id=user.tenant_id,
        email=user.email,
        rol=getattr(user.rol, "value", user.rol),
        nombre=user.nombre,
    )
