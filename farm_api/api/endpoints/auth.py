"""
Authentication Endpoints

Login, profile of the current user and password change.
"""
from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from farm_api.database import get_db
from farm_api.models.user import User
from farm_api.models.mixins import utcnow
from farm_api.schemas.auth import AuthUser, ChangePasswordRequest, LoginRequest, LoginResponse
from farm_api.api.deps import CurrentUser, get_current_user
from farm_api.core.security import create_user_token, get_password_hash, verify_password
from farm_api.core.exceptions import InvalidCredentials, TenantSuspended, UserInactive
from farm_api.utils.logging import get_logger, log_security_event
from farm_api.utils.responses import success_response

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


def _profile(user: User) -> AuthUser:
    return AuthUser(
        id=user.id,
        nombre=user.nombre,
        apellido=user.apellido,
        email=user.email,
        rol=getattr(user.rol, "value", user.rol),
        tenant={"id": user.tenant.id, "nombre": user.tenant.nombre},
    )


@router.post("/login")
def login(
    credentials: LoginRequest,
    db: Session = Depends(get_db)
):
    """
    Authenticate user and return JWT token.

    Process:
    1. Find the active user by email
    2. Verify password
    3. Reject users whose tenant has been deactivated
    4. Generate JWT with user id, tenant_id, email and rol

    SECURITY: Unknown email and wrong password return the same error to
    prevent user enumeration.
    """
    user = db.query(User).filter(
        func.lower(User.email) == credentials.email.strip().lower(),
        User.activo.is_(True)
    ).first()

    if not user:
        log_security_event(
            "failed_login",
            {"reason": "user_not_found", "email": credentials.email},
            logger
        )
        raise InvalidCredentials()

    if not verify_password(credentials.password, user.password_hash):
        log_security_event(
            "failed_login",
            {"reason": "invalid_password", "user_id": user.id, "tenant_id": user.tenant_id},
            logger
        )
        raise InvalidCredentials()

    if not user.tenant.activo:
        log_security_event(
            "failed_login",
            {"reason": "tenant_inactive", "user_id": user.id, "tenant_id": user.tenant_id},
            logger
        )
        raise TenantSuspended()

    token = create_user_token(user)

    user.ultimo_login = utcnow()
    db.commit()

    logger.info(f"Successful login: user={user.id}, tenant={user.tenant_id}")

    return success_response(LoginResponse(token=token, user=_profile(user)), "Login exitoso")


@router.get("/me")
def me(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Profile of the authenticated user with a tenant summary."""
    user = db.get(User, current_user.user_id)
    return success_response(_profile(user))


@router.put("/change-password")
def change_password(
    payload: ChangePasswordRequest,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    user = db.get(User, current_user.user_id)
    if user is None:
        raise UserInactive()

    if not verify_password(payload.current_password, user.password_hash):
        log_security_event(
            "failed_password_change",
            {"user_id": user.id, "tenant_id": user.tenant_id},
            logger
        )
        raise InvalidCredentials("Contraseña actual incorrecta")

    user.password_hash = get_password_hash(payload.new_password)
    db.commit()

    logger.info(f"Password changed: user={user.id}")

    return success_response(message="Contraseña actualizada exitosamente")
