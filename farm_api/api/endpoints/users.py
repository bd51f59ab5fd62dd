"""
User Management Endpoints

CRUD operations for users within a tenant.
All operations are scoped to the caller's tenant.

RBAC:
- All operations: Admin only

Emails are unique across the whole system (they are the login name), so
uniqueness is checked globally, not per tenant.
"""
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from farm_api.database import get_db
from farm_api.models.user import User
from farm_api.schemas.user import UserCreate, UserFilter, UserResponse, UserUpdate
from farm_api.api.deps import CurrentUser
from farm_api.api.crud import get_scoped_or_404, save, scoped
from farm_api.api.filters import equals, search
from farm_api.core.exceptions import DuplicateKey, InvalidOperation
from farm_api.core.permissions import ADMIN_ONLY, require_roles
from farm_api.core.security import get_password_hash
from farm_api.utils.logging import get_logger
from farm_api.utils.pagination import Pagination, get_pagination, paginated
from farm_api.utils.responses import success_response

logger = get_logger(__name__)

router = APIRouter(prefix="/usuarios", tags=["usuarios"])

require_admin = require_roles(*ADMIN_ONLY)


def ensure_unique_email(db: Session, email: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(User).filter(func.lower(User.email) == email.lower())
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    if query.first() is not None:
        raise DuplicateKey("Ya existe un usuario con este email")


@router.get("")
def list_users(
    filters: UserFilter = Depends(),
    pagination: Pagination = Depends(get_pagination),
    current_user: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    List users in current tenant.

    Supports filtering by rol and activo, and search on nombre, apellido
    and email.
    """
    query = scoped(db, User, current_user.tenant_id).filter(
        *equals(User.rol, filters.rol),
        *equals(User.activo, filters.activo),
        *search([User.nombre, User.apellido, User.email], filters.search),
    )

    total = query.count()
    users = pagination.apply(query.order_by(User.nombre.asc(), User.id.asc())).all()

    logger.debug(f"Listed {len(users)} users for tenant {current_user.tenant_id}")

    items = [UserResponse.model_validate(user) for user in users]
    return success_response(paginated(items, total, pagination))


@router.get("/{usuario_id}")
def get_user(
    usuario_id: int,
    current_user: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    user = get_scoped_or_404(db, User, usuario_id, current_user.tenant_id, "Usuario")
    return success_response(UserResponse.model_validate(user))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_user(
    user_data: UserCreate,
    current_user: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Create a new user in the admin's tenant."""
    email = user_data.email.strip().lower()
    ensure_unique_email(db, email)

    new_user = save(db, User(
        tenant_id=current_user.tenant_id,
        nombre=user_data.nombre,
        apellido=user_data.apellido,
        email=email,
        password_hash=get_password_hash(user_data.password),
        rol=user_data.rol,
        activo=True,
    ))

    logger.info(f"User created: {new_user.id} by {current_user.user_id}")

    return success_response(UserResponse.model_validate(new_user), "Usuario creado exitosamente")


@router.put("/{usuario_id}")
def update_user(
    usuario_id: int,
    user_data: UserUpdate,
    current_user: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Partial update; a new password is hashed before storing."""
    user = get_scoped_or_404(db, User, usuario_id, current_user.tenant_id, "Usuario")

    changes = user_data.changes()
    if "email" in changes:
        changes["email"] = changes["email"].strip().lower()
        ensure_unique_email(db, changes["email"], exclude_id=user.id)
    if "password" in changes:
        user.password_hash = get_password_hash(changes.pop("password"))

    for field, value in changes.items():
        setattr(user, field, value)
    save(db, user)

    logger.info(f"User updated: {user.id} by {current_user.user_id}")

    return success_response(UserResponse.model_validate(user), "Usuario actualizado exitosamente")


@router.delete("/{usuario_id}")
def delete_user(
    usuario_id: int,
    current_user: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Delete user from tenant.

    CAUTION: This is a hard delete. Records registered by the user keep
    their data with id_usuario set to NULL.
    """
    user = get_scoped_or_404(db, User, usuario_id, current_user.tenant_id, "Usuario")

    if user.id == current_user.user_id:
        raise InvalidOperation("No puedes eliminar tu propia cuenta")

    db.delete(user)
    db.commit()

    logger.info(f"User deleted: {usuario_id} by {current_user.user_id}")

    return success_response(message="Usuario eliminado exitosamente")
