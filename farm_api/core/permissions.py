"""
Permission System (RBAC)

Role gates are declarative dependencies: a route lists the roles that may
call it and the gate rejects everybody else with 403.

Roles: admin, gerente, supervisor, operador. There is no hierarchy; each
route names its allowed set explicitly.
"""
from fastapi import Depends, Request

from farm_api.api.deps import CurrentUser, get_current_user
from farm_api.core.exceptions import Forbidden
from farm_api.models.user import UserRole
from farm_api.utils.logging import get_logger, log_security_event

logger = get_logger(__name__)

ADMIN = UserRole.ADMIN.value
GERENTE = UserRole.GERENTE.value
SUPERVISOR = UserRole.SUPERVISOR.value
OPERADOR = UserRole.OPERADOR.value

# Common allowed sets
ADMIN_ONLY = (ADMIN,)
MANAGERS = (ADMIN, GERENTE)
SUPERVISORS = (ADMIN, GERENTE, SUPERVISOR)
ALL_ROLES = (ADMIN, GERENTE, SUPERVISOR, OPERADOR)


def require_roles(*roles: str):
    """
    Build a dependency that only lets the given roles through.

    Usage:
        @router.delete("/{id}")
        def delete(..., current_user: CurrentUser = Depends(require_roles(*MANAGERS))):
    """
    allowed = frozenset(roles)

    def role_gate(
        request: Request,
        current_user: CurrentUser = Depends(get_current_user),
    ) -> CurrentUser:
        if current_user.rol not in allowed:
            log_security_event(
                "forbidden",
                {
                    "user_id": current_user.user_id,
                    "tenant_id": current_user.tenant_id,
                    "rol": current_user.rol,
                    "path": request.url.path,
                    "method": request.method,
                },
                logger
            )
            raise Forbidden()
        return current_user

    return role_gate
