"""
Custom Exceptions

Centralized exception definitions for better error handling.
All domain errors derive from AppError, an HTTPException carrying the
status code and the user-facing message. The handlers registered in
farm_api.core.error_handlers render them with the error envelope.
"""
from typing import Iterable, Optional

from fastapi import HTTPException, status


class AppError(HTTPException):
    """Base class for expected, user-facing failures."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Error interno del servidor"

    def __init__(self, detail: Optional[str] = None, headers: Optional[dict] = None):
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.default_detail,
            headers=headers,
        )


# ============================================================================
# AUTHENTICATION / AUTHORIZATION
# ============================================================================

class AuthError(AppError):
    """Raised when authentication fails."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "No autorizado"

    def __init__(self, detail: Optional[str] = None):
        headers = {"WWW-Authenticate": "Bearer"} if self.status_code == 401 else None
        super().__init__(detail=detail, headers=headers)


class MissingToken(AuthError):
    default_detail = "Token de acceso requerido"


class InvalidToken(AuthError):
    default_detail = "Token inválido o expirado"


class UserInactive(AuthError):
    default_detail = "Usuario no encontrado o inactivo"


class InvalidCredentials(AuthError):
    default_detail = "Credenciales inválidas"


class TenantInactive(AuthError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Tenant inactivo"


class TenantSuspended(AuthError):
    """Login attempt for a user whose tenant has been deactivated."""

    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Cuenta suspendida"


class Forbidden(AuthError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Permisos insuficientes"


# ============================================================================
# VALIDATION
# ============================================================================

class ValidationError(AppError):
    """Raised when input validation or a business rule fails."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Error de validación de datos"


class MissingField(ValidationError):
    def __init__(self, fields: Iterable[str]):
        self.fields = list(fields)
        super().__init__(f"Campos requeridos: {', '.join(self.fields)}")


class InvalidOperation(ValidationError):
    default_detail = "Operación inválida"


# ============================================================================
# LOOKUP / CONFLICTS
# ============================================================================

class NotFoundError(AppError):
    """Raised when a tenant-scoped lookup finds nothing."""

    status_code = status.HTTP_404_NOT_FOUND

    FEMININE = ("Ave", "Venta", "Asistencia")

    def __init__(self, entity: str = "Registro", detail: Optional[str] = None):
        self.entity = entity
        ending = "a" if entity in self.FEMININE else "o"
        super().__init__(detail or f"{entity} no encontrad{ending}")


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflicto: el registro ya existe"


class DuplicateKey(ConflictError):
    pass


class HasDependents(ConflictError):
    """Raised instead of cascading when dependent records exist."""
