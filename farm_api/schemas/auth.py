"""
Authentication Schemas

Request/response models for authentication endpoints.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

from farm_api.schemas.common import RequiredStr


class LoginRequest(BaseModel):
    """Login request body. Emails are unique system-wide, no tenant needed."""
    email: RequiredStr
    password: RequiredStr

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "admin@granja.com",
                "password": "secreto123"
            }
        }
    )


class TenantSummary(BaseModel):
    id: int
    nombre: str

    model_config = ConfigDict(from_attributes=True)


class AuthUser(BaseModel):
    """Profile returned by login and /auth/me."""
    id: int
    nombre: str
    apellido: Optional[str] = None
    email: str
    rol: str
    tenant: TenantSummary

    model_config = ConfigDict(from_attributes=True)


class LoginResponse(BaseModel):
    token: str
    user: AuthUser


class ChangePasswordRequest(BaseModel):
    """Body of PUT /auth/change-password; keys are camelCase on the wire."""
    current_password: RequiredStr = Field(..., alias="currentPassword")
    new_password: str = Field(..., alias="newPassword", min_length=6)
