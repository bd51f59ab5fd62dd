"""
User Schemas

Request/response models for tenant user management.
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from farm_api.models.user import UserRole
from farm_api.schemas.common import ORMResponse, PatchModel, RequiredStr


class UserBase(BaseModel):
    """Base user schema with common fields."""
    nombre: RequiredStr
    apellido: Optional[str] = None
    email: RequiredStr


class UserCreate(UserBase):
    """Schema for creating a new user in the caller's tenant."""
    password: str = Field(..., min_length=6, max_length=100)
    rol: UserRole = UserRole.OPERADOR


class UserUpdate(PatchModel):
    """Schema for updating a user. All fields optional."""
    not_null = ("nombre", "email", "rol", "activo", "password")

    nombre: Optional[str] = Field(None, min_length=1)
    apellido: Optional[str] = None
    email: Optional[str] = Field(None, min_length=1)
    rol: Optional[UserRole] = None
    activo: Optional[bool] = None
    password: Optional[str] = Field(None, min_length=6, max_length=100)


class UserResponse(UserBase, ORMResponse):
    """User response schema (excludes the password hash)."""
    id: int
    tenant_id: int
    rol: UserRole
    activo: bool
    ultimo_login: Optional[datetime]
    created_at: datetime


class UserFilter(BaseModel):
    rol: Optional[UserRole] = None
    activo: Optional[bool] = None
    search: Optional[str] = None
