"""
Client Schemas
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime

from farm_api.schemas.common import ORMResponse, PatchModel, RequiredStr, SearchFilter


class ClientBase(BaseModel):
    nombre: RequiredStr
    telefono: Optional[str] = None
    correo: Optional[str] = None
    direccion: Optional[str] = None
    ruc: Optional[str] = None


class ClientCreate(ClientBase):
    pass


class ClientUpdate(PatchModel):
    not_null = ("nombre",)

    nombre: Optional[str] = Field(None, min_length=1)
    telefono: Optional[str] = None
    correo: Optional[str] = None
    direccion: Optional[str] = None
    ruc: Optional[str] = None


class ClientResponse(ClientBase, ORMResponse):
    id: int
    tenant_id: int
    fecha_registro: date
    created_at: datetime


class ClientFilter(SearchFilter):
    """search matches nombre, telefono, correo and ruc. Dates apply to fecha_registro."""
