"""
Vehicle Schemas
"""
from pydantic import BaseModel, Field
from typing import Literal, Optional
from datetime import date, datetime

from farm_api.schemas.common import ORMResponse, PatchModel, RequiredStr, SearchFilter

VehicleState = Literal["Activo", "Mantenimiento", "Inactivo"]


class VehicleBase(BaseModel):
    tipo: RequiredStr
    placa: RequiredStr
    marca: Optional[str] = None
    modelo: Optional[str] = None
    anio: Optional[int] = Field(None, ge=1900, le=2100)
    estado: VehicleState = "Activo"
    capacidad: Optional[float] = Field(None, ge=0)
    fecha_adquisicion: Optional[date] = None


class VehicleCreate(VehicleBase):
    pass


class VehicleUpdate(PatchModel):
    not_null = ("tipo", "placa", "estado")

    tipo: Optional[str] = Field(None, min_length=1)
    placa: Optional[str] = Field(None, min_length=1)
    marca: Optional[str] = None
    modelo: Optional[str] = None
    anio: Optional[int] = Field(None, ge=1900, le=2100)
    estado: Optional[VehicleState] = None
    capacidad: Optional[float] = Field(None, ge=0)
    fecha_adquisicion: Optional[date] = None


class VehicleResponse(VehicleBase, ORMResponse):
    id: int
    tenant_id: int
    created_at: datetime
    updated_at: datetime


class VehicleFilter(SearchFilter):
    """search matches placa, marca and modelo. Dates apply to fecha_adquisicion."""
    estado: Optional[VehicleState] = None
    tipo: Optional[str] = None
