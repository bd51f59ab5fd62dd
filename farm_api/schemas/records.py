"""
Flock Record Schemas

Health, mortality and egg production records.
"""
from pydantic import BaseModel, Field
from typing import Literal, Optional
from datetime import date, datetime

from farm_api.schemas.common import ORMResponse, PatchModel, RequiredStr, SearchFilter

EggQuality = Literal["Excelente", "Buena", "Regular", "Mala"]


class HealthRecordBase(BaseModel):
    id_ave: int
    fecha: date
    tipo_tratamiento: RequiredStr
    medidas: Optional[str] = None
    cantidad: Optional[int] = Field(None, ge=0)
    descripcion: Optional[str] = None
    costo: Optional[float] = Field(None, ge=0)
    aplicacion_productos: Optional[str] = None


class HealthRecordCreate(HealthRecordBase):
    pass


class HealthRecordUpdate(PatchModel):
    not_null = ("id_ave", "fecha", "tipo_tratamiento")

    id_ave: Optional[int] = None
    fecha: Optional[date] = None
    tipo_tratamiento: Optional[str] = Field(None, min_length=1)
    medidas: Optional[str] = None
    cantidad: Optional[int] = Field(None, ge=0)
    descripcion: Optional[str] = None
    costo: Optional[float] = Field(None, ge=0)
    aplicacion_productos: Optional[str] = None


class HealthRecordResponse(HealthRecordBase, ORMResponse):
    id: int
    tenant_id: int
    id_usuario: Optional[int]
    created_at: datetime


class HealthRecordFilter(SearchFilter):
    """search matches tipo_tratamiento and descripcion."""
    id_ave: Optional[int] = None
    tipo_tratamiento: Optional[str] = None


class MortalityRecordBase(BaseModel):
    id_ave: Optional[int] = None
    fecha: date
    cantidad_muertes: int = Field(..., ge=0)
    causa_principal: Optional[str] = None
    accion_correctiva: Optional[str] = None


class MortalityRecordCreate(MortalityRecordBase):
    pass


class MortalityRecordUpdate(PatchModel):
    not_null = ("fecha", "cantidad_muertes")

    id_ave: Optional[int] = None
    fecha: Optional[date] = None
    cantidad_muertes: Optional[int] = Field(None, ge=0)
    causa_principal: Optional[str] = None
    accion_correctiva: Optional[str] = None


class MortalityRecordResponse(MortalityRecordBase, ORMResponse):
    id: int
    tenant_id: int
    id_usuario: Optional[int]
    created_at: datetime


class MortalityRecordFilter(SearchFilter):
    """search matches causa_principal."""
    id_ave: Optional[int] = None


class EggRecordBase(BaseModel):
    id_ave: Optional[int] = None
    fecha: date
    cantidad_huevos: int = Field(..., ge=0)
    calidad: Optional[EggQuality] = None


class EggRecordCreate(EggRecordBase):
    pass


class EggRecordUpdate(PatchModel):
    not_null = ("fecha", "cantidad_huevos")

    id_ave: Optional[int] = None
    fecha: Optional[date] = None
    cantidad_huevos: Optional[int] = Field(None, ge=0)
    calidad: Optional[EggQuality] = None


class EggRecordResponse(EggRecordBase, ORMResponse):
    id: int
    tenant_id: int
    id_usuario: Optional[int]
    created_at: datetime


class EggRecordFilter(SearchFilter):
    id_ave: Optional[int] = None
    calidad: Optional[EggQuality] = None
