"""
Batch and Bird Schemas

Request/response models for batch (lote) and bird (ave) operations.
"""
from pydantic import BaseModel, Field
from typing import List, Literal, Optional
from datetime import date, datetime

from farm_api.schemas.common import ORMResponse, PatchModel, RequiredStr, SearchFilter

BatchType = Literal["Ponedoras", "Engorde"]
BatchState = Literal["Activo", "Inactivo", "Desalojado"]
BirdState = Literal["Viva", "Muerta", "Vendida", "Descarte"]


class BatchBase(BaseModel):
    tipo: BatchType
    fecha_inicio: date
    fecha_fin: Optional[date] = None
    cantidad: int = Field(..., ge=0)
    galera: RequiredStr
    estado: BatchState = "Activo"
    observaciones: Optional[str] = None


class BatchCreate(BatchBase):
    pass


class BatchUpdate(PatchModel):
    not_null = ("tipo", "fecha_inicio", "cantidad", "galera", "estado")

    tipo: Optional[BatchType] = None
    fecha_inicio: Optional[date] = None
    fecha_fin: Optional[date] = None
    cantidad: Optional[int] = Field(None, ge=0)
    galera: Optional[str] = Field(None, min_length=1)
    estado: Optional[BatchState] = None
    observaciones: Optional[str] = None


class BatchResponse(BatchBase, ORMResponse):
    id: int
    tenant_id: int
    created_at: datetime
    updated_at: datetime


class BatchListItem(BatchResponse):
    total_aves: int = 0


class BatchFilter(SearchFilter):
    """fecha_desde / fecha_hasta apply to fecha_inicio. search matches galera."""
    estado: Optional[BatchState] = None
    tipo: Optional[BatchType] = None
    galera: Optional[str] = None


class BirdBase(BaseModel):
    id_lote: Optional[int] = None
    tipo: RequiredStr
    edad: int = Field(..., ge=0)
    estado: BirdState
    peso: Optional[float] = Field(None, ge=0)
    fecha_ingreso: date
    fecha_salida: Optional[date] = None
    motivo_salida: Optional[str] = None
    produccion_huevos: int = Field(0, ge=0)


class BirdCreate(BirdBase):
    pass


class BirdUpdate(PatchModel):
    not_null = ("tipo", "edad", "estado", "fecha_ingreso", "produccion_huevos")

    id_lote: Optional[int] = None
    tipo: Optional[str] = Field(None, min_length=1)
    edad: Optional[int] = Field(None, ge=0)
    estado: Optional[BirdState] = None
    peso: Optional[float] = Field(None, ge=0)
    fecha_ingreso: Optional[date] = None
    fecha_salida: Optional[date] = None
    motivo_salida: Optional[str] = None
    produccion_huevos: Optional[int] = Field(None, ge=0)


class BirdResponse(BirdBase, ORMResponse):
    id: int
    tenant_id: int
    created_at: datetime
    updated_at: datetime


class BatchDetail(BatchResponse):
    aves: List[BirdResponse] = []
    total_aves: int = 0


class BirdFilter(SearchFilter):
    """fecha_desde / fecha_hasta apply to fecha_ingreso. search matches tipo."""
    estado: Optional[BirdState] = None
    tipo: Optional[str] = None
    id_lote: Optional[int] = None
