"""
Sale Schemas

A sale is created together with its lines in a single request.
"""
from pydantic import BaseModel, Field
from typing import List, Literal, Optional
from datetime import date, datetime

from farm_api.schemas.common import ORMResponse, SearchFilter

SaleState = Literal["Completada", "Cancelada", "Pendiente"]


class SaleLineCreate(BaseModel):
    id_producto: int
    cantidad: int = Field(..., gt=0)
    precio_unitario: float = Field(..., ge=0)


class SaleCreate(BaseModel):
    id_cliente: Optional[int] = None
    fecha: date
    estado: SaleState = "Completada"
    observaciones: Optional[str] = None
    detalles: List[SaleLineCreate] = Field(..., min_length=1)


class SaleStateUpdate(BaseModel):
    estado: SaleState


class SaleLineResponse(ORMResponse):
    id: int
    id_producto: int
    cantidad: int
    precio_unitario: float
    subtotal: float
    producto_nombre: Optional[str] = None


class SaleResponse(ORMResponse):
    id: int
    tenant_id: int
    id_cliente: Optional[int]
    id_usuario: Optional[int]
    fecha: date
    total: float
    estado: str
    observaciones: Optional[str]
    created_at: datetime
    cliente_nombre: Optional[str] = None
    detalles: List[SaleLineResponse] = []


class SaleFilter(SearchFilter):
    """search matches observaciones and the client name."""
    estado: Optional[SaleState] = None
    id_cliente: Optional[int] = None
