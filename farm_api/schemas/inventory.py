"""
Inventory Schemas
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from farm_api.schemas.common import ORMResponse, PatchModel, RequiredStr, SearchFilter


class InventoryBase(BaseModel):
    nombre: RequiredStr
    cantidad: float = Field(..., ge=0)
    unidad: RequiredStr
    categoria: Optional[str] = None
    minimo_stock: Optional[float] = Field(None, ge=0)
    proveedor: Optional[str] = None
    observaciones: Optional[str] = None


class InventoryCreate(InventoryBase):
    pass


class InventoryUpdate(PatchModel):
    not_null = ("nombre", "cantidad", "unidad")

    nombre: Optional[str] = Field(None, min_length=1)
    cantidad: Optional[float] = Field(None, ge=0)
    unidad: Optional[str] = Field(None, min_length=1)
    categoria: Optional[str] = None
    minimo_stock: Optional[float] = Field(None, ge=0)
    proveedor: Optional[str] = None
    observaciones: Optional[str] = None


class InventoryResponse(InventoryBase, ORMResponse):
    id: int
    tenant_id: int
    created_at: datetime
    updated_at: datetime
    estado_stock: Optional[str] = None


class StockUpdate(BaseModel):
    """operacion is one of entrada, salida or ajuste; checked when applied."""
    operacion: RequiredStr
    cantidad: float = Field(..., ge=0)
    observaciones: Optional[str] = None


class InventoryFilter(SearchFilter):
    """search matches nombre and proveedor. stock_bajo keeps items at or below their minimum."""
    categoria: Optional[str] = None
    stock_bajo: Optional[bool] = None
