"""
Product Schemas
"""
from pydantic import AliasChoices, BaseModel, Field
from typing import Optional
from datetime import datetime

from farm_api.schemas.common import ORMResponse, PatchModel, RequiredStr, SearchFilter


class ProductBase(BaseModel):
    nombre: RequiredStr
    tamanio: Optional[str] = None
    precio: float = Field(..., ge=0)
    stock: int = Field(0, ge=0)
    categoria: Optional[str] = None
    activo: bool = True


class ProductCreate(ProductBase):
    pass


class ProductUpdate(PatchModel):
    not_null = ("nombre", "precio", "stock", "activo")

    nombre: Optional[str] = Field(None, min_length=1)
    tamanio: Optional[str] = None
    precio: Optional[float] = Field(None, ge=0)
    stock: Optional[int] = Field(None, ge=0)
    categoria: Optional[str] = None
    activo: Optional[bool] = None


class ProductResponse(ProductBase, ORMResponse):
    id: int
    tenant_id: int
    created_at: datetime
    updated_at: datetime


class ProductStockUpdate(BaseModel):
    """
    Stock change for a product.

    Older clients send {"stock": n} to set the stock directly, so `stock`
    is accepted as an alias of `cantidad` and the operation defaults to
    `ajuste`.
    """
    operacion: str = "ajuste"
    cantidad: int = Field(..., ge=0, validation_alias=AliasChoices("cantidad", "stock"))
    observaciones: Optional[str] = None


class ProductFilter(SearchFilter):
    """search matches nombre. fecha_desde / fecha_hasta apply to created_at."""
    categoria: Optional[str] = None
    activo: Optional[bool] = None
