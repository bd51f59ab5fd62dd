"""
Operating Expense Schemas
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime

from farm_api.schemas.common import ORMResponse, PatchModel, RequiredStr, SearchFilter


class ExpenseBase(BaseModel):
    fecha: date
    categoria: RequiredStr
    descripcion: Optional[str] = None
    monto: float = Field(..., gt=0)
    metodo_pago: Optional[str] = None


class ExpenseCreate(ExpenseBase):
    pass


class ExpenseUpdate(PatchModel):
    not_null = ("fecha", "categoria", "monto")

    fecha: Optional[date] = None
    categoria: Optional[str] = Field(None, min_length=1)
    descripcion: Optional[str] = None
    monto: Optional[float] = Field(None, gt=0)
    metodo_pago: Optional[str] = None


class ExpenseResponse(ExpenseBase, ORMResponse):
    id: int
    tenant_id: int
    id_usuario: Optional[int]
    created_at: datetime


class ExpenseFilter(SearchFilter):
    """search matches descripcion."""
    categoria: Optional[str] = None
    metodo_pago: Optional[str] = None
