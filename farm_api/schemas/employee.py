"""
Employee, Attendance and Loan Schemas
"""
from pydantic import BaseModel, Field
from typing import Literal, Optional
from datetime import date, datetime, time

from farm_api.schemas.common import ORMResponse, PatchModel, RequiredStr, SearchFilter

AttendanceState = Literal["Presente", "Tardanza", "Ausente", "Justificado"]
LoanState = Literal["Pendiente", "Pagado", "Cancelado"]


class EmployeeBase(BaseModel):
    nombre: RequiredStr
    apellido: RequiredStr
    puesto: RequiredStr
    salario: float = Field(..., ge=0)
    fecha_contratacion: date
    telefono: Optional[str] = None
    correo: Optional[str] = None
    activo: bool = True


class EmployeeCreate(EmployeeBase):
    pass


class EmployeeUpdate(PatchModel):
    not_null = ("nombre", "apellido", "puesto", "salario", "fecha_contratacion", "activo")

    nombre: Optional[str] = Field(None, min_length=1)
    apellido: Optional[str] = Field(None, min_length=1)
    puesto: Optional[str] = Field(None, min_length=1)
    salario: Optional[float] = Field(None, ge=0)
    fecha_contratacion: Optional[date] = None
    telefono: Optional[str] = None
    correo: Optional[str] = None
    activo: Optional[bool] = None


class EmployeeResponse(EmployeeBase, ORMResponse):
    id: int
    tenant_id: int
    created_at: datetime
    updated_at: datetime


class EmployeeFilter(SearchFilter):
    """search matches nombre, apellido and puesto. Dates apply to fecha_contratacion."""
    puesto: Optional[str] = None
    activo: Optional[bool] = None


# ----------------------------------------------------------------------------
# Attendance
# ----------------------------------------------------------------------------

class AttendanceFields(BaseModel):
    fecha: date
    hora_entrada: time
    hora_salida: Optional[time] = None
    estado: AttendanceState = "Presente"
    observaciones: Optional[str] = None


class AttendanceCreate(AttendanceFields):
    id_empleado: int


class EmployeeAttendanceCreate(AttendanceFields):
    """Attendance registered from /empleados/{id}/asistencia."""


class AttendanceUpdate(PatchModel):
    not_null = ("id_empleado", "fecha", "hora_entrada", "estado")

    id_empleado: Optional[int] = None
    fecha: Optional[date] = None
    hora_entrada: Optional[time] = None
    hora_salida: Optional[time] = None
    estado: Optional[AttendanceState] = None
    observaciones: Optional[str] = None


class AttendanceResponse(AttendanceCreate, ORMResponse):
    id: int
    tenant_id: int
    id_usuario_registro: Optional[int]
    created_at: datetime


class AttendanceFilter(SearchFilter):
    """search matches the observations."""
    id_empleado: Optional[int] = None
    estado: Optional[AttendanceState] = None


# ----------------------------------------------------------------------------
# Loans
# ----------------------------------------------------------------------------

class LoanBase(BaseModel):
    id_empleado: int
    fecha: date
    monto: float = Field(..., gt=0)
    descripcion: Optional[str] = None
    estado: LoanState = "Pendiente"
    cuotas: int = Field(1, ge=1)


class LoanCreate(LoanBase):
    pass


class LoanUpdate(PatchModel):
    not_null = ("id_empleado", "fecha", "monto", "estado", "cuotas")

    id_empleado: Optional[int] = None
    fecha: Optional[date] = None
    monto: Optional[float] = Field(None, gt=0)
    descripcion: Optional[str] = None
    estado: Optional[LoanState] = None
    cuotas: Optional[int] = Field(None, ge=1)


class LoanResponse(LoanBase, ORMResponse):
    id: int
    tenant_id: int
    id_usuario: Optional[int]
    created_at: datetime


class LoanFilter(SearchFilter):
    """search matches descripcion."""
    id_empleado: Optional[int] = None
    estado: Optional[LoanState] = None
