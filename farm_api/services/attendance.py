"""
Attendance registration.

Shared by POST /asistencias and POST /empleados/{id}/asistencia.
"""
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from farm_api.api.crud import ensure_reference, save, scoped
from farm_api.core.exceptions import DuplicateKey
from farm_api.models.employee import Attendance, Employee


def ensure_single_attendance(db: Session, tenant_id: int, employee_id: int, fecha: date,
                             exclude_id: Optional[int] = None) -> None:
    """An employee has at most one attendance record per day."""
    query = scoped(db, Attendance, tenant_id).filter(
        Attendance.id_empleado == employee_id,
        Attendance.fecha == fecha,
    )
    if exclude_id is not None:
        query = query.filter(Attendance.id != exclude_id)
    if query.first() is not None:
        raise DuplicateKey("Ya existe un registro de asistencia para esta fecha")


def register_attendance(db: Session, tenant_id: int, employee_id: int, fields: dict,
                        user_id: Optional[int] = None) -> Attendance:
    ensure_reference(db, Employee, employee_id, tenant_id, "Empleado")
    ensure_single_attendance(db, tenant_id, employee_id, fields["fecha"])

    return save(db, Attendance(
        tenant_id=tenant_id,
        id_empleado=employee_id,
        id_usuario_registro=user_id,
        **fields,
    ))
