"""
Attendance Endpoints

Daily attendance of employees. One record per employee per date.

RBAC:
- List/view/stats: All authenticated users
- Create/update: admin, gerente, supervisor
- Delete: admin, gerente
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from farm_api.database import get_db
from farm_api.models.employee import Attendance, Employee
from farm_api.schemas.common import DateRangeFilter
from farm_api.schemas.employee import (
    AttendanceCreate,
    AttendanceFilter,
    AttendanceResponse,
    AttendanceUpdate,
)
from farm_api.api.deps import CurrentUser, get_current_user
from farm_api.api.crud import apply_changes, ensure_reference, get_scoped_or_404, save, scoped
from farm_api.api.filters import date_range, equals, search
from farm_api.api.stats import group_counts, totals
from farm_api.core.permissions import MANAGERS, SUPERVISORS, require_roles
from farm_api.services.attendance import ensure_single_attendance, register_attendance
from farm_api.utils.logging import get_logger
from farm_api.utils.pagination import Pagination, get_pagination, paginated
from farm_api.utils.responses import success_response

logger = get_logger(__name__)

router = APIRouter(prefix="/asistencias", tags=["asistencias"])


def attendance_conditions(filters: AttendanceFilter) -> list:
    return [
        *equals(Attendance.id_empleado, filters.id_empleado),
        *equals(Attendance.estado, filters.estado),
        *date_range(Attendance.fecha, filters.fecha_desde, filters.fecha_hasta),
        *search([Attendance.observaciones], filters.search),
    ]


@router.get("")
def list_attendance(
    filters: AttendanceFilter = Depends(),
    pagination: Pagination = Depends(get_pagination),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    query = scoped(db, Attendance, current_user.tenant_id).filter(*attendance_conditions(filters))
    total = query.count()
    records = pagination.apply(
        query.order_by(Attendance.fecha.desc(), Attendance.id.desc())
    ).all()

    items = [AttendanceResponse.model_validate(record) for record in records]
    return success_response(paginated(items, total, pagination))


@router.get("/stats")
def attendance_stats(
    filters: DateRangeFilter = Depends(),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Record count, breakdown by estado and the ten employees with most records."""
    tenant_id = current_user.tenant_id
    conditions = date_range(Attendance.fecha, filters.fecha_desde, filters.fecha_hasta)

    return success_response({
        "total_registros": totals(db, Attendance, tenant_id, conditions)["registros"],
        "asistencias_por_estado": group_counts(db, Attendance, tenant_id, Attendance.estado, conditions),
        "asistencias_por_empleado": group_counts(
            db, Attendance, tenant_id, Attendance.id_empleado, conditions, limit=10
        ),
    })


@router.get("/{asistencia_id}")
def get_attendance(
    asistencia_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    record = get_scoped_or_404(db, Attendance, asistencia_id, current_user.tenant_id, "Asistencia")
    return success_response(AttendanceResponse.model_validate(record))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_attendance(
    attendance_data: AttendanceCreate,
    current_user: CurrentUser = Depends(require_roles(*SUPERVISORS)),
    db: Session = Depends(get_db)
):
    fields = attendance_data.model_dump(exclude={"id_empleado"})
    record = register_attendance(
        db,
        current_user.tenant_id,
        attendance_data.id_empleado,
        fields,
        user_id=current_user.user_id,
    )

    return success_response(AttendanceResponse.model_validate(record), "Asistencia registrada exitosamente")


@router.put("/{asistencia_id}")
def update_attendance(
    asistencia_id: int,
    attendance_data: AttendanceUpdate,
    current_user: CurrentUser = Depends(require_roles(*SUPERVISORS)),
    db: Session = Depends(get_db)
):
    record = get_scoped_or_404(db, Attendance, asistencia_id, current_user.tenant_id, "Asistencia")

    changes = attendance_data.changes()
    if "id_empleado" in changes:
        ensure_reference(db, Employee, changes["id_empleado"], current_user.tenant_id, "Empleado")
    if "id_empleado" in changes or "fecha" in changes:
        ensure_single_attendance(
            db,
            current_user.tenant_id,
            changes.get("id_empleado", record.id_empleado),
            changes.get("fecha", record.fecha),
            exclude_id=record.id,
        )

    apply_changes(record, changes)
    save(db, record)

    return success_response(AttendanceResponse.model_validate(record), "Asistencia actualizada exitosamente")


@router.delete("/{asistencia_id}")
def delete_attendance(
    asistencia_id: int,
    current_user: CurrentUser = Depends(require_roles(*MANAGERS)),
    db: Session = Depends(get_db)
):
    record = get_scoped_or_404(db, Attendance, asistencia_id, current_user.tenant_id, "Asistencia")

    db.delete(record)
    db.commit()

    logger.info(f"Attendance deleted: {asistencia_id} by {current_user.user_id}")

    return success_response(message="Asistencia eliminada exitosamente")
