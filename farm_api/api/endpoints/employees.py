"""
Employee Endpoints

CRUD operations for employees, job title summary and attendance shortcut.

RBAC:
- List/view/create/update: All authenticated users
- Register attendance: admin, gerente, supervisor
- Delete: admin, gerente

An employee with loans or attendance records cannot be deleted (409).
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from farm_api.database import get_db
from farm_api.models.employee import Attendance, Employee, EmployeeLoan
from farm_api.schemas.employee import (
    AttendanceResponse,
    EmployeeAttendanceCreate,
    EmployeeCreate,
    EmployeeFilter,
    EmployeeResponse,
    EmployeeUpdate,
)
from farm_api.api.deps import CurrentUser, get_current_user
from farm_api.api.crud import apply_changes, ensure_no_dependents, get_scoped_or_404, save, scoped
from farm_api.api.filters import date_range, equals, search
from farm_api.core.permissions import MANAGERS, SUPERVISORS, require_roles
from farm_api.services.attendance import register_attendance
from farm_api.utils.logging import get_logger
from farm_api.utils.pagination import Pagination, get_pagination, paginated
from farm_api.utils.responses import success_response

logger = get_logger(__name__)

router = APIRouter(prefix="/empleados", tags=["empleados"])


def employee_conditions(filters: EmployeeFilter) -> list:
    return [
        *equals(Employee.puesto, filters.puesto),
        *equals(Employee.activo, filters.activo),
        *date_range(Employee.fecha_contratacion, filters.fecha_desde, filters.fecha_hasta),
        *search([Employee.nombre, Employee.apellido, Employee.puesto], filters.search),
    ]


@router.get("")
def list_employees(
    filters: EmployeeFilter = Depends(),
    pagination: Pagination = Depends(get_pagination),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    query = scoped(db, Employee, current_user.tenant_id).filter(*employee_conditions(filters))
    total = query.count()
    employees = pagination.apply(
        query.order_by(Employee.apellido.asc(), Employee.nombre.asc(), Employee.id.asc())
    ).all()

    items = [EmployeeResponse.model_validate(employee) for employee in employees]
    return success_response(paginated(items, total, pagination))


@router.get("/puestos")
def employee_positions(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Job titles with the number of employees holding each."""
    rows = (
        db.query(Employee.puesto, func.count(Employee.id))
        .filter(Employee.tenant_id == current_user.tenant_id)
        .group_by(Employee.puesto)
        .order_by(Employee.puesto)
        .all()
    )
    return success_response([{"puesto": puesto, "cantidad": count} for puesto, count in rows])


@router.get("/{empleado_id}")
def get_employee(
    empleado_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    employee = get_scoped_or_404(db, Employee, empleado_id, current_user.tenant_id, "Empleado")
    return success_response(EmployeeResponse.model_validate(employee))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_employee(
    employee_data: EmployeeCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    employee = save(db, Employee(tenant_id=current_user.tenant_id, **employee_data.model_dump()))

    logger.info(f"Employee created: {employee.id} by {current_user.user_id}")

    return success_response(EmployeeResponse.model_validate(employee), "Empleado creado exitosamente")


@router.put("/{empleado_id}")
def update_employee(
    empleado_id: int,
    employee_data: EmployeeUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    employee = get_scoped_or_404(db, Employee, empleado_id, current_user.tenant_id, "Empleado")

    apply_changes(employee, employee_data.changes())
    save(db, employee)

    return success_response(EmployeeResponse.model_validate(employee), "Empleado actualizado exitosamente")


@router.post("/{empleado_id}/asistencia", status_code=status.HTTP_201_CREATED)
def register_employee_attendance(
    empleado_id: int,
    attendance_data: EmployeeAttendanceCreate,
    current_user: CurrentUser = Depends(require_roles(*SUPERVISORS)),
    db: Session = Depends(get_db)
):
    attendance = register_attendance(
        db,
        current_user.tenant_id,
        empleado_id,
        attendance_data.model_dump(),
        user_id=current_user.user_id,
    )

    logger.info(f"Attendance registered: employee={empleado_id} fecha={attendance.fecha}")

    return success_response(AttendanceResponse.model_validate(attendance), "Asistencia registrada exitosamente")


@router.delete("/{empleado_id}")
def delete_employee(
    empleado_id: int,
    current_user: CurrentUser = Depends(require_roles(*MANAGERS)),
    db: Session = Depends(get_db)
):
    employee = get_scoped_or_404(db, Employee, empleado_id, current_user.tenant_id, "Empleado")

    ensure_no_dependents(
        db,
        [
            (EmployeeLoan, EmployeeLoan.id_empleado == employee.id),
            (Attendance, Attendance.id_empleado == employee.id),
        ],
        "No se puede eliminar el empleado porque tiene préstamos o asistencias registradas",
    )

    db.delete(employee)
    db.commit()

    logger.info(f"Employee deleted: {empleado_id} by {current_user.user_id}")

    return success_response(message="Empleado eliminado exitosamente")
