"""
Employee Loan Endpoints

Advances and loans given to employees.

RBAC:
- List/view/stats: All authenticated users
- Create/update: admin, gerente
- Delete: admin
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from farm_api.database import get_db
from farm_api.models.employee import Employee, EmployeeLoan
from farm_api.schemas.common import DateRangeFilter
from farm_api.schemas.employee import LoanCreate, LoanFilter, LoanResponse, LoanUpdate
from farm_api.api.deps import CurrentUser, get_current_user
from farm_api.api.crud import apply_changes, ensure_reference, get_scoped_or_404, save, scoped
from farm_api.api.filters import date_range, equals, search
from farm_api.api.stats import group_counts, totals
from farm_api.core.permissions import ADMIN_ONLY, MANAGERS, require_roles
from farm_api.utils.logging import get_logger
from farm_api.utils.pagination import Pagination, get_pagination, paginated
from farm_api.utils.responses import success_response

logger = get_logger(__name__)

router = APIRouter(prefix="/prestamos-empleados", tags=["prestamos-empleados"])


def loan_conditions(filters: LoanFilter) -> list:
    return [
        *equals(EmployeeLoan.id_empleado, filters.id_empleado),
        *equals(EmployeeLoan.estado, filters.estado),
        *date_range(EmployeeLoan.fecha, filters.fecha_desde, filters.fecha_hasta),
        *search([EmployeeLoan.descripcion], filters.search),
    ]


@router.get("")
def list_loans(
    filters: LoanFilter = Depends(),
    pagination: Pagination = Depends(get_pagination),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    query = scoped(db, EmployeeLoan, current_user.tenant_id).filter(*loan_conditions(filters))
    total = query.count()
    loans = pagination.apply(
        query.order_by(EmployeeLoan.fecha.desc(), EmployeeLoan.id.desc())
    ).all()

    items = [LoanResponse.model_validate(loan) for loan in loans]
    return success_response(paginated(items, total, pagination))


@router.get("/stats")
def loan_stats(
    filters: DateRangeFilter = Depends(),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Loan count and amounts, by estado and for the ten most indebted employees."""
    tenant_id = current_user.tenant_id
    conditions = date_range(EmployeeLoan.fecha, filters.fecha_desde, filters.fecha_hasta)
    summary = totals(db, EmployeeLoan, tenant_id, conditions, sum_column=EmployeeLoan.monto)

    return success_response({
        "total_prestamos": summary["registros"],
        "monto_total": summary["suma"],
        "promedio_monto": summary["promedio"],
        "prestamos_por_estado": group_counts(
            db, EmployeeLoan, tenant_id, EmployeeLoan.estado, conditions,
            sum_column=EmployeeLoan.monto,
        ),
        "prestamos_por_empleado": group_counts(
            db, EmployeeLoan, tenant_id, EmployeeLoan.id_empleado, conditions,
            sum_column=EmployeeLoan.monto, limit=10,
        ),
    })


@router.get("/{prestamo_id}")
def get_loan(
    prestamo_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    loan = get_scoped_or_404(db, EmployeeLoan, prestamo_id, current_user.tenant_id, "Préstamo")
    return success_response(LoanResponse.model_validate(loan))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_loan(
    loan_data: LoanCreate,
    current_user: CurrentUser = Depends(require_roles(*MANAGERS)),
    db: Session = Depends(get_db)
):
    ensure_reference(db, Employee, loan_data.id_empleado, current_user.tenant_id, "Empleado")

    loan = save(db, EmployeeLoan(
        tenant_id=current_user.tenant_id,
        id_usuario=current_user.user_id,
        **loan_data.model_dump(),
    ))

    logger.info(f"Loan created: {loan.id} employee={loan.id_empleado} by {current_user.user_id}")

    return success_response(LoanResponse.model_validate(loan), "Préstamo creado exitosamente")


@router.put("/{prestamo_id}")
def update_loan(
    prestamo_id: int,
    loan_data: LoanUpdate,
    current_user: CurrentUser = Depends(require_roles(*MANAGERS)),
    db: Session = Depends(get_db)
):
    loan = get_scoped_or_404(db, EmployeeLoan, prestamo_id, current_user.tenant_id, "Préstamo")

    changes = loan_data.changes()
    if "id_empleado" in changes:
        ensure_reference(db, Employee, changes["id_empleado"], current_user.tenant_id, "Empleado")

    apply_changes(loan, changes)
    save(db, loan)

    return success_response(LoanResponse.model_validate(loan), "Préstamo actualizado exitosamente")


@router.delete("/{prestamo_id}")
def delete_loan(
    prestamo_id: int,
    current_user: CurrentUser = Depends(require_roles(*ADMIN_ONLY)),
    db: Session = Depends(get_db)
):
    loan = get_scoped_or_404(db, EmployeeLoan, prestamo_id, current_user.tenant_id, "Préstamo")

    db.delete(loan)
    db.commit()

    logger.info(f"Loan deleted: {prestamo_id} by {current_user.user_id}")

    return success_response(message="Préstamo eliminado exitosamente")
