"""
Operating Expense Endpoints

RBAC:
- List/view/stats: All authenticated users
- Create/update: admin, gerente, supervisor
- Delete: admin, gerente
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from farm_api.database import get_db
from farm_api.models.expense import Expense
from farm_api.schemas.common import DateRangeFilter
from farm_api.schemas.expense import ExpenseCreate, ExpenseFilter, ExpenseResponse, ExpenseUpdate
from farm_api.api.deps import CurrentUser, get_current_user
from farm_api.api.crud import apply_changes, get_scoped_or_404, save, scoped
from farm_api.api.filters import date_range, equals, search
from farm_api.api.stats import group_counts, totals
from farm_api.core.permissions import MANAGERS, SUPERVISORS, require_roles
from farm_api.utils.logging import get_logger
from farm_api.utils.pagination import Pagination, get_pagination, paginated
from farm_api.utils.responses import success_response

logger = get_logger(__name__)

router = APIRouter(prefix="/gastos-operacion", tags=["gastos-operacion"])


def expense_conditions(filters: ExpenseFilter) -> list:
    return [
        *equals(Expense.categoria, filters.categoria),
        *equals(Expense.metodo_pago, filters.metodo_pago),
        *date_range(Expense.fecha, filters.fecha_desde, filters.fecha_hasta),
        *search([Expense.descripcion, Expense.categoria], filters.search),
    ]


@router.get("")
def list_expenses(
    filters: ExpenseFilter = Depends(),
    pagination: Pagination = Depends(get_pagination),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    query = scoped(db, Expense, current_user.tenant_id).filter(*expense_conditions(filters))
    total = query.count()
    expenses = pagination.apply(query.order_by(Expense.fecha.desc(), Expense.id.desc())).all()

    items = [ExpenseResponse.model_validate(expense) for expense in expenses]
    return success_response(paginated(items, total, pagination))


@router.get("/stats")
def expense_stats(
    filters: DateRangeFilter = Depends(),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    tenant_id = current_user.tenant_id
    conditions = date_range(Expense.fecha, filters.fecha_desde, filters.fecha_hasta)
    summary = totals(db, Expense, tenant_id, conditions, sum_column=Expense.monto)

    return success_response({
        "total_gastos": summary["registros"],
        "monto_total": summary["suma"],
        "promedio_gasto": summary["promedio"],
        "gastos_por_categoria": group_counts(
            db, Expense, tenant_id, Expense.categoria, conditions, sum_column=Expense.monto
        ),
        "gastos_por_metodo_pago": group_counts(
            db, Expense, tenant_id, Expense.metodo_pago, conditions, sum_column=Expense.monto
        ),
        "gastos_por_dia": group_counts(
            db, Expense, tenant_id, Expense.fecha, conditions, sum_column=Expense.monto, order="key"
        ),
    })


@router.get("/{gasto_id}")
def get_expense(
    gasto_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    expense = get_scoped_or_404(db, Expense, gasto_id, current_user.tenant_id, "Gasto")
    return success_response(ExpenseResponse.model_validate(expense))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_expense(
    expense_data: ExpenseCreate,
    current_user: CurrentUser = Depends(require_roles(*SUPERVISORS)),
    db: Session = Depends(get_db)
):
    expense = save(db, Expense(
        tenant_id=current_user.tenant_id,
        id_usuario=current_user.user_id,
        **expense_data.model_dump(),
    ))

    logger.info(f"Expense created: {expense.id} monto={expense.monto} by {current_user.user_id}")

    return success_response(ExpenseResponse.model_validate(expense), "Gasto creado exitosamente")


@router.put("/{gasto_id}")
def update_expense(
    gasto_id: int,
    expense_data: ExpenseUpdate,
    current_user: CurrentUser = Depends(require_roles(*SUPERVISORS)),
    db: Session = Depends(get_db)
):
    expense = get_scoped_or_404(db, Expense, gasto_id, current_user.tenant_id, "Gasto")

    apply_changes(expense, expense_data.changes())
    save(db, expense)

    return success_response(ExpenseResponse.model_validate(expense), "Gasto actualizado exitosamente")


@router.delete("/{gasto_id}")
def delete_expense(
    gasto_id: int,
    current_user: CurrentUser = Depends(require_roles(*MANAGERS)),
    db: Session = Depends(get_db)
):
    expense = get_scoped_or_404(db, Expense, gasto_id, current_user.tenant_id, "Gasto")

    db.delete(expense)
    db.commit()

    logger.info(f"Expense deleted: {gasto_id} by {current_user.user_id}")

    return success_response(message="Gasto eliminado exitosamente")
