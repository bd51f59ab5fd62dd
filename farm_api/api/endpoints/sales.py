"""
Sale Endpoints

Sales are created with their lines in one request and are never edited or
deleted afterwards; only their estado can change (e.g. to Cancelada).

RBAC:
- All operations: All authenticated users
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, selectinload

from farm_api.database import get_db
from farm_api.models.client import Client
from farm_api.models.sale import Sale, SaleLine
from farm_api.schemas.common import DateRangeFilter
from farm_api.schemas.sale import SaleCreate, SaleFilter, SaleResponse, SaleStateUpdate
from farm_api.api.deps import CurrentUser, get_current_user
from farm_api.api.crud import get_scoped_or_404, save, scoped
from farm_api.api.filters import date_range, equals, search
from farm_api.api.stats import group_counts
from farm_api.services.sales import create_sale
from farm_api.utils.logging import get_logger
from farm_api.utils.pagination import Pagination, get_pagination, paginated
from farm_api.utils.responses import success_response

logger = get_logger(__name__)

router = APIRouter(prefix="/ventas", tags=["ventas"])

# Days covered by the per-day breakdown of /estadisticas
DAILY_STATS_DAYS = 30


def sale_conditions(filters: SaleFilter) -> list:
    conditions = [
        *equals(Sale.estado, filters.estado),
        *equals(Sale.id_cliente, filters.id_cliente),
        *date_range(Sale.fecha, filters.fecha_desde, filters.fecha_hasta),
    ]
    if filters.search:
        matching_clients = select(Client.id).where(*search([Client.nombre], filters.search))
        conditions.append(or_(
            Sale.id_cliente.in_(matching_clients),
            *search([Sale.observaciones], filters.search),
        ))
    return conditions


def _with_lines(query):
    return query.options(
        selectinload(Sale.detalles).selectinload(SaleLine.producto),
        selectinload(Sale.cliente),
    )


@router.get("")
def list_sales(
    filters: SaleFilter = Depends(),
    pagination: Pagination = Depends(get_pagination),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    query = scoped(db, Sale, current_user.tenant_id).filter(*sale_conditions(filters))
    total = query.count()
    sales = pagination.apply(
        _with_lines(query).order_by(Sale.fecha.desc(), Sale.id.desc())
    ).all()

    items = [SaleResponse.model_validate(sale) for sale in sales]
    return success_response(paginated(items, total, pagination))


@router.get("/estadisticas")
def sale_statistics(
    filters: DateRangeFilter = Depends(),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Sales totals for the tenant.

    Sum, count and average of totals, a breakdown by estado and the totals
    of the last 30 days that had sales.
    """
    tenant_id = current_user.tenant_id
    conditions = date_range(Sale.fecha, filters.fecha_desde, filters.fecha_hasta)

    count, amount, average = (
        db.query(func.count(Sale.id), func.sum(Sale.total), func.avg(Sale.total))
        .filter(Sale.tenant_id == tenant_id, *conditions)
        .one()
    )

    by_day = (
        db.query(Sale.fecha, func.count(Sale.id), func.coalesce(func.sum(Sale.total), 0))
        .filter(Sale.tenant_id == tenant_id, *conditions)
        .group_by(Sale.fecha)
        .order_by(Sale.fecha.desc())
        .limit(DAILY_STATS_DAYS)
        .all()
    )

    return success_response({
        "total_ventas": {
            "cantidad": count,
            "suma": float(amount or 0),
            "promedio": float(average or 0),
        },
        "ventas_por_estado": group_counts(
            db, Sale, tenant_id, Sale.estado, conditions, sum_column=Sale.total
        ),
        "ventas_por_dia": [
            {"fecha": fecha, "cantidad": day_count, "total": float(day_total)}
            for fecha, day_count, day_total in by_day
        ],
    })


@router.get("/{venta_id}")
def get_sale(
    venta_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    sale = get_scoped_or_404(db, Sale, venta_id, current_user.tenant_id, "Venta")
    return success_response(SaleResponse.model_validate(sale))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_sale_endpoint(
    sale_data: SaleCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Register a sale.

    Stock of every product is decremented in the same transaction; if any
    line cannot be fulfilled nothing is stored.
    """
    sale = create_sale(db, sale_data, current_user.tenant_id, current_user.user_id)
    return success_response(SaleResponse.model_validate(sale), "Venta creada exitosamente")


@router.patch("/{venta_id}/estado")
def update_sale_state(
    venta_id: int,
    state_data: SaleStateUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    sale = get_scoped_or_404(db, Sale, venta_id, current_user.tenant_id, "Venta")

    sale.estado = state_data.estado
    save(db, sale)

    logger.info(f"Sale {sale.id} estado -> {sale.estado} by {current_user.user_id}")

    return success_response(SaleResponse.model_validate(sale), "Estado de venta actualizado exitosamente")
