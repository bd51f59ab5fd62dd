"""
Inventory Endpoints

Farm supplies with stock level classification.

RBAC:
- List/view/create/update/stock: All authenticated users
- Delete: admin, gerente

Every item returned carries `estado_stock` (Crítico / Bajo / Normal /
Sin mínimo definido), computed by services.inventory.stock_status.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from farm_api.database import get_db, transaction
from farm_api.models.inventory import InventoryItem
from farm_api.schemas.inventory import (
    InventoryCreate,
    InventoryFilter,
    InventoryResponse,
    InventoryUpdate,
    StockUpdate,
)
from farm_api.api.deps import CurrentUser, get_current_user
from farm_api.api.crud import apply_changes, get_scoped_or_404, save, scoped
from farm_api.api.filters import date_range, equals, search
from farm_api.core.permissions import MANAGERS, require_roles
from farm_api.services.inventory import (
    apply_stock_operation,
    low_stock_condition,
    stock_ratio,
    stock_status,
)
from farm_api.utils.logging import get_logger
from farm_api.utils.pagination import Pagination, get_pagination, paginated
from farm_api.utils.responses import success_response

logger = get_logger(__name__)

router = APIRouter(prefix="/inventario", tags=["inventario"])


def inventory_conditions(filters: InventoryFilter) -> list:
    conditions = [
        *equals(InventoryItem.categoria, filters.categoria),
        *date_range(InventoryItem.created_at, filters.fecha_desde, filters.fecha_hasta),
        *search([InventoryItem.nombre, InventoryItem.proveedor], filters.search),
    ]
    if filters.stock_bajo:
        conditions.append(InventoryItem.minimo_stock.isnot(None))
        conditions.append(InventoryItem.cantidad <= InventoryItem.minimo_stock)
    return conditions


def to_response(item: InventoryItem) -> InventoryResponse:
    response = InventoryResponse.model_validate(item)
    response.estado_stock = stock_status(item.cantidad, item.minimo_stock)
    return response


@router.get("")
def list_inventory(
    filters: InventoryFilter = Depends(),
    pagination: Pagination = Depends(get_pagination),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    query = scoped(db, InventoryItem, current_user.tenant_id).filter(*inventory_conditions(filters))
    total = query.count()
    items = pagination.apply(query.order_by(InventoryItem.nombre.asc(), InventoryItem.id.asc())).all()

    return success_response(paginated([to_response(item) for item in items], total, pagination))


@router.get("/categorias")
def inventory_categories(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    rows = (
        db.query(InventoryItem.categoria, func.count(InventoryItem.id))
        .filter(
            InventoryItem.tenant_id == current_user.tenant_id,
            InventoryItem.categoria.isnot(None),
        )
        .group_by(InventoryItem.categoria)
        .order_by(InventoryItem.categoria)
        .all()
    )
    return success_response([
        {"categoria": categoria, "cantidad": count} for categoria, count in rows
    ])


@router.get("/alertas")
def inventory_alerts(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Items at or below 1.5x their minimum stock.

    Most urgent first (lowest cantidad / minimo_stock).
    """
    items = (
        scoped(db, InventoryItem, current_user.tenant_id)
        .filter(low_stock_condition(InventoryItem.cantidad, InventoryItem.minimo_stock))
        .order_by(
            stock_ratio(InventoryItem.cantidad, InventoryItem.minimo_stock).asc().nulls_last(),
            InventoryItem.id.asc(),
        )
        .all()
    )
    return success_response([to_response(item) for item in items])


@router.get("/{inventario_id}")
def get_inventory_item(
    inventario_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    item = get_scoped_or_404(db, InventoryItem, inventario_id, current_user.tenant_id, "Item de inventario")
    return success_response(to_response(item))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_inventory_item(
    item_data: InventoryCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    item = save(db, InventoryItem(tenant_id=current_user.tenant_id, **item_data.model_dump()))

    logger.info(f"Inventory item created: {item.id} by {current_user.user_id}")

    return success_response(to_response(item), "Item de inventario creado exitosamente")


@router.put("/{inventario_id}")
def update_inventory_item(
    inventario_id: int,
    item_data: InventoryUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    item = get_scoped_or_404(db, InventoryItem, inventario_id, current_user.tenant_id, "Item de inventario")

    apply_changes(item, item_data.changes())
    save(db, item)

    return success_response(to_response(item), "Item de inventario actualizado exitosamente")


@router.patch("/{inventario_id}/stock")
def update_inventory_stock(
    inventario_id: int,
    stock_data: StockUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Register a stock movement.

    A salida larger than the current quantity is rejected and nothing
    changes.
    """
    with transaction(db):
        item = get_scoped_or_404(
            db, InventoryItem, inventario_id, current_user.tenant_id, "Item de inventario",
            for_update=True,
        )
        item.cantidad = apply_stock_operation(item.cantidad, stock_data.operacion, stock_data.cantidad)
        if stock_data.observaciones:
            item.observaciones = stock_data.observaciones

    logger.info(
        f"Inventory stock {stock_data.operacion}: {item.id} -> {item.cantidad}",
        extra={"tenant_id": current_user.tenant_id, "user_id": current_user.user_id}
    )

    return success_response(to_response(item), "Stock actualizado exitosamente")


@router.delete("/{inventario_id}")
def delete_inventory_item(
    inventario_id: int,
    current_user: CurrentUser = Depends(require_roles(*MANAGERS)),
    db: Session = Depends(get_db)
):
    item = get_scoped_or_404(db, InventoryItem, inventario_id, current_user.tenant_id, "Item de inventario")

    db.delete(item)
    db.commit()

    logger.info(f"Inventory item deleted: {inventario_id} by {current_user.user_id}")

    return success_response(message="Item de inventario eliminado exitosamente")
