"""
Product Endpoints

CRUD operations for products, stock adjustments and category summary.

RBAC:
- List/view/create/update/stock: All authenticated users
- Delete: admin, gerente

A product that appears in a sale cannot be deleted (409).
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from farm_api.database import get_db, transaction
from farm_api.models.product import Product
from farm_api.models.sale import SaleLine
from farm_api.schemas.product import (
    ProductCreate,
    ProductFilter,
    ProductResponse,
    ProductStockUpdate,
    ProductUpdate,
)
from farm_api.api.deps import CurrentUser, get_current_user
from farm_api.api.crud import apply_changes, ensure_no_dependents, get_scoped_or_404, save, scoped
from farm_api.api.filters import date_range, equals, search
from farm_api.core.permissions import MANAGERS, require_roles
from farm_api.services.inventory import apply_stock_operation
from farm_api.utils.logging import get_logger
from farm_api.utils.pagination import Pagination, get_pagination, paginated
from farm_api.utils.responses import success_response

logger = get_logger(__name__)

router = APIRouter(prefix="/productos", tags=["productos"])


def product_conditions(filters: ProductFilter) -> list:
    return [
        *equals(Product.categoria, filters.categoria),
        *equals(Product.activo, filters.activo),
        *date_range(Product.created_at, filters.fecha_desde, filters.fecha_hasta),
        *search([Product.nombre, Product.tamanio], filters.search),
    ]


@router.get("")
def list_products(
    filters: ProductFilter = Depends(),
    pagination: Pagination = Depends(get_pagination),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    query = scoped(db, Product, current_user.tenant_id).filter(*product_conditions(filters))
    total = query.count()
    products = pagination.apply(query.order_by(Product.nombre.asc(), Product.id.asc())).all()

    items = [ProductResponse.model_validate(product) for product in products]
    return success_response(paginated(items, total, pagination))


@router.get("/categorias")
def product_categories(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Product categories with the number of products in each."""
    rows = (
        db.query(Product.categoria, func.count(Product.id))
        .filter(Product.tenant_id == current_user.tenant_id, Product.categoria.isnot(None))
        .group_by(Product.categoria)
        .order_by(Product.categoria)
        .all()
    )
    return success_response([
        {"categoria": categoria, "cantidad": count} for categoria, count in rows
    ])


@router.get("/{producto_id}")
def get_product(
    producto_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    product = get_scoped_or_404(db, Product, producto_id, current_user.tenant_id, "Producto")
    return success_response(ProductResponse.model_validate(product))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_product(
    product_data: ProductCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    product = save(db, Product(tenant_id=current_user.tenant_id, **product_data.model_dump()))

    logger.info(f"Product created: {product.id} by {current_user.user_id}")

    return success_response(ProductResponse.model_validate(product), "Producto creado exitosamente")


@router.put("/{producto_id}")
def update_product(
    producto_id: int,
    product_data: ProductUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    product = get_scoped_or_404(db, Product, producto_id, current_user.tenant_id, "Producto")

    apply_changes(product, product_data.changes())
    save(db, product)

    return success_response(ProductResponse.model_validate(product), "Producto actualizado exitosamente")


@router.patch("/{producto_id}/stock")
def update_product_stock(
    producto_id: int,
    stock_data: ProductStockUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Change a product's stock.

    entrada adds, salida subtracts (never below zero), ajuste sets the
    value. `{"stock": n}` alone sets the stock to n.
    """
    with transaction(db):
        product = get_scoped_or_404(
            db, Product, producto_id, current_user.tenant_id, "Producto", for_update=True
        )
        product.stock = apply_stock_operation(product.stock, stock_data.operacion, stock_data.cantidad)

    logger.info(
        f"Product stock {stock_data.operacion}: {product.id} -> {product.stock}",
        extra={"tenant_id": current_user.tenant_id, "user_id": current_user.user_id}
    )

    return success_response(ProductResponse.model_validate(product), "Stock actualizado exitosamente")


@router.delete("/{producto_id}")
def delete_product(
    producto_id: int,
    current_user: CurrentUser = Depends(require_roles(*MANAGERS)),
    db: Session = Depends(get_db)
):
    product = get_scoped_or_404(db, Product, producto_id, current_user.tenant_id, "Producto")

    ensure_no_dependents(
        db,
        [(SaleLine, SaleLine.id_producto == product.id)],
        "No se puede eliminar el producto porque tiene ventas asociadas",
    )

    db.delete(product)
    db.commit()

    logger.info(f"Product deleted: {producto_id} by {current_user.user_id}")

    return success_response(message="Producto eliminado exitosamente")
