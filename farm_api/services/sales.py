"""
Sale creation.

A sale is written in one transaction: header, lines, then one stock
decrement per line. Any failure (unknown product, not enough stock, a
database error) rolls the whole sale back.
"""
from typing import Optional

from sqlalchemy.orm import Session

from farm_api.api.crud import ensure_reference, get_scoped
from farm_api.core.exceptions import InvalidOperation, NotFoundError
from farm_api.database import transaction
from farm_api.models.client import Client
from farm_api.models.product import Product
from farm_api.models.sale import Sale, SaleLine
from farm_api.schemas.sale import SaleCreate
from farm_api.services.inventory import apply_stock_operation
from farm_api.utils.logging import get_logger

logger = get_logger(__name__)


def _get_product(db: Session, product_id: int, tenant_id: int, for_update: bool = False) -> Product:
    product = get_scoped(db, Product, product_id, tenant_id, for_update=for_update)
    if product is None:
        raise NotFoundError("Producto", f"Producto {product_id} no encontrado")
    return product


def sale_total(sale_data: SaleCreate) -> float:
    return round(sum(line.cantidad * line.precio_unitario for line in sale_data.detalles), 2)


def create_sale(db: Session, sale_data: SaleCreate, tenant_id: int,
                user_id: Optional[int] = None) -> Sale:
    """
    Create a sale with its lines and decrement product stock.

    Raises NotFoundError if the client or a product does not exist in the
    tenant and InvalidOperation if a product has not enough stock.
    """
    with transaction(db):
        ensure_reference(db, Client, sale_data.id_cliente, tenant_id, "Cliente")
        for line in sale_data.detalles:
            _get_product(db, line.id_producto, tenant_id)

        sale = Sale(
            tenant_id=tenant_id,
            id_cliente=sale_data.id_cliente,
            id_usuario=user_id,
            fecha=sale_data.fecha,
            estado=sale_data.estado,
            observaciones=sale_data.observaciones,
            total=sale_total(sale_data),
        )
        db.add(sale)
        db.flush()

        for line in sale_data.detalles:
            db.add(SaleLine(
                tenant_id=tenant_id,
                id_venta=sale.id,
                id_producto=line.id_producto,
                cantidad=line.cantidad,
                precio_unitario=line.precio_unitario,
            ))
        db.flush()

        for line in sale_data.detalles:
            product = _get_product(db, line.id_producto, tenant_id, for_update=True)
            try:
                product.stock = apply_stock_operation(product.stock, "salida", line.cantidad)
            except InvalidOperation:
                raise InvalidOperation(
                    f"Stock insuficiente para el producto {product.nombre} "
                    f"(disponible: {product.stock}, solicitado: {line.cantidad})"
                )

    db.refresh(sale)
    logger.info(
        f"Sale created: {sale.id} total={sale.total}",
        extra={"tenant_id": tenant_id, "user_id": user_id}
    )
    return sale
