"""
Client Endpoints

CRUD operations for clients and their sales history.

RBAC:
- List/view/create/update: All authenticated users
- Delete: admin, gerente

A client with sales cannot be deleted (409).
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session, selectinload

from farm_api.database import get_db
from farm_api.models.client import Client
from farm_api.models.sale import Sale
from farm_api.schemas.client import ClientCreate, ClientFilter, ClientResponse, ClientUpdate
from farm_api.schemas.sale import SaleResponse
from farm_api.api.deps import CurrentUser, get_current_user
from farm_api.api.crud import apply_changes, ensure_no_dependents, get_scoped_or_404, save, scoped
from farm_api.api.filters import date_range, search
from farm_api.core.permissions import MANAGERS, require_roles
from farm_api.utils.logging import get_logger
from farm_api.utils.pagination import Pagination, get_pagination, paginated
from farm_api.utils.responses import success_response

logger = get_logger(__name__)

router = APIRouter(prefix="/clientes", tags=["clientes"])


def client_conditions(filters: ClientFilter) -> list:
    return [
        *date_range(Client.fecha_registro, filters.fecha_desde, filters.fecha_hasta),
        *search([Client.nombre, Client.telefono, Client.correo, Client.ruc], filters.search),
    ]


@router.get("")
def list_clients(
    filters: ClientFilter = Depends(),
    pagination: Pagination = Depends(get_pagination),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    query = scoped(db, Client, current_user.tenant_id).filter(*client_conditions(filters))
    total = query.count()
    clients = pagination.apply(query.order_by(Client.nombre.asc(), Client.id.asc())).all()

    items = [ClientResponse.model_validate(client) for client in clients]
    return success_response(paginated(items, total, pagination))


@router.get("/{cliente_id}")
def get_client(
    cliente_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    client = get_scoped_or_404(db, Client, cliente_id, current_user.tenant_id, "Cliente")
    return success_response(ClientResponse.model_validate(client))


@router.get("/{cliente_id}/ventas")
def list_client_sales(
    cliente_id: int,
    pagination: Pagination = Depends(get_pagination),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Paginated sales of one client, newest first."""
    get_scoped_or_404(db, Client, cliente_id, current_user.tenant_id, "Cliente")

    query = scoped(db, Sale, current_user.tenant_id).filter(Sale.id_cliente == cliente_id)
    total = query.count()
    sales = pagination.apply(
        query.options(selectinload(Sale.detalles)).order_by(Sale.fecha.desc(), Sale.id.desc())
    ).all()

    items = [SaleResponse.model_validate(sale) for sale in sales]
    return success_response(paginated(items, total, pagination))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_client(
    client_data: ClientCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    client = save(db, Client(tenant_id=current_user.tenant_id, **client_data.model_dump()))

    logger.info(f"Client created: {client.id} by {current_user.user_id}")

    return success_response(ClientResponse.model_validate(client), "Cliente creado exitosamente")


@router.put("/{cliente_id}")
def update_client(
    cliente_id: int,
    client_data: ClientUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    client = get_scoped_or_404(db, Client, cliente_id, current_user.tenant_id, "Cliente")

    apply_changes(client, client_data.changes())
    save(db, client)

    return success_response(ClientResponse.model_validate(client), "Cliente actualizado exitosamente")


@router.delete("/{cliente_id}")
def delete_client(
    cliente_id: int,
    current_user: CurrentUser = Depends(require_roles(*MANAGERS)),
    db: Session = Depends(get_db)
):
    client = get_scoped_or_404(db, Client, cliente_id, current_user.tenant_id, "Cliente")

    ensure_no_dependents(
        db,
        [(Sale, Sale.id_cliente == client.id)],
        "No se puede eliminar el cliente porque tiene ventas asociadas",
    )

    db.delete(client)
    db.commit()

    logger.info(f"Client deleted: {cliente_id} by {current_user.user_id}")

    return success_response(message="Cliente eliminado exitosamente")
