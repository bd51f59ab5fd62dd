"""
Batch Endpoints

CRUD operations for batches (lotes) within a tenant.

RBAC:
- List/view/create/update: All authenticated users
- Delete: admin, gerente

A batch that still has birds cannot be deleted (409).
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from farm_api.database import get_db
from farm_api.models.batch import Batch, Bird
from farm_api.schemas.batch import (
    BatchCreate,
    BatchDetail,
    BatchFilter,
    BatchListItem,
    BatchResponse,
    BatchUpdate,
    BirdResponse,
)
from farm_api.api.deps import CurrentUser, get_current_user
from farm_api.api.crud import apply_changes, ensure_no_dependents, get_scoped_or_404, save, scoped
from farm_api.api.filters import contains, date_range, equals, search
from farm_api.core.permissions import MANAGERS, require_roles
from farm_api.utils.logging import get_logger
from farm_api.utils.pagination import Pagination, get_pagination, paginated
from farm_api.utils.responses import success_response

logger = get_logger(__name__)

router = APIRouter(prefix="/lotes", tags=["lotes"])


def batch_conditions(filters: BatchFilter) -> list:
    return [
        *equals(Batch.estado, filters.estado),
        *equals(Batch.tipo, filters.tipo),
        *contains(Batch.galera, filters.galera),
        *date_range(Batch.fecha_inicio, filters.fecha_desde, filters.fecha_hasta),
        *search([Batch.galera, Batch.observaciones], filters.search),
    ]


def _bird_counts(db: Session, tenant_id: int, batch_ids: list) -> dict:
    if not batch_ids:
        return {}
    rows = (
        db.query(Bird.id_lote, func.count(Bird.id))
        .filter(Bird.tenant_id == tenant_id, Bird.id_lote.in_(batch_ids))
        .group_by(Bird.id_lote)
        .all()
    )
    return dict(rows)


@router.get("")
def list_batches(
    filters: BatchFilter = Depends(),
    pagination: Pagination = Depends(get_pagination),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    List batches of the current tenant.

    Each item carries `total_aves`, the number of birds in the batch.
    """
    query = scoped(db, Batch, current_user.tenant_id).filter(*batch_conditions(filters))
    total = query.count()
    batches = pagination.apply(
        query.order_by(Batch.fecha_inicio.desc(), Batch.id.desc())
    ).all()

    counts = _bird_counts(db, current_user.tenant_id, [batch.id for batch in batches])
    items = [
        BatchListItem(
            **BatchResponse.model_validate(batch).model_dump(),
            total_aves=counts.get(batch.id, 0),
        )
        for batch in batches
    ]

    return success_response(paginated(items, total, pagination))


@router.get("/{lote_id}")
def get_batch(
    lote_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get a batch with its birds."""
    batch = get_scoped_or_404(db, Batch, lote_id, current_user.tenant_id, "Lote")

    birds = [
        BirdResponse.model_validate(bird)
        for bird in batch.aves
        if bird.tenant_id == current_user.tenant_id
    ]
    detail = BatchDetail(
        **BatchResponse.model_validate(batch).model_dump(),
        aves=birds,
        total_aves=len(birds),
    )

    return success_response(detail)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_batch(
    batch_data: BatchCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    batch = save(db, Batch(tenant_id=current_user.tenant_id, **batch_data.model_dump()))

    logger.info(f"Batch created: {batch.id} by {current_user.user_id}")

    return success_response(BatchResponse.model_validate(batch), "Lote creado exitosamente")


@router.put("/{lote_id}")
def update_batch(
    lote_id: int,
    batch_data: BatchUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    batch = get_scoped_or_404(db, Batch, lote_id, current_user.tenant_id, "Lote")

    apply_changes(batch, batch_data.changes())
    save(db, batch)

    logger.info(f"Batch updated: {batch.id} by {current_user.user_id}")

    return success_response(BatchResponse.model_validate(batch), "Lote actualizado exitosamente")


@router.delete("/{lote_id}")
def delete_batch(
    lote_id: int,
    current_user: CurrentUser = Depends(require_roles(*MANAGERS)),
    db: Session = Depends(get_db)
):
    batch = get_scoped_or_404(db, Batch, lote_id, current_user.tenant_id, "Lote")

    ensure_no_dependents(
        db,
        [(Bird, Bird.id_lote == batch.id)],
        "No se puede eliminar el lote porque tiene aves asociadas",
    )

    db.delete(batch)
    db.commit()

    logger.info(f"Batch deleted: {lote_id} by {current_user.user_id}")

    return success_response(message="Lote eliminado exitosamente")
