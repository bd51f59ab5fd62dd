"""
Bird Endpoints

CRUD operations for birds (aves) plus flock statistics.

RBAC:
- List/view/create/update: All authenticated users
- Delete: admin, gerente

A bird with health, mortality or egg records cannot be deleted (409).
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from farm_api.database import get_db
from farm_api.models.batch import Batch, Bird
from farm_api.models.records import EggRecord, HealthRecord, MortalityRecord
from farm_api.schemas.batch import BirdCreate, BirdFilter, BirdResponse, BirdUpdate
from farm_api.api.deps import CurrentUser, get_current_user
from farm_api.api.crud import (
    apply_changes,
    ensure_no_dependents,
    ensure_reference,
    get_scoped_or_404,
    save,
    scoped,
)
from farm_api.api.filters import date_range, equals, search
from farm_api.core.permissions import MANAGERS, require_roles
from farm_api.utils.logging import get_logger
from farm_api.utils.pagination import Pagination, get_pagination, paginated
from farm_api.utils.responses import success_response

logger = get_logger(__name__)

router = APIRouter(prefix="/aves", tags=["aves"])


def bird_conditions(filters: BirdFilter) -> list:
    return [
        *equals(Bird.estado, filters.estado),
        *equals(Bird.tipo, filters.tipo),
        *equals(Bird.id_lote, filters.id_lote),
        *date_range(Bird.fecha_ingreso, filters.fecha_desde, filters.fecha_hasta),
        *search([Bird.tipo, Bird.motivo_salida], filters.search),
    ]


@router.get("")
def list_birds(
    filters: BirdFilter = Depends(),
    pagination: Pagination = Depends(get_pagination),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    query = scoped(db, Bird, current_user.tenant_id).filter(*bird_conditions(filters))
    total = query.count()
    birds = pagination.apply(
        query.order_by(Bird.fecha_ingreso.desc(), Bird.id.desc())
    ).all()

    items = [BirdResponse.model_validate(bird) for bird in birds]
    return success_response(paginated(items, total, pagination))


@router.get("/estadisticas")
def bird_statistics(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Flock statistics.

    Count and average weight/age grouped by estado and tipo, the total
    number of birds and the summed egg production of live layers.
    """
    tenant_id = current_user.tenant_id

    groups = (
        db.query(
            Bird.estado,
            Bird.tipo,
            func.count(Bird.id),
            func.avg(Bird.peso),
            func.avg(Bird.edad),
        )
        .filter(Bird.tenant_id == tenant_id)
        .group_by(Bird.estado, Bird.tipo)
        .all()
    )

    total_birds = scoped(db, Bird, tenant_id).count()

    egg_production = (
        db.query(func.coalesce(func.sum(Bird.produccion_huevos), 0))
        .filter(
            Bird.tenant_id == tenant_id,
            Bird.tipo == "Ponedoras",
            Bird.estado == "Viva",
        )
        .scalar()
    )

    return success_response({
        "estadisticas": [
            {
                "estado": estado,
                "tipo": tipo,
                "cantidad": count,
                "peso_promedio": float(avg_weight) if avg_weight is not None else None,
                "edad_promedio": float(avg_age) if avg_age is not None else None,
            }
            for estado, tipo, count, avg_weight, avg_age in groups
        ],
        "total_aves": total_birds,
        "total_produccion_huevos": int(egg_production or 0),
    })


@router.get("/{ave_id}")
def get_bird(
    ave_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    bird = get_scoped_or_404(db, Bird, ave_id, current_user.tenant_id, "Ave")
    return success_response(BirdResponse.model_validate(bird))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_bird(
    bird_data: BirdCreate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    ensure_reference(db, Batch, bird_data.id_lote, current_user.tenant_id, "Lote")

    bird = save(db, Bird(tenant_id=current_user.tenant_id, **bird_data.model_dump()))

    logger.info(f"Bird created: {bird.id} by {current_user.user_id}")

    return success_response(BirdResponse.model_validate(bird), "Ave creada exitosamente")


@router.put("/{ave_id}")
def update_bird(
    ave_id: int,
    bird_data: BirdUpdate,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    bird = get_scoped_or_404(db, Bird, ave_id, current_user.tenant_id, "Ave")

    changes = bird_data.changes()
    if "id_lote" in changes:
        ensure_reference(db, Batch, changes["id_lote"], current_user.tenant_id, "Lote")

    apply_changes(bird, changes)
    save(db, bird)

    logger.info(f"Bird updated: {bird.id} by {current_user.user_id}")

    return success_response(BirdResponse.model_validate(bird), "Ave actualizada exitosamente")


@router.delete("/{ave_id}")
def delete_bird(
    ave_id: int,
    current_user: CurrentUser = Depends(require_roles(*MANAGERS)),
    db: Session = Depends(get_db)
):
    bird = get_scoped_or_404(db, Bird, ave_id, current_user.tenant_id, "Ave")

    ensure_no_dependents(
        db,
        [
            (HealthRecord, HealthRecord.id_ave == bird.id),
            (MortalityRecord, MortalityRecord.id_ave == bird.id),
            (EggRecord, EggRecord.id_ave == bird.id),
        ],
        "No se puede eliminar el ave porque tiene registros asociados",
    )

    db.delete(bird)
    db.commit()

    logger.info(f"Bird deleted: {ave_id} by {current_user.user_id}")

    return success_response(message="Ave eliminada exitosamente")
