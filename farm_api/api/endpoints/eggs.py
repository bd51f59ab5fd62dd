"""
Egg Production Endpoints

RBAC:
- List/view/stats: All authenticated users
- Create/update: admin, gerente, supervisor
- Delete: admin, gerente
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from farm_api.database import get_db
from farm_api.models.batch import Bird
from farm_api.models.records import EggRecord
from farm_api.schemas.common import DateRangeFilter
from farm_api.schemas.records import (
    EggRecordCreate,
    EggRecordFilter,
    EggRecordResponse,
    EggRecordUpdate,
)
from farm_api.api.deps import CurrentUser, get_current_user
from farm_api.api.crud import apply_changes, ensure_reference, get_scoped_or_404, save, scoped
from farm_api.api.filters import date_range, equals
from farm_api.api.stats import group_counts, totals
from farm_api.core.permissions import MANAGERS, SUPERVISORS, require_roles
from farm_api.utils.logging import get_logger
from farm_api.utils.pagination import Pagination, get_pagination, paginated
from farm_api.utils.responses import success_response

logger = get_logger(__name__)

router = APIRouter(prefix="/control-huevos", tags=["control-huevos"])


def egg_conditions(filters: EggRecordFilter) -> list:
    return [
        *equals(EggRecord.id_ave, filters.id_ave),
        *equals(EggRecord.calidad, filters.calidad),
        *date_range(EggRecord.fecha, filters.fecha_desde, filters.fecha_hasta),
    ]


@router.get("")
def list_egg_records(
    filters: EggRecordFilter = Depends(),
    pagination: Pagination = Depends(get_pagination),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    query = scoped(db, EggRecord, current_user.tenant_id).filter(*egg_conditions(filters))
    total = query.count()
    records = pagination.apply(query.order_by(EggRecord.fecha.desc(), EggRecord.id.desc())).all()

    items = [EggRecordResponse.model_validate(record) for record in records]
    return success_response(paginated(items, total, pagination))


@router.get("/stats")
def egg_stats(
    filters: DateRangeFilter = Depends(),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Total eggs, average per record, eggs by quality and production per day."""
    tenant_id = current_user.tenant_id
    conditions = date_range(EggRecord.fecha, filters.fecha_desde, filters.fecha_hasta)
    summary = totals(db, EggRecord, tenant_id, conditions, sum_column=EggRecord.cantidad_huevos)

    return success_response({
        "total_registros": summary["registros"],
        "total_huevos": int(summary["suma"]),
        "promedio_huevos_por_registro": summary["promedio"],
        "huevos_por_calidad": group_counts(
            db, EggRecord, tenant_id, EggRecord.calidad, conditions,
            sum_column=EggRecord.cantidad_huevos,
        ),
        "produccion_por_dia": group_counts(
            db, EggRecord, tenant_id, EggRecord.fecha, conditions,
            sum_column=EggRecord.cantidad_huevos, order="key",
        ),
    })


@router.get("/{huevo_id}")
def get_egg_record(
    huevo_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    record = get_scoped_or_404(db, EggRecord, huevo_id, current_user.tenant_id, "Registro de producción")
    return success_response(EggRecordResponse.model_validate(record))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_egg_record(
    record_data: EggRecordCreate,
    current_user: CurrentUser = Depends(require_roles(*SUPERVISORS)),
    db: Session = Depends(get_db)
):
    ensure_reference(db, Bird, record_data.id_ave, current_user.tenant_id, "Ave")

    record = save(db, EggRecord(
        tenant_id=current_user.tenant_id,
        id_usuario=current_user.user_id,
        **record_data.model_dump(),
    ))

    logger.info(f"Egg record created: {record.id} huevos={record.cantidad_huevos}")

    return success_response(
        EggRecordResponse.model_validate(record),
        "Registro de producción creado exitosamente",
    )


@router.put("/{huevo_id}")
def update_egg_record(
    huevo_id: int,
    record_data: EggRecordUpdate,
    current_user: CurrentUser = Depends(require_roles(*SUPERVISORS)),
    db: Session = Depends(get_db)
):
    record = get_scoped_or_404(db, EggRecord, huevo_id, current_user.tenant_id, "Registro de producción")

    changes = record_data.changes()
    if "id_ave" in changes:
        ensure_reference(db, Bird, changes["id_ave"], current_user.tenant_id, "Ave")

    apply_changes(record, changes)
    save(db, record)

    return success_response(
        EggRecordResponse.model_validate(record),
        "Registro de producción actualizado exitosamente",
    )


@router.delete("/{huevo_id}")
def delete_egg_record(
    huevo_id: int,
    current_user: CurrentUser = Depends(require_roles(*MANAGERS)),
    db: Session = Depends(get_db)
):
    record = get_scoped_or_404(db, EggRecord, huevo_id, current_user.tenant_id, "Registro de producción")

    db.delete(record)
    db.commit()

    return success_response(message="Registro de producción eliminado exitosamente")
