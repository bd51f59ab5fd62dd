"""
Mortality Control Endpoints

RBAC:
- List/view/stats: All authenticated users
- Create/update: admin, gerente, supervisor
- Delete: admin, gerente
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from farm_api.database import get_db
from farm_api.models.batch import Bird
from farm_api.models.records import MortalityRecord
from farm_api.schemas.common import DateRangeFilter
from farm_api.schemas.records import (
    MortalityRecordCreate,
    MortalityRecordFilter,
    MortalityRecordResponse,
    MortalityRecordUpdate,
)
from farm_api.api.deps import CurrentUser, get_current_user
from farm_api.api.crud import apply_changes, ensure_reference, get_scoped_or_404, save, scoped
from farm_api.api.filters import date_range, equals, search
from farm_api.api.stats import group_counts, totals
from farm_api.core.permissions import MANAGERS, SUPERVISORS, require_roles
from farm_api.utils.logging import get_logger
from farm_api.utils.pagination import Pagination, get_pagination, paginated
from farm_api.utils.responses import success_response

logger = get_logger(__name__)

router = APIRouter(prefix="/control-muertes", tags=["control-muertes"])


def mortality_conditions(filters: MortalityRecordFilter) -> list:
    return [
        *equals(MortalityRecord.id_ave, filters.id_ave),
        *date_range(MortalityRecord.fecha, filters.fecha_desde, filters.fecha_hasta),
        *search([MortalityRecord.causa_principal, MortalityRecord.accion_correctiva], filters.search),
    ]


@router.get("")
def list_mortality_records(
    filters: MortalityRecordFilter = Depends(),
    pagination: Pagination = Depends(get_pagination),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    query = scoped(db, MortalityRecord, current_user.tenant_id).filter(*mortality_conditions(filters))
    total = query.count()
    records = pagination.apply(
        query.order_by(MortalityRecord.fecha.desc(), MortalityRecord.id.desc())
    ).all()

    items = [MortalityRecordResponse.model_validate(record) for record in records]
    return success_response(paginated(items, total, pagination))


@router.get("/stats")
def mortality_stats(
    filters: DateRangeFilter = Depends(),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Total deaths, main causes and deaths per day."""
    tenant_id = current_user.tenant_id
    conditions = date_range(MortalityRecord.fecha, filters.fecha_desde, filters.fecha_hasta)
    summary = totals(db, MortalityRecord, tenant_id, conditions, sum_column=MortalityRecord.cantidad_muertes)

    return success_response({
        "total_registros": summary["registros"],
        "total_muertes": int(summary["suma"]),
        "causas_principales": group_counts(
            db, MortalityRecord, tenant_id, MortalityRecord.causa_principal, conditions,
            sum_column=MortalityRecord.cantidad_muertes,
        ),
        "muertes_por_dia": group_counts(
            db, MortalityRecord, tenant_id, MortalityRecord.fecha, conditions,
            sum_column=MortalityRecord.cantidad_muertes, order="key",
        ),
    })


@router.get("/{muerte_id}")
def get_mortality_record(
    muerte_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    record = get_scoped_or_404(db, MortalityRecord, muerte_id, current_user.tenant_id, "Registro de mortalidad")
    return success_response(MortalityRecordResponse.model_validate(record))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_mortality_record(
    record_data: MortalityRecordCreate,
    current_user: CurrentUser = Depends(require_roles(*SUPERVISORS)),
    db: Session = Depends(get_db)
):
    ensure_reference(db, Bird, record_data.id_ave, current_user.tenant_id, "Ave")

    record = save(db, MortalityRecord(
        tenant_id=current_user.tenant_id,
        id_usuario=current_user.user_id,
        **record_data.model_dump(),
    ))

    logger.info(f"Mortality record created: {record.id} muertes={record.cantidad_muertes}")

    return success_response(
        MortalityRecordResponse.model_validate(record),
        "Registro de mortalidad creado exitosamente",
    )


@router.put("/{muerte_id}")
def update_mortality_record(
    muerte_id: int,
    record_data: MortalityRecordUpdate,
    current_user: CurrentUser = Depends(require_roles(*SUPERVISORS)),
    db: Session = Depends(get_db)
):
    record = get_scoped_or_404(db, MortalityRecord, muerte_id, current_user.tenant_id, "Registro de mortalidad")

    changes = record_data.changes()
    if "id_ave" in changes:
        ensure_reference(db, Bird, changes["id_ave"], current_user.tenant_id, "Ave")

    apply_changes(record, changes)
    save(db, record)

    return success_response(
        MortalityRecordResponse.model_validate(record),
        "Registro de mortalidad actualizado exitosamente",
    )


@router.delete("/{muerte_id}")
def delete_mortality_record(
    muerte_id: int,
    current_user: CurrentUser = Depends(require_roles(*MANAGERS)),
    db: Session = Depends(get_db)
):
    record = get_scoped_or_404(db, MortalityRecord, muerte_id, current_user.tenant_id, "Registro de mortalidad")

    db.delete(record)
    db.commit()

    return success_response(message="Registro de mortalidad eliminado exitosamente")
