"""
Bird Health Endpoints

Treatments, vaccinations and checkups applied to birds.

RBAC:
- List/view/stats: All authenticated users
- Create/update: admin, gerente, supervisor
- Delete: admin, gerente
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from farm_api.database import get_db
from farm_api.models.batch import Bird
from farm_api.models.records import HealthRecord
from farm_api.schemas.common import DateRangeFilter
from farm_api.schemas.records import (
    HealthRecordCreate,
    HealthRecordFilter,
    HealthRecordResponse,
    HealthRecordUpdate,
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

router = APIRouter(prefix="/salud-aves", tags=["salud-aves"])


def health_conditions(filters: HealthRecordFilter) -> list:
    return [
        *equals(HealthRecord.id_ave, filters.id_ave),
        *equals(HealthRecord.tipo_tratamiento, filters.tipo_tratamiento),
        *date_range(HealthRecord.fecha, filters.fecha_desde, filters.fecha_hasta),
        *search([HealthRecord.tipo_tratamiento, HealthRecord.descripcion], filters.search),
    ]


@router.get("")
def list_health_records(
    filters: HealthRecordFilter = Depends(),
    pagination: Pagination = Depends(get_pagination),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    query = scoped(db, HealthRecord, current_user.tenant_id).filter(*health_conditions(filters))
    total = query.count()
    records = pagination.apply(
        query.order_by(HealthRecord.fecha.desc(), HealthRecord.id.desc())
    ).all()

    items = [HealthRecordResponse.model_validate(record) for record in records]
    return success_response(paginated(items, total, pagination))


@router.get("/stats")
def health_stats(
    filters: DateRangeFilter = Depends(),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Record count, treatments by type and total treatment cost."""
    tenant_id = current_user.tenant_id
    conditions = date_range(HealthRecord.fecha, filters.fecha_desde, filters.fecha_hasta)
    summary = totals(db, HealthRecord, tenant_id, conditions, sum_column=HealthRecord.costo)

    return success_response({
        "total_registros": summary["registros"],
        "tratamientos_por_tipo": group_counts(
            db, HealthRecord, tenant_id, HealthRecord.tipo_tratamiento, conditions
        ),
        "costo_total": summary["suma"],
    })


@router.get("/{salud_id}")
def get_health_record(
    salud_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    record = get_scoped_or_404(db, HealthRecord, salud_id, current_user.tenant_id, "Registro de salud")
    return success_response(HealthRecordResponse.model_validate(record))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_health_record(
    record_data: HealthRecordCreate,
    current_user: CurrentUser = Depends(require_roles(*SUPERVISORS)),
    db: Session = Depends(get_db)
):
    ensure_reference(db, Bird, record_data.id_ave, current_user.tenant_id, "Ave")

    record = save(db, HealthRecord(
        tenant_id=current_user.tenant_id,
        id_usuario=current_user.user_id,
        **record_data.model_dump(),
    ))

    logger.info(f"Health record created: {record.id} ave={record.id_ave}")

    return success_response(HealthRecordResponse.model_validate(record), "Registro de salud creado exitosamente")


@router.put("/{salud_id}")
def update_health_record(
    salud_id: int,
    record_data: HealthRecordUpdate,
    current_user: CurrentUser = Depends(require_roles(*SUPERVISORS)),
    db: Session = Depends(get_db)
):
    record = get_scoped_or_404(db, HealthRecord, salud_id, current_user.tenant_id, "Registro de salud")

    changes = record_data.changes()
    if "id_ave" in changes:
        ensure_reference(db, Bird, changes["id_ave"], current_user.tenant_id, "Ave")

    apply_changes(record, changes)
    save(db, record)

    return success_response(HealthRecordResponse.model_validate(record), "Registro de salud actualizado exitosamente")


@router.delete("/{salud_id}")
def delete_health_record(
    salud_id: int,
    current_user: CurrentUser = Depends(require_roles(*MANAGERS)),
    db: Session = Depends(get_db)
):
    record = get_scoped_or_404(db, HealthRecord, salud_id, current_user.tenant_id, "Registro de salud")

    db.delete(record)
    db.commit()

    logger.info(f"Health record deleted: {salud_id} by {current_user.user_id}")

    return success_response(message="Registro de salud eliminado exitosamente")
