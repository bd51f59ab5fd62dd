"""
Vehicle Endpoints

Farm vehicles. Plates are unique within a tenant.

RBAC:
- List/view/stats: All authenticated users
- Create/update: admin, gerente
- Delete: admin
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from farm_api.database import get_db
from farm_api.models.vehicle import Vehicle
from farm_api.schemas.vehicle import VehicleCreate, VehicleFilter, VehicleResponse, VehicleUpdate
from farm_api.api.deps import CurrentUser, get_current_user
from farm_api.api.crud import apply_changes, get_scoped_or_404, save, scoped
from farm_api.api.filters import date_range, equals, search
from farm_api.api.stats import group_counts, totals
from farm_api.core.exceptions import DuplicateKey
from farm_api.core.permissions import ADMIN_ONLY, MANAGERS, require_roles
from farm_api.utils.logging import get_logger
from farm_api.utils.pagination import Pagination, get_pagination, paginated
from farm_api.utils.responses import success_response

logger = get_logger(__name__)

router = APIRouter(prefix="/vehiculos", tags=["vehiculos"])


def vehicle_conditions(filters: VehicleFilter) -> list:
    return [
        *equals(Vehicle.estado, filters.estado),
        *equals(Vehicle.tipo, filters.tipo),
        *date_range(Vehicle.fecha_adquisicion, filters.fecha_desde, filters.fecha_hasta),
        *search([Vehicle.placa, Vehicle.marca, Vehicle.modelo], filters.search),
    ]


def ensure_unique_plate(db: Session, tenant_id: int, placa: str, exclude_id: int = None) -> None:
    query = scoped(db, Vehicle, tenant_id).filter(Vehicle.placa == placa)
    if exclude_id is not None:
        query = query.filter(Vehicle.id != exclude_id)
    if query.first() is not None:
        raise DuplicateKey("Ya existe un vehículo con esta placa")


@router.get("")
def list_vehicles(
    filters: VehicleFilter = Depends(),
    pagination: Pagination = Depends(get_pagination),
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    query = scoped(db, Vehicle, current_user.tenant_id).filter(*vehicle_conditions(filters))
    total = query.count()
    vehicles = pagination.apply(query.order_by(Vehicle.placa.asc(), Vehicle.id.asc())).all()

    items = [VehicleResponse.model_validate(vehicle) for vehicle in vehicles]
    return success_response(paginated(items, total, pagination))


@router.get("/stats")
def vehicle_stats(
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    tenant_id = current_user.tenant_id
    capacity = totals(db, Vehicle, tenant_id, sum_column=Vehicle.capacidad)

    return success_response({
        "total_vehiculos": capacity["registros"],
        "vehiculos_por_estado": group_counts(db, Vehicle, tenant_id, Vehicle.estado),
        "vehiculos_por_tipo": group_counts(db, Vehicle, tenant_id, Vehicle.tipo),
        "capacidad_total": capacity["suma"],
    })


@router.get("/{vehiculo_id}")
def get_vehicle(
    vehiculo_id: int,
    current_user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    vehicle = get_scoped_or_404(db, Vehicle, vehiculo_id, current_user.tenant_id, "Vehículo")
    return success_response(VehicleResponse.model_validate(vehicle))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_vehicle(
    vehicle_data: VehicleCreate,
    current_user: CurrentUser = Depends(require_roles(*MANAGERS)),
    db: Session = Depends(get_db)
):
    ensure_unique_plate(db, current_user.tenant_id, vehicle_data.placa)

    vehicle = save(db, Vehicle(tenant_id=current_user.tenant_id, **vehicle_data.model_dump()))

    logger.info(f"Vehicle created: {vehicle.id} ({vehicle.placa}) by {current_user.user_id}")

    return success_response(VehicleResponse.model_validate(vehicle), "Vehículo creado exitosamente")


@router.put("/{vehiculo_id}")
def update_vehicle(
    vehiculo_id: int,
    vehicle_data: VehicleUpdate,
    current_user: CurrentUser = Depends(require_roles(*MANAGERS)),
    db: Session = Depends(get_db)
):
    vehicle = get_scoped_or_404(db, Vehicle, vehiculo_id, current_user.tenant_id, "Vehículo")

    changes = vehicle_data.changes()
    if changes.get("placa") and changes["placa"] != vehicle.placa:
        ensure_unique_plate(db, current_user.tenant_id, changes["placa"], exclude_id=vehicle.id)

    apply_changes(vehicle, changes)
    save(db, vehicle)

    return success_response(VehicleResponse.model_validate(vehicle), "Vehículo actualizado exitosamente")


@router.delete("/{vehiculo_id}")
def delete_vehicle(
    vehiculo_id: int,
    current_user: CurrentUser = Depends(require_roles(*ADMIN_ONLY)),
    db: Session = Depends(get_db)
):
    vehicle = get_scoped_or_404(db, Vehicle, vehiculo_id, current_user.tenant_id, "Vehículo")

    db.delete(vehicle)
    db.commit()

    logger.info(f"Vehicle deleted: {vehiculo_id} by {current_user.user_id}")

    return success_response(message="Vehículo eliminado exitosamente")
