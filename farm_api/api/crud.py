"""
Tenant-scoped data access helpers.

Every read or write of a business entity goes through scoped() or
get_scoped_or_404(), so the tenant filter cannot be forgotten in a handler.
"""
from typing import Any, Dict, Iterable, Optional, Type

from sqlalchemy import func, select
from sqlalchemy.orm import Query, Session

from farm_api.core.exceptions import HasDependents, NotFoundError
from farm_api.database import Base


def scoped(db: Session, model: Type[Base], tenant_id: int) -> Query:
    """Query on `model` restricted to one tenant."""
    return db.query(model).filter(model.tenant_id == tenant_id)


def get_scoped(db: Session, model: Type[Base], record_id: int, tenant_id: int,
               for_update: bool = False) -> Optional[Any]:
    query = scoped(db, model, tenant_id).filter(model.id == record_id)
    if for_update:
        query = query.with_for_update()
    return query.first()


def get_scoped_or_404(db: Session, model: Type[Base], record_id: int, tenant_id: int,
                      entity: str = "Registro", for_update: bool = False,
                      detail: Optional[str] = None) -> Any:
    """
    Load a record of the caller's tenant.

    Records of other tenants are reported exactly like missing ones.
    """
    record = get_scoped(db, model, record_id, tenant_id, for_update=for_update)
    if record is None:
        raise NotFoundError(entity, detail)
    return record


def ensure_reference(db: Session, model: Type[Base], record_id: Optional[int],
                     tenant_id: int, entity: str) -> None:
    """
    Verify that a foreign id supplied in a request body belongs to the tenant.

    None is accepted (optional references).
    """
    if record_id is None:
        return
    get_scoped_or_404(db, model, record_id, tenant_id, entity=entity)


def apply_changes(record: Base, changes: Dict[str, Any]) -> Base:
    for field, value in changes.items():
        setattr(record, field, value)
    return record


def count_where(db: Session, model: Type[Base], *conditions) -> int:
    return db.scalar(select(func.count()).select_from(model).where(*conditions)) or 0


def ensure_no_dependents(db: Session, checks: Iterable[tuple], message: str) -> None:
    """
    Refuse a delete while dependent rows exist.

    `checks` holds (model, condition) pairs; the first one with rows raises
    HasDependents with `message`.
    """
    for model, condition in checks:
        if count_where(db, model, condition):
            raise HasDependents(message)


def save(db: Session, record: Base) -> Base:
    db.add(record)
    db.commit()
    db.refresh(record)
    return record
