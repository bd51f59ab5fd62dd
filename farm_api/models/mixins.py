"""
Shared model columns.

Every business table carries tenant_id; queries on these models must always
filter on it (see farm_api.api.crud.scoped).
"""
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer
from sqlalchemy.orm import declared_attr


def utcnow() -> datetime:
    # Stored naive in UTC; the Postgres session time zone is forced to UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TenantScopedMixin:
    id = Column(Integer, primary_key=True, autoincrement=True)

    # CRITICAL: Tenant foreign key for isolation
    @declared_attr
    def tenant_id(cls):
        return Column(
            Integer,
            ForeignKey("tenants.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
