"""
Tenant Model

The tenant is the primary isolation boundary: each tenant is one farm
operation whose data must never be visible to another tenant.

Tenants are created out-of-band (scripts/create_tenant.py). Deactivating a
tenant blocks new logins and invalidates existing tokens, because the auth
dependency re-checks `activo` on every request.
"""
from sqlalchemy import Column, String, Boolean, DateTime, Integer
from sqlalchemy.orm import relationship
from farm_api.database import Base
from farm_api.models.mixins import utcnow


class Tenant(Base):
    __tablename__ = "tenants"

    id = Column(Integer, primary_key=True, autoincrement=True)

    nombre = Column(String(255), nullable=False)
    correo = Column(String(255), nullable=True)
    telefono = Column(String(50), nullable=True)

    activo = Column(Boolean, default=True, nullable=False, index=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    users = relationship("User", back_populates="tenant", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Tenant {self.id} {self.nombre}>"
