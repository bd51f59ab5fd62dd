"""
User Model

Users belong to a tenant and have role-based access control.

IMPORTANT: email is unique across the whole system, so login does not need
a tenant identifier. tenant_id is still the field that scopes every query
the user makes.
"""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Index, Integer, Enum as SQLEnum
from sqlalchemy.orm import relationship
from farm_api.database import Base
from farm_api.models.mixins import utcnow
import enum


class UserRole(str, enum.Enum):
    """
    User roles for RBAC.

    ADMIN: Full access, manages users
    GERENTE: Manages the farm, can delete records
    SUPERVISOR: Registers health, production and expense records
    OPERADOR: Day-to-day data entry
    """
    ADMIN = "admin"
    GERENTE = "gerente"
    SUPERVISOR = "supervisor"
    OPERADOR = "operador"


class User(Base):
    __tablename__ = "usuarios"

    id = Column(Integer, primary_key=True, autoincrement=True)

    tenant_id = Column(
        Integer,
        ForeignKey("tenants.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    nombre = Column(String(100), nullable=False)
    apellido = Column(String(100), nullable=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)

    rol = Column(
        SQLEnum(
            UserRole,
            name="rol_usuario",
            values_callable=lambda roles: [role.value for role in roles],
        ),
        default=UserRole.OPERADOR,
        nullable=False,
    )

    activo = Column(Boolean, default=True, nullable=False)
    ultimo_login = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    tenant = relationship("Tenant", back_populates="users")

    __table_args__ = (
        Index('idx_usuario_tenant_activo', 'tenant_id', 'activo'),
        Index('idx_usuario_tenant_rol', 'tenant_id', 'rol'),
    )

    def __repr__(self):
        return f"<User {self.email} (tenant={self.tenant_id})>"
