"""Client Model"""
from sqlalchemy import Column, String, Text, Date, Index
from farm_api.database import Base
from farm_api.models.mixins import TenantScopedMixin
from datetime import date


class Client(TenantScopedMixin, Base):
    __tablename__ = "clientes"

    nombre = Column(String(255), nullable=False)
    telefono = Column(String(50), nullable=True)
    correo = Column(String(255), nullable=True)
    direccion = Column(Text, nullable=True)
    ruc = Column(String(20), nullable=True)
    fecha_registro = Column(Date, default=date.today, nullable=False)

    __table_args__ = (
        Index('idx_cliente_tenant_nombre', 'tenant_id', 'nombre'),
    )

    def __repr__(self):
        return f"<Client {self.nombre} (tenant={self.tenant_id})>"
