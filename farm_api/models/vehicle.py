"""Vehicle Model"""
from sqlalchemy import Column, String, Date, Integer, Numeric, UniqueConstraint
from farm_api.database import Base
from farm_api.models.mixins import TenantScopedMixin

VEHICLE_STATES = ("Activo", "Mantenimiento", "Inactivo")


class Vehicle(TenantScopedMixin, Base):
    __tablename__ = "vehiculos"

    tipo = Column(String(50), nullable=False)
    placa = Column(String(20), nullable=False)
    marca = Column(String(100), nullable=True)
    modelo = Column(String(100), nullable=True)
    anio = Column(Integer, nullable=True)
    estado = Column(String(20), default="Activo", nullable=False)
    capacidad = Column(Numeric(10, 2, asdecimal=False), nullable=True)
    fecha_adquisicion = Column(Date, nullable=True)

    __table_args__ = (
        # Plates are unique within a tenant, not globally
        UniqueConstraint('tenant_id', 'placa', name='uq_vehiculo_tenant_placa'),
    )

    def __repr__(self):
        return f"<Vehicle {self.placa} (tenant={self.tenant_id})>"
