"""
Flock Record Models

Health treatments, mortality and egg production. These reference a bird
(id_ave); mortality and egg records may also be logged for the flock as a
whole, without a bird.
"""
from sqlalchemy import Column, String, Text, Date, ForeignKey, Index, Integer, Numeric
from sqlalchemy.orm import relationship
from farm_api.database import Base
from farm_api.models.mixins import TenantScopedMixin

EGG_QUALITIES = ("Excelente", "Buena", "Regular", "Mala")


class HealthRecord(TenantScopedMixin, Base):
    __tablename__ = "salud_aves"

    id_ave = Column(Integer, ForeignKey("aves.id"), nullable=False, index=True)
    fecha = Column(Date, nullable=False)
    tipo_tratamiento = Column(String(100), nullable=False)
    medidas = Column(Text, nullable=True)
    cantidad = Column(Integer, nullable=True)
    descripcion = Column(Text, nullable=True)
    costo = Column(Numeric(12, 2, asdecimal=False), nullable=True)
    aplicacion_productos = Column(Text, nullable=True)
    id_usuario = Column(Integer, ForeignKey("usuarios.id", ondelete="SET NULL"), nullable=True)

    ave = relationship("Bird")

    __table_args__ = (
        Index('idx_salud_tenant_fecha', 'tenant_id', 'fecha'),
    )


class MortalityRecord(TenantScopedMixin, Base):
    __tablename__ = "control_muertes"

    id_ave = Column(Integer, ForeignKey("aves.id"), nullable=True, index=True)
    fecha = Column(Date, nullable=False)
    cantidad_muertes = Column(Integer, nullable=False)
    causa_principal = Column(String(255), nullable=True)
    accion_correctiva = Column(Text, nullable=True)
    id_usuario = Column(Integer, ForeignKey("usuarios.id", ondelete="SET NULL"), nullable=True)

    __table_args__ = (
        Index('idx_muertes_tenant_fecha', 'tenant_id', 'fecha'),
    )


class EggRecord(TenantScopedMixin, Base):
    __tablename__ = "control_huevos"

    id_ave = Column(Integer, ForeignKey("aves.id"), nullable=True, index=True)
    fecha = Column(Date, nullable=False)
    cantidad_huevos = Column(Integer, nullable=False)
    calidad = Column(String(20), nullable=True)
    id_usuario = Column(Integer, ForeignKey("usuarios.id", ondelete="SET NULL"), nullable=True)

    __table_args__ = (
        Index('idx_huevos_tenant_fecha', 'tenant_id', 'fecha'),
    )
