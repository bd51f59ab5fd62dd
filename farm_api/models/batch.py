"""
Batch and Bird Models

A batch (lote) groups birds housed together in one shed (galera).
Birds may belong to a batch; a batch with birds cannot be deleted.
"""
from sqlalchemy import Column, String, Text, Date, ForeignKey, Index, Integer, Numeric
from sqlalchemy.orm import relationship
from farm_api.database import Base
from farm_api.models.mixins import TenantScopedMixin

BATCH_TYPES = ("Ponedoras", "Engorde")
BATCH_STATES = ("Activo", "Inactivo", "Desalojado")
BIRD_STATES = ("Viva", "Muerta", "Vendida", "Descarte")


class Batch(TenantScopedMixin, Base):
    __tablename__ = "lotes"

    tipo = Column(String(20), nullable=False)
    fecha_inicio = Column(Date, nullable=False)
    fecha_fin = Column(Date, nullable=True)
    cantidad = Column(Integer, nullable=False)
    galera = Column(String(50), nullable=False)
    estado = Column(String(20), default="Activo", nullable=False)
    observaciones = Column(Text, nullable=True)

    aves = relationship("Bird", back_populates="lote")

    __table_args__ = (
        Index('idx_lote_tenant_estado', 'tenant_id', 'estado'),
    )

    def __repr__(self):
        return f"<Batch {self.id} {self.galera} (tenant={self.tenant_id})>"


class Bird(TenantScopedMixin, Base):
    __tablename__ = "aves"

    id_lote = Column(Integer, ForeignKey("lotes.id"), nullable=True, index=True)
    tipo = Column(String(50), nullable=False)
    edad = Column(Integer, nullable=False)
    estado = Column(String(20), default="Viva", nullable=False)
    peso = Column(Numeric(8, 2, asdecimal=False), nullable=True)
    fecha_ingreso = Column(Date, nullable=False)
    fecha_salida = Column(Date, nullable=True)
    motivo_salida = Column(String(255), nullable=True)
    produccion_huevos = Column(Integer, default=0, nullable=False)

    lote = relationship("Batch", back_populates="aves")

    __table_args__ = (
        Index('idx_ave_tenant_estado', 'tenant_id', 'estado'),
        Index('idx_ave_tenant_tipo', 'tenant_id', 'tipo'),
    )

    def __repr__(self):
        return f"<Bird {self.id} {self.tipo} (tenant={self.tenant_id})>"
