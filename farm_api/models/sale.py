"""
Sale Models

A sale (venta) has one or more lines (detalle_venta). Creating a sale
decrements product stock; see farm_api.services.sales.
"""
from sqlalchemy import Column, String, Text, Date, ForeignKey, Index, Integer, Numeric
from sqlalchemy.orm import relationship
from farm_api.database import Base
from farm_api.models.mixins import TenantScopedMixin

SALE_STATES = ("Completada", "Cancelada", "Pendiente")


class Sale(TenantScopedMixin, Base):
    __tablename__ = "ventas"

    id_cliente = Column(Integer, ForeignKey("clientes.id"), nullable=True, index=True)
    id_usuario = Column(Integer, ForeignKey("usuarios.id", ondelete="SET NULL"), nullable=True)
    fecha = Column(Date, nullable=False)
    total = Column(Numeric(12, 2, asdecimal=False), default=0, nullable=False)
    estado = Column(String(20), default="Completada", nullable=False)
    observaciones = Column(Text, nullable=True)

    cliente = relationship("Client")
    detalles = relationship(
        "SaleLine",
        back_populates="venta",
        cascade="all, delete-orphan",
        order_by="SaleLine.id",
    )

    __table_args__ = (
        Index('idx_venta_tenant_fecha', 'tenant_id', 'fecha'),
        Index('idx_venta_tenant_estado', 'tenant_id', 'estado'),
    )

    def __repr__(self):
        return f"<Sale {self.id} total={self.total} (tenant={self.tenant_id})>"

    @property
    def cliente_nombre(self):
        return self.cliente.nombre if self.cliente else None


class SaleLine(TenantScopedMixin, Base):
    __tablename__ = "detalle_venta"

    id_venta = Column(Integer, ForeignKey("ventas.id", ondelete="CASCADE"), nullable=False, index=True)
    id_producto = Column(Integer, ForeignKey("productos.id"), nullable=False, index=True)
    cantidad = Column(Integer, nullable=False)
    precio_unitario = Column(Numeric(12, 2, asdecimal=False), nullable=False)

    venta = relationship("Sale", back_populates="detalles")
    producto = relationship("Product")

    @property
    def subtotal(self) -> float:
        return self.cantidad * self.precio_unitario

    @property
    def producto_nombre(self):
        return self.producto.nombre if self.producto else None
