"""
Product Model

Products are what the farm sells (eggs by size, birds, manure...).
`stock` is decremented by sales and never goes below zero.
"""
from sqlalchemy import Column, String, Boolean, Index, Integer, Numeric, CheckConstraint
from farm_api.database import Base
from farm_api.models.mixins import TenantScopedMixin


class Product(TenantScopedMixin, Base):
    __tablename__ = "productos"

    nombre = Column(String(255), nullable=False)
    tamanio = Column(String(50), nullable=True)
    precio = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    stock = Column(Integer, default=0, nullable=False)
    categoria = Column(String(100), nullable=True)
    activo = Column(Boolean, default=True, nullable=False)

    __table_args__ = (
        CheckConstraint('stock >= 0', name='ck_producto_stock_no_negativo'),
        Index('idx_producto_tenant_categoria', 'tenant_id', 'categoria'),
    )

    def __repr__(self):
        return f"<Product {self.nombre} stock={self.stock} (tenant={self.tenant_id})>"
