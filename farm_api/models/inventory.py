"""
Inventory Item Model

Farm supplies (feed, medicine, tools). Items with a `minimo_stock` are
classified critical / low / normal by farm_api.services.inventory.
"""
from sqlalchemy import Column, String, Text, Index, Numeric
from farm_api.database import Base
from farm_api.models.mixins import TenantScopedMixin


class InventoryItem(TenantScopedMixin, Base):
    __tablename__ = "inventario_granja"

    nombre = Column(String(255), nullable=False)
    cantidad = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    unidad = Column(String(50), nullable=False)
    categoria = Column(String(100), nullable=True)
    minimo_stock = Column(Numeric(12, 2, asdecimal=False), nullable=True)
    proveedor = Column(String(255), nullable=True)
    observaciones = Column(Text, nullable=True)

    __table_args__ = (
        Index('idx_inventario_tenant_categoria', 'tenant_id', 'categoria'),
    )

    def __repr__(self):
        return f"<InventoryItem {self.nombre} {self.cantidad} {self.unidad}>"
