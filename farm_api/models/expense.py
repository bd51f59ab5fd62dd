"""Operating Expense Model"""
from sqlalchemy import Column, String, Text, Date, ForeignKey, Index, Integer, Numeric
from farm_api.database import Base
from farm_api.models.mixins import TenantScopedMixin


class Expense(TenantScopedMixin, Base):
    __tablename__ = "gastos_operacion"

    fecha = Column(Date, nullable=False)
    categoria = Column(String(100), nullable=False)
    descripcion = Column(Text, nullable=True)
    monto = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    metodo_pago = Column(String(50), nullable=True)
    id_usuario = Column(Integer, ForeignKey("usuarios.id", ondelete="SET NULL"), nullable=True)

    __table_args__ = (
        Index('idx_gasto_tenant_categoria', 'tenant_id', 'categoria'),
    )
