"""
Employee Models

Employees, their daily attendance and the loans the farm gives them.
An employee with loans or attendance records cannot be deleted.
"""
from sqlalchemy import (
    Column, String, Text, Boolean, Date, Time, ForeignKey, Index, Integer, Numeric, UniqueConstraint
)
from sqlalchemy.orm import relationship
from farm_api.database import Base
from farm_api.models.mixins import TenantScopedMixin

ATTENDANCE_STATES = ("Presente", "Tardanza", "Ausente", "Justificado")
LOAN_STATES = ("Pendiente", "Pagado", "Cancelado")


class Employee(TenantScopedMixin, Base):
    __tablename__ = "empleados"

    nombre = Column(String(100), nullable=False)
    apellido = Column(String(100), nullable=False)
    puesto = Column(String(100), nullable=False)
    salario = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    fecha_contratacion = Column(Date, nullable=False)
    telefono = Column(String(50), nullable=True)
    correo = Column(String(255), nullable=True)
    activo = Column(Boolean, default=True, nullable=False)

    __table_args__ = (
        Index('idx_empleado_tenant_puesto', 'tenant_id', 'puesto'),
    )

    def __repr__(self):
        return f"<Employee {self.nombre} {self.apellido} (tenant={self.tenant_id})>"


class Attendance(TenantScopedMixin, Base):
    __tablename__ = "asistencias"

    id_empleado = Column(Integer, ForeignKey("empleados.id"), nullable=False, index=True)
    fecha = Column(Date, nullable=False)
    hora_entrada = Column(Time, nullable=False)
    hora_salida = Column(Time, nullable=True)
    estado = Column(String(20), default="Presente", nullable=False)
    observaciones = Column(Text, nullable=True)
    id_usuario_registro = Column(Integer, ForeignKey("usuarios.id", ondelete="SET NULL"), nullable=True)

    empleado = relationship("Employee")

    __table_args__ = (
        # One attendance record per employee per day
        UniqueConstraint('tenant_id', 'id_empleado', 'fecha', name='uq_asistencia_empleado_fecha'),
        Index('idx_asistencia_tenant_fecha', 'tenant_id', 'fecha'),
    )


class EmployeeLoan(TenantScopedMixin, Base):
    __tablename__ = "prestamos_empleados"

    id_empleado = Column(Integer, ForeignKey("empleados.id"), nullable=False, index=True)
    fecha = Column(Date, nullable=False)
    monto = Column(Numeric(12, 2, asdecimal=False), nullable=False)
    descripcion = Column(Text, nullable=True)
    estado = Column(String(20), default="Pendiente", nullable=False)
    cuotas = Column(Integer, default=1, nullable=False)
    id_usuario = Column(Integer, ForeignKey("usuarios.id", ondelete="SET NULL"), nullable=True)

    empleado = relationship("Employee")

    __table_args__ = (
        Index('idx_prestamo_tenant_estado', 'tenant_id', 'estado'),
    )
