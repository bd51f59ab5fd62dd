"""
Stock rules shared by inventory items and products.

stock_status() is the only place where the critical / low / normal
classification is computed. low_stock_condition() uses the same factor to
select alert candidates in SQL; it never computes the status itself.
"""
from typing import Optional, Union

from sqlalchemy import and_, func
from sqlalchemy.sql.elements import ColumnElement

from farm_api.core.exceptions import InvalidOperation, ValidationError

Number = Union[int, float]

STOCK_CRITICAL = "Crítico"
STOCK_LOW = "Bajo"
STOCK_NORMAL = "Normal"
STOCK_NO_MINIMUM = "Sin mínimo definido"

# Stock up to 1.5x the minimum is reported as low
LOW_STOCK_FACTOR = 1.5

OPERATIONS = ("entrada", "salida", "ajuste")


def stock_status(cantidad: Number, minimo: Optional[Number]) -> str:
    if minimo is None:
        return STOCK_NO_MINIMUM
    if cantidad <= minimo:
        return STOCK_CRITICAL
    if cantidad <= minimo * LOW_STOCK_FACTOR:
        return STOCK_LOW
    return STOCK_NORMAL


def apply_stock_operation(current: Number, operacion: str, cantidad: Number) -> Number:
    """
    Return the stock after applying an operation.

    entrada adds, salida subtracts, ajuste replaces. Nothing is mutated
    here, so a rejected salida leaves the caller's record untouched.
    """
    if cantidad is None or cantidad < 0:
        raise ValidationError("La cantidad no puede ser negativa")

    if operacion == "entrada":
        return current + cantidad
    if operacion == "salida":
        result = current - cantidad
        if result < 0:
            raise InvalidOperation("La cantidad resultante no puede ser negativa")
        return result
    if operacion == "ajuste":
        return cantidad

    raise InvalidOperation("Operación inválida. Use: entrada, salida o ajuste")


def low_stock_condition(quantity_column, minimum_column) -> ColumnElement:
    """Rows that stock_status() would classify as critical or low."""
    return and_(
        minimum_column.isnot(None),
        quantity_column <= minimum_column * LOW_STOCK_FACTOR,
    )


def stock_ratio(quantity_column, minimum_column):
    """Sort key for alerts: lowest stock relative to its minimum first."""
    return quantity_column / func.nullif(minimum_column, 0)
