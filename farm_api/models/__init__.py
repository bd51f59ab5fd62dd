"""
Database Models

All business models include tenant_id for multi-tenant isolation.
This is enforced at the application level: every query filters on it.
"""
from farm_api.models.tenant import Tenant
from farm_api.models.user import User, UserRole
from farm_api.models.batch import Batch, Bird
from farm_api.models.product import Product
from farm_api.models.client import Client
from farm_api.models.sale import Sale, SaleLine
from farm_api.models.employee import Employee, Attendance, EmployeeLoan
from farm_api.models.inventory import InventoryItem
from farm_api.models.vehicle import Vehicle
from farm_api.models.records import HealthRecord, MortalityRecord, EggRecord
from farm_api.models.expense import Expense

__all__ = [
    "Tenant",
    "User",
    "UserRole",
    "Batch",
    "Bird",
    "Product",
    "Client",
    "Sale",
    "SaleLine",
    "Employee",
    "Attendance",
    "EmployeeLoan",
    "InventoryItem",
    "Vehicle",
    "HealthRecord",
    "MortalityRecord",
    "EggRecord",
    "Expense",
]
