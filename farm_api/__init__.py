"""
Granja API

Multi-tenant REST backend for poultry farm operations: flocks, birds,
products, sales, inventory, staff, vehicles and daily farm records.
"""

__version__ = "1.0.0"
