"""
API route modules.

Each module defines routes for one domain area.
"""

from routes.units_csv import router as units_csv_router
from routes.bulk_operations import router as bulk_operations_router
from routes.currencies import router as currencies_router

__all__ = [
    "units_csv_router",
    "bulk_operations_router",
    "currencies_router",
]
