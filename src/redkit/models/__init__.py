"""
Warehouse object models.

Module organization:
- base: BaseWarehouseModel shared Pydantic configuration
- external_schemas: ExternalSchema (Glue Data Catalog backed schema)
"""

from .base import BaseWarehouseModel
from .external_schemas import MAX_IDENTIFIER_LENGTH, ExternalSchema

__all__ = [
    "BaseWarehouseModel",
    "ExternalSchema",
    "MAX_IDENTIFIER_LENGTH",
]
