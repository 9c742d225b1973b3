"""
Base classes for warehouse object models.

Provides the shared Pydantic configuration used by every managed object.
"""

from __future__ import annotations

from pydantic import (
    BaseModel,
    ConfigDict,
)


# =============================================================================
# BASE CONFIGURATION
# =============================================================================

class BaseWarehouseModel(BaseModel):
    """
    Base model for all managed warehouse objects.

    This provides standard Pydantic v2 configuration shared by the
    declarative models.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        validate_default=True,  # Validate defaults once
        populate_by_name=True,  # Allow field population by name
        str_strip_whitespace=True,  # Strip whitespace from strings
        extra="forbid",  # Unknown manifest keys are mistakes
        json_schema_extra={
            "title": "Redshift Managed Object",
            "description": "Base model for declaratively managed warehouse objects"
        }
    )
