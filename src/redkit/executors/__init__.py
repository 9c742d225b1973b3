"""
Executor modules for applying declared warehouse objects.
"""

from .base import BaseExecutor, ExecutionPlan, ExecutionResult, OperationType
from .external_schema_executor import ExternalSchemaExecutor

__all__ = [
    # Base classes
    "BaseExecutor",
    "ExecutionResult",
    "ExecutionPlan",
    "OperationType",
    # Schema executors
    "ExternalSchemaExecutor",
]
