"""Test fixtures for redkit."""

from .fake_warehouse import SESSION_USER_ID, FakeNamespace, FakeWarehouse
from .model_factories import DEFAULT_IAM_ROLE, make_external_schema

__all__ = [
    "DEFAULT_IAM_ROLE",
    "FakeNamespace",
    "FakeWarehouse",
    "SESSION_USER_ID",
    "make_external_schema",
]
