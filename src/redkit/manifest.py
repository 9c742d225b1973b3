"""
Declarative manifest of external schemas.

Teams list the external schemas they want in a YAML (or JSON) file and load
it at runtime.

Usage:
    from redkit import ExternalSchemaExecutor, load_manifest

    manifest = load_manifest("./external_schemas.yml")
    for schema in manifest.external_schemas:
        print(executor.plan(schema))

Example manifest (external_schemas.yml):
    version: "1.0"
    external_schemas:
      - schema_name: spectrum_sales
        database_name: sales_glue_db
        iam_role: arn:aws:iam::123456789012:role/spectrum
        owner: 100
        cascade_on_delete: false
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Union

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from redkit.models import ExternalSchema

SUPPORTED_VERSIONS = {"1.0"}


class ExternalSchemaManifest(BaseModel):
    """Root manifest document."""

    version: str = Field("1.0")
    external_schemas: List[ExternalSchema] = Field(default_factory=list)

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        if v not in SUPPORTED_VERSIONS:
            raise ValueError(f"Unsupported manifest version '{v}'. Supported: {sorted(SUPPORTED_VERSIONS)}")
        return v

    @model_validator(mode="after")
    def validate_unique_names(self) -> ExternalSchemaManifest:
        seen = set()
        for schema in self.external_schemas:
            if schema.schema_name in seen:
                raise ValueError(f"Duplicate external schema '{schema.schema_name}' in manifest")
            seen.add(schema.schema_name)
        return self


def load_manifest(path: Union[str, Path]) -> ExternalSchemaManifest:
    """
    Load and validate a manifest file.

    Files ending in .json are parsed as JSON, everything else as YAML.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the content is not a valid manifest
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Manifest file not found: {path}")

    content = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        data = json.loads(content)
    else:
        data = yaml.safe_load(content)

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Manifest {path} must contain a mapping at the top level")

    return ExternalSchemaManifest.model_validate(data)
