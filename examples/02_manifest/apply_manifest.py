"""
Reconcile every external schema declared in a manifest.

Usage:
    python apply_manifest.py external_schemas.yml [--dry-run]
"""

import argparse
import logging

from redkit import ExternalSchemaExecutor, SqlAlchemyWarehouse, WarehouseConfig, load_manifest

logging.basicConfig(level=logging.INFO)

parser = argparse.ArgumentParser()
parser.add_argument("manifest")
parser.add_argument("--dry-run", action="store_true")
args = parser.parse_args()

config = WarehouseConfig.from_env()
warehouse = SqlAlchemyWarehouse.from_config(config)
executor = ExternalSchemaExecutor.from_config(
    warehouse, config, dry_run=args.dry_run, continue_on_error=True
)

for schema in load_manifest(args.manifest).external_schemas:
    print(executor.plan(schema))
    if not args.dry_run:
        executor.reconcile(schema)

print(executor.get_summary())
