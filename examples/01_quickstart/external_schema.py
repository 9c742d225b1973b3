"""
Quickstart: create, rename and drop an external schema.

Requires REDSHIFT_HOST, REDSHIFT_DATABASE, REDSHIFT_USER and REDSHIFT_PASSWORD.
"""

import logging

from redkit import ExternalSchema, ExternalSchemaExecutor, SqlAlchemyWarehouse, WarehouseConfig

logging.basicConfig(level=logging.INFO)

config = WarehouseConfig.from_env()
warehouse = SqlAlchemyWarehouse.from_config(config)
executor = ExternalSchemaExecutor.from_config(warehouse, config)

declared = ExternalSchema(
    schema_name="spectrum_sales",
    database_name="sales_glue_db",
    iam_role="arn:aws:iam::123456789012:role/spectrum",
)

print(executor.plan(declared))

created = executor.create(declared)
print(f"Created with oid {created.identifier}: {created.state}")

# The oid survives the rename
renamed = executor.update(
    created.identifier,
    created.state,
    created.state.model_copy(update={"schema_name": "spectrum_sales_v2"}),
)
print(renamed)

executor.delete(renamed.state)
print(executor.get_summary())
