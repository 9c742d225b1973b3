"""
Warehouse connection configuration.

Settings come from explicit arguments or from environment variables:

    REDSHIFT_HOST, REDSHIFT_PORT, REDSHIFT_DATABASE, REDSHIFT_USER,
    REDSHIFT_PASSWORD, REDSHIFT_SSLMODE,
    REDKIT_PROPAGATION_TIMEOUT, REDKIT_POLL_INTERVAL
"""

from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr
from sqlalchemy.engine import URL

logger = logging.getLogger(__name__)

DEFAULT_PORT = 5439
DEFAULT_PROPAGATION_TIMEOUT_SECONDS = 30.0
DEFAULT_POLL_INTERVAL_SECONDS = 1.0


class WarehouseConfig(BaseModel):
    """Connection and reconciliation settings for a Redshift cluster."""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    host: str = Field(..., min_length=1)
    port: int = Field(DEFAULT_PORT, gt=0, lt=65536)
    database: str = Field(..., min_length=1)
    user: str = Field(..., min_length=1)
    password: SecretStr = Field(default=SecretStr(""))
    sslmode: str = Field("require")
    propagation_timeout_seconds: float = Field(DEFAULT_PROPAGATION_TIMEOUT_SECONDS, ge=0)
    poll_interval_seconds: float = Field(DEFAULT_POLL_INTERVAL_SECONDS, ge=0)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> WarehouseConfig:
        """
        Build a config from environment variables.

        Raises:
            ValueError: If a required variable is missing
        """
        env = os.environ if environ is None else environ

        missing = [
            name for name in ("REDSHIFT_HOST", "REDSHIFT_DATABASE", "REDSHIFT_USER")
            if not env.get(name)
        ]
        if missing:
            raise ValueError(f"Missing required environment variables: {', '.join(missing)}")

        values = {
            "host": env["REDSHIFT_HOST"],
            "database": env["REDSHIFT_DATABASE"],
            "user": env["REDSHIFT_USER"],
            "password": env.get("REDSHIFT_PASSWORD", ""),
        }
        if env.get("REDSHIFT_PORT"):
            values["port"] = int(env["REDSHIFT_PORT"])
        if env.get("REDSHIFT_SSLMODE"):
            values["sslmode"] = env["REDSHIFT_SSLMODE"]
        if env.get("REDKIT_PROPAGATION_TIMEOUT"):
            values["propagation_timeout_seconds"] = float(env["REDKIT_PROPAGATION_TIMEOUT"])
        if env.get("REDKIT_POLL_INTERVAL"):
            values["poll_interval_seconds"] = float(env["REDKIT_POLL_INTERVAL"])

        logger.debug(f"Loaded warehouse config for {values['user']}@{values['host']}/{values['database']}")
        return cls(**values)

    def to_url(self) -> URL:
        """SQLAlchemy URL for the psycopg2 driver."""
        return URL.create(
            "postgresql+psycopg2",
            username=self.user,
            password=self.password.get_secret_value() or None,
            host=self.host,
            port=self.port,
            database=self.database,
            query={"sslmode": self.sslmode},
        )
