"""
Unit tests for WarehouseConfig.
"""

import pytest
from pydantic import ValidationError

from redkit.config import DEFAULT_PORT, WarehouseConfig


class TestFromEnv:
    """Tests for WarehouseConfig.from_env()."""

    def test_required_only(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("REDSHIFT_HOST", "cluster.example.com")
        clean_env.setenv("REDSHIFT_DATABASE", "dev")
        clean_env.setenv("REDSHIFT_USER", "admin")

        config = WarehouseConfig.from_env()

        assert config.host == "cluster.example.com"
        assert config.port == DEFAULT_PORT
        assert config.sslmode == "require"
        assert config.password.get_secret_value() == ""
        assert config.propagation_timeout_seconds == 30.0

    def test_all_values(self) -> None:
        config = WarehouseConfig.from_env({
            "REDSHIFT_HOST": "h",
            "REDSHIFT_PORT": "5440",
            "REDSHIFT_DATABASE": "analytics",
            "REDSHIFT_USER": "etl",
            "REDSHIFT_PASSWORD": "s3cret",
            "REDSHIFT_SSLMODE": "verify-full",
            "REDKIT_PROPAGATION_TIMEOUT": "12.5",
            "REDKIT_POLL_INTERVAL": "0.5",
        })

        assert config.port == 5440
        assert config.sslmode == "verify-full"
        assert config.propagation_timeout_seconds == 12.5
        assert config.poll_interval_seconds == 0.5
        assert "s3cret" not in repr(config)

    def test_missing_required(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("REDSHIFT_HOST", "h")
        with pytest.raises(ValueError) as exc_info:
            WarehouseConfig.from_env()
        assert "REDSHIFT_DATABASE" in str(exc_info.value)
        assert "REDSHIFT_USER" in str(exc_info.value)

    def test_invalid_port(self) -> None:
        with pytest.raises(ValidationError):
            WarehouseConfig(host="h", database="d", user="u", port=70000)


class TestToUrl:
    """Tests for the SQLAlchemy URL."""

    def test_url(self) -> None:
        config = WarehouseConfig(host="h", database="d", user="u", password="p")
        url = config.to_url()

        assert url.drivername == "postgresql+psycopg2"
        assert url.host == "h"
        assert url.port == DEFAULT_PORT
        assert url.database == "d"
        assert url.password == "p"
        assert url.query["sslmode"] == "require"

    def test_url_without_password(self) -> None:
        url = WarehouseConfig(host="h", database="d", user="u").to_url()
        assert url.password is None
