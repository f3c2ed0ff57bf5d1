"""Pool metrics configuration.

Settings are loaded from environment variables with the ``POOL_METRICS_``
prefix (or a ``.env`` file).  Instrument names are derived from
``metric_namespace`` so existing dashboards keep working with the defaults.
"""

from __future__ import annotations

import re
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_IDENTIFIER = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")
# Labels prometheus-client reserves for summaries and histograms.
_RESERVED_LABELS = frozenset({"quantile", "le"})


class Settings(BaseSettings):
    """Pool metrics settings."""

    model_config = SettingsConfigDict(
        env_prefix="POOL_METRICS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Instruments
    metric_namespace: str = Field(default="hikaricp", description="Prefix for every metric name")
    pool_label: str = Field(default="pool", description="Label carrying the pool name")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: Literal["console", "json"] = Field(default="console")

    @field_validator("metric_namespace", "pool_label")
    @classmethod
    def _check_identifier(cls, value: str) -> str:
        if not _IDENTIFIER.match(value):
            raise ValueError(f"{value!r} is not a valid Prometheus identifier")
        return value

    @field_validator("pool_label")
    @classmethod
    def _check_label(cls, value: str) -> str:
        if value in _RESERVED_LABELS or value.startswith("__"):
            raise ValueError(f"{value!r} is a reserved Prometheus label name")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    def metric_name(self, suffix: str) -> str:
        """Return ``<namespace>_<suffix>``."""
        return f"{self.metric_namespace}_{suffix}"


def get_settings(**overrides: Any) -> Settings:
    """Build settings with optional overrides (mainly for tests)."""
    return Settings(**overrides)


settings = Settings()
