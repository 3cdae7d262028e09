"""
Exporter configuration.

Precedence, lowest first: defaults, YAML file, environment (PDNS_API_KEY,
PDNS_API_URL, also read from a .env file), command line flags.
"""

import argparse
import logging
import os
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from .metrics import DAEMON_TYPES

logger = logging.getLogger("pdns_exporter.config")

ENV_OVERRIDES = {
    "PDNS_API_KEY": "api_key",
    "PDNS_API_URL": "api_url",
}


class ExporterConfig(BaseModel):
    api_url: str = "http://localhost:8081/api/v1"
    api_key: str = ""
    server_id: str = "localhost"
    daemon_type: Optional[str] = None   # None: ask the server at startup
    listen_address: str = "0.0.0.0"
    listen_port: int = Field(9120, ge=1, le=65535)
    metrics_path: str = "/metrics"
    timeout: float = Field(5.0, gt=0)
    verify_tls: bool = True
    log_level: str = "INFO"

    @field_validator("daemon_type")
    @classmethod
    def _known_daemon_type(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and value not in DAEMON_TYPES:
            raise ValueError(f"daemon_type must be one of {', '.join(DAEMON_TYPES)}")
        return value

    @field_validator("metrics_path")
    @classmethod
    def _absolute_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("metrics_path must start with '/'")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    @classmethod
    def from_file(cls, config_path: Path) -> "ExporterConfig":
        """Load configuration from YAML file"""
        if not config_path.exists():
            logger.debug(f"Config file not found: {config_path}, using defaults")
            return cls()

        try:
            with open(config_path, "r") as f:
                data = yaml.safe_load(f) or {}
            logger.debug(f"Loaded config from {config_path}")
            return cls(**data)
        except (OSError, yaml.YAMLError, TypeError, ValidationError) as e:
            logger.warning(f"Failed to load config from {config_path}: {e}, using defaults")
            return cls()

    def override_with_env(self) -> "ExporterConfig":
        """Override config with PDNS_* environment variables (and .env) if set"""
        load_dotenv()
        updates = {field: os.environ[var] for var, field in ENV_OVERRIDES.items() if os.environ.get(var)}
        return self.model_copy(update=updates) if updates else self

    def override_with_args(self, args: argparse.Namespace) -> "ExporterConfig":
        """Override config with command line arguments if provided"""
        # Only override if explicitly provided - preserves config file values
        fields = (
            "api_url", "api_key", "server_id", "daemon_type", "listen_address",
            "listen_port", "metrics_path", "timeout", "log_level",
        )
        data = self.model_dump()
        for field in fields:
            value = getattr(args, field, None)
            if value is not None:
                data[field] = value
        return ExporterConfig(**data)
