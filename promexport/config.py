#!/usr/bin/env python3
"""
promexport Configuration Management

Priority (highest first):
- command line arguments
- YAML config file (default: ./promexport.yaml, optional)
- PROMEXPORT_TOKEN environment variable / .env file (token only)
- defaults
"""

import argparse
import logging
import os
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

logger = logging.getLogger("promexport.config")

TOKEN_ENV_VAR = "PROMEXPORT_TOKEN"
OUTPUT_FORMATS = ("csv", "matplotlib")


class ExportConfig(BaseModel):
    host: str = "http://localhost:9090"
    token: Optional[str] = None
    gateway: bool = False            # Query via /prometheus path prefix with Authorization header
    ca_file: Optional[str] = None    # PEM bundle trusted for the server certificate
    verify_tls: bool = True
    timeout: int = 30
    step: Optional[int] = None       # Seconds; unset or <= 0 means pick from window duration
    output_format: str = "csv"
    log_level: str = "INFO"
    allow_empty: bool = False        # Treat queries without series as "no data" instead of failure

    @field_validator("output_format")
    @classmethod
    def _known_format(cls, value: str) -> str:
        if value not in OUTPUT_FORMATS:
            raise ValueError(f"output_format must be one of {', '.join(OUTPUT_FORMATS)}")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    def override_with_args(self, args: argparse.Namespace) -> "ExportConfig":
        """Override config with command line arguments if provided"""
        # Only override if explicitly provided - preserves config file values
        updates = {}
        for field in ("host", "token", "ca_file", "timeout", "step", "output_format", "log_level"):
            value = getattr(args, field, None)
            if value is not None:
                updates[field] = value
        if getattr(args, "gateway", False):
            updates["gateway"] = True
        if getattr(args, "insecure", False):
            updates["verify_tls"] = False
        if getattr(args, "allow_empty", False):
            updates["allow_empty"] = True

        # Revalidate so CLI values go through the same checks as the file
        return ExportConfig(**{**self.model_dump(), **updates})

    def with_env_token(self) -> "ExportConfig":
        """Fill token from the environment when neither file nor CLI set it"""
        if self.token:
            return self
        load_dotenv()
        token = os.getenv(TOKEN_ENV_VAR)
        if not token:
            return self
        return self.model_copy(update={"token": token})


def load_config_from(path: Optional[Path]) -> ExportConfig:
    """
    Load configuration from YAML file.

    A missing file yields defaults; an unreadable or invalid one raises.
    """
    if path is None or not Path(path).exists():
        logger.debug("Config file not found: %s, using defaults", path)
        return ExportConfig()

    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"config file {path} must contain a mapping")
    logger.debug("Loaded config from %s: %s", path, {k: v for k, v in data.items() if k != "token"})
    return ExportConfig(**data)
