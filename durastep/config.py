from __future__ import annotations

import os
from typing import Literal, Optional

import yaml
from pydantic import BaseModel


class SQLiteConfig(BaseModel):
    """Configuration for the SQLite checkpoint store."""

    journal_mode: Literal["WAL", "DELETE", "TRUNCATE", "PERSIST", "MEMORY"] = "WAL"
    busy_timeout: float = 5.0


class DurastepConfig(BaseModel):
    """Top-level configuration model."""

    database_url: Optional[str] = "sqlite://durable_engine.db"
    sqlite: SQLiteConfig = SQLiteConfig()


def load_config(path: Optional[str] = None) -> DurastepConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to DURASTEP_CONFIG env
            variable or 'durastep.yaml' in the current directory.
    """

    config_path = path or os.getenv("DURASTEP_CONFIG", "durastep.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = DurastepConfig(**data)
    else:
        config = DurastepConfig()

    env_db_url = os.getenv("DURASTEP_DATABASE_URL") or os.getenv("DATABASE_URL")
    if env_db_url:
        config.database_url = env_db_url
    return config
