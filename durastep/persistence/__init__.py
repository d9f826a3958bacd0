"""Persistence layer for durastep checkpoints."""

from __future__ import annotations

import logging
import os
from typing import Optional

from ..config import DurastepConfig, load_config
from ..errors import ProcessInitError, StoreError
from .inmemory import InMemoryCheckpointStore
from .models import RunSummary, StepRecord, StepStatus
from .postgres import PostgresCheckpointStore
from .sqlite import SQLiteCheckpointStore
from .store import CheckpointStore

logger = logging.getLogger(__name__)

_store_instance: CheckpointStore | None = None


def get_store(
    database_url: Optional[str] = None, config: Optional[DurastepConfig] = None
) -> CheckpointStore:
    """Factory function to obtain a checkpoint store.

    The backend is selected based on ``database_url`` which can be provided
    explicitly, via environment variable ``DURASTEP_DATABASE_URL`` or
    ``DATABASE_URL``, or from loaded configuration:

    * ``sqlite://<path>`` - :class:`SQLiteCheckpointStore`
    * ``postgres://`` / ``postgresql://`` - :class:`PostgresCheckpointStore`
    * ``<dialect>+<driver>://`` - :class:`~durastep.db.CheckpointDB`
    * ``memory://`` or no URL at all - :class:`InMemoryCheckpointStore`
    """

    global _store_instance
    if _store_instance is not None and database_url is None and config is None:
        return _store_instance

    config = config or load_config()
    database_url = (
        database_url
        or os.getenv("DURASTEP_DATABASE_URL")
        or os.getenv("DATABASE_URL")
        or config.database_url
    )

    if not database_url or database_url.startswith("memory://"):
        _store_instance = InMemoryCheckpointStore()
        return _store_instance

    scheme = database_url.split("://", 1)[0]
    if scheme == "sqlite":
        path = database_url.replace("sqlite://", "", 1)
        _store_instance = SQLiteCheckpointStore(
            path,
            journal_mode=config.sqlite.journal_mode,
            busy_timeout=config.sqlite.busy_timeout,
        )
    elif scheme in ("postgres", "postgresql"):
        _store_instance = PostgresCheckpointStore(database_url)
    elif "+" in scheme:
        from ..db import CheckpointDB

        _store_instance = CheckpointDB(
            database_url, journal_mode=config.sqlite.journal_mode
        )
    else:
        raise ValueError(f"Unsupported database backend: {database_url}")

    return _store_instance


async def initialize_store(
    database_url: Optional[str] = None, config: Optional[DurastepConfig] = None
) -> CheckpointStore:
    """Create the checkpoint store and make sure its schema exists.

    Must complete before the first step executes. Failures are logged and
    surfaced as :class:`ProcessInitError`.
    """

    try:
        store = get_store(database_url, config)
        if hasattr(store, "init_db"):
            await store.init_db()
        elif hasattr(store, "init_schema"):
            await store.init_schema()
    except (StoreError, ValueError, RuntimeError) as exc:
        logger.error(f"Failed to initialize checkpoint store: {exc}")
        raise ProcessInitError(str(exc)) from exc

    logger.info(f"Checkpoint store initialized: {type(store).__name__}")
    return store


__all__ = [
    "CheckpointStore",
    "StepRecord",
    "StepStatus",
    "RunSummary",
    "SQLiteCheckpointStore",
    "PostgresCheckpointStore",
    "InMemoryCheckpointStore",
    "get_store",
    "initialize_store",
]
