"""SQLite implementation of the checkpoint store."""

from __future__ import annotations

import asyncio
import logging
import sqlite3
import threading
from pathlib import Path
from typing import Any

from ..errors import StoreError
from .models import RunSummary, StepRecord, StepStatus
from .store import CheckpointStore

logger = logging.getLogger(__name__)


class SQLiteCheckpointStore(CheckpointStore):
    """Persist step checkpoints using SQLite.

    All statements run under a single store-wide lock on a worker thread, so
    concurrent steps never interleave physical writes on the connection and
    the event loop stays free while the database is busy.
    """

    def __init__(
        self,
        db_path: str | Path,
        journal_mode: str = "WAL",
        busy_timeout: float = 5.0,
    ):
        self.db_path = str(db_path)
        self._lock = threading.Lock()
        try:
            self._conn = sqlite3.connect(
                self.db_path, timeout=busy_timeout, check_same_thread=False
            )
            self._conn.row_factory = sqlite3.Row
            self._conn.execute(f"PRAGMA journal_mode={journal_mode}")
            self._ensure_schema()
        except sqlite3.Error as exc:
            raise StoreError(
                f"Failed to open checkpoint database {self.db_path}: {exc}"
            ) from exc

    # ------------------------------------------------------------------
    # Schema management
    def _ensure_schema(self) -> None:
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS steps (
                run_id TEXT NOT NULL,
                step_key TEXT NOT NULL,
                status TEXT NOT NULL,
                output TEXT,
                PRIMARY KEY (run_id, step_key)
            )
            """
        )
        self._conn.commit()

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    # ------------------------------------------------------------------
    # Helper methods
    def _execute(self, query: str, *params: Any) -> int:
        with self._lock:
            try:
                cur = self._conn.execute(query, params)
                self._conn.commit()
                return cur.rowcount
            except sqlite3.Error as exc:
                try:
                    self._conn.rollback()
                except sqlite3.Error:
                    # connection already unusable; nothing left to roll back
                    pass
                raise StoreError(f"Checkpoint write failed: {exc}") from exc

    def _fetchone(self, query: str, *params: Any) -> sqlite3.Row | None:
        with self._lock:
            try:
                return self._conn.execute(query, params).fetchone()
            except sqlite3.Error as exc:
                raise StoreError(f"Checkpoint read failed: {exc}") from exc

    def _fetchall(self, query: str, *params: Any) -> list[sqlite3.Row]:
        with self._lock:
            try:
                return self._conn.execute(query, params).fetchall()
            except sqlite3.Error as exc:
                raise StoreError(f"Checkpoint read failed: {exc}") from exc

    # ------------------------------------------------------------------
    # Store API
    async def lookup(self, run_id: str, step_key: str) -> str | None:
        row = await asyncio.to_thread(
            self._fetchone,
            "SELECT status, output FROM steps WHERE run_id = ? AND step_key = ?",
            run_id,
            step_key,
        )
        if row is None or row["status"] != StepStatus.COMPLETED.value:
            return None
        return row["output"]

    async def upsert(self, run_id: str, step_key: str, output: str) -> None:
        await asyncio.to_thread(
            self._execute,
            "INSERT OR REPLACE INTO steps (run_id, step_key, status, output) VALUES (?, ?, ?, ?)",
            run_id,
            step_key,
            StepStatus.COMPLETED.value,
            output,
        )

    async def list_steps(self, run_id: str) -> list[StepRecord]:
        rows = await asyncio.to_thread(
            self._fetchall,
            "SELECT run_id, step_key, status, output FROM steps WHERE run_id = ? ORDER BY rowid",
            run_id,
        )
        return [
            StepRecord(
                run_id=r["run_id"],
                step_key=r["step_key"],
                status=r["status"],
                output=r["output"],
            )
            for r in rows
        ]

    async def list_runs(self) -> list[RunSummary]:
        rows = await asyncio.to_thread(
            self._fetchall,
            "SELECT run_id, COUNT(*) AS step_count FROM steps GROUP BY run_id ORDER BY run_id",
        )
        return [
            RunSummary(run_id=r["run_id"], step_count=r["step_count"]) for r in rows
        ]

    async def delete_run(self, run_id: str) -> int:
        removed = await asyncio.to_thread(
            self._execute, "DELETE FROM steps WHERE run_id = ?", run_id
        )
        logger.info(f"Deleted {removed} checkpoints for run_id={run_id}")
        return removed
