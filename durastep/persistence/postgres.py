"""PostgreSQL implementation of the checkpoint store."""

from __future__ import annotations

import asyncpg

from ..errors import StoreError
from .models import RunSummary, StepRecord, StepStatus
from .store import CheckpointStore


class PostgresCheckpointStore(CheckpointStore):
    """Persist step checkpoints using PostgreSQL.

    Concurrent writes are isolated by the server, so no client-side lock is
    taken around statements.
    """

    def __init__(self, dsn: str):
        self._dsn = dsn
        self._initialized = False

    async def _connect(self) -> asyncpg.Connection:
        try:
            conn = await asyncpg.connect(self._dsn)
        except (OSError, asyncpg.PostgresError) as exc:
            raise StoreError(f"Failed to connect to checkpoint database: {exc}") from exc
        if not self._initialized:
            try:
                await self._ensure_schema(conn)
            except asyncpg.PostgresError as exc:
                await conn.close()
                raise StoreError(f"Failed to create checkpoint schema: {exc}") from exc
            self._initialized = True
        return conn

    async def _ensure_schema(self, conn: asyncpg.Connection) -> None:
        await conn.execute(
            """
            CREATE TABLE IF NOT EXISTS steps (
                run_id TEXT NOT NULL,
                step_key TEXT NOT NULL,
                status TEXT NOT NULL,
                output TEXT,
                written_at TIMESTAMPTZ NOT NULL DEFAULT now(),
                PRIMARY KEY (run_id, step_key)
            )
            """
        )

    async def init_schema(self) -> None:
        conn = await self._connect()
        await conn.close()

    # ------------------------------------------------------------------
    async def lookup(self, run_id: str, step_key: str) -> str | None:
        conn = await self._connect()
        try:
            row = await conn.fetchrow(
                "SELECT status, output FROM steps WHERE run_id = $1 AND step_key = $2",
                run_id,
                step_key,
            )
        except asyncpg.PostgresError as exc:
            raise StoreError(f"Checkpoint read failed: {exc}") from exc
        finally:
            await conn.close()
        if row is None or row["status"] != StepStatus.COMPLETED.value:
            return None
        return row["output"]

    async def upsert(self, run_id: str, step_key: str, output: str) -> None:
        conn = await self._connect()
        try:
            await conn.execute(
                """
                INSERT INTO steps (run_id, step_key, status, output)
                VALUES ($1, $2, $3, $4)
                ON CONFLICT (run_id, step_key)
                DO UPDATE SET status = EXCLUDED.status, output = EXCLUDED.output,
                              written_at = now()
                """,
                run_id,
                step_key,
                StepStatus.COMPLETED.value,
                output,
            )
        except asyncpg.PostgresError as exc:
            raise StoreError(f"Checkpoint write failed: {exc}") from exc
        finally:
            await conn.close()

    async def list_steps(self, run_id: str) -> list[StepRecord]:
        conn = await self._connect()
        try:
            rows = await conn.fetch(
                "SELECT run_id, step_key, status, output FROM steps WHERE run_id = $1 ORDER BY written_at",
                run_id,
            )
        except asyncpg.PostgresError as exc:
            raise StoreError(f"Checkpoint read failed: {exc}") from exc
        finally:
            await conn.close()
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
        conn = await self._connect()
        try:
            rows = await conn.fetch(
                "SELECT run_id, COUNT(*) AS step_count FROM steps GROUP BY run_id ORDER BY run_id"
            )
        except asyncpg.PostgresError as exc:
            raise StoreError(f"Checkpoint read failed: {exc}") from exc
        finally:
            await conn.close()
        return [RunSummary(run_id=r["run_id"], step_count=r["step_count"]) for r in rows]

    async def delete_run(self, run_id: str) -> int:
        conn = await self._connect()
        try:
            status = await conn.execute("DELETE FROM steps WHERE run_id = $1", run_id)
        except asyncpg.PostgresError as exc:
            raise StoreError(f"Checkpoint write failed: {exc}") from exc
        finally:
            await conn.close()
        # asyncpg returns the command tag, e.g. "DELETE 3"
        return int(status.split()[-1])
