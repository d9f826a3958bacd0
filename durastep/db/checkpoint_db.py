from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlmodel import SQLModel

from ..errors import StoreError
from ..persistence.models import RunSummary, StepRecord, StepStatus
from .models import StepCheckpoint, _utcnow


class CheckpointDB:
    """Checkpoint store backed by an SQLAlchemy async engine.

    Accepts any async URL, e.g. ``sqlite+aiosqlite:///durable_engine.db``.
    Sessions are opened under one ``asyncio.Lock`` so only one statement
    touches the database file at a time.
    """

    def __init__(self, database_url: str, journal_mode: str = "WAL") -> None:
        self.database_url = database_url
        self._is_sqlite = database_url.startswith("sqlite")
        connect_args = {"check_same_thread": False} if self._is_sqlite else {}
        self.engine = create_async_engine(
            database_url, echo=False, future=True, connect_args=connect_args
        )
        self._journal_mode = journal_mode
        self._lock = asyncio.Lock()

    async def init_db(self) -> None:
        try:
            async with self.engine.begin() as conn:
                if self._is_sqlite:
                    await conn.exec_driver_sql(f"PRAGMA journal_mode={self._journal_mode}")
                await conn.run_sync(SQLModel.metadata.create_all)
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to create checkpoint schema: {exc}") from exc

    async def dispose(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self._lock:
            try:
                async with AsyncSession(self.engine) as session:
                    yield session
            except SQLAlchemyError as exc:
                raise StoreError(f"Checkpoint database error: {exc}") from exc

    # ------------------------------------------------------------------
    async def lookup(self, run_id: str, step_key: str) -> str | None:
        async with self.session() as session:
            row = await session.get(StepCheckpoint, (run_id, step_key))
        if row is None or row.status != StepStatus.COMPLETED.value:
            return None
        return row.output

    async def upsert(self, run_id: str, step_key: str, output: str) -> None:
        row = StepCheckpoint(
            run_id=run_id,
            step_key=step_key,
            status=StepStatus.COMPLETED.value,
            output=output,
            written_at=_utcnow(),
        )
        async with self.session() as session:
            await session.merge(row)
            await session.commit()

    async def list_steps(self, run_id: str) -> list[StepRecord]:
        async with self.session() as session:
            result = await session.execute(
                select(StepCheckpoint)
                .where(StepCheckpoint.run_id == run_id)
                .order_by(StepCheckpoint.written_at, StepCheckpoint.step_key)
            )
            rows = result.scalars().all()
        return [
            StepRecord(
                run_id=r.run_id, step_key=r.step_key, status=r.status, output=r.output
            )
            for r in rows
        ]

    async def list_runs(self) -> list[RunSummary]:
        async with self.session() as session:
            result = await session.execute(
                select(StepCheckpoint.run_id, func.count())
                .group_by(StepCheckpoint.run_id)
                .order_by(StepCheckpoint.run_id)
            )
            rows = result.all()
        return [RunSummary(run_id=run_id, step_count=count) for run_id, count in rows]

    async def delete_run(self, run_id: str) -> int:
        async with self.session() as session:
            result = await session.execute(
                delete(StepCheckpoint).where(StepCheckpoint.run_id == run_id)
            )
            await session.commit()
        return result.rowcount
