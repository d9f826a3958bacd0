"""Store abstraction for step checkpoints."""

from __future__ import annotations

from typing import Protocol

from .models import RunSummary, StepRecord


class CheckpointStore(Protocol):
    """Protocol for checkpoint persistence backends."""

    async def lookup(self, run_id: str, step_key: str) -> str | None:
        """Return the serialized output of a completed step, if any."""

    async def upsert(self, run_id: str, step_key: str, output: str) -> None:
        """Write or replace a completed step record, durably."""

    async def list_steps(self, run_id: str) -> list[StepRecord]:
        """Return every step record of a run."""

    async def list_runs(self) -> list[RunSummary]:
        """Return all runs that have at least one step record."""

    async def delete_run(self, run_id: str) -> int:
        """Remove every step record of a run and return how many were removed."""
