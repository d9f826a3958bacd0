"""In-memory implementation of the checkpoint store."""

from __future__ import annotations

import threading
from typing import Dict, Tuple

from .models import RunSummary, StepRecord
from .store import CheckpointStore


class InMemoryCheckpointStore(CheckpointStore):
    """Store step checkpoints in local memory.

    Useful for tests or dry runs. Checkpoints do not survive a process
    restart, so nothing is ever replayed across crashes.
    """

    def __init__(self) -> None:
        self._records: Dict[Tuple[str, str], StepRecord] = {}
        self._lock = threading.Lock()

    async def lookup(self, run_id: str, step_key: str) -> str | None:
        with self._lock:
            record = self._records.get((run_id, step_key))
        return record.output if record else None

    async def upsert(self, run_id: str, step_key: str, output: str) -> None:
        with self._lock:
            # dicts keep insertion order; drop first so a replace moves to the end
            self._records.pop((run_id, step_key), None)
            self._records[(run_id, step_key)] = StepRecord(
                run_id=run_id, step_key=step_key, output=output
            )

    async def list_steps(self, run_id: str) -> list[StepRecord]:
        with self._lock:
            return [r for r in self._records.values() if r.run_id == run_id]

    async def list_runs(self) -> list[RunSummary]:
        counts: Dict[str, int] = {}
        with self._lock:
            for run_id, _ in self._records:
                counts[run_id] = counts.get(run_id, 0) + 1
        return [
            RunSummary(run_id=run_id, step_count=count)
            for run_id, count in sorted(counts.items())
        ]

    async def delete_run(self, run_id: str) -> int:
        with self._lock:
            keys = [key for key in self._records if key[0] == run_id]
            for key in keys:
                del self._records[key]
        return len(keys)
