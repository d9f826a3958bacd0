"""Data models for persisted step checkpoints."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class StepStatus(str, Enum):
    """Persisted step state. A step without a record has not completed."""

    COMPLETED = "COMPLETED"


class StepRecord(BaseModel):
    """Checkpoint of one step occurrence within a run."""

    run_id: str
    step_key: str
    status: StepStatus = StepStatus.COMPLETED
    output: str


class RunSummary(BaseModel):
    """A run as seen through its step records."""

    run_id: str
    step_count: int = 0
