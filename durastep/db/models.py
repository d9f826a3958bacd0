from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel

from ..persistence.models import StepStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StepCheckpoint(SQLModel, table=True):
    """Row of the ``steps`` table: one completed step occurrence of a run."""

    __tablename__ = "steps"

    run_id: str = Field(primary_key=True)
    step_key: str = Field(primary_key=True)
    status: str = Field(default=StepStatus.COMPLETED.value)
    output: Optional[str] = None
    written_at: datetime = Field(default_factory=_utcnow)
