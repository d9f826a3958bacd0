from .models import StepCheckpoint
from .checkpoint_db import CheckpointDB

__all__ = [
    "StepCheckpoint",
    "CheckpointDB",
]
