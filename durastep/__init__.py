"""durastep: crash-surviving workflows through checkpointed steps."""

from .allocator import StepKeyAllocator
from .engine import WorkflowEngine
from .errors import DurastepError, ProcessInitError, SerializationError, StoreError
from .persistence import CheckpointStore, get_store, initialize_store

__version__ = "0.1.0"
__all__ = [
    "WorkflowEngine",
    "StepKeyAllocator",
    "CheckpointStore",
    "get_store",
    "initialize_store",
    "DurastepError",
    "StoreError",
    "SerializationError",
    "ProcessInitError",
]
