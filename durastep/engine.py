"""Durable step execution for durastep workflows."""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar, Union

from .allocator import StepKeyAllocator
from .persistence import CheckpointStore, get_store
from .serde import ResultDeserializer, ResultSerializer

logger = logging.getLogger(__name__)

T = TypeVar("T")

StepFn = Callable[[], Union[T, Awaitable[T]]]


class WorkflowEngine:
    """Checkpoints step results for one run and replays them after a restart.

    A step whose key already has a checkpoint returns the stored result and
    its function is not called. Otherwise the function runs, and its result is
    written before being returned. Failed steps leave no checkpoint.

    Step keys are derived from the step name and the order in which steps of
    that name are issued in this process. A workflow must therefore issue its
    steps, per name, in the same relative order on every run; reordering or
    conditionally skipping steps between runs makes checkpoints match the
    wrong step and is not detected.
    """

    def __init__(
        self,
        run_id: str,
        store: CheckpointStore | None = None,
        allocator: StepKeyAllocator | None = None,
    ) -> None:
        self.run_id = run_id
        self._store = store or get_store()
        self._allocator = allocator or StepKeyAllocator()

    @property
    def store(self) -> CheckpointStore:
        return self._store

    async def step(
        self, name: str, fn: StepFn[T], return_type: Optional[Any] = None
    ) -> T:
        """Run ``fn`` as the next occurrence of step ``name``.

        Args:
            name: Logical step name. Repeated names get increasing occurrences.
            fn: Zero-argument callable. Coroutine functions are awaited, plain
                callables run in a worker thread so blocking work does not
                hold up sibling steps.
            return_type: Type used to rebuild a replayed result. Without it a
                replayed result is the plain JSON value.

        Raises:
            StoreError: The checkpoint could not be read, decoded or written.
            Exception: Whatever ``fn`` raises, unchanged.
        """
        step_key = self._allocator.allocate(name)
        logger.debug(f"Executing step {step_key} for run_id={self.run_id}")

        existing = await self._store.lookup(self.run_id, step_key)
        if existing is not None:
            logger.info(f"Skipping step {step_key}: recovered from checkpoint")
            return ResultDeserializer.deserialize(existing, return_type)

        try:
            result = await self._invoke(fn)
        except Exception:
            logger.warning(
                f"Step {step_key} failed for run_id={self.run_id}; no checkpoint written"
            )
            raise

        output = ResultSerializer.serialize(result)
        await self._store.upsert(self.run_id, step_key, output)
        logger.info(f"Checkpointed step {step_key} for run_id={self.run_id}")
        return result

    execute = step

    async def _invoke(self, fn: StepFn[Any]) -> Any:
        if inspect.iscoroutinefunction(fn):
            return await fn()
        result = await asyncio.to_thread(fn)
        if inspect.isawaitable(result):
            result = await result
        return result
