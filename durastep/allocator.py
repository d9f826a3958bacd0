"""Step identity allocation."""

from __future__ import annotations

import threading
from typing import Dict


class StepKeyAllocator:
    """Turn a step name into a step key unique within the current process.

    Each name has its own occurrence counter, so a step called in a loop or
    from parallel branches gets ``name_1``, ``name_2`` and so on. Counters live
    in memory only and start over on every process start; replay relies on the
    workflow issuing the calls for a name in the same order each time.
    """

    def __init__(self) -> None:
        self._counts: Dict[str, int] = {}
        self._lock = threading.Lock()

    def allocate(self, name: str) -> str:
        with self._lock:
            occurrence = self._counts.get(name, 0) + 1
            self._counts[name] = occurrence
        return f"{name}_{occurrence}"

    def counts(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._counts)

    def reset(self) -> None:
        with self._lock:
            self._counts.clear()
