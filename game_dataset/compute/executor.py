# game_dataset/compute/executor.py
from __future__ import annotations

import os
from concurrent.futures import (
    Executor,
    ProcessPoolExecutor,
    ThreadPoolExecutor,
)
from typing import Any, Callable, Iterable

from game_dataset import logs
from game_dataset.utils.errors import ConfigurationError


class ParallelExecutor:
    """
    ParallelExecutor

    Runs one task per partition index and returns results in partition order.
    - sequential : in the calling thread
    - thread     : ThreadPoolExecutor (closures allowed)
    - process    : ProcessPoolExecutor (handler and data must be picklable)

    Any task failure propagates to the caller; results of the other tasks
    are discarded.
    """

    MODES = ("sequential", "thread", "process")

    def __init__(self, mode: str = "thread", max_workers: int | None = None):
        if mode not in self.MODES:
            raise ConfigurationError(
                f"[ParallelExecutor] unknown mode={mode!r}, expected one of {self.MODES}"
            )
        self.mode = mode
        self.max_workers = max_workers

    def run(
            self,
            *,
            items: Iterable[int],
            handler: Callable[[int], Any],
    ) -> list[Any]:
        items = list(items)
        if not items:
            logs.debug("[ParallelExecutor] no items to process")
            return []

        workers = self._resolve_workers(items)

        if self.mode == "sequential" or workers == 1:
            return self._run_sequential(items, handler)
        return self._run_parallel(items, handler, workers)

    # ---------------- internal ----------------

    def _resolve_workers(self, items: list[int]) -> int:
        cpu = os.cpu_count() or 1
        if self.max_workers is None:
            return min(cpu, len(items))
        return max(1, min(self.max_workers, len(items)))

    @staticmethod
    def _run_sequential(
            items: list[int],
            handler: Callable[[int], Any],
    ) -> list[Any]:
        return [handler(item) for item in items]

    def _pool(self, workers: int) -> Executor:
        if self.mode == "process":
            return ProcessPoolExecutor(max_workers=workers)
        return ThreadPoolExecutor(
            max_workers=workers, thread_name_prefix="partition"
        )

    def _run_parallel(
            self,
            items: list[int],
            handler: Callable[[int], Any],
            workers: int,
    ) -> list[Any]:
        logs.debug(
            f"[ParallelExecutor] run {self.mode} | workers={workers} tasks={len(items)}"
        )

        with self._pool(workers) as pool:
            futures = [pool.submit(handler, item) for item in items]
            # keep submission order: results[i] belongs to items[i]
            return [fut.result() for fut in futures]
