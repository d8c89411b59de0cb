from __future__ import annotations

import logging
import os
import threading
import time
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from typing import Sequence

from postbatch.request import FetchRequest
from postbatch.transport import Transport

from .base import FetchEngine
from .tasks import FetchTask, root_task
from .types import BatchCancelledError, EngineError, FetchOutcome

Outcomes = dict[FetchRequest, FetchOutcome]


class ConcurrentFetchEngine(FetchEngine):
    """Fork/join engine: splits the batch into a binary tree of tasks run on a
    thread pool of `2 * parallelism - 1` workers, one pool per batch.

    Leaves hold at most `len(requests) // parallelism + 1` requests. Every
    internal task submits both halves and merges their outcomes; joining a
    half that no worker has picked up yet runs it on the joining thread, so a
    blocked parent never waits on queued work.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        parallelism: int | None = None,
        logger: logging.Logger | None = None,
    ):
        super().__init__(transport, logger=logger)
        if parallelism is None:
            parallelism = os.cpu_count() or 1
        if isinstance(parallelism, bool) or not isinstance(parallelism, int) or parallelism < 1:
            raise ValueError(f"parallelism must be a positive integer, got {parallelism!r}")
        self.parallelism = parallelism
        self._active: set[_BatchRun] = set()
        self._lock = threading.Lock()

    @property
    def pool_size(self) -> int:
        return 2 * self.parallelism - 1

    def cancel(self) -> None:
        """Cancel every batch currently running on this engine."""
        with self._lock:
            runs = list(self._active)
        for run in runs:
            run.cancel()

    def fetch_outcomes(self, requests: Sequence[FetchRequest]) -> Outcomes:
        self.log.info("concurrent fetch started, size=%d", len(requests))
        if len(requests) == 0:
            return {}

        start = time.monotonic()
        root = root_task(len(requests), self.parallelism)
        executor = ThreadPoolExecutor(
            max_workers=self.pool_size, thread_name_prefix="postbatch"
        )
        self.log.info("pool size=%d, threshold=%d", self.pool_size, root.threshold)
        run = _BatchRun(self, requests, executor)

        with self._lock:
            self._active.add(run)
        try:
            outcomes = executor.submit(run.compute, root).result()
        except BatchCancelledError:
            self.log.error("%s was cancelled", root.name)
            raise
        except CancelledError as exc:
            self.log.error("%s was cancelled", root.name)
            raise BatchCancelledError(f"{root.name} was cancelled") from exc
        except EngineError as exc:
            self.log.error("%s failed: %s", root.name, exc)
            raise
        except Exception as exc:
            self.log.error("%s failed: %s", root.name, exc)
            raise EngineError(f"{root.name} failed: {exc}") from exc
        finally:
            with self._lock:
                self._active.discard(run)
            run.cancel()
            executor.shutdown(wait=True, cancel_futures=True)

        self.log.info(
            "concurrent fetch finished in %.0fms, size=%d",
            (time.monotonic() - start) * 1000,
            len(requests),
        )
        return outcomes


class _BatchRun:
    """State shared by all tasks of one batch. The request sequence is only read."""

    def __init__(
        self,
        engine: ConcurrentFetchEngine,
        requests: Sequence[FetchRequest],
        executor: ThreadPoolExecutor,
    ):
        self.engine = engine
        self.requests = requests
        self.executor = executor
        self._cancelled = threading.Event()

    def cancel(self) -> None:
        self._cancelled.set()

    def compute(self, task: FetchTask) -> Outcomes:
        self._check_cancelled(task, {})
        if task.is_leaf():
            return self._compute_leaf(task)
        return self._compute_internal(task)

    def _compute_leaf(self, task: FetchTask) -> Outcomes:
        self.engine.log.debug("%s start", task.name)
        outcomes: Outcomes = {}
        for index in task.indices():
            self._check_cancelled(task, outcomes)
            try:
                request = self.requests[index]
            except Exception as exc:
                raise EngineError(
                    f"{task.name} failed at index {index}: {exc}", partial=outcomes
                ) from exc
            outcomes[request] = self.engine._attempt(request)
        return outcomes

    def _compute_internal(self, task: FetchTask) -> Outcomes:
        forked: list[tuple[FetchTask, Future[Outcomes]]] = []
        error: EngineError | None = None

        for child in task.split():
            self.engine.log.debug("%s forks %s", task.name, child.name)
            try:
                forked.append((child, self.executor.submit(self.compute, child)))
            except RuntimeError as exc:
                # pool already shut down
                error = EngineError(f"{child.name} could not be scheduled: {exc}")
                self.cancel()
                break

        merged: Outcomes = {}
        for child, future in forked:
            try:
                merged.update(self._join(child, future))
            except EngineError as exc:
                merged.update(exc.partial)
                if error is None:
                    error = exc
            else:
                self.engine.log.debug("%s completed", child.name)

        if error is not None:
            error.partial = merged
            raise error
        return merged

    def _join(self, child: FetchTask, future: Future[Outcomes]) -> Outcomes:
        try:
            if future.cancel():
                return self.compute(child)
            return future.result()
        except EngineError:
            raise
        except CancelledError as exc:
            raise BatchCancelledError(f"{child.name} was cancelled") from exc
        except Exception as exc:
            raise EngineError(f"{child.name} failed: {exc}") from exc

    def _check_cancelled(self, task: FetchTask, partial: Outcomes) -> None:
        if self._cancelled.is_set():
            raise BatchCancelledError(f"{task.name} was cancelled", partial=partial)
