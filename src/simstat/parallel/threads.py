# Copyright (c) 2025 SimStat Development Team
# SPDX-License-Identifier: GPL-3.0-or-later

"""
In-process groups of ranks that meet at a barrier.

A :class:`ThreadGroup` runs one callable per rank on a thread pool and gives
each rank a :class:`ThreadReducer`. Contributions are summed in rank order, so
every rank observes bit-identical results.
"""

from __future__ import annotations

import concurrent.futures as _fut
import logging
import threading
from typing import Any, Callable, List, Optional, Sequence

import numpy as np

from .reducer import Reducer, _check_buffer

logger = logging.getLogger("simstat")


class ThreadReducer(Reducer):
    """Reducer for one rank of a :class:`ThreadGroup`."""

    def __init__(self, group: "ThreadGroup", rank: int) -> None:
        self._group = group
        self._rank = int(rank)

    @property
    def rank(self) -> int:
        return self._rank

    @property
    def size(self) -> int:
        return self._group.size

    def _sum(self, value: Any) -> np.ndarray:
        parts = self._group.exchange(self._rank, np.array(value, copy=True))
        shapes = {part.shape for part in parts}
        if len(shapes) != 1:
            raise ValueError(f"ranks contributed arrays of different shapes: {shapes}")
        total = parts[0]
        for part in parts[1:]:
            total = total + part
        return np.asarray(total)

    def reduce_sum(self, value: Any) -> np.ndarray:
        return self._sum(value)

    def reduce_sum_in_place(self, buffer: np.ndarray) -> None:
        _check_buffer(buffer)
        buffer[...] = self._sum(buffer)

    def reduce_count(self, count: int) -> int:
        return sum(int(c) for c in self._group.exchange(self._rank, int(count)))

    def allgather(self, obj: Any) -> List[Any]:
        return self._group.exchange(self._rank, obj)


class ThreadGroup:
    """A fixed group of ``size`` ranks living in the current process.

    Parameters
    ----------
    size:
        Number of ranks.
    timeout:
        Seconds a rank waits at a collective before the group is declared
        broken. ``None`` waits forever, like a real collective.
    """

    def __init__(self, size: int, timeout: Optional[float] = None) -> None:
        if size <= 0:
            raise ValueError("size must be a positive integer")
        self._size = int(size)
        self._barrier = threading.Barrier(self._size, timeout=timeout)
        self._slots: List[Any] = [None] * self._size
        self._reducers = [ThreadReducer(self, rank) for rank in range(self._size)]

    @property
    def size(self) -> int:
        return self._size

    def reducer(self, rank: int) -> ThreadReducer:
        return self._reducers[rank]

    def exchange(self, rank: int, obj: Any) -> List[Any]:
        """Publish ``obj`` for ``rank`` and return every rank's contribution."""
        self._slots[rank] = obj
        self._barrier.wait()
        gathered = list(self._slots)
        # nobody may overwrite a slot before every rank has read it
        self._barrier.wait()
        return gathered

    def map(
        self, fn: Callable[[Reducer, Any], Any], per_rank: Sequence[Any]
    ) -> List[Any]:
        """Call ``fn(reducer, per_rank[r])`` on every rank and return the results.

        If any rank raises, the barrier is aborted so the remaining ranks fail
        instead of waiting forever, and the first non-barrier exception is
        re-raised.
        """

        if len(per_rank) != self._size:
            raise ValueError(
                f"expected {self._size} per-rank arguments, got {len(per_rank)}"
            )
        self._barrier.reset()

        def _run(rank: int) -> Any:
            try:
                return fn(self._reducers[rank], per_rank[rank])
            except BaseException:
                self._barrier.abort()
                raise

        with _fut.ThreadPoolExecutor(max_workers=self._size) as pool:
            futures = [pool.submit(_run, rank) for rank in range(self._size)]
            _fut.wait(futures)

        errors = [f.exception() for f in futures if f.exception() is not None]
        if errors:
            primary = next(
                (e for e in errors if not isinstance(e, threading.BrokenBarrierError)),
                errors[0],
            )
            logger.debug("thread group failed on %d of %d ranks", len(errors), self._size)
            raise primary
        return [f.result() for f in futures]
