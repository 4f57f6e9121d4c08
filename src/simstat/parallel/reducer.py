# Copyright (c) 2025 SimStat Development Team
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Collective sum-reductions over a fixed group of cooperating processes.

Every operation is blocking and collective: all ranks of the group must issue
the same calls, the same number of times, in the same order. A rank that
skips or repeats a call stalls the whole group; this cannot be detected
locally.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List

import numpy as np

__all__ = ["Reducer", "SerialReducer", "as_reducer"]


class Reducer(ABC):
    """Sum-reductions whose result is visible on every rank."""

    @property
    @abstractmethod
    def rank(self) -> int: ...

    @property
    @abstractmethod
    def size(self) -> int: ...

    @abstractmethod
    def reduce_sum(self, value: Any) -> np.ndarray:
        """Return the element-wise sum of ``value`` over all ranks."""

    @abstractmethod
    def reduce_sum_in_place(self, buffer: np.ndarray) -> None:
        """Replace ``buffer`` with its element-wise sum over all ranks."""

    @abstractmethod
    def reduce_count(self, count: int) -> int:
        """Return the sum of an integer count over all ranks."""

    @abstractmethod
    def allgather(self, obj: Any) -> List[Any]:
        """Return the list of ``obj`` contributed by each rank, in rank order."""


def _check_buffer(buffer: Any) -> np.ndarray:
    if not isinstance(buffer, np.ndarray):
        raise TypeError(
            f"in-place reduction needs a numpy array, got {type(buffer).__name__}"
        )
    if not buffer.flags.writeable:
        raise ValueError("in-place reduction needs a writeable array")
    return buffer


class SerialReducer(Reducer):
    """Group consisting of the calling process only."""

    @property
    def rank(self) -> int:
        return 0

    @property
    def size(self) -> int:
        return 1

    def reduce_sum(self, value: Any) -> np.ndarray:
        return np.array(value, copy=True)

    def reduce_sum_in_place(self, buffer: np.ndarray) -> None:
        _check_buffer(buffer)

    def reduce_count(self, count: int) -> int:
        return int(count)

    def allgather(self, obj: Any) -> List[Any]:
        return [obj]


def as_reducer(comm: Any) -> Reducer:
    """Return ``comm`` as a :class:`Reducer`.

    Accepts a :class:`Reducer` unchanged or wraps an ``mpi4py`` communicator.
    There is no default group: the communicator must always be
    passed explicitly.
    """

    if isinstance(comm, Reducer):
        return comm
    if comm is None:
        raise TypeError("a communicator is required for distributed statistics")
    if hasattr(comm, "Allreduce") and hasattr(comm, "Get_size"):
        from .mpi import MPIReducer

        return MPIReducer(comm)
    raise TypeError(f"unsupported communicator type {type(comm).__name__}")
