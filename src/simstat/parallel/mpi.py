# Copyright (c) 2025 SimStat Development Team
# SPDX-License-Identifier: GPL-3.0-or-later

"""Reducer backed by an ``mpi4py`` communicator."""

from __future__ import annotations

from typing import Any, List

import numpy as np

from .reducer import Reducer, _check_buffer


class MPIReducer(Reducer):
    """Sum-reductions over the ranks of an ``mpi4py`` communicator.

    Array values go through the buffer interface (``Allreduce``); counts and
    gathered objects through the pickle-based lowercase methods. The
    communicator is borrowed and never modified.
    """

    def __init__(self, comm: Any) -> None:
        try:
            from mpi4py import MPI
        except ImportError as exc:
            raise ImportError(
                "MPIReducer requires mpi4py. Install with `pip install 'simstat[mpi]'`."
            ) from exc
        self._MPI = MPI
        self._comm = comm

    @property
    def comm(self) -> Any:
        return self._comm

    @property
    def rank(self) -> int:
        return int(self._comm.Get_rank())

    @property
    def size(self) -> int:
        return int(self._comm.Get_size())

    def reduce_sum(self, value: Any) -> np.ndarray:
        # np.ascontiguousarray would promote 0-d values to shape (1,)
        send = np.array(value, copy=True, order="C")
        recv = np.empty_like(send)
        self._comm.Allreduce(send.reshape(-1), recv.reshape(-1), op=self._MPI.SUM)
        return recv

    def reduce_sum_in_place(self, buffer: np.ndarray) -> None:
        _check_buffer(buffer)
        if not buffer.flags.c_contiguous:
            raise ValueError("in-place reduction needs a C-contiguous array")
        # reshape of a contiguous array is a view, so the result lands in buffer
        self._comm.Allreduce(self._MPI.IN_PLACE, buffer.reshape(-1), op=self._MPI.SUM)

    def reduce_count(self, count: int) -> int:
        return int(self._comm.allreduce(int(count), op=self._MPI.SUM))

    def allgather(self, obj: Any) -> List[Any]:
        return list(self._comm.allgather(obj))
