"""Collective reductions over groups of cooperating processes."""

from .mpi import MPIReducer
from .reducer import Reducer, SerialReducer, as_reducer
from .threads import ThreadGroup, ThreadReducer

__all__ = [
    "Reducer",
    "SerialReducer",
    "MPIReducer",
    "ThreadGroup",
    "ThreadReducer",
    "as_reducer",
]
