# Copyright (c) 2025 SimStat Development Team
# SPDX-License-Identifier: GPL-3.0-or-later

"""
SimStat: online mean and standard error for simulation observables.

Numerically stable running means and unbiased standard errors over scalar,
vector or array samples (real or complex), on one process or combined across
a group of cooperating processes through collective sum-reductions.
"""

import logging

from .algebra import ArrayAlgebra, ElementAlgebra, ScalarAlgebra, algebra_for
from .distributed import distributed_mean, distributed_mean_and_error
from .errors import (
    EmptySequenceError,
    InsufficientSamplesError,
    ShapeMismatchError,
    StatisticsError,
)
from .mean_error import MeanError, mean, mean_and_error
from .parallel import MPIReducer, Reducer, SerialReducer, ThreadGroup, as_reducer
from .running import RunningMean

logger = logging.getLogger("simstat")

__version__ = "0.1.0"

__all__ = [
    "mean",
    "mean_and_error",
    "distributed_mean",
    "distributed_mean_and_error",
    "MeanError",
    "RunningMean",
    "ElementAlgebra",
    "ScalarAlgebra",
    "ArrayAlgebra",
    "algebra_for",
    "Reducer",
    "SerialReducer",
    "MPIReducer",
    "ThreadGroup",
    "as_reducer",
    "StatisticsError",
    "EmptySequenceError",
    "InsufficientSamplesError",
    "ShapeMismatchError",
]
