# Copyright (c) 2025 SimStat Development Team
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Running arithmetic mean of a stream of samples.

The mean is updated with ``M <- M + (x - M) / (n + 1)`` instead of a running
sum, which keeps the accumulator on the scale of the data and bounds the
growth of rounding error on long sequences.
"""

from typing import Any, Iterable, Optional

import numpy as np

from .algebra import ElementAlgebra, algebra_for
from .config import VALIDATE_ELEMENTS
from .errors import EmptySequenceError


class RunningMean:
    """Track the running mean ``(M, n)`` of scalar, vector or array samples."""

    def __init__(self, algebra: Optional[ElementAlgebra] = None) -> None:
        self._algebra = algebra
        self._count = 0
        self._value: Any = None

    @property
    def count(self) -> int:
        return self._count

    @property
    def algebra(self) -> Optional[ElementAlgebra]:
        return self._algebra

    def push(self, x: Any) -> None:
        if self._algebra is None:
            self._algebra = algebra_for(x)
        elif self._count == 0 or VALIDATE_ELEMENTS.get():
            self._algebra.validate(x)
        alg = self._algebra
        if self._value is None:
            self._value = alg.zero()
        delta = alg.subtract(x, self._value)
        self._value = alg.add(self._value, alg.scale(delta, 1.0 / (self._count + 1)))
        self._count += 1

    def extend(self, samples: Iterable[Any]) -> None:
        for x in samples:
            self.push(x)

    def state(self) -> np.ndarray:
        """Return a copy of the raw accumulator (an array, 0-d for scalars)."""
        if self._count == 0:
            raise EmptySequenceError("running mean has no samples")
        return np.array(self._value, copy=True)

    @property
    def value(self) -> Any:
        if self._count == 0:
            raise EmptySequenceError("running mean has no samples")
        return self._algebra.finalize(np.array(self._value, copy=True))
