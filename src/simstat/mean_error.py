# Copyright (c) 2025 SimStat Development Team
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Arithmetic mean and standard error of the mean over one process's samples.

The standard error uses the unbiased (Bessel-corrected) variance estimator
scaled by ``1/N``, fused into a single divisor ``N * (N - 1)``. It is computed
in two passes: the mean first, then the deviations from that final mean.
"""

from __future__ import annotations

from typing import Any, NamedTuple, Optional, Sequence

import numpy as np

from .algebra import ElementAlgebra, algebra_for
from .errors import EmptySequenceError, InsufficientSamplesError
from .running import RunningMean
from .utils.validation import require, sized_length

__all__ = [
    "MeanError",
    "mean",
    "mean_and_error",
    "accumulate_mean",
    "sum_squared_deviations",
    "standard_error",
]


class MeanError(NamedTuple):
    """Mean of a sample sequence and the standard error of that mean."""

    mean: Any
    error: Any


def accumulate_mean(data: Sequence[Any], algebra: ElementAlgebra) -> np.ndarray:
    """Return the raw running-mean accumulator for ``data``."""
    running = RunningMean(algebra)
    running.extend(data)
    return running.state()


def sum_squared_deviations(
    data: Sequence[Any], center: Any, algebra: ElementAlgebra
) -> np.ndarray:
    """Return ``sum(Re(conj(x - center) * (x - center)))`` over ``data``."""
    total = algebra.real_zero()
    for x in data:
        total = algebra.add(total, algebra.conj_square_real(algebra.subtract(x, center)))
    return total


def standard_error(
    squared_deviations: Any, count: int, algebra: ElementAlgebra
) -> np.ndarray:
    """Turn a sum of squared deviations over ``count`` samples into an error."""
    require(
        count > 1,
        f"standard error requires at least two samples, got {count}",
        InsufficientSamplesError,
    )
    return np.sqrt(algebra.scale(squared_deviations, 1.0 / (count * (count - 1))))


def _resolve_algebra(
    data: Sequence[Any], length: int, algebra: Optional[ElementAlgebra]
) -> ElementAlgebra:
    require(length > 0, "mean requires at least one sample", EmptySequenceError)
    if algebra is None:
        return algebra_for(data[0])
    return algebra


def mean(data: Sequence[Any], algebra: Optional[ElementAlgebra] = None) -> Any:
    """Return the arithmetic mean of ``data``.

    Parameters
    ----------
    data:
        Sized, ordered sequence of samples (real or complex scalars, or
        fixed-shape arrays). Numpy arrays are read along their first axis.
    algebra:
        Element algebra to use. Inferred from the first element when omitted.

    Returns
    -------
    numpy scalar or numpy.ndarray
        The mean, with the shape of one element.

    Raises
    ------
    EmptySequenceError
        If ``data`` holds no samples.
    ShapeMismatchError
        If an element does not conform to the first one.
    """

    length = sized_length(data)
    alg = _resolve_algebra(data, length, algebra)
    return alg.finalize(accumulate_mean(data, alg))


def mean_and_error(
    data: Sequence[Any], algebra: Optional[ElementAlgebra] = None
) -> MeanError:
    """Return the mean of ``data`` and the standard error of that mean.

    The error is always real-valued, with the shape of one element, even for
    complex samples. At least two samples are required; a single sample
    raises :class:`InsufficientSamplesError` instead of producing a
    non-finite error.
    """

    length = sized_length(data)
    alg = _resolve_algebra(data, length, algebra)
    require(
        length > 1,
        f"standard error requires at least two samples, got {length}",
        InsufficientSamplesError,
    )
    center = accumulate_mean(data, alg)
    squared = sum_squared_deviations(data, center, alg)
    error = standard_error(squared, length, alg)
    return MeanError(alg.finalize(center), alg.finalize(error))
