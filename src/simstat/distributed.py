# Copyright (c) 2025 SimStat Development Team
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Mean and standard error over samples spread across cooperating processes.

Each rank holds a disjoint part of a logical global sequence. Local results
are combined through sum-reductions so that every rank receives the same
statistics a single process would compute over the concatenation of all
parts, whatever the partitioning. Ranks may hold no samples at all.

Collectives issued per call, in order: ``allgather`` of the element layout
and of each rank's validation outcome, ``reduce_count`` of the sample count,
``reduce_sum_in_place`` of the weighted mean and, for the error,
``reduce_sum_in_place`` of the squared deviations. Every rank of the group
must make the same call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

import numpy as np

from .algebra import ElementAlgebra, Layout, algebra_for, merge_layouts
from .config import VALIDATE_ELEMENTS, override
from .errors import (
    EmptySequenceError,
    InsufficientSamplesError,
    ShapeMismatchError,
    StatisticsError,
)
from .mean_error import (
    MeanError,
    accumulate_mean,
    standard_error,
    sum_squared_deviations,
)
from .parallel.reducer import Reducer, as_reducer
from .utils.validation import require, sized_length

__all__ = ["distributed_mean", "distributed_mean_and_error"]

logger = logging.getLogger("simstat")


@dataclass(frozen=True)
class _RankReport:
    """What one rank tells its peers before any arithmetic is reduced."""

    layout: Optional[Layout]
    explicit: bool = False
    failure: Optional[str] = None
    failure_is_type: bool = False


def _local_report(
    data: Sequence[Any], local_count: int, algebra: Optional[ElementAlgebra]
) -> Tuple[_RankReport, Optional[Exception]]:
    explicit = algebra is not None
    try:
        alg = algebra
        if alg is None and local_count > 0:
            alg = algebra_for(data[0])
        if alg is None:
            return _RankReport(None), None
        if local_count > 0:
            alg.validate(data[0])
            if VALIDATE_ELEMENTS.get():
                for x in data:
                    alg.validate(x)
        return _RankReport(alg.layout, explicit), None
    except (StatisticsError, TypeError) as exc:
        report = _RankReport(None, explicit, str(exc), isinstance(exc, TypeError))
        return report, exc


def _agree_on_algebra(
    reducer: Reducer,
    data: Sequence[Any],
    local_count: int,
    algebra: Optional[ElementAlgebra],
) -> Optional[ElementAlgebra]:
    report, local_exc = _local_report(data, local_count, algebra)
    # every rank decides from the same reports, so failures are raised everywhere
    reports = reducer.allgather(report)
    for rank, peer in enumerate(reports):
        if peer.failure is not None:
            error = TypeError if peer.failure_is_type else ShapeMismatchError
            raise error(f"rank {rank}: {peer.failure}") from local_exc
    merged = merge_layouts(peer.layout for peer in reports)
    if merged is None:
        return None
    if any(peer.explicit and peer.layout != merged.layout for peer in reports):
        raise ShapeMismatchError(
            "ranks passed element algebras with different layouts: "
            + ", ".join(str(peer.layout) for peer in reports if peer.explicit)
        )
    return algebra if algebra is not None else merged


def _global_mean(
    reducer: Reducer, data: Sequence[Any], algebra: Optional[ElementAlgebra]
) -> Tuple[np.ndarray, int, ElementAlgebra]:
    local_count = sized_length(data)
    alg = _agree_on_algebra(reducer, data, local_count, algebra)
    require(
        alg is not None,
        "no process contributed any samples",
        EmptySequenceError,
    )
    total = reducer.reduce_count(local_count)
    require(total > 0, "no process contributed any samples", EmptySequenceError)
    logger.debug(
        "rank %d/%d: %d local samples, %d in total",
        reducer.rank,
        reducer.size,
        local_count,
        total,
    )

    if local_count > 0:
        # elements were already checked before the layouts were exchanged
        with override(VALIDATE_ELEMENTS, False):
            local_mean = accumulate_mean(data, alg)
    else:
        local_mean = alg.zero()
    weighted = np.array(
        alg.scale(local_mean, local_count / total), dtype=np.dtype(alg.layout.dtype)
    )
    reducer.reduce_sum_in_place(weighted)
    return weighted, total, alg


def distributed_mean(
    comm: Any, data: Sequence[Any], algebra: Optional[ElementAlgebra] = None
) -> Any:
    """Return the mean of the samples held by all ranks of ``comm``.

    Parameters
    ----------
    comm:
        A :class:`~simstat.parallel.Reducer` or an ``mpi4py`` communicator.
    data:
        This rank's samples; may be empty.
    algebra:
        Element algebra, used as given when its layout agrees with every
        other rank. Inferred from the elements when omitted.

    Raises
    ------
    EmptySequenceError
        On every rank, when no rank holds any sample.
    ShapeMismatchError
        On every rank, when ranks disagree on the element shape or any rank
        holds an element that does not conform to its own first element.
    TypeError
        On every rank, when any rank holds non-numeric elements.
    """

    reducer = as_reducer(comm)
    center, _total, alg = _global_mean(reducer, data, algebra)
    return alg.finalize(center)


def distributed_mean_and_error(
    comm: Any, data: Sequence[Any], algebra: Optional[ElementAlgebra] = None
) -> MeanError:
    """Return the global mean and standard error over all ranks of ``comm``.

    Deviations are taken from the global mean, not the local one, so the
    result matches :func:`simstat.mean_and_error` over the concatenated data.
    Fewer than two samples in total raises
    :class:`~simstat.errors.InsufficientSamplesError` on every rank.
    """

    reducer = as_reducer(comm)
    center, total, alg = _global_mean(reducer, data, algebra)
    # total is identical on every rank, so all ranks stop here together
    require(
        total > 1,
        f"standard error requires at least two samples, got {total}",
        InsufficientSamplesError,
    )
    if sized_length(data) > 0:
        squared = sum_squared_deviations(data, center, alg)
    else:
        squared = alg.real_zero()
    squared = np.array(squared, dtype=alg.layout.real_dtype)
    reducer.reduce_sum_in_place(squared)
    error = standard_error(squared, total, alg)
    return MeanError(alg.finalize(center), alg.finalize(error))
