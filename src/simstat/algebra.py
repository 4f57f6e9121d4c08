# Copyright (c) 2025 SimStat Development Team
# SPDX-License-Identifier: GPL-3.0-or-later

"""
Element algebras: the operations a sample type must support to be averaged.

An algebra is inferred from the first element of a sequence and then used for
every arithmetic step of the accumulators. Accumulator state is always held
as :class:`numpy.ndarray` (0-d for scalars) so it can be handed to buffer-based
collective reductions without conversion.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Tuple

import numpy as np

from .config import PROMOTE_TO_DOUBLE
from .errors import ShapeMismatchError

__all__ = [
    "ElementAlgebra",
    "ScalarAlgebra",
    "ArrayAlgebra",
    "Layout",
    "accumulator_dtype",
    "algebra_for",
    "algebra_from_layout",
    "merge_layouts",
]

_NUMERIC_KINDS = "iufc"


@dataclass(frozen=True)
class Layout:
    """Picklable description of an element type, exchanged between processes.

    ``dtype`` is the accumulator dtype; it is normalized to its numpy string
    form so layouts built from ``"float64"`` and ``np.float64`` compare equal.
    """

    shape: Tuple[int, ...]
    dtype: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "shape", tuple(int(dim) for dim in self.shape))
        object.__setattr__(self, "dtype", np.dtype(self.dtype).str)

    @property
    def real_dtype(self) -> np.dtype:
        return np.finfo(np.dtype(self.dtype)).dtype


class ElementAlgebra(ABC):
    """Minimal operation set required of a sample type.

    Subclasses provide an additive zero, addition, subtraction, scaling by a
    real number and the real part of ``conj(v) * v``. Nothing else (ordering,
    division by another element) is assumed. ``layout`` describes the numpy
    buffer the accumulators are reduced through across processes.
    """

    @abstractmethod
    def zero(self) -> Any:
        """Return a fresh additive zero of the element type."""

    @abstractmethod
    def real_zero(self) -> Any:
        """Return a fresh zero of the real-valued counterpart of the element type."""

    @abstractmethod
    def add(self, a: Any, b: Any) -> Any: ...

    @abstractmethod
    def subtract(self, a: Any, b: Any) -> Any: ...

    @abstractmethod
    def scale(self, a: Any, factor: float) -> Any: ...

    @abstractmethod
    def conj_square_real(self, a: Any) -> Any:
        """Return ``Re(conj(a) * a)``; plain ``a * a`` for real values."""

    @property
    @abstractmethod
    def layout(self) -> Layout:
        """Shape and accumulator dtype of one element."""

    def validate(self, element: Any) -> None:
        """Raise when ``element`` does not conform to this algebra."""

    def finalize(self, value: Any) -> Any:
        """Convert accumulator state into the value handed back to callers."""
        return value


class _NumericAlgebra(ElementAlgebra):
    """Shared implementation for numpy-backed scalars and arrays."""

    def __init__(self, shape: Iterable[int], dtype: Any) -> None:
        self.shape: Tuple[int, ...] = tuple(int(dim) for dim in shape)
        self.dtype = np.dtype(dtype)
        if self.dtype.kind not in "fc":
            raise TypeError(
                f"accumulator dtype must be floating or complex, got {self.dtype}"
            )
        self.real_dtype = np.finfo(self.dtype).dtype

    def __repr__(self) -> str:
        return f"{type(self).__name__}(shape={self.shape}, dtype={self.dtype})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _NumericAlgebra):
            return NotImplemented
        return (type(self), self.shape, self.dtype) == (
            type(other),
            other.shape,
            other.dtype,
        )

    def __hash__(self) -> int:
        return hash((type(self), self.shape, self.dtype))

    @property
    def is_complex(self) -> bool:
        return self.dtype.kind == "c"

    @property
    def layout(self) -> Layout:
        return Layout(self.shape, self.dtype.str)

    def zero(self) -> np.ndarray:
        return np.zeros(self.shape, dtype=self.dtype)

    def real_zero(self) -> np.ndarray:
        return np.zeros(self.shape, dtype=self.real_dtype)

    # ufuncs collapse 0-d arrays to numpy scalars; keep state as arrays
    def add(self, a: Any, b: Any) -> np.ndarray:
        return np.asarray(np.add(a, b))

    def subtract(self, a: Any, b: Any) -> np.ndarray:
        return np.asarray(np.subtract(a, b))

    def scale(self, a: Any, factor: float) -> np.ndarray:
        return np.asarray(np.multiply(a, float(factor)))

    def conj_square_real(self, a: Any) -> np.ndarray:
        arr = np.asarray(a)
        if np.iscomplexobj(arr):
            return np.asarray(np.real(np.conj(arr) * arr))
        return np.asarray(arr * arr)

    def validate(self, element: Any) -> None:
        arr = np.asarray(element)
        if arr.dtype.kind not in _NUMERIC_KINDS:
            raise TypeError(f"non-numeric element of dtype {arr.dtype}")
        if arr.shape != self.shape:
            raise ShapeMismatchError(
                f"element of shape {arr.shape} does not match shape {self.shape}"
            )
        if arr.dtype.kind == "c" and not self.is_complex:
            raise ShapeMismatchError(
                "complex element in a sequence whose first element is real"
            )


class ScalarAlgebra(_NumericAlgebra):
    """Real or complex scalars; results are returned as numpy scalars."""

    def __init__(self, dtype: Any = np.float64) -> None:
        super().__init__((), dtype)

    def finalize(self, value: Any) -> Any:
        return np.asarray(value)[()]


class ArrayAlgebra(_NumericAlgebra):
    """Fixed-shape numeric arrays, combined element-wise."""

    def __init__(self, shape: Iterable[int], dtype: Any = np.float64) -> None:
        super().__init__(shape, dtype)
        if not self.shape:
            raise ValueError("ArrayAlgebra requires at least one dimension")

    def finalize(self, value: Any) -> np.ndarray:
        return np.asarray(value)


def accumulator_dtype(dtype: Any) -> np.dtype:
    """Return the dtype used to accumulate samples of ``dtype``.

    Integers accumulate in ``float64``. Floating and complex inputs are
    promoted to at least double precision unless ``PROMOTE_TO_DOUBLE`` is
    switched off.
    """

    dt = np.dtype(dtype)
    if dt.kind in "iu":
        return np.dtype(np.float64)
    if dt.kind in "fc":
        if PROMOTE_TO_DOUBLE.get():
            return np.promote_types(dt, np.float64)
        return dt
    raise TypeError(f"cannot average elements of dtype {dt}")


def algebra_for(element: Any) -> _NumericAlgebra:
    """Instantiate the algebra matching ``element`` (a scalar or an array)."""

    arr = np.asarray(element)
    if arr.dtype.kind not in _NUMERIC_KINDS:
        raise TypeError(f"non-numeric element of dtype {arr.dtype}")
    dtype = accumulator_dtype(arr.dtype)
    if arr.ndim == 0:
        return ScalarAlgebra(dtype)
    return ArrayAlgebra(arr.shape, dtype)


def algebra_from_layout(layout: Layout) -> _NumericAlgebra:
    if layout.shape:
        return ArrayAlgebra(layout.shape, layout.dtype)
    return ScalarAlgebra(layout.dtype)


def merge_layouts(layouts: Iterable[Optional[Layout]]) -> Optional[_NumericAlgebra]:
    """Combine the layouts reported by each process into one algebra.

    ``None`` entries (processes without samples) are ignored. Shapes must
    agree exactly; dtypes are promoted so a real partition can be combined with
    a complex one. Returns ``None`` when no process reported a layout.
    """

    shape: Optional[Tuple[int, ...]] = None
    dtype: Optional[np.dtype] = None
    for layout in layouts:
        if layout is None:
            continue
        current = tuple(layout.shape)
        if shape is None:
            shape = current
            dtype = np.dtype(layout.dtype)
            continue
        if current != shape:
            raise ShapeMismatchError(
                f"processes disagree on element shape: {shape} vs {current}"
            )
        dtype = np.promote_types(dtype, np.dtype(layout.dtype))
    if shape is None:
        return None
    return algebra_from_layout(Layout(shape, dtype.str))
