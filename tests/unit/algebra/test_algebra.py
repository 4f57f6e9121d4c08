"""Tests for :mod:`simstat.algebra`."""

from __future__ import annotations

import numpy as np
import pytest

from simstat.algebra import (
    ArrayAlgebra,
    ElementAlgebra,
    Layout,
    ScalarAlgebra,
    accumulator_dtype,
    algebra_for,
    merge_layouts,
)
from simstat.config import PROMOTE_TO_DOUBLE, override
from simstat.errors import ShapeMismatchError


@pytest.mark.parametrize(
    ("element", "expected_dtype"),
    [
        (3, np.float64),
        (2.5, np.float64),
        (1 + 2j, np.complex128),
        (np.float32(1.0), np.float64),
        (np.complex64(1j), np.complex128),
        (np.int16(4), np.float64),
    ],
)
def test_algebra_for_scalars(element, expected_dtype) -> None:
    alg = algebra_for(element)
    assert isinstance(alg, ScalarAlgebra)
    assert alg.dtype == np.dtype(expected_dtype)
    assert alg.zero().shape == ()


def test_algebra_for_arrays_keeps_shape() -> None:
    alg = algebra_for(np.ones((2, 3), dtype=np.complex64))
    assert isinstance(alg, ArrayAlgebra)
    assert alg.shape == (2, 3)
    assert alg.dtype == np.complex128
    assert alg.real_zero().dtype == np.float64
    assert alg.real_zero().shape == (2, 3)


def test_algebra_for_nested_lists() -> None:
    alg = algebra_for([[1, 2], [3, 4]])
    assert alg.shape == (2, 2)
    assert alg.dtype == np.float64


def test_single_precision_kept_without_promotion() -> None:
    with override(PROMOTE_TO_DOUBLE, False):
        assert accumulator_dtype(np.float32) == np.float32
        assert accumulator_dtype(np.complex64) == np.complex64
        # integers never accumulate as integers
        assert accumulator_dtype(np.int32) == np.float64
    assert accumulator_dtype(np.float32) == np.float64


@pytest.mark.parametrize("element", [True, "x", np.array(["a", "b"]), object()])
def test_non_numeric_elements_rejected(element) -> None:
    with pytest.raises(TypeError):
        algebra_for(element)


def test_conj_square_real_complex_is_modulus_squared() -> None:
    alg = ArrayAlgebra((2,), np.complex128)
    result = alg.conj_square_real(np.array([3 + 4j, -1j]))
    assert result.dtype == np.float64
    assert np.allclose(result, [25.0, 1.0])


def test_conj_square_real_real_is_square() -> None:
    alg = ScalarAlgebra(np.float64)
    assert float(alg.conj_square_real(-3.0)) == 9.0


def test_scale_and_arithmetic_keep_arrays() -> None:
    alg = ScalarAlgebra(np.float64)
    value = alg.add(alg.zero(), 2.0)
    assert isinstance(value, np.ndarray)
    assert isinstance(alg.scale(value, 0.5), np.ndarray)
    assert float(alg.subtract(value, 0.5)) == 1.5
    assert isinstance(alg.finalize(value), np.float64)


def test_validate_rejects_shape_mismatch() -> None:
    alg = algebra_for(np.zeros(3))
    with pytest.raises(ShapeMismatchError, match="shape"):
        alg.validate(np.zeros(4))
    with pytest.raises(ShapeMismatchError):
        alg.validate(1.0)


def test_validate_complex_into_real_rejected_but_real_into_complex_accepted() -> None:
    real_alg = algebra_for(1.0)
    with pytest.raises(ShapeMismatchError, match="complex"):
        real_alg.validate(1j)
    complex_alg = algebra_for(1j)
    complex_alg.validate(3)


def test_array_algebra_requires_dimensions() -> None:
    with pytest.raises(ValueError):
        ArrayAlgebra((), np.float64)


def test_merge_layouts_ignores_empty_ranks_and_promotes_dtype() -> None:
    merged = merge_layouts(
        [None, Layout((2,), "<f8"), Layout((2,), "<c16"), None]
    )
    assert merged == ArrayAlgebra((2,), np.complex128)


def test_merge_layouts_all_empty() -> None:
    assert merge_layouts([None, None]) is None


def test_merge_layouts_shape_disagreement() -> None:
    with pytest.raises(ShapeMismatchError, match="disagree"):
        merge_layouts([Layout((2,), "<f8"), Layout((3,), "<f8")])


def test_layout_round_trips_through_merge() -> None:
    alg = algebra_for(np.ones(4))
    assert merge_layouts([alg.layout]) == alg


def test_layout_normalizes_shape_and_dtype() -> None:
    layout = Layout([2, 3], "float64")
    assert layout == Layout((2, 3), np.float64)
    assert layout.dtype == np.dtype(np.float64).str
    assert Layout((), "complex64").real_dtype == np.float32


def test_algebra_without_layout_cannot_be_instantiated() -> None:
    class _NoLayout(ElementAlgebra):
        def zero(self):
            return 0.0

        def real_zero(self):
            return 0.0

        def add(self, a, b):
            return a + b

        def subtract(self, a, b):
            return a - b

        def scale(self, a, factor):
            return a * factor

        def conj_square_real(self, a):
            return a * a

    with pytest.raises(TypeError):
        _NoLayout()
