"""Tests for the single-process mean and standard error."""

from __future__ import annotations

import math

import numpy as np
import pytest

from simstat import (
    EmptySequenceError,
    InsufficientSamplesError,
    MeanError,
    ShapeMismatchError,
    mean,
    mean_and_error,
)
from simstat.config import VALIDATE_ELEMENTS, override


def test_mean_and_error_integers() -> None:
    m, err = mean_and_error([1, 2, 3])
    assert m == pytest.approx(2.0)
    assert err == pytest.approx(math.sqrt(1.0 / 3.0))
    assert isinstance(m, np.float64)
    assert isinstance(err, np.float64)


def test_mean_and_error_returns_named_pair() -> None:
    result = mean_and_error([1.0, 3.0])
    assert isinstance(result, MeanError)
    assert result.mean == pytest.approx(2.0)
    assert result.error == pytest.approx(1.0)


def test_complex_samples_give_real_error() -> None:
    m, err = mean_and_error([1 + 1j, 1 - 1j, 3])
    assert m == pytest.approx(5.0 / 3.0 + 0j)
    assert np.isrealobj(err)
    assert err >= 0.0
    # deviations contribute 13/9, 13/9 and 16/9
    assert err == pytest.approx(math.sqrt(7.0) / 3.0)


@pytest.mark.parametrize("length", [1, 2, 17])
def test_constant_sequence(length: int) -> None:
    data = [2.75] * length
    assert mean(data) == 2.75
    if length >= 2:
        m, err = mean_and_error(data)
        assert m == 2.75
        assert err == 0.0


def test_constant_array_sequence() -> None:
    sample = np.array([[1.5, -2.0], [0.25, 4.0]])
    m, err = mean_and_error([sample.copy() for _ in range(5)])
    assert np.array_equal(m, sample)
    assert err.shape == (2, 2)
    assert np.all(err == 0.0)


def test_matches_numpy_reference_for_vectors(rng) -> None:
    data = rng.normal(size=(200, 3)) * [1.0, 10.0, 0.1] + [5.0, -2.0, 0.0]
    m, err = mean_and_error(data)
    assert m.shape == (3,)
    assert np.allclose(m, data.mean(axis=0), rtol=1e-12, atol=1e-12)
    expected = data.std(axis=0, ddof=1) / math.sqrt(len(data))
    assert np.allclose(err, expected, rtol=1e-10)


def test_matches_numpy_reference_for_complex_arrays(rng) -> None:
    data = rng.normal(size=(50, 2, 2)) + 1j * rng.normal(size=(50, 2, 2))
    m, err = mean_and_error(data)
    assert np.allclose(m, data.mean(axis=0), rtol=1e-12, atol=1e-12)
    assert err.dtype == np.float64
    expected = np.sqrt(
        (np.abs(data - data.mean(axis=0)) ** 2).sum(axis=0) / (50 * 49)
    )
    assert np.allclose(err, expected, rtol=1e-10)


def test_incremental_mean_stable_on_large_offset(rng) -> None:
    offset = 1.0e9
    noise = rng.normal(scale=1.0e-3, size=20000)
    data = offset + noise
    exact = offset + math.fsum(noise.tolist()) / len(noise)
    assert mean(data) == pytest.approx(exact, rel=0, abs=1e-4)


def test_incremental_mean_matches_naive_mean(rng) -> None:
    data = rng.uniform(-1.0, 1.0, size=5000) * 1.0e3
    assert mean(data) == pytest.approx(np.sum(data) / len(data), rel=1e-9, abs=1e-9)


def test_single_precision_input_accumulates_in_double() -> None:
    data = np.full(1000, 0.1, dtype=np.float32)
    result = mean(data)
    assert result.dtype == np.float64
    assert result == pytest.approx(float(np.float32(0.1)), rel=1e-12)


def test_input_is_not_mutated() -> None:
    data = [np.array([1.0, 2.0]), np.array([3.0, 4.0])]
    snapshot = [x.copy() for x in data]
    mean_and_error(data)
    for original, after in zip(snapshot, data):
        assert np.array_equal(original, after)


def test_mean_of_single_sample() -> None:
    assert mean([np.array([1.0, 2.0])]).tolist() == [1.0, 2.0]


def test_empty_sequence_rejected() -> None:
    with pytest.raises(EmptySequenceError):
        mean([])
    with pytest.raises(EmptySequenceError):
        mean_and_error(np.empty((0, 3)))


def test_single_sample_has_no_error() -> None:
    with pytest.raises(InsufficientSamplesError, match="two samples"):
        mean_and_error([4.2])


def test_generators_rejected() -> None:
    with pytest.raises(TypeError, match="sized sequence"):
        mean(x for x in [1.0, 2.0])


def test_shape_mismatch_rejected() -> None:
    with pytest.raises(ShapeMismatchError):
        mean([np.zeros(2), np.zeros(2), np.zeros(3)])


def test_complex_after_real_first_element_rejected() -> None:
    with pytest.raises(ShapeMismatchError):
        mean([1.0, 1j])


def test_validation_can_be_disabled() -> None:
    with override(VALIDATE_ELEMENTS, False):
        result = mean([1.0, 1j])
    assert result == pytest.approx(0.5 + 0.5j)
