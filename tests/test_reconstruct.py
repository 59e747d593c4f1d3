# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import numpy as np
import pytest

from svdimage.errors import InvalidRankError
from svdimage.reconstruct import (
    approximation_errors,
    energy,
    rank_k_approximation,
)
from svdimage.svd import PROVIDERS, SVDFactors, decompose


@pytest.mark.parametrize("m,n", [(6, 4), (4, 6), (5, 5)])
def test_shape_invariant(m, n):
    rng = np.random.default_rng(m * n)
    A = rng.normal(size=(m, n))
    F = decompose(A)
    for k in range(1, min(m, n) + 1):
        assert rank_k_approximation(F, k).shape == (m, n)


@pytest.mark.parametrize("provider", sorted(PROVIDERS))
def test_error_non_increasing_and_vanishes(provider):
    rng = np.random.default_rng(7)
    A = rng.uniform(0, 255, size=(12, 9))
    F = decompose(A, provider)

    errors = approximation_errors(A, F, range(1, 10))
    values = [errors[k] for k in range(1, 10)]
    assert np.all(np.diff(values) <= 1e-9)
    assert values[-1] < 1e-8 * np.linalg.norm(A)


def test_error_matches_eckart_young():
    """||A - A_k||_F^2 equals the sum of the discarded sigma^2."""
    rng = np.random.default_rng(11)
    A = rng.normal(size=(8, 6))
    F = decompose(A)
    for k, err in approximation_errors(A, F, [1, 3, 5]).items():
        assert np.isclose(err**2, np.sum(F.s[k:] ** 2))


def test_rank_one_matrix_is_exact():
    A = np.array([[2.0, 0.0], [0.0, 0.0]])
    F = decompose(A)
    np.testing.assert_allclose(rank_k_approximation(F, 1), A, atol=1e-12)


def test_accumulates_largest_first():
    F = SVDFactors(U=np.eye(2), s=np.array([3.0, 1.0]), V=np.eye(2))
    np.testing.assert_array_equal(
        rank_k_approximation(F, 1), np.array([[3.0, 0.0], [0.0, 0.0]])
    )
    np.testing.assert_array_equal(rank_k_approximation(F, 2), np.diag([3.0, 1.0]))


def test_thin_factors():
    rng = np.random.default_rng(3)
    A = rng.normal(size=(7, 3))
    U, s, Vt = np.linalg.svd(A, full_matrices=False)
    F = SVDFactors(U=U, s=s, V=Vt.T)
    np.testing.assert_allclose(rank_k_approximation(F, 3), A, atol=1e-12)


@pytest.mark.parametrize("k", [0, -1, 4, 100])
def test_invalid_rank(k):
    F = decompose(np.ones((3, 5)))
    with pytest.raises(InvalidRankError) as info:
        rank_k_approximation(F, k)
    assert info.value.k == k
    assert info.value.rank_limit == 3


@pytest.mark.parametrize("k", [1.0, "2", None, True])
def test_non_integer_rank(k):
    F = decompose(np.ones((3, 3)))
    with pytest.raises(InvalidRankError):
        rank_k_approximation(F, k)


def test_invalid_rank_is_a_value_error():
    F = decompose(np.eye(2))
    with pytest.raises(ValueError):
        rank_k_approximation(F, 3)


def test_numpy_integer_rank():
    F = decompose(np.eye(3))
    assert rank_k_approximation(F, np.int64(2)).shape == (3, 3)


def test_errors_shape_mismatch():
    F = decompose(np.eye(3))
    with pytest.raises(ValueError):
        approximation_errors(np.eye(2), F, [1])


def test_energy():
    F = SVDFactors(U=np.eye(2), s=np.array([3.0, 1.0]), V=np.eye(2))
    assert energy(F, 1) == pytest.approx(0.9)
    assert energy(F, 2) == pytest.approx(1.0)


def test_energy_of_zero_matrix():
    F = decompose(np.zeros((2, 3)))
    assert energy(F, 2) == 0.0
