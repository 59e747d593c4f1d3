# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import numpy as np
import pytest

from svdimage.svd import PROVIDERS, SVDFactors, decompose, eigh_svd, numpy_svd


@pytest.mark.parametrize("provider", sorted(PROVIDERS))
@pytest.mark.parametrize("m,n", [(8, 5), (20, 20), (5, 12)])
def test_reconstruction_and_orthogonality(provider, m, n):
    """U Σ Vᵀ must reconstruct A and U, V must be orthonormal."""
    rng = np.random.default_rng(seed=m + n)
    A = rng.normal(size=(m, n))

    F = decompose(A, provider)
    assert F.U.shape == (m, m)
    assert F.V.shape == (n, n)
    assert F.s.shape == (min(m, n),)

    # 1  Reconstruction ‖A - UΣVᵀ‖
    recon_err = np.linalg.norm(F.U @ F.sigma() @ F.Vt - A, ord=2)
    assert recon_err < 1e-10

    # 2  Orthonormality
    assert np.allclose(F.U.T @ F.U, np.eye(m), atol=1e-10)
    assert np.allclose(F.V.T @ F.V, np.eye(n), atol=1e-10)

    # 3  Non-negative, descending
    assert np.all(F.s >= 0)
    assert np.all(np.diff(F.s) <= 1e-12)


@pytest.mark.parametrize("m,n", [(12, 7), (30, 15)])
def test_eigh_against_numpy(m, n):
    """Singular values must match LAPACK's."""
    rng = np.random.default_rng(seed=4 * m + n)
    A = rng.standard_normal(size=(m, n))

    s_np = np.linalg.svd(A, compute_uv=False)
    F = eigh_svd(A)
    assert np.allclose(F.s, s_np, rtol=1e-10, atol=1e-12)


@pytest.mark.parametrize("k", [0, 1, 3])
def test_rank_deficient(k):
    """
    Rank-deficient matrices: make last k cols zero, the trailing
    singular values must come out as zero and U stays orthonormal.
    """
    rng = np.random.default_rng(123 + k)
    A = rng.normal(size=(10, 7))
    if k:
        A[:, -k:] = 0.0

    F = eigh_svd(A)
    err = np.linalg.norm(F.U @ F.sigma() @ F.Vt - A)
    assert err < 1e-10
    assert np.allclose(F.U.T @ F.U, np.eye(10), atol=1e-10)

    r = 7 - k
    assert np.all(F.s[:r] > 1e-12)
    assert np.all(F.s[r:] < 1e-12)


def test_eigh_is_deterministic():
    A = np.zeros((6, 3))
    A[0, 0] = 1.0
    F1 = eigh_svd(A)
    F2 = eigh_svd(A)
    np.testing.assert_array_equal(F1.U, F2.U)


def test_factors_are_read_only():
    F = numpy_svd(np.eye(3))
    with pytest.raises(ValueError):
        F.U[0, 0] = 5.0
    with pytest.raises(ValueError):
        F.s[0] = 5.0


def test_factors_shape_and_sigma():
    A = np.arange(6, dtype=float).reshape(2, 3)
    F = numpy_svd(A)
    assert F.shape == (2, 3)
    assert F.rank_limit == 2
    S = F.sigma()
    assert S.shape == (2, 3)
    np.testing.assert_allclose(np.diag(S), F.s)
    assert S[0, 2] == 0.0


def test_factors_reject_too_many_singular_values():
    with pytest.raises(ValueError):
        SVDFactors(U=np.eye(2), s=np.ones(3), V=np.eye(3))


def test_decompose_accepts_callable():
    calls = []

    def provider(A):
        calls.append(A.shape)
        return numpy_svd(A)

    F = decompose([[1.0, 2.0], [3.0, 4.0]], provider)
    assert calls == [(2, 2)]
    assert F.shape == (2, 2)


def test_decompose_unknown_provider():
    with pytest.raises(ValueError, match="unknown decomposition provider"):
        decompose(np.eye(2), "jacobi")


@pytest.mark.parametrize("bad", [np.ones(3), np.ones((2, 2, 2)), np.zeros((0, 3))])
def test_decompose_rejects_non_matrices(bad):
    with pytest.raises(ValueError):
        decompose(bad)
