# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Decomposition providers.

A provider is any callable ``provider(M) -> SVDFactors`` returning full
factors, U (R×R), s (min(R, C), descending) and V (C×C), with
M ≈ U @ sigma @ V.T. The reconstruction code only ever sees `SVDFactors`,
so providers can be swapped freely.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Tuple, Union

import numpy as np

from .utils import EPS, as_matrix, frozen

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class SVDFactors:
    """
    Immutable result of a decomposition.

    U : (R, R) ndarray, orthonormal columns
    s : (p,) ndarray, non-negative singular values sorted descending
    V : (C, C) ndarray, orthonormal columns (V, not V.T)
    """

    U: np.ndarray
    s: np.ndarray
    V: np.ndarray

    def __post_init__(self):
        U = frozen(self.U)
        s = frozen(np.ravel(self.s))
        V = frozen(self.V)
        if U.ndim != 2 or V.ndim != 2:
            raise ValueError("U and V must be 2-D")
        if s.size > min(U.shape[1], V.shape[1]):
            raise ValueError(
                f"{s.size} singular values do not fit U{U.shape} and V{V.shape}"
            )
        object.__setattr__(self, "U", U)
        object.__setattr__(self, "s", s)
        object.__setattr__(self, "V", V)

    @property
    def shape(self) -> Tuple[int, int]:
        """Shape (R, C) of the decomposed matrix."""
        return self.U.shape[0], self.V.shape[0]

    @property
    def rank_limit(self) -> int:
        """Largest k a rank-k approximation can use."""
        return int(self.s.size)

    @property
    def Vt(self) -> np.ndarray:
        return self.V.T

    def sigma(self) -> np.ndarray:
        """The (R, C) diagonal matrix of singular values, zero padded."""
        S = np.zeros(self.shape)
        p = self.s.size
        S[np.arange(p), np.arange(p)] = self.s
        return S


def numpy_svd(A) -> SVDFactors:
    """Full SVD through LAPACK (numpy.linalg.svd)."""
    A = as_matrix(A)
    U, s, Vt = np.linalg.svd(A, full_matrices=True)
    return SVDFactors(U=U, s=s, V=Vt.T)


def _orthonormal_completion(cols, m: int, seed: int = 0) -> np.ndarray:
    """
    Extend the orthonormal columns in `cols` to a full m-by-m
    orthonormal basis.
    """
    missing = m - len(cols)
    if missing == 0:
        return np.column_stack(cols)
    # Start with random orthonormal columns (QR produces orthonormal Q).
    # Seeded so that the same input always yields the same factors.
    rng = np.random.default_rng(seed)
    Q, _ = np.linalg.qr(rng.standard_normal((m, missing)))
    # Remove any component lying in the span of the existing columns,
    # twice, then re-orthogonalise to get a clean complement
    for _ in range(2):
        for u in cols:
            Q -= u[:, None] * (u @ Q)
        Q, _ = np.linalg.qr(Q)
    return np.column_stack(list(cols) + [Q[:, j] for j in range(missing)])


def eigh_svd(A, tol: float = EPS) -> SVDFactors:
    """
    Full Singular Value Decomposition built from the symmetric
    eigenproblem, as described in introductory linear-algebra texts.

    Algorithm outline
    -----------------
    1.  Form A.T @ A, a symmetric n-by-n matrix.
    2.  Solve A.T @ A v = lambda v with numpy.linalg.eigh.
        Eigenvectors v become the right-singular vectors; eigenvalues
        lambda ≥ 0 give singular values sigma = sqrt(lambda).
    3.  Build the first rank(A) columns of U via u = (1/sigma) A @ v and
        complete U to an m-by-m orthonormal basis.
    4.  Return U, the min(m, n) leading singular values, and V.

    Less accurate than LAPACK for small singular values (squaring the
    condition number), but easy to follow.
    """
    A = as_matrix(A)
    m, n = A.shape

    # Handle the wide-matrix case by transposing and swapping the roles
    # of left and right singular vectors.
    if m < n:
        F = eigh_svd(A.T, tol)
        return SVDFactors(U=F.V, s=F.s, V=F.U)

    # Step-1: build the normal-equations matrix ATA
    ATA = A.T @ A

    # Step-2: eigh returns eigenvalues in ascending order, so we flip
    eigenvalues, V = np.linalg.eigh(ATA)
    idx = np.argsort(eigenvalues)[::-1]
    eigenvalues = eigenvalues[idx]
    V = V[:, idx]

    s = np.sqrt(np.clip(eigenvalues, 0.0, None))
    # Eigenvalues this close to zero are rounding noise from forming ATA
    lam_tol = max(m, n) * np.finfo(float).eps * max(float(eigenvalues[0]), 0.0)

    # Step-3: left-singular vectors for the numerically non-zero sigmas
    U_cols = []
    for j, sigma in enumerate(s):
        if sigma > tol and eigenvalues[j] > lam_tol:
            U_cols.append(A @ V[:, j] / sigma)
        else:
            s[j] = 0.0
    logger.debug(f"eigh_svd: shape={A.shape} numerical rank={len(U_cols)}")

    U = _orthonormal_completion(U_cols, m)
    return SVDFactors(U=U, s=s, V=V)


Provider = Callable[[np.ndarray], SVDFactors]

PROVIDERS: Dict[str, Provider] = {
    "numpy": numpy_svd,
    "eigh": eigh_svd,
}


def decompose(A, provider: Union[str, Provider] = "numpy") -> SVDFactors:
    """
    Decompose `A` with a registered provider name or any provider callable.
    """
    if isinstance(provider, str):
        try:
            provider = PROVIDERS[provider]
        except KeyError:
            raise ValueError(
                f"unknown decomposition provider {provider!r}; "
                f"choose from {sorted(PROVIDERS)}"
            ) from None
    A = as_matrix(A)
    name = getattr(provider, "__name__", repr(provider))
    logger.debug(f"decompose: {A.shape[0]}x{A.shape[1]} via {name}")
    return provider(A)
