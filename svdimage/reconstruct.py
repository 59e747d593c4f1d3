# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Truncated (rank-k) reconstruction from SVD factors
"""

import logging
import numbers
from typing import Dict, Iterable

import numpy as np

from .errors import InvalidRankError
from .svd import SVDFactors
from .utils import as_matrix, frobenius

logger = logging.getLogger(__name__)


def check_rank(factors: SVDFactors, k) -> int:
    """Return `k` as an int, or raise InvalidRankError if unusable."""
    limit = factors.rank_limit
    if isinstance(k, bool) or not isinstance(k, numbers.Integral):
        raise InvalidRankError(k, limit, f"rank k must be an integer, got {k!r}")
    k = int(k)
    if k < 1 or k > limit:
        raise InvalidRankError(k, limit)
    return k


def rank_k_approximation(factors: SVDFactors, k: int) -> np.ndarray:
    """
    Best rank-k approximation (Eckart–Young) of the decomposed matrix.

        A_k = sum_{i<k} s_i * u_i v_i^T

    The rank-1 terms are accumulated from the largest singular value
    down, so results are reproducible term for term.

    Parameters
    ----------
    factors : SVDFactors
        Full or thin factors of an (R, C) matrix.
    k : int
        Number of singular triplets, 1 <= k <= factors.rank_limit.

    Returns
    -------
    A_k : (R, C) ndarray
    """
    k = check_rank(factors, k)
    U, s, V = factors.U, factors.s, factors.V

    A = np.zeros(factors.shape)
    for i in range(k):
        A += s[i] * np.outer(U[:, i], V[:, i])
    return A


def approximation_errors(A, factors: SVDFactors, ks: Iterable[int]) -> Dict[int, float]:
    """
    Frobenius error ||A - A_k|| for every k in `ks`.

    Non-increasing in k and (numerically) zero at k = min(R, C).
    """
    A = as_matrix(A)
    if A.shape != factors.shape:
        raise ValueError(f"matrix shape {A.shape} does not match factors {factors.shape}")
    errors = {}
    for k in ks:
        errors[int(k)] = frobenius(A - rank_k_approximation(factors, k))
    return errors


def energy(factors: SVDFactors, k: int) -> float:
    """
    Fraction of the total energy sum(s**2) kept by the first k singular
    values. 0.0 for the zero matrix.
    """
    k = check_rank(factors, k)
    s2 = factors.s**2
    total = float(s2.sum())
    if total == 0.0:
        return 0.0
    return float(s2[:k].sum()) / total
