# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import logging
from typing import Optional

import numpy as np

from .svd import SVDFactors
from .utils import as_matrix, singular_value_cutoff

logger = logging.getLogger(__name__)


def inverted_sigma(factors: SVDFactors, rcond: Optional[float] = None) -> np.ndarray:
    """
    The matrix Sigma^+ of reciprocal singular values, (C, R) for full
    factors.

    A singular value s_i becomes 1 / s_i when it is above the cutoff
    rcond * max(s) and exactly 0 otherwise. Zero or negative values are
    never inverted.
    """
    R, C = factors.shape
    s = factors.s
    cutoff = singular_value_cutoff(s, (R, C), rcond)

    S_plus = np.zeros((factors.V.shape[1], factors.U.shape[1]))
    kept = 0
    for i, sigma in enumerate(s):
        if sigma > cutoff and sigma > 0:
            S_plus[i, i] = 1.0 / sigma
            kept += 1

    if kept < s.size:
        logger.debug(
            f"pseudoinverse: {s.size - kept} of {s.size} singular values "
            f"at or below cutoff {cutoff:.3e} treated as zero"
        )
    return S_plus


def pseudoinverse(factors: SVDFactors, rcond: Optional[float] = None) -> np.ndarray:
    """
    Moore–Penrose pseudoinverse A^+ = V Sigma^+ U^T from the SVD of A.

    Parameters
    ----------
    factors : SVDFactors
        Factors of an (R, C) matrix.
    rcond : float | None
        Relative cutoff for small singular values. None uses
        max(R, C) * machine epsilon; 0 inverts every positive value.

    Returns
    -------
    A_plus : (C, R) ndarray
    """
    S_plus = inverted_sigma(factors, rcond)
    return factors.V @ S_plus @ factors.U.T


def projection(A, A_plus) -> np.ndarray:
    """
    A @ A^+, the orthogonal projector onto the column space of A.

    Equals the identity when A has full row rank.
    """
    return as_matrix(A) @ as_matrix(A_plus)
