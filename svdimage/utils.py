# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import numpy as np

EPS: float = 1e-12


def as_matrix(A) -> np.ndarray:
    """
    Return `A` as a fresh, non-empty 2-D float64 array.

    Raises ValueError for anything that is not a dense 2-D matrix
    with at least one row and one column.
    """
    M = np.array(A, dtype=float, copy=True)
    if M.ndim != 2:
        raise ValueError(f"expected a 2-D matrix, got {M.ndim} dimension(s)")
    if M.shape[0] < 1 or M.shape[1] < 1:
        raise ValueError(f"matrix must have at least one row and column, got {M.shape}")
    return M


def frozen(A: np.ndarray) -> np.ndarray:
    """Return a read-only float64 copy of `A`."""
    B = np.array(A, dtype=float, copy=True)
    B.setflags(write=False)
    return B


def default_rcond(shape) -> float:
    """Relative cutoff below which a singular value counts as zero."""
    return max(shape) * np.finfo(float).eps


def singular_value_cutoff(s: np.ndarray, shape, rcond=None) -> float:
    """
    Absolute cutoff rcond * max(s).

    `rcond=None` uses `default_rcond(shape)`; `rcond=0` keeps every
    strictly positive singular value.
    """
    if rcond is None:
        rcond = default_rcond(shape)
    if s.size == 0:
        return 0.0
    return float(rcond) * max(float(np.max(s)), 0.0)


def frobenius(A: np.ndarray) -> float:
    return float(np.linalg.norm(A, ord="fro"))
