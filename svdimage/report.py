# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Tabulated quality of rank-k approximations
"""

from typing import Iterable, Optional

import pandas as pd

from .reconstruct import approximation_errors, energy
from .svd import SVDFactors
from .utils import as_matrix, frobenius

COLUMNS = ["k", "frobenius_error", "relative_error", "energy"]


def approximation_report(
    A,
    factors: SVDFactors,
    ks: Optional[Iterable[int]] = None,
) -> pd.DataFrame:
    """
    One row per k: ||A - A_k||_F, that error relative to ||A||_F,
    and the fraction of singular-value energy the first k triplets keep.

    `ks` defaults to every valid rank 1 .. factors.rank_limit.
    """
    A = as_matrix(A)
    if ks is None:
        ks = range(1, factors.rank_limit + 1)
    errors = approximation_errors(A, factors, ks)
    norm = frobenius(A)

    records = []
    for k, err in errors.items():
        rel = err / norm if norm > 0 else 0.0
        records.append((k, err, rel, energy(factors, k)))
    return pd.DataFrame(records, columns=COLUMNS)
