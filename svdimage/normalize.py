# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Min-max normalization of real matrices onto 8-bit intensities
"""

import logging

import numpy as np

from .raster import DEFAULT_MAXVAL, Image
from .utils import as_matrix

logger = logging.getLogger(__name__)


def normalize(A) -> Image:
    """
    Map the entries of `A` linearly onto [0, 255].

    The smallest entry becomes 0 and the largest 255; each v maps to
    round(255 * (v - min) / (max - min)) with halves rounded away from
    zero. A constant matrix has no range to scale and maps to all zeros.
    """
    A = as_matrix(A)
    lo = float(A.min())
    hi = float(A.max())

    if hi == lo:
        logger.debug(f"normalize: constant {A.shape} matrix ({lo}), all zeros")
        return Image(np.zeros(A.shape, dtype=np.int64), DEFAULT_MAXVAL)

    span = hi - lo
    if np.isfinite(span):
        scaled = DEFAULT_MAXVAL * ((A - lo) / span)
    else:
        # range wider than the largest double; halve everything first
        scaled = DEFAULT_MAXVAL * ((A / 2 - lo / 2) / (hi / 2 - lo / 2))
    # scaled >= 0, so floor(x + 0.5) rounds halves away from zero
    levels = np.floor(scaled + 0.5)
    levels = np.clip(levels, 0, DEFAULT_MAXVAL)
    return Image(levels.astype(np.int64), DEFAULT_MAXVAL)
