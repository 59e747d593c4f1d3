# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Conversions between rasters and matrices
"""

import numpy as np

from .normalize import normalize
from .raster import Image


def to_matrix(image: Image) -> np.ndarray:
    """Widen the intensities of `image` to a (height, width) float matrix."""
    return image.pixels.astype(float)


def to_image(A) -> Image:
    """Render a real matrix as an 8-bit image through `normalize`."""
    return normalize(A)
