# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

from dataclasses import dataclass

import numpy as np

from .errors import MalformedRasterError

DEFAULT_MAXVAL: int = 255


@dataclass(frozen=True, eq=False)
class Image:
    """
    Grayscale raster: a 2-D grid of integer intensities in [0, maxval].

    Rows are the image height, columns the width. The pixel array is
    copied and marked read-only.
    """

    pixels: np.ndarray
    maxval: int = DEFAULT_MAXVAL

    def __post_init__(self):
        pixels = np.array(self.pixels, copy=True)
        if pixels.ndim != 2 or pixels.size == 0:
            raise MalformedRasterError(
                f"raster must be a non-empty 2-D grid, got shape {pixels.shape}"
            )
        if not np.issubdtype(pixels.dtype, np.integer):
            raise MalformedRasterError(
                f"raster intensities must be integers, got {pixels.dtype}"
            )
        if not 0 < self.maxval < 65536:
            raise MalformedRasterError(f"maxval must be in [1, 65535], got {self.maxval}")
        lo, hi = int(pixels.min()), int(pixels.max())
        if lo < 0 or hi > self.maxval:
            raise MalformedRasterError(
                f"intensities span [{lo}, {hi}], outside [0, {self.maxval}]"
            )
        pixels = pixels.astype(np.int64)
        pixels.setflags(write=False)
        object.__setattr__(self, "pixels", pixels)

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Image):
            return NotImplemented
        return self.maxval == other.maxval and np.array_equal(self.pixels, other.pixels)
