# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Exception taxonomy for svdimage.

Every error raised on purpose by the package derives from `SvdImageError`.
The concrete classes also derive from the matching builtin so callers that
only know about ``ValueError`` or ``OSError`` keep working.
"""

from typing import Optional


class SvdImageError(Exception):
    """Base class of all svdimage errors."""


class InvalidRankError(SvdImageError, ValueError):
    """Requested rank k lies outside [1, rank_limit]."""

    def __init__(self, k, rank_limit: int, message: Optional[str] = None):
        self.k = k
        self.rank_limit = rank_limit
        if message is None:
            message = f"rank k={k!r} is outside the valid range [1, {rank_limit}]"
        super().__init__(message)


class MalformedRasterError(SvdImageError, ValueError):
    """Raster header or body is inconsistent with its declared dimensions."""


class IOFailure(SvdImageError, OSError):
    """Reading or writing a file failed."""
