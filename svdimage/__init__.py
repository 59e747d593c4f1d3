# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BUSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
svdimage
========

Low-rank approximation and pseudoinverse of grayscale images through
the singular value decomposition.

Public API
~~~~~~~~~~
- Decompositions
    - `SVDFactors`, `decompose`, `numpy_svd`, `eigh_svd`
- Reconstruction
    - `rank_k_approximation`, `approximation_errors`, `energy`
    - `pseudoinverse`, `projection`
- Images
    - `Image`, `normalize`, `to_matrix`, `to_image`
    - `read_pgm`, `write_pgm`, `write_matrix_text`, `read_matrix_text`
- Pipeline
    - `decompose_and_render`, `approximate_and_render`,
      `pseudoinverse_and_render`, `run`
- Reporting
    - `approximation_report`

Example
-------
>>> import numpy as np, svdimage as si
>>> A = np.array([[0.0, 255.0], [255.0, 0.0]])
>>> F = si.decompose(A)
>>> si.to_image(si.rank_k_approximation(F, 2)).pixels.tolist()
[[0, 255], [255, 0]]
"""

from importlib.metadata import version as _pkg_version

from .errors import InvalidRankError, IOFailure, MalformedRasterError, SvdImageError
from .image import to_image, to_matrix
from .normalize import normalize
from .pgm import read_matrix_text, read_pgm, write_matrix_text, write_pgm
from .pipeline import (
    approximate_and_render,
    decompose_and_render,
    pseudoinverse_and_render,
    run,
)
from .pseudoinverse import projection, pseudoinverse
from .raster import Image
from .reconstruct import approximation_errors, energy, rank_k_approximation
from .report import approximation_report
from .svd import PROVIDERS, SVDFactors, decompose, eigh_svd, numpy_svd

__all__ = [
    "SvdImageError",
    "InvalidRankError",
    "MalformedRasterError",
    "IOFailure",
    "SVDFactors",
    "PROVIDERS",
    "decompose",
    "numpy_svd",
    "eigh_svd",
    "rank_k_approximation",
    "approximation_errors",
    "energy",
    "pseudoinverse",
    "projection",
    "Image",
    "normalize",
    "to_matrix",
    "to_image",
    "read_pgm",
    "write_pgm",
    "read_matrix_text",
    "write_matrix_text",
    "decompose_and_render",
    "approximate_and_render",
    "pseudoinverse_and_render",
    "run",
    "approximation_report",
]

# ---------------------------------------------------------------------
# Version string (helps "pip show svdimage", Sphinx, etc.)
# ---------------------------------------------------------------------
try:  # installed via pip / build backend
    __version__ = _pkg_version(__name__)
except Exception:  # running from a checkout
    __version__ = "0.0.0.dev0"

# ---------------------------------------------------------------------
# Library code only logs; applications decide where records go.
# ---------------------------------------------------------------------
import logging as _logging

_logging.getLogger(__name__).addHandler(_logging.NullHandler())
