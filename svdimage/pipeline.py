# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Orchestration: raster -> matrix -> SVD -> {approximation | pseudoinverse}
-> normalized raster.

Every step accepts precomputed `SVDFactors` so a batch decomposes the
image only once. Nothing here does numerical work of its own.
"""

import logging
import os
from typing import Dict, Iterable, List, Optional, Union

import numpy as np

from .errors import InvalidRankError, IOFailure
from .image import to_image, to_matrix
from .pgm import read_pgm, write_matrix_text, write_pgm
from .pseudoinverse import projection, pseudoinverse
from .raster import Image
from .reconstruct import check_rank, rank_k_approximation
from .svd import Provider, SVDFactors, decompose

logger = logging.getLogger(__name__)

DEFAULT_RANKS = range(1, 6)

U_NAME = "U"
SIGMA_NAME = "D"
VT_NAME = "VTranspose"
PINV_NAME = "Pseudoinverse"
PROJECTION_NAME = "IHat"


def approximation_name(k: int) -> str:
    return f"A{k}"


def _render(
    A: np.ndarray,
    name: str,
    out_dir: str,
    encoding: str,
    dump_text: bool,
) -> str:
    path = os.path.join(out_dir, name + ".pgm")
    write_pgm(to_image(A), path, encoding)
    if dump_text:
        write_matrix_text(A, os.path.join(out_dir, name + ".txt"))
    return path


def _factors_for(
    image: Image,
    factors: Optional[SVDFactors],
    provider: Union[str, Provider],
) -> SVDFactors:
    if factors is not None:
        if factors.shape != (image.height, image.width):
            raise ValueError(
                f"factors of shape {factors.shape} do not belong to a "
                f"{image.height}x{image.width} image"
            )
        return factors
    return decompose(to_matrix(image), provider)


def default_ranks(factors: SVDFactors) -> List[int]:
    """`DEFAULT_RANKS`, capped at the number of singular values."""
    return [k for k in DEFAULT_RANKS if k <= factors.rank_limit]


def _validated_ranks(factors: SVDFactors, ks: Optional[Iterable[int]]) -> List[int]:
    """
    Check every k up front; report all invalid ranks in one error.
    `ks=None` means `default_ranks(factors)`.
    """
    if ks is None:
        return default_ranks(factors)
    ks = list(ks)
    bad = []
    for k in ks:
        try:
            check_rank(factors, k)
        except InvalidRankError:
            bad.append(k)
    if bad:
        raise InvalidRankError(
            bad[0] if len(bad) == 1 else bad,
            factors.rank_limit,
            f"rank(s) {bad} outside the valid range [1, {factors.rank_limit}]; "
            "nothing written",
        )
    return [int(k) for k in ks]


def decompose_and_render(
    image: Image,
    out_dir: str = ".",
    factors: Optional[SVDFactors] = None,
    provider: Union[str, Provider] = "numpy",
    encoding: str = "plain",
    dump_text: bool = False,
) -> List[str]:
    """
    Render U, the singular-value diagonal and V^T of `image` as
    ``U.pgm``, ``D.pgm`` and ``VTranspose.pgm``.
    """
    factors = _factors_for(image, factors, provider)
    return [
        _render(factors.U, U_NAME, out_dir, encoding, dump_text),
        _render(factors.sigma(), SIGMA_NAME, out_dir, encoding, dump_text),
        _render(factors.Vt, VT_NAME, out_dir, encoding, dump_text),
    ]


def approximate_and_render(
    image: Image,
    ks: Optional[Iterable[int]] = None,
    out_dir: str = ".",
    factors: Optional[SVDFactors] = None,
    provider: Union[str, Provider] = "numpy",
    encoding: str = "plain",
    dump_text: bool = False,
) -> Dict[int, str]:
    """
    Render the rank-k approximation of `image` as ``A<k>.pgm`` for
    each k in `ks`.
    `ks=None` renders `default_ranks(factors)`, i.e. 1..5 capped at
    min(R, C).

    All ranks are validated before anything is written: if any k is
    invalid, InvalidRankError is raised and no approximation is rendered.
    """
    factors = _factors_for(image, factors, provider)
    ks = _validated_ranks(factors, ks)

    paths = {}
    for k in ks:
        A_k = rank_k_approximation(factors, k)
        paths[k] = _render(A_k, approximation_name(k), out_dir, encoding, dump_text)
    return paths


def pseudoinverse_and_render(
    image: Image,
    out_dir: str = ".",
    factors: Optional[SVDFactors] = None,
    provider: Union[str, Provider] = "numpy",
    encoding: str = "plain",
    dump_text: bool = False,
    rcond: Optional[float] = None,
) -> List[str]:
    """
    Render the pseudoinverse of `image` as ``Pseudoinverse.pgm`` and
    the check matrix A @ A^+ as ``IHat.pgm``.
    """
    factors = _factors_for(image, factors, provider)
    A_plus = pseudoinverse(factors, rcond)
    I_hat = projection(to_matrix(image), A_plus)
    return [
        _render(A_plus, PINV_NAME, out_dir, encoding, dump_text),
        _render(I_hat, PROJECTION_NAME, out_dir, encoding, dump_text),
    ]


def run(
    path: str,
    out_dir: str = ".",
    ks: Optional[Iterable[int]] = None,
    provider: Union[str, Provider] = "numpy",
    encoding: str = "plain",
    dump_text: bool = False,
) -> List[str]:
    """
    Full batch for one raster file: factors, approximations for every
    k in `ks`, and the pseudoinverse. The image is decomposed once.
    """
    image = read_pgm(path)
    factors = decompose(to_matrix(image), provider)
    ks = _validated_ranks(factors, ks)
    try:
        os.makedirs(out_dir, exist_ok=True)
    except OSError as exc:
        raise IOFailure(f"cannot create {out_dir}: {exc}") from exc

    written = decompose_and_render(
        image, out_dir, factors, encoding=encoding, dump_text=dump_text
    )
    written += approximate_and_render(
        image, ks, out_dir, factors, encoding=encoding, dump_text=dump_text
    ).values()
    written += pseudoinverse_and_render(
        image, out_dir, factors, encoding=encoding, dump_text=dump_text
    )
    logger.info(f"{path}: wrote {len(written)} artifacts to {out_dir}")
    return written
