# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

"""
Portable graymap (PGM) codec and whitespace matrix dumps.

Supported encodings
-------------------
- ``plain``: magic ``P2``, intensities as whitespace-separated decimals
- ``raw``:   magic ``P5``, one byte per sample (two bytes big-endian when
  maxval > 255)

Intensities outside [0, maxval] are rejected on read and on write,
never clamped.
"""

import logging
import re
from typing import List, Tuple

import numpy as np

from .errors import IOFailure, MalformedRasterError
from .raster import Image
from .utils import as_matrix

logger = logging.getLogger(__name__)

ENCODINGS = {"plain": b"P2", "raw": b"P5"}
WHITESPACE = b" \t\r\n\v\f"
COMMENT = re.compile(rb"#[^\r\n]*")


def _read_bytes(path) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as exc:
        raise IOFailure(f"cannot read {path}: {exc}") from exc


def _write_bytes(path, data: bytes) -> None:
    try:
        with open(path, "wb") as f:
            f.write(data)
    except OSError as exc:
        raise IOFailure(f"cannot write {path}: {exc}") from exc


def _header_tokens(data: bytes, count: int) -> Tuple[List[bytes], int]:
    """
    Pull `count` whitespace-separated tokens off the front of `data`,
    skipping ``#`` comments. Returns the tokens and the offset just
    past the last one.
    """
    tokens: List[bytes] = []
    pos = 0
    n = len(data)
    while len(tokens) < count:
        while pos < n and data[pos] in WHITESPACE:
            pos += 1
        if pos >= n:
            raise MalformedRasterError(
                f"truncated header: expected {count} fields, found {len(tokens)}"
            )
        if data[pos : pos + 1] == b"#":
            while pos < n and data[pos] not in b"\r\n":
                pos += 1
            continue
        start = pos
        while pos < n and data[pos] not in WHITESPACE and data[pos : pos + 1] != b"#":
            pos += 1
        tokens.append(data[start:pos])
    return tokens, pos


def _parse_int(token: bytes, what: str) -> int:
    try:
        return int(token.decode("ascii"))
    except (UnicodeDecodeError, ValueError):
        raise MalformedRasterError(f"invalid {what}: {token!r}") from None


def decode_pgm(data: bytes) -> Image:
    """Decode the bytes of a P2 or P5 graymap."""
    tokens, pos = _header_tokens(data, 4)
    magic = tokens[0]
    if magic not in ENCODINGS.values():
        raise MalformedRasterError(f"unsupported magic number {magic!r}")

    width = _parse_int(tokens[1], "width")
    height = _parse_int(tokens[2], "height")
    maxval = _parse_int(tokens[3], "maxval")
    if width < 1 or height < 1:
        raise MalformedRasterError(f"invalid dimensions {width}x{height}")
    if not 0 < maxval < 65536:
        raise MalformedRasterError(f"maxval must be in [1, 65535], got {maxval}")
    expected = width * height

    if magic == b"P2":
        body = COMMENT.sub(b"", data[pos:])
        values = [_parse_int(token, "intensity") for token in body.split()]
        if len(values) != expected:
            raise MalformedRasterError(
                f"expected {expected} intensities for {width}x{height}, got {len(values)}"
            )
        pixels = np.array(values, dtype=np.int64)
    else:
        # exactly one whitespace byte separates the header from the samples
        if pos >= len(data) or data[pos] not in WHITESPACE:
            raise MalformedRasterError("missing separator after P5 header")
        raw = data[pos + 1 :]
        dtype = np.dtype(">u2") if maxval > 255 else np.dtype("u1")
        nbytes = expected * dtype.itemsize
        if len(raw) != nbytes:
            raise MalformedRasterError(
                f"expected {nbytes} bytes of samples for {width}x{height}, got {len(raw)}"
            )
        pixels = np.frombuffer(raw[:nbytes], dtype=dtype).astype(np.int64)

    if pixels.size and (pixels.min() < 0 or pixels.max() > maxval):
        raise MalformedRasterError(
            f"intensities span [{pixels.min()}, {pixels.max()}], outside [0, {maxval}]"
        )
    return Image(pixels.reshape(height, width), maxval)


def encode_pgm(image: Image, encoding: str = "plain") -> bytes:
    """Encode `image` as P2 (``plain``) or P5 (``raw``) bytes."""
    try:
        magic = ENCODINGS[encoding]
    except KeyError:
        raise ValueError(
            f"unknown PGM encoding {encoding!r}; choose from {sorted(ENCODINGS)}"
        ) from None

    pixels = image.pixels
    if pixels.min() < 0 or pixels.max() > image.maxval:
        raise MalformedRasterError(
            f"intensities span [{pixels.min()}, {pixels.max()}], outside [0, {image.maxval}]"
        )
    header = b"%s\n%d %d\n%d\n" % (magic, image.width, image.height, image.maxval)

    if encoding == "plain":
        lines = [" ".join(str(int(v)) for v in row) for row in pixels]
        return header + ("\n".join(lines) + "\n").encode("ascii")

    dtype = np.dtype(">u2") if image.maxval > 255 else np.dtype("u1")
    return header + pixels.astype(dtype).tobytes()


def read_pgm(path) -> Image:
    """Read a P2 or P5 graymap from `path`."""
    image = decode_pgm(_read_bytes(path))
    logger.debug(f"read {path}: {image.width}x{image.height} maxval={image.maxval}")
    return image


def write_pgm(image: Image, path, encoding: str = "plain") -> None:
    """Write `image` to `path` as a P2 (``plain``) or P5 (``raw``) graymap."""
    _write_bytes(path, encode_pgm(image, encoding))
    logger.info(f"wrote {path} ({image.width}x{image.height}, {encoding})")


def write_matrix_text(A, path) -> None:
    """
    Dump a matrix as plain text: one row per line, entries formatted
    with ``%f`` and separated by single spaces.
    """
    A = as_matrix(A)
    try:
        np.savetxt(path, A, fmt="%f", delimiter=" ")
    except OSError as exc:
        raise IOFailure(f"cannot write {path}: {exc}") from exc
    logger.info(f"wrote {path} ({A.shape[0]}x{A.shape[1]} text)")


def read_matrix_text(path) -> np.ndarray:
    """Load a matrix written by `write_matrix_text`."""
    try:
        return np.loadtxt(path, dtype=float, ndmin=2)
    except OSError as exc:
        raise IOFailure(f"cannot read {path}: {exc}") from exc
