# Copyright (C) 2025 Brantleigh Bunting
# SPDX-License-Identifier: BSL-1.1
#
# Use of this software is governed by the Business Source License
# included in the LICENSE file and at <https://mariadb.com/bsl11>

import numpy as np
import pytest

from svdimage.normalize import normalize


@pytest.mark.parametrize("seed", [0, 1, 2])
def test_range_and_extremes(seed):
    rng = np.random.default_rng(seed)
    A = rng.normal(scale=1e3, size=(7, 9))

    image = normalize(A)
    px = image.pixels
    assert px.shape == A.shape
    assert px.min() == 0 and px.max() == 255
    assert px[np.unravel_index(A.argmin(), A.shape)] == 0
    assert px[np.unravel_index(A.argmax(), A.shape)] == 255


def test_linear_mapping():
    A = np.array([[-1.0, 0.0, 1.0]])
    # midpoint 127.5 rounds up
    assert normalize(A).pixels.tolist() == [[0, 128, 255]]


@pytest.mark.parametrize("value", [0.0, 42.0, -3.5])
def test_constant_matrix_is_all_zero(value):
    A = np.full((3, 4), value)
    image = normalize(A)
    assert image.pixels.shape == (3, 4)
    assert not image.pixels.any()


def test_does_not_mutate_input():
    A = np.array([[1.0, 2.0], [3.0, 4.0]])
    before = A.copy()
    normalize(A)
    np.testing.assert_array_equal(A, before)


def test_deterministic():
    rng = np.random.default_rng(5)
    A = rng.random((4, 4))
    assert normalize(A) == normalize(A)


def test_range_wider_than_largest_double():
    A = np.array([[-1e308, 0.0, 1e308]])
    assert normalize(A).pixels.tolist() == [[0, 128, 255]]
