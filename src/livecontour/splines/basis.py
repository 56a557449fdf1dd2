"""
Basis matrices for the cubic curve families.

Every family evaluates a span as

    P(t) = [1  t  t^2  t^3] . M . [P0  P1  P2  P3]^T

so switching family only means switching M.
"""

import numpy as np

from livecontour.models import SplineType


def cardinal_matrix(scale):
    """Cardinal spline basis with tension scale s (s = 0.5 is Catmull-Rom)."""
    s = float(scale)
    return np.array([
        [0.0, 1.0, 0.0, 0.0],
        [-s, 0.0, s, 0.0],
        [2 * s, s - 3, 3 - 2 * s, -s],
        [-s, 2 - s, s - 2, s],
    ])


CATMULL_ROM_MATRIX = 0.5 * np.array([
    [0.0, 2.0, 0.0, 0.0],
    [-1.0, 0.0, 1.0, 0.0],
    [2.0, -5.0, 4.0, -1.0],
    [-1.0, 3.0, -3.0, 1.0],
])

LINEAR_MATRIX = np.array([
    [0.0, 1.0, 0.0, 0.0],
    [0.0, -1.0, 1.0, 0.0],
    [0.0, 0.0, 0.0, 0.0],
    [0.0, 0.0, 0.0, 0.0],
])

BSPLINE_MATRIX = np.array([
    [1.0, 4.0, 1.0, 0.0],
    [-3.0, 0.0, 3.0, 0.0],
    [3.0, -6.0, 3.0, 0.0],
    [-1.0, 3.0, -3.0, 1.0],
]) / 6.0


def get_basis_matrix(spline_type, scale=0.5):
    """Return the 4x4 basis matrix for a SplineType."""
    spline_type = SplineType(spline_type)

    if spline_type == SplineType.CATMULL_ROM:
        return CATMULL_ROM_MATRIX
    if spline_type == SplineType.CARDINAL:
        return cardinal_matrix(scale)
    if spline_type == SplineType.LINEAR:
        return LINEAR_MATRIX
    return BSPLINE_MATRIX
