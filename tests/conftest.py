"""Pytest fixtures for livecontour tests."""

import tempfile

import cv2
import numpy as np
import pytest


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def uniform_image():
    """A 4x4 image with equal intensity everywhere."""
    return np.full((4, 4), 7.0)


@pytest.fixture
def vertical_line_image():
    """A dark 21x21 image with a bright one-pixel vertical line at x=10."""
    img = np.zeros((21, 21), dtype=np.uint8)
    cv2.line(img, (10, 0), (10, 20), 255, 1)
    return img


@pytest.fixture
def rectangle_image():
    """A dark 40x40 image with a filled bright square."""
    img = np.zeros((40, 40), dtype=np.uint8)
    cv2.rectangle(img, (10, 10), (29, 29), 255, -1)
    return img


@pytest.fixture
def flat_canvas():
    """A featureless 20x20 canvas for session tests."""
    return np.full((20, 20), 50.0)


@pytest.fixture
def default_config():
    """Create default livecontour configuration."""
    from livecontour.config import ContourConfig
    return ContourConfig()


@pytest.fixture
def three_points():
    return [[0, 0], [10, 0], [10, 10]]


@pytest.fixture
def pentagon_points():
    return [[0, 0], [10, 0], [14, 8], [5, 14], [-4, 8]]
