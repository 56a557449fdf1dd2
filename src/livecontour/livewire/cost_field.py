"""
Cost field construction for livewire tracing.

Turns a scalar pixel buffer into a per-pixel traversal cost in [0, 1] where
strong edges are cheap to walk along. The cost blends two edge features:
normalized Sobel gradient magnitude and Laplacian zero-crossings.
"""

import cv2
import numpy as np

from livecontour.config import LivewireConfig
from livecontour.tracer import get_tracer, trace


class PixelBuffer:
    """
    Immutable width x height grid of scalar intensities.

    Accepts either a 2D array shaped (height, width) or flat raster-ordered
    data together with width and height. An optional (lower, upper) window
    restricts which intensity range contributes edges.
    """

    def __init__(self, data, width=None, height=None, window=None):
        array = np.asarray(data, dtype=np.float64)

        if array.ndim == 2:
            if width is None and height is None:
                height, width = array.shape
            elif array.shape != (height, width):
                raise ValueError(
                    f"Array shape {array.shape} does not match height={height}, width={width}"
                )
        elif array.ndim == 1:
            if width is None or height is None:
                raise ValueError("Flat pixel data requires width and height")
            if array.size != width * height:
                raise ValueError(
                    f"Pixel data has {array.size} values, expected {width * height}"
                )
            array = array.reshape(height, width)
        else:
            raise ValueError(f"Pixel data must be 1D or 2D, got {array.ndim}D")

        if not width or not height:
            raise ValueError(f"Pixel buffer must be non-empty, got {width}x{height}")

        if window is not None:
            lower, upper = window
            if upper < lower:
                raise ValueError(f"Invalid intensity window: lower={lower} > upper={upper}")
            window = (float(lower), float(upper))

        array = array.copy()
        array.setflags(write=False)

        self._data = array
        self._window = window

    @property
    def data(self):
        return self._data

    @property
    def width(self):
        return self._data.shape[1]

    @property
    def height(self):
        return self._data.shape[0]

    @property
    def window(self):
        return self._window

    def contains(self, x, y):
        """Check whether an integer pixel index lies inside the buffer."""
        return 0 <= x < self.width and 0 <= y < self.height


class CostField:
    """Read-only per-pixel traversal cost grid, shaped (height, width)."""

    def __init__(self, values):
        values = np.asarray(values, dtype=np.float64)
        values.setflags(write=False)
        self._values = values

    @property
    def values(self):
        return self._values

    @property
    def width(self):
        return self._values.shape[1]

    @property
    def height(self):
        return self._values.shape[0]

    def contains(self, x, y):
        return 0 <= x < self.width and 0 <= y < self.height


@trace(label="build_cost_field")
def build_cost_field(buffer, config=None):
    """
    Build the traversal cost field for a pixel buffer.

    cost = (wg * (1 - gradient) + wz * (1 - zero_crossing)) / (wg + wz)

    A buffer with no intensity variation therefore costs 1 everywhere.
    """
    tracer = get_tracer()
    config = config or LivewireConfig()

    wg = float(config.gradient_weight)
    wz = float(config.zero_crossing_weight)
    if wg < 0 or wz < 0 or wg + wz <= 0:
        raise ValueError(f"Cost weights must be non-negative and not both zero: {wg}, {wz}")

    normalized = normalize_intensities(buffer.data, buffer.window)
    gradient = gradient_magnitude(normalized)
    zero_crossing = laplacian_zero_crossings(normalized)

    cost = (wg * (1.0 - gradient) + wz * (1.0 - zero_crossing)) / (wg + wz)
    # float error can leave values a hair outside [0, 1]
    cost = np.clip(cost, 0.0, 1.0)

    tracer.event(
        f"Cost field: {buffer.width}x{buffer.height}, "
        f"edge_ratio={float(zero_crossing.mean()):.3f}, mean_cost={float(cost.mean()):.3f}"
    )

    return CostField(cost)


def normalize_intensities(data, window=None):
    """
    Rescale intensities to [0, 1].

    With a window, values are clipped to [lower, upper] first; otherwise the
    data's own range is used. A flat range maps to zeros.
    """
    if window is not None:
        lower, upper = window
        data = np.clip(data, lower, upper)
    else:
        lower, upper = float(data.min()), float(data.max())

    span = upper - lower
    if span <= 0:
        return np.zeros_like(data, dtype=np.float64)

    return (data - lower) / span


def gradient_magnitude(image):
    """Sobel gradient magnitude scaled by its maximum into [0, 1]."""
    image = image.astype(np.float64)
    gx = cv2.Sobel(image, cv2.CV_64F, 1, 0, ksize=3, borderType=cv2.BORDER_REPLICATE)
    gy = cv2.Sobel(image, cv2.CV_64F, 0, 1, ksize=3, borderType=cv2.BORDER_REPLICATE)

    magnitude = np.hypot(gx, gy)
    peak = magnitude.max()
    if peak <= 0:
        return np.zeros_like(magnitude)

    return magnitude / peak


def laplacian_zero_crossings(image):
    """
    Binary map of Laplacian sign changes.

    A pixel is marked when its Laplacian has the opposite sign to its right
    or lower neighbour.
    """
    lap = cv2.Laplacian(image.astype(np.float64), cv2.CV_64F, ksize=1, borderType=cv2.BORDER_REPLICATE)

    crossings = np.zeros(lap.shape, dtype=np.float64)
    horizontal = lap[:, :-1] * lap[:, 1:] < 0
    vertical = lap[:-1, :] * lap[1:, :] < 0
    crossings[:, :-1][horizontal] = 1.0
    crossings[:-1, :][vertical] = 1.0

    return crossings
