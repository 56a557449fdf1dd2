"""
Piecewise cubic spline through an ordered set of control points.

One model covers every curve family in SplineType; they differ only in the
basis matrix (see basis.py). Curves can be open or closed:

- closed: one span per control point, neighbours wrap around the sequence
- open: one span fewer, the missing neighbour at each end is mirrored
  through the endpoint (2 * endpoint - neighbour)

Tessellation is always regenerated from the control points, so edits never
need incremental bookkeeping. The result is cached until the next edit.
"""

import math

import numpy as np

from livecontour.config import SplineConfig
from livecontour.geometry.primitives import (
    aabb_from_points,
    aabb_union,
    distance_to_point,
    distance_to_point_squared,
    distance_to_segment,
    distance_to_segment_squared_info,
    point_in_aabb,
)
from livecontour.models import (
    AABB,
    ClosestControlPoint,
    ClosestPoint,
    CurveSegment,
    LineSegment,
    SplineType,
)
from livecontour.splines.basis import get_basis_matrix
from livecontour.tracer import get_tracer, trace

# Keeps the last sample of an open curve inside [0, num_curve_segments)
END_PARAMETER_EPSILON = 1e-8


def get_mirrored_point(mirror_point, static_point):
    """Reflect mirror_point through static_point."""
    return [
        2 * static_point[0] - mirror_point[0],
        2 * static_point[1] - mirror_point[1],
    ]


class SplineModel:
    """Control points, open/closed topology and tessellation settings of one curve."""

    def __init__(self, spline_type=SplineType.CATMULL_ROM, closed=False, resolution=20, scale=0.5,
                 control_points=None):
        self._spline_type = SplineType(spline_type)
        self._closed = bool(closed)
        self._resolution = _validate_resolution(resolution)
        self._scale = float(scale)
        self._control_points = []
        self._curve_segments = None

        if control_points:
            self.add_control_points(control_points)

    @classmethod
    def from_config(cls, config=None, closed=False, control_points=None):
        config = config or SplineConfig()
        return cls(
            spline_type=config.spline_type,
            closed=closed,
            resolution=config.resolution,
            scale=config.scale,
            control_points=control_points,
        )

    # -- settings ------------------------------------------------------------

    @property
    def spline_type(self):
        return self._spline_type

    @spline_type.setter
    def spline_type(self, value):
        self._spline_type = SplineType(value)
        self._invalidate()

    @property
    def closed(self):
        return self._closed

    @closed.setter
    def closed(self, value):
        self._closed = bool(value)
        self._invalidate()

    @property
    def resolution(self):
        return self._resolution

    @resolution.setter
    def resolution(self, value):
        self._resolution = _validate_resolution(value)
        self._invalidate()

    @property
    def scale(self):
        return self._scale

    @scale.setter
    def scale(self, value):
        self._scale = float(value)
        self._invalidate()

    @property
    def invalidated(self):
        return self._curve_segments is None

    def _invalidate(self):
        self._curve_segments = None

    # -- control points ------------------------------------------------------

    @property
    def num_control_points(self):
        return len(self._control_points)

    def get_control_points(self):
        return [list(p) for p in self._control_points]

    def set_control_points(self, points):
        self._control_points = [_as_point(p) for p in points]
        self._invalidate()

    def add_control_point(self, point):
        self._control_points.append(_as_point(point))
        self._invalidate()

    def add_control_points(self, points):
        self._control_points.extend(_as_point(p) for p in points)
        self._invalidate()

    def insert_control_point_at_index(self, index, point):
        if not 0 <= index <= len(self._control_points):
            raise IndexError(f"Insert index {index} out of range 0..{len(self._control_points)}")
        self._control_points.insert(index, _as_point(point))
        self._invalidate()

    def update_control_point(self, index, point):
        if not 0 <= index < len(self._control_points):
            raise IndexError(f"Control point index {index} out of range")
        self._control_points[index] = _as_point(point)
        self._invalidate()

    def delete_control_point_by_index(self, index):
        """Remove a control point. Returns False when index is out of range."""
        if not 0 <= index < len(self._control_points):
            return False
        del self._control_points[index]
        self._invalidate()
        return True

    def clear_control_points(self):
        self._control_points = []
        self._invalidate()

    # -- evaluation ----------------------------------------------------------

    def get_num_curve_segments(self):
        num_points = len(self._control_points)
        if num_points < 2:
            return 0
        return num_points if self._closed else num_points - 1

    def get_point(self, u):
        """
        Point on the curve at parameter u.

        The integer part of u picks the span and the fractional part is the
        local parameter t in [0, 1). Closed curves are periodic in u; open
        curves return None outside [0, num_curve_segments).
        """
        return self._evaluate(u, get_basis_matrix(self._spline_type, self._scale))

    def _evaluate(self, u, matrix):
        num_curve_segments = self.get_num_curve_segments()
        if num_curve_segments == 0:
            return None

        u_int = math.floor(u)
        t = u - u_int

        if self._closed:
            curve_segment_index = u_int % num_curve_segments
        elif 0 <= u_int < num_curve_segments:
            curve_segment_index = u_int
        else:
            return None

        control_values = np.array(self._get_curve_segment_points(curve_segment_index))
        weights = np.array([1.0, t, t * t, t * t * t]) @ matrix
        x, y = weights @ control_values
        return [float(x), float(y)]

    def _get_curve_segment_points(self, curve_segment_index):
        """The four control values (p0, p1, p2, p3) of a span."""
        points = self._control_points
        num_points = len(points)

        p1 = points[curve_segment_index]

        if self._closed:
            p0 = points[(curve_segment_index - 1) % num_points]
            p2 = points[(curve_segment_index + 1) % num_points]
            p3 = points[(curve_segment_index + 2) % num_points]
            return p0, p1, p2, p3

        p2 = points[curve_segment_index + 1]
        p0 = points[curve_segment_index - 1] if curve_segment_index > 0 else get_mirrored_point(p2, p1)
        if curve_segment_index + 2 < num_points:
            p3 = points[curve_segment_index + 2]
        else:
            p3 = get_mirrored_point(p1, p2)

        return p0, p1, p2, p3

    # -- tessellation --------------------------------------------------------

    def get_spline_curves(self):
        """
        Tessellated spans, one CurveSegment per span.

        The list is cached until the next edit; treat it as read-only.
        """
        if self._curve_segments is None:
            self._curve_segments = self._tessellate()
        return self._curve_segments

    @trace(label="get_spline_curves")
    def _tessellate(self):
        num_curve_segments = self.get_num_curve_segments()
        if num_curve_segments <= 0:
            return []

        matrix = get_basis_matrix(self._spline_type, self._scale)
        curve_segments = []

        for i in range(num_curve_segments):
            p0, p1, p2, p3 = self._get_curve_segment_points(i)
            line_segments, start_point = self._get_line_segments(i, matrix)

            if line_segments:
                aabb = aabb_union(ls.aabb for ls in line_segments)
            else:
                aabb = aabb_from_points([start_point])

            curve_segments.append(CurveSegment(
                p0=list(p0), p1=list(p1), p2=list(p2), p3=list(p3),
                aabb=aabb,
                length=sum(ls.length for ls in line_segments),
                line_segments=line_segments,
            ))

        get_tracer().event(
            f"Tessellated {num_curve_segments} spans x {self._resolution} line segments",
            spline_type=self._spline_type.value,
            closed=self._closed,
        )

        return curve_segments

    def _get_line_segments(self, curve_segment_index, matrix):
        """R line segments sampled uniformly in u across one span."""
        resolution = self._resolution
        min_u = curve_segment_index
        max_u = min_u + 1

        if not self._closed and curve_segment_index == self.get_num_curve_segments() - 1:
            max_u -= END_PARAMETER_EPSILON

        first_point = self._evaluate(min_u, matrix)
        start_point = first_point
        line_segments = []

        for k in range(1, resolution + 1):
            u = min(min_u + k / resolution, max_u)
            end_point = self._evaluate(u, matrix)

            line_segments.append(LineSegment(
                start=start_point,
                end=end_point,
                aabb=AABB(
                    min_x=min(start_point[0], end_point[0]),
                    min_y=min(start_point[1], end_point[1]),
                    max_x=max(start_point[0], end_point[0]),
                    max_y=max(start_point[1], end_point[1]),
                ),
                length=distance_to_point(start_point, end_point),
            ))
            start_point = end_point

        return line_segments, first_point

    # -- derived geometry ----------------------------------------------------

    def get_polyline_points(self):
        """
        Tessellated curve as one list of points.

        Closed curves end with a copy of their first point.
        """
        curve_segments = self.get_spline_curves()
        if not curve_segments:
            return []

        if self._resolution == 0:
            points = [self.get_point(i) for i in range(len(curve_segments))]
            if not self._closed:
                points.append(self.get_point(len(curve_segments) - END_PARAMETER_EPSILON))
        else:
            points = [list(curve_segments[0].line_segments[0].start)]
            for curve_segment in curve_segments:
                points.extend(list(ls.end) for ls in curve_segment.line_segments)

        if self._closed and points[-1] != points[0]:
            points.append(list(points[0]))

        return points

    def get_length(self):
        return sum(c.length for c in self.get_spline_curves())

    def get_aabb(self):
        """Bounding box of the tessellated curve, or None without spans."""
        return aabb_union(c.aabb for c in self.get_spline_curves())

    def get_closest_control_point(self, point):
        if not self._control_points:
            return None

        distances = [distance_to_point_squared(point, p) for p in self._control_points]
        index = int(np.argmin(distances))
        return ClosestControlPoint(
            index=index,
            point=list(self._control_points[index]),
            distance=math.sqrt(distances[index]),
        )

    def get_closest_control_point_within_distance(self, point, max_distance):
        closest = self.get_closest_control_point(point)
        if closest is None or closest.distance > max_distance:
            return None
        return closest

    def get_closest_point(self, point):
        """Closest point on the tessellated curve, or None without line segments."""
        best_point = None
        best_distance_squared = math.inf

        for curve_segment in self.get_spline_curves():
            for ls in curve_segment.line_segments:
                closest, distance_squared = distance_to_segment_squared_info(ls.start, ls.end, point)
                if distance_squared < best_distance_squared:
                    best_point = closest
                    best_distance_squared = distance_squared

        if best_point is None:
            return None
        return ClosestPoint(point=best_point, distance=math.sqrt(best_distance_squared))

    def is_point_near_curve(self, point, max_distance):
        """Hit test against the tessellation, prefiltered by span and segment boxes."""
        for curve_segment in self.get_spline_curves():
            if not point_in_aabb(point, curve_segment.aabb, max_distance):
                continue

            for ls in curve_segment.line_segments:
                if not point_in_aabb(point, ls.aabb, max_distance):
                    continue
                if distance_to_segment(ls.start, ls.end, point) <= max_distance:
                    return True

        return False


def _as_point(point):
    return [float(point[0]), float(point[1])]


def _validate_resolution(resolution):
    if int(resolution) != resolution or resolution < 0:
        raise ValueError(f"Resolution must be a non-negative integer, got {resolution}")
    return int(resolution)
