"""
Point and segment primitives shared by the livewire and spline producers.

All functions take [x, y] pairs (lists, tuples or numpy arrays) and return
plain Python floats and lists.
"""

import math

from livecontour.models import AABB


def distance_to_point_squared(p1, p2):
    """Squared Euclidean distance between two points."""
    dx = p1[0] - p2[0]
    dy = p1[1] - p2[1]
    return float(dx * dx + dy * dy)


def distance_to_point(p1, p2):
    """Euclidean distance between two points."""
    return math.sqrt(distance_to_point_squared(p1, p2))


def distance_to_segment_squared_info(line_start, line_end, point):
    """
    Closest point on a segment and its squared distance to a reference point.

    The projection is bounded by the segment endpoints. A zero-length
    segment yields its start point.

    Returns:
        (closest_point, distance_squared)
    """
    length_squared = distance_to_point_squared(line_start, line_end)

    if length_squared == 0:
        closest = [float(line_start[0]), float(line_start[1])]
    else:
        t = (
            (point[0] - line_start[0]) * (line_end[0] - line_start[0])
            + (point[1] - line_start[1]) * (line_end[1] - line_start[1])
        ) / length_squared

        if t < 0:
            closest = [float(line_start[0]), float(line_start[1])]
        elif t > 1:
            closest = [float(line_end[0]), float(line_end[1])]
        else:
            closest = [
                float(line_start[0] + t * (line_end[0] - line_start[0])),
                float(line_start[1] + t * (line_end[1] - line_start[1])),
            ]

    return closest, distance_to_point_squared(point, closest)


def distance_to_segment(line_start, line_end, point):
    """Distance from a point to a segment."""
    _, distance_squared = distance_to_segment_squared_info(line_start, line_end, point)
    return math.sqrt(distance_squared)


def aabb_from_points(points):
    """
    Bounding box of a list of [x, y] points.

    Returns None for an empty list.
    """
    if len(points) == 0:
        return None

    xs = [float(p[0]) for p in points]
    ys = [float(p[1]) for p in points]
    return AABB(min_x=min(xs), min_y=min(ys), max_x=max(xs), max_y=max(ys))


def aabb_union(boxes):
    """Combined bounding box of several AABBs, or None when there are none."""
    boxes = [b for b in boxes if b is not None]
    if not boxes:
        return None

    return AABB(
        min_x=min(b.min_x for b in boxes),
        min_y=min(b.min_y for b in boxes),
        max_x=max(b.max_x for b in boxes),
        max_y=max(b.max_y for b in boxes),
    )


def point_in_aabb(point, aabb, margin=0.0):
    """Check whether a point lies inside a box grown by margin on every side."""
    return (
        aabb.min_x - margin <= point[0] <= aabb.max_x + margin
        and aabb.min_y - margin <= point[1] <= aabb.max_y + margin
    )


def polyline_length(points, closed=False):
    """Sum of segment lengths; closed adds the last-to-first edge."""
    if len(points) < 2:
        return 0.0

    total = sum(distance_to_point(points[i - 1], points[i]) for i in range(1, len(points)))
    if closed:
        total += distance_to_point(points[-1], points[0])
    return total
