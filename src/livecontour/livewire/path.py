"""
Ordered point accumulator for livewire segments.

A LivewirePath is a thin append-only list of pixel points in which some
entries are marked as user-confirmed control points. Its only obligation is
ordering: points come out exactly in the order they went in.
"""


class LivewirePath:
    """Ordered pixel points plus the indices of confirmed control points."""

    def __init__(self, points=None):
        self._points = [[p[0], p[1]] for p in points] if points else []
        self._control_point_indexes = set()

    def __len__(self):
        return len(self._points)

    @property
    def point_array(self):
        """All points, in path order."""
        return [list(p) for p in self._points]

    def add_point(self, point):
        self._points.append([point[0], point[1]])

    def add_control_point(self, point):
        """
        Mark point as a control point.

        If point is the current last point it is marked in place, otherwise
        it is appended first.
        """
        if not self._points or list(self._points[-1]) != [point[0], point[1]]:
            self.add_point(point)
        self._control_point_indexes.add(len(self._points) - 1)

    def is_control_point(self, index):
        return index in self._control_point_indexes

    def get_control_points(self):
        return [list(self._points[i]) for i in sorted(self._control_point_indexes)]

    def get_last_point(self):
        return list(self._points[-1]) if self._points else None

    def get_last_control_point(self):
        if not self._control_point_indexes:
            return None
        return list(self._points[max(self._control_point_indexes)])

    def remove_last_point(self):
        """Pop the last point and its control mark. Returns None when empty."""
        if not self._points:
            return None
        self._control_point_indexes.discard(len(self._points) - 1)
        return self._points.pop()

    def prepend_path(self, other):
        """
        Splice other's points in front of this path.

        The seam is not deduplicated: if other ends where this path starts,
        that point appears twice.
        """
        offset = len(other)
        self._control_point_indexes = (
            {i + offset for i in self._control_point_indexes}
            | {i for i in range(offset) if other.is_control_point(i)}
        )
        self._points = other.point_array + self._points
