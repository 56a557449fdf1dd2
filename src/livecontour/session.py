"""
Interactive tracing sessions.

A session owns everything one in-progress contour needs: the search tree,
the confirmed path, the live path and the drawing state. Callers poll it
explicitly (move on pointer motion, confirm on click, finish or cancel at
the end) instead of sharing process-wide interaction flags.
"""

from livecontour.config import SessionConfig
from livecontour.geometry.primitives import distance_to_point, polyline_length
from livecontour.livewire.path import LivewirePath
from livecontour.livewire.scissors import InvalidStateError, to_pixel_index
from livecontour.models import ContourKind, Polyline, SessionState
from livecontour.tracer import get_tracer


def _identity(point):
    return [float(point[0]), float(point[1])]


def _emit_polyline(polyline, sink):
    if sink is not None:
        sink(polyline)
    return polyline


class LivewireSession:
    """
    One livewire contour being traced.

    The confirmed path runs from the first control point to the latest one;
    the current path extends it to the pointer. Both are pixel-index points.
    """

    def __init__(self, scissors, start_point, config=None):
        self._config = config or SessionConfig()
        self._scissors = scissors

        seed = list(to_pixel_index(start_point))
        scissors.start_search(seed)

        self._confirmed_path = LivewirePath()
        self._confirmed_path.add_point(seed)
        self._confirmed_path.add_control_point(seed)
        self._current_path = self._copy_confirmed()

        self._closed = False
        self._state = SessionState.DRAWING

        get_tracer().event("Livewire session started", seed=seed)

    @property
    def state(self):
        return self._state

    @property
    def is_drawing(self):
        return self._state == SessionState.DRAWING

    @property
    def closed(self):
        return self._closed

    @property
    def confirmed_path(self):
        return self._confirmed_path

    @property
    def current_path(self):
        return self._current_path

    def get_control_points(self):
        return self._confirmed_path.get_control_points()

    def move(self, point):
        """
        Re-trace the live segment from the last control point to point.

        Returns False, leaving the current path unchanged, when point is
        outside the image or unreachable, or the contour is already closed.
        """
        self._require_drawing("move")
        if self._closed:
            return False

        path_points = self._scissors.find_path_to_point(point)
        if not path_points:
            return False

        live_path = LivewirePath()
        # the first point is the seed, already the confirmed path's last point
        for path_point in path_points[1:]:
            live_path.add_point(path_point)
        live_path.prepend_path(self._confirmed_path)

        self._current_path = live_path
        return True

    def confirm(self, point):
        """
        Lock the path up to point and start a new search there.

        Clicking within close_path_distance of the first control point, once
        at least two control points exist and no other control point is
        nearer to the click, closes the contour. Returns False when point
        could not be traced to.
        """
        self._require_drawing("confirm")

        # decided against the control points that existed before this click
        close_path = self._is_closing_click(point)

        if not self.move(point):
            return False

        self._confirmed_path = self._current_path
        last_point = self._confirmed_path.get_last_point()
        self._confirmed_path.add_control_point(last_point)
        self._current_path = self._copy_confirmed()

        if close_path:
            self._closed = True
            get_tracer().event(
                "Livewire contour closed",
                control_points=len(self._confirmed_path.get_control_points()),
            )
            return True

        self._scissors.start_search(last_point)
        return True

    def finish(self, transform=None, sink=None):
        """
        End the session and emit the confirmed path as a Polyline.

        transform maps pixel-index points to output space (identity by
        default). Closed contours repeat their first point at the end.
        """
        self._require_drawing("finish")

        transform = transform or _identity
        points = [list(transform(p)) for p in self._confirmed_path.point_array]
        if self._closed and len(points) > 1:
            points.append(list(points[0]))

        polyline = Polyline(kind=ContourKind.LIVEWIRE, closed=self._closed, points=points)
        self._release(SessionState.FINISHED)

        get_tracer().event(
            f"Livewire session finished with {len(points)} points",
            length=round(polyline_length(points), 3),
        )
        return _emit_polyline(polyline, sink)

    def cancel(self):
        """Abandon the session. Safe to call more than once."""
        if self._state != SessionState.DRAWING:
            return
        self._release(SessionState.CANCELLED)
        get_tracer().event("Livewire session cancelled")

    def _is_closing_click(self, point):
        control_points = self._confirmed_path.get_control_points()
        if len(control_points) < 2:
            return False

        closest_index = -1
        closest_distance = float("inf")
        for index, control_point in enumerate(control_points):
            distance = distance_to_point(point, control_point)
            if distance <= self._config.close_path_distance and distance < closest_distance:
                closest_index = index
                closest_distance = distance

        return closest_index == 0

    def _copy_confirmed(self):
        path = LivewirePath()
        path.prepend_path(self._confirmed_path)
        return path

    def _release(self, state):
        self._state = state
        self._scissors.reset()
        self._scissors = None

    def _require_drawing(self, operation):
        if self._state != SessionState.DRAWING:
            raise InvalidStateError(f"Cannot {operation}: session is {self._state.value}")


def spline_polyline(model, transform=None, sink=None):
    """Tessellate a SplineModel into a Polyline in output space."""
    transform = transform or _identity
    points = [list(transform(p)) for p in model.get_polyline_points()]

    polyline = Polyline(
        kind=ContourKind.from_spline_type(model.spline_type),
        closed=model.closed and len(points) > 1,
        points=points,
    )
    return _emit_polyline(polyline, sink)
