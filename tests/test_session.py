"""Tests for interactive tracing sessions."""

import pytest

from livecontour.config import SessionConfig
from livecontour.livewire.scissors import InvalidStateError, LivewireScissors
from livecontour.models import ContourKind, SessionState, SplineType
from livecontour.session import LivewireSession, spline_polyline
from livecontour.splines.spline import SplineModel


@pytest.fixture
def line_scissors(vertical_line_image):
    return LivewireScissors.from_raw_pixel_data(vertical_line_image, 21, 21)


@pytest.fixture
def canvas_scissors(flat_canvas):
    return LivewireScissors.from_raw_pixel_data(flat_canvas, 20, 20)


class TestLivewireSession:
    """Tests for the livewire tracing lifecycle."""

    def test_start_roots_search(self, line_scissors):
        """Test that starting a session seeds the search."""
        session = LivewireSession(line_scissors, [9.2, 1.8])

        assert session.is_drawing
        assert line_scissors.seed == [9, 2]
        assert session.get_control_points() == [[9, 2]]
        assert session.current_path.point_array == [[9, 2]]

    def test_move_traces_live_segment(self, line_scissors):
        """Test that moving traces from the last control point."""
        session = LivewireSession(line_scissors, [9, 2])

        assert session.move([9, 10])

        assert session.current_path.point_array == [[9, y] for y in range(2, 11)]
        # moving does not confirm anything
        assert session.confirmed_path.point_array == [[9, 2]]

    def test_confirm_reseeds_without_duplicate_seam(self, line_scissors):
        """Test that confirming reseeds without repeating the seam point."""
        session = LivewireSession(line_scissors, [9, 2])
        session.move([9, 10])
        session.confirm([9, 10])

        assert line_scissors.seed == [9, 10]
        assert session.get_control_points() == [[9, 2], [9, 10]]

        session.move([9, 18])

        assert session.current_path.point_array == [[9, y] for y in range(2, 19)]
        assert session.current_path.get_control_points() == [[9, 2], [9, 10]]

    def test_move_out_of_bounds_keeps_current_path(self, line_scissors):
        """Test that outside points leave the current path alone."""
        session = LivewireSession(line_scissors, [9, 2])
        session.move([9, 6])
        before = session.current_path.point_array

        assert not session.move([30, 30])
        assert not session.confirm([-1, 4])
        assert session.current_path.point_array == before

    def test_finish_emits_transformed_polyline(self, line_scissors):
        """Test finishing through a transform and a sink."""
        received = []
        session = LivewireSession(line_scissors, [9, 2])
        session.confirm([9, 10])
        session.move([9, 15])

        polyline = session.finish(
            transform=lambda p: [p[0] * 0.5, p[1] * 0.5 + 100],
            sink=received.append,
        )

        assert received == [polyline]
        assert polyline.kind == ContourKind.LIVEWIRE
        assert not polyline.closed
        # only the confirmed part is committed
        assert len(polyline) == 9
        assert polyline.points[0] == [4.5, 101.0]
        assert polyline.points[-1] == [4.5, 105.0]
        assert session.state == SessionState.FINISHED
        assert not line_scissors.is_rooted

    def test_click_near_start_closes(self, canvas_scissors):
        """Test closing the contour by clicking near the start."""
        session = LivewireSession(canvas_scissors, [2, 2])

        # within reach of the start, but the start is the only control point
        session.confirm([10, 2])
        assert not session.closed

        session.confirm([10, 10])
        assert not session.closed

        session.confirm([3, 3])
        assert session.closed
        assert not session.move([15, 15])

        polyline = session.finish()

        assert polyline.closed
        assert polyline.points[0] == [2.0, 2.0]
        assert polyline.points[-1] == polyline.points[0]
        assert [10.0, 2.0] in polyline.points
        assert [10.0, 10.0] in polyline.points

    def test_click_nearer_later_control_point_does_not_close(self, canvas_scissors):
        """Test that the first control point must be the nearest one to close."""
        session = LivewireSession(canvas_scissors, [2, 2])
        session.confirm([9, 2])

        # 9.9 px from the start but 7 px from [9, 2]
        session.confirm([9, 9])

        assert not session.closed
        assert canvas_scissors.seed == [9, 9]
        assert session.get_control_points() == [[2, 2], [9, 2], [9, 9]]

        # nearest to the start now, so the contour closes
        session.confirm([3, 4])
        assert session.closed

    def test_close_distance_from_config(self, canvas_scissors):
        """Test the configured close distance."""
        session = LivewireSession(canvas_scissors, [2, 2], SessionConfig(close_path_distance=0.5))
        session.confirm([10, 2])
        session.confirm([10, 10])
        session.confirm([3, 3])

        assert not session.closed

    def test_cancel(self, canvas_scissors):
        """Test cancelling a session."""
        session = LivewireSession(canvas_scissors, [2, 2])
        session.cancel()
        session.cancel()

        assert session.state == SessionState.CANCELLED
        assert not canvas_scissors.is_rooted
        with pytest.raises(InvalidStateError):
            session.move([3, 3])
        with pytest.raises(InvalidStateError):
            session.finish()

    def test_finished_session_rejects_calls(self, canvas_scissors):
        """Test that a finished session rejects further calls."""
        session = LivewireSession(canvas_scissors, [2, 2])
        session.finish()

        with pytest.raises(InvalidStateError):
            session.confirm([4, 4])

    def test_sessions_are_independent(self, flat_canvas):
        """Test that sessions do not share state."""
        first = LivewireSession(LivewireScissors.from_raw_pixel_data(flat_canvas, 20, 20), [0, 0])
        second = LivewireSession(LivewireScissors.from_raw_pixel_data(flat_canvas, 20, 20), [19, 19])

        first.move([5, 0])
        second.cancel()

        assert first.is_drawing
        assert first.current_path.get_last_point() == [5, 0]


class TestSplinePolyline:
    """Tests for spline tessellation into output polylines."""

    def test_closed_spline_polyline(self, three_points):
        """Test the polyline of a closed spline."""
        model = SplineModel(closed=True, resolution=4, control_points=three_points)

        polyline = spline_polyline(model)

        assert polyline.kind == ContourKind.CATMULL_ROM
        assert polyline.closed
        assert polyline.points[-1] == polyline.points[0]
        assert len(polyline) == 13

    def test_transform_and_sink(self, three_points):
        """Test spline output through a transform and a sink."""
        received = []
        model = SplineModel(spline_type=SplineType.LINEAR, resolution=2, control_points=three_points)

        polyline = spline_polyline(model, transform=lambda p: [p[0] + 1, p[1] * 2], sink=received.append)

        assert received == [polyline]
        assert polyline.kind == ContourKind.LINEAR
        assert not polyline.closed
        assert polyline.points[0] == [1.0, 0.0]
        assert polyline.points[1] == pytest.approx([6.0, 0.0])

    def test_degenerate_spline(self):
        """Test the polyline of a single-point spline."""
        polyline = spline_polyline(SplineModel(closed=True, control_points=[[1, 1]]))

        assert polyline.points == []
        assert not polyline.closed
