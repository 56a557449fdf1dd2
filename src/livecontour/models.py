"""
Pydantic data models for livecontour outputs.

Tessellation results, hit-test results and final polylines flow through these
validated models so downstream consumers get a stable shape.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class SplineType(str, Enum):
    """Cubic curve families sharing one evaluation scheme."""
    CATMULL_ROM = "catmull_rom"
    CARDINAL = "cardinal"
    LINEAR = "linear"
    BSPLINE = "bspline"


class ContourKind(str, Enum):
    """Producer that generated a polyline."""
    LIVEWIRE = "livewire"
    CATMULL_ROM = "catmull_rom"
    CARDINAL = "cardinal"
    LINEAR = "linear"
    BSPLINE = "bspline"

    @classmethod
    def from_spline_type(cls, spline_type):
        return cls(SplineType(spline_type).value)


class SessionState(str, Enum):
    """Lifecycle of a tracing session."""
    DRAWING = "drawing"
    FINISHED = "finished"
    CANCELLED = "cancelled"


class AABB(BaseModel):
    """Axis-aligned bounding box."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    model_config = ConfigDict(extra="forbid")

    @property
    def width(self):
        return self.max_x - self.min_x

    @property
    def height(self):
        return self.max_y - self.min_y


class LineSegment(BaseModel):
    """One straight piece of a tessellated curve span."""
    start: List[float] = Field(..., min_length=2, max_length=2)
    end: List[float] = Field(..., min_length=2, max_length=2)
    aabb: AABB
    length: float = Field(..., ge=0.0)

    model_config = ConfigDict(extra="forbid")


class CurveSegment(BaseModel):
    """
    One cubic span of a spline.

    p0 and p3 are the neighbour control values (possibly mirrored or wrapped),
    p1 and p2 the span's true endpoints.
    """
    p0: List[float] = Field(..., min_length=2, max_length=2)
    p1: List[float] = Field(..., min_length=2, max_length=2)
    p2: List[float] = Field(..., min_length=2, max_length=2)
    p3: List[float] = Field(..., min_length=2, max_length=2)
    aabb: AABB
    length: float = Field(..., ge=0.0)
    line_segments: List[LineSegment] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class ClosestPoint(BaseModel):
    """Closest point on a curve to a reference point."""
    point: List[float] = Field(..., min_length=2, max_length=2)
    distance: float = Field(..., ge=0.0)

    model_config = ConfigDict(extra="forbid")


class ClosestControlPoint(ClosestPoint):
    """Closest control point, with its index in the control-point sequence."""
    index: int = Field(..., ge=0)


class Polyline(BaseModel):
    """
    Final contour output in output space.

    Closed polylines repeat their first point as the last one.
    """
    kind: ContourKind
    closed: bool = False
    points: List[List[float]] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    def __len__(self):
        return len(self.points)
