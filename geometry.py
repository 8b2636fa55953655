import math
from typing import Tuple, Union

import numpy as np

from measurement_errors import DegenerateGeometry
from pose_types import Landmark, Point
from thresholds import MIN_DENOMINATOR

PointLike = Union[Landmark, Point]


def _to_xy(p: PointLike) -> Tuple[float, float]:
    return p.x, p.y


def midpoint(a: PointLike, b: PointLike) -> Point:
    ax, ay = _to_xy(a)
    bx, by = _to_xy(b)
    return Point((ax + bx) / 2.0, (ay + by) / 2.0)


def distance_2d(a: PointLike, b: PointLike) -> float:
    ax, ay = _to_xy(a)
    bx, by = _to_xy(b)
    return math.hypot(ax - bx, ay - by)


def distance_3d(a: Landmark, b: Landmark) -> float:
    return float(np.linalg.norm(a.to_numpy() - b.to_numpy()))


def line_angle_degrees(x1: float, y1: float, x2: float, y2: float) -> float:
    # Direction of the segment (x1, y1) -> (x2, y2), measured from +x.
    return math.degrees(math.atan2(y2 - y1, x2 - x1))


def angle_degrees(a: PointLike, b: PointLike, c: PointLike) -> float:
    # Angle at b formed by vectors (a - b) and (c - b).
    # Using dot product: angle = acos((u.v)/(|u||v|)).
    bax = a.x - b.x
    bay = a.y - b.y
    bcx = c.x - b.x
    bcy = c.y - b.y

    dot = bax * bcx + bay * bcy
    mag_ba = math.hypot(bax, bay)
    mag_bc = math.hypot(bcx, bcy)
    if mag_ba < MIN_DENOMINATOR or mag_bc < MIN_DENOMINATOR:
        raise DegenerateGeometry("Vertex angle is undefined for a zero-length arm")
    cos_theta = max(-1.0, min(1.0, dot / (mag_ba * mag_bc)))
    return math.degrees(math.acos(cos_theta))
