"""
Geometry Module for isosort

Pure 2D predicates used to decide whether one footprint occludes another.
Every function here is total over finite input: degenerate polygons and
zero-length segments are handled explicitly instead of dividing by zero.

Points may be any 2-item sequence (pygame Vector2, tuple, numpy row), so the
same predicates serve both the object graph and the flat snapshot buffers
used by the parallel builder.

Usage:
    from isosort.geometry import polygons_overlap, is_in_front_of
"""

from typing import Sequence, Tuple

from .constants import (
    APPROX_TOLERANCE,
    FLOOR_TOP, FLOOR_RIGHT, FLOOR_BOTTOM, FLOOR_LEFT,
)

Point = Sequence[float]
Polygon = Sequence[Point]
Bounds = Tuple[float, float, float, float]


def cross(ax: float, ay: float, bx: float, by: float) -> float:
    """2D cross product (z component of a x b)."""
    return ax * by - ay * bx


def is_approximately_zero(value: float, tolerance: float = APPROX_TOLERANCE) -> bool:
    return abs(value) <= tolerance


def polygon_bounds(polygon: Polygon) -> Bounds:
    """
    Axis-aligned bounds of a polygon.

    Returns:
        Tuple of (min_x, min_y, max_x, max_y)
    """
    min_x = max_x = polygon[0][0]
    min_y = max_y = polygon[0][1]

    for x, y in polygon:
        if x < min_x:
            min_x = x
        elif x > max_x:
            max_x = x

        if y < min_y:
            min_y = y
        elif y > max_y:
            max_y = y

    return (min_x, min_y, max_x, max_y)


def bounds_overlap(bounds_a: Bounds, bounds_b: Bounds) -> bool:
    """Strict overlap test; boxes that only touch do not overlap."""
    a_min_x, a_min_y, a_max_x, a_max_y = bounds_a
    b_min_x, b_min_y, b_max_x, b_max_y = bounds_b
    return (b_max_x > a_min_x and b_min_x < a_max_x
            and b_max_y > a_min_y and b_min_y < a_max_y)


def polygon_area(polygon: Polygon) -> float:
    """Unsigned shoelace area."""
    n = len(polygon)
    total = 0.0
    for i in range(n):
        x1, y1 = polygon[i]
        x2, y2 = polygon[(i + 1) % n]
        total += x1 * y2 - x2 * y1
    return abs(total) / 2.0


def _point_on_segment(p: Point, a: Point, b: Point, tolerance: float) -> bool:
    """Check whether point p lies on segment a-b (a may equal b)."""
    rx = b[0] - a[0]
    ry = b[1] - a[1]
    px = p[0] - a[0]
    py = p[1] - a[1]
    rr = rx * rx + ry * ry

    if is_approximately_zero(rr, tolerance):
        return is_approximately_zero(px * px + py * py, tolerance)

    if not is_approximately_zero(cross(px, py, rx, ry), tolerance):
        return False

    t = (px * rx + py * ry) / rr
    return 0.0 <= t <= 1.0


def segments_intersect(p1: Point, p2: Point, q1: Point, q2: Point,
                       tolerance: float = APPROX_TOLERANCE) -> bool:
    """
    Check whether segment p1-p2 intersects segment q1-q2.

    Solves p1 + t*r = q1 + u*s for t and u. When r x s is approximately zero
    the segments are parallel; colinear ones intersect if their parametric
    intervals overlap.

    Args:
        p1, p2: Endpoints of the first segment
        q1, q2: Endpoints of the second segment
        tolerance: Threshold below which a cross product counts as zero

    Returns:
        True if the segments share at least one point
    """
    rx = p2[0] - p1[0]
    ry = p2[1] - p1[1]
    sx = q2[0] - q1[0]
    sy = q2[1] - q1[1]
    qpx = q1[0] - p1[0]
    qpy = q1[1] - p1[1]

    rr = rx * rx + ry * ry
    ss = sx * sx + sy * sy

    # Zero-length segments degrade to point tests
    if is_approximately_zero(rr, tolerance):
        return _point_on_segment(p1, q1, q2, tolerance)
    if is_approximately_zero(ss, tolerance):
        return _point_on_segment(q1, p1, p2, tolerance)

    rxs = cross(rx, ry, sx, sy)
    qpxr = cross(qpx, qpy, rx, ry)

    if is_approximately_zero(rxs, tolerance):
        if not is_approximately_zero(qpxr, tolerance):
            # Parallel, never touching
            return False

        # Colinear: project q onto r and compare intervals
        t0 = (qpx * rx + qpy * ry) / rr
        t1 = t0 + (sx * rx + sy * ry) / rr
        return min(t0, t1) <= 1.0 and max(t0, t1) >= 0.0

    t = cross(qpx, qpy, sx, sy) / rxs
    u = qpxr / rxs
    return 0.0 <= t <= 1.0 and 0.0 <= u <= 1.0


def point_in_polygon(point: Point, polygon: Polygon) -> bool:
    """Ray-casting point-in-polygon test."""
    px, py = point[0], point[1]
    n = len(polygon)
    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = polygon[i]
        xj, yj = polygon[j]
        if (yi > py) != (yj > py):
            # yi != yj here, so the division is safe
            intersect_x = (xj - xi) * (py - yi) / (yj - yi) + xi
            if px < intersect_x:
                inside = not inside
        j = i
    return inside


def polygons_overlap(polygon_a: Polygon, polygon_b: Polygon,
                     tolerance: float = APPROX_TOLERANCE) -> bool:
    """
    Check whether two polygons overlap.

    Degenerate (zero-area) polygons never overlap anything. Otherwise the
    bounds are compared first, then every edge pair is tested for an
    intersection, and finally containment is checked with one vertex of
    each polygon against the other.

    Args:
        polygon_a: First polygon, vertices in winding order
        polygon_b: Second polygon, vertices in winding order
        tolerance: Threshold for the segment tests

    Returns:
        True if the polygons overlap; symmetric in its arguments
    """
    if polygon_area(polygon_a) <= tolerance or polygon_area(polygon_b) <= tolerance:
        return False

    if not bounds_overlap(polygon_bounds(polygon_a), polygon_bounds(polygon_b)):
        return False

    n_a = len(polygon_a)
    n_b = len(polygon_b)
    for i in range(n_a):
        p1 = polygon_a[i]
        p2 = polygon_a[(i + 1) % n_a]
        for j in range(n_b):
            q1 = polygon_b[j]
            q2 = polygon_b[(j + 1) % n_b]
            if segments_intersect(p1, p2, q1, q2, tolerance):
                return True

    # No edge crossing; one polygon may still contain the other
    return point_in_polygon(polygon_a[0], polygon_b) or point_in_polygon(polygon_b[0], polygon_a)


def vertical_range(floor_a: Polygon, floor_b: Polygon) -> float:
    """Combined vertical span covered by two floor quads."""
    a_to_b = floor_a[FLOOR_TOP][1] - floor_b[FLOOR_BOTTOM][1]
    b_to_a = floor_b[FLOOR_TOP][1] - floor_a[FLOOR_BOTTOM][1]
    return a_to_b if a_to_b > b_to_a else b_to_a


def _probe_hits_far_edges(corner: Point, drop: float, floor: Polygon, tolerance: float) -> bool:
    """Drop a vertical probe from corner and test it against floor's right->top and left->top edges."""
    probe_end = (corner[0], corner[1] - drop)
    top = floor[FLOOR_TOP]
    return (segments_intersect(corner, probe_end, floor[FLOOR_RIGHT], top, tolerance)
            or segments_intersect(corner, probe_end, floor[FLOOR_LEFT], top, tolerance))


def _wall(start: Point, end: Point, drop: float) -> Tuple[Point, Point, Point, Point]:
    """Quad formed by extruding the edge start->end downward by drop."""
    return (
        (start[0], start[1]),
        (end[0], end[1]),
        (end[0], end[1] - drop),
        (start[0], start[1] - drop),
    )


def is_in_front_of(floor_a: Polygon, floor_b: Polygon,
                   tolerance: float = APPROX_TOLERANCE) -> bool:
    """
    Check whether floor quad A is drawn in front of floor quad B.

    The test is asymmetric: is_in_front_of(a, b) and is_in_front_of(b, a)
    may both be True (or both False) in ambiguous configurations.

    When A's horizontal span nests strictly inside B's, vertical probes
    dropped from A's left, bottom and right corners must not cross B's far
    edges (right->top, left->top); a crossing means A sits behind B.

    Otherwise two walls are extruded downward from A's near edges
    (bottom->right, left->bottom); a corner of B inside either wall means
    B sits in front of A.

    Args:
        floor_a: Floor quad of A (top, right, bottom, left)
        floor_b: Floor quad of B (top, right, bottom, left)
        tolerance: Threshold for the segment tests

    Returns:
        True unless one of the disqualifying tests fires
    """
    drop = vertical_range(floor_a, floor_b)

    a_left = floor_a[FLOOR_LEFT]
    a_right = floor_a[FLOOR_RIGHT]
    a_bottom = floor_a[FLOOR_BOTTOM]

    if a_left[0] > floor_b[FLOOR_LEFT][0] and a_right[0] < floor_b[FLOOR_RIGHT][0]:
        for corner in (a_left, a_bottom, a_right):
            if _probe_hits_far_edges(corner, drop, floor_b, tolerance):
                return False
        return True

    right_wall = _wall(a_bottom, a_right, drop)
    left_wall = _wall(a_left, a_bottom, drop)

    for wall in (right_wall, left_wall):
        for corner in floor_b:
            if point_in_polygon(corner, wall):
                return False

    return True
