"""Planar geometry helpers for household boundaries."""

import math
from collections.abc import Sequence

from genogram.models import Point


def point_in_polygon(point: Point, polygon: Sequence[Point]) -> bool:
    """
    Ray-casting containment test over the straight-edge polygon.

    Uses the even-odd rule, so self-intersecting boundaries are handled without special
    cases. Points exactly on an edge may land either side, but always the same side for
    the same input. Fewer than 3 vertices never contain anything.
    """
    n = len(polygon)
    if n < 3:
        return False

    x, y = point.x, point.y
    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = polygon[i].x, polygon[i].y
        xj, yj = polygon[j].x, polygon[j].y
        # (yi > y) != (yj > y) guarantees yi != yj, so the division is safe
        if (yi > y) != (yj > y) and x < (xj - xi) * (y - yi) / (yj - yi) + xi:
            inside = not inside
        j = i
    return inside


def centroid(points: Sequence[Point]) -> Point:
    """Vertex average of `points`."""
    n = len(points)
    return Point(sum(p.x for p in points) / n, sum(p.y for p in points) / n)


def expand_polygon(points: Sequence[Point], buffer: float) -> list[Point]:
    """Push every vertex `buffer` units further away from the vertex centroid."""
    if len(points) < 3 or not buffer:
        return list(points)

    center = centroid(points)
    expanded = []
    for p in points:
        dx = p.x - center.x
        dy = p.y - center.y
        distance = math.hypot(dx, dy)
        if distance == 0:
            expanded.append(p)
            continue
        ratio = (distance + buffer) / distance
        expanded.append(Point(center.x + dx * ratio, center.y + dy * ratio))
    return expanded


def translate(points: Sequence[Point], dx: float, dy: float) -> list[Point]:
    return [Point(p.x + dx, p.y + dy) for p in points]


def distance_to_segment(p: Point, v: Point, w: Point) -> float:
    """Shortest distance from `p` to the segment `v`-`w`."""
    l2 = (w.x - v.x) ** 2 + (w.y - v.y) ** 2
    if l2 == 0:
        return math.hypot(p.x - v.x, p.y - v.y)
    t = ((p.x - v.x) * (w.x - v.x) + (p.y - v.y) * (w.y - v.y)) / l2
    t = max(0.0, min(1.0, t))
    return math.hypot(p.x - (v.x + t * (w.x - v.x)), p.y - (v.y + t * (w.y - v.y)))


def nearest_edge_index(points: Sequence[Point], p: Point) -> int:
    """
    Index `i` of the closed-polygon edge (points[i], points[i + 1]) nearest to `p`.

    Inserting a new vertex at `i + 1` places it on that edge. Ties go to the lowest index.
    Returns -1 for an empty point list.
    """
    n = len(points)
    if n == 0:
        return -1
    if n == 1:
        return 0
    distances = [distance_to_segment(p, points[i], points[(i + 1) % n]) for i in range(n)]
    return min(range(n), key=distances.__getitem__)
