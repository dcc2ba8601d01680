"""
Geometry helpers for GPS polylines

Distances are in miles to match the mph speeds reported by the fleet.
Projection onto a path uses a local equirectangular approximation, which
is accurate enough over the few kilometres a route segment spans.
"""

import math
from typing import Sequence, Tuple

EARTH_RADIUS_MILES = 3958.8

Point = Tuple[float, float]


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in miles between two GPS points"""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lon2 - lon1)

    a = math.sin(delta_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_MILES * c


def _to_plane(point: Point, ref_lat: float) -> Tuple[float, float]:
    """Project (lat, lon) to a local x/y plane in degrees of latitude"""
    lat, lon = point
    return (lon * math.cos(math.radians(ref_lat)), lat)


def project_onto_path(point: Point, path: Sequence[Point]) -> Tuple[float, float]:
    """
    Locate a point along a polyline

    Args:
        point: (lat, lon) to project
        path: Ordered (lat, lon) points

    Returns:
        (distance along the path to the projected point, distance from the
        point to the path), both in miles

    Raises:
        ValueError: if the path is empty
    """
    if not path:
        raise ValueError("Cannot project onto an empty path")

    if len(path) == 1:
        return 0.0, haversine_miles(point[0], point[1], path[0][0], path[0][1])

    ref_lat = point[0]
    px, py = _to_plane(point, ref_lat)

    best_along = 0.0
    best_offset = math.inf
    travelled = 0.0

    for start, end in zip(path[:-1], path[1:]):
        ax, ay = _to_plane(start, ref_lat)
        bx, by = _to_plane(end, ref_lat)
        dx, dy = bx - ax, by - ay
        seg_len_sq = dx * dx + dy * dy

        if seg_len_sq == 0:
            t = 0.0
        else:
            t = max(0.0, min(1.0, ((px - ax) * dx + (py - ay) * dy) / seg_len_sq))

        proj_lat = start[0] + (end[0] - start[0]) * t
        proj_lon = start[1] + (end[1] - start[1]) * t
        offset = haversine_miles(point[0], point[1], proj_lat, proj_lon)
        seg_miles = haversine_miles(start[0], start[1], end[0], end[1])

        if offset < best_offset:
            best_offset = offset
            best_along = travelled + seg_miles * t

        travelled += seg_miles

    return best_along, best_offset


def path_length_miles(path: Sequence[Point]) -> float:
    """Total length of a polyline in miles"""
    return sum(
        haversine_miles(a[0], a[1], b[0], b[1])
        for a, b in zip(path[:-1], path[1:])
    )
