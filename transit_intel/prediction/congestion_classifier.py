"""
Congestion Classifier

Discretizes continuous congestion (0-1) for display and aggregates
segment congestion into a per-route figure.

Congestion Levels:
- LOW: up to 0.4
- MEDIUM: 0.4 - 0.7
- HIGH: above 0.7
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Optional

import numpy as np

from transit_intel.models import CongestionLevel, RouteRecord, TrafficSegment

MEDIUM_THRESHOLD = 0.4
HIGH_THRESHOLD = 0.7


def classify_congestion(value: float,
                        medium_threshold: float = MEDIUM_THRESHOLD,
                        high_threshold: float = HIGH_THRESHOLD) -> CongestionLevel:
    """
    Classify a continuous congestion value

    Args:
        value: Congestion level (0-1)
        medium_threshold: Values above this are at least MEDIUM
        high_threshold: Values above this are HIGH

    Returns:
        CongestionLevel enum
    """
    if value > high_threshold:
        return CongestionLevel.HIGH
    if value > medium_threshold:
        return CongestionLevel.MEDIUM
    return CongestionLevel.LOW


def group_segments_by_route(segments: Iterable[TrafficSegment]) -> Dict[str, List[TrafficSegment]]:
    """Group segments under their owning route, dropping unassigned ones"""
    grouped: Dict[str, List[TrafficSegment]] = defaultdict(list)
    for segment in segments:
        route_id = segment.owning_route
        if route_id is not None:
            grouped[route_id].append(segment)
    return dict(grouped)


def route_congestion_from_segments(segments: Iterable[TrafficSegment],
                                   routes: Optional[Iterable[RouteRecord]] = None
                                   ) -> Dict[str, Optional[float]]:
    """
    Current congestion per route (mean over the route's segments)

    Args:
        segments: Traffic segments for this cycle
        routes: Optional route records; routes without any segment are
            included with None so the forecaster falls back to a baseline

    Returns:
        Dict of route_id -> congestion (0-1) or None
    """
    grouped = group_segments_by_route(segments)

    congestion: Dict[str, Optional[float]] = {
        route_id: float(np.mean([s.congestion_level for s in route_segments]))
        for route_id, route_segments in grouped.items()
    }

    if routes is not None:
        for route in routes:
            congestion.setdefault(route.id, None)

    return congestion
