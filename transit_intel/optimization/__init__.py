"""
Route Optimization Module

Ranked route/schedule recommendations with quantified impact and
confidence, plus cross-reference checks for consumers.
"""

from transit_intel.optimization.route_recommender import (
    INCIDENT_WEIGHTS,
    RouteSignal,
    SignalSeverity,
    RouteRecommender,
    recommend_route_changes,
)

from transit_intel.optimization.consistency import (
    Inconsistency,
    find_unknown_route_references,
    drop_unknown_routes,
)


__all__ = [
    # Recommender
    'INCIDENT_WEIGHTS',
    'RouteSignal',
    'SignalSeverity',
    'RouteRecommender',
    'recommend_route_changes',

    # Consistency
    'Inconsistency',
    'find_unknown_route_references',
    'drop_unknown_routes',
]
