"""
Cross-Reference Checks

Recommendations may reference routes that are absent from the current
route set (e.g. results kept from an earlier cycle). These are reported
as non-fatal inconsistencies the caller may choose to filter.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from transit_intel.models import OptimizationResult, RouteRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Inconsistency:
    """A reference to an entity missing from the current snapshot"""
    kind: str
    entity_id: str
    detail: str

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses"""
        return {
            'kind': self.kind,
            'entityId': self.entity_id,
            'detail': self.detail
        }


def find_unknown_route_references(results: Iterable[OptimizationResult],
                                  routes: Iterable[RouteRecord]) -> List[Inconsistency]:
    """
    List recommendations whose route is not in the current route set

    Args:
        results: Optimization results to check
        routes: Current route records

    Returns:
        One Inconsistency per offending result (never raises)
    """
    known = {route.id for route in routes}
    issues = [
        Inconsistency(
            kind='unknown_route',
            entity_id=result.route_id,
            detail=f"Recommendation references route {result.route_id!r} which is not in the current route set"
        )
        for result in results
        if result.route_id not in known
    ]
    for issue in issues:
        logger.warning(issue.detail)
    return issues


def drop_unknown_routes(results: Sequence[OptimizationResult],
                        routes: Iterable[RouteRecord]) -> List[OptimizationResult]:
    """Keep only recommendations for routes in the current route set"""
    known = {route.id for route in routes}
    return [result for result in results if result.route_id in known]
