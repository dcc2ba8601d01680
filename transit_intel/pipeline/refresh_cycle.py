"""
Refresh Cycle

Runs the four analytics components on one immutable snapshot of the
network and publishes the results for the display layer.

Each cycle:
1. ENHANCE - add ETA, next stop and fuel level to the fleet
2. FORECAST - project congestion per route from the current segments
3. RECOMMEND - rank route/schedule changes using this cycle's forecast
4. ADVISE - derive operator directives
5. CHECK - report recommendations referencing unknown routes

Results from different cycles are never merged: the store keeps only
the most recent completed cycle and discards stale ones.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

import numpy as np

from transit_intel.config import EngineConfig
from transit_intel.enhancement import enhance_vehicles
from transit_intel.insights import generate_insight_records
from transit_intel.models import (
    ForecastSnapshot,
    Insight,
    OptimizationResult,
    PassengerSnapshot,
    RouteRecord,
    TrafficSegment,
    VehicleSnapshot,
    WeatherSnapshot,
)
from transit_intel.optimization import Inconsistency, find_unknown_route_references, recommend_route_changes
from transit_intel.prediction import TrafficForecaster, route_congestion_from_segments

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CycleSnapshot:
    """All inputs for one refresh cycle"""
    vehicles: List[VehicleSnapshot] = field(default_factory=list)
    segments: List[TrafficSegment] = field(default_factory=list)
    routes: List[RouteRecord] = field(default_factory=list)
    passengers: Optional[PassengerSnapshot] = None
    weather: Optional[WeatherSnapshot] = None


@dataclass(frozen=True)
class CycleResult:
    """Derived views produced by one refresh cycle"""
    cycle_id: int
    vehicles: List[VehicleSnapshot]
    forecasts: ForecastSnapshot
    recommendations: List[OptimizationResult]
    insights: List[Insight]
    inconsistencies: List[Inconsistency] = field(default_factory=list)
    latency_ms: float = 0.0

    @property
    def messages(self) -> List[str]:
        """Directive strings in display order"""
        return [insight.message for insight in self.insights]

    def to_dict(self) -> dict:
        """Convert to camelCase dictionary for the presentation layer"""
        return {
            'cycleId': self.cycle_id,
            'vehicles': [v.to_dict() for v in self.vehicles],
            'forecasts': self.forecasts.to_dict(),
            'recommendations': [r.to_dict() for r in self.recommendations],
            'insights': self.messages,
            'inconsistencies': [i.to_dict() for i in self.inconsistencies],
            'latencyMs': round(self.latency_ms, 2)
        }


def run_refresh_cycle(snapshot: CycleSnapshot,
                      cycle_id: int,
                      config: Optional[EngineConfig] = None,
                      rng: Optional[np.random.Generator] = None) -> CycleResult:
    """
    Execute one refresh cycle

    Args:
        snapshot: Inputs for this cycle
        cycle_id: Monotonically increasing cycle number
        config: EngineConfig (defaults when omitted)
        rng: Random source for the forecast (seed for reproducible cycles)

    Returns:
        CycleResult for this cycle
    """
    config = config or EngineConfig()
    start = time.perf_counter()

    vehicles = enhance_vehicles(snapshot.vehicles, routes=snapshot.routes, config=config.enhancer)

    current = route_congestion_from_segments(snapshot.segments, snapshot.routes)
    forecasts = TrafficForecaster(config=config.forecast, rng=rng).snapshot(current)

    recommendations = recommend_route_changes(
        snapshot.segments,
        snapshot.routes,
        config=config.recommender,
        forecasts=forecasts,
    )

    insights = generate_insight_records(
        vehicles,
        snapshot.segments,
        snapshot.routes,
        config=config.insights,
        passengers=snapshot.passengers,
        weather=snapshot.weather,
    )

    inconsistencies = find_unknown_route_references(recommendations, snapshot.routes)

    latency_ms = (time.perf_counter() - start) * 1000
    logger.info(
        f"Cycle {cycle_id}: {len(vehicles)} vehicles, {len(recommendations)} recommendations, "
        f"{len(insights)} insights in {latency_ms:.1f}ms"
    )

    return CycleResult(
        cycle_id=cycle_id,
        vehicles=vehicles,
        forecasts=forecasts,
        recommendations=recommendations,
        insights=insights,
        inconsistencies=inconsistencies,
        latency_ms=latency_ms,
    )


class CycleResultStore:
    """
    Holds the most recent completed cycle (last writer wins)

    Usage:
        store = CycleResultStore()
        store.publish(run_refresh_cycle(snapshot, cycle_id=1))
        store.latest
    """

    def __init__(self):
        self._latest: Optional[CycleResult] = None
        self._published_at: Optional[datetime] = None
        self._discarded = 0
        self._lock = threading.Lock()

    def publish(self, result: CycleResult) -> bool:
        """
        Replace the published result unless it is older than the current one

        Returns:
            True if the result was published, False if it was stale
        """
        with self._lock:
            if self._latest is not None and result.cycle_id < self._latest.cycle_id:
                self._discarded += 1
                logger.debug(
                    f"Discarding stale cycle {result.cycle_id} "
                    f"(latest is {self._latest.cycle_id})"
                )
                return False

            self._latest = result
            self._published_at = datetime.now()
            return True

    @property
    def latest(self) -> Optional[CycleResult]:
        return self._latest

    def get_statistics(self) -> dict:
        """Get store statistics"""
        with self._lock:
            return {
                'latestCycle': self._latest.cycle_id if self._latest else None,
                'publishedAt': self._published_at.isoformat() if self._published_at else None,
                'discardedCycles': self._discarded
            }
