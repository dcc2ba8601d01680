"""
Route Recommender - Route & Schedule Optimization

Evaluates each route's traffic and delay signals and emits ranked
recommendations with estimated impact and confidence.

Signals (strongest first):
1. Incident on one of the route's segments -> incident avoidance reroute
2. High congestion (> 0.7)                 -> congestion avoidance reroute
3. Average delay above threshold           -> frequency adjustment

Priority:
- HIGH: high congestion AND an incident
- MEDIUM: either one alone
- LOW: delay only

Impact grows with the severity of the triggering signals. Confidence
grows with signal magnitude and shrinks with the volatility of the
route's congestion forecast.

Output order: priority desc, confidence desc, route id asc.
"""

import logging
from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence, Union

import numpy as np

from transit_intel.config import ForecastConfig, RecommenderConfig
from transit_intel.models import (
    CongestionLevel,
    ForecastSnapshot,
    Impact,
    Incident,
    OptimizationResult,
    Priority,
    RerouteRationale,
    RouteRecord,
    TrafficSegment,
    forecast_volatility,
)
from transit_intel.prediction.congestion_classifier import group_segments_by_route
from transit_intel.prediction.traffic_forecaster import TrafficForecaster
from transit_intel.utils.geo import project_onto_path
from transit_intel.utils.logging import log_execution_time
from transit_intel.utils.seeding import seeded_rng

logger = logging.getLogger(__name__)

INCIDENT_WEIGHTS = {'low': 0.3, 'medium': 0.6, 'high': 1.0}

# Tolerance when matching stops to segment endpoints (miles)
ENDPOINT_TOLERANCE_MILES = 0.01

Forecasts = Union[ForecastSnapshot, Mapping[str, Sequence[float]]]


@dataclass(frozen=True)
class RouteSignal:
    """Signals detected for one route in the current cycle"""
    route: RouteRecord
    segments: List[TrafficSegment]
    congestion: float                     # mean segment congestion (0-1)
    worst_segment: TrafficSegment
    incident: Optional[Incident]          # most severe active incident
    incident_segment: Optional[TrafficSegment]
    congestion_high: bool
    delay_high: bool

    @property
    def has_incident(self) -> bool:
        return self.incident is not None

    @property
    def is_candidate(self) -> bool:
        return self.congestion_high or self.delay_high or self.has_incident


@dataclass(frozen=True)
class SignalSeverity:
    """Normalized severities (0-1) driving impact and confidence"""
    congestion: float
    incident: float
    delay: float

    @property
    def magnitude(self) -> float:
        """Combined strength: any single strong signal dominates"""
        return 1.0 - (1.0 - self.congestion) * (1.0 - self.incident) * (1.0 - self.delay)


def _clip01(value: float) -> float:
    return float(np.clip(value, 0.0, 1.0))


class RouteRecommender:
    """
    Emit optimization recommendations from route and traffic state

    Usage:
        recommender = RouteRecommender()
        results = recommender.recommend(segments, routes, forecasts=snapshot)
    """

    def __init__(self,
                 config: Optional[RecommenderConfig] = None,
                 forecast_config: Optional[ForecastConfig] = None,
                 rng: Optional[np.random.Generator] = None):
        """
        Initialize the recommender

        Args:
            config: RecommenderConfig
            forecast_config: Used only when forecasts are not supplied
            rng: Random source for self-generated forecasts
        """
        self.config = config or RecommenderConfig()
        self.forecast_config = forecast_config or ForecastConfig()
        self.rng = rng

    # ----------------------------------------
    # Public API
    # ----------------------------------------

    def recommend(self,
                  segments: Sequence[TrafficSegment],
                  routes: Sequence[RouteRecord],
                  forecasts: Optional[Forecasts] = None) -> List[OptimizationResult]:
        """
        Produce ranked recommendations

        Args:
            segments: Traffic segments for this cycle
            routes: Route records for this cycle
            forecasts: Route id -> forecast sequence (generated when omitted)

        Returns:
            Sorted list of OptimizationResult, at most one per route
        """
        if not segments or not routes:
            return []

        grouped = group_segments_by_route(segments)
        known = {route.id for route in routes}
        orphaned = sorted(set(grouped) - known)
        if orphaned:
            logger.warning(f"Traffic segments reference unknown routes: {orphaned}")

        signals = []
        for route in routes:
            route_segments = grouped.get(route.id)
            if not route_segments:
                logger.debug(f"No traffic data for route {route.id!r}, skipping")
                continue
            signals.append(self._detect(route, route_segments))

        candidates = [s for s in signals if s.is_candidate]
        if not candidates:
            return []

        series = self._forecast_series(candidates, forecasts)

        results = []
        for signal in candidates:
            try:
                results.append(self._build(signal, series.get(signal.route.id)))
            except (ValueError, TypeError, ArithmeticError) as e:
                logger.warning(f"Skipping recommendation for route {signal.route.id!r}: {e}")

        return sorted(results, key=lambda r: r.sort_key())

    # ----------------------------------------
    # Signal detection
    # ----------------------------------------

    def _detect(self, route: RouteRecord, segments: List[TrafficSegment]) -> RouteSignal:
        """Collect congestion, incident and delay signals for a route"""
        congestion = float(np.mean([s.congestion_level for s in segments]))
        worst = max(segments, key=lambda s: s.congestion_level)

        incident, incident_segment = None, None
        for segment in segments:
            for candidate in segment.incidents:
                if incident is None or INCIDENT_WEIGHTS[candidate.severity] > INCIDENT_WEIGHTS[incident.severity]:
                    incident, incident_segment = candidate, segment

        congestion_high = (
            congestion > self.config.high_congestion_threshold
            or route.congestion_level == CongestionLevel.HIGH
        )
        delay_high = route.average_delay > self.config.delay_threshold

        return RouteSignal(
            route=route,
            segments=segments,
            congestion=congestion,
            worst_segment=worst,
            incident=incident,
            incident_segment=incident_segment,
            congestion_high=congestion_high,
            delay_high=delay_high,
        )

    def _severity(self, signal: RouteSignal) -> SignalSeverity:
        medium = self.config.medium_congestion_threshold
        return SignalSeverity(
            congestion=_clip01((signal.congestion - medium) / (1.0 - medium)),
            incident=INCIDENT_WEIGHTS[signal.incident.severity] if signal.incident else 0.0,
            delay=_clip01(signal.route.average_delay / self.config.max_delay),
        )

    def _forecast_series(self,
                         candidates: List[RouteSignal],
                         forecasts: Optional[Forecasts]) -> Mapping[str, Sequence[float]]:
        """
        Forecast sequences for candidate routes

        Without an injected generator each route is seeded from its own
        congestion, so equal signals always get equal forecasts and the
        output order is stable between calls.
        """
        if isinstance(forecasts, ForecastSnapshot):
            return forecasts.series
        if forecasts is not None:
            return forecasts

        if self.rng is not None:
            forecaster = TrafficForecaster(config=self.forecast_config, rng=self.rng)
            return forecaster.forecast({s.route.id: s.congestion for s in candidates})

        series = {}
        for signal in candidates:
            rng = seeded_rng('forecast', round(signal.congestion, 6))
            forecaster = TrafficForecaster(config=self.forecast_config, rng=rng)
            series[signal.route.id] = forecaster.forecast_route(signal.route.id, signal.congestion)
        return series

    # ----------------------------------------
    # Recommendation building
    # ----------------------------------------

    def _priority(self, signal: RouteSignal) -> Priority:
        if signal.congestion_high and signal.has_incident:
            return Priority.HIGH
        if signal.congestion_high or signal.has_incident:
            return Priority.MEDIUM
        return Priority.LOW

    def _rationale(self, signal: RouteSignal) -> RerouteRationale:
        if signal.has_incident:
            return RerouteRationale.INCIDENT_AVOIDANCE
        if signal.congestion_high:
            return RerouteRationale.CONGESTION_AVOIDANCE
        return RerouteRationale.FREQUENCY_ADJUSTMENT

    def _confidence(self, severity: SignalSeverity, forecast: Optional[Sequence[float]]) -> float:
        penalty = min(
            self.config.max_volatility_penalty,
            self.config.volatility_weight * forecast_volatility(forecast),
        )
        score = 45.0 + 50.0 * severity.magnitude - penalty
        return round(float(np.clip(score, 0.0, 100.0)), 1)

    def _impact(self,
                signal: RouteSignal,
                severity: SignalSeverity,
                rationale: RerouteRationale) -> Impact:
        vehicles = max(1, signal.route.active_vehicles)
        fuel_cost = self.config.fuel_cost_per_vehicle_minute

        if rationale == RerouteRationale.FREQUENCY_ADJUSTMENT:
            wait = 2.0 + 8.0 * severity.delay
            # Off-peak trips trimmed in proportion to the delay
            fuel = vehicles * 15.0 * severity.delay * fuel_cost
            return Impact(
                travel_time_reduction=0.0,
                wait_time_reduction=round(wait, 1),
                fuel_savings=round(fuel, 0),
            )

        travel = 2.0 + 10.0 * severity.congestion + 4.0 * severity.incident + 2.0 * severity.delay
        wait = 1.0 + 4.0 * severity.congestion + 2.0 * severity.incident + 3.0 * severity.delay
        return Impact(
            travel_time_reduction=round(travel, 1),
            wait_time_reduction=round(wait, 1),
            fuel_savings=round(travel * vehicles * fuel_cost, 0),
        )

    def _build(self, signal: RouteSignal, forecast: Optional[Sequence[float]]) -> OptimizationResult:
        severity = self._severity(signal)
        rationale = self._rationale(signal)
        route = signal.route

        if rationale == RerouteRationale.FREQUENCY_ADJUSTMENT:
            original, optimized = self._frequency_descriptions(route, severity)
            reason = f"Average delay of {route.average_delay:.0f} minutes on {route.name}"
        elif rationale == RerouteRationale.INCIDENT_AVOIDANCE:
            segment = signal.incident_segment
            original, optimized = self._reroute_descriptions(route, segment)
            reason = (
                f"{signal.incident.type.capitalize()} on {segment.name} "
                f"({signal.incident.severity} severity) with congestion at {segment.congestion_level:.0%}"
            )
        else:
            segment = signal.worst_segment
            original, optimized = self._reroute_descriptions(route, segment)
            reason = f"Heavy traffic on {segment.name} ({segment.congestion_level:.0%} congestion)"

        return OptimizationResult(
            route_id=route.id,
            original_route=original,
            optimized_route=optimized,
            reason=reason,
            impact=self._impact(signal, severity, rationale),
            confidence=self._confidence(severity, forecast),
            priority=self._priority(signal),
            rationale=rationale,
        )

    def _reroute_descriptions(self, route: RouteRecord, segment: TrafficSegment) -> tuple:
        """Current stop sequence and one that detours around a segment"""
        names = [stop.name for stop in route.stops]
        detour = f"detour around {segment.name}"
        if not names:
            return f"{route.name}: current alignment", f"{route.name}: {detour}"

        original = f"{route.name}: " + " → ".join(names)

        path = route.path if len(route.path) >= 2 else [s.position for s in route.stops]
        if len(path) < 2:
            return original, f"{route.name}: " + " → ".join(names + [detour])

        seg_start = project_onto_path(segment.coordinates[0], path)[0]
        seg_end = project_onto_path(segment.coordinates[-1], path)[0]
        seg_start, seg_end = min(seg_start, seg_end), max(seg_start, seg_end)

        before, after = [], []
        phase = 'before'
        for stop in route.stops:
            along = project_onto_path(stop.position, path)[0]
            if phase == 'before' and along <= seg_start + ENDPOINT_TOLERANCE_MILES:
                before.append(stop.name)
                continue
            if phase == 'before':
                phase = 'skip'
            if phase == 'skip' and along < seg_end - ENDPOINT_TOLERANCE_MILES:
                continue
            phase = 'after'
            after.append(stop.name)

        optimized = f"{route.name}: " + " → ".join(before + [detour] + after)
        return original, optimized

    def _frequency_descriptions(self, route: RouteRecord, severity: SignalSeverity) -> tuple:
        """Current headway vs. a tighter peak / looser off-peak schedule"""
        headway = max(1, round(self.config.round_trip_minutes / max(1, route.active_vehicles)))
        peak = max(1, round(headway * (1.0 - 0.4 * severity.delay)))
        off_peak = headway + (headway - peak)
        original = f"{route.name}: {headway}-minute frequency all day"
        optimized = f"{route.name}: {peak}-minute frequency during peak hours, {off_peak}-minute off-peak"
        return original, optimized


@log_execution_time(logger)
def recommend_route_changes(segments: Sequence[TrafficSegment],
                            routes: Sequence[RouteRecord],
                            config: Optional[RecommenderConfig] = None,
                            forecasts: Optional[Forecasts] = None,
                            rng: Optional[np.random.Generator] = None,
                            forecast_config: Optional[ForecastConfig] = None) -> List[OptimizationResult]:
    """
    Evaluate route/traffic state and emit ranked optimization suggestions

    Args:
        segments: Traffic segments for this cycle
        routes: Route records for this cycle
        config: RecommenderConfig
        forecasts: This cycle's forecasts (generated from segments if omitted)
        rng: Random source used only when forecasts are generated
             (seeded per route from its congestion when omitted)
        forecast_config: ForecastConfig used only when forecasts are generated

    Returns:
        OptimizationResult list sorted by priority, confidence, route id
    """
    recommender = RouteRecommender(config=config, forecast_config=forecast_config, rng=rng)
    return recommender.recommend(segments, routes, forecasts=forecasts)
