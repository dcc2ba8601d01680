"""
Actionable Insight Generator

Turns fleet, traffic and route state into short operator directives.
Each directive comes from a named trigger and a fixed template; only the
entity names (route, station, segment, vehicle) are interpolated. At most
one directive is emitted per (trigger, entity) pair in a cycle.

Triggers:
- INCIDENT_DIVERSION: accident/construction/event of high severity on a segment
- OUT_OF_SERVICE_VEHICLES: out-of-service vehicles on a route >= threshold
- STATION_DEMAND: waiting passengers at a stop exceed its share of the
  route's free seats
- OVERCROWDED_ROUTE: average occupancy of in-service vehicles above threshold
- SEGMENT_CONGESTION: segment congestion above the high threshold
- SEGMENT_WEATHER: weather incident on a segment
- CITYWIDE_WEATHER: weather snapshot with medium/high impact
- ROUTE_DELAY: average route delay above threshold
- LOW_FUEL: vehicle fuel level below threshold
- LOW_DEMAND_ROUTE: low congestion and low occupancy on a route
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np

from transit_intel.config import InsightConfig
from transit_intel.models import (
    Insight,
    InsightTrigger,
    PassengerSnapshot,
    RouteRecord,
    TrafficSegment,
    VehicleSnapshot,
    WeatherSnapshot,
)
from transit_intel.prediction.congestion_classifier import group_segments_by_route
from transit_intel.utils.logging import log_execution_time

logger = logging.getLogger(__name__)


TEMPLATES: Dict[InsightTrigger, str] = {
    InsightTrigger.INCIDENT_DIVERSION:
        "Divert vehicles away from {segment} until the incident is cleared.",
    InsightTrigger.OUT_OF_SERVICE_VEHICLES:
        "Dispatch replacement vehicles to {route} to cover out-of-service buses.",
    InsightTrigger.STATION_DEMAND:
        "Dispatch an additional vehicle to {station} on {route} due to high waiting demand.",
    InsightTrigger.OVERCROWDED_ROUTE:
        "Increase service frequency on {route} to relieve overcrowded vehicles.",
    InsightTrigger.SEGMENT_CONGESTION:
        "Reduce speed on {segment} due to heavy congestion.",
    InsightTrigger.SEGMENT_WEATHER:
        "Reduce speed on {segment} due to adverse weather.",
    InsightTrigger.CITYWIDE_WEATHER:
        "Advise all drivers near {location} to reduce speed due to adverse weather.",
    InsightTrigger.ROUTE_DELAY:
        "Adjust the timetable on {route} to absorb recurring delays.",
    InsightTrigger.LOW_FUEL:
        "Send vehicle {vehicle} for refuelling at the end of its current trip.",
    InsightTrigger.LOW_DEMAND_ROUTE:
        "Reduce service on {route} during the current low-demand period.",
}

# Incident types that call for diverting traffic rather than slowing down
DIVERSION_INCIDENTS = ('accident', 'construction', 'event')


class InsightCollector:
    """Ordered, deduplicated insight list for one generation cycle"""

    def __init__(self):
        self._insights: List[Insight] = []
        self._seen = set()

    def add(self, trigger: InsightTrigger, entity_id: str, **names) -> bool:
        """
        Add a directive unless this (trigger, entity) pair already fired

        Returns:
            True if the insight was added
        """
        key = (trigger, entity_id)
        if key in self._seen:
            return False
        self._seen.add(key)
        self._insights.append(Insight(
            trigger=trigger,
            entity_id=entity_id,
            message=TEMPLATES[trigger].format(**names),
        ))
        return True

    def results(self) -> List[Insight]:
        """Insights ordered by trigger, then by detection order"""
        order = {trigger: index for index, trigger in enumerate(InsightTrigger)}
        return sorted(self._insights, key=lambda i: order[i.trigger])


class ActionableInsightGenerator:
    """
    Rule-based directive generator

    Usage:
        generator = ActionableInsightGenerator()
        insights = generator.generate(vehicles, segments, routes)
    """

    def __init__(self, config: Optional[InsightConfig] = None):
        """
        Initialize the generator

        Args:
            config: InsightConfig with trigger thresholds
        """
        self.config = config or InsightConfig()

    def generate(self,
                 vehicles: Sequence[VehicleSnapshot],
                 segments: Sequence[TrafficSegment],
                 routes: Sequence[RouteRecord],
                 passengers: Optional[PassengerSnapshot] = None,
                 weather: Optional[WeatherSnapshot] = None) -> List[Insight]:
        """
        Evaluate every trigger against the current state

        Args:
            vehicles: Vehicle snapshots (enhanced snapshots enable LOW_FUEL)
            segments: Traffic segments
            routes: Route records
            passengers: Optional passenger aggregates (station waiting counts)
            weather: Optional weather snapshot

        Returns:
            Ordered list of Insight entries
        """
        collector = InsightCollector()
        route_names = {route.id: route.name for route in routes}
        vehicles_by_route = self._group_vehicles(vehicles)

        self._check_segments(collector, segments)
        self._check_out_of_service(collector, vehicles_by_route, route_names)
        self._check_station_demand(collector, routes, vehicles_by_route, passengers)
        self._check_occupancy(collector, routes, vehicles_by_route, segments, passengers)
        self._check_delays(collector, routes)
        self._check_fuel(collector, vehicles)
        if weather is not None and weather.is_adverse:
            collector.add(InsightTrigger.CITYWIDE_WEATHER, weather.location, location=weather.location)

        return collector.results()

    # ----------------------------------------
    # Triggers
    # ----------------------------------------

    @staticmethod
    def _group_vehicles(vehicles: Iterable[VehicleSnapshot]) -> Dict[str, List[VehicleSnapshot]]:
        grouped: Dict[str, List[VehicleSnapshot]] = defaultdict(list)
        for vehicle in vehicles:
            grouped[vehicle.route_id].append(vehicle)
        return dict(grouped)

    def _check_segments(self, collector: InsightCollector, segments: Iterable[TrafficSegment]):
        for segment in segments:
            if any(i.type in DIVERSION_INCIDENTS and i.severity == 'high' for i in segment.incidents):
                collector.add(InsightTrigger.INCIDENT_DIVERSION, segment.id, segment=segment.name)
            if segment.congestion_level > self.config.high_congestion_threshold:
                collector.add(InsightTrigger.SEGMENT_CONGESTION, segment.id, segment=segment.name)
            if segment.has_incident('weather'):
                collector.add(InsightTrigger.SEGMENT_WEATHER, segment.id, segment=segment.name)

    def _check_out_of_service(self,
                              collector: InsightCollector,
                              vehicles_by_route: Dict[str, List[VehicleSnapshot]],
                              route_names: Dict[str, str]):
        for route_id in sorted(vehicles_by_route):
            out_of_service = sum(1 for v in vehicles_by_route[route_id] if not v.in_service)
            if out_of_service >= self.config.out_of_service_threshold:
                name = route_names.get(route_id, f"Route {route_id}")
                collector.add(InsightTrigger.OUT_OF_SERVICE_VEHICLES, route_id, route=name)

    def _check_station_demand(self,
                              collector: InsightCollector,
                              routes: Iterable[RouteRecord],
                              vehicles_by_route: Dict[str, List[VehicleSnapshot]],
                              passengers: Optional[PassengerSnapshot]):
        for route in routes:
            # No tracked vehicles means unknown capacity, not zero
            if not route.stops or route.id not in vehicles_by_route:
                continue
            in_service = [v for v in vehicles_by_route[route.id] if v.in_service]
            headroom = sum(v.free_seats for v in in_service)
            share = headroom / len(route.stops)

            for stop in route.stops:
                waiting = stop.passenger_count
                if passengers is not None:
                    reported = passengers.waiting_at(stop.id)
                    if reported is None:
                        reported = passengers.waiting_at(stop.name)
                    if reported is not None:
                        waiting = reported

                if waiting > share:
                    collector.add(InsightTrigger.STATION_DEMAND, stop.id,
                                  station=stop.name, route=route.name)

    def _check_occupancy(self,
                         collector: InsightCollector,
                         routes: Iterable[RouteRecord],
                         vehicles_by_route: Dict[str, List[VehicleSnapshot]],
                         segments: Iterable[TrafficSegment],
                         passengers: Optional[PassengerSnapshot] = None):
        """Vehicle occupancy first, the passenger snapshot for routes without in-service vehicles"""
        grouped_segments = group_segments_by_route(segments)

        for route in routes:
            in_service = [v for v in vehicles_by_route.get(route.id, []) if v.in_service]
            if in_service:
                occupancy = float(np.mean([v.occupancy_rate for v in in_service]))
            elif passengers is not None:
                occupancy = passengers.route_occupancy(route.id)
            else:
                occupancy = None
            if occupancy is None:
                continue

            if occupancy > self.config.overcrowded_occupancy:
                collector.add(InsightTrigger.OVERCROWDED_ROUTE, route.id, route=route.name)
                continue

            route_segments = grouped_segments.get(route.id)
            if not route_segments:
                continue
            congestion = float(np.mean([s.congestion_level for s in route_segments]))
            if occupancy < self.config.low_demand_occupancy and congestion <= self.config.low_congestion_threshold:
                collector.add(InsightTrigger.LOW_DEMAND_ROUTE, route.id, route=route.name)

    def _check_delays(self, collector: InsightCollector, routes: Iterable[RouteRecord]):
        for route in routes:
            if route.average_delay > self.config.delay_threshold:
                collector.add(InsightTrigger.ROUTE_DELAY, route.id, route=route.name)

    def _check_fuel(self, collector: InsightCollector, vehicles: Iterable[VehicleSnapshot]):
        for vehicle in vehicles:
            if vehicle.fuel_level is not None and vehicle.fuel_level < self.config.low_fuel_level:
                collector.add(InsightTrigger.LOW_FUEL, vehicle.id, vehicle=vehicle.id)


@log_execution_time(logger)
def generate_insight_records(vehicles: Sequence[VehicleSnapshot],
                             segments: Sequence[TrafficSegment],
                             routes: Sequence[RouteRecord],
                             config: Optional[InsightConfig] = None,
                             passengers: Optional[PassengerSnapshot] = None,
                             weather: Optional[WeatherSnapshot] = None) -> List[Insight]:
    """Structured variant of generate_insights"""
    generator = ActionableInsightGenerator(config=config)
    return generator.generate(vehicles, segments, routes, passengers=passengers, weather=weather)


def generate_insights(vehicles: Sequence[VehicleSnapshot],
                      segments: Sequence[TrafficSegment],
                      routes: Sequence[RouteRecord],
                      config: Optional[InsightConfig] = None,
                      passengers: Optional[PassengerSnapshot] = None,
                      weather: Optional[WeatherSnapshot] = None) -> List[str]:
    """
    Produce an ordered list of operator directives

    Args:
        vehicles: Vehicle snapshots
        segments: Traffic segments
        routes: Route records
        config: InsightConfig
        passengers: Optional passenger aggregates
        weather: Optional weather snapshot

    Returns:
        Directive strings, one per (trigger, entity) pair
    """
    records = generate_insight_records(
        vehicles, segments, routes, config=config, passengers=passengers, weather=weather
    )
    return [record.message for record in records]
