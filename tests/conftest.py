"""
Shared Test Fixtures

Factories for vehicles, segments and routes laid out along straight
north-south lines, so distances along a route are easy to reason about
(0.01 degrees of latitude is about 0.69 miles).
"""

from datetime import datetime, timezone

import numpy as np
import pytest

from transit_intel.models import Incident, RouteRecord, Stop, TrafficSegment, VehicleSnapshot


NOW = datetime(2026, 1, 12, 8, 30, tzinfo=timezone.utc)

BASE_LAT = 19.00
BASE_LON = 73.10
STOP_SPACING = 0.01

STOP_NAMES_42 = ["Panvel Station", "Kharghar", "Belapur", "Nerul"]


def route_path(lon: float = BASE_LON, points: int = 4):
    return [(round(BASE_LAT + i * STOP_SPACING, 4), lon) for i in range(points)]


@pytest.fixture
def now():
    """Fixed cycle timestamp"""
    return NOW


@pytest.fixture
def rng():
    """Seeded random source"""
    return np.random.default_rng(42)


@pytest.fixture
def make_route():
    """Factory for route records with stops on every path point"""
    def _make(route_id: str = "42",
              name: str = None,
              lon: float = BASE_LON,
              stop_names=None,
              waiting=0,
              **fields) -> RouteRecord:
        name = name or f"Route {route_id} Line"
        path = route_path(lon)
        stop_names = stop_names or [f"{name} Stop {i + 1}" for i in range(len(path))]
        if isinstance(waiting, int):
            waiting = [waiting] * len(path)
        stops = [
            Stop(id=f"{route_id}-stop-{i}", name=stop_name, latitude=lat, longitude=lng,
                 passenger_count=waiting[i])
            for i, (stop_name, (lat, lng)) in enumerate(zip(stop_names, path))
        ]
        fields.setdefault('active_vehicles', 4)
        return RouteRecord(id=route_id, name=name, stops=stops, path=path, **fields)
    return _make


@pytest.fixture
def make_incident(now):
    """Factory for incidents"""
    def _make(type: str = "accident", severity: str = "high", incident_id: str = "incident-1") -> Incident:
        return Incident(
            id=incident_id,
            type=type,
            severity=severity,
            latitude=BASE_LAT,
            longitude=BASE_LON,
            description=f"{severity} {type}",
            start_time=now,
        )
    return _make


@pytest.fixture
def make_segment():
    """Factory for segments following route_path between two stops"""
    def _make(route_id: str = "42",
              index: int = 0,
              congestion: float = 0.5,
              incidents=None,
              lon: float = BASE_LON,
              name: str = None) -> TrafficSegment:
        path = route_path(lon)
        return TrafficSegment(
            id=f"{route_id}-segment-{index}",
            name=name or f"Route {route_id} Segment {index + 1}",
            congestion_level=congestion,
            coordinates=[path[index], path[index + 1]],
            incidents=list(incidents or []),
        )
    return _make


@pytest.fixture
def make_vehicle(now):
    """Factory for vehicle snapshots"""
    def _make(vehicle_id: str = "42-vehicle-0",
              route_id: str = "42",
              latitude: float = BASE_LAT + STOP_SPACING / 2,
              longitude: float = BASE_LON,
              **fields) -> VehicleSnapshot:
        fields.setdefault('speed', 20.0)
        fields.setdefault('passengers', 20)
        fields.setdefault('capacity', 50)
        fields.setdefault('last_updated', now)
        return VehicleSnapshot(
            id=vehicle_id,
            route_id=route_id,
            latitude=latitude,
            longitude=longitude,
            **fields,
        )
    return _make


@pytest.fixture
def route_42(make_route):
    """Four-stop route with named stops"""
    return make_route("42", name="Panvel Station Express", stop_names=STOP_NAMES_42)
