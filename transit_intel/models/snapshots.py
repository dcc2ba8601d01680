"""
Collaborator Snapshot Models

Passenger aggregates and weather conditions supplied alongside the fleet
and traffic feeds. Both are optional inputs to the insight generator.
"""

from typing import Literal, Optional

from pydantic import Field

from ._base import TransitModel


class RoutePassengers(TransitModel):
    """Passenger load for a route"""
    route_id: str
    passengers: int = Field(ge=0)
    capacity: int = Field(ge=0)
    occupancy_rate: float = Field(default=0.0, ge=0.0)


class StationPassengers(TransitModel):
    """Waiting passengers at a station"""
    station_id: str
    waiting_passengers: int = Field(ge=0)
    boarding_rate: float = 0.0            # passengers per minute
    average_wait_time: float = 0.0        # minutes


class PassengerSnapshot(TransitModel):
    """Network-wide passenger aggregates"""
    total_passengers: int = 0
    by_route: list[RoutePassengers] = Field(default_factory=list)
    by_station: list[StationPassengers] = Field(default_factory=list)

    def waiting_at(self, station: str) -> Optional[int]:
        """Waiting count for a station id/name, None if not reported"""
        for entry in self.by_station:
            if entry.station_id == station:
                return entry.waiting_passengers
        return None

    def route_occupancy(self, route_id: str) -> Optional[float]:
        """
        Occupancy (0-1 scale) reported for a route, None if not reported

        Uses the reported rate when set, otherwise passengers / capacity.
        """
        for entry in self.by_route:
            if entry.route_id != route_id:
                continue
            if entry.occupancy_rate > 0:
                return entry.occupancy_rate
            if entry.capacity > 0:
                return entry.passengers / entry.capacity
            return None
        return None


class WeatherSnapshot(TransitModel):
    """Current weather and its expected traffic impact"""
    location: str = "City Center"
    condition: Literal['clear', 'cloudy', 'rain', 'snow', 'fog'] = 'clear'
    temperature: float = 0.0              # °F
    precipitation: float = 0.0            # inches
    wind_speed: float = 0.0               # mph
    visibility: float = 10.0              # miles
    impact: Literal['none', 'low', 'medium', 'high'] = 'none'

    @property
    def is_adverse(self) -> bool:
        """Medium or high traffic impact"""
        return self.impact in ('medium', 'high')
