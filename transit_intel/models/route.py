"""
Route Data Models

Transit routes with their operating state, ordered stop list and path.
"""

from enum import Enum
from typing import Literal, Optional

from pydantic import Field

from ._base import TransitModel


class CongestionLevel(str, Enum):
    """Discretized congestion for display"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


RouteStatus = Literal['normal', 'optimized', 'reduced']


class Stop(TransitModel):
    """Stop on a route, with the number of passengers currently waiting"""
    id: str
    name: str
    latitude: float
    longitude: float
    passenger_count: int = Field(default=0, ge=0)

    @property
    def position(self) -> tuple[float, float]:
        """(lat, lon) tuple"""
        return (self.latitude, self.longitude)


class RouteRecord(TransitModel):
    """
    Transit route state for one polling cycle

    Stops are ordered along the path. Path is an ordered sequence of
    (lat, lon) points.
    """
    id: str
    name: str
    status: RouteStatus = 'normal'
    active_vehicles: int = Field(default=0, ge=0)
    current_passengers: int = Field(default=0, ge=0)
    average_delay: float = Field(default=0.0, ge=0.0)  # minutes
    congestion_level: CongestionLevel = CongestionLevel.LOW
    stops: list[Stop] = Field(default_factory=list)
    path: list[tuple[float, float]] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "id": "42",
                "name": "Panvel Station Express",
                "status": "normal",
                "activeVehicles": 5,
                "currentPassengers": 240,
                "averageDelay": 3,
                "congestionLevel": "medium",
                "stops": [
                    {"id": "42-stop-0", "name": "Panvel Station Express Stop 1",
                     "latitude": 19.0789, "longitude": 73.1095, "passengerCount": 12}
                ],
                "path": [[19.0789, 73.1095], [19.0589, 73.1195]]
            }
        }

    def find_stop(self, stop_id: str) -> Optional[Stop]:
        """Look up a stop by id or name"""
        for stop in self.stops:
            if stop.id == stop_id or stop.name == stop_id:
                return stop
        return None

    @property
    def total_waiting(self) -> int:
        """Passengers waiting across all stops"""
        return sum(stop.passenger_count for stop in self.stops)
