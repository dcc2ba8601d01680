"""
Vehicle Snapshot Models

Fleet telemetry as delivered by the vehicle feed on every polling cycle.
The operational fields (ETA, next stop, fuel level) are optional and are
filled in by the vehicle enhancer.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field, model_validator

from ._base import TransitModel


VehicleStatus = Literal['on-time', 'delayed', 'out-of-service']


class VehicleSnapshot(TransitModel):
    """
    Point-in-time state of a single fleet vehicle

    Position is GPS (lat/lon), speed is mph, heading is degrees.
    """
    # Identity
    id: str
    route_id: str = Field(alias="route")

    # Position & Movement
    latitude: float
    longitude: float
    speed: float = 0.0                    # mph
    heading: float = 0.0                  # degrees

    # State
    status: VehicleStatus = 'on-time'
    passengers: int = Field(default=0, ge=0)
    capacity: int = Field(default=50, ge=0)
    last_updated: datetime

    # Enhanced operational data
    eta: Optional[int] = None             # minutes to next stop
    next_stop: Optional[str] = None
    fuel_level: Optional[float] = Field(default=None, ge=0.0, le=100.0)

    class Config:
        json_schema_extra = {
            "example": {
                "id": "42-vehicle-0",
                "route": "42",
                "latitude": 19.0589,
                "longitude": 73.1095,
                "speed": 27.5,
                "heading": 180.0,
                "status": "on-time",
                "passengers": 31,
                "capacity": 50,
                "lastUpdated": "2026-01-12T08:30:00Z"
            }
        }

    @model_validator(mode="after")
    def _check_load(self):
        if self.passengers > self.capacity:
            raise ValueError(
                f"passengers ({self.passengers}) exceed capacity ({self.capacity})"
            )
        return self

    @property
    def in_service(self) -> bool:
        """True unless the vehicle is out of service"""
        return self.status != 'out-of-service'

    @property
    def occupancy_rate(self) -> float:
        """Passenger load as a fraction of capacity (0-1)"""
        if self.capacity == 0:
            return 0.0
        return self.passengers / self.capacity

    @property
    def free_seats(self) -> int:
        """Remaining passenger headroom"""
        return self.capacity - self.passengers
