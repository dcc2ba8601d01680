"""
Traffic Segment Models

Road segments along transit routes with their congestion state and any
active incidents. Incidents are only reported on segments whose
congestion exceeds the high-congestion threshold.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field, model_validator

from ._base import TransitModel


IncidentType = Literal['accident', 'construction', 'event', 'weather']
IncidentSeverity = Literal['low', 'medium', 'high']

# Free-flow speed and the floor reached in a full jam (mph)
FREE_FLOW_SPEED = 60.0
JAM_SPEED = 5.0


def speed_for_congestion(congestion_level: float) -> float:
    """
    Typical average speed for a congestion level

    Monotonically decreasing: more congestion never means a higher speed.
    """
    congestion_level = max(0.0, min(1.0, congestion_level))
    return max(JAM_SPEED, FREE_FLOW_SPEED - congestion_level * (FREE_FLOW_SPEED - JAM_SPEED))


class Incident(TransitModel):
    """Traffic incident reported on a segment"""
    id: str
    type: IncidentType
    severity: IncidentSeverity
    latitude: float
    longitude: float
    description: str = ""
    start_time: datetime
    estimated_end_time: Optional[datetime] = None

    class Config:
        json_schema_extra = {
            "example": {
                "id": "incident-42-1",
                "type": "accident",
                "severity": "high",
                "latitude": 19.0439,
                "longitude": 73.1145,
                "description": "Major accident",
                "startTime": "2026-01-12T08:05:00Z"
            }
        }


class TrafficSegment(TransitModel):
    """
    Road segment with current traffic state

    Congestion is continuous on a 0-1 scale. Coordinates are an ordered
    polyline of (lat, lon) points.
    """
    id: str
    name: str
    congestion_level: float = Field(ge=0.0, le=1.0)
    average_speed: float = Field(ge=0.0)  # mph
    coordinates: list[tuple[float, float]] = Field(min_length=2)
    incidents: list[Incident] = Field(default_factory=list)

    # Owning route (parsed from "<route>-segment-<n>" ids when absent)
    route_id: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _default_speed(cls, data):
        if isinstance(data, dict):
            has_speed = any(data.get(k) is not None for k in ('average_speed', 'averageSpeed'))
            congestion = data.get('congestion_level', data.get('congestionLevel'))
            if not has_speed and isinstance(congestion, (int, float)):
                data = {**data, 'average_speed': speed_for_congestion(float(congestion))}
            if data.get('incidents', ...) is None:
                data = {**data, 'incidents': []}
        return data

    @property
    def owning_route(self) -> Optional[str]:
        """Route this segment belongs to, if known"""
        if self.route_id:
            return self.route_id
        head, sep, _ = self.id.partition('-segment-')
        return head if sep and head else None

    @property
    def midpoint(self) -> tuple[float, float]:
        """Midpoint of the first and last polyline points"""
        (lat1, lon1), (lat2, lon2) = self.coordinates[0], self.coordinates[-1]
        return ((lat1 + lat2) / 2, (lon1 + lon2) / 2)

    def has_incident(self, *types: str) -> bool:
        """True if any incident (optionally of the given types) is active"""
        if not types:
            return bool(self.incidents)
        return any(i.type in types for i in self.incidents)
