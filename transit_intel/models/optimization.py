"""
Optimization Result Models

Route and schedule recommendations with quantified impact.
"""

from enum import Enum

from pydantic import Field

from ._base import TransitModel


class Priority(str, Enum):
    """Recommendation priority"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        """Ordering weight, higher is more urgent"""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {Priority.LOW: 0, Priority.MEDIUM: 1, Priority.HIGH: 2}


class RerouteRationale(str, Enum):
    """Signal that triggered a recommendation"""
    INCIDENT_AVOIDANCE = "incident_avoidance"
    CONGESTION_AVOIDANCE = "congestion_avoidance"
    FREQUENCY_ADJUSTMENT = "frequency_adjustment"


class Impact(TransitModel):
    """Estimated benefit of adopting a recommendation"""
    travel_time_reduction: float = Field(default=0.0, ge=0.0)   # minutes
    wait_time_reduction: float = Field(default=0.0, ge=0.0)     # minutes
    fuel_savings: float = Field(default=0.0, ge=0.0)            # currency units


class OptimizationResult(TransitModel):
    """
    Recommendation for a single route

    Priority defaults to MEDIUM and impact to a zero block, so consumers
    never deal with missing values.
    """
    route_id: str
    original_route: str
    optimized_route: str
    reason: str
    impact: Impact = Field(default_factory=Impact)
    confidence: float = Field(ge=0.0, le=100.0)
    priority: Priority = Priority.MEDIUM
    rationale: RerouteRationale = RerouteRationale.CONGESTION_AVOIDANCE

    class Config:
        json_schema_extra = {
            "example": {
                "routeId": "15",
                "originalRoute": "Kamothe Line: Stop 1 → Stop 2 → Stop 3",
                "optimizedRoute": "Kamothe Line: Stop 1 → bypass Kamothe Line Segment 2 → Stop 3",
                "reason": "Accident on Kamothe Line Segment 2 (high severity)",
                "impact": {"travelTimeReduction": 12, "waitTimeReduction": 8, "fuelSavings": 320},
                "confidence": 92,
                "priority": "high",
                "rationale": "incident_avoidance"
            }
        }

    def sort_key(self) -> tuple:
        """Priority desc, confidence desc, route id asc"""
        return (-self.priority.rank, -self.confidence, self.route_id)
