"""
Actionable Insight Models

Operator directives derived from named trigger conditions.
"""

from enum import Enum

from ._base import TransitModel


class InsightTrigger(str, Enum):
    """Named trigger conditions, in display order"""
    INCIDENT_DIVERSION = "incident_diversion"
    OUT_OF_SERVICE_VEHICLES = "out_of_service_vehicles"
    STATION_DEMAND = "station_demand"
    OVERCROWDED_ROUTE = "overcrowded_route"
    SEGMENT_CONGESTION = "segment_congestion"
    SEGMENT_WEATHER = "segment_weather"
    CITYWIDE_WEATHER = "citywide_weather"
    ROUTE_DELAY = "route_delay"
    LOW_FUEL = "low_fuel"
    LOW_DEMAND_ROUTE = "low_demand_route"


class Insight(TransitModel):
    """A single directive tied to one (trigger, entity) pair"""
    trigger: InsightTrigger
    entity_id: str
    message: str

    @property
    def key(self) -> tuple[InsightTrigger, str]:
        """Deduplication key"""
        return (self.trigger, self.entity_id)
