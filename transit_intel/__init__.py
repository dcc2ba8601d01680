"""
Transit Intelligence Engine

Analytics core for a transit network dashboard. Turns periodic fleet,
traffic and route snapshots into enhanced vehicle data, short-horizon
congestion forecasts, ranked route/schedule recommendations and
operator directives.

Public operations:
- enhance_vehicles: ETA, next stop and fuel level per vehicle
- forecast_traffic: 6-point congestion forecast per route
- recommend_route_changes: ranked OptimizationResult list
- generate_insights: ordered operator directives
"""

__version__ = "1.0.0"

from transit_intel.enhancement import enhance_vehicles
from transit_intel.prediction import forecast_traffic
from transit_intel.optimization import recommend_route_changes
from transit_intel.insights import generate_insights

from transit_intel.config import EngineConfig, load_engine_config
from transit_intel.exceptions import TransitIntelError, MalformedInputError, ConfigurationError
from transit_intel.models import (
    VehicleSnapshot,
    TrafficSegment,
    Incident,
    RouteRecord,
    Stop,
    OptimizationResult,
    Impact,
    Priority,
    ForecastSnapshot,
)
from transit_intel.pipeline import CycleSnapshot, CycleResult, CycleResultStore, run_refresh_cycle


__all__ = [
    '__version__',

    # Operations
    'enhance_vehicles',
    'forecast_traffic',
    'recommend_route_changes',
    'generate_insights',

    # Configuration & errors
    'EngineConfig',
    'load_engine_config',
    'TransitIntelError',
    'MalformedInputError',
    'ConfigurationError',

    # Models
    'VehicleSnapshot',
    'TrafficSegment',
    'Incident',
    'RouteRecord',
    'Stop',
    'OptimizationResult',
    'Impact',
    'Priority',
    'ForecastSnapshot',

    # Refresh cycle
    'CycleSnapshot',
    'CycleResult',
    'CycleResultStore',
    'run_refresh_cycle',
]
