"""
Pydantic Models Package

All snapshot and result models for the transit analytics engine.
Import from here for convenience.
"""

from ._base import TransitModel

# Vehicle models
from .vehicle import (
    VehicleStatus,
    VehicleSnapshot,
)

# Traffic models
from .traffic import (
    IncidentType,
    IncidentSeverity,
    Incident,
    TrafficSegment,
    speed_for_congestion,
)

# Route models
from .route import (
    CongestionLevel,
    RouteStatus,
    Stop,
    RouteRecord,
)

# Optimization models
from .optimization import (
    Priority,
    RerouteRationale,
    Impact,
    OptimizationResult,
)

# Forecast models
from .forecast import (
    FORECAST_HORIZON,
    Trend,
    ForecastSnapshot,
    forecast_volatility,
)

# Collaborator snapshots
from .snapshots import (
    RoutePassengers,
    StationPassengers,
    PassengerSnapshot,
    WeatherSnapshot,
)

# Insight models
from .insight import (
    InsightTrigger,
    Insight,
)


__all__ = [
    'TransitModel',

    # Vehicle
    'VehicleStatus',
    'VehicleSnapshot',

    # Traffic
    'IncidentType',
    'IncidentSeverity',
    'Incident',
    'TrafficSegment',
    'speed_for_congestion',

    # Route
    'CongestionLevel',
    'RouteStatus',
    'Stop',
    'RouteRecord',

    # Optimization
    'Priority',
    'RerouteRationale',
    'Impact',
    'OptimizationResult',

    # Forecast
    'FORECAST_HORIZON',
    'Trend',
    'ForecastSnapshot',
    'forecast_volatility',

    # Snapshots
    'RoutePassengers',
    'StationPassengers',
    'PassengerSnapshot',
    'WeatherSnapshot',

    # Insights
    'InsightTrigger',
    'Insight',
]
