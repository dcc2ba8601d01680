"""
Congestion Prediction Module

Short-horizon congestion forecasting for transit routes.

Components:
- TrafficForecaster: Random walk with mean reversion, 6-hour horizon
- classify_congestion: Discretize congestion into LOW/MEDIUM/HIGH
- route_congestion_from_segments: Aggregate segment congestion per route
"""

from transit_intel.prediction.congestion_classifier import (
    MEDIUM_THRESHOLD,
    HIGH_THRESHOLD,
    classify_congestion,
    group_segments_by_route,
    route_congestion_from_segments,
)

from transit_intel.prediction.traffic_forecaster import (
    TrafficForecaster,
    forecast_traffic,
)


__all__ = [
    # Classifier
    'MEDIUM_THRESHOLD',
    'HIGH_THRESHOLD',
    'classify_congestion',
    'group_segments_by_route',
    'route_congestion_from_segments',

    # Forecaster
    'TrafficForecaster',
    'forecast_traffic',
]
