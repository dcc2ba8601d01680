"""
Traffic Forecast Models

One refresh cycle's congestion forecast for every route.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

import numpy as np
from pydantic import Field

from ._base import TransitModel


FORECAST_HORIZON = 6                      # points, index 0 = current hour


class Trend(str, Enum):
    """Direction of the next forecast step"""
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class ForecastSnapshot(TransitModel):
    """
    Route id -> forecast sequence for a single refresh cycle

    Callers compute it once per cycle and reuse it for that cycle's display.
    """
    series: dict[str, list[float]] = Field(default_factory=dict)
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def get(self, route_id: str) -> Optional[list[float]]:
        """Forecast for a route, None if unknown"""
        return self.series.get(route_id)

    def trend(self, route_id: str) -> Optional[Trend]:
        """Compare the first forecast step against the current value"""
        values = self.series.get(route_id)
        if not values or len(values) < 2:
            return None
        if values[1] > values[0]:
            return Trend.INCREASING
        if values[1] < values[0]:
            return Trend.DECREASING
        return Trend.STABLE

    def volatility(self, route_id: str) -> float:
        """Standard deviation of the forecast values (0 if unknown)"""
        return forecast_volatility(self.series.get(route_id))

    def peak(self, route_id: str) -> Optional[float]:
        """Highest forecast congestion for a route"""
        values = self.series.get(route_id)
        return max(values) if values else None


def forecast_volatility(values) -> float:
    """
    Spread of a forecast sequence around its mean

    Steady trends and zig-zags both count: any wide swing across the
    horizon raises the value. 0 for missing or single-point forecasts.
    """
    if values is None or len(values) < 2:
        return 0.0
    return float(np.std(np.asarray(values, dtype=float)))
