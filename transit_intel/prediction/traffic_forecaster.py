"""
Traffic Forecaster - Short-Horizon Congestion Forecast

Projects congestion for every route over a fixed 6-hour window:
index 0 is the current observation, each following hour is the previous
value plus a bounded random step and a mild pull back toward the route's
baseline, clamped to [0, 1].

Each route's walk is one sequential process, so the trend between
point 0 and point 1 is meaningful. Routes draw from the same injected
generator in sorted route order, which keeps a seeded run reproducible.
"""

import logging
import math
from typing import Dict, List, Mapping, Optional

import numpy as np

from transit_intel.config import ForecastConfig
from transit_intel.models import FORECAST_HORIZON, ForecastSnapshot
from transit_intel.utils.logging import log_execution_time

logger = logging.getLogger(__name__)


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


class TrafficForecaster:
    """
    Random-walk congestion forecaster with mean reversion

    Holds no state besides its immutable config and the random source.

    Usage:
        forecaster = TrafficForecaster(rng=np.random.default_rng(7))
        snapshot = forecaster.snapshot({'42': 0.82, '15': 0.35})
        snapshot.trend('42')
    """

    def __init__(self,
                 config: Optional[ForecastConfig] = None,
                 rng: Optional[np.random.Generator] = None):
        """
        Initialize the forecaster

        Args:
            config: ForecastConfig (step size, reversion, baselines)
            rng: Random source; a fresh unseeded generator when omitted
        """
        self.config = config or ForecastConfig()
        self.rng = rng if rng is not None else np.random.default_rng()

    def _observed(self, route_id: str, value) -> float:
        """Validate an observed congestion value, baseline if missing"""
        baseline = self.config.baseline_for(route_id)

        if value is None:
            return baseline

        try:
            value = float(value)
        except (TypeError, ValueError):
            logger.warning(f"Non-numeric congestion for route {route_id!r}: {value!r}, using baseline")
            return baseline

        if math.isnan(value):
            logger.warning(f"NaN congestion for route {route_id!r}, using baseline")
            return baseline

        if not 0.0 <= value <= 1.0:
            logger.warning(f"Congestion {value} for route {route_id!r} outside [0, 1], clamping")
            return _clamp(value)

        return value

    def forecast_route(self, route_id: str, current) -> List[float]:
        """
        Forecast one route

        Args:
            route_id: Route identifier (selects the baseline)
            current: Observed congestion (0-1), None if never sampled

        Returns:
            Exactly FORECAST_HORIZON values in [0, 1]
        """
        baseline = self.config.baseline_for(route_id)
        step_size = self.config.step_size
        reversion = self.config.mean_reversion

        value = self._observed(route_id, current)
        sequence = [value]

        steps = self.rng.uniform(-step_size, step_size, size=FORECAST_HORIZON - 1)
        for step in steps:
            value = _clamp(value + float(step) + reversion * (baseline - value))
            sequence.append(value)

        return sequence

    def forecast(self, current_by_route: Mapping[str, Optional[float]]) -> Dict[str, List[float]]:
        """Forecast every route in the mapping"""
        return {
            route_id: self.forecast_route(route_id, current_by_route[route_id])
            for route_id in sorted(current_by_route)
        }

    def snapshot(self, current_by_route: Mapping[str, Optional[float]]) -> ForecastSnapshot:
        """Forecast every route and wrap the result for one refresh cycle"""
        return ForecastSnapshot(series=self.forecast(current_by_route))


@log_execution_time(logger)
def forecast_traffic(current_by_route: Mapping[str, Optional[float]],
                     config: Optional[ForecastConfig] = None,
                     rng: Optional[np.random.Generator] = None) -> Dict[str, List[float]]:
    """
    Produce a 6-point congestion forecast per route

    Args:
        current_by_route: Route id -> current congestion (None if unsampled)
        config: ForecastConfig
        rng: Injectable random source (seed it for reproducible output)

    Returns:
        Dict of route_id -> list of FORECAST_HORIZON congestion values
    """
    if not current_by_route:
        return {}
    return TrafficForecaster(config=config, rng=rng).forecast(current_by_route)
