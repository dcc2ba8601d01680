"""
Vehicle Enhancer - Simulated Operational Attributes

Adds ETA, next stop and fuel level to fleet snapshots that lack them.

- Next stop: nearest stop ahead of the vehicle along its route path,
  wrapping to the first stop at the end of the line.
- ETA: distance to that stop over current speed; when either is unknown a
  pseudo-random 5-30 minute value seeded by vehicle id and polling tick,
  so repeated calls within one tick agree. Out-of-service vehicles get
  no ETA.
- Fuel: drains linearly from the last refuel (start of the service day
  plus a per-vehicle offset) at a per-vehicle burn rate, clamped to 0-100.

Every vehicle is processed independently; a record that cannot be
enhanced receives placeholder values instead of failing the batch.
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from transit_intel.config import EnhancerConfig
from transit_intel.models import RouteRecord, Stop, VehicleSnapshot
from transit_intel.utils.geo import path_length_miles, project_onto_path
from transit_intel.utils.logging import log_execution_time
from transit_intel.utils.seeding import seeded_rng

logger = logging.getLogger(__name__)

# Vehicles within this distance past a stop are treated as having left it
STOP_PASSED_MILES = 0.01


class VehicleEnhancer:
    """
    Derive ETA, next stop and fuel level for vehicle snapshots

    Usage:
        enhancer = VehicleEnhancer(routes=routes)
        enhanced = enhancer.enhance(vehicles)
    """

    def __init__(self,
                 routes: Optional[Iterable[RouteRecord]] = None,
                 config: Optional[EnhancerConfig] = None):
        """
        Initialize the enhancer

        Args:
            routes: Route records used to locate stops (optional)
            config: EnhancerConfig
        """
        self.config = config or EnhancerConfig()
        self.routes: Dict[str, RouteRecord] = {r.id: r for r in (routes or [])}

    # ----------------------------------------
    # Public API
    # ----------------------------------------

    def enhance(self, vehicles: Sequence[VehicleSnapshot]) -> List[VehicleSnapshot]:
        """Enhance every vehicle, preserving order and length"""
        return [self.enhance_one(vehicle) for vehicle in vehicles]

    def enhance_one(self, vehicle: VehicleSnapshot) -> VehicleSnapshot:
        """
        Enhance a single vehicle

        Returns a new snapshot; the input is never modified.
        """
        try:
            return self._enhance(vehicle)
        except (ValueError, TypeError, ArithmeticError) as e:
            logger.warning(f"Could not enhance vehicle {vehicle.id!r}: {e}, using placeholders")
            return self._placeholder(vehicle)

    # ----------------------------------------
    # Derivation
    # ----------------------------------------

    def _tick(self, vehicle: VehicleSnapshot) -> int:
        """Polling tick the snapshot belongs to"""
        return int(vehicle.last_updated.timestamp() // self.config.tick_seconds)

    def _enhance(self, vehicle: VehicleSnapshot) -> VehicleSnapshot:
        route = self.routes.get(vehicle.route_id)
        if route is None:
            logger.debug(f"No route data for {vehicle.route_id!r} (vehicle {vehicle.id!r})")
            located = None
        else:
            located = self._locate_next_stop(vehicle, route)

        next_stop = vehicle.next_stop
        distance = None
        if located is not None:
            stop, distance = located
            if next_stop is None:
                next_stop = stop.name
            elif next_stop != stop.name:
                # Caller supplied a different stop; distance no longer applies
                distance = None
        if next_stop is None:
            next_stop = self._placeholder_stop(vehicle)

        updates = {
            'next_stop': next_stop,
            'eta': self._eta(vehicle, distance),
            'fuel_level': vehicle.fuel_level if vehicle.fuel_level is not None else self._fuel_level(vehicle),
        }
        return vehicle.model_copy(update=updates)

    def _locate_next_stop(self,
                          vehicle: VehicleSnapshot,
                          route: RouteRecord) -> Optional[Tuple[Stop, float]]:
        """
        Find the nearest stop ahead of the vehicle

        Returns:
            (stop, distance along the path in miles), or None if the route
            has no usable stops/path
        """
        if not route.stops:
            return None

        path = route.path if len(route.path) >= 2 else [s.position for s in route.stops]
        if len(path) < 2:
            return None

        position = (vehicle.latitude, vehicle.longitude)
        vehicle_along, _ = project_onto_path(position, path)

        stops_along = [(stop, project_onto_path(stop.position, path)[0]) for stop in route.stops]
        ahead = [(stop, along) for stop, along in stops_along if along > vehicle_along + STOP_PASSED_MILES]

        if ahead:
            stop, along = min(ahead, key=lambda item: item[1])
            return stop, along - vehicle_along

        # End of the line: continue to the first stop
        first_stop, first_along = stops_along[0]
        remaining = max(0.0, path_length_miles(path) - vehicle_along)
        return first_stop, remaining + first_along

    def _eta(self, vehicle: VehicleSnapshot, distance: Optional[float]) -> Optional[int]:
        """ETA in minutes, None for out-of-service vehicles"""
        if not vehicle.in_service:
            return None
        if vehicle.eta is not None:
            return vehicle.eta

        if distance is not None and vehicle.speed >= self.config.min_speed_for_eta:
            minutes = math.ceil(distance / vehicle.speed * 60)
            return max(1, min(self.config.eta_cap, minutes))

        return self._fallback_eta(vehicle)

    def _fallback_eta(self, vehicle: VehicleSnapshot) -> int:
        rng = seeded_rng(vehicle.id, self._tick(vehicle), 'eta')
        return int(rng.integers(self.config.eta_min, self.config.eta_max, endpoint=True))

    def _placeholder_stop(self, vehicle: VehicleSnapshot) -> str:
        rng = seeded_rng(vehicle.id, self._tick(vehicle), 'stop')
        number = int(rng.integers(1, self.config.placeholder_stop_count, endpoint=True))
        return f"Route {vehicle.route_id} Stop {number}"

    def _last_refuel(self, vehicle: VehicleSnapshot) -> datetime:
        """Refuel time for the vehicle's service day"""
        updated = vehicle.last_updated
        day_start = updated.replace(
            hour=self.config.service_day_start_hour, minute=0, second=0, microsecond=0
        )
        if updated < day_start:
            day_start -= timedelta(days=1)

        rng = seeded_rng(vehicle.id, day_start.date().isoformat(), 'refuel')
        offset = int(rng.integers(0, self.config.refuel_offset_max_minutes, endpoint=True))
        return day_start + timedelta(minutes=offset)

    def _burn_rate(self, vehicle: VehicleSnapshot) -> float:
        """Fuel consumption in % per operating hour, fixed per vehicle"""
        rng = seeded_rng(vehicle.id, 'burn')
        return float(rng.uniform(self.config.fuel_burn_min, self.config.fuel_burn_max))

    def _fuel_level(self, vehicle: VehicleSnapshot) -> float:
        """Fuel remaining after operating since the last refuel"""
        elapsed = vehicle.last_updated - self._last_refuel(vehicle)
        hours = max(0.0, elapsed.total_seconds() / 3600)
        level = 100.0 - self._burn_rate(vehicle) * hours
        return round(max(0.0, min(100.0, level)), 1)

    def _placeholder(self, vehicle: VehicleSnapshot) -> VehicleSnapshot:
        """Enhancement that relies only on seeded defaults"""
        rng = seeded_rng(vehicle.id, 'placeholder')
        updates = {
            'next_stop': vehicle.next_stop or f"Route {vehicle.route_id} Stop 1",
            'eta': None if not vehicle.in_service else (
                vehicle.eta if vehicle.eta is not None
                else int(rng.integers(self.config.eta_min, self.config.eta_max, endpoint=True))
            ),
            'fuel_level': vehicle.fuel_level if vehicle.fuel_level is not None else 100.0,
        }
        return vehicle.model_copy(update=updates)


@log_execution_time(logger)
def enhance_vehicles(vehicles: Sequence[VehicleSnapshot],
                     routes: Optional[Iterable[RouteRecord]] = None,
                     config: Optional[EnhancerConfig] = None) -> List[VehicleSnapshot]:
    """
    Augment vehicle snapshots with ETA, next stop and fuel level

    Args:
        vehicles: Vehicle snapshots for this cycle
        routes: Route records used to find the next stop (optional)
        config: EnhancerConfig

    Returns:
        New snapshots in the same order, one per input vehicle
    """
    if not vehicles:
        return []
    return VehicleEnhancer(routes=routes, config=config).enhance(vehicles)
