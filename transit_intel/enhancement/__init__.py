"""
Vehicle Enhancement Module

Simulated operational attributes (ETA, next stop, fuel level) for fleet
snapshots.
"""

from transit_intel.enhancement.vehicle_enhancer import (
    VehicleEnhancer,
    enhance_vehicles,
)


__all__ = [
    'VehicleEnhancer',
    'enhance_vehicles',
]
