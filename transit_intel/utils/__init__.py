"""Shared helpers: logging, geometry and seeding."""

from transit_intel.utils.logging import setup_logger, log_execution_time
from transit_intel.utils.geo import haversine_miles, path_length_miles, project_onto_path
from transit_intel.utils.seeding import stable_seed, seeded_rng

__all__ = [
    'setup_logger',
    'log_execution_time',
    'haversine_miles',
    'path_length_miles',
    'project_onto_path',
    'stable_seed',
    'seeded_rng',
]
