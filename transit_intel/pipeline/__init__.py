"""
Refresh Cycle Pipeline

Per-tick orchestration of the analytics components and last-writer-wins
publication of their results.
"""

from transit_intel.pipeline.refresh_cycle import (
    CycleSnapshot,
    CycleResult,
    CycleResultStore,
    run_refresh_cycle,
)


__all__ = [
    'CycleSnapshot',
    'CycleResult',
    'CycleResultStore',
    'run_refresh_cycle',
]
