"""
Actionable Insights Module

Operator directives (dispatch, divert, slow down, refuel) derived from
named trigger conditions over fleet, traffic and route state.
"""

from transit_intel.insights.insight_generator import (
    TEMPLATES,
    InsightCollector,
    ActionableInsightGenerator,
    generate_insight_records,
    generate_insights,
)


__all__ = [
    'TEMPLATES',
    'InsightCollector',
    'ActionableInsightGenerator',
    'generate_insight_records',
    'generate_insights',
]
