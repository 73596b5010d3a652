"""Aggregation library — per-unit metric bundles to one composite bundle.

Public API:
    - aggregate_units: Fetch and combine metrics for a set of base units
    - reduce_family: Combine one family across units by metric kind
    - AggregationError / AggregationFailure: No composite could be produced
"""

from area_profile.lib.aggregator.engine import AggregationError, AggregationFailure, aggregate_units
from area_profile.lib.aggregator.reducers import reduce_family

__all__ = [
    "AggregationError",
    "AggregationFailure",
    "aggregate_units",
    "reduce_family",
]
