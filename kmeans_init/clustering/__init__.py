"""Clustering module for weighted k-means center initialization."""

from .centers import Centers, DistanceResult
from .init_strategy import (
    InitStrategy,
    initialize_centers,
    parallel_init,
    plus_plus_init,
    random_init,
    resolve_strategy,
)
from .metrics import (
    assignment_counts,
    clustering_cost,
    compare_strategies,
)
from .weighted import WeightedPoint, as_arrays, weighted_points

__all__ = [
    "Centers",
    "DistanceResult",
    "InitStrategy",
    "initialize_centers",
    "parallel_init",
    "plus_plus_init",
    "random_init",
    "resolve_strategy",
    "assignment_counts",
    "clustering_cost",
    "compare_strategies",
    "WeightedPoint",
    "as_arrays",
    "weighted_points",
]
