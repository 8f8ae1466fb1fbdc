"""Weighted k-means center initialization.

Seeding strategies (random, k-means++, k-means||) that choose the
initial centers for Lloyd's algorithm over weighted points.
"""

from .clustering import (
    Centers,
    DistanceResult,
    InitStrategy,
    WeightedPoint,
    clustering_cost,
    initialize_centers,
    weighted_points,
)
from .config import KMeansInitConfig

__version__ = "0.1.0"

__all__ = [
    "Centers",
    "DistanceResult",
    "InitStrategy",
    "WeightedPoint",
    "clustering_cost",
    "initialize_centers",
    "weighted_points",
    "KMeansInitConfig",
]
