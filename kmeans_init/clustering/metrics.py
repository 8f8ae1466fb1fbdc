"""Seeding quality metrics.

Provides:
- Clustering cost - weighted squared distance to the nearest center
- Assignment counts - input points nearest to each center
- Strategy comparison - mean cost per strategy over many seeds
"""

import numpy as np
from typing import Dict, Iterable, Optional, Sequence, Union

from .centers import Centers
from .init_strategy import InitStrategy, resolve_strategy
from .weighted import WeightedPoint, as_arrays


def clustering_cost(points: Sequence[WeightedPoint], centers: Centers) -> float:
    """Compute the clustering cost of ``centers`` over ``points``.

    cost = sum_i w_i * min_c ||x_i - c||^2

    Lower is better.

    Args:
        points: Weighted point collection.
        centers: Non-empty centers.

    Returns:
        Clustering cost.
    """
    return centers.clustering_cost(points)


def assignment_counts(points: Sequence[WeightedPoint], centers: Centers) -> np.ndarray:
    """Count the input points nearest to each center.

    Weights are ignored; every point counts once.

    Args:
        points: Weighted point collection.
        centers: Non-empty centers.

    Returns:
        Counts (k,), summing to ``len(points)``.
    """
    vectors, _ = as_arrays(points)
    _, nearest = centers.nearest(vectors)
    return np.bincount(nearest, minlength=len(centers))


def compare_strategies(
    points: Sequence[WeightedPoint],
    k: int,
    seeds: Iterable[int],
    strategies: Optional[Sequence[Union[str, InitStrategy]]] = None,
    n_workers: Optional[int] = None,
) -> Dict[InitStrategy, float]:
    """Mean clustering cost of each strategy over several seeds.

    Args:
        points: Weighted point collection.
        k: Number of clusters.
        seeds: Random seeds; every strategy runs once per seed.
        strategies: Strategies to compare. Defaults to all of them.
        n_workers: Threads used for per-point scoring.

    Returns:
        Mapping from strategy to mean clustering cost.
    """
    seeds = list(seeds)
    if not seeds:
        raise ValueError("Need at least one seed")

    if strategies is None:
        resolved = list(InitStrategy)
    else:
        resolved = [resolve_strategy(s) for s in strategies]

    results: Dict[InitStrategy, float] = {}
    for strategy in resolved:
        costs = [
            clustering_cost(
                points,
                strategy.apply(points, k, np.random.default_rng(seed), n_workers=n_workers),
            )
            for seed in seeds
        ]
        results[strategy] = float(np.mean(costs))
    return results
