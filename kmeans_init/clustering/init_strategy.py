"""Seeding strategies for weighted k-means.

Three interchangeable ways to choose the initial centers handed to
Lloyd's algorithm:

- RANDOM: K distinct points drawn proportional to weight
- PLUS_PLUS: k-means++ (Arthur & Vassilvitskii, 2007), D^2-weighted draws
- PARALLEL: k-means|| (Bahmani et al., 2012), oversampling rounds
  followed by a weighted k-means++ reduction

Every strategy takes its randomness from the one generator passed in,
so a fixed seed reproduces the same centers.
"""

import logging
import math
from concurrent.futures import Executor
from enum import Enum
from typing import Callable, Dict, Optional, Sequence, Union

import numpy as np

from .centers import Centers
from .sampling import (
    avoid_duplicate,
    cumulative_scores,
    draw_index,
    point_scores,
    scoring_pool,
    weighted_sample,
)
from .weighted import WeightedPoint, as_arrays

logger = logging.getLogger(__name__)

# Oversampling factor l = round(OVERSAMPLING_RATIO * k)
OVERSAMPLING_RATIO = 0.5

RandomSource = Union[np.random.Generator, int, None]


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _check_args(points: Sequence[WeightedPoint], k: int) -> None:
    if k <= 0:
        raise ValueError(f"Number of clusters must be positive, got {k}")
    if len(points) == 0:
        raise ValueError("Need at least one weighted point")


def random_init(
    points: Sequence[WeightedPoint],
    k: int,
    rng: RandomSource = None,
) -> Centers:
    """Choose K distinct points at random, favoring higher weights.

    Args:
        points: Weighted point collection.
        k: Number of centers.
        rng: Random source (Generator, seed, or None).

    Returns:
        Centers in draw order. Holds fewer than ``k`` vectors when the
        input has fewer distinct vectors.
    """
    _check_args(points, k)
    rng = np.random.default_rng(rng)

    sample = weighted_sample(points, k, rng)
    if len(sample) < k:
        logger.warning(
            "Only %d distinct points available for %d clusters", len(sample), k
        )
    return Centers([p.vector for p in sample])


def plus_plus_init(
    points: Sequence[WeightedPoint],
    k: int,
    rng: RandomSource = None,
    n_workers: Optional[int] = None,
    executor: Optional[Executor] = None,
) -> Centers:
    """Choose K centers with k-means++.

    Each new center is drawn with probability proportional to
    ``weight * d^2`` to the centers chosen so far. A draw that lands on
    an existing center steps back to the previous point (see
    :func:`avoid_duplicate`), so with fewer than K distinct points the
    result repeats vectors rather than failing.

    Args:
        points: Weighted point collection.
        k: Number of centers.
        rng: Random source (Generator, seed, or None).
        n_workers: Threads used for per-point scoring.
        executor: Existing scoring pool; takes precedence over ``n_workers``.

    Returns:
        Exactly ``k`` centers.
    """
    _check_args(points, k)
    rng = np.random.default_rng(rng)
    vectors, weights = as_arrays(points)

    with scoring_pool(n_workers if executor is None else None) as pool:
        executor = executor if executor is not None else pool

        centers = random_init(points, 1, rng)
        for _ in range(1, k):
            scores = point_scores(vectors, weights, centers, executor=executor)
            cumulative = cumulative_scores(scores)
            index = draw_index(cumulative, rng)
            index = avoid_duplicate(index, vectors, centers)
            centers = centers.extend_with(vectors[index])

    return centers


def parallel_init(
    points: Sequence[WeightedPoint],
    k: int,
    rng: RandomSource = None,
    n_workers: Optional[int] = None,
) -> Centers:
    """Choose K centers with k-means||.

    Algorithm:
        1. C <- one point drawn proportional to weight
        2. psi <- clustering cost of C
        3. for round(log10(psi)) rounds: draw l = round(0.5 * k) points
           proportional to ``l * weight * d^2(x, C)`` from one score
           snapshot, adding each to C
        4. weight every x in C by the number of input points nearest to it
        5. recluster the weighted C into k centers with k-means++

    Args:
        points: Weighted point collection.
        k: Number of centers.
        rng: Random source (Generator, seed, or None).
        n_workers: Threads used for per-point scoring.

    Returns:
        Exactly ``k`` centers.
    """
    _check_args(points, k)
    rng = np.random.default_rng(rng)
    vectors, weights = as_arrays(points)

    candidates = random_init(points, 1, rng)
    oversampling = _round_half_up(OVERSAMPLING_RATIO * k)

    initial_cost = candidates.clustering_cost(points)
    n_rounds = _round_half_up(math.log10(initial_cost)) if initial_cost > 0 else 0
    logger.debug(
        "k-means||: initial cost %.6g, %d rounds of %d draws",
        initial_cost, max(n_rounds, 0), oversampling,
    )

    with scoring_pool(n_workers) as pool:
        # Oversampling phase
        for round_idx in range(n_rounds):
            scores = point_scores(
                vectors, weights, candidates, scale=oversampling, executor=pool
            )
            cumulative = cumulative_scores(scores)
            for _ in range(oversampling):
                index = draw_index(cumulative, rng)
                index = avoid_duplicate(index, vectors, candidates)
                candidates = candidates.extend_with(vectors[index])
            logger.debug(
                "k-means|| round %d: %d candidates", round_idx + 1, len(candidates)
            )

        # Weight candidates by the number of input points nearest to each
        _, nearest = candidates.nearest(vectors)
        counts = np.bincount(nearest, minlength=len(candidates)).astype(np.float64)
        reduced = [WeightedPoint(c, w) for c, w in zip(candidates, counts)]

        if len(candidates) < k:
            logger.warning(
                "k-means|| produced %d candidates for %d clusters", len(candidates), k
            )

        # Recluster-reduce phase
        return plus_plus_init(reduced, k, rng, executor=pool)


class InitStrategy(str, Enum):
    """Available center initialization strategies."""

    RANDOM = "random"
    PLUS_PLUS = "plus_plus"
    PARALLEL = "parallel"

    def apply(
        self,
        points: Sequence[WeightedPoint],
        k: int,
        rng: RandomSource = None,
        n_workers: Optional[int] = None,
    ) -> Centers:
        """Create initial centers with this strategy.

        Args:
            points: Candidate weighted points.
            k: Number of clusters (the "k" in k-means).
            rng: Random source (Generator, seed, or None).
            n_workers: Threads used for per-point scoring. Ignored by RANDOM.

        Returns:
            New Centers instance.
        """
        if self is InitStrategy.RANDOM:
            return random_init(points, k, rng)
        return _SCORED_STRATEGIES[self](points, k, rng, n_workers=n_workers)


_SCORED_STRATEGIES: Dict[InitStrategy, Callable[..., Centers]] = {
    InitStrategy.PLUS_PLUS: plus_plus_init,
    InitStrategy.PARALLEL: parallel_init,
}

_ALIASES = {
    "random": InitStrategy.RANDOM,
    "plus_plus": InitStrategy.PLUS_PLUS,
    "plusplus": InitStrategy.PLUS_PLUS,
    "k-means++": InitStrategy.PLUS_PLUS,
    "kmeans++": InitStrategy.PLUS_PLUS,
    "parallel": InitStrategy.PARALLEL,
    "k-means||": InitStrategy.PARALLEL,
    "kmeans||": InitStrategy.PARALLEL,
}


def resolve_strategy(requested: Union[str, InitStrategy]) -> InitStrategy:
    """Resolve a strategy name to an InitStrategy.

    Args:
        requested: InitStrategy or a case-insensitive name such as
            "random", "plus_plus", "k-means++", "parallel", "k-means||".

    Returns:
        Resolved InitStrategy.

    Raises:
        ValueError: If the name is unknown.
    """
    if isinstance(requested, InitStrategy):
        return requested

    key = requested.lower().strip()
    if key not in _ALIASES:
        raise ValueError(
            f"Unknown init strategy: {requested!r}. Use random/plus_plus/parallel."
        )
    return _ALIASES[key]


def initialize_centers(
    points: Sequence[WeightedPoint],
    k: int,
    strategy: Union[str, InitStrategy] = InitStrategy.PLUS_PLUS,
    seed: Optional[int] = None,
    n_workers: Optional[int] = None,
) -> Centers:
    """Convenience function for center initialization.

    Args:
        points: Weighted point collection.
        k: Number of clusters.
        strategy: Strategy or strategy name.
        seed: Random seed.
        n_workers: Threads used for per-point scoring.

    Returns:
        Initial centers.
    """
    rng = np.random.default_rng(seed)
    return resolve_strategy(strategy).apply(points, k, rng, n_workers=n_workers)
