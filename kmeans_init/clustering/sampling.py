"""Sampling primitives shared by the seeding strategies.

Provides:
- Weighted sampling without replacement (first center, RANDOM strategy)
- Cumulative-distribution (inverse CDF) picks over per-point scores
- Backward duplicate-avoidance scan
- Chunked per-point D^2 scoring
"""

from concurrent.futures import Executor, ThreadPoolExecutor
from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence

import numpy as np

from .centers import Centers
from .weighted import WeightedPoint, as_arrays

# Rows per scoring task scattered to the pool.
SCORE_CHUNK_SIZE = 4096


def weighted_sample(
    points: Sequence[WeightedPoint],
    n: int,
    rng: np.random.Generator,
) -> List[WeightedPoint]:
    """Draw ``n`` distinct points without replacement, proportional to weight.

    Entries sharing the same vector form one candidate whose weight is the
    sum of their weights. Each draw picks among the candidates not yet
    drawn with probability proportional to candidate weight. When every
    remaining candidate has zero weight the draw is uniform instead.

    Args:
        points: Weighted point collection.
        n: Number of points to draw.
        rng: Random source.

    Returns:
        Drawn points in draw order; shorter than ``n`` when fewer
        distinct vectors exist.
    """
    if n <= 0:
        raise ValueError(f"Sample size must be positive, got {n}")

    vectors, weights = as_arrays(points)

    _, first_idx, inverse = np.unique(
        vectors, axis=0, return_index=True, return_inverse=True
    )
    inverse = np.ravel(inverse)
    # Keep candidates in input order
    order = np.argsort(first_idx)
    rank = np.empty_like(order)
    rank[order] = np.arange(len(order))
    first_idx = first_idx[order]
    cand_weights = np.bincount(rank[inverse], weights=weights, minlength=len(order))

    drawn = np.zeros(len(first_idx), dtype=bool)
    chosen: List[int] = []

    for _ in range(min(n, len(first_idx))):
        remaining = np.where(drawn, 0.0, cand_weights)
        cumulative = cumulative_scores(remaining)
        if cumulative[-1] > 0:
            idx = draw_index(cumulative, rng)
        else:
            free = np.flatnonzero(~drawn)
            idx = int(free[rng.integers(len(free))])
        drawn[idx] = True
        chosen.append(int(first_idx[idx]))

    return [points[i] for i in chosen]


def cumulative_scores(scores: np.ndarray) -> np.ndarray:
    """Cumulative sum with a leading zero.

    Args:
        scores: Non-negative per-point scores (n,).

    Returns:
        Array (n + 1,) where entry ``i`` is the sum of ``scores[:i]``.
    """
    cumulative = np.zeros(len(scores) + 1, dtype=np.float64)
    np.cumsum(scores, out=cumulative[1:])
    return cumulative


def pick_index(cumulative: np.ndarray, r: float) -> int:
    """Inverse-CDF lookup over a cumulative score array.

    Point ``i`` owns the right-open interval
    ``[cumulative[i], cumulative[i + 1])``, so the result is the largest
    ``i < n`` with ``cumulative[i] <= r``. A draw landing exactly on a
    boundary selects the point whose interval starts there, and
    zero-score points are never selected while the total is positive.

    Args:
        cumulative: Output of :func:`cumulative_scores` (n + 1,).
        r: Target value in ``[0, total)``.

    Returns:
        Selected point index; 0 when the total score is 0.
    """
    n = len(cumulative) - 1
    if n <= 0:
        raise ValueError("Cumulative array must cover at least one point")
    if cumulative[-1] <= 0:
        return 0

    r = min(r, np.nextafter(cumulative[-1], 0.0))
    idx = int(np.searchsorted(cumulative[:n], r, side="right")) - 1
    return min(max(idx, 0), n - 1)


def draw_index(cumulative: np.ndarray, rng: np.random.Generator) -> int:
    """Draw ``r`` uniformly in ``[0, total)`` and pick the matching index."""
    r = cumulative[-1] * rng.random()
    return pick_index(cumulative, r)


def avoid_duplicate(index: int, vectors: np.ndarray, centers: Centers) -> int:
    """Step back from ``index`` until the vector is not already a center.

    Stops at index 0 even if that vector is also a center, so callers
    always receive a valid index.
    """
    while index > 0 and centers.contains(vectors[index]):
        index -= 1
    return index


def point_scores(
    vectors: np.ndarray,
    weights: np.ndarray,
    centers: Centers,
    scale: float = 1.0,
    executor: Optional[Executor] = None,
) -> np.ndarray:
    """Per-point score ``scale * weight * d^2(x, centers)``.

    Rows are scored in independent chunks against the same centers
    snapshot and gathered back in input order, so the result does not
    depend on whether an executor is used.

    Args:
        vectors: Points (n x d).
        weights: Point weights (n,).
        centers: Current centers (non-empty).
        scale: Multiplier applied to every score.
        executor: Pool the chunks are scattered over. None scores inline.

    Returns:
        Scores (n,).
    """
    bounds = range(0, len(vectors), SCORE_CHUNK_SIZE)

    def score_chunk(start: int) -> np.ndarray:
        stop = start + SCORE_CHUNK_SIZE
        sq_dists, _ = centers.nearest(vectors[start:stop])
        return scale * weights[start:stop] * sq_dists

    if executor is not None and len(bounds) > 1:
        chunks = list(executor.map(score_chunk, bounds))
    else:
        chunks = [score_chunk(start) for start in bounds]

    return np.concatenate(chunks)


@contextmanager
def scoring_pool(n_workers: Optional[int]) -> Iterator[Optional[Executor]]:
    """Thread pool shared by every scoring pass of one seeding run.

    Yields None when ``n_workers`` is None or 1, so scoring runs inline.
    """
    if n_workers is None or n_workers <= 1:
        yield None
        return
    with ThreadPoolExecutor(
        max_workers=n_workers, thread_name_prefix="kmeans-init-score"
    ) as pool:
        yield pool
