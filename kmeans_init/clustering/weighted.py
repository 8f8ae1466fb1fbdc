"""Weighted point type and array conversion.

Upstream feature extraction hands us user/item statistics as vectors with
a non-negative importance weight. Everything downstream works on the
stacked ``(vectors, weights)`` arrays returned by :func:`as_arrays`.
"""

import numpy as np
from typing import List, NamedTuple, Optional, Sequence, Tuple


class WeightedPoint(NamedTuple):
    """A vector with a non-negative sampling weight.

    Attributes:
        vector: Point coordinates (d,).
        weight: Importance weight, >= 0.
    """
    vector: np.ndarray
    weight: float


def weighted_points(
    vectors: np.ndarray,
    weights: Optional[np.ndarray] = None,
) -> List[WeightedPoint]:
    """Build weighted points from a vector matrix.

    Args:
        vectors: Point coordinates (n x d).
        weights: Per-point weights (n,). Defaults to all ones.

    Returns:
        List of WeightedPoint.
    """
    vectors = np.atleast_2d(np.asarray(vectors, dtype=np.float64))
    if weights is None:
        weights = np.ones(len(vectors))
    weights = np.asarray(weights, dtype=np.float64)
    if len(weights) != len(vectors):
        raise ValueError(
            f"Got {len(weights)} weights for {len(vectors)} vectors"
        )
    return [WeightedPoint(v, float(w)) for v, w in zip(vectors, weights)]


def as_arrays(points: Sequence[WeightedPoint]) -> Tuple[np.ndarray, np.ndarray]:
    """Stack weighted points into a vector matrix and a weight vector.

    Args:
        points: Weighted point collection.

    Returns:
        Tuple of (vectors (n x d), weights (n,)).

    Raises:
        ValueError: If the collection is empty, vectors differ in
            dimension, or a weight is negative or not finite.
    """
    if len(points) == 0:
        raise ValueError("Need at least one weighted point")

    dims = {np.size(p.vector) for p in points}
    if len(dims) > 1:
        raise ValueError(f"Points have mixed dimensions: {sorted(dims)}")

    vectors = np.array(
        [np.ravel(np.asarray(p.vector, dtype=np.float64)) for p in points]
    )
    weights = np.array([p.weight for p in points], dtype=np.float64)

    if not np.all(np.isfinite(weights)) or np.any(weights < 0):
        raise ValueError("Weights must be finite and non-negative")

    return vectors, weights
