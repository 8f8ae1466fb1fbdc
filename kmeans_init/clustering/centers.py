"""Immutable collection of cluster centers.

A ``Centers`` instance never changes after construction: ``extend_with``
copies the stored vectors into a new instance. Distance queries are
therefore always computed against a fixed snapshot.
"""

import numpy as np
from typing import Iterator, NamedTuple, Optional, Sequence, Tuple

from .weighted import WeightedPoint, as_arrays

# Rows per distance block; bounds the (rows x k x d) difference buffer.
NEAREST_CHUNK_SIZE = 4096


class DistanceResult(NamedTuple):
    """Nearest-center query result.

    Attributes:
        squared_distance: Squared Euclidean distance to the nearest center.
        closest_center_index: Index of that center.
    """
    squared_distance: float
    closest_center_index: int


class Centers:
    """Ordered, immutable sequence of center vectors."""

    def __init__(self, vectors: Optional[Sequence[np.ndarray]] = None):
        """Initialize centers.

        Args:
            vectors: Initial center vectors, all of one dimension.
                Default is None, which creates an empty instance.
        """
        if vectors is None or len(vectors) == 0:
            data = np.empty((0, 0), dtype=np.float64)
        else:
            data = np.array(
                [np.ravel(np.asarray(v, dtype=np.float64)) for v in vectors]
            )
            if data.ndim != 2:
                raise ValueError("Center vectors must share one dimension")
        data.flags.writeable = False
        self._vectors = data

    @property
    def dimension(self) -> int:
        """Vector dimension (0 when empty)."""
        return self._vectors.shape[1]

    def __len__(self) -> int:
        return len(self._vectors)

    def __getitem__(self, index: int) -> np.ndarray:
        return self._vectors[index]

    def __iter__(self) -> Iterator[np.ndarray]:
        return iter(self._vectors)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Centers):
            return NotImplemented
        return (
            self._vectors.shape == other._vectors.shape
            and np.array_equal(self._vectors, other._vectors)
        )

    def __repr__(self) -> str:
        return f"Centers(size={len(self)}, dimension={self.dimension})"

    def as_array(self) -> np.ndarray:
        """Read-only (k x d) view of the center vectors."""
        return self._vectors

    def _check_point(self, point: np.ndarray) -> np.ndarray:
        point = np.ravel(np.asarray(point, dtype=np.float64))
        if len(self) > 0 and point.shape[0] != self.dimension:
            raise ValueError(
                f"Point has dimension {point.shape[0]}, centers have {self.dimension}"
            )
        return point

    def extend_with(self, point: np.ndarray) -> "Centers":
        """Return new centers with ``point`` appended.

        Args:
            point: Vector to append.

        Returns:
            New Centers; this instance is left unchanged.
        """
        point = self._check_point(point)
        if len(self) == 0:
            return Centers([point])
        return Centers(np.vstack([self._vectors, point]))

    def contains(self, point: np.ndarray) -> bool:
        """Check whether ``point`` equals one of the centers exactly."""
        if len(self) == 0:
            return False
        point = self._check_point(point)
        return bool(np.any(np.all(self._vectors == point, axis=1)))

    def nearest(self, vectors: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """Nearest center for every row of ``vectors``.

        Args:
            vectors: Query points (n x d).

        Returns:
            Tuple of (squared distances (n,), center indices (n,)).
            Ties go to the lowest center index.

        Raises:
            ValueError: If there are no centers.
        """
        if len(self) == 0:
            raise ValueError("Cannot measure distance to an empty set of centers")

        vectors = np.atleast_2d(np.asarray(vectors, dtype=np.float64))
        if vectors.shape[1] != self.dimension:
            raise ValueError(
                f"Points have dimension {vectors.shape[1]}, centers have {self.dimension}"
            )

        # (rows, 1, d) - (1, k, d) -> (rows, k), one block of rows at a time
        sq_dists = np.empty(len(vectors), dtype=np.float64)
        indices = np.empty(len(vectors), dtype=np.intp)
        for start in range(0, len(vectors), NEAREST_CHUNK_SIZE):
            stop = start + NEAREST_CHUNK_SIZE
            sq_dists[start:stop], indices[start:stop] = self._nearest_block(
                vectors[start:stop]
            )
        return sq_dists, indices

    def _nearest_block(self, block: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        diff = block[:, np.newaxis, :] - self._vectors[np.newaxis, :, :]
        sq_dists = np.sum(diff ** 2, axis=2)
        indices = np.argmin(sq_dists, axis=1)
        return sq_dists[np.arange(len(block)), indices], indices

    def distance_to(self, point: np.ndarray) -> DistanceResult:
        """Squared distance from ``point`` to its nearest center.

        Raises:
            ValueError: If there are no centers.
        """
        sq_dists, indices = self.nearest(self._check_point(point)[np.newaxis, :])
        return DistanceResult(float(sq_dists[0]), int(indices[0]))

    def clustering_cost(self, points: Sequence[WeightedPoint]) -> float:
        """Weighted sum of squared distances to the nearest center.

        Args:
            points: Weighted point collection.

        Returns:
            Sum of ``weight * squared distance`` over all points.
        """
        vectors, weights = as_arrays(points)
        sq_dists, _ = self.nearest(vectors)
        return float(np.dot(weights, sq_dists))
