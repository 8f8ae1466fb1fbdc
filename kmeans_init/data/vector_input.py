"""Load weighted test vectors from delimited text files.

Numeric values are read in file order and grouped into d-dimensional
points of weight 1. Used to build large random fixtures for seeding
tests and experiments.
"""

import re
import numpy as np
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..clustering.weighted import WeightedPoint

_DELIMITER = re.compile(r"\s+|,")


def parse_coordinates(lines: Iterable[str]) -> List[float]:
    """Collect numeric values separated by whitespace or commas.

    Parsing of a line stops at its first non-numeric token.

    Args:
        lines: Text lines.

    Returns:
        Values in reading order.
    """
    coords: List[float] = []
    for line in lines:
        for token in _DELIMITER.split(line.strip()):
            if not token:
                continue
            try:
                coords.append(float(token))
            except ValueError:
                break
    return coords


def group_vectors(
    coords: List[float],
    dimensions: int,
    rng: Optional[np.random.Generator] = None,
) -> List[WeightedPoint]:
    """Group scalar values into d-dimensional points of weight 1.

    Values left over at the end that do not fill a whole vector are
    kept, and the missing coordinates are filled with values drawn
    uniformly at random from the complete vectors (or from all values
    when there is no complete vector).

    Args:
        coords: Scalar values.
        dimensions: Vector dimension d.
        rng: Random source for padding.

    Returns:
        List of WeightedPoint.

    Raises:
        ValueError: If dimensions is not positive.
    """
    if dimensions <= 0:
        raise ValueError(f"Dimension must be a positive integer, got {dimensions}")

    rng = np.random.default_rng(rng)
    values = np.asarray(coords, dtype=np.float64)
    n_vectors, leftover = divmod(len(values), dimensions)

    full = values[:n_vectors * dimensions].reshape(n_vectors, dimensions)
    points = [WeightedPoint(v, 1.0) for v in full]

    if leftover:
        pool = values[:n_vectors * dimensions] if n_vectors else values
        padding = pool[rng.integers(len(pool), size=dimensions - leftover)]
        vec = np.concatenate([values[n_vectors * dimensions:], padding])
        points.append(WeightedPoint(vec, 1.0))

    return points


def load_weighted_vectors(
    path: Union[str, Path],
    dimensions: int,
    seed: Optional[int] = None,
) -> List[WeightedPoint]:
    """Read a numeric text file into weighted vectors.

    Args:
        path: File with values separated by whitespace or commas.
        dimensions: Vector dimension d.
        seed: Random seed for padding the last vector.

    Returns:
        List of WeightedPoint with weight 1.

    Raises:
        FileNotFoundError: If the file doesn't exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Vector file not found at {path}")

    with path.open("r", encoding="utf-8") as f:
        coords = parse_coordinates(f)

    return group_vectors(coords, dimensions, np.random.default_rng(seed))
