"""Data module for loading weighted test vectors."""

from .vector_input import (
    group_vectors,
    load_weighted_vectors,
    parse_coordinates,
)

__all__ = [
    "group_vectors",
    "load_weighted_vectors",
    "parse_coordinates",
]
