"""Distance functions for clustering algorithms."""

from .euclidean import SquaredEuclideanDistance
from .callable import CallableDistance, as_distance

__all__ = [
    'SquaredEuclideanDistance',
    'CallableDistance',
    'as_distance'
]
