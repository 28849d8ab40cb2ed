"""
Squared Euclidean distance.

The default dissimilarity for every engine in the package.
"""

import torch
from torch import Tensor

from ..base.interfaces import DistanceFunction


class SquaredEuclideanDistance(DistanceFunction):
    """Squared Euclidean distance metric.

    Computes Σ(aᵢ - bᵢ)².
    """

    def distance(self, a: Tensor, b: Tensor) -> Tensor:
        """Squared Euclidean distance between two (d,) vectors."""
        diff = a - b
        return torch.sum(diff * diff)

    def pairwise(self, X: Tensor, Y: Tensor) -> Tensor:
        """Squared distances between all rows of X and Y.

        Differences are formed explicitly rather than through
        ||x||² + ||y||² - 2<x,y>, so identical rows give exactly zero.

        Args:
            X: (n, d) tensor of points
            Y: (m, d) tensor of points

        Returns:
            (n, m) tensor of squared distances
        """
        diff = X.unsqueeze(1) - Y.unsqueeze(0)
        return torch.sum(diff * diff, dim=2)

    def __repr__(self) -> str:
        return "SquaredEuclideanDistance()"
