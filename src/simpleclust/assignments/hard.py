"""
Hard weight calculator.

Assigns each entity to its nearest centroid under the distance function.
"""

from typing import Optional
import torch
from torch import Tensor

from ..base.interfaces import WeightCalculator, DistanceFunction
from ..distances.callable import as_distance
from ..utils.validation import check_matching_features


class HardWeightCalculator(WeightCalculator):
    """Hard (boolean) weights marking the nearest centroid of every entity.

    Each column of the output has exactly one True. When several centroids
    are equally close, the lowest centroid index wins. An entity sitting
    exactly on a centroid is a valid input here.
    """

    def __init__(self, distance: Optional[DistanceFunction] = None):
        """
        Args:
            distance: Distance function; squared Euclidean when None
        """
        super().__init__()
        self.distance = as_distance(distance)

    @property
    def is_soft(self) -> bool:
        """Hard weights are not soft."""
        return False

    def compute_distances(self, entities: Tensor, centroids: Tensor) -> Tensor:
        """(k, n) distances with NaN replaced by +inf.

        A centroid that went NaN (its cluster emptied) is then never the
        nearest one, so the one-True-per-column invariant survives it.
        """
        check_matching_features(entities, centroids)
        distances = self.distance.pairwise(centroids, entities)
        return torch.nan_to_num(distances, nan=float('inf'))

    def compute_weights(self, entities: Tensor, centroids: Tensor) -> Tensor:
        """Assign each entity to its nearest centroid.

        Args:
            entities: (n, d) data points
            centroids: (k, d) centroids

        Returns:
            (k, n) bool tensor, one True per column
        """
        distances = self.compute_distances(entities, centroids)
        n_points = entities.shape[0]

        # argmin returns the first minimal index on ties
        nearest = torch.argmin(distances, dim=0)

        weights = torch.zeros(centroids.shape[0], n_points, dtype=torch.bool,
                              device=entities.device)
        weights[nearest, torch.arange(n_points, device=entities.device)] = True
        return weights
