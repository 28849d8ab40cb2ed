"""
Fuzzy weight calculator.

Computes inverse-distance affinities between every centroid and every
entity. The result is deliberately left unnormalized: fuzzy c-means
normalizes it per centroid row, other callers may prefer per-entity columns.
"""

from typing import Optional
import torch
from torch import Tensor

from ..base.interfaces import WeightCalculator, DistanceFunction
from ..base.errors import CoincidentPointError, DegenerateClusteringError
from ..config import COINCIDENCE_THRESHOLD
from ..distances.callable import as_distance
from ..utils.validation import check_matching_features


class FuzzyWeightCalculator(WeightCalculator):
    """Fuzzy weights w_ij = 1 / distance(centroid_i, entity_j).

    A distance at or below ``threshold`` means an entity sits on a centroid
    and the weight would be unbounded; this raises CoincidentPointError.
    """

    def __init__(self, distance: Optional[DistanceFunction] = None,
                 threshold: float = COINCIDENCE_THRESHOLD):
        """
        Args:
            distance: Distance function; squared Euclidean when None
            threshold: Smallest admissible entity-centroid distance
        """
        super().__init__()
        self.distance = as_distance(distance)
        self.threshold = threshold

    @property
    def is_soft(self) -> bool:
        """Fuzzy weights are soft."""
        return True

    def compute_weights(self, entities: Tensor, centroids: Tensor) -> Tensor:
        """Compute unnormalized inverse-distance weights.

        Args:
            entities: (n, d) data points
            centroids: (k, d) centroids

        Returns:
            (k, n) tensor of strictly positive weights

        Raises:
            CoincidentPointError: If some centroid and entity coincide
            DegenerateClusteringError: If a distance is NaN
        """
        check_matching_features(entities, centroids)
        distances = self.distance.pairwise(centroids, entities)

        if bool(torch.isnan(distances).any()):
            raise DegenerateClusteringError(
                "Fuzzy weights requested for a centroid set containing NaN rows")

        too_close = distances <= self.threshold
        if bool(too_close.any()):
            i, j = torch.nonzero(too_close)[0].tolist()
            raise CoincidentPointError(
                f"Centroid {i} and entity {j} coincide (distance "
                f"{distances[i, j].item():.3g} <= {self.threshold:.3g}); "
                f"this leads to infinite weights",
                centroid_index=i, entity_index=j)

        return 1.0 / distances
