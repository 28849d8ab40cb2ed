"""
K-means++ initialization strategy.

Selects initial cluster centers using the K-means++ algorithm, which chooses
centers that are far apart to improve convergence speed and quality.
"""

from typing import Optional
import torch
from torch import Tensor

from ..base.interfaces import InitializationStrategy, DistanceFunction
from ..distances.callable import as_distance
from ..utils.validation import check_n_clusters, check_random_state


class KMeansPlusPlusInit(InitializationStrategy):
    """K-means++ initialization for better starting positions.

    Algorithm:
    1. Choose first center uniformly at random
    2. Remove it from a private pool by moving the last pooled row into its slot
    3. For each pooled point, compute the distance to the nearest chosen center
    4. Draw u uniformly in (0, cumsum[-1]] and take the first pooled point
       whose cumulative distance reaches u, so each point is picked with
       probability proportional to its distance
    5. Repeat 2-4 until n_clusters centers are chosen
    """

    def __init__(self, distance: Optional[DistanceFunction] = None):
        """
        Args:
            distance: Distance function; squared Euclidean when None
        """
        self.distance = as_distance(distance)

    def initialize(self, points: Tensor, n_clusters: int,
                   generator: Optional[torch.Generator] = None) -> Tensor:
        """Initialize cluster centers using K-means++.

        Args:
            points: (n, d) data points, left untouched
            n_clusters: Number of clusters
            generator: Random source; a fresh non-deterministically seeded
                generator is used when None

        Returns:
            (n_clusters, d) tensor of centers, each a row of ``points``
        """
        n_points, dimension = points.shape
        check_n_clusters(n_clusters, n_points)
        generator = check_random_state(generator)

        pool = points.clone()
        n_active = n_points
        centers = torch.empty(n_clusters, dimension, dtype=points.dtype, device=points.device)

        # Choose first center uniformly at random
        chosen = int(torch.randint(n_points, (1,), generator=generator).item())

        for c in range(n_clusters):
            centers[c] = pool[chosen]

            # Compact the pool: last active row takes the chosen slot
            pool[chosen] = pool[n_active - 1]
            n_active -= 1

            if c == n_clusters - 1:
                break

            remaining = pool[:n_active]
            distances = self.distance.pairwise(centers[:c + 1], remaining).min(dim=0)[0]

            cumulative = torch.cumsum(distances, dim=0)
            total = cumulative[-1].item()
            # 1 - rand lies in (0, 1], so a zero-distance prefix is never drawn
            u = total * (1.0 - torch.rand(1, generator=generator, dtype=torch.float64).item())

            threshold = torch.tensor([u], dtype=cumulative.dtype, device=cumulative.device)
            chosen = int(torch.searchsorted(cumulative, threshold).item())
            chosen = min(chosen, n_active - 1)

        return centers
