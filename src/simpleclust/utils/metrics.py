"""
Clustering quality metrics.

Provides the Davies-Bouldin index used to pick the number of clusters, the
k-means objective, and a silhouette placeholder kept for the experimental
exact search.
"""

from typing import Optional
import math
import warnings
import torch
from torch import Tensor

from ..base.interfaces import DistanceFunction, QualityIndex
from ..base.errors import ExperimentalWarning
from ..distances.callable import as_distance
from .validation import check_matching_features, check_weights_shape


def cluster_scatter(entities: Tensor, centroids: Tensor, weights: Tensor,
                    distance: Optional[DistanceFunction] = None) -> Tensor:
    """Scatter of every cluster around its centroid.

    S_i = sqrt(mean over entities j of cluster i of distance(c_i, x_j))

    An empty cluster yields NaN (0/0), left for the caller to detect.

    Args:
        entities: (n, d) data points
        centroids: (k, d) centroids
        weights: (k, n) hard weights

    Returns:
        (k,) scatter vector
    """
    distance = as_distance(distance)
    check_matching_features(entities, centroids)
    check_weights_shape(weights, centroids.shape[0], entities.shape[0])

    mask = weights.bool()
    distances = distance.pairwise(centroids, entities)
    totals = torch.where(mask, distances, torch.zeros_like(distances)).sum(dim=1)
    counts = mask.sum(dim=1).to(distances.dtype)
    return torch.sqrt(totals / counts)


def cluster_separation(centroids: Tensor,
                       distance: Optional[DistanceFunction] = None) -> Tensor:
    """Separation matrix M_ij = sqrt(distance(c_i, c_j)).

    Symmetric for symmetric distances, with a zero diagonal.
    """
    distance = as_distance(distance)
    return torch.sqrt(distance.pairwise(centroids, centroids))


def davies_bouldin_index(entities: Tensor, centroids: Tensor, weights: Tensor,
                         distance: Optional[DistanceFunction] = None) -> float:
    """Compute the Davies-Bouldin index of a hard clustering.

    Lower values indicate tighter, better separated clusters.

    R_i = max over j != i of (S_i + S_j) / M_ij, and the index is the mean
    of R_i. Degenerate inputs are not corrected: an empty cluster gives NaN
    and coincident centroids give inf or NaN.

    Args:
        entities: (n, d) data points
        centroids: (k, d) centroids
        weights: (k, n) hard weights
        distance: Distance function; squared Euclidean when None

    Returns:
        Davies-Bouldin index, NaN for fewer than two clusters
    """
    n_clusters = centroids.shape[0]
    if n_clusters < 2:
        return float('nan')

    scatter = cluster_scatter(entities, centroids, weights, distance)
    separation = cluster_separation(centroids, distance)

    ratios = (scatter.unsqueeze(1) + scatter.unsqueeze(0)) / separation
    off_diagonal = ~torch.eye(n_clusters, dtype=torch.bool, device=ratios.device)
    ratios = torch.where(off_diagonal, ratios, torch.full_like(ratios, -math.inf))

    # max propagates NaN, so an empty cluster poisons the index
    worst = ratios.max(dim=1)[0]
    return worst.mean().item()


def silhouette_index(entities: Tensor, centroids: Tensor, weights: Tensor,
                     distance: Optional[DistanceFunction] = None) -> float:
    """Placeholder for a silhouette-style fit measure.

    No algorithm is defined for it yet; it always returns 1.0.
    """
    warnings.warn("silhouette_index is a placeholder returning a constant; "
                  "scores based on it carry no information", ExperimentalWarning,
                  stacklevel=2)
    return 1.0


def inertia(entities: Tensor, centroids: Tensor, weights: Tensor,
            distance: Optional[DistanceFunction] = None) -> float:
    """Sum of distances from entities to their assigned centroids.

    Args:
        entities: (n, d) data points
        centroids: (k, d) centroids
        weights: (k, n) hard weights

    Returns:
        Total within-cluster distance (the k-means objective)
    """
    distance = as_distance(distance)
    check_matching_features(entities, centroids)
    check_weights_shape(weights, centroids.shape[0], entities.shape[0])

    mask = weights.bool()
    distances = distance.pairwise(centroids, entities)
    return torch.where(mask, distances, torch.zeros_like(distances)).sum().item()


class DaviesBouldinIndex(QualityIndex):
    """Davies-Bouldin index over hard weights; lower is better."""

    def __init__(self, distance: Optional[DistanceFunction] = None):
        self.distance = as_distance(distance)

    def score(self, entities: Tensor, centroids: Tensor, weights: Tensor) -> float:
        return davies_bouldin_index(entities, centroids, weights, self.distance)

    @property
    def higher_is_better(self) -> bool:
        return False


class SilhouettePlaceholderIndex(QualityIndex):
    """Silhouette-style index; currently a constant placeholder."""

    def __init__(self, distance: Optional[DistanceFunction] = None):
        self.distance = as_distance(distance)

    def score(self, entities: Tensor, centroids: Tensor, weights: Tensor) -> float:
        return silhouette_index(entities, centroids, weights, self.distance)

    @property
    def higher_is_better(self) -> bool:
        return True
