"""
simpleclust: centroid clustering with automatic choice of the cluster count.

This package implements:
- K-means (Lloyd's algorithm with k-means++ seeding)
- Fuzzy C-means with inverse-distance weights
- The Davies-Bouldin index
- A search over the number of clusters that scores repeated k-means runs
  and returns fuzzy weights for the winner

Example usage:
    >>> import torch
    >>> from simpleclust import ApproximateClusterSearch
    >>>
    >>> # Two well separated blobs
    >>> X = torch.cat([torch.randn(50, 2), torch.randn(50, 2) + 10]).double()
    >>>
    >>> search = ApproximateClusterSearch(max_clusters=5, random_state=0)
    >>> search.fit(X)
    >>>
    >>> search.n_clusters_, search.score_
"""

__version__ = '0.1.0'

from .base import (
    WeightMatrix,
    KMeansResult,
    FuzzyResult,
    CandidateScore,
    SearchResult,
    ContractViolation,
    DegenerateClusteringError,
    CoincidentPointError,
    ConvergenceWarning,
    ExperimentalWarning
)
from .distances import SquaredEuclideanDistance, CallableDistance

# Import main algorithms
from .algorithms.kmeans import KMeans
from .algorithms.fuzzy_cmeans import FuzzyCMeans
from .algorithms.search import (
    ApproximateClusterSearch,
    ExactClusterSearch,
    offset_singleton_centroids
)
from .algorithms.builder import (
    kmeans_generator,
    fcm_generator,
    cluster_generator_approximate,
    cluster_generator_exact,
    calculate_fuzzy_weights,
    calculate_boolean_weights
)
from .utils.metrics import davies_bouldin_index, silhouette_index

# Import visualization
from .visualization import (
    plot_clusters_2d,
    plot_fuzzy_clusters,
    plot_cluster_boundaries,
    plot_search_scores
)

__all__ = [
    # Algorithms
    'KMeans',
    'FuzzyCMeans',
    'ApproximateClusterSearch',
    'ExactClusterSearch',
    'offset_singleton_centroids',

    # Functional entry points
    'kmeans_generator',
    'fcm_generator',
    'cluster_generator_approximate',
    'cluster_generator_exact',
    'calculate_fuzzy_weights',
    'calculate_boolean_weights',

    # Quality indices
    'davies_bouldin_index',
    'silhouette_index',

    # Distances
    'SquaredEuclideanDistance',
    'CallableDistance',

    # Core data structures
    'WeightMatrix',
    'KMeansResult',
    'FuzzyResult',
    'CandidateScore',
    'SearchResult',

    # Errors and warnings
    'ContractViolation',
    'DegenerateClusteringError',
    'CoincidentPointError',
    'ConvergenceWarning',
    'ExperimentalWarning',

    # Visualization
    'plot_clusters_2d',
    'plot_fuzzy_clusters',
    'plot_cluster_boundaries',
    'plot_search_scores',

    # Version
    '__version__'
]
