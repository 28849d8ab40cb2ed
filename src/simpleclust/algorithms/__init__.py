"""Clustering algorithm implementations."""

from .kmeans import KMeans
from .fuzzy_cmeans import FuzzyCMeans
from .search import ApproximateClusterSearch, ExactClusterSearch, offset_singleton_centroids
from .builder import (
    kmeans_generator,
    fcm_generator,
    cluster_generator_approximate,
    cluster_generator_exact,
    calculate_fuzzy_weights,
    calculate_boolean_weights
)

__all__ = [
    'KMeans',
    'FuzzyCMeans',
    'ApproximateClusterSearch',
    'ExactClusterSearch',
    'offset_singleton_centroids',
    'kmeans_generator',
    'fcm_generator',
    'cluster_generator_approximate',
    'cluster_generator_exact',
    'calculate_fuzzy_weights',
    'calculate_boolean_weights'
]
