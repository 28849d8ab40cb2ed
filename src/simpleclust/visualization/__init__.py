"""Visualization utilities for clustering results."""

from .plot_clusters import (
    plot_clusters_2d,
    plot_fuzzy_clusters,
    plot_cluster_boundaries,
    plot_search_scores
)

__all__ = [
    'plot_clusters_2d',
    'plot_fuzzy_clusters',
    'plot_cluster_boundaries',
    'plot_search_scores'
]
