"""Utility functions for simpleclust algorithms."""

from .convergence import (
    ChangeInAssignments,
    WeightChange
)

from .metrics import (
    # Quality indices
    cluster_scatter,
    cluster_separation,
    davies_bouldin_index,
    silhouette_index,
    inertia,
    DaviesBouldinIndex,
    SilhouettePlaceholderIndex
)

from .validation import (
    validate_data,
    check_matching_features,
    check_weights_shape,
    check_n_clusters,
    check_random_state
)

__all__ = [
    # Convergence criteria
    'ChangeInAssignments',
    'WeightChange',

    # Metrics
    'cluster_scatter',
    'cluster_separation',
    'davies_bouldin_index',
    'silhouette_index',
    'inertia',
    'DaviesBouldinIndex',
    'SilhouettePlaceholderIndex',

    # Validation
    'validate_data',
    'check_matching_features',
    'check_weights_shape',
    'check_n_clusters',
    'check_random_state'
]
