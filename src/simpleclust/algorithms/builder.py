"""
Functional entry points.

Thin wrappers that build the matching estimator, fit it and hand back a
result record, for callers who do not need the estimator object.

Examples
--------
>>> result = cluster_generator_approximate(X, max_clusters=5, random_state=0)
>>> result.n_clusters, result.centroids.shape
"""

from typing import Optional, Union, Callable
import torch
from torch import Tensor

from ..base.interfaces import DistanceFunction, QualityIndex
from ..base.data_structures import KMeansResult, FuzzyResult, SearchResult
from ..assignments.hard import HardWeightCalculator
from ..assignments.fuzzy import FuzzyWeightCalculator
from ..utils.validation import validate_data
from ..config import (
    ATTEMPTS_PER_CLUSTERS_NUMBER, MAX_ITERATIONS_PER_CLUSTERS_NUMBER, OFFSET_CONSTANT,
    KMEANS_MAX_ITERATIONS, FCM_MAX_ITERATIONS, FCM_THRESHOLD, COINCIDENCE_THRESHOLD
)
from .kmeans import KMeans
from .fuzzy_cmeans import FuzzyCMeans
from .search import ApproximateClusterSearch, ExactClusterSearch

Distance = Optional[Union[DistanceFunction, Callable]]
RandomState = Optional[Union[int, torch.Generator]]


def calculate_fuzzy_weights(entities: Tensor, centroids: Tensor, distance: Distance = None,
                            threshold: float = COINCIDENCE_THRESHOLD) -> Tensor:
    """(k, n) unnormalized inverse-distance weights."""
    entities = validate_data(entities, name='entities')
    centroids = validate_data(centroids, dtype=entities.dtype, name='centroids')
    return FuzzyWeightCalculator(distance, threshold).compute_weights(entities, centroids)


def calculate_boolean_weights(entities: Tensor, centroids: Tensor,
                              distance: Distance = None) -> Tensor:
    """(k, n) bool weights marking the nearest centroid of each entity."""
    entities = validate_data(entities, name='entities')
    centroids = validate_data(centroids, dtype=entities.dtype, name='centroids')
    return HardWeightCalculator(distance).compute_weights(entities, centroids)


def kmeans_generator(entities: Tensor, n_clusters: int, distance: Distance = None,
                     max_iter: int = KMEANS_MAX_ITERATIONS, verbose: int = 0,
                     random_state: RandomState = None) -> KMeansResult:
    """Run k-means++ seeded Lloyd iteration."""
    model = KMeans(n_clusters, distance=distance, max_iter=max_iter,
                   verbose=verbose, random_state=random_state)
    return model.fit(entities).to_result()


def fcm_generator(entities: Tensor, n_clusters: int, distance: Distance = None,
                  max_iter: int = FCM_MAX_ITERATIONS, tol: float = FCM_THRESHOLD,
                  threshold: float = COINCIDENCE_THRESHOLD, verbose: int = 0,
                  random_state: RandomState = None) -> FuzzyResult:
    """Run fuzzy c-means from random initial weights."""
    model = FuzzyCMeans(n_clusters, distance=distance, max_iter=max_iter, tol=tol,
                        threshold=threshold, verbose=verbose, random_state=random_state)
    return model.fit(entities).to_result()


def cluster_generator_approximate(entities: Tensor, max_clusters: int,
                                  distance: Distance = None,
                                  attempts_per_count: int = ATTEMPTS_PER_CLUSTERS_NUMBER,
                                  max_retries: int = MAX_ITERATIONS_PER_CLUSTERS_NUMBER,
                                  offset_constant: float = OFFSET_CONSTANT,
                                  max_iter: int = KMEANS_MAX_ITERATIONS,
                                  threshold: float = COINCIDENCE_THRESHOLD,
                                  quality_index: Optional[QualityIndex] = None,
                                  verbose: int = 0,
                                  random_state: RandomState = None) -> SearchResult:
    """Pick the cluster count by k-means and the Davies-Bouldin index.

    See ApproximateClusterSearch for the procedure.
    """
    search = ApproximateClusterSearch(
        max_clusters, distance=distance, attempts_per_count=attempts_per_count,
        max_retries=max_retries, offset_constant=offset_constant, max_iter=max_iter,
        threshold=threshold, quality_index=quality_index, verbose=verbose,
        random_state=random_state
    )
    return search.fit(entities).result_


def cluster_generator_exact(entities: Tensor, max_clusters: int, distance: Distance = None,
                            max_iter: int = FCM_MAX_ITERATIONS, tol: float = FCM_THRESHOLD,
                            threshold: float = COINCIDENCE_THRESHOLD,
                            quality_index: Optional[QualityIndex] = None,
                            verbose: int = 0,
                            random_state: RandomState = None) -> SearchResult:
    """Pick the cluster count by fuzzy c-means. Experimental."""
    search = ExactClusterSearch(
        max_clusters, distance=distance, max_iter=max_iter, tol=tol, threshold=threshold,
        quality_index=quality_index, verbose=verbose, random_state=random_state
    )
    return search.fit(entities).result_
