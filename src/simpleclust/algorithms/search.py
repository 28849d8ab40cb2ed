"""
Search over the number of clusters.

The approximate search runs k-means for every candidate count, scores each
run with a quality index (Davies-Bouldin by default) and keeps the best one,
then derives fuzzy weights from the winning centroids. The exact search runs
fuzzy c-means per count instead; its default index is still a placeholder,
so it is marked experimental.
"""

from typing import Optional, Union, Callable, List
import math
import warnings
import torch
from torch import Tensor

from ..base.interfaces import DistanceFunction, QualityIndex
from ..base.data_structures import WeightMatrix, CandidateScore, SearchResult
from ..base.errors import DegenerateClusteringError, ExperimentalWarning
from ..distances.callable import as_distance
from ..assignments.fuzzy import FuzzyWeightCalculator
from ..utils.metrics import DaviesBouldinIndex, SilhouettePlaceholderIndex
from ..utils.validation import validate_data, check_n_clusters, check_random_state
from ..config import (
    ATTEMPTS_PER_CLUSTERS_NUMBER, MAX_ITERATIONS_PER_CLUSTERS_NUMBER, OFFSET_CONSTANT,
    KMEANS_MAX_ITERATIONS, FCM_MAX_ITERATIONS, FCM_THRESHOLD, COINCIDENCE_THRESHOLD
)
from .kmeans import KMeans
from .fuzzy_cmeans import FuzzyCMeans


def offset_singleton_centroids(entities: Tensor, centroids: Tensor, hard_weights: Tensor,
                               offset_constant: float = OFFSET_CONSTANT) -> Tensor:
    """Move the centroid of every one-entity cluster off its entity.

    Such a centroid coincides with its only member, which would make the
    fuzzy weight of that pair infinite. It is shifted along the direction
    from the dataset mean through the centroid:

        c_i += (offset_constant / D) * (c_i - mean(entities))

    The step is scaled by the dimensionality D so the entity stays closest
    to its own centroid.

    Args:
        entities: (n, d) data points
        centroids: (k, d) centroids
        hard_weights: (k, n) hard weights
        offset_constant: Scale of the shift

    Returns:
        (k, d) corrected copy of the centroids
    """
    singletons = WeightMatrix(hard_weights, is_soft=False).singleton_clusters()
    corrected = centroids.clone()
    if not singletons:
        return corrected

    multiplier = offset_constant / entities.shape[1]
    mean_entity = entities.mean(dim=0)
    for i in singletons:
        corrected[i] += multiplier * (corrected[i] - mean_entity)
    return corrected


class _ClusterCountSearch:
    """State and accessors shared by the searches over the cluster count."""

    def __init__(self,
                 max_clusters: int,
                 distance: Optional[Union[DistanceFunction, Callable]] = None,
                 threshold: float = COINCIDENCE_THRESHOLD,
                 quality_index: Optional[QualityIndex] = None,
                 verbose: int = 0,
                 random_state: Optional[Union[int, torch.Generator]] = None):
        self.max_clusters = max_clusters
        self.distance = as_distance(distance)
        self.threshold = threshold
        self.quality_index = quality_index
        self.verbose = verbose
        self.random_state = random_state

        self.fitted_ = False
        self.n_clusters_ = None
        self.cluster_centers_: Optional[Tensor] = None
        self.weights_: Optional[Tensor] = None
        self.hard_weights_: Optional[Tensor] = None
        self.score_ = None
        self.candidates_: List[CandidateScore] = []
        self.result_: Optional[SearchResult] = None
        self._labels: Optional[Tensor] = None

    def _prepare(self, X: Tensor):
        X = validate_data(X)
        check_n_clusters(self.max_clusters, X.shape[0], minimum=2)
        self.candidates_ = []
        return X, check_random_state(self.random_state)

    def _store(self, result: SearchResult, labels: Tensor) -> None:
        self.result_ = result
        self._labels = labels
        self.n_clusters_ = result.n_clusters
        self.cluster_centers_ = result.centroids
        self.weights_ = result.weights
        self.hard_weights_ = result.hard_weights
        self.score_ = result.score
        self.candidates_ = result.candidates
        self.fitted_ = True

    def _check_fitted(self) -> None:
        if not self.fitted_:
            raise RuntimeError("Search must be fitted first")

    def _log(self, level: int, message: str) -> None:
        if self.verbose >= level:
            print(message)

    @property
    def labels_(self) -> Tensor:
        """(n,) index of the nearest winning centroid for each entity."""
        self._check_fitted()
        return self._labels

    def fit_predict(self, X: Tensor, y: Optional[Tensor] = None) -> Tensor:
        """Fit and return cluster labels."""
        self.fit(X)
        return self.labels_


class ApproximateClusterSearch(_ClusterCountSearch):
    """Choose the number of clusters by repeated k-means and a quality index.

    For every k in [2, max_clusters], ``attempts_per_count`` independent
    k-means runs are scored. A run whose score is NaN (an emptied cluster)
    is repeated, up to ``max_retries`` runs in total. The best score over
    all attempts wins, ties going to the earliest. Centroids of one-entity
    clusters are then offset and fuzzy weights computed from them.

    Parameters
    ----------
    max_clusters : int
        Largest cluster count considered, between 2 and n_samples
    distance : DistanceFunction or callable, optional
        Dissimilarity between two vectors; squared Euclidean by default
    attempts_per_count : int, default=3
        Random restarts per cluster count
    max_retries : int, default=5
        Runs allowed per attempt while the score stays NaN
    offset_constant : float, default=0.05
        Scale of the singleton centroid shift
    max_iter : int, default=300
        Lloyd iteration cap for every k-means run
    threshold : float, default=1e-19
        Coincidence threshold of the final fuzzy weights
    quality_index : QualityIndex, optional
        Davies-Bouldin index over the same distance by default
    verbose : int, default=0
        Verbosity level
    random_state : int or torch.Generator, optional
        One generator shared by every k-means run of the search

    Attributes
    ----------
    n_clusters_ : int
        Chosen number of clusters
    cluster_centers_ : Tensor of shape (n_clusters_, n_features)
        Winning centroids after the singleton correction
    hard_weights_ : Tensor of shape (n_clusters_, n_samples), bool
        Hard weights of the winning run
    weights_ : Tensor of shape (n_clusters_, n_samples)
        Unnormalized fuzzy weights from the corrected centroids
    score_ : float
        Quality index of the winning run
    candidates_ : list of CandidateScore
        Score of every attempt, in search order
    result_ : SearchResult
        All of the above in one record

    Raises
    ------
    DegenerateClusteringError
        If no attempt produced a usable score
    """

    def __init__(self,
                 max_clusters: int,
                 distance: Optional[Union[DistanceFunction, Callable]] = None,
                 attempts_per_count: int = ATTEMPTS_PER_CLUSTERS_NUMBER,
                 max_retries: int = MAX_ITERATIONS_PER_CLUSTERS_NUMBER,
                 offset_constant: float = OFFSET_CONSTANT,
                 max_iter: int = KMEANS_MAX_ITERATIONS,
                 threshold: float = COINCIDENCE_THRESHOLD,
                 quality_index: Optional[QualityIndex] = None,
                 verbose: int = 0,
                 random_state: Optional[Union[int, torch.Generator]] = None):
        super().__init__(max_clusters, distance, threshold, quality_index, verbose, random_state)
        if attempts_per_count < 1 or max_retries < 1:
            raise ValueError("attempts_per_count and max_retries must be positive")
        self.attempts_per_count = attempts_per_count
        self.max_retries = max_retries
        self.offset_constant = offset_constant
        self.max_iter = max_iter

    def _run_attempt(self, X: Tensor, n_clusters: int, quality: QualityIndex,
                     generator: torch.Generator):
        """One k-means attempt, repeated while its score is NaN."""
        for run in range(self.max_retries):
            model = KMeans(n_clusters, distance=self.distance, max_iter=self.max_iter,
                           random_state=generator)
            model.fit(X)
            score = quality.score(X, model.cluster_centers_, model.weights_)
            if not math.isnan(score):
                break
            self._log(2, f"  k={n_clusters}: score is NaN, rerunning ({run + 1}/{self.max_retries})")
        return model, score, run

    def fit(self, X: Tensor, y: Optional[Tensor] = None) -> 'ApproximateClusterSearch':
        """Run the search.

        Args:
            X: (n, d) data
            y: Ignored

        Returns:
            Self
        """
        X, generator = self._prepare(X)
        quality = self.quality_index or DaviesBouldinIndex(self.distance)

        best_score = -math.inf if quality.higher_is_better else math.inf
        best_model = None
        candidates = []

        for n_clusters in range(2, self.max_clusters + 1):
            for attempt in range(self.attempts_per_count):
                model, score, retries = self._run_attempt(X, n_clusters, quality, generator)
                candidates.append(CandidateScore(n_clusters, attempt, retries, score))
                self._log(1, f"k={n_clusters} attempt {attempt}: score = {score:.6f}")

                if quality.is_better(score, best_score):
                    best_score = score
                    best_model = model

        if best_model is None:
            raise DegenerateClusteringError(
                f"No usable clustering found for 2..{self.max_clusters} clusters")

        hard_weights = best_model.weights_
        centroids = offset_singleton_centroids(X, best_model.cluster_centers_, hard_weights,
                                               self.offset_constant)
        weights = FuzzyWeightCalculator(self.distance, self.threshold).compute_weights(X, centroids)

        self._log(1, f"Chose {best_model.n_clusters} clusters, score = {best_score:.6f}")

        self._store(SearchResult(
            n_clusters=best_model.n_clusters,
            centroids=centroids,
            weights=weights,
            score=best_score,
            hard_weights=hard_weights,
            candidates=candidates,
            metadata={'search': 'approximate', 'n_iter': best_model.n_iter_,
                      'converged': best_model.converged_}
        ), hard_weights.to(torch.uint8).argmax(dim=0))
        return self


class ExactClusterSearch(_ClusterCountSearch):
    """Choose the number of clusters with one fuzzy c-means run per count.

    Experimental: the default score is the silhouette placeholder, which is
    constant, so the smallest candidate count always wins. Counts whose
    fuzzy run degenerates are skipped.

    Under the default squared Euclidean distance the fuzzy runs collapse a
    centroid onto an entity, so in practice every count is skipped and
    ``fit`` raises ``DegenerateClusteringError``. Supply a slower-growing
    distance such as ``sqrt(||a - b||)`` for usable results.

    The quality index receives the fuzzy weights of each run.
    """

    def __init__(self,
                 max_clusters: int,
                 distance: Optional[Union[DistanceFunction, Callable]] = None,
                 max_iter: int = FCM_MAX_ITERATIONS,
                 tol: float = FCM_THRESHOLD,
                 threshold: float = COINCIDENCE_THRESHOLD,
                 quality_index: Optional[QualityIndex] = None,
                 verbose: int = 0,
                 random_state: Optional[Union[int, torch.Generator]] = None):
        super().__init__(max_clusters, distance, threshold, quality_index, verbose, random_state)
        self.max_iter = max_iter
        self.tol = tol

    def fit(self, X: Tensor, y: Optional[Tensor] = None) -> 'ExactClusterSearch':
        """Run the search.

        Raises:
            DegenerateClusteringError: If every candidate count degenerated
        """
        warnings.warn("ExactClusterSearch scores candidates with a placeholder index; "
                      "the chosen cluster count is not meaningful", ExperimentalWarning,
                      stacklevel=2)
        X, generator = self._prepare(X)
        quality = self.quality_index or SilhouettePlaceholderIndex(self.distance)

        best_score = 0.0 if quality.higher_is_better else math.inf
        best_model = None
        candidates = []

        for n_clusters in range(2, self.max_clusters + 1):
            model = FuzzyCMeans(n_clusters, distance=self.distance, max_iter=self.max_iter,
                                tol=self.tol, threshold=self.threshold, random_state=generator)
            try:
                model.fit(X)
            except DegenerateClusteringError as exc:
                self._log(1, f"k={n_clusters}: skipped ({exc})")
                candidates.append(CandidateScore(n_clusters, 0, 0, float('nan')))
                continue

            score = quality.score(X, model.cluster_centers_, model.weights_)
            candidates.append(CandidateScore(n_clusters, 0, 0, score))
            self._log(1, f"k={n_clusters}: score = {score:.6f}")

            if quality.is_better(score, best_score):
                best_score = score
                best_model = model

        if best_model is None:
            raise DegenerateClusteringError(
                f"No usable fuzzy clustering found for 2..{self.max_clusters} clusters")

        self._store(SearchResult(
            n_clusters=best_model.n_clusters,
            centroids=best_model.cluster_centers_,
            weights=best_model.weights_,
            score=best_score,
            candidates=candidates,
            metadata={'search': 'exact', 'n_iter': best_model.n_iter_,
                      'converged': best_model.converged_}
        ), best_model.labels_)
        return self
