"""
Fuzzy C-Means clustering algorithm.

Soft clustering where every entity carries an inverse-distance affinity to
every centroid. The fuzziness exponent is fixed at m = 2.
"""

from typing import Optional, Union, Callable
import torch
from torch import Tensor

from ..base.clustering_base import BaseClusteringAlgorithm
from ..base.interfaces import DistanceFunction
from ..base.data_structures import FuzzyResult
from ..assignments.hard import HardWeightCalculator
from ..assignments.fuzzy import FuzzyWeightCalculator
from ..utils.convergence import WeightChange
from ..utils.validation import validate_data
from ..config import FCM_MAX_ITERATIONS, FCM_THRESHOLD, COINCIDENCE_THRESHOLD


def fuzzy_centroids(entities: Tensor, weights: Tensor) -> Tensor:
    """Weighted means c_i = Σ_j w_ij² x_j / Σ_j w_ij².

    Args:
        entities: (n, d) data points
        weights: (k, n) fuzzy weights

    Returns:
        (k, d) centroids
    """
    squared = weights ** 2
    return (squared @ entities) / squared.sum(dim=1, keepdim=True)


def normalize_rows(weights: Tensor) -> Tensor:
    """Scale each centroid row so it sums to 1 across entities."""
    return weights / weights.sum(dim=1, keepdim=True)


class FuzzyCMeans(BaseClusteringAlgorithm):
    """Fuzzy C-Means (FCM) clustering algorithm.

    Starts from random weights, then alternates weighted-mean centroids with
    inverse-distance weights until successive weight matrices agree.

    With the default squared Euclidean distance the update pulls each
    centroid onto a single entity, so on most data the run ends in
    ``CoincidentPointError`` within a few iterations. Pass a distance that
    grows more slowly, such as ``sqrt(||a - b||)``, to get a stable fixed
    point.

    Parameters
    ----------
    n_clusters : int
        Number of clusters
    distance : DistanceFunction or callable, optional
        Dissimilarity between two vectors; squared Euclidean by default
    max_iter : int, default=20
        Maximum number of iterations
    tol : float, default=1e-19
        Squared change of the weight matrix at which iteration stops
    threshold : float, default=1e-19
        Entity-centroid distance at or below which the weights are undefined
    verbose : int, default=0
        Verbosity level
    random_state : int or torch.Generator, optional
        Random source for the initial weights

    Attributes
    ----------
    cluster_centers_ : Tensor of shape (n_clusters, n_features)
        Final cluster centers
    weights_ : Tensor of shape (n_clusters, n_samples)
        Row-normalized fuzzy weights
    labels_ : Tensor of shape (n_samples,)
        Index of the nearest final centroid
    n_iter_ : int
        Number of iterations run
    converged_ : bool
        Whether the weight change reached ``tol`` within ``max_iter``
    delta_ : float
        Last squared weight change
    history_ : list of float
        Squared weight change per iteration

    Raises
    ------
    CoincidentPointError
        If a centroid lands on an entity during the iteration

    Examples
    --------
    >>> import torch
    >>> from simpleclust.algorithms import FuzzyCMeans
    >>>
    >>> X = torch.randn(100, 2, dtype=torch.float64)
    >>> fcm = FuzzyCMeans(n_clusters=3, random_state=0)
    >>> fcm.fit(X)
    >>>
    >>> # Affinities of each entity to each cluster
    >>> weights = fcm.weights_
    >>>
    >>> # Hard clustering
    >>> labels = fcm.predict(X)
    """

    def __init__(self,
                 n_clusters: int,
                 distance: Optional[Union[DistanceFunction, Callable]] = None,
                 max_iter: int = FCM_MAX_ITERATIONS,
                 tol: float = FCM_THRESHOLD,
                 threshold: float = COINCIDENCE_THRESHOLD,
                 verbose: int = 0,
                 random_state: Optional[Union[int, torch.Generator]] = None):
        """Initialize Fuzzy C-Means."""
        super().__init__(
            n_clusters=n_clusters,
            distance=distance,
            max_iter=max_iter,
            verbose=verbose,
            random_state=random_state
        )
        self.tol = tol
        self.threshold = threshold
        self.delta_ = None
        self._labels: Optional[Tensor] = None

    def _fit(self, X: Tensor, generator: torch.Generator) -> None:
        calculator = FuzzyWeightCalculator(self.distance, self.threshold)
        criterion = WeightChange(tol=self.tol)

        weights = torch.rand(self.n_clusters, X.shape[0], generator=generator,
                             dtype=X.dtype, device=X.device)
        criterion.check({'iteration': 0, 'weights': weights})
        centroids = fuzzy_centroids(X, weights)

        for iteration in range(self.max_iter):
            weights = normalize_rows(calculator.compute_weights(X, centroids))
            self.n_iter_ = iteration + 1

            converged = criterion.check({'iteration': iteration + 1, 'weights': weights})
            self.history_.append(criterion.last_delta)
            self._log(2, f"Iteration {iteration:3d}: weight change = {criterion.last_delta:.3e}")

            if converged:
                self.converged_ = True
                break
            centroids = fuzzy_centroids(X, weights)

        if self.verbose:
            state = "Converged" if self.converged_ else "Stopped without converging"
            print(f"{state} at iteration {self.n_iter_}, change {criterion.last_delta:.3e}")

        self.cluster_centers_ = centroids
        self.weights_ = weights
        self.delta_ = criterion.last_delta
        self._labels = self._nearest(X)

    def predict_proba(self, X: Tensor) -> Tensor:
        """Row-normalized fuzzy weights of new data.

        Each cluster row is scaled to sum to 1 over the entities passed in,
        so a column depends on the rest of the batch. Use ``predict`` for
        per-entity labels.

        Parameters
        ----------
        X : Tensor of shape (n_samples, n_features)
            New data

        Returns
        -------
        weights : Tensor of shape (n_clusters, n_samples)
        """
        self._check_fitted()
        X = validate_data(X, dtype=self.cluster_centers_.dtype)
        calculator = FuzzyWeightCalculator(self.distance, self.threshold)
        return normalize_rows(calculator.compute_weights(X, self.cluster_centers_))

    def predict(self, X: Tensor) -> Tensor:
        """Index of the nearest centroid for each entity of X.

        This is the largest unnormalized weight 1/d, which does not depend
        on the other entities of the batch.
        """
        self._check_fitted()
        X = validate_data(X, dtype=self.cluster_centers_.dtype)
        return self._nearest(X)

    @property
    def labels_(self) -> Tensor:
        """(n,) index of the nearest final centroid for each training entity."""
        self._check_fitted()
        return self._labels

    def _nearest(self, X: Tensor) -> Tensor:
        distances = HardWeightCalculator(self.distance).compute_distances(X, self.cluster_centers_)
        return torch.argmin(distances, dim=0)

    def to_result(self) -> FuzzyResult:
        """Package the fitted state as a FuzzyResult."""
        self._check_fitted()
        return FuzzyResult(
            centroids=self.cluster_centers_,
            weights=self.weights_,
            n_iter=self.n_iter_,
            converged=self.converged_,
            delta=self.delta_,
            history=list(self.history_)
        )
