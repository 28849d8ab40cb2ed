"""
K-means clustering algorithm.

Lloyd's iteration seeded with k-means++, running until the hard weights
reach a fixed point.
"""

from typing import Optional, Union, Callable
import warnings
import torch
from torch import Tensor

from ..base.clustering_base import BaseClusteringAlgorithm
from ..base.interfaces import DistanceFunction
from ..base.data_structures import KMeansResult
from ..base.errors import ContractViolation, ConvergenceWarning
from ..assignments.hard import HardWeightCalculator
from ..initialization.kmeans_plusplus import KMeansPlusPlusInit
from ..utils.convergence import ChangeInAssignments
from ..utils.metrics import inertia
from ..utils.validation import validate_data, check_matching_features
from ..config import KMEANS_MAX_ITERATIONS


class KMeans(BaseClusteringAlgorithm):
    """K-means clustering algorithm.

    Classic K-means that partitions data into K clusters by minimizing
    the within-cluster sum of distances.

    Parameters
    ----------
    n_clusters : int
        Number of clusters
    distance : DistanceFunction or callable, optional
        Dissimilarity between two vectors; squared Euclidean by default
    init : str or array-like, default='k-means++'
        Initialization method:
        - 'k-means++' : K-means++ initialization
        - array of shape (n_clusters, n_features) : Use as initial centers
    max_iter : int, default=300
        Maximum number of Lloyd iterations. Reaching it without a fixed
        point sets ``converged_`` to False and warns.
    verbose : int, default=0
        Verbosity level
    random_state : int or torch.Generator, optional
        Random source for seeding

    Attributes
    ----------
    cluster_centers_ : Tensor of shape (n_clusters, n_features)
        Cluster centroids. A cluster emptied during the iteration has a
        NaN row.
    weights_ : Tensor of shape (n_clusters, n_samples), bool
        Hard weights, one True per column
    labels_ : Tensor of shape (n_samples,)
        Cluster assignments for training data
    inertia_ : float
        Sum of distances to assigned centers
    n_iter_ : int
        Number of centroid updates run
    converged_ : bool
        Whether the hard weights reached a fixed point
    history_ : list of float
        Objective after every assignment step
    """

    def __init__(self,
                 n_clusters: int,
                 distance: Optional[Union[DistanceFunction, Callable]] = None,
                 init: Union[str, Tensor] = 'k-means++',
                 max_iter: int = KMEANS_MAX_ITERATIONS,
                 verbose: int = 0,
                 random_state: Optional[Union[int, torch.Generator]] = None):
        """Initialize K-means algorithm."""
        super().__init__(
            n_clusters=n_clusters,
            distance=distance,
            max_iter=max_iter,
            verbose=verbose,
            random_state=random_state
        )
        self.init = init
        self.inertia_ = None

    def _initial_centers(self, X: Tensor, generator: torch.Generator) -> Tensor:
        if isinstance(self.init, str):
            if self.init != 'k-means++':
                raise ValueError(f"Unknown init method: {self.init}")
            return KMeansPlusPlusInit(self.distance).initialize(X, self.n_clusters, generator)

        centers = validate_data(self.init, dtype=X.dtype, device=X.device, name='init')
        check_matching_features(X, centers)
        if centers.shape[0] != self.n_clusters:
            raise ContractViolation(f"Initial centers has {centers.shape[0]} clusters, "
                                    f"but n_clusters={self.n_clusters}")
        return centers.clone()

    def _fit(self, X: Tensor, generator: torch.Generator) -> None:
        assigner = HardWeightCalculator(self.distance)
        criterion = ChangeInAssignments(max_changed=0)

        self._log(1, f"Initializing {self.n_clusters} clusters...")
        centroids = self._initial_centers(X, generator)
        weights = assigner.compute_weights(X, centroids)
        criterion.check({'iteration': 0, 'weights': weights})
        self.history_.append(inertia(X, centroids, weights, self.distance))

        for iteration in range(self.max_iter):
            # Mean of assigned entities; an empty cluster becomes 0/0 = NaN
            counts = weights.sum(dim=1).to(X.dtype)
            centroids = (weights.to(X.dtype) @ X) / counts.unsqueeze(1)

            weights = assigner.compute_weights(X, centroids)
            objective = inertia(X, centroids, weights, self.distance)
            self.history_.append(objective)
            self.n_iter_ = iteration + 1

            self._log(2, f"Iteration {iteration:3d}: objective = {objective:.6f}")

            if criterion.check({'iteration': iteration + 1, 'weights': weights}):
                self.converged_ = True
                break

        if not self.converged_:
            warnings.warn(f"K-means failed to converge after {self.max_iter} iterations",
                          ConvergenceWarning)
        elif self.verbose:
            print(f"Converged at iteration {self.n_iter_}")

        self.cluster_centers_ = centroids
        self.weights_ = weights
        self.inertia_ = self.history_[-1]

    def predict(self, X: Tensor) -> Tensor:
        """Predict cluster labels for new data.

        Parameters
        ----------
        X : Tensor of shape (n_samples, n_features)
            New data to predict

        Returns
        -------
        labels : Tensor of shape (n_samples,)
            Index of the nearest centroid
        """
        self._check_fitted()
        X = validate_data(X, dtype=self.cluster_centers_.dtype)
        weights = HardWeightCalculator(self.distance).compute_weights(X, self.cluster_centers_)
        return weights.to(torch.uint8).argmax(dim=0)

    def to_result(self) -> KMeansResult:
        """Package the fitted state as a KMeansResult."""
        self._check_fitted()
        return KMeansResult(
            centroids=self.cluster_centers_,
            weights=self.weights_,
            n_iter=self.n_iter_,
            converged=self.converged_,
            inertia=self.inertia_,
            history=list(self.history_)
        )
