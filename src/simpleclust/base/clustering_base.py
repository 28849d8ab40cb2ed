"""
Base class for the iterative clustering engines.

Holds the configuration shared by k-means and fuzzy c-means, input
validation, and the sklearn-style fit/predict surface.
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, Union, Callable
import torch
from torch import Tensor

from .interfaces import DistanceFunction
from ..distances.callable import as_distance
from ..utils.validation import validate_data, check_random_state


class BaseClusteringAlgorithm(ABC):
    """Base class for engines producing K centroids and a (K, N) weight matrix.

    Subclasses implement ``_fit`` and set:
    - cluster_centers_: (K, d) centroids
    - weights_: (K, N) weights
    - n_iter_, converged_, history_
    """

    def __init__(self,
                 n_clusters: int,
                 distance: Optional[Union[DistanceFunction, Callable]] = None,
                 max_iter: int = 100,
                 verbose: int = 0,
                 random_state: Optional[Union[int, torch.Generator]] = None):
        """
        Args:
            n_clusters: Number of clusters K
            distance: Distance function; squared Euclidean when None
            max_iter: Maximum iterations
            verbose: Verbosity level (0=silent, 1=progress, 2=detailed)
            random_state: None, an int seed, or a torch.Generator to share
        """
        self.n_clusters = n_clusters
        self.distance = as_distance(distance)
        self.max_iter = max_iter
        self.verbose = verbose
        self.random_state = random_state

        # Algorithm state
        self.fitted_ = False
        self.n_iter_ = 0
        self.converged_ = False
        self.history_ = []
        self.cluster_centers_: Optional[Tensor] = None
        self.weights_: Optional[Tensor] = None

    @abstractmethod
    def _fit(self, X: Tensor, generator: torch.Generator) -> None:
        """Run the engine on validated data."""
        pass

    def fit(self, X: Tensor, y: Optional[Tensor] = None) -> 'BaseClusteringAlgorithm':
        """Fit the clustering model.

        Args:
            X: (n, d) data
            y: Ignored (for sklearn compatibility)

        Returns:
            Self
        """
        X = self._validate_data(X)
        generator = check_random_state(self.random_state)
        self.n_iter_ = 0
        self.converged_ = False
        self.history_ = []
        self._fit(X, generator)
        self.fitted_ = True
        return self

    def fit_predict(self, X: Tensor, y: Optional[Tensor] = None) -> Tensor:
        """Fit and return (n,) cluster labels for X."""
        self.fit(X)
        return self.labels_

    @property
    def labels_(self) -> Tensor:
        """(n,) index of the highest-weight cluster for each training entity."""
        self._check_fitted()
        return self.weights_.float().argmax(dim=0)

    def _validate_data(self, X: Tensor) -> Tensor:
        """Validate and prepare input data."""
        return validate_data(X, ensure_min_samples=self.n_clusters)

    def _check_fitted(self) -> None:
        if not self.fitted_:
            raise RuntimeError("Model must be fitted first")

    def _log(self, level: int, message: str) -> None:
        if self.verbose >= level:
            print(message)

    def get_params(self, deep: bool = True) -> Dict[str, Any]:
        """Get parameters (sklearn compatibility)."""
        return {
            'n_clusters': self.n_clusters,
            'distance': self.distance,
            'max_iter': self.max_iter,
            'verbose': self.verbose,
            'random_state': self.random_state
        }

    def set_params(self, **params) -> 'BaseClusteringAlgorithm':
        """Set parameters (sklearn compatibility)."""
        for key, value in params.items():
            if key == 'distance':
                value = as_distance(value)
            setattr(self, key, value)
        return self
