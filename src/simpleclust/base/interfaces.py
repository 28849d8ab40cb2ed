"""
Core interfaces for the simpleclust clustering engines.

This module defines the abstract base classes that the pluggable pieces
implement, so distances, weight calculators, seeders and quality indices
can be swapped without touching the engines.
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, Union
import torch
from torch import Tensor


class DistanceFunction(ABC):
    """Scalar dissimilarity between two feature vectors.

    Implementations must return a non-negative value that is zero when the
    two vectors are identical; the fuzzy weights divide by it.
    """

    @abstractmethod
    def distance(self, a: Tensor, b: Tensor) -> Union[Tensor, float]:
        """Dissimilarity between vectors a and b, both of shape (d,)."""
        pass

    def __call__(self, a: Tensor, b: Tensor) -> Union[Tensor, float]:
        return self.distance(a, b)

    def pairwise(self, X: Tensor, Y: Tensor) -> Tensor:
        """Compute distances between every row of X and every row of Y.

        Args:
            X: (n, d) tensor
            Y: (m, d) tensor

        Returns:
            (n, m) tensor with entry (i, j) = distance(X[i], Y[j])
        """
        out = torch.empty(X.shape[0], Y.shape[0], dtype=X.dtype, device=X.device)
        for i in range(X.shape[0]):
            for j in range(Y.shape[0]):
                out[i, j] = torch.as_tensor(self.distance(X[i], Y[j]), dtype=X.dtype)
        return out


class WeightCalculator(ABC):
    """Turns entities and centroids into a (K, N) weight matrix."""

    @abstractmethod
    def compute_weights(self, entities: Tensor, centroids: Tensor) -> Tensor:
        """Compute weights of every entity with respect to every centroid.

        Args:
            entities: (n, d) data points
            centroids: (k, d) cluster centroids

        Returns:
            (k, n) weight tensor
        """
        pass

    @property
    @abstractmethod
    def is_soft(self) -> bool:
        """Whether this calculator produces graded (fuzzy) weights."""
        return False


class InitializationStrategy(ABC):
    """Abstract base class for centroid initialization strategies."""

    @abstractmethod
    def initialize(self, points: Tensor, n_clusters: int,
                   generator: Optional[torch.Generator] = None) -> Tensor:
        """Choose initial centroids.

        Args:
            points: (n, d) data points
            n_clusters: Number of centroids to produce
            generator: Random source; a fresh one is used when None

        Returns:
            (n_clusters, d) tensor of centroids
        """
        pass


class ConvergenceCriterion(ABC):
    """Abstract base class for convergence checking."""

    def __init__(self):
        self.history = []

    @abstractmethod
    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check if the iteration has reached its fixed point.

        Args:
            current_state: Dictionary containing current algorithm state

        Returns:
            True if converged, False otherwise
        """
        pass

    def reset(self):
        """Reset convergence history."""
        self.history = []


class QualityIndex(ABC):
    """Abstract base class for clustering quality scores."""

    @abstractmethod
    def score(self, entities: Tensor, centroids: Tensor, weights: Tensor) -> float:
        """Score a clustering.

        Args:
            entities: (n, d) data points
            centroids: (k, d) cluster centroids
            weights: (k, n) hard or fuzzy weights, as the index requires

        Returns:
            Scalar score; NaN when undefined for the inputs
        """
        pass

    @property
    @abstractmethod
    def higher_is_better(self) -> bool:
        """Whether larger scores indicate a better clustering."""
        pass

    def is_better(self, candidate: float, best: float) -> bool:
        """Strict comparison in this index's direction; NaN never wins."""
        if self.higher_is_better:
            return candidate > best
        return candidate < best
