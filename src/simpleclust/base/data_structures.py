"""
Core data structures for the simpleclust engines.

This module provides the weight-matrix wrapper shared by the engines and
the quality indices, plus the result records returned by the functional
entry points.
"""

from typing import Optional, List, Dict, Any
import torch
from torch import Tensor
from dataclasses import dataclass, field

from .errors import ContractViolation


class WeightMatrix:
    """Storage and inspection of a (K, N) cluster weight matrix.

    Hard weights are a boolean matrix with exactly one True per column;
    fuzzy weights are non-negative floats. Rows index clusters and columns
    index entities.
    """

    def __init__(self, weights: Tensor, is_soft: Optional[bool] = None):
        """
        Args:
            weights: (K, N) bool or float tensor
            is_soft: Whether weights are fuzzy; inferred from dtype if None
        """
        if weights.dim() != 2:
            raise ContractViolation(f"Expected 2D weight matrix, got {weights.dim()}D")
        if is_soft is None:
            is_soft = weights.dtype != torch.bool
        self.is_soft = is_soft
        self._validate_and_store(weights)

    def _validate_and_store(self, weights: Tensor):
        if self.is_soft:
            self._weights = weights
            return
        weights = weights.bool()
        per_column = weights.sum(dim=0)
        if not bool((per_column == 1).all()):
            bad = torch.nonzero(per_column != 1).flatten().tolist()
            raise ContractViolation(
                f"Hard weights must mark exactly one cluster per entity; "
                f"columns {bad[:10]} violate this")
        self._weights = weights

    @classmethod
    def from_labels(cls, labels: Tensor, n_clusters: int) -> 'WeightMatrix':
        """Build hard weights from (N,) cluster indices."""
        labels = labels.long()
        if labels.numel() and (labels.min() < 0 or labels.max() >= n_clusters):
            raise ContractViolation(f"Labels must lie in [0, {n_clusters})")
        weights = torch.zeros(n_clusters, labels.shape[0], dtype=torch.bool,
                              device=labels.device)
        weights[labels, torch.arange(labels.shape[0], device=labels.device)] = True
        return cls(weights, is_soft=False)

    @property
    def n_clusters(self) -> int:
        return self._weights.shape[0]

    @property
    def n_points(self) -> int:
        return self._weights.shape[1]

    @property
    def values(self) -> Tensor:
        return self._weights

    def get_labels(self) -> Tensor:
        """(N,) index of the cluster with the largest weight per entity."""
        if self.is_soft:
            return self._weights.argmax(dim=0)
        return self._weights.to(torch.uint8).argmax(dim=0)

    def get_hard(self) -> Tensor:
        """(K, N) boolean weights, converting from fuzzy by column argmax."""
        if not self.is_soft:
            return self._weights
        return WeightMatrix.from_labels(self.get_labels(), self.n_clusters).values

    def get_cluster_indices(self, cluster_idx: int) -> Tensor:
        """Indices of entities assigned to a cluster."""
        return torch.where(self.get_hard()[cluster_idx])[0]

    def count_per_cluster(self) -> Tensor:
        """Entities per cluster (summed weights for fuzzy matrices)."""
        if self.is_soft:
            return self._weights.sum(dim=1)
        return self._weights.sum(dim=1).float()

    def singleton_clusters(self) -> List[int]:
        """Clusters that hold exactly one entity."""
        counts = self.get_hard().sum(dim=1)
        return torch.nonzero(counts == 1).flatten().tolist()

    def empty_clusters(self) -> List[int]:
        counts = self.get_hard().sum(dim=1)
        return torch.nonzero(counts == 0).flatten().tolist()


@dataclass
class KMeansResult:
    """Outcome of one Lloyd run."""
    centroids: Tensor       # (K, d)
    weights: Tensor         # (K, n) bool
    n_iter: int
    converged: bool
    inertia: float
    history: List[float] = field(default_factory=list)


@dataclass
class FuzzyResult:
    """Outcome of one fuzzy c-means run."""
    centroids: Tensor       # (K, d)
    weights: Tensor         # (K, n) float, rows sum to 1
    n_iter: int
    converged: bool
    delta: float
    history: List[float] = field(default_factory=list)


@dataclass
class CandidateScore:
    """One scored attempt of the cluster-count search."""
    n_clusters: int
    attempt: int
    retries: int
    score: float


@dataclass
class SearchResult:
    """Winner of a cluster-count search, sized to the chosen count."""
    n_clusters: int
    centroids: Tensor                   # (n_clusters, d)
    weights: Tensor                     # (n_clusters, n) fuzzy
    score: float
    hard_weights: Optional[Tensor] = None   # (n_clusters, n) bool, approximate path only
    candidates: List[CandidateScore] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
