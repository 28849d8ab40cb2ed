"""
Input validation utilities.

Provides functions for validating data before clustering and for resolving
the random source handed to the seeder and the fuzzy initializer.
"""

from typing import Optional, Union
import torch
from torch import Tensor
import numpy as np

from ..base.errors import ContractViolation
from ..config import DEFAULT_DTYPE


def validate_data(X: Union[Tensor, np.ndarray, list],
                  dtype: Optional[torch.dtype] = None,
                  device: Optional[torch.device] = None,
                  ensure_finite: bool = True,
                  ensure_min_samples: int = 1,
                  ensure_min_features: int = 1,
                  name: str = 'X') -> Tensor:
    """Validate and convert input data to a 2D floating tensor.

    Args:
        X: Input data (tensor, numpy array, or list of rows)
        dtype: Target data type; floating tensors keep theirs when None,
            everything else becomes DEFAULT_DTYPE
        device: Target device
        ensure_finite: Whether to reject inf/nan
        ensure_min_samples: Minimum number of rows required
        ensure_min_features: Minimum number of columns required
        name: Argument name used in error messages

    Returns:
        Validated tensor

    Raises:
        ContractViolation: If validation fails
    """
    if isinstance(X, Tensor):
        if dtype is None:
            dtype = X.dtype if X.is_floating_point() else DEFAULT_DTYPE
        X = X.to(dtype=dtype, device=device)
    elif isinstance(X, np.ndarray):
        X = torch.from_numpy(np.ascontiguousarray(X)).to(dtype=dtype or DEFAULT_DTYPE, device=device)
    elif isinstance(X, (list, tuple)):
        X = torch.tensor(X, dtype=dtype or DEFAULT_DTYPE, device=device)
    else:
        raise TypeError(f"Cannot convert {type(X)} to tensor")

    if X.dim() != 2:
        raise ContractViolation(f"{name} must be 2D (rows are points), got {X.dim()}D")

    n_samples, n_features = X.shape
    if n_samples < ensure_min_samples:
        raise ContractViolation(f"{name} has {n_samples} samples, but at least "
                                f"{ensure_min_samples} are needed")
    if n_features < ensure_min_features:
        raise ContractViolation(f"{name} has {n_features} features, but at least "
                                f"{ensure_min_features} are needed")

    if ensure_finite and not bool(torch.isfinite(X).all()):
        raise ContractViolation(f"{name} contains NaN or infinite values")

    return X


def check_matching_features(entities: Tensor, centroids: Tensor) -> None:
    """Entities and centroids must both be 2D with the same feature count."""
    if entities.dim() != 2 or centroids.dim() != 2:
        raise ContractViolation(
            f"Expected 2D entities and centroids, got {entities.dim()}D and {centroids.dim()}D")
    if entities.shape[1] != centroids.shape[1]:
        raise ContractViolation(
            f"Entities have {entities.shape[1]} features but centroids have "
            f"{centroids.shape[1]}")


def check_weights_shape(weights: Tensor, n_clusters: int, n_points: int) -> None:
    """Weights must be (n_clusters, n_points)."""
    if tuple(weights.shape) != (n_clusters, n_points):
        raise ContractViolation(
            f"Weights must have shape ({n_clusters}, {n_points}), got {tuple(weights.shape)}")


def check_n_clusters(n_clusters: int, n_samples: int, minimum: int = 1) -> None:
    """Validate number of clusters.

    Args:
        n_clusters: Number of clusters
        n_samples: Number of samples
        minimum: Smallest admissible count

    Raises:
        ContractViolation: If invalid
    """
    if isinstance(n_clusters, bool) or not isinstance(n_clusters, (int, np.integer)):
        raise TypeError(f"n_clusters must be int, got {type(n_clusters)}")

    if n_clusters < minimum:
        raise ContractViolation(f"n_clusters must be at least {minimum}, got {n_clusters}")

    if n_clusters > n_samples:
        raise ContractViolation(f"n_clusters ({n_clusters}) cannot be larger than "
                                f"n_samples ({n_samples})")


def check_random_state(random_state: Optional[Union[int, torch.Generator]]) -> torch.Generator:
    """Create a generator from a random state.

    Args:
        random_state: None for a generator seeded from a non-deterministic
            source, an int seed, or an existing generator (shared, not copied)

    Returns:
        Generator
    """
    if random_state is None:
        generator = torch.Generator()
        generator.seed()
        return generator
    elif isinstance(random_state, torch.Generator):
        return random_state
    elif isinstance(random_state, (int, np.integer)) and not isinstance(random_state, bool):
        generator = torch.Generator()
        generator.manual_seed(int(random_state))
        return generator
    else:
        raise TypeError(f"random_state must be int or Generator, got {type(random_state)}")
