# tests/utils.py
"""
Small, reusable helpers used across the simpleclust test suite.

Functions:
- perm_invariant_accuracy(y_pred, y_true): best accuracy over relabelings of the predicted clusters.
- sqrt_norm_distance(a, b): sqrt of the Euclidean norm, a distance fuzzy c-means settles under
  without collapsing centroids onto data points.
- to_numpy(x): tensor or array to numpy.
"""

from __future__ import annotations

import itertools
from typing import Any, Union

import numpy as np
import torch

ArrayLike = Union[np.ndarray, torch.Tensor]


def to_numpy(x: ArrayLike) -> np.ndarray:
    """Convert a tensor (any device) or array-like to numpy."""
    if isinstance(x, torch.Tensor):
        return x.detach().cpu().numpy()
    return np.asarray(x)


def perm_invariant_accuracy(y_pred: ArrayLike, y_true: ArrayLike) -> float:
    """
    Best accuracy over all mappings of predicted cluster ids onto true labels.

    Parameters
    ----------
    y_pred : (n,) predicted integer labels
    y_true : (n,) ground-truth integer labels

    Returns
    -------
    float in [0, 1]

    Notes
    -----
    Brute force over permutations; tests here keep the label count small.
    """
    y_pred = to_numpy(y_pred).astype(np.int64)
    y_true = to_numpy(y_true).astype(np.int64)
    if y_pred.shape != y_true.shape:
        raise ValueError(f"Shape mismatch: {y_pred.shape} vs {y_true.shape}")

    pred_ids = np.unique(y_pred)
    true_ids = np.unique(y_true)
    k = max(len(pred_ids), len(true_ids))
    targets = list(true_ids) + [-1] * (k - len(true_ids))

    best = 0.0
    for perm in itertools.permutations(targets, len(pred_ids)):
        mapping = dict(zip(pred_ids, perm))
        mapped = np.array([mapping[p] for p in y_pred])
        best = max(best, float(np.mean(mapped == y_true)))
    return best


def sqrt_norm_distance(a: torch.Tensor, b: torch.Tensor) -> Any:
    """sqrt(||a - b||)."""
    return torch.linalg.norm(a - b).sqrt()
