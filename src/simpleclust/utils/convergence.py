"""
Convergence criteria for the iterative engines.

- Lloyd's algorithm stops when the hard weights reach a fixed point
- Fuzzy c-means stops when successive weight matrices stop moving
"""

from typing import Dict, Any
import torch
from torch import Tensor

from ..base.interfaces import ConvergenceCriterion


class ChangeInAssignments(ConvergenceCriterion):
    """Convergence once no more than ``max_changed`` entities switch cluster."""

    def __init__(self, max_changed: int = 0, patience: int = 1):
        """
        Args:
            max_changed: Largest number of reassigned entities still deemed stable
            patience: Number of stable iterations required before converging
        """
        super().__init__()
        self.max_changed = max_changed
        self.patience = patience
        self._prev_weights = None
        self._stable_count = 0

    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check if the (k, n) hard weights have stabilized."""
        weights: Tensor = current_state['weights']

        if self._prev_weights is None:
            self._prev_weights = weights.clone()
            return False

        # A reassigned entity flips two cells of its column
        n_changed = int((weights != self._prev_weights).any(dim=0).sum().item())

        self.history.append({
            'iteration': current_state.get('iteration', len(self.history)),
            'n_changed': n_changed
        })

        if n_changed <= self.max_changed:
            self._stable_count += 1
            converged = self._stable_count >= self.patience
        else:
            self._stable_count = 0
            converged = False

        self._prev_weights = weights.clone()

        return converged

    def reset(self):
        super().reset()
        self._prev_weights = None
        self._stable_count = 0


class WeightChange(ConvergenceCriterion):
    """Convergence on the squared Frobenius change of a weight matrix."""

    def __init__(self, tol: float = 1e-19):
        """
        Args:
            tol: Squared change at or below which the weights count as settled
        """
        super().__init__()
        self.tol = tol
        self._prev_weights = None
        self.last_delta = float('inf')

    def check(self, current_state: Dict[str, Any]) -> bool:
        """Check if the weights moved by no more than ``tol``."""
        weights: Tensor = current_state['weights']

        if self._prev_weights is None:
            self._prev_weights = weights.clone()
            return False

        delta = torch.sum((weights - self._prev_weights) ** 2).item()
        self.last_delta = delta

        self.history.append({
            'iteration': current_state.get('iteration', len(self.history)),
            'delta': delta
        })

        self._prev_weights = weights.clone()

        return delta <= self.tol

    def reset(self):
        super().reset()
        self._prev_weights = None
        self.last_delta = float('inf')
