# tests/test_weights.py
"""
Hard and fuzzy weight calculators

Covers:
- Hard weights: one True per column, nearest centroid, first index on ties,
  NaN centroids never chosen, coincident points accepted
- Fuzzy weights: 1/d, strictly positive, unnormalized, coincidence and NaN guards
- Shape contracts on both calculators
"""

from __future__ import annotations

import pytest
import torch

from simpleclust.assignments import HardWeightCalculator, FuzzyWeightCalculator
from simpleclust.base.errors import (
    ContractViolation, CoincidentPointError, DegenerateClusteringError,
)
from simpleclust.algorithms import calculate_boolean_weights, calculate_fuzzy_weights


def _t(rows):
    return torch.tensor(rows, dtype=torch.float64)


def test_hard_weights_totality(generator):
    X = torch.randn(30, 3, generator=generator, dtype=torch.float64)
    C = torch.randn(4, 3, generator=generator, dtype=torch.float64)

    W = HardWeightCalculator().compute_weights(X, C)

    assert W.dtype == torch.bool
    assert W.shape == (4, 30)
    assert torch.all(W.sum(dim=0) == 1)


def test_hard_weights_pick_nearest():
    X = _t([[0.0, 0.0], [9.0, 9.0], [1.0, 0.0]])
    C = _t([[10.0, 10.0], [0.0, 0.0]])
    W = HardWeightCalculator().compute_weights(X, C)
    expected = torch.tensor([[False, True, False], [True, False, True]])
    assert torch.equal(W, expected)


def test_hard_weights_tie_goes_to_first_centroid():
    X = _t([[0.0, 0.0]])
    C = _t([[1.0, 0.0], [-1.0, 0.0]])
    W = HardWeightCalculator().compute_weights(X, C)
    assert W[0, 0] and not W[1, 0]


def test_hard_weights_ignore_nan_centroid():
    X = _t([[0.0, 0.0], [5.0, 5.0]])
    C = _t([[float("nan"), float("nan")], [1.0, 1.0]])
    W = HardWeightCalculator().compute_weights(X, C)
    assert not W[0].any()
    assert W[1].all()


def test_hard_accepts_coincident_point_while_fuzzy_raises():
    X = _t([[0.0, 0.0], [3.0, 4.0]])
    C = _t([[0.0, 0.0], [10.0, 10.0]])

    W = HardWeightCalculator().compute_weights(X, C)
    assert W[0, 0]

    with pytest.raises(CoincidentPointError) as excinfo:
        FuzzyWeightCalculator().compute_weights(X, C)
    assert excinfo.value.centroid_index == 0
    assert excinfo.value.entity_index == 0


def test_fuzzy_weights_are_inverse_distances():
    X = _t([[1.0, 0.0], [0.0, 2.0]])
    C = _t([[0.0, 0.0]])
    W = FuzzyWeightCalculator().compute_weights(X, C)
    assert torch.allclose(W, _t([[1.0, 0.25]]))


def test_fuzzy_weights_positive_and_unnormalized(generator):
    X = torch.randn(20, 2, generator=generator, dtype=torch.float64)
    C = torch.randn(3, 2, generator=generator, dtype=torch.float64) + 50.0
    W = FuzzyWeightCalculator().compute_weights(X, C)

    assert W.shape == (3, 20)
    assert torch.all(W > 0)
    assert not torch.allclose(W.sum(dim=1), torch.ones(3, dtype=torch.float64))
    assert not torch.allclose(W.sum(dim=0), torch.ones(20, dtype=torch.float64))


def test_fuzzy_threshold_is_inclusive():
    X = _t([[0.0, 0.0]])
    C = _t([[0.5, 0.0]])  # squared distance 0.25
    with pytest.raises(CoincidentPointError):
        FuzzyWeightCalculator(threshold=0.25).compute_weights(X, C)
    W = FuzzyWeightCalculator(threshold=0.24).compute_weights(X, C)
    assert W.shape == (1, 1)


def test_fuzzy_nan_centroid_is_degenerate():
    X = _t([[0.0, 0.0]])
    C = _t([[float("nan"), 0.0]])
    with pytest.raises(DegenerateClusteringError):
        FuzzyWeightCalculator().compute_weights(X, C)


@pytest.mark.parametrize("calculator", [HardWeightCalculator(), FuzzyWeightCalculator()])
def test_feature_mismatch_is_contract_violation(calculator):
    X = torch.ones(4, 3, dtype=torch.float64)
    C = torch.zeros(2, 2, dtype=torch.float64)
    with pytest.raises(ContractViolation):
        calculator.compute_weights(X, C)
    with pytest.raises(ContractViolation):
        calculator.compute_weights(X[0], C)


def test_functional_weight_helpers_accept_lists():
    X = [[0.0, 0.0], [4.0, 0.0]]
    C = [[1.0, 0.0], [3.0, 0.0]]

    hard = calculate_boolean_weights(X, C)
    assert torch.equal(hard, torch.tensor([[True, False], [False, True]]))

    fuzzy = calculate_fuzzy_weights(X, C)
    assert torch.allclose(fuzzy, _t([[1.0, 1.0 / 9.0], [1.0 / 9.0, 1.0]]))


def test_calculators_declare_softness():
    assert FuzzyWeightCalculator().is_soft
    assert not HardWeightCalculator().is_soft
