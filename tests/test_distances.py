# tests/test_distances.py
"""
Distance functions

Covers:
- SquaredEuclideanDistance scalar and vectorised forms agree, exact zeros
- Generic pairwise evaluation for user-defined distances
- as_distance resolution rules
"""

from __future__ import annotations

import pytest
import torch

from simpleclust.base.interfaces import DistanceFunction
from simpleclust.distances import SquaredEuclideanDistance, CallableDistance, as_distance


class ManhattanDistance(DistanceFunction):
    def distance(self, a, b):
        return torch.sum(torch.abs(a - b))


def test_squared_euclidean_scalar():
    d = SquaredEuclideanDistance()
    a = torch.tensor([1.0, 2.0], dtype=torch.float64)
    b = torch.tensor([4.0, 6.0], dtype=torch.float64)
    assert float(d(a, b)) == pytest.approx(25.0)
    assert float(d.distance(a, a)) == 0.0


def test_squared_euclidean_pairwise_matches_scalar(generator):
    d = SquaredEuclideanDistance()
    X = torch.randn(5, 3, generator=generator, dtype=torch.float64)
    Y = torch.randn(4, 3, generator=generator, dtype=torch.float64)

    P = d.pairwise(X, Y)
    assert P.shape == (5, 4)
    for i in range(5):
        for j in range(4):
            assert float(P[i, j]) == pytest.approx(float(d(X[i], Y[j])))


def test_squared_euclidean_identical_rows_give_exact_zero():
    d = SquaredEuclideanDistance()
    X = torch.tensor([[1e8, 3.3], [0.1, 0.2]], dtype=torch.float64)
    P = d.pairwise(X, X)
    assert float(P[0, 0]) == 0.0
    assert float(P[1, 1]) == 0.0


def test_generic_pairwise_for_custom_distance():
    d = ManhattanDistance()
    X = torch.tensor([[0.0, 0.0], [1.0, 1.0]], dtype=torch.float64)
    Y = torch.tensor([[2.0, 0.0]], dtype=torch.float64)
    P = d.pairwise(X, Y)
    assert P.dtype == torch.float64
    assert torch.allclose(P, torch.tensor([[2.0], [2.0]], dtype=torch.float64))


def test_callable_distance_wraps_function():
    calls = []

    def chebyshev(a, b):
        calls.append(1)
        return torch.max(torch.abs(a - b))

    d = as_distance(chebyshev)
    assert isinstance(d, CallableDistance)
    X = torch.tensor([[0.0, 0.0], [3.0, 1.0]], dtype=torch.float64)
    P = d.pairwise(X, X)
    assert torch.allclose(P, torch.tensor([[0.0, 3.0], [3.0, 0.0]], dtype=torch.float64))
    assert len(calls) == 4


def test_as_distance_rules():
    assert isinstance(as_distance(None), SquaredEuclideanDistance)
    custom = ManhattanDistance()
    assert as_distance(custom) is custom
    with pytest.raises(TypeError):
        as_distance(42)
    with pytest.raises(TypeError):
        CallableDistance("not callable")
