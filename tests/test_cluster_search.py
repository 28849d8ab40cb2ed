# tests/test_cluster_search.py
"""
Search over the number of clusters

Covers:
- Two-blob data picks two clusters with a low Davies-Bouldin score
- An isolated point becomes its own cluster and its centroid is moved off it
- NaN scores are retried; nothing usable raises DegenerateClusteringError
- Ties keep the earliest candidate
- The exact search is experimental and skips degenerate counts
"""

from __future__ import annotations

import math

import numpy as np
import pytest
import torch

from simpleclust.algorithms import (
    ApproximateClusterSearch, ExactClusterSearch, offset_singleton_centroids,
    cluster_generator_approximate, cluster_generator_exact,
)
from simpleclust.base.interfaces import QualityIndex
from simpleclust.base.data_structures import SearchResult, WeightMatrix
from simpleclust.base.errors import (
    ContractViolation, DegenerateClusteringError, ExperimentalWarning,
)

from data_gen import make_two_blobs, make_blobs_with_outlier, make_square
from utils import perm_invariant_accuracy, sqrt_norm_distance


class ScriptedIndex(QualityIndex):
    """Returns queued scores in order, then repeats the last one."""

    def __init__(self, scores, higher_is_better=False):
        self.scores = list(scores)
        self.calls = 0
        self._higher = higher_is_better

    def score(self, entities, centroids, weights):
        value = self.scores[min(self.calls, len(self.scores) - 1)]
        self.calls += 1
        return value

    @property
    def higher_is_better(self):
        return self._higher


def test_two_blobs_choose_two_clusters():
    X, y = make_two_blobs(n_per=20, scale=0.5, seed=0)

    search = ApproximateClusterSearch(max_clusters=4, random_state=0).fit(X)

    assert search.n_clusters_ == 2
    assert search.score_ < 1.0
    assert search.cluster_centers_.shape == (2, 2)
    assert search.weights_.shape == (2, 40)
    assert search.hard_weights_.shape == (2, 40)
    assert torch.all(search.weights_ > 0)
    assert perm_invariant_accuracy(WeightMatrix(search.hard_weights_).get_labels(), y) == 1.0
    assert len(search.candidates_) == 3 * 3
    assert [c.n_clusters for c in search.candidates_] == [2, 2, 2, 3, 3, 3, 4, 4, 4]


def test_outlier_becomes_offset_singleton():
    X, y, outlier_index = make_blobs_with_outlier(n_per=20, scale=0.5, seed=0)

    search = ApproximateClusterSearch(max_clusters=4, random_state=0).fit(X)

    assert search.n_clusters_ == 3
    hard = WeightMatrix(search.hard_weights_, is_soft=False)
    outlier_cluster = int(hard.get_labels()[outlier_index])
    assert hard.singleton_clusters() == [outlier_cluster]

    outlier = torch.from_numpy(X[outlier_index])
    shift = search.cluster_centers_[outlier_cluster] - outlier
    assert float(torch.sum(shift * shift)) > 0.0
    assert torch.all(torch.isfinite(search.weights_))
    assert torch.all(search.weights_ > 0)


def test_offset_singleton_centroids_formula():
    X = torch.tensor([[0.0, 0.0], [1.0, 0.0], [10.0, 0.0]], dtype=torch.float64)
    C = torch.tensor([[0.5, 0.0], [10.0, 0.0]], dtype=torch.float64)
    W = torch.tensor([[True, True, False], [False, False, True]])

    corrected = offset_singleton_centroids(X, C, W, offset_constant=0.05)

    mean = X.mean(dim=0)
    expected = C[1] + (0.05 / 2) * (C[1] - mean)
    assert torch.allclose(corrected[1], expected)
    assert torch.equal(corrected[0], C[0])
    # Input is left untouched
    assert torch.equal(C, torch.tensor([[0.5, 0.0], [10.0, 0.0]], dtype=torch.float64))
    # The entity is still closest to its own, moved, centroid
    d_own = torch.sum((corrected[1] - X[2]) ** 2)
    d_other = torch.sum((corrected[0] - X[2]) ** 2)
    assert 0 < d_own < d_other


def test_nan_scores_are_retried():
    X, _ = make_two_blobs(n_per=5, seed=1)
    index = ScriptedIndex([float("nan"), float("nan"), 0.5])

    search = ApproximateClusterSearch(max_clusters=2, attempts_per_count=1, max_retries=5,
                                      quality_index=index, random_state=0).fit(X)

    assert index.calls == 3
    assert search.score_ == 0.5
    assert search.candidates_[0].retries == 2


def test_all_nan_scores_raise():
    X, _ = make_two_blobs(n_per=5, seed=1)
    index = ScriptedIndex([float("nan")])

    with pytest.raises(DegenerateClusteringError):
        ApproximateClusterSearch(max_clusters=3, attempts_per_count=2, max_retries=3,
                                 quality_index=index, random_state=0).fit(X)
    # 2 counts x 2 attempts x 3 runs
    assert index.calls == 12


def test_ties_keep_earliest_candidate():
    X, _ = make_two_blobs(n_per=5, seed=1)
    index = ScriptedIndex([0.7])

    search = ApproximateClusterSearch(max_clusters=4, quality_index=index,
                                      random_state=0).fit(X)

    assert search.n_clusters_ == 2
    assert search.score_ == 0.7


def test_infinite_scores_are_never_chosen():
    X, _ = make_two_blobs(n_per=5, seed=1)
    index = ScriptedIndex([math.inf])
    with pytest.raises(DegenerateClusteringError):
        ApproximateClusterSearch(max_clusters=2, quality_index=index, random_state=0).fit(X)


@pytest.mark.parametrize("max_clusters", [1, 41])
def test_invalid_max_clusters(max_clusters):
    X, _ = make_two_blobs(n_per=20, seed=0)
    with pytest.raises(ContractViolation):
        ApproximateClusterSearch(max_clusters=max_clusters).fit(X)


def test_seeded_search_is_reproducible():
    X, _ = make_two_blobs(n_per=10, seed=3)
    a = ApproximateClusterSearch(max_clusters=3, random_state=42).fit(X)
    b = ApproximateClusterSearch(max_clusters=3, random_state=42).fit(X)
    assert a.n_clusters_ == b.n_clusters_
    assert torch.equal(a.cluster_centers_, b.cluster_centers_)
    np.testing.assert_array_equal([c.score for c in a.candidates_],
                                  [c.score for c in b.candidates_])


def test_functional_approximate_entry_point():
    X, _ = make_two_blobs(n_per=10, seed=4)
    result = cluster_generator_approximate(X, 3, random_state=4)

    assert isinstance(result, SearchResult)
    assert result.centroids.shape == (result.n_clusters, 2)
    assert result.weights.shape == (result.n_clusters, 20)
    assert result.hard_weights.shape == (result.n_clusters, 20)


def test_exact_search_is_experimental():
    X = np.vstack([make_square(), make_square() + 5.0])

    with pytest.warns(ExperimentalWarning):
        search = ExactClusterSearch(max_clusters=3, distance=sqrt_norm_distance,
                                    random_state=0).fit(X)

    # The placeholder score is constant, so the first count wins
    assert search.n_clusters_ == 2
    assert search.score_ == 1.0
    assert search.hard_weights_ is None
    assert search.weights_.shape == (2, 8)
    assert torch.allclose(search.weights_.sum(dim=1), torch.ones(2, dtype=torch.float64))


def test_exact_search_all_degenerate_raises():
    X = make_square()
    with pytest.warns(ExperimentalWarning):
        with pytest.raises(DegenerateClusteringError):
            ExactClusterSearch(max_clusters=3, threshold=1e6, random_state=0).fit(X)


def test_exact_search_with_custom_index():
    X = np.vstack([make_square(), make_square() + 5.0])
    index = ScriptedIndex([0.2, 0.9], higher_is_better=True)

    with pytest.warns(ExperimentalWarning):
        result = cluster_generator_exact(X, 3, distance=sqrt_norm_distance,
                                         quality_index=index, random_state=0)

    assert result.n_clusters == 3
    assert result.score == 0.9
    assert [c.n_clusters for c in result.candidates] == [2, 3]


def test_exact_search_labels_are_nearest_centroid():
    X = np.vstack([make_square(), make_square() + 5.0])

    with pytest.warns(ExperimentalWarning):
        search = ExactClusterSearch(max_clusters=2, distance=sqrt_norm_distance,
                                    random_state=0).fit(X)

    expected = torch.cdist(search.cluster_centers_, torch.from_numpy(X)).argmin(dim=0)
    assert torch.equal(search.labels_, expected)


def test_approximate_search_labels_follow_hard_weights():
    X, _ = make_two_blobs(n_per=10, seed=0)
    search = ApproximateClusterSearch(max_clusters=3, random_state=0).fit(X)

    assert torch.equal(search.labels_, WeightMatrix(search.hard_weights_).get_labels())
    assert torch.equal(search.fit_predict(X), search.labels_)
