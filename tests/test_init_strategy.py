"""Tests for the seeding strategies.

Verifies center counts, argument checks, duplicate handling,
determinism, the k-means++ D^2 rule, and average cost ordering.
"""

from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from kmeans_init.clustering import (
    Centers,
    InitStrategy,
    clustering_cost,
    initialize_centers,
    parallel_init,
    plus_plus_init,
    random_init,
    resolve_strategy,
    weighted_points,
)
from kmeans_init.clustering import init_strategy, sampling
from kmeans_init.clustering.init_strategy import _round_half_up


def make_blobs(n_per_blob=60, k=5, seed=0):
    """Well-separated 2-D blobs with random weights."""
    rng = np.random.default_rng(seed)
    means = np.array([[i * 100.0, (i % 2) * 100.0] for i in range(k)])
    vectors = np.vstack([m + rng.normal(size=(n_per_blob, 2)) for m in means])
    weights = rng.integers(1, 5, size=len(vectors)).astype(float)
    return weighted_points(vectors, weights)


def as_rows(centers):
    return {tuple(c) for c in centers}


ALL_STRATEGIES = [InitStrategy.RANDOM, InitStrategy.PLUS_PLUS, InitStrategy.PARALLEL]


class TestArguments:
    """Contract violations raise immediately."""

    @pytest.mark.parametrize("strategy", ALL_STRATEGIES)
    def test_non_positive_k(self, strategy):
        points = weighted_points(np.array([[0.0], [1.0]]))
        with pytest.raises(ValueError):
            strategy.apply(points, 0, np.random.default_rng(0))

    @pytest.mark.parametrize("strategy", ALL_STRATEGIES)
    def test_empty_points(self, strategy):
        with pytest.raises(ValueError):
            strategy.apply([], 2, np.random.default_rng(0))

    def test_negative_weight(self):
        points = weighted_points(np.array([[0.0], [1.0]]), np.array([1.0, -1.0]))
        with pytest.raises(ValueError):
            plus_plus_init(points, 1, np.random.default_rng(0))


class TestRandomInit:
    """Weighted random selection."""

    def test_returns_k_input_points(self):
        data = np.arange(10, dtype=float).reshape(-1, 1)
        centers = random_init(weighted_points(data), 4, np.random.default_rng(0))
        assert len(centers) == 4
        assert as_rows(centers) <= as_rows(data)
        assert len(as_rows(centers)) == 4

    def test_fewer_distinct_points_than_k(self):
        """Returns one center per distinct vector when k is too large."""
        data = np.array([[0.0], [1.0], [1.0], [2.0]])
        centers = random_init(weighted_points(data), 10, np.random.default_rng(0))
        assert len(centers) == 3
        assert as_rows(centers) == {(0.0,), (1.0,), (2.0,)}


class TestPlusPlusInit:
    """k-means++ seeding."""

    def test_returns_exactly_k_distinct(self):
        points = make_blobs()
        centers = plus_plus_init(points, 5, np.random.default_rng(3))
        assert len(centers) == 5
        assert len(as_rows(centers)) == 5

    def test_covers_separated_blobs(self):
        """Each well-separated blob receives one center."""
        points = make_blobs()
        centers = plus_plus_init(points, 5, np.random.default_rng(1))
        blob_ids = {int(round(c[0] / 100.0)) for c in centers}
        assert blob_ids == {0, 1, 2, 3, 4}

    def test_identical_points_terminate(self):
        """All-identical input yields k copies via the index-0 fallback."""
        points = weighted_points(np.full((6, 2), 3.0))
        centers = plus_plus_init(points, 4, np.random.default_rng(0))
        assert len(centers) == 4
        for c in centers:
            np.testing.assert_array_equal(c, [3.0, 3.0])

    def test_second_center_follows_d2_weights(self):
        """After seeding with 0, far points are drawn in proportion to w * d^2."""
        data = np.array([[0.0], [1.0], [10.0], [11.0]])
        points = weighted_points(data)

        second = []
        for seed in range(3000):
            centers = plus_plus_init(points, 2, np.random.default_rng(seed))
            if centers[0][0] == 0.0:
                second.append(centers[1][0])
        second = np.array(second)

        assert len(second) > 500
        # d^2 weights: 1, 100, 121 out of 222
        assert np.mean(second == 1.0) < 0.03
        assert np.mean(second == 10.0) == pytest.approx(100 / 222, abs=0.06)
        assert np.mean(second == 11.0) == pytest.approx(121 / 222, abs=0.06)

    def test_deterministic_given_seed(self):
        points = make_blobs()
        a = plus_plus_init(points, 5, np.random.default_rng(9))
        b = plus_plus_init(points, 5, np.random.default_rng(9))
        assert a == b


class TestParallelInit:
    """k-means|| seeding."""

    def test_returns_exactly_k_input_points(self):
        points = make_blobs()
        data = np.array([p.vector for p in points])
        centers = parallel_init(points, 5, np.random.default_rng(2))
        assert isinstance(centers, Centers)
        assert len(centers) == 5
        assert as_rows(centers) <= as_rows(data)

    def test_identical_points_terminate(self):
        points = weighted_points(np.full((8, 1), -2.0))
        centers = parallel_init(points, 3, np.random.default_rng(0))
        assert len(centers) == 3
        for c in centers:
            np.testing.assert_array_equal(c, [-2.0])

    def test_low_initial_cost_skips_oversampling(self):
        """With log10(cost) rounding to 0 the candidate pool is the first draw."""
        points = weighted_points(np.array([[0.0], [1.0]]))
        centers = parallel_init(points, 2, np.random.default_rng(4))
        assert len(centers) == 2
        np.testing.assert_array_equal(centers[0], centers[1])

    def test_deterministic_given_seed(self):
        points = make_blobs()
        a = parallel_init(points, 5, np.random.default_rng(17))
        b = parallel_init(points, 5, np.random.default_rng(17))
        assert a == b

    def test_workers_do_not_change_result(self, monkeypatch):
        """Threaded scoring over many chunks reproduces the inline result."""
        monkeypatch.setattr(sampling, "SCORE_CHUNK_SIZE", 32)
        points = make_blobs()
        a = parallel_init(points, 5, np.random.default_rng(8))
        b = parallel_init(points, 5, np.random.default_rng(8), n_workers=3)
        assert a == b

    @pytest.mark.parametrize("k, pool_size", [(1, 7), (4, 13), (5, 19)])
    def test_candidate_pool_size(self, monkeypatch, k, pool_size):
        """Pool = 1 + round(log10(cost0)) rounds of round_half_up(k / 2) draws.

        For 200 unit-weight points on 0..199 every first center gives
        cost0 between 6.7e5 and 2.6e6, so log10 rounds to 6.
        """
        reductions = []

        def capture_reduction(reduced, k, rng, **kwargs):
            reductions.append(reduced)
            return Centers([p.vector for p in reduced[:k]])

        cumulative_calls = []
        original_cumulative = init_strategy.cumulative_scores

        def counting_cumulative(scores):
            cumulative_calls.append(len(scores))
            return original_cumulative(scores)

        monkeypatch.setattr(init_strategy, "plus_plus_init", capture_reduction)
        monkeypatch.setattr(init_strategy, "cumulative_scores", counting_cumulative)

        points = weighted_points(np.arange(200, dtype=float).reshape(-1, 1))
        parallel_init(points, k, np.random.default_rng(0))

        assert len(reductions) == 1
        reduced = reductions[0]
        assert len(reduced) == pool_size
        assert sum(p.weight for p in reduced) == pytest.approx(200.0)
        # One cumulative array per round, shared by all draws of that round
        assert len(cumulative_calls) == 6

    def test_round_half_up(self):
        """Halves round up, unlike Python's round()."""
        assert _round_half_up(0.5 * 1) == 1
        assert _round_half_up(0.5 * 3) == 2
        assert _round_half_up(0.5 * 5) == 3
        assert _round_half_up(5.91) == 6
        assert _round_half_up(-0.3) == 0

    @pytest.mark.parametrize("strategy", [parallel_init, plus_plus_init])
    def test_one_pool_per_run(self, monkeypatch, strategy):
        """A seeding run opens a single scoring pool and reuses it."""
        monkeypatch.setattr(sampling, "SCORE_CHUNK_SIZE", 32)
        created = []

        class CountingPool(ThreadPoolExecutor):
            def __init__(self, *args, **kwargs):
                created.append(self)
                super().__init__(*args, **kwargs)

        monkeypatch.setattr(sampling, "ThreadPoolExecutor", CountingPool)
        centers = strategy(make_blobs(), 5, np.random.default_rng(3), n_workers=2)

        assert len(centers) == 5
        assert len(created) == 1


class TestAverageCost:
    """Seeding quality over many seeds."""

    def test_scored_strategies_beat_random(self):
        points = make_blobs()
        seeds = range(20)

        def mean_cost(strategy):
            return np.mean([
                clustering_cost(points, strategy.apply(points, 5, np.random.default_rng(s)))
                for s in seeds
            ])

        random_cost = mean_cost(InitStrategy.RANDOM)
        assert mean_cost(InitStrategy.PARALLEL) <= random_cost
        assert mean_cost(InitStrategy.PLUS_PLUS) <= random_cost


class TestStrategyEnum:
    """Name resolution and dispatch."""

    def test_resolve_aliases(self):
        assert resolve_strategy("random") is InitStrategy.RANDOM
        assert resolve_strategy("K-Means++") is InitStrategy.PLUS_PLUS
        assert resolve_strategy("k-means||") is InitStrategy.PARALLEL
        assert resolve_strategy(InitStrategy.PARALLEL) is InitStrategy.PARALLEL

    def test_unknown_name(self):
        with pytest.raises(ValueError):
            resolve_strategy("forgy")

    def test_apply_dispatch(self):
        points = make_blobs()
        expected = plus_plus_init(points, 3, np.random.default_rng(5))
        assert InitStrategy.PLUS_PLUS.apply(points, 3, np.random.default_rng(5)) == expected

    def test_initialize_centers_accepts_seed(self):
        points = make_blobs()
        a = initialize_centers(points, 4, strategy="parallel", seed=12)
        b = parallel_init(points, 4, np.random.default_rng(12))
        assert a == b
