"""Tests for the community matrix sampler."""

from __future__ import annotations

import numpy as np
import pytest

from press_impact.core.errors import InvalidArgument
from press_impact.simulation.network import Network
from press_impact.simulation.sampler import CommunitySampler, is_stable, press_response


CHAIN = Network([
    ("Resource", "Consumer", "P"),
    ("Consumer", "Resource", "N"),
    ("Consumer", "Predator", "P"),
    ("Predator", "Consumer", "N"),
]).with_self_limitation()


class TestStability:
    def test_negative_diagonal_is_stable(self):
        assert is_stable(-np.eye(3))

    def test_positive_eigenvalue_is_unstable(self):
        assert not is_stable(np.diag([-1.0, 0.5]))

    def test_press_response(self):
        W = np.array([[-1.0, -0.5], [0.4, -0.2]])
        np.testing.assert_allclose(W @ press_response(W), -np.eye(2))


class TestCommunitySampler:
    def test_matrix_follows_signs(self):
        sampler = CommunitySampler(CHAIN, rng=np.random.default_rng(0))
        W = sampler.community_matrix()
        S = CHAIN.sign_matrix()
        np.testing.assert_array_equal(np.sign(W), S)
        assert np.all(np.abs(W[S != 0]) >= 0.01)
        assert np.all(np.abs(W) <= 1.0)

    def test_sample_size_and_stability(self):
        sampler = CommunitySampler(CHAIN, rng=np.random.default_rng(1))
        ensemble = sampler.sample(20)
        assert len(ensemble) == 20
        assert ensemble.nodes == CHAIN.nodes
        assert ensemble.attempts >= 20
        for W, A in zip(ensemble.matrices, ensemble.responses):
            assert is_stable(W)
            np.testing.assert_allclose(A, -np.linalg.inv(W))

    def test_reproducible_with_seed(self):
        a = CommunitySampler(CHAIN, rng=np.random.default_rng(7)).sample(5)
        b = CommunitySampler(CHAIN, rng=np.random.default_rng(7)).sample(5)
        for x, y in zip(a.responses, b.responses):
            np.testing.assert_array_equal(x, y)

    def test_zero_samples(self):
        ensemble = CommunitySampler(CHAIN).sample(0)
        assert len(ensemble) == 0
        assert ensemble.acceptance_rate == 0.0

    def test_attempt_budget(self):
        unstable = Network([("a", "a", "P")])
        sampler = CommunitySampler(unstable, rng=np.random.default_rng(0))
        with pytest.raises(InvalidArgument):
            sampler.sample(3, max_attempts=10)

    def test_negative_size(self):
        with pytest.raises(InvalidArgument):
            CommunitySampler(CHAIN).sample(-1)

    def test_bad_magnitude(self):
        with pytest.raises(InvalidArgument):
            CommunitySampler(CHAIN, magnitude=(1.0, 0.5))
