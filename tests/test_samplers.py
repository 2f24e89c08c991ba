"""
Comprehensive test suite for sampler classes.
"""

import numpy as np
import pytest

from llm_samplers import (
    InternalError,
    Logits,
    TailFreeSampler,
    TemperatureSampler,
    TopKSampler,
    TopPSampler,
    ValidationError,
)

PROBS = [0.5, 0.3, 0.15, 0.05]


def random_logits(seed, size):
    rng = np.random.default_rng(seed)
    return Logits.from_scores(rng.normal(scale=3.0, size=size).tolist())


class TestTopPSampler:
    """Test the TopPSampler class."""

    def test_defaults(self):
        sampler = TopPSampler()
        assert sampler.p == 0.9
        assert sampler.min_keep == 1

    def test_cumulative_boundary(self):
        # 0.5 + 0.3 reaches p=0.8 exactly at index 1
        logits = TopPSampler(p=0.8, min_keep=1).sample(Logits.from_probabilities(PROBS))
        assert logits.probabilities() == [0.5, 0.3]
        assert logits.token_ids() == [0, 1]

    def test_min_keep_overrides_threshold(self):
        logits = TopPSampler(p=0.5, min_keep=3).sample(Logits.from_probabilities(PROBS))
        assert len(logits) == 3

    def test_threshold_at_first_entry(self):
        logits = TopPSampler(p=0.5).sample(Logits.from_probabilities(PROBS))
        assert logits.token_ids() == [0]

    def test_min_keep_zero_still_keeps_one(self):
        logits = TopPSampler(p=0.1, min_keep=0).sample(Logits.from_probabilities(PROBS))
        assert len(logits) == 1

    def test_keeps_everything_when_threshold_not_reached(self):
        logits = TopPSampler(p=0.9, min_keep=10).sample(Logits.from_probabilities(PROBS))
        assert len(logits) == 4

    def test_computes_softmax_when_needed(self):
        # softmax([2, 1, 0.5, -1]) ~ [0.610, 0.224, 0.136, 0.030]
        logits = TopPSampler(p=0.9).sample(Logits.from_scores([2.0, 1.0, 0.5, -1.0]))
        assert logits.token_ids() == [0, 1, 2]

    def test_returns_same_buffer(self):
        logits = Logits.from_probabilities(PROBS)
        assert TopPSampler(p=0.8).sample(logits) is logits

    def test_empty_buffer_is_noop(self):
        logits = TopPSampler().sample(Logits())
        assert len(logits) == 0

    def test_single_entry(self):
        logits = TopPSampler(p=0.5).sample(Logits.from_scores([1.0]))
        assert len(logits) == 1

    def test_idempotent(self):
        sampler = TopPSampler(p=0.8)
        logits = sampler.sample(Logits.from_probabilities(PROBS))
        assert len(sampler.sample(logits)) == 2

    def test_second_pass_can_cut_further(self):
        # Survivors [0.5, 0.45] renormalize to ~[0.526, 0.474], which
        # reaches p=0.52 at the first entry
        sampler = TopPSampler(p=0.52)
        logits = sampler.sample(Logits.from_probabilities([0.5, 0.45, 0.05]))
        assert logits.token_ids() == [0, 1]
        assert sampler.sample(logits).token_ids() == [0]

    @pytest.mark.parametrize("p", [0.0, -0.1, 1.5])
    def test_invalid_p(self, p):
        with pytest.raises(ValidationError):
            TopPSampler(p=p)

    def test_invalid_min_keep(self):
        with pytest.raises(ValidationError):
            TopPSampler(min_keep=-1)


class TestTailFreeSampler:
    """Test the TailFreeSampler class."""

    # First differences [0.1, 0.15, 0.05, 0.05], second differences
    # [0.05, 0.1, 0.0], normalized cumulative sums [1/3, 1, 1]
    CURVE = [0.4, 0.3, 0.15, 0.1, 0.05]

    def test_defaults_disable_sampler(self):
        sampler = TailFreeSampler()
        assert sampler.z == 1.0
        logits = sampler.sample(Logits.from_probabilities(self.CURVE))
        assert len(logits) == 5

    def test_z_one_is_identity(self):
        logits = Logits.from_scores([3.0, 1.0, 0.5, 0.1, -2.0])
        result = TailFreeSampler(z=1.0, min_keep=0).sample(logits)
        assert result.scores() == [3.0, 1.0, 0.5, 0.1, -2.0]
        # No-op paths do not even compute the softmax
        assert not result.softmax_valid

    @pytest.mark.parametrize("scores", [[], [1.0], [2.0, 1.0]])
    def test_too_few_entries_is_identity(self, scores):
        logits = Logits.from_scores(scores)
        result = TailFreeSampler(z=0.0, min_keep=0).sample(logits)
        assert result.scores() == sorted(scores, reverse=True)

    def test_stops_at_curvature_index(self):
        logits = TailFreeSampler(z=0.5, min_keep=1).sample(Logits.from_probabilities(self.CURVE))
        assert logits.token_ids() == [0]

    def test_min_keep_moves_stop(self):
        logits = TailFreeSampler(z=0.5, min_keep=2).sample(Logits.from_probabilities(self.CURVE))
        assert logits.token_ids() == [0, 1]

    def test_strict_comparison_and_min_keep_zero(self):
        # 1/3 > 0.2 at index 0 and min_keep=0 allows stopping there
        logits = TailFreeSampler(z=0.2, min_keep=0).sample(Logits.from_probabilities(self.CURVE))
        assert len(logits) == 0

    def test_keeps_everything_without_stop(self):
        logits = TailFreeSampler(z=0.5, min_keep=3).sample(Logits.from_probabilities(self.CURVE))
        assert len(logits) == 5
        assert logits.softmax_valid

    def test_arithmetic_progression_raises(self):
        logits = Logits.from_probabilities([0.4375, 0.3125, 0.1875, 0.0625])
        with pytest.raises(InternalError):
            TailFreeSampler(z=0.5).sample(logits)

    def test_uniform_scores_raise(self):
        with pytest.raises(InternalError):
            TailFreeSampler(z=0.5).sample(Logits.from_scores([1.0, 1.0, 1.0, 1.0]))

    def test_decimal_linear_ramp_raises(self):
        # Second differences are rounding residue around 1e-17, not curvature
        logits = Logits.from_probabilities([0.4, 0.3, 0.2, 0.1])
        with pytest.raises(InternalError):
            TailFreeSampler(z=0.5, min_keep=1).sample(logits)
        assert len(logits) == 4

    def test_idempotent(self):
        sampler = TailFreeSampler(z=0.5, min_keep=2)
        logits = sampler.sample(Logits.from_probabilities(self.CURVE))
        assert len(sampler.sample(logits)) == 2

    def test_invalid_z(self):
        with pytest.raises(ValidationError):
            TailFreeSampler(z=-0.5)


class TestTopKSampler:
    """Test the TopKSampler class."""

    def test_keeps_k(self):
        logits = TopKSampler(k=2).sample(Logits.from_scores([1.0, 4.0, 3.0, 2.0]))
        assert logits.token_ids() == [1, 2]

    def test_min_keep_wins(self):
        logits = TopKSampler(k=1, min_keep=3).sample(Logits.from_scores([1.0, 4.0, 3.0, 2.0]))
        assert len(logits) == 3

    def test_zero_disables(self):
        logits = TopKSampler(k=0).sample(Logits.from_scores([1.0, 4.0, 3.0]))
        assert len(logits) == 3

    def test_invalid_k(self):
        with pytest.raises(ValidationError, match="Top-K"):
            TopKSampler(k=-1)


class TestTemperatureSampler:
    """Test the TemperatureSampler class."""

    def test_scales_logits(self):
        logits = TemperatureSampler(temperature=0.5).sample(Logits.from_scores([2.0, 1.0, -1.0]))
        assert logits.scores() == [4.0, 2.0, -2.0]

    def test_sharpens_distribution(self):
        plain = Logits.from_scores([2.0, 1.0]).ensure_softmax()
        sharp = TemperatureSampler(temperature=0.5).sample(Logits.from_scores([2.0, 1.0]))
        sharp.ensure_softmax()
        assert sharp[0].prob > plain[0].prob

    @pytest.mark.parametrize("temperature", [0.0, 1.0])
    def test_noop_temperatures(self, temperature):
        logits = Logits.from_probabilities([0.7, 0.3])
        TemperatureSampler(temperature=temperature).sample(logits)
        assert logits.softmax_valid
        assert logits.probabilities() == [0.7, 0.3]

    def test_invalid_temperature(self):
        with pytest.raises(ValidationError, match="Temperature must be a non-negative float."):
            TemperatureSampler(temperature=-0.1)


SAMPLERS = [
    TopPSampler(p=0.9, min_keep=1),
    TopPSampler(p=0.5, min_keep=5),
    TopPSampler(p=0.99, min_keep=0),
    TailFreeSampler(z=0.95, min_keep=1),
    TailFreeSampler(z=0.5, min_keep=4),
    TailFreeSampler(z=0.25, min_keep=10),
    TopKSampler(k=5, min_keep=1),
    TopKSampler(k=2, min_keep=8),
]


@pytest.mark.parametrize("sampler", SAMPLERS, ids=repr)
@pytest.mark.parametrize("seed,size", [(0, 3), (1, 8), (2, 32), (3, 100)])
class TestSamplerProperties:
    """Properties every truncating sampler must satisfy."""

    def test_monotonic_shrink(self, sampler, seed, size):
        logits = random_logits(seed, size)
        assert len(sampler.sample(logits)) <= size

    def test_min_keep_floor(self, sampler, seed, size):
        logits = random_logits(seed, size)
        assert len(sampler.sample(logits)) >= min(sampler.min_keep, size)

    def test_order_preserved(self, sampler, seed, size):
        logits = random_logits(seed, size)
        before = logits.token_ids()
        after = sampler.sample(logits).token_ids()
        assert after == before[: len(after)]

    def test_second_pass(self, sampler, seed, size):
        logits = sampler.sample(random_logits(seed, size))
        first = logits.token_ids()
        second = sampler.sample(logits).token_ids()

        if isinstance(sampler, TopKSampler) or len(first) == size or len(first) <= sampler.min_keep:
            # Nothing was cut, or the cut was made by the min_keep floor
            assert second == first
        else:
            # Renormalized survivors can move the stop earlier, never later
            assert second == first[: len(second)]
