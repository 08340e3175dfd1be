"""Tests for the random-search autotuner."""

import math
import threading

import numpy as np
import pytest

from controllers.types import (
    EnvironmentConfig,
    GainBounds,
    InvalidConfig,
    PIDGains,
    ScoredGainSet,
    TuningConfig,
)
from tuning import autotuner
from tuning.autotuner import (
    SEARCH_DT,
    SEARCH_HORIZON,
    TuningCancelled,
    apply_gains,
    autotune,
    autotune_from_config,
    evaluate_gains,
    sample_gains,
)
from validation.metrics import compute_score


class TestSampleGains:
    """Test candidate generation."""

    def test_samples_within_default_bounds(self, seeded_rng):
        """Every sampled gain lies in its range."""
        bounds = GainBounds()
        for _ in range(200):
            assert bounds.contains(sample_gains(bounds, seeded_rng))

    def test_degenerate_range_is_fixed(self, seeded_rng):
        """A zero-width range always yields its single value."""
        bounds = GainBounds(kp=(3.0, 3.0), ki=(0.0, 0.0), kd=(7.5, 7.5))
        gains = sample_gains(bounds, seeded_rng)
        assert gains == PIDGains(kp=3.0, ki=0.0, kd=7.5)

    def test_draw_order_kp_ki_kd(self):
        """Gains are drawn kp first, then ki, then kd."""
        draws = np.random.default_rng(4).random(3)
        gains = sample_gains(GainBounds(), np.random.default_rng(4))
        assert gains.kp == pytest.approx(1.0 + draws[0] * 19.0)
        assert gains.ki == pytest.approx(draws[1] * 5.0)
        assert gains.kd == pytest.approx(draws[2] * 10.0)


class TestEvaluateGains:
    """Test single candidate evaluation."""

    def test_score_matches_metrics(self, calm_environment, reference_gains):
        """Attached metrics reproduce the score."""
        scored = evaluate_gains(reference_gains, calm_environment)
        assert scored.gains == reference_gains
        assert scored.score == compute_score(scored.metrics)


class TestAutotune:
    """Test the search loop."""

    def test_single_sample(self, default_environment):
        """One sample returns that candidate with a consistent score."""
        best = autotune(default_environment, sample_count=1, rng=42)

        assert GainBounds().contains(best.gains)
        assert math.isfinite(best.score)
        assert best.metrics is not None
        assert best.score == compute_score(best.metrics)

    def test_seeded_search_is_reproducible(self, default_environment):
        """Same seed gives the same best gains and score."""
        first = autotune(default_environment, sample_count=5, rng=2024)
        second = autotune(default_environment, sample_count=5, rng=2024)
        assert first == second

    def test_best_is_one_of_the_candidates(self, calm_environment):
        """Calm search only draws gains, so candidates can be replayed."""
        rng = np.random.default_rng(9)
        candidates = [sample_gains(GainBounds(), rng) for _ in range(4)]

        best = autotune(calm_environment, sample_count=4, rng=9)
        assert best.gains in candidates

    def test_best_score_is_minimum(self, calm_environment):
        """Returned score is the lowest among all evaluated candidates."""
        rng = np.random.default_rng(17)
        search_env = calm_environment.with_timing(SEARCH_HORIZON, SEARCH_DT)
        scores = [
            evaluate_gains(sample_gains(GainBounds(), rng), search_env).score
            for _ in range(4)
        ]

        best = autotune(calm_environment, sample_count=4, rng=17)
        assert best.score == min(scores)

    def test_search_uses_own_horizon(self):
        """The environment's horizon does not affect the search."""
        short = EnvironmentConfig(disturbance_magnitude=0.0, horizon=0.05)
        long = EnvironmentConfig(disturbance_magnitude=0.0, horizon=30.0)
        assert autotune(short, sample_count=2, rng=3) == autotune(long, sample_count=2, rng=3)

    def test_ties_keep_first_candidate(self, default_environment, monkeypatch):
        """Only a strictly lower score replaces the best."""
        def constant_score(gains, environment, rng=None, exit_resets=False):
            return ScoredGainSet(gains=gains, score=1.0)

        monkeypatch.setattr(autotuner, "evaluate_gains", constant_score)
        first = sample_gains(GainBounds(), np.random.default_rng(8))

        best = autotune(default_environment, sample_count=5, rng=8)
        assert best.gains == first

    @pytest.mark.parametrize("bad_score", [math.inf, math.nan])
    def test_fallback_when_no_finite_score(self, default_environment, monkeypatch, bad_score):
        """Fallback gains are returned with an infinite score."""
        def non_finite(gains, environment, rng=None, exit_resets=False):
            return ScoredGainSet(gains=gains, score=bad_score)

        monkeypatch.setattr(autotuner, "evaluate_gains", non_finite)
        best = autotune(default_environment, sample_count=3, rng=1,
                        fallback_gains=PIDGains(kp=4.0, ki=0.5, kd=1.0))

        assert best.gains == PIDGains(kp=4.0, ki=0.5, kd=1.0)
        assert best.score == math.inf

    def test_default_fallback_gains(self, default_environment, monkeypatch):
        """Without explicit fallback the reference gains are returned."""
        monkeypatch.setattr(
            autotuner, "evaluate_gains",
            lambda gains, environment, rng=None, exit_resets=False:
                ScoredGainSet(gains=gains, score=math.inf),
        )
        best = autotune(default_environment, sample_count=1, rng=1)
        assert best.gains == PIDGains(kp=5.0, ki=1.0, kd=2.0)

    @pytest.mark.parametrize("sample_count", [0, -3])
    def test_invalid_sample_count(self, default_environment, sample_count):
        """At least one sample is required."""
        with pytest.raises(InvalidConfig):
            autotune(default_environment, sample_count=sample_count)

    @pytest.mark.parametrize("bounds", [
        GainBounds(kp=(20.0, 1.0)),
        GainBounds(ki=(0.0, math.inf)),
        GainBounds(kd=(math.nan, 1.0)),
        GainBounds(kp=5.0),
        GainBounds(ki=(0.0, 1.0, 2.0)),
        GainBounds(kd=("low", "high")),
        GainBounds(kp=(None, 2.0)),
    ])
    def test_invalid_bounds(self, default_environment, bounds):
        """Malformed ranges are rejected before any sample."""
        with pytest.raises(InvalidConfig):
            autotune(default_environment, sample_count=1, bounds=bounds)

    def test_invalid_environment(self):
        """Plant parameters are validated too."""
        with pytest.raises(InvalidConfig):
            autotune(EnvironmentConfig(mass=0.0), sample_count=1)


class TestAutotuneProgressAndCancel:
    """Test progress reporting and cancellation."""

    def test_progress_reported_after_each_sample(self, calm_environment):
        """Callback receives (done, total, best) once per sample."""
        calls = []
        autotune(calm_environment, sample_count=3, rng=5,
                 progress_callback=lambda done, total, best: calls.append((done, total, best)))

        assert [c[0] for c in calls] == [1, 2, 3]
        assert all(c[1] == 3 for c in calls)
        assert all(c[2] is not None for c in calls)
        scores = [c[2].score for c in calls]
        assert all(b <= a for a, b in zip(scores, scores[1:]))

    def test_cancel_before_first_sample(self, default_environment):
        """A pre-set cancel event stops the search with no result."""
        event = threading.Event()
        event.set()

        with pytest.raises(TuningCancelled) as exc_info:
            autotune(default_environment, sample_count=10, cancel_event=event)
        assert exc_info.value.best is None
        assert exc_info.value.samples_done == 0

    def test_cancel_mid_search_keeps_best(self, calm_environment):
        """Cancelling between samples reports the best so far."""
        event = threading.Event()

        def cancel_after_two(done, total, best):
            if done == 2:
                event.set()

        with pytest.raises(TuningCancelled) as exc_info:
            autotune(calm_environment, sample_count=10, rng=6,
                     cancel_event=event, progress_callback=cancel_after_two)

        assert exc_info.value.samples_done == 2
        assert exc_info.value.best == autotune(calm_environment, sample_count=2, rng=6)


class TestConfigHelpers:
    """Test config-driven entry point and gain application."""

    def test_autotune_from_config(self, calm_environment):
        """TuningConfig settings are forwarded."""
        config = TuningConfig(sample_count=2, bounds=GainBounds(kp=(2.0, 3.0)))
        best = autotune_from_config(calm_environment, config, rng=10)

        assert 2.0 <= best.gains.kp <= 3.0
        assert best == autotune(calm_environment, sample_count=2,
                                bounds=GainBounds(kp=(2.0, 3.0)), rng=10)

    def test_apply_gains(self):
        """Applying a result yields exactly its gains."""
        scored = ScoredGainSet(gains=PIDGains(kp=7.0, ki=0.2, kd=3.0), score=12.0)
        assert apply_gains(scored) == PIDGains(kp=7.0, ki=0.2, kd=3.0)
