"""Tests for the advanced, moderate and simple noise models."""

import math

import pytest

from noise_prediction.prediction.temporal_models import (
    AdvancedTemporalModel, ModerateTemporalModel, SimpleAverager
)
from noise_prediction.prediction.base_model import TemporalModel
from noise_prediction.clock import EvaluationTime, FixedClock
from noise_prediction.config import TrustPolicy

from conftest import freshest_first


class TestAdvancedTemporalModel:

    def test_weighted_average(self, policy, evaluation, make_measurement):
        model = AdvancedTemporalModel(policy)
        samples = [make_measurement(60.0, days=1), make_measurement(80.0, days=20)]
        w1 = 2 * math.exp(-0.1)
        w2 = math.exp(-2.0)
        expected = (60.0 * w1 + 80.0 * w2) / (w1 + w2)
        assert model.predict(samples, evaluation) == pytest.approx(expected)

    def test_hour_window(self, policy, evaluation, make_measurement):
        model = AdvancedTemporalModel(policy)
        assert model.qualifies(make_measurement(days=1, hours=2), evaluation)
        assert model.qualifies(make_measurement(days=1, hours=-2), evaluation)
        assert not model.qualifies(make_measurement(days=1, hours=3), evaluation)

    def test_recency_cutoff(self, policy, evaluation, make_measurement):
        model = AdvancedTemporalModel(policy)
        # 30 days back from a Wednesday is a Monday
        assert model.qualifies(make_measurement(days=30), evaluation)
        assert not model.qualifies(make_measurement(days=30, seconds=1), evaluation)

    def test_weekend_samples_excluded_on_weekday(self, policy, evaluation, make_measurement):
        model = AdvancedTemporalModel(policy)
        saturday = make_measurement(days=4)
        assert saturday.measured_at.weekday() == 5
        assert not model.qualifies(saturday, evaluation)

    def test_day_type_matching(self, policy, evaluation, make_measurement):
        model = AdvancedTemporalModel(policy)
        samples = []
        for days in range(1, 30):
            for hours in (0, 1):
                sample = make_measurement(days=days, hours=hours)
                value = 90.0 if sample.measured_at.weekday() >= 5 else 50.0
                samples.append(make_measurement(value, days=days, hours=hours))
        samples = freshest_first(samples)
        assert model.predict(samples, evaluation) == pytest.approx(50.0)

    def test_weekday_samples_excluded_on_weekend(self, policy, make_measurement):
        sunday = make_measurement(days=3).measured_at
        assert sunday.weekday() == 6
        evaluation = EvaluationTime.capture(FixedClock(sunday), "UTC")
        assert evaluation.is_weekend

        model = AdvancedTemporalModel(policy)
        saturday = make_measurement(80.0, days=4)
        prior_sunday = make_measurement(80.0, days=10)
        wednesday = make_measurement(50.0, days=7)
        assert model.qualifies(saturday, evaluation)
        assert model.qualifies(prior_sunday, evaluation)
        assert not model.qualifies(wednesday, evaluation)

        samples = freshest_first([saturday, wednesday, prior_sunday])
        assert model.predict(samples, evaluation) == pytest.approx(80.0)

    def test_falls_back_to_recent_mean(self, policy, evaluation, make_measurement):
        model = AdvancedTemporalModel(policy)
        recent_wrong_hour = [
            make_measurement(70.0, days=days, hours=hours)
            for days in range(1, 21) for hours in (12, 13)
        ]
        old_right_hour = [make_measurement(40.0, days=days) for days in range(40, 45)]
        samples = freshest_first(recent_wrong_hour + old_right_hour)
        assert model.predict(samples, evaluation) == pytest.approx(70.0)

    def test_falls_back_to_overall_mean(self, policy, evaluation, make_measurement):
        model = AdvancedTemporalModel(policy)
        samples = [make_measurement(50.0 + i, days=31 + i) for i in range(45)]
        expected = sum(m.value for m in samples) / len(samples)
        assert model.predict(samples, evaluation) == pytest.approx(expected)


class TestModerateTemporalModel:

    def test_weighted_average(self, policy, evaluation, make_measurement):
        model = ModerateTemporalModel(policy)
        samples = [make_measurement(60.0, days=7), make_measurement(90.0, days=14)]
        # weights 1/2 and 1/3
        assert model.predict(samples, evaluation) == pytest.approx(72.0)

    def test_hour_window(self, policy, evaluation, make_measurement):
        model = ModerateTemporalModel(policy)
        assert model.qualifies(make_measurement(days=1, hours=3), evaluation)
        assert model.qualifies(make_measurement(days=1, hours=-3), evaluation)
        assert not model.qualifies(make_measurement(days=1, hours=4), evaluation)

    def test_ignores_day_type(self, policy, evaluation, make_measurement):
        model = ModerateTemporalModel(policy)
        assert model.qualifies(make_measurement(days=4), evaluation)

    def test_falls_back_to_recent_mean(self, policy, evaluation, make_measurement):
        model = ModerateTemporalModel(policy)
        recent_wrong_hour = [make_measurement(70.0, days=d, hours=12) for d in range(1, 21)]
        old_right_hour = [make_measurement(40.0, days=d) for d in range(40, 45)]
        samples = freshest_first(recent_wrong_hour + old_right_hour)
        assert not any(model.qualifies(m, evaluation) for m in samples)
        assert model.predict(samples, evaluation) == pytest.approx(70.0)

    def test_circular_hours(self, make_measurement):
        midnight = make_measurement(days=1, hours=14).measured_at.replace(hour=0)
        evaluation = EvaluationTime.capture(FixedClock(midnight), "UTC")
        late = make_measurement(days=3, hours=15)  # 23:00
        assert not ModerateTemporalModel(TrustPolicy()).qualifies(late, evaluation)
        assert ModerateTemporalModel(TrustPolicy(circular_hours=True)).qualifies(late, evaluation)

    def test_falls_back_to_overall_mean(self, policy, evaluation, make_measurement):
        model = ModerateTemporalModel(policy)
        samples = [make_measurement(40.0 + 2 * i, days=35 + i) for i in range(25)]
        expected = sum(m.value for m in samples) / len(samples)
        assert model.predict(samples, evaluation) == pytest.approx(expected)


class TestSimpleAverager:

    def test_mean_of_everything(self, evaluation, make_measurement):
        samples = [
            make_measurement(50.0, hours=2),
            make_measurement(60.0, days=3, hours=7),
            make_measurement(85.0, days=90),
        ]
        assert SimpleAverager().predict(samples, evaluation) == pytest.approx(65.0)


class TestTemporalModel:

    def test_hour_windows_follow_policy(self):
        policy = TrustPolicy(advanced_hour_window=1, moderate_hour_window=5)
        assert AdvancedTemporalModel(policy).hour_window == 1
        assert ModerateTemporalModel(policy).hour_window == 5

    def test_base_is_abstract(self, policy):
        with pytest.raises(TypeError):
            TemporalModel(policy)
