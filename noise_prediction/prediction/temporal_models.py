"""Noise models used by the confident, moderate and limited-data tiers."""
from typing import Sequence

from ..clock import EvaluationTime
from ..models import Measurement, NoiseLevel
from .base_model import TemporalModel
from .weights import exponential_decay, harmonic_decay, mean_value

class AdvancedTemporalModel(TemporalModel):
    """Exponential decay over samples from the same day type and a narrow hour window."""

    @property
    def hour_window(self) -> int:
        return self.policy.advanced_hour_window

    def qualifies(self, measurement: Measurement, evaluation: EvaluationTime) -> bool:
        if not super().qualifies(measurement, evaluation):
            return False
        return evaluation.is_weekend_at(measurement.measured_at) == evaluation.is_weekend

    def weight(self, days_ago: float) -> float:
        return exponential_decay(
            days_ago,
            self.policy.exponential_decay_days,
            self.policy.recent_boost_days,
            self.policy.recent_boost_factor
        )

class ModerateTemporalModel(TemporalModel):
    """Harmonic recency decay over a wider hour window."""

    @property
    def hour_window(self) -> int:
        return self.policy.moderate_hour_window

    def weight(self, days_ago: float) -> float:
        return harmonic_decay(days_ago, self.policy.harmonic_decay_days)

class SimpleAverager:
    """Plain mean of every sample."""

    def predict(
        self,
        measurements: Sequence[Measurement],
        evaluation: EvaluationTime
    ) -> NoiseLevel:
        return mean_value(measurements)
