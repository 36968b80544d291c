"""Base temporal model with filtering, weighted folding and fallbacks."""
from abc import ABC, abstractmethod
import logging
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..clock import EvaluationTime, hour_distance
from ..config import TrustPolicy
from ..models import Measurement, NoiseLevel
from .weights import mean_value

class TemporalModel(ABC):
    """Weighted average over samples recorded at a similar time of day.

    Subclasses choose the hour window, may narrow the filter further and
    define the per-sample weight. When nothing survives the filter the model
    falls back to the plain mean of the recent samples, then of all samples.
    """

    def __init__(self, policy: TrustPolicy, logger: Optional[logging.Logger] = None):
        self.policy = policy
        self.logger = logger or logging.getLogger(__name__)

    @property
    @abstractmethod
    def hour_window(self) -> int:
        """Largest clock-hour distance a sample may have from now."""
        ...

    @abstractmethod
    def weight(self, days_ago: float) -> float:
        ...

    def qualifies(self, measurement: Measurement, evaluation: EvaluationTime) -> bool:
        """Whether a sample gets a vote in the weighted average."""
        if evaluation.days_ago(measurement.measured_at) > self.policy.recency_cutoff_days:
            return False
        distance = hour_distance(
            evaluation.hour,
            evaluation.hour_of(measurement.measured_at),
            self.policy.circular_hours
        )
        return distance <= self.hour_window

    def fold(
        self,
        measurements: Sequence[Measurement],
        evaluation: EvaluationTime
    ) -> Tuple[float, float]:
        """Reduce samples to ``(weighted_sum, total_weight)``."""
        if not measurements:
            return 0.0, 0.0
        values = np.array([m.value for m in measurements], dtype=float)
        weights = np.array(
            [self.weight(evaluation.days_ago(m.measured_at)) for m in measurements],
            dtype=float
        )
        return float(np.dot(values, weights)), float(weights.sum())

    def predict(
        self,
        measurements: Sequence[Measurement],
        evaluation: EvaluationTime
    ) -> NoiseLevel:
        """Predict the current noise level from a non-empty history."""
        qualifying = [m for m in measurements if self.qualifies(m, evaluation)]
        weighted_sum, total_weight = self.fold(qualifying, evaluation)

        if total_weight > 0:
            self.logger.debug(
                f"{type(self).__name__}: {len(qualifying)}/{len(measurements)} samples "
                f"matched, total weight {total_weight:.3f}"
            )
            return NoiseLevel(weighted_sum / total_weight)

        return self._fallback(measurements, evaluation)

    def _fallback(
        self,
        measurements: Sequence[Measurement],
        evaluation: EvaluationTime
    ) -> NoiseLevel:
        recent: List[Measurement] = [
            m for m in measurements
            if evaluation.days_ago(m.measured_at) <= self.policy.recency_cutoff_days
        ]
        if recent:
            self.logger.debug(
                f"{type(self).__name__}: no matching samples, "
                f"averaging {len(recent)} recent samples"
            )
            return mean_value(recent)

        self.logger.debug(
            f"{type(self).__name__}: no recent samples, "
            f"averaging all {len(measurements)} samples"
        )
        return mean_value(measurements)
