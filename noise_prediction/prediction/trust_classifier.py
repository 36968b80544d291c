"""Trust tier selection and prediction result assembly."""
from datetime import timedelta
import logging
from typing import Optional, Sequence

from ..clock import EvaluationTime
from ..config import TrustPolicy
from ..models import (
    Measurement, NoiseLevel, PredictionResult,
    TrustTier, TIER_CONFIDENCE
)
from .temporal_models import (
    AdvancedTemporalModel, ModerateTemporalModel, SimpleAverager
)

def assemble_result(
    tier: TrustTier,
    noise_db: Optional[NoiseLevel],
    measurement_count: int,
    minutes_ago: Optional[int] = None
) -> PredictionResult:
    """Package a tier's output together with its confidence label."""
    return PredictionResult(
        noise_db=noise_db,
        trust_tier=tier,
        confidence=TIER_CONFIDENCE[tier],
        measurement_count=measurement_count,
        minutes_ago=minutes_ago if tier is TrustTier.FRESH_DATA else None
    )

def error_result() -> PredictionResult:
    return assemble_result(TrustTier.ERROR, None, 0)

class TrustTierClassifier:
    """Decides how far a location's history can be trusted and predicts from it.

    Tiers are checked in priority order and the first match wins:

    1. no measurements                  -> NEW_CAFE
    2. freshest sample below freshness  -> FRESH_DATA (raw value)
    3. at least ``confident_min_count`` -> CONFIDENT_PREDICTION
    4. at least ``moderate_min_count``  -> MODERATE_CONFIDENCE
    5. anything else                    -> LIMITED_DATA

    The history must be ordered freshest first.
    """

    def __init__(
        self,
        policy: Optional[TrustPolicy] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.policy = policy or TrustPolicy()
        self.logger = logger or logging.getLogger(__name__)
        self._models = {
            TrustTier.CONFIDENT_PREDICTION: AdvancedTemporalModel(self.policy, self.logger),
            TrustTier.MODERATE_CONFIDENCE: ModerateTemporalModel(self.policy, self.logger),
            TrustTier.LIMITED_DATA: SimpleAverager(),
        }

    def select_tier(
        self,
        measurements: Sequence[Measurement],
        evaluation: EvaluationTime
    ) -> TrustTier:
        count = len(measurements)
        if count == 0:
            return TrustTier.NEW_CAFE
        freshness = timedelta(minutes=self.policy.freshness_minutes)
        if evaluation.age_of(measurements[0].measured_at) < freshness:
            return TrustTier.FRESH_DATA
        if count >= self.policy.confident_min_count:
            return TrustTier.CONFIDENT_PREDICTION
        if count >= self.policy.moderate_min_count:
            return TrustTier.MODERATE_CONFIDENCE
        return TrustTier.LIMITED_DATA

    def classify(
        self,
        measurements: Sequence[Measurement],
        evaluation: EvaluationTime
    ) -> PredictionResult:
        """Predict the current noise level; never raises."""
        try:
            measurements = tuple(measurements)
            count = len(measurements)
            tier = self.select_tier(measurements, evaluation)
            self.logger.debug(f"Selected {tier.value} for {count} measurements")

            if tier is TrustTier.NEW_CAFE:
                return assemble_result(tier, None, 0)

            if tier is TrustTier.FRESH_DATA:
                latest = measurements[0]
                return assemble_result(
                    tier,
                    latest.value,
                    count,
                    minutes_ago=evaluation.minutes_ago(latest.measured_at)
                )

            noise_db = self._models[tier].predict(measurements, evaluation)
            return assemble_result(tier, noise_db, count)

        except Exception:
            self.logger.exception("Failed to classify measurements")
            return error_result()
