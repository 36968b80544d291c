"""Per-location noise prediction over a measurement source."""
import asyncio
import logging
from typing import Dict, Iterable, Optional

from ..clock import Clock, EvaluationTime, SystemClock
from ..measurements import MeasurementSource
from ..models import LocationId, PredictionResult, DataSourceError
from .trust_classifier import TrustTierClassifier, error_result

class NoisePredictor:
    """Fetches a location's history and classifies it.

    Failures are contained per location: a timeout, a source error or a
    malformed history yields an ERROR result for that location only.
    """

    def __init__(
        self,
        source: MeasurementSource,
        classifier: Optional[TrustTierClassifier] = None,
        clock: Optional[Clock] = None,
        timezone: str = "UTC",
        timeout: Optional[float] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.source = source
        self.logger = logger or logging.getLogger(__name__)
        self.classifier = classifier or TrustTierClassifier(logger=self.logger)
        self.timezone = timezone
        self.clock = clock or SystemClock(timezone)
        self.timeout = timeout

    async def predict(self, location_id: LocationId) -> PredictionResult:
        """Predict the current noise level at one location."""
        try:
            measurements = await asyncio.wait_for(
                self.source.get_measurements(location_id),
                timeout=self.timeout
            )
        except asyncio.TimeoutError:
            self.logger.warning(
                f"Timed out after {self.timeout}s reading measurements for {location_id}"
            )
            return error_result()
        except Exception as e:
            self.logger.error(f"Failed to read measurements for {location_id}: {e}")
            return error_result()

        try:
            evaluation = EvaluationTime.capture(self.clock, self.timezone)
        except Exception as e:
            self.logger.error(f"Failed to capture evaluation time for {location_id}: {e}")
            return error_result()

        result = self.classifier.classify(measurements, evaluation)
        self._log_prediction_details(location_id, result)
        return result

    async def predict_many(
        self,
        location_ids: Iterable[LocationId]
    ) -> Dict[LocationId, PredictionResult]:
        """Predict for several locations concurrently, once per distinct id."""
        location_ids = list(dict.fromkeys(location_ids))
        results = await asyncio.gather(
            *(self.predict(location_id) for location_id in location_ids)
        )
        return dict(zip(location_ids, results))

    async def predict_all(self) -> Dict[LocationId, PredictionResult]:
        """Predict for every location the source knows about."""
        if not hasattr(self.source, 'get_location_ids'):
            raise DataSourceError(f"{type(self.source).__name__} cannot list locations")
        location_ids = await self.source.get_location_ids()
        return await self.predict_many(location_ids)

    def _log_prediction_details(
        self,
        location_id: LocationId,
        result: PredictionResult
    ) -> None:
        """Log detailed prediction information."""
        level = f"{result.noise_db:.1f} dB" if result.noise_db is not None else "n/a"
        self.logger.debug(
            f"\nNoise Prediction:"
            f"\nLocation: {location_id}"
            f"\nNoise Level: {level}"
            f"\nTrust Tier: {result.trust_tier.value}"
            f"\nConfidence: {result.confidence.value}"
            f"\nMeasurements: {result.measurement_count}"
        )
