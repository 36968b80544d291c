"""Main script for current noise level prediction."""
import asyncio
import sys
from typing import Dict, List

from .models import LocationId, PredictionResult, TrustTier, NoiseError
from .config import Config, setup_logging
from .measurements import MeasurementApiClient
from .prediction import NoisePredictor, TrustTierClassifier

def format_prediction_output(location_id: str, prediction: PredictionResult) -> str:
    """Format one location's noise prediction."""
    if prediction.noise_db is None:
        level = "unknown"
    else:
        level = f"{prediction.noise_db:.1f} dB"

    output = f"""
Noise Prediction:
Location: {location_id}
Noise Level: {level}
Trust Tier: {prediction.trust_tier.value}
Confidence: {prediction.confidence.value}
Measurements: {prediction.measurement_count}"""

    if prediction.trust_tier is TrustTier.FRESH_DATA:
        output += f"\nMeasured {prediction.minutes_ago} minutes ago"

    return output

def parse_location_ids(raw: str) -> List[LocationId]:
    """Split a comma separated list of location ids."""
    return [LocationId(part.strip()) for part in raw.split(',') if part.strip()]

async def predict_noise(location_ids: List[LocationId]) -> Dict[LocationId, PredictionResult]:
    """Main prediction routine with proper error handling."""
    config = Config.load()
    logger = setup_logging(config)
    try:
        async with MeasurementApiClient(config.measurements, logger) as client:
            predictor = NoisePredictor(
                source=client,
                classifier=TrustTierClassifier(config.policy, logger),
                timezone=config.timezone,
                timeout=config.measurements.timeout,
                logger=logger
            )

            if location_ids:
                logger.info(f"Predicting noise levels for {len(location_ids)} locations")
                predictions = await predictor.predict_many(location_ids)
            else:
                logger.info("Predicting noise levels for all locations")
                predictions = await predictor.predict_all()

            for location_id, prediction in predictions.items():
                logger.info(format_prediction_output(location_id, prediction))
                if prediction.trust_tier is TrustTier.ERROR:
                    logger.warning(f"Prediction failed for location {location_id}")

            return predictions

    except NoiseError as e:
        logger.error(f"Noise prediction error: {e}")
        sys.exit(1)
    except Exception:
        logger.exception("Unexpected error occurred")
        sys.exit(1)

def main() -> None:
    """Entry point with async support."""
    try:
        raw = input("Enter location IDs (comma separated, blank for all): ")
        asyncio.run(predict_noise(parse_location_ids(raw)))
    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        sys.exit(0)

if __name__ == "__main__":
    main()
