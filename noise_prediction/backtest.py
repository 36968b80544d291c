"""Backtesting the data trust policy against a location's own history."""
import asyncio
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from .clock import EvaluationTime, FixedClock
from .config import Config, setup_logging
from .measurements import MeasurementApiClient
from .models import LocationId, Measurement, TrustTier
from .prediction import TrustTierClassifier

@dataclass
class BacktestResult:
    """Single replayed measurement."""
    measured_at: datetime
    actual: float
    prediction: Optional[float]
    trust_tier: TrustTier
    error: Optional[float]

@dataclass
class BacktestSummary:
    """Summary of backtest results."""
    location_id: LocationId
    total_samples: int
    valid_samples: int
    mae: Decimal
    rmse: Decimal
    bias: Decimal
    tier_counts: Dict[TrustTier, int]
    results: List[BacktestResult]

def replay_history(
    measurements: Sequence[Measurement],
    classifier: TrustTierClassifier,
    timezone: str = "UTC"
) -> List[BacktestResult]:
    """Predict every measurement from the strictly older ones, as of its own time."""
    results = []
    for index, held_out in enumerate(measurements):
        prior = [
            m for m in measurements[index + 1:]
            if m.measured_at < held_out.measured_at
        ]
        evaluation = EvaluationTime.capture(FixedClock(held_out.measured_at), timezone)
        prediction = classifier.classify(prior, evaluation)

        error = None
        if prediction.noise_db is not None:
            error = float(prediction.noise_db) - float(held_out.value)

        results.append(BacktestResult(
            measured_at=held_out.measured_at,
            actual=float(held_out.value),
            prediction=float(prediction.noise_db) if prediction.noise_db is not None else None,
            trust_tier=prediction.trust_tier,
            error=error
        ))
    return results

def summarize(
    location_id: LocationId,
    results: List[BacktestResult]
) -> Optional[BacktestSummary]:
    """Aggregate error statistics; None when nothing could be predicted."""
    errors = [r.error for r in results if r.error is not None]
    if not errors:
        return None

    return BacktestSummary(
        location_id=location_id,
        total_samples=len(results),
        valid_samples=len(errors),
        mae=Decimal(str(np.mean(np.abs(errors)))).quantize(Decimal('0.1')),
        rmse=Decimal(str(np.sqrt(np.mean(np.square(errors))))).quantize(Decimal('0.1')),
        bias=Decimal(str(np.mean(errors))).quantize(Decimal('0.1')),
        tier_counts=dict(Counter(r.trust_tier for r in results)),
        results=results
    )

def write_results(
    location_id: LocationId,
    results: List[BacktestResult],
    output_dir: Path = Path('backtest_results')
) -> Path:
    """Save replayed measurements as CSV."""
    output_dir.mkdir(exist_ok=True)
    df = pd.DataFrame([
        {
            'Measured_At': r.measured_at.isoformat(),
            'Actual': r.actual,
            'Predicted': r.prediction,
            'Error': r.error,
            'Trust_Tier': r.trust_tier.value
        }
        for r in results
    ])
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    path = output_dir / f'backtest_{location_id}_{timestamp}.csv'
    df.to_csv(path, index=False)
    return path

async def run_backtest(location_id: str) -> Optional[BacktestSummary]:
    """Main backtest routine."""
    config = Config.load()
    logger = setup_logging(config)

    try:
        async with MeasurementApiClient(config.measurements, logger) as client:
            measurements = await client.get_measurements(LocationId(location_id))
            logger.info(f"Starting backtest for {location_id} over {len(measurements)} measurements")

            classifier = TrustTierClassifier(config.policy, logger)
            results = replay_history(measurements, classifier, config.timezone)
            summary = summarize(LocationId(location_id), results)

            if summary is None:
                logger.warning(f"No predictions could be replayed for {location_id}")
                return None

            path = write_results(LocationId(location_id), results)
            tiers = '\n'.join(
                f"  {tier.value}: {count}" for tier, count in summary.tier_counts.items()
            )
            logger.info(f"""
\nBacktest Summary for {location_id}
{'='*50}
Total Samples: {summary.total_samples}
Valid Samples: {summary.valid_samples}
Mean Absolute Error: {summary.mae} dB
Root Mean Square Error: {summary.rmse} dB
Bias: {summary.bias} dB
Tiers:
{tiers}
Results: {path}
            """)
            return summary

    except Exception:
        logger.exception("Backtest failed")
        raise

def main():
    """CLI entry point."""
    try:
        location_id = input("Enter location ID: ").strip()
        asyncio.run(run_backtest(location_id))

    except KeyboardInterrupt:
        print("\nBacktest cancelled by user")
    except Exception as e:
        print(f"\nBacktest failed: {e}")

if __name__ == "__main__":
    main()
