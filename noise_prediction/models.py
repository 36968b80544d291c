"""Domain models and type definitions for noise prediction system."""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, NewType, Optional

# Custom types for domain concepts
NoiseLevel = NewType('NoiseLevel', float)
LocationId = NewType('LocationId', str)

class NoiseError(Exception):
    """Base exception for noise prediction system."""
    pass

class ValidationError(NoiseError):
    """Raised when data validation fails."""
    pass

class DataSourceError(NoiseError):
    """Raised when data source operations fail."""
    pass

class TrustTier(Enum):
    """How a noise prediction was derived."""
    NEW_CAFE = "NEW_CAFE"
    FRESH_DATA = "FRESH_DATA"
    CONFIDENT_PREDICTION = "CONFIDENT_PREDICTION"
    MODERATE_CONFIDENCE = "MODERATE_CONFIDENCE"
    LIMITED_DATA = "LIMITED_DATA"
    ERROR = "ERROR"

class Confidence(Enum):
    """Coarse trust label shown to consumers."""
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    HIGHEST = "highest"

TIER_CONFIDENCE: Dict[TrustTier, Confidence] = {
    TrustTier.NEW_CAFE: Confidence.NONE,
    TrustTier.FRESH_DATA: Confidence.HIGHEST,
    TrustTier.CONFIDENT_PREDICTION: Confidence.HIGH,
    TrustTier.MODERATE_CONFIDENCE: Confidence.MEDIUM,
    TrustTier.LIMITED_DATA: Confidence.LOW,
    TrustTier.ERROR: Confidence.NONE,
}

@dataclass(frozen=True)
class Measurement:
    """Immutable noise sample taken at a location."""
    value: NoiseLevel
    measured_at: datetime

    def __post_init__(self) -> None:
        """Validate noise measurement."""
        try:
            value = float(self.value)
        except (TypeError, ValueError):
            raise ValidationError(f"Noise level must be numeric, got {self.value!r}")
        if not math.isfinite(value):
            raise ValidationError(f"Noise level must be finite, got {value}")
        object.__setattr__(self, 'value', NoiseLevel(value))
        if not isinstance(self.measured_at, datetime):
            raise ValidationError("Measurement time must be a datetime")
        if not self.measured_at.tzinfo:
            raise ValidationError("Timestamp must be timezone-aware")

@dataclass(frozen=True)
class PredictionResult:
    """Predicted noise level for one location together with its trust label."""
    noise_db: Optional[NoiseLevel]
    trust_tier: TrustTier
    confidence: Confidence
    measurement_count: int
    minutes_ago: Optional[int] = None

    def __post_init__(self) -> None:
        """Validate prediction attributes."""
        if self.confidence is not TIER_CONFIDENCE[self.trust_tier]:
            raise ValidationError(
                f"Confidence {self.confidence.value} does not match tier {self.trust_tier.value}"
            )
        if self.measurement_count < 0:
            raise ValidationError("Measurement count cannot be negative")
        if self.minutes_ago is not None and self.trust_tier is not TrustTier.FRESH_DATA:
            raise ValidationError("minutes_ago is only reported for fresh data")
        no_value = self.trust_tier in (TrustTier.NEW_CAFE, TrustTier.ERROR)
        if no_value != (self.noise_db is None):
            raise ValidationError(
                f"Tier {self.trust_tier.value} {'forbids' if no_value else 'requires'} a noise level"
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase payload served to clients."""
        payload: Dict[str, Any] = {
            'noiseDb': self.noise_db,
            'trustTier': self.trust_tier.value,
            'confidence': self.confidence.value,
            'measurementCount': self.measurement_count,
        }
        if self.trust_tier is TrustTier.FRESH_DATA:
            payload['minutesAgo'] = self.minutes_ago
        return payload
