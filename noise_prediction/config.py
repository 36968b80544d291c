"""Configuration management for noise prediction system."""
from dataclasses import dataclass, fields
from functools import lru_cache
import logging
import logging.handlers
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
import yaml

from .models import ValidationError

@dataclass
class APIConfig:
    """API configuration settings."""
    base_url: str
    token: str = ""
    timeout: int = 10

@dataclass(frozen=True)
class TrustPolicy:
    """Thresholds and decay constants of the data trust policy."""
    freshness_minutes: int = 60          # Latest sample is trusted outright below this age
    confident_min_count: int = 40
    moderate_min_count: int = 20
    recency_cutoff_days: float = 30.0    # Older samples never get a weighted vote
    advanced_hour_window: int = 2
    moderate_hour_window: int = 3
    exponential_decay_days: float = 10.0
    recent_boost_days: float = 14.0
    recent_boost_factor: float = 2.0
    harmonic_decay_days: float = 7.0
    circular_hours: bool = False         # Treat 23:00 and 00:00 as one hour apart

    def __post_init__(self) -> None:
        """Validate policy constants."""
        if self.freshness_minutes <= 0:
            raise ValidationError("freshness_minutes must be positive")
        if not 0 < self.moderate_min_count < self.confident_min_count:
            raise ValidationError(
                "Count thresholds must satisfy 0 < moderate_min_count < confident_min_count"
            )
        if self.recency_cutoff_days <= 0:
            raise ValidationError("recency_cutoff_days must be positive")
        for name in ('advanced_hour_window', 'moderate_hour_window'):
            if not 0 <= getattr(self, name) <= 23:
                raise ValidationError(f"{name} must be between 0 and 23")
        if self.exponential_decay_days <= 0 or self.harmonic_decay_days <= 0:
            raise ValidationError("Decay constants must be positive")
        if self.recent_boost_factor <= 0:
            raise ValidationError("recent_boost_factor must be positive")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TrustPolicy':
        """Build a policy from a mapping of overrides."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValidationError(f"Unknown trust policy keys: {', '.join(sorted(unknown))}")
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: Path) -> 'TrustPolicy':
        """Load policy overrides from a YAML file."""
        with open(path, encoding='utf-8') as fh:
            data = yaml.safe_load(fh) or {}
        if not isinstance(data, dict):
            raise ValidationError(f"Trust policy file {path} must contain a mapping")
        return cls.from_dict(data)

@dataclass(frozen=True)
class Config:
    """Application configuration."""
    measurements: APIConfig
    policy: TrustPolicy = TrustPolicy()
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_file: Optional[Path] = None
    timezone: str = "UTC"

    @classmethod
    @lru_cache(maxsize=1)
    def load(cls) -> 'Config':
        """Load configuration from environment and defaults."""
        load_dotenv()
        policy_file = os.getenv("TRUST_POLICY_FILE")
        return cls(
            measurements=APIConfig(
                base_url=os.getenv("NOISE_API_URL", "http://localhost:3000/api"),
                token=os.getenv("NOISE_API_TOKEN", ""),
                timeout=int(os.getenv("MEASUREMENT_TIMEOUT", "10")),
            ),
            policy=TrustPolicy.from_yaml(Path(policy_file)) if policy_file else TrustPolicy(),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            timezone=os.getenv("TIMEZONE", "UTC"),
            log_file=Path(os.getenv("LOG_FILE")) if os.getenv("LOG_FILE") else None
        )

def setup_logging(config: Config) -> logging.Logger:
    """Configure application logging."""
    logger = logging.getLogger("noise_prediction")
    logger.setLevel(config.log_level)

    if logger.handlers:
        return logger

    formatter = logging.Formatter(config.log_format)

    # Always log to stdout
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Optionally log to file
    if config.log_file:
        file_handler = logging.handlers.RotatingFileHandler(
            config.log_file,
            maxBytes=10_485_760,  # 10MB
            backupCount=5
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
