"""Shared fixtures for the noise prediction test suite."""

import sys
import os
from datetime import datetime, timedelta

import pytest
import pytz

# Ensure project root is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from noise_prediction.clock import EvaluationTime, FixedClock
from noise_prediction.config import TrustPolicy
from noise_prediction.models import Measurement

# Wednesday afternoon
NOW = pytz.UTC.localize(datetime(2024, 5, 15, 14, 0, 0))


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def evaluation():
    """Evaluation time fixed at Wednesday 14:00 UTC."""
    return EvaluationTime.capture(FixedClock(NOW), "UTC")


@pytest.fixture
def policy():
    return TrustPolicy()


@pytest.fixture
def make_measurement():
    """Build a measurement a given time before NOW."""
    def _make(value=60.0, days=0, hours=0, minutes=0, seconds=0):
        delta = timedelta(days=days, hours=hours, minutes=minutes, seconds=seconds)
        return Measurement(value=value, measured_at=NOW - delta)
    return _make


def freshest_first(measurements):
    return sorted(measurements, key=lambda m: m.measured_at, reverse=True)
