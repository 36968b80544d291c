"""Weight calculations for temporal noise models."""
import math
from typing import Sequence

import numpy as np

from ..models import Measurement, NoiseLevel, ValidationError

def exponential_decay(
    days_ago: float,
    decay_days: float,
    boost_days: float,
    boost_factor: float
) -> float:
    """exp(-days/decay), multiplied by ``boost_factor`` inside the boost window."""
    weight = math.exp(-days_ago / decay_days)
    if days_ago <= boost_days:
        weight *= boost_factor
    return weight

def harmonic_decay(days_ago: float, decay_days: float) -> float:
    """1 / (1 + days/decay): gentler than exponential decay."""
    return 1.0 / (1.0 + days_ago / decay_days)

def mean_value(measurements: Sequence[Measurement]) -> NoiseLevel:
    """Unweighted mean noise level."""
    if not measurements:
        raise ValidationError("No measurements to average")
    return NoiseLevel(float(np.mean([m.value for m in measurements])))
