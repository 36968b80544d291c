"""Prediction module containing the data trust policy implementation."""
from .noise_predictor import NoisePredictor
from .trust_classifier import TrustTierClassifier, assemble_result, error_result
from .base_model import TemporalModel
from .temporal_models import AdvancedTemporalModel, ModerateTemporalModel, SimpleAverager

__all__ = [
    'NoisePredictor',
    'TrustTierClassifier',
    'assemble_result',
    'error_result',
    'TemporalModel',
    'AdvancedTemporalModel',
    'ModerateTemporalModel',
    'SimpleAverager'
]
