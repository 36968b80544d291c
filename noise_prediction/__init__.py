"""QuietSpot noise prediction package."""
from .prediction.noise_predictor import NoisePredictor
from .prediction.trust_classifier import TrustTierClassifier
from .models import *
from .config import Config, TrustPolicy

__all__ = ['NoisePredictor', 'TrustTierClassifier', 'Config', 'TrustPolicy']
