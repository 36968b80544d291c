"""Tests for CLI formatting helpers."""

from noise_prediction.predict_now import format_prediction_output, parse_location_ids
from noise_prediction.models import TrustTier
from noise_prediction.prediction import assemble_result, error_result


def test_parse_location_ids():
    assert parse_location_ids(" 3, ,4 ") == ["3", "4"]
    assert parse_location_ids("") == []


def test_format_fresh_prediction():
    output = format_prediction_output("3", assemble_result(TrustTier.FRESH_DATA, 70.0, 1, minutes_ago=5))
    assert "Noise Level: 70.0 dB" in output
    assert "Trust Tier: FRESH_DATA" in output
    assert "Measured 5 minutes ago" in output


def test_format_failed_prediction():
    output = format_prediction_output("4", error_result())
    assert "Noise Level: unknown" in output
    assert "Confidence: none" in output
    assert "minutes ago" not in output
