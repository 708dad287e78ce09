"""
Unit tests for the severity classifier.
"""

import pytest

from services.severity import classify_confidence, classify_severity, grade_of, has_issue


class TestConfidenceThresholds:

    @pytest.mark.parametrize("confidence,expected", [
        (0.0, 1),
        (0.49, 1),
        (0.5, 2),
        (0.79, 2),
        (0.8, 3),
        (1.0, 3),
    ])
    def test_thresholds(self, confidence, expected):
        assert classify_confidence(confidence) == expected

    def test_missing_confidence_is_low(self):
        assert classify_confidence(None) == 1


class TestClassifySeverity:

    def test_absent_item_has_no_severity(self):
        assert classify_severity(None) is None

    def test_uses_confidence_without_explicit_field(self):
        assert classify_severity({"value": 1, "confidence": 0.85}) == 3

    def test_explicit_field_wins(self):
        item = {"value": 1, "confidence": 0.95}
        assert classify_severity(item, explicit={"value": 1}) == 1

    def test_explicit_field_without_value_falls_back(self):
        item = {"value": 1, "confidence": 0.6}
        assert classify_severity(item, explicit={}) == 2


class TestPresence:

    def test_has_issue_only_when_value_is_one(self):
        assert has_issue({"value": 1})
        assert not has_issue({"value": 0})
        assert not has_issue(None)
        assert not has_issue({"confidence": 0.9})

    def test_grade_defaults_to_zero(self):
        assert grade_of(None) == 0
        assert grade_of({"value": 3}) == 3
