"""
Tests for history search filter conditions.
"""

from services.filters import get_filter_query


class TestFilterQuery:

    def test_score_bands(self):
        assert get_filter_query("good") == ("AND a.score >= %s", 85)
        assert get_filter_query("low") == ("AND a.score < %s", 60)

    def test_concern_filters_cover_both_report_shapes(self):
        for condition, field in (("acne", "count"), ("dark_circle", "type"), ("blackhead", "severity")):
            sql, value = get_filter_query(condition)
            assert value is None
            assert f"'{condition}'->>'{field}'" in sql
            assert f'"type": "{condition}"' in sql

    def test_unknown_condition(self):
        assert get_filter_query("sparkly") is None
        assert get_filter_query(None) is None
