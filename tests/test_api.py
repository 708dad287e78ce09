"""
Integration tests for the HTTP API with the database layer patched out.
"""

from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from services.errors import AnalysisProviderError


@pytest.fixture
def known_user():
    with patch("main.check_user_exists_db", return_value=True):
        yield


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestAnalyze:

    def test_analyze_returns_report(self, client, known_user, concerns_raw, tmp_path):
        provider = {"result": concerns_raw, "face_rectangle": {"top": 0, "left": 0, "width": 100, "height": 100},
                    "warning": []}
        with patch("services.skin_analyzer.UPLOAD_DIR", str(tmp_path)), \
                patch("services.skin_analyzer.analyze_skin_image", return_value=provider), \
                patch("services.skin_analyzer.save_skin_report_db", return_value=42) as save:
            response = client.post(
                "/analyze",
                data={"user_id": "u1"},
                files={"file": ("face.jpg", b"\xff\xd8jpeg", "image/jpeg")},
            )

        assert response.status_code == 200
        body = response.json()
        assert body["analysis_id"] == 42
        assert body["report"]["kind"] == "advanced"
        assert body["report"]["overall_score"] == 71
        assert body["report"]["acne"]["count"] == 2

        user_id, image_path, stored = save.call_args[0]
        assert user_id == "u1"
        assert image_path.startswith(str(tmp_path))
        assert stored == body["report"]

    def test_provider_error_uses_stable_code(self, client, known_user, tmp_path):
        error = AnalysisProviderError("No face", code="ANALYSIS_002", provider_code="ERROR_NO_FACE_IN_FILE")
        with patch("services.skin_analyzer.UPLOAD_DIR", str(tmp_path)), \
                patch("services.skin_analyzer.analyze_skin_image", side_effect=error):
            response = client.post(
                "/analyze",
                data={"user_id": "u1"},
                files={"file": ("face.jpg", b"\xff\xd8jpeg", "image/jpeg")},
            )

        assert response.status_code == 502
        assert response.json()["error"]["code"] == "ANALYSIS_002"

    def test_empty_image_rejected(self, client, known_user):
        response = client.post(
            "/analyze",
            data={"user_id": "u1"},
            files={"file": ("face.jpg", b"", "image/jpeg")},
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "ANALYSIS_001"

    def test_unknown_user(self, client):
        with patch("main.check_user_exists_db", return_value=False):
            response = client.post(
                "/analyze",
                data={"user_id": "ghost"},
                files={"file": ("face.jpg", b"\xff\xd8jpeg", "image/jpeg")},
            )
        assert response.status_code == 401


class TestAnalysisLookup:

    def test_not_found(self, client):
        with patch("main.get_skin_report_db", return_value=None):
            response = client.get("/analysis/999")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "ANALYSIS_004"

    def test_found(self, client):
        record = {"analysis_id": 7, "user_id": "u1", "report": {"overall_score": 90}}
        with patch("main.get_skin_report_db", return_value=record):
            response = client.get("/analysis/7", params={"user_id": "u1"})
        assert response.status_code == 200
        assert response.json()["data"]["report"]["overall_score"] == 90


class TestTrend:

    def test_empty_week(self, client, known_user):
        with patch("services.skin_history.get_score_history_db", return_value=[]):
            response = client.get("/user/skin-reports", params={"user_id": "u1", "period": "week"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["period"] == "week"
        assert len(data["daily_scores"]) == 7
        assert all(day["score"] is None for day in data["daily_scores"])
        assert data["average_score"] == 0
        assert data["change_percent"] == 0

    def test_month_counts_current_window_only(self, client, known_user):
        now = datetime.now(timezone.utc)
        history = [(80, now.replace(microsecond=0)), (60, datetime(2000, 1, 1, tzinfo=timezone.utc))]
        with patch("services.skin_history.get_score_history_db", return_value=history):
            response = client.get("/user/skin-reports", params={"user_id": "u1"})

        data = response.json()["data"]
        assert data["period"] == "month"
        assert data["analysis_count"] <= 1
        assert len(data["daily_scores"]) >= 30

    def test_invalid_period(self, client, known_user):
        response = client.get("/user/skin-reports", params={"user_id": "u1", "period": "year"})
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_summary(self, client, known_user):
        history = [
            (80, datetime(2026, 10, 19, 8, tzinfo=timezone.utc)),
            (60, datetime(2026, 10, 20, 8, tzinfo=timezone.utc)),
        ]
        with patch("services.skin_history.get_score_history_db", return_value=history):
            response = client.get("/user/skin-reports/summary", params={"user_id": "u1", "unit": "week"})

        assert response.status_code == 200
        assert response.json()["data"] == [{"period_start": "2026-10-19", "average_score": 70.0}]


class TestCheckin:

    def test_checkin_with_badge(self, client, known_user):
        result = {"current_streak": 7, "last_checkin_date": "2026-10-19", "outcome": "extended", "badge": "novice"}
        with patch("main.checkin_user_db", return_value=result):
            response = client.post("/user/checkin", json={"user_id": "u1"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["current_streak"] == 7
        assert data["badge_label"] == "护肤新人"

    def test_checkin_failure(self, client, known_user):
        with patch("main.checkin_user_db", return_value=None):
            response = client.post("/user/checkin", json={"user_id": "u1"})
        assert response.status_code == 500


class TestHistorySearch:

    def test_search_passes_filters(self, client, known_user):
        result = {"total_count": 0, "total_pages": 0, "current_page": 2, "records": []}
        with patch("main.search_skin_history_db", return_value=result) as search:
            response = client.get("/history/search", params={"user_id": "u1", "condition": "acne", "page": 2})

        assert response.status_code == 200
        assert response.json()["filter"] == "acne"
        assert search.call_args.kwargs["condition"] == "acne"
        assert search.call_args.kwargs["page"] == 2
