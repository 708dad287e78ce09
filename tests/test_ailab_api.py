"""
Tests for the AILab skin analysis client (HTTP mocked).
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from services.ailab_api import analyze_skin_image, map_provider_error
from services.errors import AnalysisProviderError, MissingResultError


def _response(payload, ok=True, status_code=200):
    response = MagicMock()
    response.ok = ok
    response.status_code = status_code
    response.json.return_value = payload
    return response


class TestErrorMapping:

    def test_known_codes(self):
        assert map_provider_error("ERROR_NO_FACE_IN_FILE") == "ANALYSIS_002"
        assert map_provider_error("ERROR_INVALID_FILE") == "ANALYSIS_001"
        assert map_provider_error("ERROR_NOT_ENOUGH_CREDITS") == "ANALYSIS_003"

    def test_unknown_code_is_processing_failure(self):
        assert map_provider_error("SOMETHING_NEW") == "ANALYSIS_003"
        assert map_provider_error(None) == "ANALYSIS_003"


class TestAnalyzeSkinImage:

    def test_success(self):
        payload = {
            "error_code": 0,
            "face_rectangle": {"top": 1, "left": 2, "width": 3, "height": 4},
            "warning": ["imporper_headpose"],
            "result": {"skin_type": {"skin_type": 1}},
        }
        with patch("services.ailab_api.requests.post", return_value=_response(payload)) as post:
            data = analyze_skin_image(b"jpeg-bytes", api_key="secret")

        assert data["result"] == {"skin_type": {"skin_type": 1}}
        assert data["face_rectangle"]["width"] == 3
        assert data["warning"] == ["imporper_headpose"]

        _, kwargs = post.call_args
        assert kwargs["headers"] == {"ailabapi-api-key": "secret"}
        assert kwargs["files"]["image"][1] == b"jpeg-bytes"
        assert post.call_args[0][0].endswith("/api/portrait/analysis/skin-analysis")

    def test_business_error_is_mapped(self):
        payload = {
            "error_code": 1001,
            "error_msg": "failed",
            "error_detail": {"code": "ERROR_NO_FACE_IN_FILE", "code_message": "No face in image"},
        }
        with patch("services.ailab_api.requests.post", return_value=_response(payload)):
            with pytest.raises(AnalysisProviderError) as exc_info:
                analyze_skin_image(b"jpeg-bytes", api_key="secret")

        assert exc_info.value.code == "ANALYSIS_002"
        assert exc_info.value.provider_code == "ERROR_NO_FACE_IN_FILE"
        assert exc_info.value.message == "No face in image"

    def test_http_error(self):
        response = _response({"error_code": 0}, ok=False, status_code=503)
        with patch("services.ailab_api.requests.post", return_value=response):
            with pytest.raises(AnalysisProviderError) as exc_info:
                analyze_skin_image(b"jpeg-bytes", api_key="secret")
        assert exc_info.value.code == "ANALYSIS_003"

    def test_unparseable_body(self):
        response = _response(None, ok=False, status_code=500)
        response.json.side_effect = ValueError("not json")
        with patch("services.ailab_api.requests.post", return_value=response):
            with pytest.raises(AnalysisProviderError):
                analyze_skin_image(b"jpeg-bytes", api_key="secret")

    def test_network_failure(self):
        with patch("services.ailab_api.requests.post", side_effect=requests.Timeout("slow")):
            with pytest.raises(AnalysisProviderError) as exc_info:
                analyze_skin_image(b"jpeg-bytes", api_key="secret")
        assert exc_info.value.code == "ANALYSIS_003"

    def test_missing_result(self):
        with patch("services.ailab_api.requests.post", return_value=_response({"error_code": 0})):
            with pytest.raises(MissingResultError):
                analyze_skin_image(b"jpeg-bytes", api_key="secret")

    def test_missing_api_key(self):
        with patch("services.ailab_api.AILAB_API_KEY", ""), \
                patch("services.ailab_api.requests.post") as post:
            with pytest.raises(AnalysisProviderError) as exc_info:
                analyze_skin_image(b"jpeg-bytes")
        assert exc_info.value.code == "ANALYSIS_003"
        post.assert_not_called()
