# ailab_api.py
"""
[AILab 피부 분석 API 통신 담당]
얼굴 사진 1장을 AILab 피부 분석 API로 전송하고 원본 분석 결과를 받아옵니다.

AILab은 업무 에러도 HTTP 200으로 응답하므로 error_code를 먼저 확인하고,
AILab 에러 코드는 앱 에러 코드(ANALYSIS_00x)로 변환합니다.
"""

import logging

import requests

from .config import (
    AILAB_API_KEY, AILAB_BASE_URL, AILAB_ERROR_MAP, AILAB_SKIN_ANALYSIS_PATH, AILAB_TIMEOUT,
)
from .errors import ERROR_CODES, AnalysisProviderError, MissingResultError

# 로깅 설정
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

PROCESSING_FAILED = ERROR_CODES["ANALYSIS"]["PROCESSING_FAILED"]


def map_provider_error(provider_code: str) -> str:
    """AILab 에러 코드 -> 앱 에러 코드 (모르는 코드는 처리 실패)"""
    return AILAB_ERROR_MAP.get(provider_code or "", PROCESSING_FAILED)


def _parse_json(response) -> dict:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def analyze_skin_image(image_bytes: bytes, filename: str = "image.jpg",
                       api_key: str = None) -> dict:
    """
    AILab 피부 분석 API 호출

    Args:
        image_bytes (bytes): JPG 이미지 데이터
        filename (str): 전송할 파일명
        api_key (str): 미지정 시 환경변수 AILAB_API_KEY 사용

    Returns:
        dict: {"result": dict, "face_rectangle": dict|None, "warning": list}

    Raises:
        AnalysisProviderError: 키 미설정, 통신 실패, AILab 업무 에러
        MissingResultError: 응답에 result가 없는 경우
    """
    api_key = api_key or AILAB_API_KEY
    if not api_key:
        logger.error("⚠️ .env 파일에 AILAB_API_KEY가 설정되지 않았습니다.")
        raise AnalysisProviderError("AILab API key not configured", http_status=500)

    url = f"{AILAB_BASE_URL}{AILAB_SKIN_ANALYSIS_PATH}"
    headers = {"ailabapi-api-key": api_key}
    files = {"image": (filename, image_bytes, "image/jpeg")}

    try:
        logger.info("📤 AILab 피부 분석 요청 시작...")
        response = requests.post(url, headers=headers, files=files, timeout=AILAB_TIMEOUT)
    except requests.RequestException as e:
        logger.error(f"❌ AILab 통신 실패: {e}")
        raise AnalysisProviderError(f"Skin analysis request failed: {e}") from e

    data = _parse_json(response)

    # 1. 업무 에러 (HTTP 200이어도 error_code != 0)
    error_code = data.get("error_code", 0)
    if error_code:
        detail = data.get("error_detail") or {}
        provider_code = detail.get("code") or ""
        message = (detail.get("code_message") or detail.get("message")
                   or data.get("error_msg") or "Skin analysis failed")
        logger.warning(f"⚠️ AILab 분석 실패 ({provider_code or error_code}): {message}")
        raise AnalysisProviderError(
            message,
            code=map_provider_error(provider_code),
            provider_code=provider_code or None,
        )

    # 2. HTTP 에러
    if not response.ok:
        message = data.get("error_msg") or f"Request failed: HTTP {response.status_code}"
        logger.error(f"❌ AILab HTTP 에러: {message}")
        raise AnalysisProviderError(message)

    # 3. 결과 누락
    if not data.get("result"):
        logger.error("❌ AILab 응답에 분석 결과가 없습니다.")
        raise MissingResultError("No analysis result returned")

    logger.info("✅ AILab 피부 분석 완료")
    return {
        "result": data["result"],
        "face_rectangle": data.get("face_rectangle"),
        "warning": data.get("warning") or [],
    }
