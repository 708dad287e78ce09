# errors.py
"""
[에러 정의]
리포트 산출/트렌드 집계 과정에서 발생하는 예외와, 클라이언트에 내려줄
고정 에러 코드 및 응답 포맷을 정의합니다.
"""

from datetime import datetime, timezone
from typing import Optional


ERROR_CODES = {
    "ANALYSIS": {
        "IMAGE_INVALID": "ANALYSIS_001",
        "NO_FACE_DETECTED": "ANALYSIS_002",
        "PROCESSING_FAILED": "ANALYSIS_003",
        "NOT_FOUND": "ANALYSIS_004",
        "RESULT_MISSING": "ANALYSIS_005",
    },
    "TREND": {
        "MALFORMED_WINDOW": "TREND_001",
    },
    "VALIDATION": "VALIDATION_ERROR",
    "INTERNAL": "INTERNAL_ERROR",
}


def api_error(code: str, message: str, details: Optional[dict] = None) -> dict:
    """클라이언트용 에러 응답 본문을 생성합니다."""
    return {
        "error": {
            "code": code,
            "message": message,
            "details": details,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
    }


class SkinReportError(Exception):
    """모든 도메인 예외의 기본 클래스 (고정 에러 코드 + HTTP 상태)"""

    code = ERROR_CODES["INTERNAL"]
    http_status = 500

    def __init__(self, message: str, code: Optional[str] = None, http_status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if http_status is not None:
            self.http_status = http_status

    def to_response(self, details: Optional[dict] = None) -> dict:
        return api_error(self.code, self.message, details)


class MissingResultError(SkinReportError):
    """분석 API가 결과 자체를 주지 않은 경우 (일부 항목 누락과는 구분)"""

    code = ERROR_CODES["ANALYSIS"]["RESULT_MISSING"]
    http_status = 502


class MalformedWindowError(SkinReportError):
    """집계 기간(TimeWindow) 구성이 잘못된 경우. 생성 시점에만 발생합니다."""

    code = ERROR_CODES["TREND"]["MALFORMED_WINDOW"]
    http_status = 400


class AnalysisProviderError(SkinReportError):
    """외부 피부 분석 API 호출 실패"""

    code = ERROR_CODES["ANALYSIS"]["PROCESSING_FAILED"]
    http_status = 502

    def __init__(self, message: str, code: Optional[str] = None,
                 http_status: Optional[int] = None, provider_code: Optional[str] = None):
        super().__init__(message, code, http_status)
        self.provider_code = provider_code
