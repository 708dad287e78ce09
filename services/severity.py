# severity.py
"""
[심각도 분류기]
분석 API의 단일 항목({value, confidence})을 3단계 심각도(1=낮음, 2=보통, 3=높음)로 변환합니다.

규칙:
1. 별도의 심각도 필드(예: eye_pouch_severity)가 오면 그 값을 그대로 사용
2. 없으면 confidence로 분류 (>= 0.8 → 3, >= 0.5 → 2, 그 외 → 1)
3. 항목 자체가 없으면 심각도 없음(None)
"""

from typing import Optional

from core.numeric import to_number
from .config import SEVERITY_HIGH_CONFIDENCE, SEVERITY_MEDIUM_CONFIDENCE


def _value_of(item) -> Optional[int]:
    if not isinstance(item, dict) or item.get("value") is None:
        return None
    return int(to_number(item.get("value")))


def has_issue(item) -> bool:
    """레거시 이슈 존재 여부 (value == 1 일 때만 존재)"""
    return _value_of(item) == 1


def grade_of(item) -> int:
    """등급형 항목(블랙헤드 등)의 등급. 0은 없음."""
    return _value_of(item) or 0


def explicit_severity(item) -> Optional[int]:
    """분석 API가 직접 준 심각도 필드 값 (없으면 None)"""
    return _value_of(item)


def classify_confidence(confidence) -> int:
    conf = to_number(confidence, 0)
    if conf >= SEVERITY_HIGH_CONFIDENCE:
        return 3
    if conf >= SEVERITY_MEDIUM_CONFIDENCE:
        return 2
    return 1


def classify_severity(item, explicit=None) -> Optional[int]:
    """
    항목 하나의 심각도를 계산합니다.

    Args:
        item (dict | None): {value, confidence} 형태의 분석 항목
        explicit (dict | None): {value} 형태의 별도 심각도 필드

    Returns:
        int | None: 1~3 심각도, 항목이 없으면 None
    """
    if not isinstance(item, dict):
        return None

    explicit_value = explicit_severity(explicit)
    if explicit_value is not None:
        return explicit_value

    return classify_confidence(item.get("confidence"))
