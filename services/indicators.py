# indicators.py
"""
[지표 게이지 계산]
상세형 분석 결과를 앱 화면의 게이지(0~100%, 높을수록 건강)로 변환합니다.
9개 기본 지표 + 민감도(분석 API가 민감도를 준 경우에만)를 고정 순서로 반환합니다.
"""

from typing import List

from core.numeric import clamp, round_half_up
from .config import INDICATOR_LABELS
from .findings import AdvancedFindings
from .schemas import Indicator


def _indicator(indicator_id: str, value: float) -> Indicator:
    return Indicator(
        id=indicator_id,
        label=INDICATOR_LABELS[indicator_id],
        percent=clamp(round_half_up(value), 0, 100),
    )


def eye_area_percent(f: AdvancedFindings) -> float:
    percent = 100
    if f.dark_circle_type > 0:
        percent -= 25 + f.dark_circle_type * 10
    if f.eye_pouch_present:
        percent -= 15 + (f.eye_pouch_severity or 0) * 10
    return max(0, percent)


def compute_indicators(f: AdvancedFindings) -> List[Indicator]:
    nasolabial = f.nasolabial_severity or 0

    indicators = [
        # 건성 신뢰도가 높을수록 수분 부족
        _indicator("moisture", 100 - f.detail_confidence("1") * 50),
        _indicator("oil", f.detail_confidence("0") * 100),
        _indicator("pores", 100 - f.pore_zone_percent),
        _indicator("blackhead", 100 - (f.blackhead_grade / 3) * 100),
        _indicator("acne", max(0, 100 - f.acne_count * 10 - f.acne_face_percent)),
        _indicator("spots", max(0, 100 - f.skin_spot_count * 15)),
        _indicator("wrinkles", max(0, 100 - len(f.wrinkles_present) * 15 - nasolabial * 10)),
        _indicator("closed", max(0, 100 - f.closed_comedones_count * 8)),
        _indicator("eye", eye_area_percent(f)),
    ]

    if f.sensitivity_reported:
        indicators.append(_indicator("sensitivity", max(0, 100 - f.sensitivity_intensity)))

    return indicators
