# skin_report.py
"""
[리포트 조립기]
분석 API의 원본 결과를 받아 최종 사용자용 리포트를 생성합니다.

처리 순서:
1. 결과 형태 판별 (레거시 / 어드밴스드)
2. 항목 추출 → 점수 계산 → 지표 계산 → 루틴 생성
3. 변경 불가능한(frozen) 리포트 모델로 조립

동일한 입력에는 항상 동일한 리포트를 반환합니다. (시간/난수 의존 없음)
"""

import logging
from enum import Enum
from typing import Optional, Union

from core.numeric import to_number
from .config import (
    BLACKHEAD_LABELS, DARK_CIRCLE_LABELS, DEFAULT_SKIN_COLOR, DEFAULT_SKIN_TONE_HA,
    DEFAULT_SKIN_TYPE, EYELID_LABELS, SKIN_COLOR_LABELS, SKIN_TONE_HA_LABELS,
    SKIN_TONE_ITA_LABELS, SKIN_TYPE_CODES, SKIN_TYPE_LABELS, UNKNOWN_SKIN_TONE_ITA,
    WRINKLE_SITES,
)
from .errors import MissingResultError
from .findings import (
    AdvancedFindings, LegacyFindings, extract_advanced_findings, extract_legacy_findings,
)
from .indicators import compute_indicators
from .routine_builder import build_makeup_styles, build_skincare_routine
from .schemas import (
    AcneFinding, AdvancedSkinReport, CountFinding, DarkCircleFinding, DetailConfidence,
    EyelidFinding, EyePouchFinding, FaceRectangle, GradedFinding, LegacySkinReport,
    PoreFinding, SensitivityFinding, SkinIssue, WrinkleFinding,
)
from .score_engine import AdvancedScorer, LegacyScorer

logger = logging.getLogger(__name__)


class ReportKind(str, Enum):
    LEGACY = "legacy"
    ADVANCED = "advanced"


SCORERS = {
    ReportKind.LEGACY: LegacyScorer(),
    ReportKind.ADVANCED: AdvancedScorer(),
}

# 레거시 결과에서는 이 항목들이 {value, confidence}로, 상세형에서는 {rectangle: [...]}로 옵니다.
SHAPE_MARKER_KEYS = ("acne", "mole", "skin_spot")


# ==============================================================================
# 1. 형태 판별 및 공통 헬퍼
# ==============================================================================

def detect_report_kind(raw: dict) -> ReportKind:
    """
    결과 형태를 판별합니다.
    여드름/점/잡티 중 하나라도 {value, confidence} 형태면 레거시,
    그 외(항목이 거의 없는 결과 포함)는 모두 어드밴스드로 처리합니다.
    """
    for key in SHAPE_MARKER_KEYS:
        item = raw.get(key)
        if isinstance(item, dict) and "value" in item and "rectangle" not in item:
            return ReportKind.LEGACY
    return ReportKind.ADVANCED


def _label(table: dict, code, default_code):
    return table.get(code, table[default_code])


def _code(item, key: str = "value"):
    if isinstance(item, dict) and item.get(key) is not None:
        return item.get(key)
    return None


def _face_rectangle(face_rectangle) -> Optional[FaceRectangle]:
    if isinstance(face_rectangle, FaceRectangle):
        return face_rectangle
    if isinstance(face_rectangle, dict):
        return FaceRectangle(**{k: face_rectangle[k] for k in ("top", "left", "width", "height")
                                if face_rectangle.get(k) is not None})
    return None


def _skin_type_fields(skin_type: int) -> dict:
    return {
        "skin_type": SKIN_TYPE_CODES.get(skin_type, SKIN_TYPE_CODES[DEFAULT_SKIN_TYPE]),
        "skin_type_label": _label(SKIN_TYPE_LABELS, skin_type, DEFAULT_SKIN_TYPE),
    }


# ==============================================================================
# 2. 레거시 리포트
# ==============================================================================

def build_legacy_report(findings: LegacyFindings, face_rectangle=None, warnings=None) -> LegacySkinReport:
    score = SCORERS[ReportKind.LEGACY].score(findings)
    flags = findings.routine_flags()

    return LegacySkinReport(
        overall_score=score.overall_score,
        **_skin_type_fields(findings.skin_type),
        issues=[SkinIssue(type=i.type, label=i.label, severity=i.severity) for i in findings.issues],
        wrinkles=list(findings.wrinkles),
        pores=list(findings.pores),
        face_rectangle=_face_rectangle(face_rectangle),
        warnings=list(warnings or []),
        score_breakdown=score.breakdown,
        skincare_routine=build_skincare_routine(findings.skin_type, flags),
        makeup_styles=build_makeup_styles(flags),
    )


# ==============================================================================
# 3. 어드밴스드 리포트
# ==============================================================================

def build_advanced_report(raw: dict, findings: AdvancedFindings,
                          face_rectangle=None, warnings=None) -> AdvancedSkinReport:
    score = SCORERS[ReportKind.ADVANCED].score(findings)
    flags = findings.routine_flags()

    # 피부 색상/톤/나이 (없으면 기본값)
    skin_color = _code(raw.get("skin_color"))
    skin_tone = _code(raw.get("skin_hue_ha"), "skintone")
    ita_code = _code(raw.get("skintone_ita"), "skintone")
    skin_tone_ita = SKIN_TONE_ITA_LABELS.get(ita_code, UNKNOWN_SKIN_TONE_ITA) if ita_code is not None else None
    skin_age = to_number(_code(raw.get("skin_age")), 0)

    sensitivity = None
    if findings.sensitivity_reported:
        sensitivity = SensitivityFinding(
            area_percent=findings.sensitivity_area * 100,
            intensity=findings.sensitivity_intensity,
        )

    face_maps = raw.get("face_maps")
    red_area_map = face_maps.get("red_area") if isinstance(face_maps, dict) else None

    wrinkles = []
    for key, label in WRINKLE_SITES:
        present = key in findings.wrinkles_present
        severity = findings.nasolabial_severity if key == "nasolabial_fold" and present else None
        wrinkles.append(WrinkleFinding(id=key, label=label, present=present, severity=severity))

    details = None
    if findings.skin_type_details:
        details = {
            str(code): DetailConfidence(
                value=to_number(item.get("value"), 0),
                confidence=to_number(item.get("confidence"), 0),
            )
            for code, item in findings.skin_type_details.items() if isinstance(item, dict)
        }

    return AdvancedSkinReport(
        overall_score=score.overall_score,
        **_skin_type_fields(findings.skin_type),
        skin_color=_label(SKIN_COLOR_LABELS, skin_color, DEFAULT_SKIN_COLOR),
        skin_tone=_label(SKIN_TONE_HA_LABELS, skin_tone, DEFAULT_SKIN_TONE_HA),
        skin_tone_ita=skin_tone_ita,
        skin_age=int(skin_age),
        face_rectangle=_face_rectangle(face_rectangle),
        warnings=list(warnings or []),
        sensitivity=sensitivity,
        red_area_map_base64=red_area_map,
        acne=AcneFinding(count=findings.acne_count, percentage_of_face=findings.acne_face_percent),
        pores=PoreFinding(
            zones_with_pores=list(findings.pore_zones),
            percentage_of_zones=findings.pore_zone_percent,
        ),
        blackhead=GradedFinding(
            severity=findings.blackhead_grade,
            label=_label(BLACKHEAD_LABELS, findings.blackhead_grade, 0),
        ),
        closed_comedones=CountFinding(count=findings.closed_comedones_count),
        mole=CountFinding(count=findings.mole_count),
        skin_spot=CountFinding(count=findings.skin_spot_count),
        dark_circle=DarkCircleFinding(
            type=findings.dark_circle_type,
            label=_label(DARK_CIRCLE_LABELS, findings.dark_circle_type, 0),
        ),
        eye_pouch=EyePouchFinding(present=findings.eye_pouch_present, severity=findings.eye_pouch_severity),
        wrinkles=wrinkles,
        eyelids=EyelidFinding(
            left=_label(EYELID_LABELS, _code(raw.get("left_eyelids")), 0),
            right=_label(EYELID_LABELS, _code(raw.get("right_eyelids")), 0),
        ),
        skin_type_details=details,
        score_breakdown=score.breakdown,
        indicators=compute_indicators(findings),
        skincare_routine=build_skincare_routine(findings.skin_type, flags),
        makeup_styles=build_makeup_styles(flags),
    )


# ==============================================================================
# 4. 메인 진입점
# ==============================================================================

def derive_report(raw, face_rectangle=None, warnings=None) -> Union[LegacySkinReport, AdvancedSkinReport]:
    """
    분석 API 결과로 최종 리포트를 생성합니다.

    Args:
        raw (dict): 분석 API의 result 객체
        face_rectangle (dict, optional): 얼굴 영역 {top, left, width, height}
        warnings (list, optional): 분석 API 경고 메시지 목록

    Returns:
        LegacySkinReport | AdvancedSkinReport

    Raises:
        MissingResultError: 분석 결과 자체가 없는 경우
    """
    if raw is None or not isinstance(raw, dict):
        raise MissingResultError("No analysis result returned")

    # 최상위 응답에 함께 온 얼굴 영역/경고도 허용
    if face_rectangle is None:
        face_rectangle = raw.get("face_rectangle")
    if warnings is None:
        warnings = raw.get("warning")
    if not isinstance(warnings, list):
        warnings = []

    kind = detect_report_kind(raw)
    if kind is ReportKind.LEGACY:
        report = build_legacy_report(extract_legacy_findings(raw), face_rectangle, warnings)
    else:
        findings = extract_advanced_findings(raw, face_rectangle)
        report = build_advanced_report(raw, findings, face_rectangle, warnings)

    logger.debug(f"리포트 생성 완료 (kind={kind.value}, score={report.overall_score})")
    return report
