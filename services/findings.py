# findings.py
"""
[분석 결과 정규화]
분석 API의 중첩된 원본 결과(raw)를 리포트 산출에 필요한 평평한 값들로 추출합니다.
어떤 항목이 빠져 있어도 에러 없이 '문제 없음'(0 / 빈 목록)으로 처리합니다.

- LegacyFindings   : 구버전(간단형) 결과 → 이슈/주름/모공 라벨 목록
- AdvancedFindings : 신버전(상세형) 결과 → 개수, 등급, 면적 등 수치
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from core.numeric import to_number
from .config import (
    DEFAULT_SKIN_TYPE, ISSUE_LABELS, PORE_ZONES, WRINKLE_SITES,
)
from .severity import classify_severity, explicit_severity, grade_of, has_issue


@dataclass(frozen=True)
class RoutineFlags:
    """루틴 빌더가 참고하는 고민 여부 (두 리포트 형태 공통)"""
    has_acne: bool = False
    has_dark_circle: bool = False
    has_spots_or_moles: bool = False
    has_blackhead: bool = False


@dataclass(frozen=True)
class LegacyIssue:
    type: str
    label: str
    severity: int


@dataclass(frozen=True)
class LegacyFindings:
    skin_type: int = DEFAULT_SKIN_TYPE
    issues: Tuple[LegacyIssue, ...] = ()
    wrinkles: Tuple[str, ...] = ()
    pores: Tuple[str, ...] = ()

    def has(self, issue_type: str) -> bool:
        return any(issue.type == issue_type for issue in self.issues)

    def routine_flags(self) -> RoutineFlags:
        return RoutineFlags(
            has_acne=self.has("acne"),
            has_dark_circle=self.has("dark_circle"),
            has_spots_or_moles=self.has("skin_spot") or self.has("mole"),
            has_blackhead=self.has("blackhead"),
        )


@dataclass(frozen=True)
class AdvancedFindings:
    skin_type: int = DEFAULT_SKIN_TYPE
    skin_type_details: Optional[Dict[str, dict]] = None
    acne_count: int = 0
    acne_face_percent: float = 0.0
    pore_zones: Tuple[str, ...] = ()
    blackhead_grade: int = 0
    closed_comedones_count: int = 0
    mole_count: int = 0
    skin_spot_count: int = 0
    dark_circle_type: int = 0
    eye_pouch_present: bool = False
    eye_pouch_severity: Optional[int] = None
    wrinkles_present: Tuple[str, ...] = ()
    nasolabial_severity: Optional[int] = None
    sensitivity_area: Optional[float] = None
    sensitivity_intensity: Optional[float] = None

    @property
    def sensitivity_reported(self) -> bool:
        return self.sensitivity_intensity is not None

    @property
    def pore_zone_percent(self) -> float:
        return len(self.pore_zones) / len(PORE_ZONES) * 100

    def detail_confidence(self, code: str) -> float:
        """피부 타입 상세 신뢰도 (코드 "0"=지성, "1"=건성). 없으면 0."""
        detail = (self.skin_type_details or {}).get(code)
        if not isinstance(detail, dict):
            return 0.0
        return float(to_number(detail.get("confidence"), 0))

    def routine_flags(self) -> RoutineFlags:
        return RoutineFlags(
            has_acne=self.acne_count > 0,
            has_dark_circle=self.dark_circle_type > 0,
            has_spots_or_moles=self.skin_spot_count > 0 or self.mole_count > 0,
            has_blackhead=self.blackhead_grade > 0,
        )


# ==============================================================================
# 1. 공통 헬퍼
# ==============================================================================

def skin_type_code(raw: dict) -> int:
    skin_type = raw.get("skin_type")
    if not isinstance(skin_type, dict) or skin_type.get("skin_type") is None:
        return DEFAULT_SKIN_TYPE
    return int(to_number(skin_type.get("skin_type"), DEFAULT_SKIN_TYPE))


def rectangles(item) -> List[dict]:
    if not isinstance(item, dict):
        return []
    rects = item.get("rectangle") or []
    return [r for r in rects if isinstance(r, dict)]


def rect_area(rect: dict) -> float:
    return to_number(rect.get("width"), 0) * to_number(rect.get("height"), 0)


def face_area(face_rectangle) -> float:
    """얼굴 영역 넓이. 얼굴 영역이 없거나 0이면 1 (0으로 나누기 방지)"""
    if isinstance(face_rectangle, dict):
        width = to_number(face_rectangle.get("width"), 0)
        height = to_number(face_rectangle.get("height"), 0)
        if width > 0 and height > 0:
            return width * height
    return 1


# ==============================================================================
# 2. 레거시 결과 추출
# ==============================================================================

def extract_legacy_findings(raw: dict) -> LegacyFindings:
    issues = []
    for key, label in ISSUE_LABELS.items():
        item = raw.get(key)
        if has_issue(item):
            # eye_pouch_severity 처럼 별도 심각도 필드가 있으면 그 값을 우선합니다.
            severity = classify_severity(item, raw.get(f"{key}_severity"))
            issues.append(LegacyIssue(type=key, label=label, severity=severity))

    wrinkles = [label for key, label in WRINKLE_SITES if has_issue(raw.get(key))]
    pores = [label for key, label, _ in PORE_ZONES if has_issue(raw.get(key))]

    return LegacyFindings(
        skin_type=skin_type_code(raw),
        issues=tuple(issues),
        wrinkles=tuple(wrinkles),
        pores=tuple(pores),
    )


# ==============================================================================
# 3. 어드밴스드 결과 추출
# ==============================================================================

def extract_advanced_findings(raw: dict, face_rectangle=None) -> AdvancedFindings:
    # 여드름: 박스 개수 + 얼굴 대비 면적(%)
    acne_rects = rectangles(raw.get("acne"))
    acne_area = sum(rect_area(r) for r in acne_rects)
    acne_face_percent = min(100.0, acne_area / face_area(face_rectangle) * 100)

    pore_zones = [zone for key, _, zone in PORE_ZONES if has_issue(raw.get(key))]

    eye_pouch_present = has_issue(raw.get("eye_pouch"))
    eye_pouch_severity = explicit_severity(raw.get("eye_pouch_severity")) if eye_pouch_present else None

    wrinkles_present = [key for key, _ in WRINKLE_SITES if has_issue(raw.get(key))]
    nasolabial_severity = None
    if "nasolabial_fold" in wrinkles_present:
        nasolabial_severity = explicit_severity(raw.get("nasolabial_fold_severity"))

    sensitivity = raw.get("sensitivity")
    sensitivity_area = sensitivity_intensity = None
    if isinstance(sensitivity, dict):
        sensitivity_area = float(to_number(sensitivity.get("sensitivity_area"), 0))
        sensitivity_intensity = float(to_number(sensitivity.get("sensitivity_intensity"), 0))

    skin_type = raw.get("skin_type")
    details = skin_type.get("details") if isinstance(skin_type, dict) else None

    return AdvancedFindings(
        skin_type=skin_type_code(raw),
        skin_type_details=details if isinstance(details, dict) else None,
        acne_count=len(acne_rects),
        acne_face_percent=acne_face_percent,
        pore_zones=tuple(pore_zones),
        blackhead_grade=grade_of(raw.get("blackhead")),
        closed_comedones_count=len(rectangles(raw.get("closed_comedones"))),
        mole_count=len(rectangles(raw.get("mole"))),
        skin_spot_count=len(rectangles(raw.get("skin_spot"))),
        dark_circle_type=grade_of(raw.get("dark_circle")),
        eye_pouch_present=eye_pouch_present,
        eye_pouch_severity=eye_pouch_severity,
        wrinkles_present=tuple(wrinkles_present),
        nasolabial_severity=nasolabial_severity,
        sensitivity_area=sensitivity_area,
        sensitivity_intensity=sensitivity_intensity,
    )
