# schemas.py
"""
[리포트 데이터 모델]
분석 1회당 한 번 생성되어 이후 변경되지 않는(frozen) 리포트 구조입니다.
model_dump(mode="json") 결과가 그대로 DB(result_json)와 앱 응답에 사용되므로,
앱이 다시 계산하지 않도록 지표/루틴/메이크업을 모두 포함합니다.
"""

from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------
# [공통 구성 요소]
# ---------------------------------------------------------

class Indicator(FrozenModel):
    id: str
    label: str
    percent: int = Field(ge=0, le=100)


class FaceRectangle(FrozenModel):
    top: float = 0
    left: float = 0
    width: float = 0
    height: float = 0


class SkincareRoutine(FrozenModel):
    morning: List[str]
    evening: List[str]
    weekly: List[str]


class MakeupStyle(FrozenModel):
    id: str
    name: str
    steps: List[str]


# ---------------------------------------------------------
# [상세형 항목]
# ---------------------------------------------------------

class SensitivityFinding(FrozenModel):
    area_percent: float
    intensity: float


class AcneFinding(FrozenModel):
    count: int
    percentage_of_face: float


class PoreFinding(FrozenModel):
    zones_with_pores: List[str]
    percentage_of_zones: float


class GradedFinding(FrozenModel):
    severity: int
    label: str


class CountFinding(FrozenModel):
    count: int


class DarkCircleFinding(FrozenModel):
    type: int
    label: str


class EyePouchFinding(FrozenModel):
    present: bool
    severity: Optional[int] = None


class WrinkleFinding(FrozenModel):
    id: str
    label: str
    present: bool
    severity: Optional[int] = None


class EyelidFinding(FrozenModel):
    left: str
    right: str


class DetailConfidence(FrozenModel):
    value: float = 0
    confidence: float = 0


class SkinIssue(FrozenModel):
    type: str
    label: str
    severity: int = Field(ge=1, le=3)


# ==============================================================================
# 리포트 (레거시 / 어드밴스드)
# ==============================================================================

class LegacySkinReport(FrozenModel):
    """[구버전 간단형] 이슈/주름/모공 라벨 목록 기반 리포트"""
    kind: Literal["legacy"] = "legacy"
    overall_score: int = Field(ge=0, le=100)
    skin_type: str
    skin_type_label: str
    issues: List[SkinIssue]
    wrinkles: List[str]
    pores: List[str]
    face_rectangle: Optional[FaceRectangle] = None
    warnings: List[str] = []
    score_breakdown: Dict[str, int]
    indicators: List[Indicator] = []
    skincare_routine: SkincareRoutine
    makeup_styles: List[MakeupStyle]


class AdvancedSkinReport(FrozenModel):
    """[신버전 상세형] 모든 분석 항목과 지표 게이지를 포함한 리포트"""
    kind: Literal["advanced"] = "advanced"
    overall_score: int = Field(ge=0, le=100)
    skin_type: str
    skin_type_label: str
    skin_color: str
    skin_tone: str
    skin_tone_ita: Optional[str] = None
    skin_age: int = 0
    face_rectangle: Optional[FaceRectangle] = None
    warnings: List[str] = []
    sensitivity: Optional[SensitivityFinding] = None
    red_area_map_base64: Optional[str] = None
    acne: AcneFinding
    pores: PoreFinding
    blackhead: GradedFinding
    closed_comedones: CountFinding
    mole: CountFinding
    skin_spot: CountFinding
    dark_circle: DarkCircleFinding
    eye_pouch: EyePouchFinding
    wrinkles: List[WrinkleFinding]
    eyelids: EyelidFinding
    skin_type_details: Optional[Dict[str, DetailConfidence]] = None
    score_breakdown: Dict[str, int]
    indicators: List[Indicator]
    skincare_routine: SkincareRoutine
    makeup_styles: List[MakeupStyle]


SkinReport = Annotated[Union[LegacySkinReport, AdvancedSkinReport], Field(discriminator="kind")]
