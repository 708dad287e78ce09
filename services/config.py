# config.py
"""
[전역 설정 및 상수 관리]
서버, 데이터베이스, 외부 분석 API, 리포트 산출 로직에서 사용하는 모든 상수를 관리합니다.

목차:
1. SYSTEM : 업로드 경로 및 트렌드 기본값
2. LOCALIZATION : 분석 코드 -> 표시 라벨 매핑 (피부 타입, 색상, 주름 등)
3. LOGIC RULES : 점수 차감 가중치, 심각도 기준, 루틴/메이크업 규칙
4. INFRASTRUCTURE : 데이터베이스 및 외부 API 설정
"""

import os
from dotenv import load_dotenv

# .env 파일 로드 (환경변수 설정)
load_dotenv()

# ==============================================================================
# 1. SYSTEM (시스템 설정)
# ==============================================================================

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# 업로드 이미지 저장 폴더
UPLOAD_DIR = os.getenv("UPLOAD_DIR", os.path.join(BASE_DIR, "temp_uploads"))

# 업로드 최대 크기 (기본 10MB)
MAX_UPLOAD_SIZE = int(os.getenv("MAX_UPLOAD_SIZE", str(10 * 1024 * 1024)))

# [트렌드] 월간(rolling) 조회 기간과 조회 상한
TREND_ROLLING_DAYS = int(os.getenv("TREND_ROLLING_DAYS", "30"))
HISTORY_QUERY_LIMIT = int(os.getenv("HISTORY_QUERY_LIMIT", "200"))
HISTORY_PAGE_SIZE = int(os.getenv("HISTORY_PAGE_SIZE", "20"))

# ==============================================================================
# 2. LOCALIZATION (표시 라벨 매핑)
# ==============================================================================

# [피부 타입] 분석 코드 -> 내부 코드명 / 표시 라벨
SKIN_TYPE_CODES = {0: "oily", 1: "dry", 2: "neutral", 3: "combination"}
SKIN_TYPE_LABELS = {0: "油性", 1: "干性", 2: "中性", 3: "混合性"}
DEFAULT_SKIN_TYPE = 2

# [피부 색상/톤]
SKIN_COLOR_LABELS = {0: "透明白", 1: "白皙", 2: "自然", 3: "小麦", 4: "深色"}
DEFAULT_SKIN_COLOR = 2

SKIN_TONE_HA_LABELS = {0: "偏黄", 1: "中性", 2: "偏红", 3: "异常"}
DEFAULT_SKIN_TONE_HA = 1

SKIN_TONE_ITA_LABELS = {0: "极浅", 1: "浅", 2: "中间", 3: "棕褐", 4: "棕", 5: "深", 6: "异常"}
UNKNOWN_SKIN_TONE_ITA = "异常"

# [고민 항목] 레거시 리포트의 이슈 목록 (순서 유지)
ISSUE_LABELS = {
    "dark_circle": "黑眼圈",
    "eye_pouch": "眼袋",
    "acne": "痘痘",
    "skin_spot": "色斑",
    "blackhead": "黑头",
    "mole": "痣",
}

# [주름] 5개 부위 (순서 유지)
WRINKLE_SITES = (
    ("forehead_wrinkle", "抬头纹"),
    ("crows_feet", "鱼尾纹"),
    ("eye_finelines", "眼下细纹"),
    ("glabella_wrinkle", "眉间纹"),
    ("nasolabial_fold", "法令纹"),
)

# [모공] 4개 부위: (키, 레거시 라벨, 부위명)
PORE_ZONES = (
    ("pores_forehead", "额头毛孔", "额头"),
    ("pores_left_cheek", "左颊毛孔", "左颊"),
    ("pores_right_cheek", "右颊毛孔", "右颊"),
    ("pores_jaw", "下颌毛孔", "下颌"),
)

# [등급형 항목]
BLACKHEAD_LABELS = {0: "无", 1: "轻度", 2: "中度", 3: "重度"}
DARK_CIRCLE_LABELS = {0: "无", 1: "色素型", 2: "血管型", 3: "阴影型"}
EYELID_LABELS = {0: "单眼皮", 1: "平行双眼皮", 2: "开扇双眼皮"}

# [지표 게이지] id -> 라벨 (표시 순서 유지)
INDICATOR_LABELS = {
    "moisture": "水分",
    "oil": "油分",
    "pores": "毛孔",
    "blackhead": "黑头",
    "acne": "痘痘",
    "spots": "色斑",
    "wrinkles": "皱纹",
    "closed": "闭口",
    "eye": "眼周",
    "sensitivity": "敏感",
}

# [연속 체크인 뱃지] (기준 일수, 뱃지 id) - 높은 기준부터
STREAK_BADGES = (
    (100, "expert"),
    (30, "proficient"),
    (7, "novice"),
)
BADGE_LABELS = {"expert": "护肤专家", "proficient": "护肤达人", "novice": "护肤新人"}

# ==============================================================================
# 3. LOGIC RULES (리포트 산출 규칙)
# ==============================================================================

# [심각도 기준] 신뢰도(confidence) -> 3단계 심각도
SEVERITY_HIGH_CONFIDENCE = 0.8
SEVERITY_MEDIUM_CONFIDENCE = 0.5

# [레거시 점수] 이슈 심각도별 차감, 주름/모공 개당 차감
LEGACY_SCORE_RULES = {
    "severity_deduction": {3: 15, 2: 10, 1: 5},
    "per_wrinkle": 5,
    "per_pore_zone": 3,
}

# [어드밴스드 점수] 항목별 차감 가중치와 상한
ADVANCED_SCORE_RULES = {
    "blackhead": {0: 0, 1: 5, 2: 10, 3: 15},
    "acne": {"per_item": 2, "cap": 20},
    "closed_comedones": {"per_item": 1, "cap": 10},
    "pores": {"per_item": 2, "cap": 8},
    "skin_spot": {"per_item": 2, "cap": 10},
    "mole": {"per_item": 1, "cap": 5},
    "dark_circle": {"base": 5, "per_grade": 2},
    "eye_pouch": {"base": 3, "per_grade": 2},
    "wrinkles": {"per_item": 2, "per_nasolabial_grade": 2, "cap": 20},
    "sensitivity": {"divisor": 20, "cap": 5},
}

# [루틴] 기본 스텝 (아침 5 / 저녁 5 / 주간 1)
ROUTINE_BASE = {
    "morning": ("洁面", "爽肤水", "精华", "乳液", "防晒"),
    "evening": ("卸妆", "洁面", "爽肤水", "精华", "面霜"),
    "weekly": ("面膜",),
}

# 고민별 스텝은 항상 이 스텝 '바로 앞'에 삽입됩니다.
ROUTINE_ANCHOR_STEP = "精华"

# [피부 타입별 치환] 타입 코드 -> {루틴: (기존 스텝, 대체 스텝)}
SKIN_TYPE_SUBSTITUTIONS = {
    0: {"morning": ("乳液", "控油乳液"), "evening": ("面霜", "控油面霜")},
    1: {"morning": ("乳液", "保湿乳液"), "evening": ("面霜", "保湿面霜")},
    3: {"morning": ("乳液", "分区护理（T区控油、U区保湿）")},
}

# [고민별 추가 스텝]
ROUTINE_STEPS = {
    "acne": "祛痘精华",
    "dark_circle": "眼霜",
    "spots": "美白/淡斑精华",
    "blackhead": "清洁面膜",
}

# [메이크업 프리셋] (id, 이름, 스텝)
MAKEUP_PRESETS = (
    ("1", "日常", ("保湿打底", "轻透底妆", "自然眉")),
    ("2", "职场", ("遮瑕", "哑光底妆", "大地色眼影")),
    ("3", "约会", ("提亮", "轻薄底妆", "粉色系眼唇")),
)

MAKEUP_STEPS = {
    "under_eye_concealer": "眼下遮瑕",
    "under_eye_rewrite": "眼下遮瑕 · 局部遮瑕",
    "blemish_concealer": "痘痘遮瑕",
}

# [히스토리 필터] 점수 구간 기준
SCORE_BANDS = {
    "good_min": 85,
    "low_max": 60,
}

# ==============================================================================
# 4. INFRASTRUCTURE (DB & API)
# ==============================================================================

# [데이터베이스] PostgreSQL 접속 정보 (환경변수 우선)
DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "database": os.getenv("DB_NAME", "postgres"),
    "user": os.getenv("DB_USER", "postgres"),
    "password": os.getenv("DB_PASSWORD", "password"),
    "port": os.getenv("DB_PORT", "5432")
}

# [AILab] 피부 분석 API
AILAB_API_KEY = os.getenv("AILAB_API_KEY", "")
AILAB_BASE_URL = os.getenv("AILAB_BASE_URL", "https://www.ailabapi.com")
AILAB_SKIN_ANALYSIS_PATH = "/api/portrait/analysis/skin-analysis"
AILAB_TIMEOUT = float(os.getenv("AILAB_TIMEOUT", "30"))

# [AILab 에러 코드 -> 앱 에러 코드]
AILAB_ERROR_MAP = {
    "ERROR_NO_FACE_IN_FILE": "ANALYSIS_002",
    "ERROR_FACE_NOT_FOUND": "ANALYSIS_002",
    "ERROR_INVALID_FILE": "ANALYSIS_001",
    "FILE_SIZE_EXCEEDS_LIMIT": "ANALYSIS_001",
    "ERROR_LOW_RESOLUTION": "ANALYSIS_001",
    "ERROR_SMALL_FACE_SIZE": "ANALYSIS_001",
    "ERROR_FACE_SIZE_NOT_MEET_REQUIREMENTS": "ANALYSIS_001",
    "ERROR_POOR_FACE_QUALITY": "ANALYSIS_002",
    "ERROR_BLURRY_FACE": "ANALYSIS_002",
    "ERROR_OBSTRUCTED_FACE": "ANALYSIS_002",
    "ERROR_NOT_ENOUGH_CREDITS": "ANALYSIS_003",
    "EXCEEDING_LIMITS": "ANALYSIS_003",
    "AI_SERVICE_FLOW_RESTRICTION": "ANALYSIS_003",
}
