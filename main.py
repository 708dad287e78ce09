# main.py
"""
[AI Skin Report API Server]
FastAPI 기반의 메인 서버 구동 파일입니다.
앱(모바일)과 웹 모두 이 API를 공통으로 사용합니다.
"""

import logging
from datetime import datetime, timezone
from typing import Literal, Optional

from contextlib import asynccontextmanager
from fastapi import FastAPI, File, UploadFile, Form, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

# ---------------------------------------------------------
# [Services Import]
# 핵심 로직은 services 폴더의 모듈에서 가져옵니다.
# ---------------------------------------------------------
from core.utils import (
    init_db,
    check_user_exists_db,
    get_skin_report_db,
    search_skin_history_db,
    checkin_user_db,
)
from services.errors import ERROR_CODES, SkinReportError, api_error
from services.skin_analyzer import process_skin_analysis
from services.skin_history import get_skin_trend, get_score_summary
from services.streak import badge_label

# 로깅 설정
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------
# [Lifespan 설정] 시작과 종료를 관리하는 함수
# ---------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    # [시작 시 실행]
    print("🔄 서버 시작: DB 테이블을 점검하고 생성합니다...")
    init_db()
    print("✅ 서버 시작 완료: DB 초기화 끝")

    yield

    # [종료 시 실행]
    print("👋 서버 종료: 리소스를 정리합니다.")


# ---------------------------------------------------------
# [App 생성] lifespan 파라미터 적용
# ---------------------------------------------------------
app = FastAPI(
    title="AI Skin Report API",
    description="피부 분석 리포트 및 피부 변화 추이 시스템",
    version="3.0.0",
    lifespan=lifespan
)

# CORS 설정 (앱/웹 통신 허용)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------
# [Error Handlers] 고정 에러 코드 응답
# ---------------------------------------------------------

@app.exception_handler(SkinReportError)
async def skin_report_error_handler(request: Request, exc: SkinReportError):
    logger.warning(f"⚠️ {exc.code}: {exc.message}")
    return JSONResponse(status_code=exc.http_status, content=exc.to_response())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=422,
        content=api_error(ERROR_CODES["VALIDATION"], "Invalid request", {"errors": jsonable_encoder(exc.errors())}),
    )


# ---------------------------------------------------------
# [Pydantic Models] 요청 데이터 검증용 모델
# ---------------------------------------------------------

class CheckinRequest(BaseModel):
    user_id: str


def ensure_user(user_id: str):
    if not check_user_exists_db(user_id):
        raise HTTPException(status_code=401, detail="존재하지 않는 회원입니다.")


# ==============================================================================
# 1. Health
# ==============================================================================

@app.get("/health", tags=["System"])
async def health_check():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


# ==============================================================================
# 2. Analysis (피부 분석)
# ==============================================================================

@app.post("/analyze", tags=["Analysis"])
async def analyze_skin_endpoint(
    user_id: str = Form(...),
    file: UploadFile = File(...)
):
    """
    [통합 분석 API]
    복잡한 로직은 모두 skin_analyzer로 위임하고, 여기서는 호출만 담당합니다.
    """
    ensure_user(user_id)
    return await process_skin_analysis(user_id, file)


@app.get("/analysis/{analysis_id}", tags=["Analysis"])
async def get_analysis_endpoint(analysis_id: int, user_id: Optional[str] = None):
    """저장된 리포트 1건 조회 (앱은 재계산 없이 그대로 화면에 표시)"""
    record = get_skin_report_db(analysis_id, user_id)
    if not record:
        raise SkinReportError(
            "Analysis not found",
            code=ERROR_CODES["ANALYSIS"]["NOT_FOUND"],
            http_status=404,
        )
    return {"status": "success", "data": record}


# ==============================================================================
# 3. History & Trend (기록 및 추이)
# ==============================================================================

@app.get("/history/search", tags=["History"])
async def search_history_endpoint(
        user_id: str,
        condition: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        page: int = 1
):
    """
    [통합 히스토리 검색 API]
    필터(condition), 기간(date), 페이징(page)을 모두 지원합니다.
    """
    ensure_user(user_id)

    result = search_skin_history_db(
        user_id=user_id,
        condition=condition,
        start_date=start_date,
        end_date=end_date,
        page=page
    )

    return {
        "status": "success",
        "filter": condition if condition else "all",
        "period": {"start": start_date, "end": end_date},
        "data": result
    }


@app.get("/user/skin-reports", tags=["History"])
async def skin_trend_endpoint(user_id: str, period: Literal["week", "month"] = "month"):
    """
    [피부 변화 추이]
    - week : 이번 주(월~일) 날짜별 점수, 지난주 대비 변화율
    - month: 최근 30일 날짜별 점수, 직전 30일 대비 변화율
    """
    ensure_user(user_id)
    return {"status": "success", "data": get_skin_trend(user_id, period)}


@app.get("/user/skin-reports/summary", tags=["History"])
async def score_summary_endpoint(user_id: str, unit: Literal["day", "week", "month"] = "day"):
    """일/주/월 단위 평균 점수"""
    ensure_user(user_id)
    return {"status": "success", "unit": unit, "data": get_score_summary(user_id, unit)}


# ==============================================================================
# 4. Check-in (연속 체크인)
# ==============================================================================

@app.post("/user/checkin", tags=["User"])
async def checkin_endpoint(req: CheckinRequest):
    ensure_user(req.user_id)

    today = datetime.now(timezone.utc).date()
    result = checkin_user_db(req.user_id, today)
    if not result:
        raise HTTPException(status_code=500, detail="체크인 처리 실패")

    result["badge_label"] = badge_label(result["current_streak"])
    return {"status": "success", "data": result}


# ==============================================================================
# 5. 메인 실행부
# ==============================================================================
if __name__ == "__main__":
    import uvicorn

    print("🚀 API 서버를 시작합니다...")
    uvicorn.run(app, host="0.0.0.0", port=8000)
