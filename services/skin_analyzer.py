# skin_analyzer.py
"""
[Service Layer] Skin Analysis Logic
1. 업로드 이미지 검증 및 저장
2. AILab 피부 분석 API 호출
3. 리포트 생성 (점수, 지표, 루틴) 및 DB 저장
"""

import os
import uuid
import logging
from typing import Optional

from fastapi import HTTPException, UploadFile

# 1. DB 저장 (Repository)
from core.utils import save_skin_report_db

# 2. 외부 분석 API / 리포트 생성
from .ailab_api import analyze_skin_image
from .config import MAX_UPLOAD_SIZE, UPLOAD_DIR
from .errors import ERROR_CODES, SkinReportError
from .skin_report import derive_report

# 로깅 설정
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = ("image/jpeg", "image/jpg")


# ==============================================================================
# 1. 업로드 이미지 처리
# ==============================================================================

def validate_image(contents: bytes, content_type: Optional[str] = None):
    """빈 파일, 크기 초과, JPG가 아닌 파일을 거부합니다."""
    invalid = ERROR_CODES["ANALYSIS"]["IMAGE_INVALID"]

    if not contents:
        raise SkinReportError("Image file is empty", code=invalid, http_status=400)
    if len(contents) > MAX_UPLOAD_SIZE:
        raise SkinReportError(
            f"Image exceeds {MAX_UPLOAD_SIZE // (1024 * 1024)}MB limit", code=invalid, http_status=400
        )
    if content_type and content_type.lower() not in ALLOWED_CONTENT_TYPES:
        raise SkinReportError(f"Unsupported image type: {content_type}", code=invalid, http_status=400)


def save_upload(contents: bytes, save_dir: str = None) -> str:
    """업로드 이미지를 임시 폴더에 저장하고 경로를 반환합니다."""
    save_dir = save_dir or UPLOAD_DIR
    os.makedirs(save_dir, exist_ok=True)

    # 파일명 랜덤 생성 (중복 방지)
    file_path = os.path.join(save_dir, f"{uuid.uuid4()}.jpg")
    try:
        with open(file_path, "wb") as buffer:
            buffer.write(contents)
    except OSError as e:
        logger.error(f"❌ 이미지 저장 실패: {e}")
        raise HTTPException(status_code=500, detail="이미지 파일 저장 실패")
    return file_path


# ==============================================================================
# 2. 통합 분석 프로세스 (Main Process)
# ==============================================================================

async def process_skin_analysis(user_id: str, file: UploadFile):
    """
    [분석 총괄 함수]
    1. 이미지 검증 및 저장
    2. AILab API 호출
    3. 리포트 생성
    4. DB 저장
    """
    contents = await file.read()
    validate_image(contents, file.content_type)
    file_path = save_upload(contents)

    # -------------------------------------------------------
    # [Step 1] AI 피부 분석 (AILab)
    # -------------------------------------------------------
    logger.info(f"🤖 피부 분석 요청 시작: {file_path}")
    response = analyze_skin_image(contents, filename=os.path.basename(file_path))

    # -------------------------------------------------------
    # [Step 2] 리포트 생성
    # -------------------------------------------------------
    report = derive_report(
        response.get("result"),
        face_rectangle=response.get("face_rectangle"),
        warnings=response.get("warning"),
    )
    report_data = report.model_dump(mode="json")
    logger.info(f"📊 리포트 생성 완료 ({report.kind}, 종합 점수 {report.overall_score})")

    # -------------------------------------------------------
    # [Step 3] DB 저장
    # -------------------------------------------------------
    new_id = save_skin_report_db(user_id, file_path, report_data)

    if not new_id:
        raise HTTPException(status_code=500, detail="데이터베이스 저장 실패")

    return {
        "analysis_id": new_id,
        "message": "분석 완료",
        "report": report_data,
    }
