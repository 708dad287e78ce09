# skin_history.py
"""
[Service Layer] Skin Trend Logic
저장된 분석 점수 기록으로 앱의 '피부 변화' 화면 데이터를 만듭니다.

- get_skin_trend   : 이번 주(월~일) 또는 최근 N일의 날짜별 점수, 평균, 이전 기간 대비 변화율
- get_score_summary : 전체 기록의 일/주/월 단위 평균 점수
"""

import logging
from datetime import datetime, timezone

from core.numeric import round_half_up
from core.utils import get_score_history_db
from .config import TREND_ROLLING_DAYS
from .trend_aggregator import aggregate_trend, calendar_week, rolling_window, summarize_history

# 로깅 설정
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _round_score(value):
    return round_half_up(value) if value is not None else None


def get_skin_trend(user_id: str, period: str = "month", now: datetime = None) -> dict:
    """
    Args:
        user_id (str): 사용자 ID
        period (str): "week" (이번 주 월~일) / 그 외 (최근 TREND_ROLLING_DAYS일)
        now (datetime): 기준 시각 (기본값: 현재 UTC)
    """
    now = now or datetime.now(timezone.utc)
    window = calendar_week(0, now) if period == "week" else rolling_window(TREND_ROLLING_DAYS, now)

    # 이전 기간과 비교해야 하므로 이전 기간 시작부터 건수 제한 없이 조회
    history = get_score_history_db(user_id, start=window.previous().start, end=window.end, limit=None)
    summary = aggregate_trend(history, window)

    analysis_count = sum(1 for _, ts in history if window.contains(ts))
    logger.info(f"📈 트렌드 조회 (User: {user_id}, {period}, 기록 {analysis_count}건)")

    return {
        "period": "week" if period == "week" else "month",
        "start": window.start.isoformat(),
        "end": window.end.isoformat(),
        "daily_scores": [
            {"date": d.isoformat(), "score": _round_score(avg)}
            for d, avg in summary.per_bucket_average.items()
        ],
        "average_score": round_half_up(summary.period_average),
        "change_percent": summary.change_percent,
        "analysis_count": analysis_count,
    }


def get_score_summary(user_id: str, unit: str = "day") -> list:
    """전체 기록을 일/주/월 단위 평균 점수 목록으로 반환합니다. (오래된 순)"""
    history = get_score_history_db(user_id, limit=None)
    summary = summarize_history(history, unit)

    return [
        {"period_start": start.isoformat(), "average_score": round(avg, 1)}
        for start, avg in summary.items()
    ]
