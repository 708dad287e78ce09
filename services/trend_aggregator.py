# trend_aggregator.py
"""
[기간별 점수 집계]
사용자의 (점수, 시각) 기록을 UTC 달력 날짜 단위로 묶어 평균을 내고,
바로 이전의 같은 길이 기간과 비교한 변화율(%)을 계산합니다.

기능 목록:
1. TimeWindow      : 생성 시점에 검증되는 조회 기간 (최근 N일 / 월~일 주간)
2. aggregate_trend : 날짜별 평균, 기간 평균, 이전 기간 대비 변화율
3. summarize_history : 일/주/월 단위 평균 (pandas 기간 그룹핑)

'현재 시각(now)'은 항상 인자로 받습니다. (모듈 내부에서 시계를 읽지 않음)
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, Iterable, Optional, Tuple

import pandas as pd

from core.numeric import convert_numpy_to_native, round_half_up
from .errors import MalformedWindowError

ONE_DAY = timedelta(days=1)

# summarize_history 단위 -> pandas 기간 코드 (주간은 월요일 시작)
SUMMARY_UNITS = {
    "day": "D",
    "week": "W-SUN",
    "month": "M",
}


def as_utc(ts: datetime) -> datetime:
    """타임존 없는 시각은 UTC로 간주합니다."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def _touched_dates(start: datetime, end: datetime) -> Tuple[date, ...]:
    """[start, end) 구간이 걸치는 모든 UTC 날짜"""
    if end <= start:
        return ()
    first = start.date()
    last = (end - timedelta(microseconds=1)).date()
    return tuple(first + timedelta(days=i) for i in range((last - first).days + 1))


# ==============================================================================
# 1. 조회 기간 (TimeWindow)
# ==============================================================================

@dataclass(frozen=True)
class TimeWindow:
    start: datetime
    end: datetime
    bucket_dates: Tuple[date, ...]

    def __post_init__(self):
        # 날짜 버킷은 항상 UTC 기준
        object.__setattr__(self, "start", as_utc(self.start))
        object.__setattr__(self, "end", as_utc(self.end))
        object.__setattr__(self, "bucket_dates", tuple(self.bucket_dates))

        if self.start > self.end:
            raise MalformedWindowError(f"Window start {self.start} is after end {self.end}")
        for prev, cur in zip(self.bucket_dates, self.bucket_dates[1:]):
            if cur - prev != ONE_DAY:
                raise MalformedWindowError(f"Bucket dates are not contiguous: {prev} -> {cur}")

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def contains(self, ts: datetime) -> bool:
        return self.start <= as_utc(ts) < self.end

    def previous(self) -> "TimeWindow":
        """바로 앞의 같은 길이 기간"""
        start = self.start - self.duration
        return TimeWindow(start=start, end=self.start, bucket_dates=_touched_dates(start, self.start))


def rolling_window(days: int, now: datetime) -> TimeWindow:
    """최근 N일: [now - days, now)"""
    if days < 1:
        raise MalformedWindowError(f"Rolling window needs at least 1 day (got {days})")
    end = as_utc(now)
    start = end - timedelta(days=days)
    return TimeWindow(start=start, end=end, bucket_dates=_touched_dates(start, end))


def calendar_week(offset_weeks: int, now: datetime) -> TimeWindow:
    """now가 속한 주(월요일 00:00 UTC 시작)에서 offset_weeks 만큼 이전 주"""
    today = as_utc(now).date()
    monday = today - timedelta(days=today.weekday()) - timedelta(weeks=offset_weeks)
    start = datetime.combine(monday, time.min, tzinfo=timezone.utc)
    end = start + timedelta(days=7)
    return TimeWindow(
        start=start,
        end=end,
        bucket_dates=tuple(monday + timedelta(days=i) for i in range(7)),
    )


# ==============================================================================
# 2. 트렌드 집계
# ==============================================================================

@dataclass(frozen=True)
class TrendSummary:
    per_bucket_average: Dict[date, Optional[float]]
    period_average: float
    change_percent: int
    previous_average: float = 0.0


def bucket_averages(history: Iterable, window: TimeWindow) -> Dict[date, Optional[float]]:
    """window 안의 기록을 날짜별로 평균냅니다. 기록이 없는 날짜는 None."""
    buckets = {d: [] for d in window.bucket_dates}
    for score, ts in history:
        if score is None or ts is None:
            continue
        ts = as_utc(ts)
        if window.start <= ts < window.end and ts.date() in buckets:
            buckets[ts.date()].append(float(score))

    return {d: (sum(scores) / len(scores) if scores else None) for d, scores in buckets.items()}


def _period_average(averages: Dict[date, Optional[float]]) -> Optional[float]:
    values = [v for v in averages.values() if v is not None]
    if not values:
        return None
    return sum(values) / len(values)


def change_percent(current: float, previous: Optional[float]) -> int:
    """이전 기간 대비 변화율. 이전 기록이 없거나 0이면 0."""
    if previous is None:
        previous = current
    if previous == 0:
        return 0
    return round_half_up((current - previous) / previous * 100)


def aggregate_trend(history, window: TimeWindow) -> TrendSummary:
    """
    Args:
        history: (score, timestamp) 목록. 현재 기간과 이전 기간을 모두 포함할 수 있습니다.
        window: 현재 조회 기간

    Returns:
        TrendSummary (예외 없음)
    """
    history = list(history)

    per_bucket = bucket_averages(history, window)
    current = _period_average(per_bucket)
    previous = _period_average(bucket_averages(history, window.previous()))

    current = current if current is not None else 0.0
    return TrendSummary(
        per_bucket_average=per_bucket,
        period_average=current,
        change_percent=change_percent(current, previous),
        previous_average=previous if previous is not None else current,
    )


# ==============================================================================
# 3. 일/주/월 단위 요약 (pandas)
# ==============================================================================

def summarize_history(history, unit: str = "day") -> Dict[date, float]:
    """
    전체 기록을 단위별 평균 점수로 요약합니다.
    키는 각 기간의 시작 날짜입니다. (주간: 월요일, 월간: 1일)
    """
    if unit not in SUMMARY_UNITS:
        raise MalformedWindowError(f"Unknown summary unit: {unit}")

    rows = [(float(score), as_utc(ts)) for score, ts in history if score is not None and ts is not None]
    if not rows:
        return {}

    df = pd.DataFrame(rows, columns=["score", "timestamp"])
    # UTC 기준으로 맞춘 뒤 타임존 제거 (to_period는 타임존 정보를 버림)
    df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True).dt.tz_localize(None)

    # 같은 날 여러 번 분석한 경우 먼저 날짜별 평균을 낸 뒤, 그 평균들을 기간별로 평균냅니다.
    daily = df.groupby(df["timestamp"].dt.floor("D"))["score"].mean()
    if unit == "day":
        grouped = daily.sort_index()
        return convert_numpy_to_native({ts.date(): avg for ts, avg in grouped.items()})

    periods = daily.index.to_period(SUMMARY_UNITS[unit])
    grouped = daily.groupby(periods).mean().sort_index()
    return convert_numpy_to_native({period.start_time.date(): avg for period, avg in grouped.items()})
