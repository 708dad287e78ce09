# streak.py
"""
[연속 체크인 계산]
마지막 체크인 날짜와 현재 연속 일수로 오늘 체크인의 결과를 결정합니다.
- 첫 체크인 → 1
- 같은 날 재체크인 → 변화 없음
- 어제 체크인 → +1
- 그 외(2일 이상 공백) → 1로 초기화
날짜 비교는 UTC 달력 날짜 기준입니다.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Optional

from .config import BADGE_LABELS, STREAK_BADGES


class CheckinOutcome(str, Enum):
    FIRST = "first"
    DUPLICATE = "duplicate"
    EXTENDED = "extended"
    RESET = "reset"


@dataclass(frozen=True)
class StreakState:
    current_streak: int = 0
    last_checkin_date: Optional[date] = None

    def __post_init__(self):
        if self.current_streak < 0:
            object.__setattr__(self, "current_streak", 0)


def classify_checkin(state: StreakState, today: date) -> CheckinOutcome:
    last = state.last_checkin_date
    if last is None:
        return CheckinOutcome.FIRST
    if last == today:
        return CheckinOutcome.DUPLICATE
    if last == today - timedelta(days=1):
        return CheckinOutcome.EXTENDED
    return CheckinOutcome.RESET


def apply_checkin(state: StreakState, today: date) -> StreakState:
    outcome = classify_checkin(state, today)
    if outcome is CheckinOutcome.DUPLICATE:
        return state
    if outcome is CheckinOutcome.EXTENDED:
        return StreakState(current_streak=state.current_streak + 1, last_checkin_date=today)
    return StreakState(current_streak=1, last_checkin_date=today)


def badge_for(streak: int) -> Optional[str]:
    for threshold, badge in STREAK_BADGES:
        if streak >= threshold:
            return badge
    return None


def badge_label(streak: int) -> Optional[str]:
    badge = badge_for(streak)
    return BADGE_LABELS.get(badge) if badge else None
