# score_engine.py
"""
[점수 엔진]
100점에서 시작해 발견된 항목별로 점수를 차감하여 종합 점수(0~100)를 계산합니다.
항목별 차감은 서로 독립적으로 계산되고(각자 상한 적용 후 합산),
차감 내역(breakdown)을 그대로 리포트에 남겨 항목별 기여도를 확인할 수 있습니다.

- LegacyScorer   : 구버전 리포트용 (심각도 15/10/5, 주름 5, 모공 3)
- AdvancedScorer : 신버전 리포트용 (항목별 세분화된 가중치)
두 전략의 가중치는 서로 다른 버전의 튜닝 값이므로 통합하지 않습니다.
"""

import math
from dataclasses import dataclass
from typing import Dict

from core.numeric import clamp, round_half_up
from .config import ADVANCED_SCORE_RULES, LEGACY_SCORE_RULES
from .findings import AdvancedFindings, LegacyFindings

BASE_SCORE = 100


@dataclass(frozen=True)
class ScoreResult:
    overall_score: int
    breakdown: Dict[str, int]


def finalize_score(breakdown: Dict[str, int]) -> ScoreResult:
    """차감 내역을 합산하고 0~100 범위로 제한합니다."""
    total = BASE_SCORE - sum(breakdown.values())
    return ScoreResult(
        overall_score=clamp(round_half_up(total), 0, 100),
        breakdown=dict(breakdown),
    )


def _capped(count: int, rule: dict) -> int:
    return min(rule["cap"], count * rule["per_item"])


class BaseScorer:
    """점수 전략 공통 인터페이스"""

    def deductions(self, findings) -> Dict[str, int]:
        raise NotImplementedError

    def score(self, findings) -> ScoreResult:
        return finalize_score(self.deductions(findings))


class LegacyScorer(BaseScorer):
    """[구버전] 이슈 심각도별 고정 차감 + 주름/모공 개수별 차감"""

    def __init__(self, rules: dict = LEGACY_SCORE_RULES):
        self.rules = rules

    def deductions(self, findings: LegacyFindings) -> Dict[str, int]:
        by_severity = self.rules["severity_deduction"]
        breakdown = {}
        for issue in findings.issues:
            breakdown[issue.type] = by_severity.get(issue.severity, by_severity[1])

        breakdown["wrinkles"] = len(findings.wrinkles) * self.rules["per_wrinkle"]
        breakdown["pores"] = len(findings.pores) * self.rules["per_pore_zone"]
        return breakdown


class AdvancedScorer(BaseScorer):
    """[신버전] 항목별 독립 차감 (각 항목 상한 적용)"""

    def __init__(self, rules: dict = ADVANCED_SCORE_RULES):
        self.rules = rules

    def deductions(self, f: AdvancedFindings) -> Dict[str, int]:
        r = self.rules

        # 블랙헤드: 등급표 (범위 밖 등급은 최고 등급으로 처리)
        blackhead_table = r["blackhead"]
        if f.blackhead_grade in blackhead_table:
            blackhead = blackhead_table[f.blackhead_grade]
        else:
            blackhead = max(blackhead_table.values()) if f.blackhead_grade > 0 else 0

        dark_circle = 0
        if f.dark_circle_type > 0:
            dark_circle = r["dark_circle"]["base"] + f.dark_circle_type * r["dark_circle"]["per_grade"]

        eye_pouch = 0
        if f.eye_pouch_present:
            eye_pouch = r["eye_pouch"]["base"] + (f.eye_pouch_severity or 0) * r["eye_pouch"]["per_grade"]

        wrinkle_rule = r["wrinkles"]
        wrinkles = min(
            wrinkle_rule["cap"],
            len(f.wrinkles_present) * wrinkle_rule["per_item"]
            + (f.nasolabial_severity or 0) * wrinkle_rule["per_nasolabial_grade"],
        )

        sensitivity = 0
        if f.sensitivity_reported:
            sens_rule = r["sensitivity"]
            sensitivity = min(sens_rule["cap"], math.floor(f.sensitivity_intensity / sens_rule["divisor"]))
            sensitivity = max(0, sensitivity)

        return {
            "blackhead": blackhead,
            "acne": _capped(f.acne_count, r["acne"]),
            "closed_comedones": _capped(f.closed_comedones_count, r["closed_comedones"]),
            "pores": _capped(len(f.pore_zones), r["pores"]),
            "skin_spot": _capped(f.skin_spot_count, r["skin_spot"]),
            "mole": _capped(f.mole_count, r["mole"]),
            "dark_circle": dark_circle,
            "eye_pouch": eye_pouch,
            "wrinkles": wrinkles,
            "sensitivity": sensitivity,
        }
