# routine_builder.py
"""
[루틴 생성기]
기본 스킨케어 루틴(아침 5 / 저녁 5 / 주간 1)에서 시작해,
피부 타입과 발견된 고민에 따라 정해진 순서대로 스텝을 치환/삽입합니다.

규칙은 (조건, 편집) 쌍의 고정된 파이프라인으로 적용됩니다.
고민별 스텝은 항상 앵커 스텝('精华') 바로 앞에 삽입되므로,
나중에 적용된 규칙의 스텝일수록 앵커에 더 가깝게(뒤쪽에) 놓입니다.
(여드름 → 다크서클 → 잡티/점 → 블랙헤드 순서는 고정)
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

from .config import (
    MAKEUP_PRESETS, MAKEUP_STEPS, ROUTINE_ANCHOR_STEP, ROUTINE_BASE,
    ROUTINE_STEPS, SKIN_TYPE_SUBSTITUTIONS,
)
from .findings import RoutineFlags
from .schemas import MakeupStyle, SkincareRoutine


@dataclass(frozen=True)
class RoutineRule:
    name: str
    predicate: Callable[[RoutineFlags], bool]
    apply: Callable[[Dict[str, List[str]]], None]


# ==============================================================================
# 1. 편집 함수 (Edits)
# ==============================================================================

def insert_before_anchor(step: str, routines: Tuple[str, ...]):
    def _apply(working: Dict[str, List[str]]) -> None:
        for name in routines:
            steps = working[name]
            steps.insert(steps.index(ROUTINE_ANCHOR_STEP), step)
    return _apply


def append_step(step: str, routine: str):
    def _apply(working: Dict[str, List[str]]) -> None:
        working[routine].append(step)
    return _apply


def substitute_for_skin_type(skin_type: int, working: Dict[str, List[str]]) -> None:
    """피부 타입별 보습 스텝 치환 (중성은 변경 없음)"""
    for name, (old, new) in SKIN_TYPE_SUBSTITUTIONS.get(skin_type, {}).items():
        steps = working[name]
        if old in steps:
            steps[steps.index(old)] = new


# ==============================================================================
# 2. 규칙 파이프라인 (순서 고정)
# ==============================================================================

ROUTINE_RULES = (
    RoutineRule("acne", lambda f: f.has_acne,
                insert_before_anchor(ROUTINE_STEPS["acne"], ("morning", "evening"))),
    RoutineRule("dark_circle", lambda f: f.has_dark_circle,
                insert_before_anchor(ROUTINE_STEPS["dark_circle"], ("morning", "evening"))),
    RoutineRule("spots", lambda f: f.has_spots_or_moles,
                insert_before_anchor(ROUTINE_STEPS["spots"], ("morning",))),
    RoutineRule("blackhead", lambda f: f.has_blackhead,
                append_step(ROUTINE_STEPS["blackhead"], "weekly")),
)


def _conceal_dark_circle(styles: Dict[str, List[str]]) -> None:
    styles["1"].insert(1, MAKEUP_STEPS["under_eye_concealer"])
    styles["2"][0] = MAKEUP_STEPS["under_eye_rewrite"]


def _conceal_blemish(styles: Dict[str, List[str]]) -> None:
    styles["1"].insert(1, MAKEUP_STEPS["blemish_concealer"])


MAKEUP_RULES = (
    RoutineRule("dark_circle", lambda f: f.has_dark_circle, _conceal_dark_circle),
    RoutineRule("acne", lambda f: f.has_acne, _conceal_blemish),
)


# ==============================================================================
# 3. 실행 함수
# ==============================================================================

def build_skincare_routine(skin_type: int, flags: RoutineFlags) -> SkincareRoutine:
    working = {name: list(steps) for name, steps in ROUTINE_BASE.items()}

    substitute_for_skin_type(skin_type, working)
    for rule in ROUTINE_RULES:
        if rule.predicate(flags):
            rule.apply(working)

    return SkincareRoutine(**working)


def build_makeup_styles(flags: RoutineFlags) -> List[MakeupStyle]:
    styles = {style_id: list(steps) for style_id, _, steps in MAKEUP_PRESETS}

    for rule in MAKEUP_RULES:
        if rule.predicate(flags):
            rule.apply(styles)

    return [
        MakeupStyle(id=style_id, name=name, steps=styles[style_id])
        for style_id, name, _ in MAKEUP_PRESETS
    ]
