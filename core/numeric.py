# numeric.py
"""
[수치 보정 헬퍼]
점수/퍼센트 계산에 공통으로 쓰이는 반올림, 범위 제한, 타입 변환 함수 모음입니다.
"""

import math

import numpy as np


def round_half_up(value: float) -> int:
    """0.5는 항상 올림합니다. (내장 round()의 banker's rounding 회피)"""
    return int(math.floor(value + 0.5))


def clamp(value, low=0, high=100):
    return max(low, min(high, value))


def to_number(value, default=0):
    """None/문자열/NaN 등 비정상 값을 숫자로 보정합니다."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def convert_numpy_to_native(obj):
    """
    Numpy 데이터 타입(int64, float32 등)을 파이썬 기본 타입으로 변환합니다.
    (JSON 직렬화 에러 방지용)
    """
    if isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        return float(obj)
    elif isinstance(obj, np.ndarray):
        return obj.tolist()
    elif isinstance(obj, dict):
        return {k: convert_numpy_to_native(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [convert_numpy_to_native(i) for i in obj]
    return obj
