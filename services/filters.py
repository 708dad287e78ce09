# services/filters.py
from .config import SCORE_BANDS


def _has_finding(issue_type: str, advanced_expr: str) -> str:
    """
    상세형 리포트의 수치 조건 또는 간단형 리포트의 이슈 목록으로
    특정 고민이 있었던 분석 기록을 찾는 SQL 조건문을 만듭니다.
    """
    return (
        f"AND ({advanced_expr} "
        f"OR COALESCE(a.result_json->'issues', '[]'::jsonb) @> '[{{\"type\": \"{issue_type}\"}}]'::jsonb)"
    )


def get_filter_query(condition: str):
    """
    입력된 조건(condition) 문자열을 받아서,
    알맞은 SQL WHERE 절과 파라미터를 반환하는 함수입니다.

    Returns:
        tuple: (sql_fragment, parameter_value)
    """
    # 조건별 SQL 매핑 테이블
    # 키: 클라이언트가 보낼 조건명
    # 값: (SQL 조건문, 비교할 값)
    filter_map = {
        # [점수 구간]
        "good": ("AND a.score >= %s", SCORE_BANDS["good_min"]),
        "low": ("AND a.score < %s", SCORE_BANDS["low_max"]),

        # [고민 항목이 있었던 날]
        "acne": (_has_finding(
            "acne", "COALESCE((a.result_json->'acne'->>'count')::int, 0) > 0"), None),
        "dark_circle": (_has_finding(
            "dark_circle", "COALESCE((a.result_json->'dark_circle'->>'type')::int, 0) > 0"), None),
        "blackhead": (_has_finding(
            "blackhead", "COALESCE((a.result_json->'blackhead'->>'severity')::int, 0) > 0"), None),
    }

    # 해당하는 조건 반환 (없으면 None)
    return filter_map.get(condition)
