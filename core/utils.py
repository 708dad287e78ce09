# utils.py
"""
[데이터베이스 담당]
API 서버와 PostgreSQL 사이의 모든 읽기/쓰기를 담당하는 모듈입니다.

기능 목록:
1. Schema: 테이블 초기화 (users, skin_analyses, checkins)
2. Users: 사용자 존재 확인
3. Reports: 분석 리포트 저장/조회, 히스토리 검색, 점수 기록 조회
4. Check-in: 연속 체크인 갱신 (사용자별 행 잠금)
"""

import math
import logging
from datetime import date, datetime
from typing import Optional

import psycopg2
from psycopg2.extras import Json

from services.config import DB_CONFIG, HISTORY_PAGE_SIZE, HISTORY_QUERY_LIMIT
from services.filters import get_filter_query
from services.streak import StreakState, apply_checkin, badge_for, classify_checkin

# 로깅 설정
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


# ==============================================================================
# 1. 스키마 초기화
# ==============================================================================

def init_db():
    """
    [DB 초기화 통합 함수]
    서버 시작 시 필요한 테이블을 안전하게 생성합니다.
    """
    try:
        conn = psycopg2.connect(**DB_CONFIG)
        cursor = conn.cursor()

        # ---------------------------------------------------------
        # 1. users (사용자 + 연속 체크인 상태)
        # ---------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS users (
                user_id VARCHAR(50) PRIMARY KEY,
                name TEXT,
                current_streak INTEGER NOT NULL DEFAULT 0,
                last_checkin_date DATE,
                created_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP
            );
        """)

        # ---------------------------------------------------------
        # 2. skin_analyses (분석 리포트)
        # ---------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS skin_analyses (
                id SERIAL PRIMARY KEY,
                user_id VARCHAR(50) REFERENCES users(user_id) ON DELETE CASCADE,
                image_path TEXT,
                result_json JSONB NOT NULL,
                score INTEGER,
                created_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP
            );
        """)
        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_skin_analyses_user_created
            ON skin_analyses (user_id, created_at DESC);
        """)

        # ---------------------------------------------------------
        # 3. checkins (하루 1회)
        # ---------------------------------------------------------
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS checkins (
                id SERIAL PRIMARY KEY,
                user_id VARCHAR(50) REFERENCES users(user_id) ON DELETE CASCADE,
                checkin_date DATE NOT NULL,
                created_at TIMESTAMPTZ DEFAULT CURRENT_TIMESTAMP,
                UNIQUE (user_id, checkin_date)
            );
        """)

        conn.commit()
        cursor.close()
        conn.close()
        logger.info("✅ 모든 DB 테이블이 정상적으로 초기화되었습니다.")

    except Exception as e:
        logger.error(f"❌ DB 초기화 중 오류 발생: {e}")


# ==============================================================================
# 2. 사용자
# ==============================================================================

def check_user_exists_db(user_id):
    """아이디가 DB에 진짜 존재하는지 확인"""
    try:
        conn = psycopg2.connect(**DB_CONFIG)
        cursor = conn.cursor()
        cursor.execute("SELECT 1 FROM users WHERE user_id = %s", (user_id,))
        exists = cursor.fetchone()
        cursor.close()
        conn.close()
        return True if exists else False
    except Exception as e:
        logger.error(f"사용자 확인 실패: {e}")
        return False


# ==============================================================================
# 3. 분석 리포트
# ==============================================================================

def save_skin_report_db(user_id: str, image_path: str, report: dict):
    """
    리포트(model_dump(mode="json") 결과)를 저장하고 새 분석 ID를 반환합니다.
    실패 시 None.
    """
    try:
        conn = psycopg2.connect(**DB_CONFIG)
        cursor = conn.cursor()

        cursor.execute("""
            INSERT INTO skin_analyses (user_id, image_path, result_json, score)
            VALUES (%s, %s, %s, %s)
            RETURNING id
        """, (user_id, image_path, Json(report), report.get("overall_score")))
        new_id = cursor.fetchone()[0]

        conn.commit()
        cursor.close()
        conn.close()

        logger.info(f"✅ [DB] 분석 리포트 저장 완료 (User: {user_id}, ID: {new_id})")
        return new_id

    except Exception as e:
        logger.error(f"⚠️ [DB 저장 실패] {e}")
        return None


def get_skin_report_db(analysis_id: int, user_id: str = None):
    """분석 ID로 리포트 1건 조회 (user_id 지정 시 본인 기록만)"""
    try:
        conn = psycopg2.connect(**DB_CONFIG)
        cursor = conn.cursor()

        query = """
            SELECT id, user_id, image_path, result_json, score, created_at
            FROM skin_analyses
            WHERE id = %s
        """
        params = [analysis_id]
        if user_id:
            query += " AND user_id = %s"
            params.append(user_id)

        cursor.execute(query, tuple(params))
        row = cursor.fetchone()

        cursor.close()
        conn.close()

        if not row:
            return None

        return {
            "analysis_id": row[0],
            "user_id": row[1],
            "image_path": row[2],
            "report": row[3],
            "score": row[4],
            "created_at": row[5].isoformat() if row[5] else None,
        }

    except Exception as e:
        logger.error(f"⚠️ [DB 연결 오류] {e}")
        return None


def search_skin_history_db(
        user_id: str,
        condition: str = None,
        start_date: str = None,
        end_date: str = None,
        page: int = 1,
        page_size: int = HISTORY_PAGE_SIZE
):
    try:
        conn = psycopg2.connect(**DB_CONFIG)
        cursor = conn.cursor()

        # 1. 기본 쿼리
        base_query = """
                    FROM skin_analyses a
                    WHERE a.user_id = %s
                """
        params = [user_id]

        # 2. 필터 적용
        if condition:
            filter_result = get_filter_query(condition)
            if filter_result:
                sql_part, val = filter_result
                base_query += f" {sql_part}"
                if val is not None:
                    params.append(val)

        if start_date:
            base_query += " AND a.created_at >= %s"
            params.append(start_date)

        if end_date:
            base_query += " AND a.created_at <= %s"
            params.append(end_date + " 23:59:59")

        # 3. 개수 세기
        cursor.execute(f"SELECT COUNT(*) {base_query}", tuple(params))
        total_count = cursor.fetchone()[0]

        # 4. 데이터 조회
        offset = (page - 1) * page_size
        data_sql = f"""
                    SELECT a.id, a.created_at, a.score, a.image_path, a.result_json
                    {base_query}
                    ORDER BY a.created_at DESC
                    LIMIT %s OFFSET %s
                """
        cursor.execute(data_sql, tuple(params + [page_size, offset]))
        rows = cursor.fetchall()

        cursor.close()
        conn.close()

        records = []
        for r in rows:
            report = r[4] or {}
            records.append({
                "id": r[0],
                "date": r[1].strftime("%Y-%m-%d %H:%M"),
                "overall_score": r[2] if r[2] is not None else report.get("overall_score", 0),
                "image_path": r[3],
                "skin_type": report.get("skin_type"),
                "skin_type_label": report.get("skin_type_label"),
                "report": report,
            })

        return {
            "total_count": total_count,
            "total_pages": math.ceil(total_count / page_size),
            "current_page": page,
            "records": records
        }

    except Exception as e:
        logger.error(f"히스토리 조회 실패: {e}")
        return {"total_count": 0, "records": []}


def get_score_history_db(user_id: str, start: datetime = None, end: datetime = None,
                         limit: Optional[int] = HISTORY_QUERY_LIMIT) -> list:
    """
    점수 기록 [(score, created_at), ...] 을 최신순으로 조회합니다.
    start 이상, end 미만 구간만 가져옵니다. (지정하지 않으면 전체)
    limit=None 이면 건수 제한 없이 모두 가져옵니다.
    """
    try:
        conn = psycopg2.connect(**DB_CONFIG)
        cursor = conn.cursor()

        query = """
            SELECT score, created_at
            FROM skin_analyses
            WHERE user_id = %s AND score IS NOT NULL
        """
        params = [user_id]
        if start is not None:
            query += " AND created_at >= %s"
            params.append(start)
        if end is not None:
            query += " AND created_at < %s"
            params.append(end)
        query += " ORDER BY created_at DESC"
        if limit is not None:
            query += " LIMIT %s"
            params.append(limit)

        cursor.execute(query, tuple(params))
        rows = cursor.fetchall()

        cursor.close()
        conn.close()
        return [(row[0], row[1]) for row in rows]

    except Exception as e:
        logger.error(f"점수 기록 조회 실패: {e}")
        return []


# ==============================================================================
# 4. 체크인
# ==============================================================================

def checkin_user_db(user_id: str, today: date):
    """
    오늘 체크인을 반영하고 갱신된 연속 일수를 반환합니다.
    사용자 행을 FOR UPDATE로 잠가, 같은 사용자의 동시 체크인은 하나씩 처리됩니다.
    (하루에 최대 1번만 상태가 바뀜)

    Returns:
        dict: {current_streak, last_checkin_date, outcome, badge} (사용자 없음/실패 시 None)
    """
    conn = None
    try:
        conn = psycopg2.connect(**DB_CONFIG)
        cursor = conn.cursor()

        cursor.execute("""
            SELECT current_streak, last_checkin_date
            FROM users
            WHERE user_id = %s
            FOR UPDATE
        """, (user_id,))
        row = cursor.fetchone()
        if not row:
            conn.rollback()
            cursor.close()
            conn.close()
            return None

        state = StreakState(current_streak=row[0] or 0, last_checkin_date=row[1])
        outcome = classify_checkin(state, today)
        new_state = apply_checkin(state, today)

        if new_state != state:
            cursor.execute("""
                UPDATE users
                SET current_streak = %s, last_checkin_date = %s
                WHERE user_id = %s
            """, (new_state.current_streak, new_state.last_checkin_date, user_id))
            cursor.execute("""
                INSERT INTO checkins (user_id, checkin_date)
                VALUES (%s, %s)
                ON CONFLICT (user_id, checkin_date) DO NOTHING
            """, (user_id, today))

        conn.commit()
        cursor.close()
        conn.close()

        logger.info(f"✅ [DB] 체크인 처리 (User: {user_id}, {outcome.value}, 연속 {new_state.current_streak}일)")
        return {
            "current_streak": new_state.current_streak,
            "last_checkin_date": new_state.last_checkin_date.isoformat(),
            "outcome": outcome.value,
            "badge": badge_for(new_state.current_streak),
        }

    except Exception as e:
        logger.error(f"⚠️ [DB 체크인 실패] {e}")
        if conn is not None and not conn.closed:
            conn.rollback()
            conn.close()
        return None
