"""
services/repository.py

응시 흐름이 사용하는 원격 저장소의 논리 연산 모음.
테이블/컬럼 이름과 레코드 ↔ 모델 변환은 여기서만 다룬다.

Public API:
  - get_published_assessment(assessment_id) -> Assessment | None
  - list_active_questions(assessment_id)    -> List[Question]
  - create_test_session(user_id, assessment_id, started_at) -> TestSession
  - insert_answers(records)                  -> None
  - complete_test_session(session_id, completed_at, score, passed) -> None
  - list_completed_sessions(user_id)         -> List[CompletedSession]
"""

import logging
from datetime import datetime
from typing import List, Optional, Sequence

from pydantic import ValidationError

from assessment_cbt.models.assessment_model import (
    AnswerRecord, Assessment, CompletedSession, TestSession,
)
from assessment_cbt.models.question_model import Question
from assessment_cbt.services.errors import StoreError
from assessment_cbt.services.store import StoreClient, eq, is_not_null

logger = logging.getLogger(__name__)

ASSESSMENTS = "assessments"
QUESTIONS = "questions"
TEST_SESSIONS = "test_sessions"
TEST_ANSWERS = "test_answers"


class AssessmentRepository:
    """StoreClient 위의 평가/응시 전용 저장소. 모든 호출은 client의 사용자 권한으로 실행된다."""

    def __init__(self, client: StoreClient):
        self.client = client

    def get_published_assessment(self, assessment_id: str) -> Optional[Assessment]:
        row = self.client.select_one(
            ASSESSMENTS,
            {"id": eq(assessment_id), "status": eq("published")},
        )
        if row is None:
            return None
        return _parse(Assessment, row, "select assessments")

    def list_active_questions(self, assessment_id: str) -> List[Question]:
        """활성 문제를 출제 순서(order_num 오름차순)로 반환."""
        rows = self.client.select(
            QUESTIONS,
            {"assessment_id": eq(assessment_id), "is_active": eq(True)},
            order="order_num.asc",
        )
        return [_parse(Question, row, "select questions") for row in rows]

    def create_test_session(
        self,
        user_id: str,
        assessment_id: str,
        started_at: datetime,
    ) -> TestSession:
        row = self.client.insert_one(
            TEST_SESSIONS,
            {
                "user_id": user_id,
                "assessment_id": assessment_id,
                "started_at": started_at.isoformat(),
            },
        )
        return _parse(TestSession, row, "insert test_sessions")

    def insert_answers(self, records: Sequence[AnswerRecord]) -> None:
        """답안 레코드 전체를 한 번의 요청으로 저장."""
        self.client.insert_many(
            TEST_ANSWERS,
            [r.model_dump() for r in records],
        )

    def complete_test_session(
        self,
        session_id: str,
        completed_at: datetime,
        score: int,
        passed: bool,
    ) -> None:
        self.client.update(
            TEST_SESSIONS,
            {"id": eq(session_id)},
            {
                "completed_at": completed_at.isoformat(),
                "score": score,
                "passed": passed,
            },
        )

    def list_completed_sessions(self, user_id: str) -> List[CompletedSession]:
        """사용자의 완료된 세션 목록 (최근 완료 순)."""
        rows = self.client.select(
            TEST_SESSIONS,
            {"user_id": eq(user_id), "completed_at": is_not_null()},
            columns="*,assessments:assessment_id(title)",
            order="completed_at.desc",
        )
        sessions = []
        for row in rows:
            embedded = row.get("assessments") or {}
            row = {**row, "assessment_title": embedded.get("title", "")}
            sessions.append(_parse(CompletedSession, row, "select test_sessions"))
        return sessions


def _parse(model, row: dict, operation: str):
    """저장소 행을 모델로 변환. 스키마 불일치는 StoreError로 취급한다."""
    try:
        return model.model_validate(row)
    except ValidationError as e:
        logger.error(f"{operation}: 레코드 형식 오류 - {e}")
        raise StoreError(operation, f"invalid record: {e.error_count()} validation error(s)") from e
