"""
models/assessment_model.py

원격 저장소의 평가(assessments) / 응시 세션(test_sessions) / 답안(test_answers)
레코드 모델. 컨트롤러는 요청 범위의 복사본만 들고 있으며, 원본은 저장소가 소유한다.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from config import DEFAULT_PASSING_SCORE

# 선택하지 않은 문제의 selected_option 값
SKIPPED = -1


class Assessment(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    title: str
    description: Optional[str] = None
    year: Optional[int] = None
    status: Literal["draft", "published"] = "draft"
    passing_score: int = Field(
        default=DEFAULT_PASSING_SCORE,
        ge=0,
        le=100,
        description="합격 기준 점수 (정수 %)",
    )


class TestSession(BaseModel):
    """
    응시 1회를 나타내는 세션 레코드.

    시작 시 한 번 생성되고, 제출 시 한 번만 완료 필드(completed_at, score, passed)가 갱신된다.
    """
    model_config = ConfigDict(extra="ignore")

    id: str
    user_id: str
    assessment_id: str
    started_at: datetime
    completed_at: Optional[datetime] = None
    score: Optional[int] = Field(default=None, ge=0, le=100)
    passed: Optional[bool] = None

    # pytest가 Test* 클래스로 수집하지 않도록
    __test__ = False


class AnswerRecord(BaseModel):
    """문제별 답안 레코드. 제출 시 일괄 insert 되며 이후 수정되지 않는다."""
    model_config = ConfigDict(extra="ignore")

    session_id: str
    question_id: str
    selected_option: int = Field(..., ge=SKIPPED)
    is_correct: bool


class CompletedSession(BaseModel):
    """결과 조회용: 완료된 세션 + 평가 제목."""
    model_config = ConfigDict(extra="ignore")

    id: str
    assessment_id: str
    assessment_title: str = ""
    completed_at: datetime
    score: int = 0
    passed: bool = False
