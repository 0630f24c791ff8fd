"""
models/session_state.py

응시 1회의 진행 상태를 담는 OMR 카드 모델.
Pydantic BaseModel 기반 — 컨트롤러 하나가 하나의 AttemptState만 소유한다.
UI 코드 없음. 모듈 전역 상태 없음.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from assessment_cbt.models.assessment_model import Assessment, TestSession
from assessment_cbt.models.question_model import Question


class AttemptPhase(str, Enum):
    LOADING = "loading"
    INTRO = "intro"
    IN_PROGRESS = "in_progress"
    SUBMITTING = "submitting"
    RESULT = "result"
    FAILED = "failed"       # 로드 실패 — 종료 상태, 안전한 페이지로 이동


class GradeOutcome(BaseModel):
    """채점 결과. Submitting 진입 시 한 번 계산되어 재시도 시 그대로 재사용된다."""

    correct_count: int
    total: int
    score: int
    passed: bool
    completed_at: datetime


class AttemptState(BaseModel):
    """
    사용자의 응시 1회 전체 상태를 표현하는 모델.

    Attributes:
        phase:              현재 상태 머신 단계.
        assessment:         로드된 평가 (Loading 이후).
        questions:          출제 순서대로 정렬된 활성 문제 목록.
        session:            start() 성공 시 생성된 원격 세션 레코드.
        current_index:      현재 문제 포인터 (0-based).
        answers:            답안지. {question.id: 선택한 보기 인덱스}
        remaining_seconds:  남은 시간 (초).
        outcome:            채점 결과 (Submitting 이후).
        answers_saved:      이번 응시에서 답안 일괄 저장이 이미 성공했는지 여부.
        last_error:         사용자에게 보여줄 마지막 오류 메시지.
    """

    phase: AttemptPhase = AttemptPhase.LOADING
    assessment: Optional[Assessment] = None
    questions: List[Question] = Field(default_factory=list)
    session: Optional[TestSession] = None
    current_index: int = Field(default=0, ge=0)
    answers: Dict[str, int] = Field(default_factory=dict)
    remaining_seconds: int = Field(default=0, ge=0)
    outcome: Optional[GradeOutcome] = None
    answers_saved: bool = False
    last_error: Optional[str] = None

    @property
    def total(self) -> int:
        return len(self.questions)

    @property
    def unanswered_count(self) -> int:
        return sum(1 for q in self.questions if q.id not in self.answers)
