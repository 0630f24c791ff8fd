"""
models/view_model.py

UI 레이어(Streamlit 화면, HTTP API)가 그대로 렌더링하는 읽기 전용 뷰 모델.
모든 컨트롤러 명령은 새 AttemptView를 반환한다.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel

from assessment_cbt.models.session_state import AttemptPhase

TimerLevel = Literal["normal", "warning", "critical"]
ReviewStatus = Literal["correct", "wrong", "skipped"]


class OptionView(BaseModel):
    index: int
    label: str          # A, B, C ... (위치 기반)
    text: str
    selected: bool = False


class QuestionView(BaseModel):
    id: str
    number: int         # 1-based 표시 번호
    question_text: str
    options: List[OptionView]
    selected_option: Optional[int] = None


class TimerView(BaseModel):
    remaining_seconds: int
    display: str        # MM:SS
    level: TimerLevel


class ReviewItem(BaseModel):
    number: int
    question_text: str
    options: List[OptionView]
    selected_option: Optional[int]
    correct_option_index: int
    status: ReviewStatus
    explanation: Optional[str] = None


class ResultView(BaseModel):
    score: int
    passed: bool
    correct_count: int
    total: int
    review: List[ReviewItem]


class AttemptView(BaseModel):
    phase: AttemptPhase
    assessment_id: Optional[str] = None
    title: str = ""
    total: int = 0
    passing_score: Optional[int] = None
    current_index: int = 0
    progress_percent: float = 0.0
    answered: List[bool] = []
    answered_count: int = 0
    unanswered_count: int = 0
    can_go_previous: bool = False
    is_last: bool = False
    question: Optional[QuestionView] = None
    timer: Optional[TimerView] = None
    confirmation_required: bool = False
    result: Optional[ResultView] = None
    error: Optional[str] = None
    redirect: Optional[str] = None
