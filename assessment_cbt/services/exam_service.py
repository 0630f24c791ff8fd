"""
services/exam_service.py

시험 채점 및 결과 분석 비즈니스 로직.
순수 Python 함수로 구성 — UI 코드, 원격 호출, 전역 상태 변경 없음.
"""

from typing import Dict, List, Mapping, Optional, Sequence

from assessment_cbt.models.assessment_model import SKIPPED, AnswerRecord, CompletedSession
from assessment_cbt.models.question_model import Question
from assessment_cbt.models.view_model import OptionView, ReviewItem

# 결과 화면 점수 분포 구간 (상위 구간부터)
SCORE_BUCKETS = (
    ("90-100", 90),
    ("80-89", 80),
    ("70-79", 70),
    ("60-69", 60),
    ("0-59", 0),
)


def selected_option(question: Question, answers: Mapping[str, int]) -> int:
    """기록된 선택 인덱스. 선택하지 않은 문제는 SKIPPED(-1)."""
    return answers.get(question.id, SKIPPED)


def is_correct(question: Question, answers: Mapping[str, int]) -> bool:
    # SKIPPED는 어떤 유효한 정답 인덱스와도 같을 수 없다
    return selected_option(question, answers) == question.correct_option_index


def count_correct(questions: Sequence[Question], answers: Mapping[str, int]) -> int:
    return sum(1 for q in questions if is_correct(q, answers))


def calculate_score(
    questions: Sequence[Question],
    answers: Mapping[str, int],
) -> int:
    """
    사용자 답안을 채점하여 100점 만점 정수 점수를 반환한다.

    score = round(100 × 정답 수 / 문제 수), .5는 올림.
    응답하지 않은 문제(키 없음)는 오답으로 처리.

    Args:
        questions: 채점 대상 Question 리스트.
        answers:   사용자 답안지. {question.id: 선택한 보기 인덱스}

    Returns:
        0 ~ 100 범위의 정수 점수. questions가 빈 리스트이면 0.
    """
    total = len(questions)
    if not total:
        return 0

    correct = count_correct(questions, answers)
    # 부동소수점 없이 반올림: floor(100c/n + 1/2)
    return (200 * correct + total) // (2 * total)


def is_passed(score: int, passing_score: int) -> bool:
    """
    합격 여부를 반환한다.

    Returns:
        score >= passing_score 이면 True, 아니면 False.
    """
    return score >= passing_score


def build_answer_records(
    session_id: str,
    questions: Sequence[Question],
    answers: Mapping[str, int],
) -> List[AnswerRecord]:
    """모든 문제에 대해 한 건씩 답안 레코드를 만든다 (출제 순서 유지)."""
    return [
        AnswerRecord(
            session_id=session_id,
            question_id=q.id,
            selected_option=selected_option(q, answers),
            is_correct=is_correct(q, answers),
        )
        for q in questions
    ]


def option_views(question: Question, selected: Optional[int] = None) -> List[OptionView]:
    return [
        OptionView(
            index=i,
            label=question.option_label(i),
            text=text,
            selected=(i == selected),
        )
        for i, text in enumerate(question.options)
    ]


def build_review(
    questions: Sequence[Question],
    answers: Mapping[str, int],
) -> List[ReviewItem]:
    """
    결과 화면의 문제별 리뷰 목록 (오답 노트 포함 전체 문제).

    상태 판정:
    - skipped: 선택하지 않은 문제
    - correct: 선택 == 정답 인덱스
    - wrong:   그 외
    """
    review: List[ReviewItem] = []

    for number, q in enumerate(questions, start=1):
        chosen = answers.get(q.id)
        if chosen is None:
            status = "skipped"
        elif chosen == q.correct_option_index:
            status = "correct"
        else:
            status = "wrong"
        review.append(
            ReviewItem(
                number=number,
                question_text=q.question_text,
                options=option_views(q, chosen),
                selected_option=chosen,
                correct_option_index=q.correct_option_index,
                status=status,
                explanation=q.explanation,
            )
        )

    return review


def score_distribution(scores: Sequence[int]) -> Dict[str, int]:
    """점수 구간별 응시 횟수. 구간 순서는 SCORE_BUCKETS를 따른다."""
    buckets = {label: 0 for label, _ in SCORE_BUCKETS}
    for score in scores:
        for label, floor in SCORE_BUCKETS:
            if score >= floor:
                buckets[label] += 1
                break
    return buckets


def summarize_results(sessions: Sequence[CompletedSession]) -> Dict[str, object]:
    """
    내 결과 페이지 요약 통계.

    Returns:
        {"total_tests": int, "passed_tests": int, "average_score": int,
         "highest_score": int, "distribution": {구간: 횟수}}
        세션이 없으면 평균/최고 점수는 0.
    """
    scores = [s.score for s in sessions]
    total = len(scores)
    average = (2 * sum(scores) + total) // (2 * total) if total else 0

    return {
        "total_tests": total,
        "passed_tests": sum(1 for s in sessions if s.passed),
        "average_score": average,
        "highest_score": max(scores) if scores else 0,
        "distribution": score_distribution(scores),
    }
