"""
views/result_view.py — 시험 결과 화면

표시 내용:
  - 최종 점수 (0~100 정수, 대형 숫자)
  - 합격 / 불합격 배지
  - 통계 요약 (정답 수 / 전체)
  - 문제별 리뷰 (내 답, 정답, 해설)
  - 내 결과 기록 요약 (응시 횟수, 합격 수, 평균, 최고 점수)
"""

from __future__ import annotations

import logging

import streamlit as st

from assessment_cbt.models.view_model import ReviewItem
from assessment_cbt.services.errors import StoreError
from assessment_cbt.services.exam_service import summarize_results
from assessment_cbt.services.repository import AssessmentRepository
from assessment_cbt.services.test_controller import TestSessionController

logger = logging.getLogger(__name__)

_STATUS_ICONS = {"correct": "✅", "wrong": "❌", "skipped": "⏭️"}


def _stat_card(col, label: str, value: str, color: str) -> None:
    with col:
        st.markdown(
            f"<div style='text-align:center;'>"
            f"<p style='font-size:1.6rem; font-weight:700; color:{color}; margin:0;'>{value}</p>"
            f"<p style='font-size:0.8rem; color:#9ca3af;'>{label}</p></div>",
            unsafe_allow_html=True,
        )


def _render_review_item(item: ReviewItem) -> None:
    icon = _STATUS_ICONS[item.status]
    with st.expander(f"{icon} {item.number}. {item.question_text}"):
        if item.selected_option is None:
            st.markdown("**내 답:** 건너뜀")
        else:
            chosen = item.options[item.selected_option]
            st.markdown(f"**내 답:** {chosen.label}. {chosen.text}")
        if item.status != "correct":
            correct = item.options[item.correct_option_index]
            st.markdown(f"**정답:** {correct.label}. {correct.text}")
        if item.explanation:
            st.info(f"💡 {item.explanation}")


def _render_history(repository: AssessmentRepository, user_id: str) -> None:
    """내 결과 기록 요약. 조회 실패는 결과 화면을 막지 않는다."""
    try:
        sessions = repository.list_completed_sessions(user_id)
    except StoreError as e:
        logger.warning(f"결과 기록 조회 실패: {e}")
        return

    summary = summarize_results(sessions)
    st.markdown("#### 📊 내 결과 기록")
    h1, h2, h3, h4 = st.columns(4)
    _stat_card(h1, "응시", str(summary["total_tests"]), "#1a1a2e")
    _stat_card(h2, "합격", str(summary["passed_tests"]), "#10b981")
    _stat_card(h3, "평균", f"{summary['average_score']}%", "#4a7fcb")
    _stat_card(h4, "최고", f"{summary['highest_score']}%", "#f59e0b")
    distribution = summary["distribution"]
    st.bar_chart(
        {"점수 구간": list(distribution), "응시 횟수": list(distribution.values())},
        x="점수 구간",
        y="응시 횟수",
    )


def render(controller: TestSessionController) -> None:
    """결과 화면 렌더링."""
    view = controller.view()
    result = view.result

    # ── 중앙 3열 레이아웃 ──────────────────────────────────────────────────
    _, col, _ = st.columns([0.8, 2.5, 0.8])

    with col:
        st.markdown(f"### {view.title}")

        # 점수 대형 숫자
        score_color = "#10b981" if result.passed else "#ef4444"
        st.markdown(
            f'<p class="score-big" style="color:{score_color};">{result.score}%</p>',
            unsafe_allow_html=True,
        )

        # 합격/불합격 배지
        badge_class = "pass" if result.passed else "fail"
        badge_text = "합격 🎉" if result.passed else "불합격"
        st.markdown(
            f"<div style='text-align:center; margin-bottom:24px;'>"
            f"<span class='pass-badge {badge_class}'>{badge_text}</span></div>",
            unsafe_allow_html=True,
        )

        # ── 통계 3분할 ────────────────────────────────────────────────────
        skipped = sum(1 for item in result.review if item.status == "skipped")
        s1, s2, s3 = st.columns(3)
        _stat_card(s1, "정답", f"{result.correct_count} / {result.total}", "#10b981")
        _stat_card(s2, "합격 기준", f"{view.passing_score}%", "#4a7fcb")
        _stat_card(s3, "건너뜀", str(skipped), "#f59e0b")

        st.markdown('<hr class="cbt-divider">', unsafe_allow_html=True)

        # ── 문제별 리뷰 ──────────────────────────────────────────────────
        st.markdown("#### 📝 문제 리뷰")
        for item in result.review:
            _render_review_item(item)

        st.markdown('<hr class="cbt-divider">', unsafe_allow_html=True)
        _render_history(controller.repository, controller.user_id)
