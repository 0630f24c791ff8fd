"""
views/components/question_card.py

현재 문제(QuestionView)를 카드 형태로 렌더링하고
보기 클릭을 컨트롤러의 select_option 명령으로 전달하는 컴포넌트.
"""

from __future__ import annotations

import html

import streamlit as st

from assessment_cbt.models.view_model import QuestionView
from assessment_cbt.services.test_controller import TestSessionController


def _question_html(question: QuestionView) -> str:
    """문제 본문 카드 HTML. 저장소 텍스트는 이스케이프한다."""
    return f"""
        <div class="question-card">
            <p style="font-size:1.05rem; font-weight:600; color:#1a1a2e;
                      line-height:1.7; margin:0;">
                {html.escape(question.question_text)}
            </p>
        </div>
        """


def render(
    controller: TestSessionController,
    question: QuestionView,
    total: int,
) -> None:
    """
    문제 카드를 렌더링한다.

    Args:
        controller: 선택을 전달할 응시 컨트롤러
        question:   렌더링할 문제 뷰 (보기는 저장 순서, 라벨 A/B/C...)
        total:      전체 문제 수
    """

    # ── 문제 헤더 ──────────────────────────────────────────────────────────
    st.markdown(
        f"""
        <div style="display:flex; align-items:center; gap:10px; margin-bottom:12px;">
            <span class="question-number-badge">문제 {question.number} / {total}</span>
        </div>
        """,
        unsafe_allow_html=True,
    )

    # ── 문제 본문 ──────────────────────────────────────────────────────────
    st.markdown(_question_html(question), unsafe_allow_html=True)

    # ── 보기 버튼 ─────────────────────────────────────────────────────────
    for option in question.options:
        if st.button(
            f"{option.label}. {option.text}",
            key=f"option_{question.id}_{option.index}",
            type="primary" if option.selected else "secondary",
            use_container_width=True,
        ):
            controller.select_option(option.index)
            st.rerun()
