"""
views/exam_view.py — 시험 풀기 화면

레이아웃:
  - st.sidebar : 타이머 + 문제 번호 네비게이터 + 최종 제출
  - 메인 영역  : 현재 문제 카드 + 이전/다음 + 마지막 문제에서 제출

상태 관리:
  - st.session_state.controller (TestSessionController)
  - 화면은 controller.view()만 읽고, 조작은 명령 메서드로만 한다.
"""

from __future__ import annotations

import streamlit as st

from assessment_cbt.models.session_state import AttemptPhase
from assessment_cbt.models.view_model import AttemptView
from assessment_cbt.services.errors import SubmissionError
from assessment_cbt.services.test_controller import TestSessionController
from assessment_cbt.views.components import question_card as qcard
from assessment_cbt.views.components import sidebar as nav
from assessment_cbt.views.components import timer as tmr


def _submit(controller: TestSessionController, confirmed: bool = False) -> None:
    """제출 명령. 실패 시 Submitting 상태로 남고 재시도 버튼이 표시된다."""
    try:
        controller.submit(confirmed=confirmed)
    except SubmissionError as e:
        st.toast(str(e), icon="❌")
    st.rerun()


def _render_confirmation(controller: TestSessionController, view: AttemptView) -> None:
    """미응답 문제가 남은 상태에서 제출 확인 다이얼로그."""
    st.warning(f"미응답 문제 {view.unanswered_count}개가 있습니다. 그래도 제출하시겠습니까?")
    col_yes, col_no = st.columns(2)
    with col_yes:
        if st.button("제출", key="confirm_yes", type="primary"):
            _submit(controller, confirmed=True)
    with col_no:
        if st.button("취소", key="confirm_no"):
            controller.cancel_submit()
            st.rerun()


def render_submitting(controller: TestSessionController) -> None:
    """저장 실패로 Submitting에 남은 경우: 오류 + 수동 재시도."""
    view = controller.view()
    st.error(view.error or "답안을 제출하는 중입니다.")
    if st.button("다시 제출", key="retry_submit", type="primary"):
        _submit(controller)


def render(controller: TestSessionController) -> None:
    """시험 화면 렌더링."""
    view = controller.view()
    if view.phase is not AttemptPhase.IN_PROGRESS:
        st.rerun()

    # ── 사이드바 ───────────────────────────────────────────────────────────
    with st.sidebar:
        st.markdown(f"### 📋 {view.title}")

        # 타이머
        tmr.render(controller)

        st.markdown('<hr class="cbt-divider">', unsafe_allow_html=True)

        # 문제 번호 네비게이터
        nav.render(controller, view)

        st.markdown('<hr class="cbt-divider">', unsafe_allow_html=True)

        if view.unanswered_count > 0:
            st.caption(f"⚠️ 미응답 문제: {view.unanswered_count}개")

        if st.button("최종 제출", key="submit_sidebar", type="primary"):
            _submit(controller)

        if view.confirmation_required:
            _render_confirmation(controller, view)

    # ── 문제 카드 ─────────────────────────────────────────────────────────
    st.progress(view.progress_percent / 100)
    qcard.render(controller, view.question, view.total)

    # ── 이전 / 다음 네비게이션 ────────────────────────────────────────────
    nav_left, nav_center, nav_right = st.columns([1, 2, 1])

    with nav_left:
        if st.button("← 이전 문제", key="prev_btn", disabled=not view.can_go_previous,
                     use_container_width=True):
            controller.previous()
            st.rerun()

    with nav_center:
        st.markdown(
            f"<p style='text-align:center; font-size:0.85rem; color:#9ca3af; "
            f"padding-top:8px;'>{view.current_index + 1} / {view.total}</p>",
            unsafe_allow_html=True,
        )

    with nav_right:
        if not view.is_last:
            if st.button("다음 문제 →", key="next_btn",
                         type="primary", use_container_width=True):
                controller.next()
                st.rerun()
        else:
            # 마지막 문제에서 제출 버튼
            if st.button("제출하기 →", key="submit_last",
                         type="primary", use_container_width=True):
                _submit(controller)
