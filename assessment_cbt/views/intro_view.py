"""
views/intro_view.py — 로그인 / 시험 안내 화면

기능:
  - 로그인하지 않은 경우 이메일/비밀번호 로그인 폼
  - 평가 제목, 문제 수, 제한 시간, 합격 기준 안내
  - "시험 시작" 버튼 (원격 세션 생성 성공 후에만 문제 화면으로 이동)
"""

from __future__ import annotations

import html

import streamlit as st

from config import SECONDS_PER_QUESTION
from assessment_cbt.services.errors import AuthError, SessionStartError, StoreError
from assessment_cbt.services.store import StoreClient
from assessment_cbt.services.test_controller import TestSessionController


def render_login(store: StoreClient) -> None:
    """로그인 폼. 성공하면 st.session_state.auth에 AuthSession을 저장한다."""
    _, col, _ = st.columns([1, 2, 1])

    with col:
        st.markdown('<div class="icon-circle">🔐</div>', unsafe_allow_html=True)
        st.markdown('<p class="cbt-title">로그인</p>', unsafe_allow_html=True)

        with st.form("login_form"):
            email = st.text_input("이메일")
            password = st.text_input("비밀번호", type="password")
            submitted = st.form_submit_button("로그인", type="primary")

        if submitted:
            if not email.strip() or not password:
                st.error("이메일과 비밀번호를 입력해 주세요.")
                return
            try:
                st.session_state.auth = store.sign_in(email.strip(), password)
            except AuthError:
                st.error("❌ 이메일 또는 비밀번호가 올바르지 않습니다.")
                return
            except StoreError:
                st.error("❌ 서버에 연결하지 못했습니다. 잠시 후 다시 시도해 주세요.")
                return
            st.rerun()


def _title_html(title: str) -> str:
    return f'<p class="cbt-title">{html.escape(title)}</p>'


def render(controller: TestSessionController) -> None:
    """시험 안내 화면 렌더링."""
    view = controller.view()
    minutes = view.total * SECONDS_PER_QUESTION // 60

    _, col, _ = st.columns([1, 2, 1])

    with col:
        st.markdown('<div class="icon-circle">📋</div>', unsafe_allow_html=True)
        st.markdown(_title_html(view.title), unsafe_allow_html=True)

        c1, c2, c3 = st.columns(3)
        c1.metric("문제 수", f"{view.total}문제")
        c2.metric("제한 시간", f"{minutes}분")
        c3.metric("합격 기준", f"{view.passing_score}%")

        if view.error:
            st.error(view.error)

        if st.button("시험 시작 →", key="start_exam", type="primary", use_container_width=True):
            try:
                controller.start()
            except SessionStartError as e:
                st.toast(str(e), icon="❌")
            st.rerun()
